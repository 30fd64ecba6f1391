"""Tracks narrative branches invalidated by earlier hub choices."""
from __future__ import annotations

from typing import List

from loguru import logger

from storyloom.domain.hub_registry import HubRegistry


class BurnStateTracker:
    """Monotonically growing set of burned branch ids for one playthrough.

    Every operation is total: unknown hubs, unknown targets and malformed
    saved lists degrade to no-ops so a bad save can never block a resume.
    """

    def __init__(self, registry: HubRegistry | None = None) -> None:
        self._registry = registry or HubRegistry()
        # Insertion-ordered so exports are stable.
        self._burned: dict[str, None] = {}

    @property
    def registry(self) -> HubRegistry:
        return self._registry

    def is_burned(self, branch_id: str) -> bool:
        return branch_id in self._burned

    def handle_choice(self, hub_id: str, target_id: str) -> List[str]:
        """Burn everything the hub's rule for ``target_id`` names.

        Returns the ids that were newly burned by this call.
        """
        newly_burned: List[str] = []
        for branch_id in self._registry.lookup(hub_id, target_id):
            if branch_id not in self._burned:
                self._burned[branch_id] = None
                newly_burned.append(branch_id)
        if newly_burned:
            logger.debug(
                "Choice '{}' from hub '{}' burned: {}", target_id, hub_id, ", ".join(newly_burned)
            )
        return newly_burned

    def reset(self) -> None:
        self._burned.clear()

    def load(self, ids: object) -> bool:
        """Replace the burned set from a saved list; anything else is ignored."""
        if not isinstance(ids, list):
            logger.warning("Ignoring saved burn state of type {}", type(ids).__name__)
            return False
        self._burned = {branch_id: None for branch_id in ids if isinstance(branch_id, str)}
        return True

    def export(self) -> List[str]:
        return list(self._burned)

    def __len__(self) -> int:
        return len(self._burned)
