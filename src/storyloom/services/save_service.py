"""Serialization helpers for manual save/load."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping

from loguru import logger

from storyloom.domain.state import SaveGame
from storyloom.services.errors import SaveLoadError

SavePayload = Dict[str, Any]


class SaveService:
    """Converts a session's save data to/from a validated, versioned payload.

    The interpreter snapshot, the display text and the burned ids always
    travel together; restoring one without the others would let choice
    gating drift from the narrative state.
    """

    SAVE_VERSION = 1

    def serialize(self, save: SaveGame, *, story_id: str = "") -> SavePayload:
        """Return a JSON-serializable payload for disk persistence."""
        return {
            "save_version": self.SAVE_VERSION,
            "metadata": {
                "story_id": story_id,
                "preview": save.text[:80],
                "saved_at": datetime.now(timezone.utc).isoformat(),
            },
            "state": {
                "snapshot": save.state,
                "text": save.text,
                "burned": list(save.burned),
            },
        }

    def deserialize(self, payload: Mapping[str, Any]) -> SaveGame:
        """Rehydrate save data; only a wrong version or missing sections are fatal."""
        if not isinstance(payload, Mapping):
            raise SaveLoadError("Save data must be a JSON object.")
        if payload.get("save_version") != self.SAVE_VERSION:
            raise SaveLoadError("Save format changed. Please start a new game.")
        state_payload = payload.get("state")
        if not isinstance(state_payload, Mapping):
            raise SaveLoadError("Save data is missing required sections.")

        snapshot = state_payload.get("snapshot")
        if snapshot is not None and not isinstance(snapshot, str):
            logger.warning("Dropping non-string story snapshot from save")
            snapshot = None
        text = state_payload.get("text")
        # Display text is only meaningful alongside the snapshot it was taken with.
        if not isinstance(text, str) or snapshot is None:
            text = ""
        return SaveGame(state=snapshot, text=text, burned=self._coerce_burned(state_payload.get("burned")))

    @staticmethod
    def _coerce_burned(value: object) -> List[str]:
        if not isinstance(value, list):
            if value is not None:
                logger.warning("Ignoring malformed burned list in save")
            return []
        return [item for item in value if isinstance(item, str)]
