"""Numbered save slots on disk, one directory per story."""
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

from storyloom.presentation.cli import config
from storyloom.services.errors import SaveLoadError


@dataclass(slots=True)
class SlotSummary:
    """What the slot menu shows without rehydrating the save."""

    slot: int
    exists: bool
    saved_at: str | None = None
    preview: str = ""
    is_corrupt: bool = False


class SaveSlotStore:
    """Reads and writes serialized playthroughs as ``<story_id>/slot_<n>.json``."""

    def __init__(
        self,
        base_dir: Path | str | None = None,
        slot_count: int = 3,
        story_id: str = "default",
    ) -> None:
        root = Path(base_dir) if base_dir is not None else config.get_save_dir()
        self._story_dir = root / story_id
        self._slot_count = slot_count

    def list_slots(self) -> List[SlotSummary]:
        summaries: List[SlotSummary] = []
        for slot in range(1, self._slot_count + 1):
            if not self._slot_path(slot).exists():
                summaries.append(SlotSummary(slot=slot, exists=False))
                continue
            try:
                payload = self.read_slot(slot)
            except SaveLoadError:
                summaries.append(SlotSummary(slot=slot, exists=True, is_corrupt=True))
                continue
            metadata = payload.get("metadata")
            if not isinstance(metadata, dict):
                summaries.append(SlotSummary(slot=slot, exists=True, is_corrupt=True))
                continue
            summaries.append(
                SlotSummary(
                    slot=slot,
                    exists=True,
                    saved_at=str(metadata.get("saved_at") or "") or None,
                    preview=str(metadata.get("preview") or ""),
                )
            )
        return summaries

    def slot_exists(self, slot: int) -> bool:
        self._validate_slot(slot)
        return self._slot_path(slot).exists()

    def read_slot(self, slot: int) -> Dict[str, Any]:
        """Return the raw payload; unreadable or non-object files raise SaveLoadError."""
        self._validate_slot(slot)
        path = self._slot_path(slot)
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise SaveLoadError(f"Save slot {slot} is unreadable: {exc}") from exc
        if not isinstance(payload, dict):
            raise SaveLoadError(f"Save slot {slot} does not hold a save object.")
        return payload

    def write_slot(self, slot: int, payload: Dict[str, Any]) -> None:
        """Write through a temp file so an interrupted save keeps the previous one."""
        self._validate_slot(slot)
        self._story_dir.mkdir(parents=True, exist_ok=True)
        path = self._slot_path(slot)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
        tmp_path.replace(path)

    def delete_slot(self, slot: int) -> None:
        self._validate_slot(slot)
        self._slot_path(slot).unlink(missing_ok=True)

    def _slot_path(self, slot: int) -> Path:
        return self._story_dir / f"slot_{slot}.json"

    def _validate_slot(self, slot: int) -> None:
        if not 1 <= slot <= self._slot_count:
            raise ValueError(f"Slot must be between 1 and {self._slot_count}.")
