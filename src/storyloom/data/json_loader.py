"""JSON helpers shared by the story repositories and the simulator."""
from __future__ import annotations

import json
from pathlib import Path

from .errors import DataLoadError


def parse_json(text: str | bytes, source: str = "<string>") -> object:
    """Decode a JSON document, raising DataLoadError with its source on failure."""
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise DataLoadError(f"Invalid JSON in {source}: {exc}") from exc


def load_json(path: Path) -> object:
    """Read a story or config document from disk."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise DataLoadError(f"Story file not found: {path}") from exc
    except OSError as exc:
        raise DataLoadError(f"Unable to read story file: {path}") from exc
    return parse_json(text, str(path))
