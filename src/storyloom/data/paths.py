"""Helpers for resolving data file locations."""
from __future__ import annotations

from pathlib import Path


def get_repo_root() -> Path:
    """Return the repository root."""
    return Path(__file__).resolve().parents[3]


def get_stories_path(base_path: Path | str | None = None) -> Path:
    """Return the directory containing story graphs and their config files."""
    if base_path is not None:
        return Path(base_path)
    return get_repo_root() / "data" / "stories"


def get_config_path(story_id: str, base_path: Path | str | None = None) -> Path:
    """Return the ``<story_id>.config.json`` path for a story."""
    return get_stories_path(base_path) / f"{story_id}.config.json"
