"""Per-story game configuration loaded from ``<story_id>.config.json``."""
from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Dict, Tuple

from loguru import logger

from storyloom.data import paths
from storyloom.data.errors import DataLoadError
from storyloom.data.json_loader import load_json

GameConfig = Dict[str, Any]

DEFAULT_CONFIG: GameConfig = {
    "title": "Storyloom Game",
    "version": "0.1.0",
    "hubs": [],
    "pagination_tags": ["next", "page"],
    "minigame_prefix": "minigame:",
    "max_steps_per_call": None,
}

_config_cache: Dict[Tuple[str, str], GameConfig] = {}


def load_game_config(story_id: str | None, base_path: Path | str | None = None) -> GameConfig:
    """Return the story's config merged over the defaults.

    A missing or unreadable file yields the defaults; nothing is raised.
    Every call returns a fresh copy, so callers may mutate the result.
    """
    if not story_id:
        return copy.deepcopy(DEFAULT_CONFIG)
    config_path = paths.get_config_path(story_id, base_path)
    cache_key = (story_id, str(config_path.resolve()))
    if cache_key in _config_cache:
        return copy.deepcopy(_config_cache[cache_key])

    try:
        raw = load_json(config_path)
    except DataLoadError as exc:
        logger.warning("No usable config for '{}', using defaults: {}", story_id, exc)
        return copy.deepcopy(DEFAULT_CONFIG)
    if not isinstance(raw, dict):
        logger.warning("Config for '{}' is not an object, using defaults", story_id)
        return copy.deepcopy(DEFAULT_CONFIG)

    config = {**copy.deepcopy(DEFAULT_CONFIG), **raw}
    _config_cache[cache_key] = config
    logger.info("Loaded config for '{}' v{}", story_id, config.get("version"))
    return copy.deepcopy(config)


def clear_config_cache() -> None:
    """Forget every cached config (used after editing config files)."""
    _config_cache.clear()
