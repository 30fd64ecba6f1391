"""Tag shapes recognized by the runtime itself."""
from __future__ import annotations

from typing import Iterable

PAGINATION_TAGS = frozenset({"next", "page"})
MINIGAME_PREFIX = "minigame:"
HUB_PREFIX = "hub:"
ACHIEVEMENT_PREFIX = "achievement:unlock:"
INPUT_PREFIX = "input:"


def normalize_tag(tag: str) -> str:
    return tag.strip().lower()


def is_pagination_tag(tag: str, pagination_tags: Iterable[str] = PAGINATION_TAGS) -> bool:
    """Return True for an exact (case-insensitive, trimmed) pagination marker."""
    return normalize_tag(tag) in {normalize_tag(value) for value in pagination_tags}


def is_minigame_tag(tag: str, prefix: str = MINIGAME_PREFIX) -> bool:
    return normalize_tag(tag).startswith(prefix.lower())


def is_soft_break(
    tags: Iterable[str],
    *,
    pagination_tags: Iterable[str] = PAGINATION_TAGS,
    minigame_prefix: str = MINIGAME_PREFIX,
) -> bool:
    """Return True when a step's tags ask the stepping loop to pause."""
    pagination = frozenset(pagination_tags)
    return any(
        is_pagination_tag(tag, pagination) or is_minigame_tag(tag, minigame_prefix) for tag in tags
    )


def hub_id_from_tag(tag: str) -> str | None:
    """Return the hub id carried by a ``hub:<id>`` tag, if any."""
    stripped = tag.strip()
    if not stripped.lower().startswith(HUB_PREFIX):
        return None
    hub_id = stripped[len(HUB_PREFIX):].strip()
    return hub_id or None
