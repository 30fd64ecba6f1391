"""Routes step tags to the collaborators that consume them."""
from __future__ import annotations

from typing import Callable, Iterable

from loguru import logger

from storyloom.core.tags import ACHIEVEMENT_PREFIX, INPUT_PREFIX, hub_id_from_tag
from storyloom.services.minigame_controller import (
    MinigameController,
    VariableResolver,
    parse_minigame_tag,
)

TagSink = Callable[[str], None]
InputSink = Callable[[str, str], None]

DEFAULT_INPUT_PLACEHOLDER = "Enter a name..."


class TagDispatcher:
    """Sends each tag to exactly one consumer; unrecognized tags go to ``on_effect``."""

    def __init__(
        self,
        minigames: MinigameController,
        *,
        resolve_variable: VariableResolver | None = None,
        on_hub: TagSink | None = None,
        on_achievement: TagSink | None = None,
        on_input: InputSink | None = None,
        on_effect: TagSink | None = None,
    ) -> None:
        self._minigames = minigames
        self._resolve_variable = resolve_variable
        self._on_hub = on_hub
        self._on_achievement = on_achievement
        self._on_input = on_input
        self._on_effect = on_effect

    def dispatch(self, tags: Iterable[str]) -> None:
        for raw_tag in tags:
            tag = raw_tag.strip()
            if tag:
                self._dispatch_one(tag)

    def _dispatch_one(self, tag: str) -> None:
        lowered = tag.lower()
        minigame = parse_minigame_tag(tag, self._resolve_variable)
        if minigame is not None:
            self._minigames.queue(minigame)
            return

        hub_id = hub_id_from_tag(tag)
        if hub_id is not None:
            if self._on_hub is not None:
                self._on_hub(hub_id)
            return

        if lowered.startswith(ACHIEVEMENT_PREFIX):
            achievement_id = tag[len(ACHIEVEMENT_PREFIX):].strip()
            logger.debug("Achievement unlock: {}", achievement_id)
            if self._on_achievement is not None and achievement_id:
                self._on_achievement(achievement_id)
            return

        if lowered.startswith(INPUT_PREFIX):
            parts = tag.split(":")
            var_name = parts[1].strip() if len(parts) > 1 else ""
            placeholder = parts[2].strip() if len(parts) > 2 and parts[2].strip() else DEFAULT_INPUT_PLACEHOLDER
            logger.debug("Input requested for '{}'", var_name)
            if self._on_input is not None and var_name:
                self._on_input(var_name, placeholder)
            return

        if self._on_effect is not None:
            self._on_effect(tag)
