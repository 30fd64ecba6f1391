"""Minigame lifecycle: idle -> pending -> playing -> idle."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict

from loguru import logger

from storyloom.core.tags import MINIGAME_PREFIX
from storyloom.core.types import MinigameState

VariableResolver = Callable[[str], Any]
ResultCallback = Callable[[int], None]

_PLACEHOLDER = re.compile(r"\{([^}]+)\}")


@dataclass(slots=True)
class MinigameConfig:
    """Parsed ``minigame:`` tag."""

    type: str
    params: Dict[str, Any] = field(default_factory=dict)
    auto_start: bool = True


class MinigameController:
    """Holds at most one queued or running minigame for a session."""

    def __init__(self, on_result: ResultCallback | None = None) -> None:
        self._on_result = on_result
        self.state: MinigameState = "idle"
        self.config: MinigameConfig | None = None
        self.last_result: int | None = None

    @property
    def is_pending(self) -> bool:
        return self.state == "pending"

    @property
    def is_playing(self) -> bool:
        return self.state == "playing"

    def queue(self, config: MinigameConfig) -> None:
        logger.debug("Queuing minigame '{}'", config.type)
        self.config = config
        self.state = "pending"

    def start(self) -> bool:
        if self.state != "pending":
            logger.warning("Cannot start minigame while {}", self.state)
            return False
        logger.debug("Starting minigame '{}'", self.config.type if self.config else None)
        self.state = "playing"
        return True

    def finish(self, result: bool | int) -> int:
        """Commit a win (``True``/``1``) or loss (anything else) and return to idle."""
        numeric_result = 1 if result is True or result == 1 else 0
        logger.debug("Finishing minigame with result {}", numeric_result)
        self.last_result = numeric_result
        self.state = "idle"
        self.config = None
        if self._on_result is not None:
            self._on_result(numeric_result)
        return numeric_result

    def cancel(self) -> None:
        logger.debug("Minigame cancelled")
        self.state = "idle"
        self.config = None

    def reset(self) -> None:
        self.state = "idle"
        self.config = None
        self.last_result = None


def parse_minigame_tag(tag: str, resolve: VariableResolver | None = None) -> MinigameConfig | None:
    """Parse either tag form into a config.

    ``minigame: type=lockpick, speed={agility}, autostart=false`` is the
    key/value form; ``minigame:qte:SPACE:1.5`` is the legacy colon form.
    """
    if not tag or not tag.strip().lower().startswith(MINIGAME_PREFIX):
        return None
    content = tag.strip()[len(MINIGAME_PREFIX):].strip()
    if "=" in content:
        return _parse_key_values(content, resolve)
    return _parse_legacy(content)


def _parse_key_values(content: str, resolve: VariableResolver | None) -> MinigameConfig | None:
    game_type: str | None = None
    auto_start = True
    params: Dict[str, Any] = {}
    for pair in content.split(","):
        key, _, raw_value = pair.partition("=")
        key = key.strip()
        value = _resolve_placeholders(raw_value.strip(), resolve)
        if not key:
            continue
        if key == "type":
            game_type = value.lower()
        elif key == "autostart":
            auto_start = value.lower() == "true"
        elif key in ("onFail", "onSuccess"):
            params[key] = value
        elif key == "consume":
            params["consume_item"] = value
        else:
            params[key] = _maybe_number(value)
    if not game_type:
        return None
    return MinigameConfig(type=game_type, params=params, auto_start=auto_start)


def _parse_legacy(content: str) -> MinigameConfig | None:
    parts = [part.strip() for part in content.split(":")]
    game_type = parts[0].lower() if parts else ""
    if not game_type:
        return None
    params: Dict[str, Any] = {}
    if game_type == "qte":
        params["key"] = _part(parts, 1) or "SPACE"
        params["timeout"] = _float_or(_part(parts, 2), 2.0)
    elif game_type == "lockpick":
        params["zone_size"] = _float_or(_part(parts, 1), 0.15)
        params["speed"] = _float_or(_part(parts, 2), 1.5)
    return MinigameConfig(type=game_type, params=params)


def _resolve_placeholders(value: str, resolve: VariableResolver | None) -> str:
    if resolve is None:
        return value

    def _replace(match: re.Match[str]) -> str:
        resolved = resolve(match.group(1).strip())
        return match.group(0) if resolved is None else str(resolved)

    return _PLACEHOLDER.sub(_replace, value)


def _part(parts: list[str], index: int) -> str:
    return parts[index] if index < len(parts) else ""


def _float_or(value: str, default: float) -> float:
    try:
        return float(value)
    except ValueError:
        return default


def _maybe_number(value: str) -> Any:
    try:
        return float(value)
    except ValueError:
        return value
