"""Best-effort access to an interpreter's global variable store."""
from __future__ import annotations

from typing import Any

from loguru import logger

from storyloom.services.interpreter import StoryInterpreter


class VariableBridge:
    """Reads and writes story globals without ever raising.

    Lets callers inject stat or inventory values speculatively: a variable the
    loaded story does not declare reads as ``None`` and writes are dropped.
    """

    def __init__(self, interpreter: StoryInterpreter | None = None) -> None:
        self._interpreter = interpreter

    def attach(self, interpreter: StoryInterpreter | None) -> None:
        self._interpreter = interpreter

    def get(self, name: str) -> Any:
        if self._interpreter is None:
            return None
        try:
            return self._interpreter.get_variable(name)
        except Exception as exc:
            logger.warning("Could not get variable '{}': {}", name, exc)
            return None

    def set(self, name: str, value: Any) -> None:
        if self._interpreter is None:
            return
        try:
            self._interpreter.set_variable(name, value)
        except Exception as exc:
            logger.warning("Could not set variable '{}': {}", name, exc)
