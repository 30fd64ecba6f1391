"""Interface the step engine requires from a story interpreter."""
from __future__ import annotations

from typing import Any, Callable, List, Protocol, runtime_checkable

from storyloom.domain.state import Choice


@runtime_checkable
class StoryInterpreter(Protocol):
    """Anything that can execute a compiled story one low-level step at a time.

    ``choose`` raises ``IndexError`` for an index outside ``current_choices``.
    ``get_variable``/``set_variable`` may raise for names the story does not
    declare; callers go through :class:`VariableBridge` for best-effort access.
    """

    @property
    def can_continue(self) -> bool: ...

    @property
    def current_tags(self) -> List[str]: ...

    @property
    def current_choices(self) -> List[Choice]: ...

    def continue_step(self) -> str: ...

    def choose(self, index: int) -> None: ...

    def state_snapshot(self) -> str: ...

    def load_snapshot(self, snapshot: str) -> None:
        """Restore state; any exception marks the snapshot as unusable."""

    def get_variable(self, name: str) -> Any: ...

    def set_variable(self, name: str, value: Any) -> None: ...


InterpreterFactory = Callable[[object], StoryInterpreter]
