"""Narrative step engine: turns one-step-at-a-time interpreters into paced batches."""
from __future__ import annotations

from typing import Any, Iterable, List

from loguru import logger

from storyloom.core.tags import MINIGAME_PREFIX, PAGINATION_TAGS, is_soft_break
from storyloom.core.types import EngineMode, HistoryType
from storyloom.domain.state import Choice, HistoryEntry, StepResult, StoryView
from storyloom.services.errors import EngineNotInitializedError
from storyloom.services.interpreter import InterpreterFactory, StoryInterpreter
from storyloom.services.variable_bridge import VariableBridge

FRAGMENT_SEPARATOR = "\n\n"
CHOICE_ECHO_PREFIX = "> "


def _default_factory(compiled_data: object) -> StoryInterpreter:
    from storyloom.services.graph_simulator import StorySimulator

    return StorySimulator.from_document(compiled_data)


class NarrativeStepEngine:
    """Drives one interpreter for one playthrough.

    Each ``continue_story``/``make_choice`` call steps the interpreter until it
    runs out of content or a step carries a pagination or minigame tag, then
    publishes the joined text, the aggregated tags and the current choices.
    """

    def __init__(
        self,
        interpreter_factory: InterpreterFactory | None = None,
        *,
        pagination_tags: Iterable[str] = PAGINATION_TAGS,
        minigame_prefix: str = MINIGAME_PREFIX,
        max_steps: int | None = None,
    ) -> None:
        self._factory = interpreter_factory or _default_factory
        self._pagination_tags = frozenset(pagination_tags)
        self._minigame_prefix = minigame_prefix
        self._max_steps = max_steps if max_steps and max_steps > 0 else None
        self._interpreter: StoryInterpreter | None = None
        self._variables = VariableBridge()
        self._view = StoryView()
        self._history: List[HistoryEntry] = []

    @property
    def interpreter(self) -> StoryInterpreter | None:
        return self._interpreter

    @property
    def view(self) -> StoryView:
        return self._view

    @property
    def history(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._history)

    @property
    def mode(self) -> EngineMode:
        if self._interpreter is None:
            return "idle"
        if self._view.is_ended:
            return "ended"
        return "ready"

    def init_story(
        self,
        compiled_data: object,
        saved_snapshot: str | None = None,
        saved_text: str = "",
    ) -> bool:
        """Load a story, optionally resuming from a snapshot.

        ``saved_text`` is republished verbatim instead of stepping, so resuming
        does not replay the narrative's side effects. Returns True when a
        snapshot was given and applied.
        """
        interpreter = self._factory(compiled_data)
        restored = True
        if saved_snapshot:
            try:
                interpreter.load_snapshot(saved_snapshot)
            except Exception as exc:
                logger.warning("Discarding unreadable story snapshot, starting fresh: {!r}", exc)
                restored = False

        self._interpreter = interpreter
        self._variables.attach(interpreter)
        self._history = []

        if saved_text and restored:
            self._publish(saved_text, [])
            self._append_history(saved_text, "text")
            return bool(saved_snapshot)
        self._view = StoryView(
            choices=list(interpreter.current_choices),
            can_continue=interpreter.can_continue,
            is_ended=False,
        )
        return bool(saved_snapshot) and restored

    def continue_story(self) -> StepResult:
        """Step until a stop condition and publish the result."""
        interpreter = self._require_interpreter()
        return self._step_until_pause(interpreter)

    def make_choice(self, index: int) -> StepResult:
        """Commit a choice, echo it into history, then step like ``continue_story``.

        An out-of-range index is not masked: the interpreter's ``IndexError``
        propagates.
        """
        interpreter = self._require_interpreter()
        choices = interpreter.current_choices
        choice_text = choices[index].text if 0 <= index < len(choices) else ""
        interpreter.choose(index)
        if choice_text:
            self._append_history(f"{CHOICE_ECHO_PREFIX}{choice_text}", "choice")
        return self._step_until_pause(interpreter)

    def set_global_variable(self, name: str, value: Any) -> None:
        self._variables.set(name, value)

    def get_global_variable(self, name: str) -> Any:
        return self._variables.get(name)

    def state_snapshot(self) -> str:
        return self._require_interpreter().state_snapshot()

    def reset_story_state(self) -> None:
        """Return to idle, discarding the interpreter, published state and history."""
        self._interpreter = None
        self._variables.attach(None)
        self._view = StoryView()
        self._history = []

    def _step_until_pause(self, interpreter: StoryInterpreter) -> StepResult:
        fragments: List[str] = []
        all_tags: List[str] = []
        steps = 0
        while interpreter.can_continue:
            fragments.append(interpreter.continue_step())
            step_tags = list(interpreter.current_tags or [])
            all_tags.extend(step_tags)
            steps += 1
            if is_soft_break(
                step_tags,
                pagination_tags=self._pagination_tags,
                minigame_prefix=self._minigame_prefix,
            ):
                break
            if self._max_steps is not None and steps >= self._max_steps:
                logger.warning("Stopped after {} steps without a pause tag", steps)
                break

        text = FRAGMENT_SEPARATOR.join(fragments).strip()
        self._publish(text, all_tags)
        if text:
            self._append_history(text, "text", all_tags)
        return StepResult(text=text, tags=list(all_tags))

    def _publish(self, text: str, tags: List[str]) -> None:
        interpreter = self._require_interpreter()
        choices: List[Choice] = list(interpreter.current_choices)
        can_continue = interpreter.can_continue
        self._view = StoryView(
            text=text,
            choices=choices,
            tags=list(tags),
            can_continue=can_continue,
            is_ended=not can_continue and not choices,
        )

    def _append_history(self, text: str, entry_type: HistoryType, tags: List[str] | None = None) -> None:
        self._history.append(HistoryEntry(text=text, type=entry_type, tags=tuple(tags or ())))

    def _require_interpreter(self) -> StoryInterpreter:
        if self._interpreter is None:
            raise EngineNotInitializedError("No story loaded; call init_story first.")
        return self._interpreter
