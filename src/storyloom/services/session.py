"""Playthrough session: wires the step engine to hubs, minigames and tag consumers."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List

from loguru import logger

from storyloom.data.game_config import DEFAULT_CONFIG, GameConfig
from storyloom.domain.hub_registry import build_hub_registry
from storyloom.domain.state import Choice, SaveGame, StepResult, StoryView
from storyloom.services.burn_tracker import BurnStateTracker
from storyloom.services.graph_simulator import StorySimulator
from storyloom.services.interpreter import InterpreterFactory
from storyloom.services.minigame_controller import MinigameController
from storyloom.services.story_engine import NarrativeStepEngine
from storyloom.services.tag_dispatcher import InputSink, TagDispatcher, TagSink

MINIGAME_RESULT_VARIABLE = "minigame_result"


@dataclass(frozen=True, slots=True)
class ChoiceOption:
    """A current choice with its availability for the UI."""

    choice: Choice
    burned: bool


class StorySession:
    """Owns every piece of mutable state for one playthrough.

    Nothing here is shared between sessions: a live game and an editor preview
    each build their own session from their own config.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        *,
        story_id: str = "",
        interpreter_factory: InterpreterFactory | None = None,
        on_effect: TagSink | None = None,
        on_achievement: TagSink | None = None,
        on_input: InputSink | None = None,
    ) -> None:
        settings = {**DEFAULT_CONFIG, **(config or {})}
        self.story_id = story_id
        self.engine = NarrativeStepEngine(
            interpreter_factory,
            pagination_tags=settings["pagination_tags"] or DEFAULT_CONFIG["pagination_tags"],
            minigame_prefix=settings["minigame_prefix"] or DEFAULT_CONFIG["minigame_prefix"],
            max_steps=settings["max_steps_per_call"],
        )
        self.burns = BurnStateTracker(build_hub_registry(settings["hubs"]))
        self.minigames = MinigameController(on_result=self._commit_minigame_result)
        self.tags = TagDispatcher(
            self.minigames,
            resolve_variable=self.engine.get_global_variable,
            on_hub=self._enter_hub,
            on_achievement=on_achievement,
            on_input=on_input,
            on_effect=on_effect,
        )
        self.current_hub_id: str | None = None

    @property
    def view(self) -> StoryView:
        return self.engine.view

    def start(self, compiled_data: object, saved: SaveGame | None = None) -> StepResult | None:
        """Load a story and, unless resuming onto restored text, show the first batch."""
        self.current_hub_id = None
        self.minigames.reset()
        self.burns.reset()
        if saved is not None:
            if self.engine.init_story(compiled_data, saved.state, saved.text):
                self.burns.load(saved.burned)
        else:
            self.engine.init_story(compiled_data)

        view = self.engine.view
        if view.text or view.is_ended or not view.can_continue:
            return None
        return self.advance()

    def advance(self) -> StepResult | None:
        """Continue the story; refused while a minigame is being played.

        The hub context survives pagination: it is only dropped by a choice,
        replaced by the next ``hub:`` tag, or cleared when the story ends.
        """
        if self.minigames.is_playing:
            logger.warning("Ignoring continue while a minigame is playing")
            return None
        result = self.engine.continue_story()
        self.tags.dispatch(result.tags)
        if self.engine.view.is_ended:
            self.current_hub_id = None
        return result

    def choose(self, index: int) -> StepResult:
        """Apply hub burns for the chosen option, then commit it to the story."""
        choices = self.engine.view.choices
        hub_id = self.current_hub_id
        if hub_id is not None and 0 <= index < len(choices) and choices[index].target:
            self.burns.handle_choice(hub_id, choices[index].target)
        self.current_hub_id = None
        result = self.engine.make_choice(index)
        self.tags.dispatch(result.tags)
        return result

    def available_choices(self) -> List[ChoiceOption]:
        return [
            ChoiceOption(choice=choice, burned=bool(choice.target) and self.burns.is_burned(choice.target))
            for choice in self.engine.view.choices
        ]

    def go_back(self) -> bool:
        """Rewind an authoring-graph preview by one narrated node."""
        interpreter = self.engine.interpreter
        if not isinstance(interpreter, StorySimulator):
            return False
        return interpreter.go_back()

    def snapshot(self) -> SaveGame:
        return SaveGame(
            state=self.engine.state_snapshot(),
            text=self.engine.view.text,
            burned=self.burns.export(),
        )

    def reset(self) -> None:
        self.engine.reset_story_state()
        self.burns.reset()
        self.minigames.reset()
        self.current_hub_id = None

    def _enter_hub(self, hub_id: str) -> None:
        self.current_hub_id = hub_id

    def _commit_minigame_result(self, result: int) -> None:
        self.engine.set_global_variable(MINIGAME_RESULT_VARIABLE, result)
        logger.debug("Minigame result {} committed; resuming story", result)
        self.advance()
