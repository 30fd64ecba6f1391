"""Service layer exports."""

from .burn_tracker import BurnStateTracker
from .errors import EngineNotInitializedError, SaveLoadError
from .graph_simulator import StorySimulator, extract_tags
from .interpreter import StoryInterpreter
from .save_service import SaveService
from .session import ChoiceOption, StorySession
from .story_engine import NarrativeStepEngine
from .variable_bridge import VariableBridge

__all__ = [
    "BurnStateTracker",
    "ChoiceOption",
    "EngineNotInitializedError",
    "NarrativeStepEngine",
    "SaveLoadError",
    "SaveService",
    "StoryInterpreter",
    "StorySession",
    "StorySimulator",
    "VariableBridge",
    "extract_tags",
]
