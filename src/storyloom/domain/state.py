"""Published playthrough state and the append-only history log."""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import List

from storyloom.core.types import HistoryType


@dataclass(frozen=True, slots=True)
class Choice:
    """One option offered by an interpreter at a decision point."""

    text: str
    index: int
    target: str | None = None


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """Player-facing log line; never mutated once appended."""

    text: str
    type: HistoryType
    timestamp: float = field(default_factory=time.time)
    tags: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class StepResult:
    """Aggregate returned from one continue/choose call."""

    text: str
    tags: List[str] = field(default_factory=list)


@dataclass
class StoryView:
    """Snapshot of what the presentation layer should render."""

    text: str = ""
    choices: List[Choice] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    can_continue: bool = False
    is_ended: bool = False


@dataclass(slots=True)
class SaveGame:
    """Interpreter snapshot, display text and burned ids, persisted together."""

    state: str | None
    text: str = ""
    burned: List[str] = field(default_factory=list)
