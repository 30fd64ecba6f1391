"""Shared type aliases for the core and domain layers."""
from typing import Literal

NodeKind = Literal["hub", "knot", "alley", "choice"]
HistoryType = Literal["text", "choice"]
EngineMode = Literal["idle", "ready", "ended"]
MinigameState = Literal["idle", "pending", "playing"]

NODE_KINDS: tuple[NodeKind, ...] = ("hub", "knot", "alley", "choice")

__all__ = [
    "EngineMode",
    "HistoryType",
    "MinigameState",
    "NODE_KINDS",
    "NodeKind",
]
