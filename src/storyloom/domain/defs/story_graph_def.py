"""Authoring graph definitions used by the simulator and export tools."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from storyloom.core.types import NodeKind


@dataclass(frozen=True, slots=True)
class ExclusionRuleDef:
    """If the player's choice routes through ``target``, burn every id in ``burns``."""

    target: str
    burns: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class HubConfigDef:
    """Exclusion rules attached to a single hub node."""

    id: str
    options: tuple[ExclusionRuleDef, ...] = ()


@dataclass(slots=True)
class StoryNodeDef:
    """Single node of an authoring graph."""

    id: str
    kind: NodeKind = "knot"
    label: str = ""
    raw_text: str = ""
    burn_rules: List[ExclusionRuleDef] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class EdgeDef:
    """Directed traversal option between two nodes."""

    source: str
    target: str
    label: str | None = None


@dataclass(slots=True)
class StoryGraphDef:
    """Nodes, edges and declared variables of one authoring graph."""

    nodes: List[StoryNodeDef] = field(default_factory=list)
    edges: List[EdgeDef] = field(default_factory=list)
    variables: dict[str, object] = field(default_factory=dict)
