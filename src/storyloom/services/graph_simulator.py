"""Authoring-time story simulator that walks a node/edge graph directly."""
from __future__ import annotations

import json
import re
from typing import Any, Dict, List, Mapping, Sequence

from loguru import logger

from storyloom.core.tags import HUB_PREFIX, hub_id_from_tag
from storyloom.data.json_loader import parse_json
from storyloom.data.repositories import parse_story_graph
from storyloom.domain.defs import EdgeDef, StoryGraphDef, StoryNodeDef
from storyloom.domain.state import Choice

TAG_MARKER = "#"
START_NODE_IDS = ("start", "node_start")



def _inline_tag_pattern(marker: str) -> re.Pattern[str]:
    return re.compile(rf"(?<!\S){re.escape(marker)}(?=\s*[A-Za-z0-9_])")


_INLINE_TAG_START = _inline_tag_pattern(TAG_MARKER)


def extract_tags(raw_text: str, marker: str = TAG_MARKER) -> tuple[str, List[str]]:
    """Split node text into display text and tags, in file order.

    Lines that are entirely a tag are removed. A trailing ``#tag`` portion is
    stripped from a text line (several tags may follow one another) and the
    rest of the line is kept when it is non-empty.
    """
    tags: List[str] = []
    lines: List[str] = []
    pattern = _INLINE_TAG_START if marker == TAG_MARKER else _inline_tag_pattern(marker)
    for line in raw_text.split("\n"):
        stripped = line.strip()
        if stripped.startswith(marker):
            tags.extend(_split_tag_run(stripped, marker))
            continue
        match = pattern.search(line)
        if match is None:
            lines.append(line)
            continue
        tags.extend(_split_tag_run(line[match.start():], marker))
        remaining = line[: match.start()].strip()
        if remaining:
            lines.append(remaining)
    return "\n".join(lines).strip(), tags


def _split_tag_run(run: str, marker: str) -> List[str]:
    return [part.strip() for part in run.split(marker) if part.strip()]


class StorySimulator:
    """Plays an authoring graph through the same interface as a compiled story.

    Non-choice nodes auto-advance along their outgoing edge; reaching a
    choice-kind node suspends advancing until ``choose`` is called.
    """

    def __init__(
        self,
        nodes: Sequence[StoryNodeDef],
        edges: Sequence[EdgeDef],
        variables: Mapping[str, Any] | None = None,
    ) -> None:
        self._nodes = list(nodes)
        self._edges = list(edges)
        self._nodes_by_id: Dict[str, StoryNodeDef] = {}
        for node in self._nodes:
            self._nodes_by_id.setdefault(node.id, node)
        self.variables: Dict[str, Any] = dict(variables or {})
        self.current_node_id: str | None = self._find_start_node()
        self.history_stack: List[str] = []
        self.awaiting_choice = False
        self._current_tags: List[str] = []

    @classmethod
    def from_document(cls, document: object) -> "StorySimulator":
        """Build a simulator from a graph def, a mapping or a JSON string."""
        if isinstance(document, StoryGraphDef):
            graph = document
        else:
            if isinstance(document, (str, bytes)):
                document = parse_json(document, "story document")
            graph = parse_story_graph(document)  # type: ignore[arg-type]
        return cls(graph.nodes, graph.edges, graph.variables)

    def _find_start_node(self) -> str | None:
        for node in self._nodes:
            if node.id in START_NODE_IDS:
                return node.id
        targets = {edge.target for edge in self._edges}
        for node in self._nodes:
            if node.id not in targets and node.kind != "choice":
                return node.id
        return self._nodes[0].id if self._nodes else None

    @property
    def current_node(self) -> StoryNodeDef | None:
        if self.current_node_id is None:
            return None
        return self._nodes_by_id.get(self.current_node_id)

    @property
    def current_tags(self) -> List[str]:
        return list(self._current_tags)

    @property
    def can_continue(self) -> bool:
        if self.awaiting_choice:
            return False
        node = self.current_node
        if node is None or node.kind == "choice":
            return False
        return bool(self._outgoing(node.id))

    @property
    def current_choices(self) -> List[Choice]:
        node = self.current_node
        if node is None or node.kind != "choice":
            return []
        choices: List[Choice] = []
        for index, edge in enumerate(self._outgoing(node.id)):
            target = self._nodes_by_id.get(edge.target)
            text = edge.label or (target.label if target else "") or f"Option {index + 1}"
            choices.append(Choice(text=text, index=index, target=edge.target))
        return choices

    def continue_step(self) -> str:
        if self.current_node_id is None:
            return ""
        node = self.current_node
        if node is None:
            logger.warning("Current node '{}' does not exist; stopping", self.current_node_id)
            self.current_node_id = None
            self._current_tags = []
            return ""
        if not self.awaiting_choice:
            self.history_stack.append(node.id)

        text, tags = extract_tags(node.raw_text)
        if node.kind == "hub" and not any(hub_id_from_tag(tag) == node.id for tag in tags):
            tags.append(f"{HUB_PREFIX}{node.id}")
        self._current_tags = tags
        self._advance_from(node)
        return text

    def _advance_from(self, node: StoryNodeDef) -> None:
        outgoing = self._outgoing(node.id)
        if not outgoing:
            self.current_node_id = None
            return
        if len(outgoing) == 1:
            next_node = self._nodes_by_id.get(outgoing[0].target)
            if next_node is None:
                logger.warning("Edge from '{}' targets missing node '{}'", node.id, outgoing[0].target)
                self.current_node_id = None
                return
            self.current_node_id = next_node.id
            self.awaiting_choice = next_node.kind == "choice"
            return

        for edge in outgoing:
            target = self._nodes_by_id.get(edge.target)
            if target is not None and target.kind == "choice":
                self.current_node_id = target.id
                self.awaiting_choice = True
                return
        fallback = next((edge for edge in outgoing if edge.target in self._nodes_by_id), None)
        logger.warning(
            "Node '{}' has {} non-choice exits; following '{}'",
            node.id,
            len(outgoing),
            fallback.target if fallback else None,
        )
        self.current_node_id = fallback.target if fallback else None

    def choose(self, index: int) -> None:
        choices = self.current_choices
        if not 0 <= index < len(choices):
            raise IndexError(f"Choice index {index} is invalid for node '{self.current_node_id}'.")
        self.current_node_id = choices[index].target
        self.awaiting_choice = False

    def go_back(self) -> bool:
        """Rewind to the last narrated node; returns False when there is nothing to pop."""
        if not self.history_stack:
            return False
        self.current_node_id = self.history_stack.pop()
        self.awaiting_choice = False
        return True

    def get_variable(self, name: str) -> Any:
        if name not in self.variables:
            raise KeyError(f"Variable '{name}' is not declared in this story.")
        return self.variables[name]

    def set_variable(self, name: str, value: Any) -> None:
        if name not in self.variables:
            raise KeyError(f"Variable '{name}' is not declared in this story.")
        self.variables[name] = value

    def state_snapshot(self) -> str:
        return json.dumps(
            {
                "current_node_id": self.current_node_id,
                "awaiting_choice": self.awaiting_choice,
                "history": list(self.history_stack),
                "variables": self.variables,
            },
            sort_keys=True,
        )

    def load_snapshot(self, snapshot: str) -> None:
        if not isinstance(snapshot, (str, bytes)):
            raise ValueError("Snapshot must be a JSON string.")
        data = json.loads(snapshot)
        if not isinstance(data, dict):
            raise ValueError("Snapshot must decode to an object.")
        current = data.get("current_node_id")
        history = data.get("history", [])
        variables = data.get("variables", {})
        if current is not None and not isinstance(current, str):
            raise ValueError("Snapshot current_node_id must be a string or null.")
        if not isinstance(history, list) or not all(isinstance(item, str) for item in history):
            raise ValueError("Snapshot history must be a list of node ids.")
        if not isinstance(variables, dict):
            raise ValueError("Snapshot variables must be an object.")
        self.current_node_id = current
        self.awaiting_choice = bool(data.get("awaiting_choice", False))
        self.history_stack = list(history)
        self.variables = dict(variables)
        self._current_tags = []

    def _outgoing(self, node_id: str) -> List[EdgeDef]:
        return [edge for edge in self._edges if edge.source == node_id]
