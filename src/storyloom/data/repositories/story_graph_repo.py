"""Repository for authoring graphs (nodes, edges and declared variables)."""
from __future__ import annotations

from pathlib import Path
from typing import List, Mapping

from storyloom.core.types import NODE_KINDS, NodeKind
from storyloom.data.errors import DataValidationError
from storyloom.data.repositories.base import RepositoryBase
from storyloom.domain.defs import EdgeDef, ExclusionRuleDef, StoryGraphDef, StoryNodeDef


class StoryGraphRepository(RepositoryBase[StoryGraphDef]):
    """Loads one authoring graph document and validates its structure."""

    def __init__(self, filename: str, base_path: Path | str | None = None) -> None:
        super().__init__(filename, base_path)

    def _build(self, raw: dict[str, object]) -> StoryGraphDef:
        return parse_story_graph(raw)


def parse_story_graph(raw: Mapping[str, object]) -> StoryGraphDef:
    """Convert a ``{"nodes": [...], "edges": [...]}`` document into typed defs.

    Only structural problems raise; duplicate ids and dangling edges are left
    for the graph validator to report.
    """
    if not isinstance(raw, Mapping):
        raise DataValidationError("Story graph must be an object/dict.")
    raw_nodes = raw.get("nodes", [])
    raw_edges = raw.get("edges", [])
    if not isinstance(raw_nodes, list):
        raise DataValidationError("Story graph nodes must be a list.")
    if not isinstance(raw_edges, list):
        raise DataValidationError("Story graph edges must be a list.")
    raw_variables = raw.get("variables", {})
    if not isinstance(raw_variables, Mapping):
        raise DataValidationError("Story graph variables must be an object/dict if provided.")

    nodes = [_parse_node(entry, index) for index, entry in enumerate(raw_nodes)]
    edges = [_parse_edge(entry, index) for index, entry in enumerate(raw_edges)]
    return StoryGraphDef(nodes=nodes, edges=edges, variables=dict(raw_variables))


def _parse_node(entry: object, index: int) -> StoryNodeDef:
    context = f"nodes[{index}]"
    node_data = RepositoryBase._require_mapping(entry, context)
    node_id = RepositoryBase._require_str(node_data.get("id"), f"{context} id")
    kind = _parse_kind(node_data.get("kind", "knot"), f"story node '{node_id}' kind")
    label = node_data.get("label", "")
    if not isinstance(label, str):
        raise DataValidationError(f"story node '{node_id}' label must be a string if provided.")
    text = node_data.get("text", "")
    if not isinstance(text, str):
        raise DataValidationError(f"story node '{node_id}' text must be a string if provided.")
    burn_rules = _parse_burn_rules(node_data.get("burn_rules"), node_id)
    return StoryNodeDef(id=node_id, kind=kind, label=label, raw_text=text, burn_rules=burn_rules)


def _parse_kind(value: object, context: str) -> NodeKind:
    if value not in NODE_KINDS:
        raise DataValidationError(f"{context} must be one of {', '.join(NODE_KINDS)}.")
    return value  # type: ignore[return-value]


def _parse_burn_rules(raw_rules: object, node_id: str) -> List[ExclusionRuleDef]:
    if raw_rules is None:
        return []
    if not isinstance(raw_rules, list):
        raise DataValidationError(f"story node '{node_id}' burn_rules must be a list if provided.")
    rules: List[ExclusionRuleDef] = []
    for index, entry in enumerate(raw_rules):
        rule_ctx = f"story node '{node_id}' burn_rules[{index}]"
        rule_data = RepositoryBase._require_mapping(entry, rule_ctx)
        target = RepositoryBase._require_str(rule_data.get("target"), f"{rule_ctx} target")
        burns = RepositoryBase._require_list(rule_data.get("burns", []), f"{rule_ctx} burns")
        burn_ids = tuple(
            RepositoryBase._require_str(item, f"{rule_ctx} burns[{burn_index}]")
            for burn_index, item in enumerate(burns)
        )
        rules.append(ExclusionRuleDef(target=target, burns=burn_ids))
    return rules


def _parse_edge(entry: object, index: int) -> EdgeDef:
    context = f"edges[{index}]"
    edge_data = RepositoryBase._require_mapping(entry, context)
    source = RepositoryBase._require_str(edge_data.get("source"), f"{context} source")
    target = RepositoryBase._require_str(edge_data.get("target"), f"{context} target")
    label = edge_data.get("label")
    if label is not None and not isinstance(label, str):
        raise DataValidationError(f"{context} label must be a string if provided.")
    return EdgeDef(source=source, target=target, label=label or None)
