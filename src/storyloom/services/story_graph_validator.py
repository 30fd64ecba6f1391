"""Static checks for authoring graphs; reports issues instead of raising."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Sequence

from storyloom.domain.defs import EdgeDef, StoryNodeDef
from storyloom.services.graph_simulator import StorySimulator

Severity = str


@dataclass(frozen=True, slots=True)
class Issue:
    severity: Severity
    code: str
    message: str
    context: dict[str, str]


def format_issue(issue: Issue) -> str:
    context = " ".join(f"{key}={value}" for key, value in issue.context.items())
    suffix = f" ({context})" if context else ""
    return f"[{issue.severity}] {issue.code}: {issue.message}{suffix}"


def validate_story_graph(nodes: Sequence[StoryNodeDef], edges: Sequence[EdgeDef]) -> list[Issue]:
    issues: list[Issue] = []
    nodes_by_id: Dict[str, StoryNodeDef] = {}
    for node in nodes:
        if node.id in nodes_by_id:
            issues.append(
                Issue(
                    severity="ERROR",
                    code="DUPLICATE_NODE_ID",
                    message="Duplicate story node id detected.",
                    context={"node_id": node.id},
                )
            )
            continue
        nodes_by_id[node.id] = node

    adjacency: Dict[str, List[str]] = {node_id: [] for node_id in nodes_by_id}
    for index, edge in enumerate(edges):
        for endpoint, field_name in ((edge.source, "source"), (edge.target, "target")):
            if endpoint not in nodes_by_id:
                issues.append(
                    Issue(
                        severity="ERROR",
                        code="DANGLING_EDGE",
                        message="Edge references missing node.",
                        context={"field_path": f"edges[{index}].{field_name}", "referenced_id": endpoint},
                    )
                )
        if edge.source in adjacency and edge.target in nodes_by_id:
            adjacency[edge.source].append(edge.target)

    _validate_exits(nodes_by_id, adjacency, issues)
    _validate_reachability(nodes, edges, adjacency, issues)
    _validate_burn_rules(nodes_by_id, adjacency, issues)
    return issues


def _validate_exits(
    nodes_by_id: Mapping[str, StoryNodeDef],
    adjacency: Mapping[str, List[str]],
    issues: list[Issue],
) -> None:
    for node_id, node in nodes_by_id.items():
        targets = adjacency[node_id]
        if node.kind == "choice":
            if not targets:
                issues.append(
                    Issue(
                        severity="WARN",
                        code="CHOICE_WITHOUT_OPTIONS",
                        message="Choice node has no outgoing options.",
                        context={"node_id": node_id},
                    )
                )
            continue
        if len(targets) > 1 and not any(nodes_by_id[target].kind == "choice" for target in targets):
            issues.append(
                Issue(
                    severity="WARN",
                    code="AMBIGUOUS_OUTGOING",
                    message="Node has several non-choice exits; only the first is followed.",
                    context={"node_id": node_id, "targets": ",".join(targets)},
                )
            )


def _validate_reachability(
    nodes: Sequence[StoryNodeDef],
    edges: Sequence[EdgeDef],
    adjacency: Mapping[str, List[str]],
    issues: list[Issue],
) -> None:
    start_id = StorySimulator(nodes, edges).current_node_id
    if start_id is None:
        return
    reachable = _reachable_from(start_id, adjacency)
    for node_id in sorted(set(adjacency) - reachable):
        issues.append(
            Issue(
                severity="WARN",
                code="UNREACHABLE_NODE",
                message="Node is unreachable from the start node.",
                context={"node_id": node_id, "start": start_id},
            )
        )


def _validate_burn_rules(
    nodes_by_id: Mapping[str, StoryNodeDef],
    adjacency: Mapping[str, List[str]],
    issues: list[Issue],
) -> None:
    for node_id, node in nodes_by_id.items():
        if node.kind != "hub" or not node.burn_rules:
            continue
        reachable = _reachable_from(node_id, adjacency)
        for index, rule in enumerate(node.burn_rules):
            if rule.target in reachable:
                continue
            issues.append(
                Issue(
                    severity="WARN",
                    code="BURN_TARGET_UNREACHABLE",
                    message="Burn rule target is not reachable from its hub.",
                    context={
                        "node_id": node_id,
                        "field_path": f"burn_rules[{index}].target",
                        "referenced_id": rule.target,
                    },
                )
            )


def _reachable_from(start_id: str, adjacency: Mapping[str, List[str]]) -> set[str]:
    reachable: set[str] = set()
    stack = [start_id]
    while stack:
        node_id = stack.pop()
        if node_id in reachable:
            continue
        reachable.add(node_id)
        stack.extend(adjacency.get(node_id, ()))
    return reachable
