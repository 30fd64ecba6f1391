"""Edit-time graph transforms and export to hub config / narrative source."""
from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, List, Sequence

from storyloom.domain.defs import EdgeDef, ExclusionRuleDef, StoryNodeDef


def rename_node(
    nodes: Sequence[StoryNodeDef],
    edges: Sequence[EdgeDef],
    old_id: str,
    new_id: str,
) -> tuple[List[StoryNodeDef], List[EdgeDef]]:
    """Return copies of the graph with ``old_id`` renamed everywhere it is referenced.

    Raises ValueError if ``new_id`` is already taken or ``old_id`` is unknown.
    The inputs are left untouched, so a failed rename changes nothing.
    """
    if old_id == new_id:
        return list(nodes), list(edges)
    node_ids = {node.id for node in nodes}
    if old_id not in node_ids:
        raise ValueError(f"Unknown node id '{old_id}'.")
    if new_id in node_ids:
        raise ValueError(f"Node id '{new_id}' is already in use.")

    def _swap(value: str) -> str:
        return new_id if value == old_id else value

    renamed_nodes = [
        replace(
            node,
            id=_swap(node.id),
            burn_rules=[
                ExclusionRuleDef(target=_swap(rule.target), burns=tuple(_swap(item) for item in rule.burns))
                for rule in node.burn_rules
            ],
        )
        for node in nodes
    ]
    renamed_edges = [
        EdgeDef(source=_swap(edge.source), target=_swap(edge.target), label=edge.label) for edge in edges
    ]
    return renamed_nodes, renamed_edges


def generate_hub_registry(nodes: Sequence[StoryNodeDef]) -> List[Dict[str, Any]]:
    """Return the hub config wire format for every hub-kind node."""
    return [
        {
            "id": node.id,
            "options": [{"target": rule.target, "burns": list(rule.burns)} for rule in node.burn_rules],
        }
        for node in nodes
        if node.kind == "hub"
    ]


def generate_narrative_source(nodes: Sequence[StoryNodeDef], edges: Sequence[EdgeDef]) -> str:
    """Render one knot per node; hubs list their exits as sticky options."""
    nodes_by_id = {node.id: node for node in nodes}
    chunks: List[str] = []
    for node in nodes:
        lines = [f"=== {node.id} ===", node.raw_text]
        if node.kind == "hub":
            for edge in edges:
                if edge.source != node.id:
                    continue
                target = nodes_by_id.get(edge.target)
                if target is None:
                    continue
                label = edge.label or target.label or target.id
                lines.append(f"+ [{label}] -> {target.id}")
        else:
            lines.append("-> DONE")
        chunks.append("\n".join(lines) + "\n")
    return "\n".join(chunks)
