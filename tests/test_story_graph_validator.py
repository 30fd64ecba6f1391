from storyloom.domain.defs import EdgeDef, ExclusionRuleDef, StoryNodeDef
from storyloom.services.story_graph_validator import Issue, format_issue, validate_story_graph


def _codes(issues) -> list[str]:
    return [issue.code for issue in issues]


def test_clean_graph_has_no_issues() -> None:
    nodes = [StoryNodeDef(id="start"), StoryNodeDef(id="menu", kind="choice"), StoryNodeDef(id="end")]
    edges = [EdgeDef("start", "menu"), EdgeDef("menu", "end")]

    assert validate_story_graph(nodes, edges) == []


def test_duplicate_ids_and_dangling_edges_are_errors() -> None:
    nodes = [StoryNodeDef(id="start"), StoryNodeDef(id="start"), StoryNodeDef(id="end")]
    edges = [EdgeDef("start", "end"), EdgeDef("start", "ghost")]

    issues = validate_story_graph(nodes, edges)

    assert "DUPLICATE_NODE_ID" in _codes(issues)
    dangling = [issue for issue in issues if issue.code == "DANGLING_EDGE"]
    assert len(dangling) == 1
    assert dangling[0].severity == "ERROR"
    assert dangling[0].context == {"field_path": "edges[1].target", "referenced_id": "ghost"}


def test_choice_without_options_and_ambiguous_exits() -> None:
    nodes = [StoryNodeDef(id="start"), StoryNodeDef(id="a"), StoryNodeDef(id="b", kind="choice")]
    edges = [EdgeDef("start", "a"), EdgeDef("a", "b"), EdgeDef("start", "b")]

    codes = _codes(validate_story_graph(nodes, edges))

    assert "CHOICE_WITHOUT_OPTIONS" in codes
    assert "AMBIGUOUS_OUTGOING" not in codes

    nodes.append(StoryNodeDef(id="c"))
    edges.extend([EdgeDef("a", "c"), EdgeDef("c", "b")])
    nodes[2] = StoryNodeDef(id="b")

    assert "AMBIGUOUS_OUTGOING" in _codes(validate_story_graph(nodes, edges))


def test_unreachable_nodes_are_reported() -> None:
    nodes = [StoryNodeDef(id="start"), StoryNodeDef(id="end"), StoryNodeDef(id="island")]
    edges = [EdgeDef("start", "end"), EdgeDef("island", "island")]

    issues = validate_story_graph(nodes, edges)

    assert [(issue.code, issue.context["node_id"]) for issue in issues] == [("UNREACHABLE_NODE", "island")]


def test_burn_targets_must_be_reachable_from_hub() -> None:
    hub = StoryNodeDef(
        id="start",
        kind="hub",
        burn_rules=[ExclusionRuleDef(target="a", burns=("b",)), ExclusionRuleDef(target="nowhere")],
    )
    nodes = [hub, StoryNodeDef(id="a")]

    issues = validate_story_graph(nodes, [EdgeDef("start", "a")])

    assert _codes(issues) == ["BURN_TARGET_UNREACHABLE"]
    assert issues[0].context["field_path"] == "burn_rules[1].target"


def test_format_issue() -> None:
    issue = Issue(severity="WARN", code="X", message="Something.", context={"node_id": "n"})

    assert format_issue(issue) == "[WARN] X: Something. (node_id=n)"
    assert format_issue(Issue("ERROR", "Y", "Bad.", {})) == "[ERROR] Y: Bad."
