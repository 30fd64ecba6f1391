"""Domain definition exports."""

from .story_graph_def import EdgeDef, ExclusionRuleDef, HubConfigDef, StoryGraphDef, StoryNodeDef

__all__ = [
    "EdgeDef",
    "ExclusionRuleDef",
    "HubConfigDef",
    "StoryGraphDef",
    "StoryNodeDef",
]
