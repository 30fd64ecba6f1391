"""Repository exports."""

from .story_graph_repo import StoryGraphRepository, parse_story_graph

__all__ = [
    "StoryGraphRepository",
    "parse_story_graph",
]
