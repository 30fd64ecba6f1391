"""Shared CLI rendering helpers."""
from __future__ import annotations

import os
import textwrap
from typing import Sequence

from storyloom.services.session import ChoiceOption

TEXT_WIDTH = 72


def debug_enabled() -> bool:
    """Return True only when STORYLOOM_DEBUG is explicitly set to '1'."""
    return os.getenv("STORYLOOM_DEBUG") == "1"


def wrap_paragraphs(text: str, width: int = TEXT_WIDTH) -> list[str]:
    """Wrap each paragraph on word boundaries, keeping authored blank lines."""
    lines: list[str] = []
    for paragraph in text.split("\n"):
        if not paragraph.strip():
            lines.append("")
            continue
        lines.extend(
            textwrap.wrap(paragraph, width=width, break_long_words=False, break_on_hyphens=False)
        )
    return lines


def render_heading(title: str) -> None:
    """Print a consistent section heading."""
    print(f"\n=== {title} ===")


def render_text(text: str, tags: Sequence[str] = ()) -> None:
    if debug_enabled() and tags:
        print(f"[tags: {', '.join(tags)}]")
    for line in wrap_paragraphs(text):
        print(line)


def format_choices(options: Sequence[ChoiceOption]) -> list[str]:
    """Return numbered choice lines; burned options are marked."""
    lines: list[str] = []
    for idx, option in enumerate(options, start=1):
        suffix = " (burned)" if option.burned else ""
        lines.append(f"{idx}. {option.choice.text}{suffix}")
    return lines


def render_choices(options: Sequence[ChoiceOption]) -> None:
    if not options:
        return
    render_heading("Choices")
    for line in format_choices(options):
        print(line)
