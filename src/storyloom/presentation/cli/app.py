"""Console player for authoring graphs."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Literal, Sequence, Tuple

from loguru import logger

from storyloom.data.errors import DataError
from storyloom.data.game_config import load_game_config
from storyloom.data.repositories import StoryGraphRepository
from storyloom.domain.defs import StoryGraphDef
from storyloom.presentation.cli import config, render
from storyloom.presentation.cli.save_slots import SaveSlotStore
from storyloom.services.errors import SaveLoadError
from storyloom.services.graph_export import generate_hub_registry
from storyloom.services.save_service import SaveService
from storyloom.services.session import StorySession
from storyloom.services.story_graph_validator import format_issue, validate_story_graph
from storyloom.utils.logging import setup_logging

Command = Literal["choose", "continue", "back", "save", "quit", "invalid"]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="storyloom", description="Play an authoring graph in the console.")
    parser.add_argument("graph", type=Path, help="Path to a story graph JSON file")
    parser.add_argument("--config", type=Path, default=None, help="Path to the player options file")
    parser.add_argument("--slot", type=int, default=1, help="Save slot used by the 's' command")
    parser.add_argument("--resume", action="store_true", help="Resume from the save slot if it exists")
    parser.add_argument("--save-dir", type=Path, default=None, help="Override the save directory")
    parser.add_argument("--log-level", type=str, default=None, help="Log level (DEBUG, INFO, WARNING, ...)")
    parser.add_argument("--list-slots", action="store_true", help="Show save slots and exit")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Start the interactive console session."""
    args = _build_parser().parse_args(argv)
    options = config.load_config(args.config)
    setup_logging(args.log_level or options["log_level"])

    story_id = args.graph.stem
    try:
        graph = StoryGraphRepository(args.graph.name, args.graph.parent).get()
    except DataError as exc:
        print(f"Could not load story: {exc}")
        return 1
    for issue in validate_story_graph(graph.nodes, graph.edges):
        logger.warning(format_issue(issue))

    game_config = dict(load_game_config(story_id, args.graph.parent))
    if not game_config.get("hubs"):
        game_config["hubs"] = generate_hub_registry(graph.nodes)
    session = StorySession(
        game_config,
        story_id=story_id,
        on_effect=lambda tag: logger.info("Effect tag: {}", tag),
        on_achievement=lambda achievement_id: print(f"* Achievement unlocked: {achievement_id}"),
    )
    store = SaveSlotStore(args.save_dir, story_id=story_id)
    if args.list_slots:
        for line in describe_slots(store):
            print(line)
        return 0
    _start_session(session, graph, store, args.slot if args.resume else None)
    run_story_loop(session, store, args.slot, step_mode=options["text_display_mode"] == "step")
    print("Goodbye!")
    return 0


def _start_session(
    session: StorySession, graph: StoryGraphDef, store: SaveSlotStore, slot: int | None
) -> None:
    save_service = SaveService()
    if slot is not None and store.slot_exists(slot):
        try:
            saved = save_service.deserialize(store.read_slot(slot))
        except (SaveLoadError, ValueError) as exc:
            print(f"Save slot {slot} could not be loaded ({exc}); starting a new game.")
        else:
            session.start(graph, saved)
            return
    session.start(graph)


def run_story_loop(
    session: StorySession, store: SaveSlotStore, slot: int, *, step_mode: bool = False
) -> None:
    """Render, prompt and apply commands until the story ends or the player quits."""
    shown_text = None
    while True:
        view = session.view
        if view.text and view.text != shown_text:
            render.render_text(view.text, view.tags)
            shown_text = view.text
        if session.minigames.is_pending:
            _resolve_minigame(session)
            continue
        if view.is_ended:
            print("\n-- The End --")
            return
        options = session.available_choices()
        render.render_choices(options)
        prompt = "Select an option" if options else "Press Enter to continue"
        command, index = parse_command(input(f"{prompt} (b=back, s=save, q=quit): "), len(options))
        if command == "quit":
            return
        if command == "save":
            store.write_slot(slot, SaveService().serialize(session.snapshot(), story_id=session.story_id))
            print(f"Saved to slot {slot}.")
        elif command == "back":
            if session.go_back():
                shown_text = None
                session.advance()
            else:
                print("Nothing to go back to.")
        elif command == "choose" and index is not None:
            if options[index].burned:
                print("That path has been closed off.")
                continue
            session.choose(index)
        elif command == "continue" and not options and view.can_continue:
            session.advance()
            if step_mode:
                print()
        else:
            print("Invalid selection.")


def parse_command(raw: str, choice_count: int) -> Tuple[Command, int | None]:
    """Map raw input to a command; choice numbers are 1-based."""
    value = raw.strip().lower()
    if value == "q":
        return "quit", None
    if value == "s":
        return "save", None
    if value == "b":
        return "back", None
    if not value:
        return ("continue", None) if choice_count == 0 else ("invalid", None)
    try:
        index = int(value) - 1
    except ValueError:
        return "invalid", None
    if 0 <= index < choice_count:
        return "choose", index
    return "invalid", None


def _resolve_minigame(session: StorySession) -> None:
    minigame = session.minigames.config
    name = minigame.type if minigame else "minigame"
    session.minigames.start()
    answer = input(f"[{name}] Did you win? (y/n, c=cancel): ").strip().lower()
    if answer == "c":
        session.minigames.cancel()
        session.advance()
        return
    session.minigames.finish(answer == "y")


def describe_slots(store: SaveSlotStore) -> List[str]:
    lines: List[str] = []
    for slot in store.list_slots():
        if not slot.exists:
            lines.append(f"Slot {slot.slot}: empty")
        elif slot.is_corrupt:
            lines.append(f"Slot {slot.slot}: corrupt")
        else:
            preview = f" - {slot.preview}" if slot.preview else ""
            lines.append(f"Slot {slot.slot}: {slot.saved_at or '?'}{preview}")
    return lines
