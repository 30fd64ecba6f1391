import json
from pathlib import Path
from typing import Iterator, List

import pytest

from storyloom.data import paths
from storyloom.data.repositories import StoryGraphRepository
from storyloom.domain.state import Choice
from storyloom.presentation.cli import app, config, render
from storyloom.presentation.cli.save_slots import SaveSlotStore
from storyloom.services.errors import SaveLoadError
from storyloom.services.graph_export import generate_hub_registry
from storyloom.services.save_service import SaveService
from storyloom.services.session import ChoiceOption, StorySession


def _feed(monkeypatch: pytest.MonkeyPatch, answers: List[str]) -> None:
    replies: Iterator[str] = iter(answers)
    monkeypatch.setattr("builtins.input", lambda _prompt="": next(replies))


def _started_session() -> StorySession:
    graph = StoryGraphRepository("night_errands.json").get()
    session = StorySession({"hubs": generate_hub_registry(graph.nodes)}, story_id="night_errands")
    session.start(graph)
    return session


@pytest.mark.parametrize(
    ("raw", "count", "expected"),
    [
        ("q", 2, ("quit", None)),
        (" S ", 0, ("save", None)),
        ("b", 2, ("back", None)),
        ("", 0, ("continue", None)),
        ("", 2, ("invalid", None)),
        ("2", 2, ("choose", 1)),
        ("3", 2, ("invalid", None)),
        ("0", 2, ("invalid", None)),
        ("go", 2, ("invalid", None)),
    ],
)
def test_parse_command(raw: str, count: int, expected: tuple) -> None:
    assert app.parse_command(raw, count) == expected


def test_format_choices_marks_burned() -> None:
    options = [
        ChoiceOption(Choice(text="Docks", index=0, target="docks"), burned=False),
        ChoiceOption(Choice(text="Alley", index=1, target="alley"), burned=True),
    ]

    assert render.format_choices(options) == ["1. Docks", "2. Alley (burned)"]


def test_wrap_paragraphs_keeps_blank_lines() -> None:
    lines = render.wrap_paragraphs("one two three\n\nfour", width=8)

    assert lines == ["one two", "three", "", "four"]


def test_config_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "config.json"

    assert config.load_config(path) == {"text_display_mode": "instant", "log_level": "WARNING"}

    config.save_config({"text_display_mode": "step", "log_level": "debug"}, path)

    assert config.load_config(path) == {"text_display_mode": "step", "log_level": "DEBUG"}


def test_config_ignores_garbage(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("not json", encoding="utf-8")

    assert config.load_config(path)["text_display_mode"] == "instant"


def test_save_slots_are_per_story(tmp_path: Path) -> None:
    store = SaveSlotStore(tmp_path, story_id="night_errands")
    store.write_slot(1, {"metadata": {"saved_at": "2026-01-01T00:00:00", "preview": "Rain."}})
    (tmp_path / "night_errands" / "slot_2.json").write_text("{", encoding="utf-8")

    assert (tmp_path / "night_errands" / "slot_1.json").is_file()
    assert app.describe_slots(store) == [
        "Slot 1: 2026-01-01T00:00:00 - Rain.",
        "Slot 2: corrupt",
        "Slot 3: empty",
    ]
    with pytest.raises(SaveLoadError):
        store.read_slot(2)
    with pytest.raises(ValueError):
        store.slot_exists(4)

    store.delete_slot(1)
    store.delete_slot(1)
    assert not store.slot_exists(1)


def test_loop_plays_to_the_end(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys) -> None:
    session = _started_session()
    _feed(monkeypatch, ["", "4"])

    app.run_story_loop(session, SaveSlotStore(tmp_path), 1)

    output = capsys.readouterr().out
    assert "The rain has not stopped for three days." in output
    assert "4. Call it a night" in output
    assert "-- The End --" in output


def test_loop_refuses_burned_choice(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys) -> None:
    session = _started_session()
    _feed(monkeypatch, ["", "1", "y", "2", "q"])

    app.run_story_loop(session, SaveSlotStore(tmp_path), 1)

    output = capsys.readouterr().out
    assert "2. Call your sister (burned)" in output
    assert "That path has been closed off." in output
    assert session.engine.get_global_variable("minigame_result") == 1


def test_loop_saves_to_slot(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    session = _started_session()
    store = SaveSlotStore(tmp_path, story_id="night_errands")
    _feed(monkeypatch, ["s", "q"])

    app.run_story_loop(session, store, 2)

    saved = SaveService().deserialize(store.read_slot(2))
    assert saved.text == session.view.text
    assert saved.state is not None


def test_main_lists_slots(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys) -> None:
    monkeypatch.setattr(app, "setup_logging", lambda _level: None)
    story = paths.get_stories_path() / "night_errands.json"

    exit_code = app.main([str(story), "--list-slots", "--save-dir", str(tmp_path), "--log-level", "ERROR"])

    assert exit_code == 0
    assert "Slot 1: empty" in capsys.readouterr().out


def test_main_resumes_from_slot(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys) -> None:
    story = paths.get_stories_path() / "night_errands.json"
    session = _started_session()
    store = SaveSlotStore(tmp_path, story_id="night_errands")
    store.write_slot(1, SaveService().serialize(session.snapshot(), story_id="night_errands"))
    monkeypatch.setattr(app, "setup_logging", lambda _level: None)
    _feed(monkeypatch, ["q"])

    exit_code = app.main(
        [str(story), "--config", str(tmp_path / "options.json"), "--resume", "--save-dir", str(tmp_path)]
    )

    output = capsys.readouterr().out
    assert exit_code == 0
    assert "The rain has not stopped" in output
    assert "Goodbye!" in output


def test_main_reports_bad_graph(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys) -> None:
    monkeypatch.setattr(app, "setup_logging", lambda _level: None)
    broken = tmp_path / "broken.json"
    broken.write_text(json.dumps({"nodes": "x"}), encoding="utf-8")

    assert app.main([str(broken), "--log-level", "ERROR"]) == 1
    assert "Could not load story" in capsys.readouterr().out
