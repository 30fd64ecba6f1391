import json
from pathlib import Path

import pytest

from storyloom.data.game_config import DEFAULT_CONFIG, clear_config_cache, load_game_config


@pytest.fixture(autouse=True)
def _fresh_cache():
    clear_config_cache()
    yield
    clear_config_cache()


def test_missing_config_returns_defaults(tmp_path: Path) -> None:
    config = load_game_config("absent", tmp_path)

    assert config == DEFAULT_CONFIG
    config["hubs"].append("mutated")
    assert DEFAULT_CONFIG["hubs"] == []


def test_config_overrides_defaults_and_is_cached(tmp_path: Path) -> None:
    path = tmp_path / "demo.config.json"
    path.write_text(json.dumps({"title": "Demo", "pagination_tags": ["pause"]}), encoding="utf-8")

    config = load_game_config("demo", tmp_path)
    path.write_text(json.dumps({"title": "Changed"}), encoding="utf-8")

    assert config["title"] == "Demo"
    assert config["pagination_tags"] == ["pause"]
    assert config["minigame_prefix"] == "minigame:"
    cached = load_game_config("demo", tmp_path)
    assert cached == config
    assert cached is not config

    clear_config_cache()
    assert load_game_config("demo", tmp_path)["title"] == "Changed"


def test_non_object_config_falls_back(tmp_path: Path) -> None:
    (tmp_path / "odd.config.json").write_text("[1, 2]", encoding="utf-8")

    assert load_game_config("odd", tmp_path) == DEFAULT_CONFIG


def test_empty_story_id_returns_defaults() -> None:
    assert load_game_config(None) == DEFAULT_CONFIG


def test_demo_config_loads() -> None:
    assert load_game_config("night_errands")["title"] == "Night Errands"


def test_same_story_id_in_different_directories_is_cached_separately(tmp_path: Path) -> None:
    first_dir = tmp_path / "first"
    second_dir = tmp_path / "second"
    for directory, title in ((first_dir, "First"), (second_dir, "Second")):
        directory.mkdir()
        (directory / "demo.config.json").write_text(json.dumps({"title": title}), encoding="utf-8")

    assert load_game_config("demo", first_dir)["title"] == "First"
    assert load_game_config("demo", second_dir)["title"] == "Second"


def test_mutating_a_result_does_not_touch_the_cache(tmp_path: Path) -> None:
    (tmp_path / "demo.config.json").write_text(
        json.dumps({"hubs": [{"id": "hub", "options": []}]}), encoding="utf-8"
    )

    config = load_game_config("demo", tmp_path)
    config["title"] = "Edited"
    config["hubs"].clear()

    again = load_game_config("demo", tmp_path)
    assert again["title"] == DEFAULT_CONFIG["title"]
    assert again["hubs"] == [{"id": "hub", "options": []}]
