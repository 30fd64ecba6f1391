from pathlib import Path

from storyloom.data import paths


def test_default_stories_path_is_in_repo() -> None:
    stories = paths.get_stories_path()

    assert stories == paths.get_repo_root() / "data" / "stories"
    assert (stories / "night_errands.json").is_file()


def test_config_path_uses_story_id(tmp_path: Path) -> None:
    assert paths.get_config_path("demo", tmp_path) == tmp_path / "demo.config.json"
