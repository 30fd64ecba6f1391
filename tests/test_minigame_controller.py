from typing import List

from storyloom.services.minigame_controller import MinigameConfig, MinigameController, parse_minigame_tag


def test_legacy_lockpick_tag() -> None:
    config = parse_minigame_tag("minigame:lockpick:0.2:3")

    assert config is not None
    assert config.type == "lockpick"
    assert config.params == {"zone_size": 0.2, "speed": 3.0}
    assert config.auto_start


def test_legacy_tags_fill_defaults() -> None:
    qte = parse_minigame_tag("minigame:qte")
    lockpick = parse_minigame_tag("Minigame:Lockpick:wide")

    assert qte is not None and qte.params == {"key": "SPACE", "timeout": 2.0}
    assert lockpick is not None and lockpick.params == {"zone_size": 0.15, "speed": 1.5}


def test_unknown_legacy_type_has_no_params() -> None:
    config = parse_minigame_tag("minigame:dice")

    assert config == MinigameConfig(type="dice", params={})


def test_key_value_tag_resolves_placeholders() -> None:
    values = {"agility": 7}

    config = parse_minigame_tag(
        "minigame: type=Lockpick, speed={agility}, difficulty={missing}, consume=lockpick_set, "
        "onFail=alarm, autostart=false",
        values.get,
    )

    assert config is not None
    assert config.type == "lockpick"
    assert not config.auto_start
    assert config.params == {
        "speed": 7.0,
        "difficulty": "{missing}",
        "consume_item": "lockpick_set",
        "onFail": "alarm",
    }


def test_non_minigame_or_typeless_tags_are_ignored() -> None:
    assert parse_minigame_tag("sfx:door") is None
    assert parse_minigame_tag("minigame:") is None
    assert parse_minigame_tag("minigame: speed=2") is None


def test_lifecycle_reports_result() -> None:
    results: List[int] = []
    controller = MinigameController(on_result=results.append)

    controller.queue(MinigameConfig(type="qte"))
    assert controller.is_pending
    assert controller.start()
    assert controller.is_playing

    assert controller.finish(True) == 1
    assert controller.state == "idle"
    assert controller.config is None
    assert controller.last_result == 1
    assert results == [1]


def test_finish_normalizes_losses() -> None:
    controller = MinigameController()

    assert controller.finish(False) == 0
    assert controller.finish(5) == 0
    assert controller.finish(1) == 1


def test_start_requires_pending() -> None:
    controller = MinigameController()

    assert controller.start() is False
    assert controller.state == "idle"


def test_cancel_does_not_report() -> None:
    results: List[int] = []
    controller = MinigameController(on_result=results.append)
    controller.queue(MinigameConfig(type="lockpick"))
    controller.start()

    controller.cancel()

    assert controller.state == "idle"
    assert results == []
