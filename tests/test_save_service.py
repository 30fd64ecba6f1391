import pytest

from storyloom.domain.state import SaveGame
from storyloom.services.errors import SaveLoadError
from storyloom.services.save_service import SaveService


def test_serialize_keeps_snapshot_text_and_burns_together() -> None:
    payload = SaveService().serialize(SaveGame(state='{"n": 1}', text="Hello", burned=["a"]), story_id="demo")

    assert payload["save_version"] == SaveService.SAVE_VERSION
    assert payload["metadata"]["story_id"] == "demo"
    assert payload["metadata"]["preview"] == "Hello"
    assert "saved_at" in payload["metadata"]
    assert payload["state"] == {"snapshot": '{"n": 1}', "text": "Hello", "burned": ["a"]}


def test_deserialize_round_trip() -> None:
    service = SaveService()
    original = SaveGame(state='{"n": 1}', text="Hello", burned=["a", "b"])

    assert service.deserialize(service.serialize(original)) == original


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"save_version": 99, "state": {}},
        {"save_version": 1},
        {"save_version": 1, "state": "nope"},
    ],
)
def test_deserialize_rejects_bad_payloads(payload) -> None:
    with pytest.raises(SaveLoadError):
        SaveService().deserialize(payload)


def test_deserialize_drops_text_without_snapshot() -> None:
    payload = {"save_version": 1, "state": {"snapshot": 12, "text": "Orphaned", "burned": ["a", 3]}}

    save = SaveService().deserialize(payload)

    assert save == SaveGame(state=None, text="", burned=["a"])


def test_deserialize_tolerates_malformed_burns() -> None:
    payload = {"save_version": 1, "state": {"snapshot": "{}", "text": 5, "burned": "a"}}

    assert SaveService().deserialize(payload) == SaveGame(state="{}", text="", burned=[])
