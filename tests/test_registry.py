import pytest

from errors import RoomFull
from registry import RoomRegistry
from session import ConnectionSession


def make_session():
    return ConnectionSession(connection=None)


def test_ensure_room_creates_once(registry):
    room = registry.ensure_room("r1")
    assert room.size == 0
    assert registry.ensure_room("r1") is room
    assert [r.room_id for r in registry.list_rooms()] == ["r1"]


def test_add_and_list_participants_keep_join_order(registry):
    registry.add_participant("r1", "a", make_session())
    registry.add_participant("r1", "b", make_session())
    assert [uid for uid, _ in registry.list_participants("r1")] == ["a", "b"]
    assert registry.get_participant("r1", "b").room_id == "r1"


def test_third_distinct_participant_is_rejected(registry):
    registry.add_participant("r1", "a", make_session())
    registry.add_participant("r1", "b", make_session())
    with pytest.raises(RoomFull):
        registry.add_participant("r1", "c", make_session())
    assert [uid for uid, _ in registry.list_participants("r1")] == ["a", "b"]


def test_existing_uid_overwrites_in_full_room(registry):
    registry.add_participant("r1", "a", make_session())
    registry.add_participant("r1", "b", make_session())
    newer = make_session()
    registry.add_participant("r1", "a", newer)
    assert registry.get_participant("r1", "a").session is newer
    assert registry.get_room("r1").size == 2


def test_capacity_is_configurable():
    registry = RoomRegistry(capacity=3)
    for uid in ("a", "b", "c"):
        registry.add_participant("r1", uid, make_session())
    with pytest.raises(RoomFull):
        registry.add_participant("r1", "d", make_session())


def test_remove_participant_keeps_empty_room(registry):
    session = make_session()
    registry.add_participant("r1", "a", session)
    removed = registry.remove_participant("r1", "a")
    assert removed.session is session
    assert registry.get_room("r1") is not None
    assert registry.list_participants("r1") == []


def test_remove_unknown_is_noop(registry):
    assert registry.remove_participant("missing", "a") is None
    registry.ensure_room("r1")
    assert registry.remove_participant("r1", "a") is None


def test_remove_guarded_by_session(registry):
    owner = make_session()
    registry.add_participant("r1", "a", owner)
    assert registry.remove_participant("r1", "a", make_session()) is None
    assert registry.remove_participant("r1", "a", owner) is not None


def test_lookups_on_missing_room(registry):
    assert registry.get_room("nope") is None
    assert registry.get_participant("nope", "a") is None
    assert registry.list_participants("nope") == []


def test_numeric_and_string_ids_are_distinct(registry):
    registry.add_participant(1, "a", make_session())
    assert registry.get_participant("1", "a") is None
    assert registry.get_participant(1, "a") is not None
