import json

from room_policy import RoomPolicyTable
from schemas.rooms import RoomPolicy


def test_load_from_file(tmp_path):
    path = tmp_path / "room_pwd.json"
    path.write_text(json.dumps([
        {"roomId": "abc", "pwd": "secret", "turns": 2},
        {"roomId": "team", "pwd": "Hunter2", "turns": 1},
    ]))

    table = RoomPolicyTable.from_file(str(path))

    assert len(table) == 2
    assert sorted(table.room_ids()) == ["abc", "team"]
    assert table.get("abc") == RoomPolicy(room_id="abc", password="secret", turns=2)


def test_password_is_case_insensitive():
    table = RoomPolicyTable([RoomPolicy(room_id="team", password="Hunter2", turns=1)])

    assert table.granted_turns("team", "hunter2") == 1
    assert table.granted_turns("team", "HUNTER2") == 1


def test_wrong_or_missing_password_grants_nothing():
    table = RoomPolicyTable([RoomPolicy(room_id="abc", password="secret", turns=2)])

    assert table.granted_turns("abc", "wrong") is None
    assert table.granted_turns("abc", None) is None
    assert table.granted_turns("abc", "") is None
    assert table.granted_turns("nope", "secret") is None
    assert table.granted_turns(None, "secret") is None


def test_missing_file_gives_empty_table(tmp_path):
    table = RoomPolicyTable.from_file(str(tmp_path / "absent.json"))
    assert len(table) == 0
    assert RoomPolicyTable.from_file(None).room_ids() == []


def test_unparseable_file_gives_empty_table(tmp_path):
    path = tmp_path / "room_pwd.json"
    path.write_text("{not json")
    assert len(RoomPolicyTable.from_file(str(path))) == 0


def test_non_array_source_gives_empty_table(tmp_path):
    path = tmp_path / "room_pwd.json"
    path.write_text(json.dumps({"roomId": "abc", "pwd": "secret"}))
    assert len(RoomPolicyTable.from_file(str(path))) == 0


def test_invalid_records_are_skipped():
    table = RoomPolicyTable.from_records([
        {"roomId": "abc", "pwd": "secret", "turns": 2},
        {"roomId": "no-password"},
        "garbage",
        {"roomId": "open", "pwd": "x"},
    ])

    assert sorted(table.room_ids()) == ["abc", "open"]
    assert table.get("open") is not None
    assert table.granted_turns("open", "X") is None
