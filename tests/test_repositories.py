import sqlite3

import pytest

from casefile.database.db_manager import DBManager


@pytest.fixture
def db(tmp_path):
    with DBManager(str(tmp_path / "test.db")) as manager:
        manager.create_tables()
        yield manager


def test_create_and_get_world(db, payload):
    record = db.worlds.create("alice", payload)

    assert record.title == "Death at the Manor"
    assert record.description == "A host dies during a dinner party."
    assert record.payload_dict() == payload
    assert db.worlds.get(record.id).id == record.id


def test_world_id_can_be_assigned(db, payload):
    record = db.worlds.create("alice", payload, world_id="w-1")
    assert record.id == "w-1"


def test_world_description_falls_back_to_long_description(db, payload):
    del payload["mystery"]["shortDescription"]
    record = db.worlds.create("alice", payload)
    assert record.description == "The host was found dead in the library."


def test_worlds_are_scoped_by_owner(db, payload):
    mine = db.worlds.create("alice", payload)
    db.worlds.create("bob", payload)

    assert [r.id for r in db.worlds.list_by_owner("alice")] == [mine.id]
    assert db.worlds.get(mine.id, owner="bob") is None
    assert db.worlds.get(mine.id, owner="alice") is not None


def test_update_world(db, payload):
    record = db.worlds.create("alice", payload)
    payload["mystery"]["title"] = "Death at the Vicarage"

    updated = db.worlds.update(record.id, payload)

    assert updated.title == "Death at the Vicarage"


def test_game_state_lifecycle(db, payload):
    world = db.worlds.create("alice", payload)
    state = db.game_states.create("alice", world.id, {"cluesFound": []})

    db.game_states.update(state.id, {"cluesFound": ["clue-1"]})

    assert db.game_states.get(state.id).payload_dict() == {"cluesFound": ["clue-1"]}
    assert db.game_states.get(state.id, owner="bob") is None
    assert [s.id for s in db.game_states.list_for_world(world.id, "alice")] == [state.id]


def test_game_state_requires_world(db):
    with pytest.raises(sqlite3.IntegrityError):
        db.game_states.create("alice", "missing-world", {})


def test_deleting_world_removes_its_games(db, payload):
    world = db.worlds.create("alice", payload)
    state = db.game_states.create("alice", world.id, {})

    db.worlds.delete(world.id)

    assert db.worlds.get(world.id) is None
    assert db.game_states.get(state.id) is None


def test_create_tables_is_idempotent(tmp_path):
    path = str(tmp_path / "again.db")
    DBManager(path).create_tables()
    DBManager(path).create_tables()
