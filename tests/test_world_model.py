import json

import pytest
from pydantic import ValidationError

from casefile.models.game_state import GameState, construct_game_state
from casefile.models.message import Message
from casefile.models.world import deserialize_world, serialize_world


def test_round_trip_preserves_payload(payload):
    restored = serialize_world(deserialize_world(payload))
    # null fields are omitted on the way out
    del payload["characters"][7]["alibi"]
    assert restored == payload


def test_world_is_indexed_by_id(world):
    assert set(world.locations) == {f"loc-{i}" for i in range(1, 6)}
    assert world.get_character("char-8").role == "victim"
    assert world.get_character("missing") is None
    assert world.get_location("loc-3").connected_locations == ["loc-4"]


def test_prompt_json_hides_solution(world):
    data = json.loads(world.to_prompt_json())
    assert "solution" not in data
    assert "SECRET-MOTIVE" not in world.to_prompt_json()
    assert data["mystery"]["title"] == "Death at the Manor"


def test_prompt_json_can_include_solution(world):
    data = json.loads(world.to_prompt_json(include_solution=True))
    assert data["solution"]["culpritId"] == "char-2"


def test_clue_names_skip_unknown_ids(world):
    assert world.clue_names(["clue-2", "clue-404", "clue-3"]) == ["Clue 2", "Clue 3"]


def test_with_images_returns_new_world(world):
    illustrated = world.with_images({"char-1": "a.png"}, {"clue-1": "b.png"})

    assert illustrated.get_character("char-1").image == "a.png"
    assert illustrated.get_clue("clue-1").image == "b.png"
    assert world.get_character("char-1").image is None
    assert world.get_clue("clue-1").image is None


def test_world_is_frozen(world):
    with pytest.raises(ValidationError):
        world.mystery = None


def test_unknown_role_is_rejected(payload):
    payload["characters"][0]["role"] = "detective"
    with pytest.raises(ValidationError):
        deserialize_world(payload)


def test_initial_game_state(world):
    state = construct_game_state(world)
    assert state.to_payload() == {
        "currentLocation": None,
        "currentCharacter": None,
        "cluesFound": [],
        "solved": False,
        "isInConversation": False,
        "isSolving": False,
        "memories": [],
        "dialogueHistory": {},
    }


def test_game_state_round_trip():
    state = GameState(
        current_character="char-1",
        is_in_conversation=True,
        clues_found=["clue-3"],
    )
    state.history_for("char-1").append(Message(role="user", content="Hello"))

    restored = GameState.from_payload(json.loads(json.dumps(state.to_payload())))

    assert restored == state
    assert restored.dialogue_history["char-1"][0].content == "Hello"


def test_history_for_creates_bucket_once():
    state = GameState()
    bucket = state.history_for("char-5")
    bucket.append(Message(role="assistant", content="Hm."))
    assert state.history_for("char-5") is bucket
    assert len(state.dialogue_history) == 1
