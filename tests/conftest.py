import pytest

from casefile.models.game_state import GameState, construct_game_state
from casefile.models.world import deserialize_world
from fakes import make_world_payload


@pytest.fixture
def payload():
    return make_world_payload()


@pytest.fixture
def world(payload):
    return deserialize_world(payload)


@pytest.fixture
def state(world) -> GameState:
    return construct_game_state(world)
