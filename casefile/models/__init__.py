from casefile.models.ids import CharacterID, ClueID, LocationID
from casefile.models.message import Message
from casefile.models.world import (
    Character,
    Clue,
    Location,
    Mystery,
    Solution,
    World,
    WorldPayload,
    deserialize_world,
    serialize_world,
)
from casefile.models.records import GameStateRecord, WorldRecord
from casefile.models.game_state import (
    GameMode,
    GameState,
    Memory,
    construct_game_state,
)

__all__ = [
    "CharacterID",
    "ClueID",
    "LocationID",
    "Message",
    "Character",
    "Clue",
    "Location",
    "Mystery",
    "Solution",
    "World",
    "WorldPayload",
    "deserialize_world",
    "serialize_world",
    "GameMode",
    "GameState",
    "Memory",
    "construct_game_state",
    "GameStateRecord",
    "WorldRecord",
]
