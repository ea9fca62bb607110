import json
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from casefile.models.ids import CharacterID, ClueID, LocationID
from casefile.models.message import Message
from casefile.models.world import World


class GameMode(str, Enum):
    IDLE = "idle"
    CONVERSING = "conversing"
    SOLVING = "solving"


class Memory(BaseModel):
    origin_id: str = Field(..., description="Id of the entity the memory came from.")
    origin_type: str = Field("character", description="Kind of entity, usually character, location or clue.")
    content: str = Field(..., description="A single statement the player has learned.")


class GameState(BaseModel):
    """
    A player's progress through one world.

    Mutated in place by the dialogue, extraction and state services; persisted
    by the caller after every turn.
    """

    model_config = ConfigDict(populate_by_name=True)

    current_location: Optional[LocationID] = Field(None, alias="currentLocation")
    current_character: Optional[CharacterID] = Field(None, alias="currentCharacter")
    clues_found: List[ClueID] = Field(default_factory=list, alias="cluesFound")
    solved: bool = False
    is_in_conversation: bool = Field(False, alias="isInConversation")
    is_solving: bool = Field(False, alias="isSolving")
    memories: List[Memory] = Field(default_factory=list)
    dialogue_history: Dict[CharacterID, List[Message]] = Field(
        default_factory=dict, alias="dialogueHistory"
    )

    @classmethod
    def from_payload(cls, raw: Dict[str, Any]) -> "GameState":
        return cls.model_validate(raw)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")

    def to_prompt_json(self) -> str:
        return json.dumps(self.to_payload(), indent=4)

    def history_for(self, character_id: CharacterID) -> List[Message]:
        """Returns the dialogue bucket for a character, creating it if needed."""
        return self.dialogue_history.setdefault(character_id, [])


def construct_game_state(world: World) -> GameState:
    """Initial state for a new playthrough of ``world``."""
    return GameState()
