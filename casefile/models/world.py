import json
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from casefile.models.ids import CharacterID, ClueID, LocationID


class _WireModel(BaseModel):
    """Base for models stored as camelCase JSON but used with snake_case attributes."""

    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class Location(_WireModel):
    id: LocationID
    name: str
    description: str = ""
    connected_locations: List[LocationID] = Field(
        default_factory=list,
        alias="connectedLocations",
        description="Adjacent locations. Not necessarily symmetric.",
    )
    clues: List[ClueID] = Field(
        default_factory=list, description="Clues discoverable here."
    )
    characters: List[CharacterID] = Field(
        default_factory=list, description="Characters found here."
    )


class Character(_WireModel):
    id: CharacterID
    name: str
    description: str = ""
    personality: str = Field("", description="Free text used to condition dialogue.")
    voice: str = Field("", description="Opaque handle of a speech synthesis voice.")
    role: Literal["suspect", "witness", "victim"]
    alibi: Optional[str] = None
    known_clues: List[ClueID] = Field(default_factory=list, alias="knownClues")
    image: Optional[str] = None


class Clue(_WireModel):
    id: ClueID
    name: str
    description: str = ""
    type: Literal["physical", "testimony", "other"]
    image: Optional[str] = None


class Mystery(_WireModel):
    title: str
    description: str = ""
    short_description: Optional[str] = Field(None, alias="shortDescription")
    victim: str = ""
    crime: str = ""
    time: Optional[str] = None
    location_id: Optional[LocationID] = None


class Solution(_WireModel):
    culprit_id: CharacterID = Field(..., alias="culpritId")
    motive: str = ""
    method: str = ""


class WorldPayload(_WireModel):
    """The array-based shape a world is generated and stored in."""

    locations: List[Location]
    characters: List[Character]
    clues: List[Clue]
    mystery: Mystery
    solution: Solution


class World(BaseModel):
    """
    Runtime view of a world, indexed by id.

    Built from a WorldPayload and treated as read-only during play. Changes
    (e.g. attaching generated images) go through the payload and produce a new
    World instead of editing this one.
    """

    model_config = ConfigDict(frozen=True)

    locations: Dict[LocationID, Location]
    characters: Dict[CharacterID, Character]
    clues: Dict[ClueID, Clue]
    mystery: Mystery
    solution: Solution

    @classmethod
    def from_payload(cls, payload: WorldPayload) -> "World":
        return cls(
            locations={loc.id: loc for loc in payload.locations},
            characters={char.id: char for char in payload.characters},
            clues={clue.id: clue for clue in payload.clues},
            mystery=payload.mystery,
            solution=payload.solution,
        )

    def to_payload(self) -> WorldPayload:
        return WorldPayload(
            locations=list(self.locations.values()),
            characters=list(self.characters.values()),
            clues=list(self.clues.values()),
            mystery=self.mystery,
            solution=self.solution,
        )

    def get_character(self, character_id: str) -> Optional[Character]:
        return self.characters.get(CharacterID(character_id))

    def get_clue(self, clue_id: str) -> Optional[Clue]:
        return self.clues.get(ClueID(clue_id))

    def get_location(self, location_id: str) -> Optional[Location]:
        return self.locations.get(LocationID(location_id))

    def clue_names(self, clue_ids: List[ClueID]) -> List[str]:
        """Names of the given clues, skipping ids that do not resolve."""
        return [self.clues[cid].name for cid in clue_ids if cid in self.clues]

    def to_prompt_json(self, include_solution: bool = False) -> str:
        """
        Serializes the world for embedding in a prompt.

        The solution is only included for the judge; characters must never
        see it.
        """
        data = self.to_payload().to_wire()
        if not include_solution:
            data.pop("solution", None)
        return json.dumps(data, indent=4)

    def with_images(
        self,
        character_images: Dict[CharacterID, str],
        clue_images: Dict[ClueID, str],
    ) -> "World":
        payload = self.to_payload().to_wire()
        for char in payload["characters"]:
            if char["id"] in character_images:
                char["image"] = character_images[char["id"]]
        for clue in payload["clues"]:
            if clue["id"] in clue_images:
                clue["image"] = clue_images[clue["id"]]
        return deserialize_world(payload)


def deserialize_world(raw: Dict[str, Any]) -> World:
    """Builds a World from the stored/generated JSON payload."""
    return World.from_payload(WorldPayload.model_validate(raw))


def serialize_world(world: World) -> Dict[str, Any]:
    return world.to_payload().to_wire()
