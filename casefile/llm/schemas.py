from typing import List

from pydantic import BaseModel, Field, TypeAdapter

from casefile.llm.llm_connector import ResponseSchema
from casefile.models.world import WorldPayload


class Verdict(BaseModel):
    """The judge's ruling on a solve attempt."""

    solved: bool = Field(
        ..., description="True only if the accusation is correct and adequately evidenced."
    )
    response: str = Field(..., description="The judge's reply, spoken in character.")


class _CharacterMemory(BaseModel):
    origin_id: str
    origin_type: str = Field("character", json_schema_extra={"enum": ["character"]})
    content: str


CLUE_ID_LIST = TypeAdapter(List[str])

WORLD_GENERATION_SCHEMA = ResponseSchema.from_model(
    "mystery", WorldPayload, exclude_fields=("image",)
)
MEMORY_UPDATE_SCHEMA = ResponseSchema.from_model(
    "memory-update", TypeAdapter(List[_CharacterMemory])
)
CLUES_UPDATE_SCHEMA = ResponseSchema.from_model("clues-update", CLUE_ID_LIST)
VERDICT_SCHEMA = ResponseSchema.from_model("attempt-solve-response", Verdict)
