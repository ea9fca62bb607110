from typing import Literal
from pydantic import BaseModel, Field


class Message(BaseModel):
    role: Literal["system", "user", "assistant"] = Field(
        ...,
        description="Message role: 'system', 'user' or 'assistant'.",
    )
    content: str = Field(
        "",
        description="Text content of the message.",
    )
