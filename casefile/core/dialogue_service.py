import logging
from dataclasses import dataclass
from typing import List, Optional

from casefile.constants import VICTIM_REFUSAL
from casefile.core.prompt_context import render_clues, render_memories
from casefile.core.state_extractor import StateExtractor
from casefile.llm.llm_connector import LLMConnector
from casefile.models.game_state import GameState
from casefile.models.message import Message
from casefile.models.world import Character, World
from casefile.prompts.templates import (
    CHARACTER_SYSTEM_PROMPT,
    SUSPECT_GUIDANCE,
    WITNESS_GUIDANCE,
)

logger = logging.getLogger(__name__)


@dataclass
class DialogueTurn:
    response: str
    state: GameState


def _crime_details(world: World) -> str:
    lines = []
    if world.mystery.time:
        lines.append(f"The time of the crime is: {world.mystery.time}")
    if world.mystery.location_id:
        scene = world.get_location(world.mystery.location_id)
        if scene is not None:
            lines.append(f"The location of the crime is: {scene.name}, {scene.description}")
    return "\n".join(lines)


def build_character_prompt(character: Character, world: World, state: GameState) -> str:
    """System prompt for an in-character reply. Never includes the solution."""
    character_clues = ", ".join(world.clue_names(character.known_clues))
    found_clue_names = ", ".join(world.clue_names(state.clues_found))

    prompt = CHARACTER_SYSTEM_PROMPT.format(
        name=character.name,
        description=character.description,
        personality=character.personality,
        role=character.role,
        title=world.mystery.title,
        mystery_description=world.mystery.description,
        victim=world.mystery.victim,
        crime=world.mystery.crime,
        crime_details=_crime_details(world),
        world=world.to_prompt_json(include_solution=False),
        memories=render_memories(state),
        known_clues=render_clues(world, state.clues_found),
        alibi=character.alibi or "No alibi provided",
        character_clues=character_clues or "No specific clues",
        found_clue_names=found_clue_names or "No clues yet",
    )
    guidance = SUSPECT_GUIDANCE if character.role == "suspect" else WITNESS_GUIDANCE
    return prompt + "\n" + guidance


class DialogueService:
    def __init__(
        self,
        llm: LLMConnector,
        extractor: StateExtractor,
        model: Optional[str] = None,
    ):
        self.llm = llm
        self.extractor = extractor
        self.model = model

    def get_next_dialogue_with_character(
        self,
        character: Character,
        world: World,
        state: GameState,
        input: Optional[str] = None,
    ) -> DialogueTurn:
        """
        Generates the character's next line and folds any revealed clues and
        new memories into ``state``.

        The response can be empty; callers should treat that as no response.
        """
        if character.role == "victim":
            return DialogueTurn(response=VICTIM_REFUSAL, state=state)

        history = state.history_for(character.id)

        messages: List[Message] = [
            Message(role="system", content=build_character_prompt(character, world, state)),
            *history,
        ]
        if input:
            messages.append(Message(role="user", content=input))

        response = self.llm.get_text_response(messages, model=self.model)
        logger.debug(f"{character.id} replied with {len(response)} characters")

        if input:
            history.append(Message(role="user", content=input))
        history.append(Message(role="assistant", content=response))

        self.extractor.update_game_state(world, state)
        return DialogueTurn(response=response, state=state)
