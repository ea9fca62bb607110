import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

from pydantic import ValidationError

from casefile.core.prompt_context import (
    render_clues,
    render_conversation,
    render_memories,
)
from casefile.llm.llm_connector import LLMConnector
from casefile.llm.schemas import CLUES_UPDATE_SCHEMA, MEMORY_UPDATE_SCHEMA
from casefile.models.game_state import GameState, Memory
from casefile.models.ids import ClueID
from casefile.models.message import Message
from casefile.models.world import Character, World
from casefile.prompts.templates import (
    CLUE_EXTRACTION_PROMPT,
    CLUE_EXTRACTION_REQUEST,
    MEMORY_EXTRACTION_PROMPT,
    MEMORY_EXTRACTION_REQUEST,
)
from casefile.services.state_service import reveal_clue

logger = logging.getLogger(__name__)


class StateExtractor:
    """
    Asks the model what changed after a dialogue turn.

    Memory and clue extraction run concurrently. Their results are merged
    into the state only after both calls succeed, so a failed turn leaves
    memories and clues untouched.
    """

    def __init__(self, llm: LLMConnector, model: Optional[str] = None):
        self.llm = llm
        self.model = model

    def _active_character(self, world: World, state: GameState) -> Optional[Character]:
        if not state.is_in_conversation or state.current_character is None:
            return None
        character = world.get_character(state.current_character)
        if character is None or not state.dialogue_history.get(character.id):
            return None
        return character

    def extract_memories(self, world: World, state: GameState, character: Character) -> List[Memory]:
        prompt = MEMORY_EXTRACTION_PROMPT.format(
            world=world.to_prompt_json(include_solution=False),
            memories=render_memories(state),
            known_clues=render_clues(world, state.clues_found),
            name=character.name,
            character_id=character.id,
            conversation=render_conversation(state.dialogue_history[character.id]),
        )
        raw = self.llm.get_structured_response(
            [
                Message(role="system", content=prompt),
                Message(role="user", content=MEMORY_EXTRACTION_REQUEST),
            ],
            MEMORY_UPDATE_SCHEMA,
            model=self.model,
        )
        if not isinstance(raw, list):
            logger.warning(f"Memory extraction returned {type(raw).__name__}, expected a list")
            return []

        memories = []
        for item in raw:
            try:
                memories.append(Memory.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Skipping malformed memory {item!r}: {e}")
        return memories

    def extract_revealed_clues(self, world: World, state: GameState, character: Character) -> List[ClueID]:
        prompt = CLUE_EXTRACTION_PROMPT.format(
            name=character.name,
            character_id=character.id,
            conversation=render_conversation(state.dialogue_history[character.id]),
            character_clues=render_clues(world, character.known_clues),
            known_clues=render_clues(world, state.clues_found),
            world=world.to_prompt_json(include_solution=False),
        )
        raw = self.llm.get_structured_response(
            [
                Message(role="system", content=prompt),
                Message(role="user", content=CLUE_EXTRACTION_REQUEST),
            ],
            CLUES_UPDATE_SCHEMA,
            model=self.model,
        )
        if not isinstance(raw, list):
            logger.warning(f"Clue extraction returned {type(raw).__name__}, expected a list")
            return []
        return [ClueID(item) for item in raw if isinstance(item, str)]

    def update_game_state(self, world: World, state: GameState) -> GameState:
        character = self._active_character(world, state)
        if character is None:
            return state

        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="Extract") as pool:
            memories_future = pool.submit(self.extract_memories, world, state, character)
            clues_future = pool.submit(self.extract_revealed_clues, world, state, character)
            new_memories = memories_future.result()
            revealed = clues_future.result()

        state.memories.extend(new_memories)
        added = [clue_id for clue_id in revealed if reveal_clue(world, state, clue_id)]
        logger.info(
            f"State update after talking to {character.id}: "
            f"{len(new_memories)} new memories, {len(added)} new clues"
        )
        return state
