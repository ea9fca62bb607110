"""Shared renderers for the pieces of game state embedded in prompts."""

import json
from typing import List

from casefile.models.game_state import GameState
from casefile.models.ids import ClueID
from casefile.models.message import Message
from casefile.models.world import World


def render_memories(state: GameState) -> str:
    return json.dumps([m.model_dump() for m in state.memories], indent=4)


def render_clues(world: World, clue_ids: List[ClueID]) -> str:
    clues = [world.clues[cid].to_wire() for cid in clue_ids if cid in world.clues]
    return json.dumps(clues, indent=4)


def render_conversation(history: List[Message]) -> str:
    return json.dumps([m.model_dump() for m in history], indent=4)
