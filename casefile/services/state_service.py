"""
Game state transitions.

Modes are derived from the flags on GameState:
  IDLE        not conversing, not solving
  CONVERSING  talking to state.current_character
  SOLVING     presenting a solution to the judge

Solving is exclusive: entering it ends any conversation. All transitions are
initiated by the caller; nothing here is triggered by dialogue content.
"""

import logging

from casefile.constants import JUDGE_CHARACTER_ID
from casefile.errors import InvalidTransitionError
from casefile.llm.schemas import Verdict
from casefile.models.game_state import GameMode, GameState
from casefile.models.ids import CharacterID, ClueID, LocationID
from casefile.models.world import World

logger = logging.getLogger(__name__)


def current_mode(state: GameState) -> GameMode:
    if state.is_solving:
        return GameMode.SOLVING
    if state.is_in_conversation and state.current_character is not None:
        return GameMode.CONVERSING
    return GameMode.IDLE


def start_conversation(state: GameState, character_id: CharacterID) -> GameState:
    """
    Idle|Conversing -> Conversing(character_id).

    Does not check the character's role; callers must reject victims first.
    """
    if state.is_solving:
        raise InvalidTransitionError("Cannot start a conversation while solving; leave first.")
    if character_id == JUDGE_CHARACTER_ID:
        raise InvalidTransitionError("The judge is only reachable through a solve attempt.")
    state.current_character = character_id
    state.is_in_conversation = True
    return state


def leave(state: GameState) -> GameState:
    """Any mode -> Idle."""
    state.current_character = None
    state.is_in_conversation = False
    state.is_solving = False
    return state


def begin_solving(state: GameState) -> GameState:
    """Idle|Conversing -> Solving. Ends the current conversation."""
    state.current_character = None
    state.is_in_conversation = False
    state.is_solving = True
    return state


def move_to(state: GameState, location_id: LocationID) -> GameState:
    state.current_location = location_id
    return state


def reveal_clue(world: World, state: GameState, clue_id: ClueID) -> bool:
    """
    Adds a clue to the player's findings. Unknown ids are ignored and repeated
    reveals are no-ops. Returns True only if the clue was newly added.
    """
    if world.get_clue(clue_id) is None:
        logger.debug(f"Ignoring reveal of unknown clue {clue_id}")
        return False
    if clue_id in state.clues_found:
        return False
    state.clues_found.append(clue_id)
    logger.info(f"Clue revealed: {clue_id}")
    return True


def apply_verdict(state: GameState, verdict: Verdict) -> GameState:
    """A solved verdict closes the case; an unsolved one leaves the player solving."""
    if verdict.solved:
        state.solved = True
        state.is_solving = False
    return state
