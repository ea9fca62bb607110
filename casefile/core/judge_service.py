import json
import logging
from typing import List, Optional

from pydantic import ValidationError

from casefile.constants import JUDGE_CHARACTER_ID
from casefile.core.prompt_context import render_clues
from casefile.errors import CompletionDecodeError
from casefile.llm.llm_connector import LLMConnector
from casefile.llm.schemas import VERDICT_SCHEMA, Verdict
from casefile.models.game_state import GameState
from casefile.models.message import Message
from casefile.models.world import World
from casefile.prompts.templates import JUDGE_SYSTEM_PROMPT

logger = logging.getLogger(__name__)


def build_judge_prompt(world: World, state: GameState) -> str:
    culprit = world.get_character(world.solution.culprit_id)
    return JUDGE_SYSTEM_PROMPT.format(
        world=world.to_prompt_json(include_solution=True),
        culprit_name=culprit.name if culprit else "Unknown",
        culprit_id=world.solution.culprit_id,
        motive=world.solution.motive,
        method=world.solution.method,
        known_clues=render_clues(world, state.clues_found),
    )


class JudgeService:
    """
    Adjudicates solve attempts.

    Only appends to the judge's dialogue history; applying the verdict to
    ``state.solved`` is left to the caller.
    """

    def __init__(self, llm: LLMConnector, model: Optional[str] = None):
        self.llm = llm
        self.model = model

    def attempt_solve(self, world: World, state: GameState, input: str) -> Verdict:
        history = state.history_for(JUDGE_CHARACTER_ID)
        history.append(Message(role="user", content=input))

        messages: List[Message] = [
            Message(role="system", content=build_judge_prompt(world, state)),
            *history,
        ]
        raw = self.llm.get_structured_response(messages, VERDICT_SCHEMA, model=self.model)

        try:
            verdict = Verdict.model_validate(raw)
        except ValidationError as e:
            raise CompletionDecodeError(
                f"Judge returned an invalid verdict: {e}", raw_content=json.dumps(raw)
            ) from e

        history.append(Message(role="assistant", content=verdict.response))
        logger.info(f"Solve attempt judged: solved={verdict.solved}")
        return verdict
