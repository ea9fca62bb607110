import json
import logging
import threading
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError

from casefile.constants import (
    GENERATION_TEMPERATURE,
    JUDGE_CHARACTER_ID,
    MAX_GENERATION_ATTEMPTS,
    MIN_CHARACTERS,
    MIN_CLUES,
    MIN_LOCATIONS,
)
from casefile.errors import WorldGenerationError, WorldValidationError
from casefile.llm.llm_connector import LLMConnector
from casefile.llm.schemas import WORLD_GENERATION_SCHEMA
from casefile.media.providers import VoiceOption
from casefile.models.message import Message
from casefile.models.world import World, WorldPayload, serialize_world
from casefile.prompts.templates import (
    DEFAULT_WORLD_REQUEST,
    VOICE_RULES,
    WORLD_GENERATION_SYSTEM_PROMPT,
)
from casefile.setup.corrections import build_correction, create_retry_prompt
from casefile.setup.world_validator import INVALID_DATA, validate_world

logger = logging.getLogger(__name__)

PersistSink = Callable[[Dict[str, Any]], Any]
Scheduler = Callable[[Callable[[], None]], Any]


def run_in_background(task: Callable[[], None]) -> threading.Thread:
    thread = threading.Thread(target=task, daemon=True, name="WorldPersist")
    thread.start()
    return thread


def run_inline(task: Callable[[], None]):
    task()


def format_voice_catalog(voices: List[VoiceOption]) -> str:
    lines = ["Available voices:", ""]
    for voice in voices:
        lines.append(f"Voice ID: {voice.voice_id}")
        lines.append(f"Voice Name: {voice.name}")
        if voice.labels:
            lines.append(f"Voice Labels: {', '.join(voice.labels)}")
        lines.append("")
    return "\n".join(lines)


def build_world_generation_system_prompt(
    voices: Optional[List[VoiceOption]] = None,
) -> str:
    voice_rules = ""
    if voices:
        voice_rules = VOICE_RULES.format(available_voices=format_voice_catalog(voices))
    return WORLD_GENERATION_SYSTEM_PROMPT.format(
        min_characters=MIN_CHARACTERS,
        max_characters=MIN_CHARACTERS + 2,
        min_locations=MIN_LOCATIONS,
        max_locations=MIN_LOCATIONS + 3,
        min_clues=MIN_CLUES,
        max_clues=MIN_CLUES + 5,
        judge_id=JUDGE_CHARACTER_ID,
        voice_rules=voice_rules,
    )


class WorldGenService:
    """
    Generates a world with a bounded repair loop.

    Each failed candidate is fed back to the model together with a correction
    naming what to add or fix, so later attempts build on earlier content
    instead of starting over.
    """

    def __init__(
        self,
        llm_connector: LLMConnector,
        model: Optional[str] = None,
        max_attempts: int = MAX_GENERATION_ATTEMPTS,
        persist_sink: Optional[PersistSink] = None,
        scheduler: Scheduler = run_in_background,
        illustrator: Optional[Callable[[World], World]] = None,
        status_callback: Optional[Callable[[str], None]] = None,
    ):
        self.llm = llm_connector
        self.model = model
        self.max_attempts = max_attempts
        self.persist_sink = persist_sink
        self.scheduler = scheduler
        self.illustrator = illustrator
        self.status_callback = status_callback

    def _update_status(self, msg: str):
        if self.status_callback:
            self.status_callback(msg)
        logger.info(f"[WorldGen] {msg}")

    def _to_world(self, candidate: Dict[str, Any]) -> World:
        try:
            return World.from_payload(WorldPayload.model_validate(candidate))
        except ValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"])
            raise WorldValidationError(
                INVALID_DATA,
                f"Invalid world data at {location}: {first['msg']}",
                field=location,
            ) from e

    def _schedule_persist(self, payload: Dict[str, Any]):
        if self.persist_sink is None:
            return
        sink = self.persist_sink

        def task():
            try:
                sink(payload)
            except Exception as e:
                logger.error(f"Failed to persist generated world: {e}", exc_info=True)

        self.scheduler(task)

    def generate_world(
        self,
        theme: Optional[str] = None,
        voices: Optional[List[VoiceOption]] = None,
    ) -> World:
        messages: List[Message] = [
            Message(role="system", content=build_world_generation_system_prompt(voices)),
            Message(role="user", content=theme or DEFAULT_WORLD_REQUEST),
        ]
        last_error: Optional[WorldValidationError] = None

        for attempt in range(1, self.max_attempts + 1):
            self._update_status(f"Attempt {attempt} of {self.max_attempts} to generate a valid world")

            # CompletionError propagates; only validation failures are repaired.
            candidate = self.llm.get_structured_response(
                messages,
                WORLD_GENERATION_SCHEMA,
                model=self.model,
                temperature=GENERATION_TEMPERATURE,
            )

            try:
                validate_world(candidate)
                world = self._to_world(candidate)
            except WorldValidationError as e:
                last_error = e
                logger.warning(f"Attempt {attempt} failed: {e.message}")
                messages.append(Message(role="assistant", content=json.dumps(candidate)))
                messages.append(
                    Message(role="user", content=create_retry_prompt(build_correction(e.message)))
                )
                continue

            self._update_status(
                f"World validated after {attempt} attempt{'s' if attempt > 1 else ''}: "
                f"{len(world.locations)} locations, {len(world.characters)} characters, "
                f"{len(world.clues)} clues"
            )
            if self.illustrator is not None:
                self._update_status("Generating images...")
                world = self.illustrator(world)
            self._schedule_persist(serialize_world(world))
            return world

        logger.error("Max attempts reached. Failed to generate valid world.")
        raise WorldGenerationError(self.max_attempts, last_error)
