import logging
import threading
import uuid
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional

from casefile.config import Settings
from casefile.constants import JUDGE_VOICE_NAME, VICTIM_REFUSAL
from casefile.core.dialogue_service import DialogueService, DialogueTurn
from casefile.core.judge_service import JudgeService
from casefile.core.state_extractor import StateExtractor
from casefile.database.db_manager import DBManager
from casefile.llm.llm_connector import LLMConnector
from casefile.llm.schemas import Verdict
from casefile.media.providers import ImageProvider, MediaStore, VoiceProvider
from casefile.models.game_state import GameState, construct_game_state
from casefile.models.records import GameStateRecord, WorldRecord
from casefile.models.world import World, deserialize_world
from casefile.services import state_service
from casefile.services.media_service import MediaService
from casefile.setup.world_gen_service import Scheduler, WorldGenService, run_in_background

logger = logging.getLogger(__name__)


@dataclass
class GeneratedWorld:
    world_id: str
    world: World


@dataclass
class _PendingWorld:
    """A generated world whose row has not been written yet."""

    owner: str
    world: Optional[World] = None
    followups: List[Callable[[DBManager], None]] = field(default_factory=list)


@dataclass
class Session:
    """A loaded playthrough: the world and the state being advanced."""

    world_id: str
    state_id: str
    world: World
    state: GameState


class MysteryEngine:
    """
    Entry point for callers (API handlers, the console front-end).

    Wires the connector into the generation and gameplay services and
    persists every state change through the store.
    """

    def __init__(
        self,
        llm_connector: LLMConnector,
        settings: Settings,
        image_provider: Optional[ImageProvider] = None,
        voice_provider: Optional[VoiceProvider] = None,
        media_store: Optional[MediaStore] = None,
        scheduler: Scheduler = run_in_background,
    ):
        self.llm = llm_connector
        self.settings = settings
        self.db_path = settings.db_path
        self.scheduler = scheduler
        self._pending: Dict[str, _PendingWorld] = {}
        self._lock = threading.Lock()
        model = settings.model

        self.extractor = StateExtractor(llm_connector, model=model)
        self.dialogue = DialogueService(llm_connector, self.extractor, model=model)
        self.judge = JudgeService(llm_connector, model=model)
        self.media = MediaService(
            llm_connector,
            image_provider=image_provider,
            voice_provider=voice_provider,
            store=media_store,
            model=model,
        )

        with DBManager(self.db_path) as db:
            db.create_tables()

    # --- Worlds ---

    def _available_voices(self):
        if self.media.voice_provider is None:
            return None
        return [
            v for v in self.media.voice_provider.list_voices() if v.name != JUDGE_VOICE_NAME
        ]

    def generate_world(self, owner: str, theme: Optional[str] = None) -> GeneratedWorld:
        """
        Generates, illustrates and stores a new world. The id is assigned up
        front; storage runs on the scheduler and never fails the generation.

        Until the world row lands, ``load_world`` and ``new_game`` serve the
        in-memory world, and game states started on it are written right
        after the world row.
        """
        world_id = uuid.uuid4().hex
        pending = _PendingWorld(owner=owner)
        with self._lock:
            self._pending[world_id] = pending

        def persist(payload):
            stored = False
            try:
                with DBManager(self.db_path) as db:
                    db.worlds.create(owner, payload, world_id=world_id)
                stored = True
                logger.info(f"Stored world {world_id} for {owner}")
            finally:
                with self._lock:
                    self._pending.pop(world_id, None)
            if stored and pending.followups:
                with DBManager(self.db_path) as db:
                    for followup in pending.followups:
                        followup(db)

        service = WorldGenService(
            self.llm,
            model=self.settings.model,
            max_attempts=self.settings.max_generation_attempts,
            persist_sink=persist,
            scheduler=self.scheduler,
            illustrator=self.media.illustrate_world,
        )
        try:
            world = service.generate_world(theme=theme, voices=self._available_voices())
        except Exception:
            with self._lock:
                self._pending.pop(world_id, None)
            raise
        with self._lock:
            if world_id in self._pending:
                pending.world = world
        return GeneratedWorld(world_id=world_id, world=world)

    def _pending_world(self, world_id: str, owner: Optional[str]) -> Optional[_PendingWorld]:
        """Caller must hold ``self._lock``."""
        pending = self._pending.get(world_id)
        if pending is None or pending.world is None:
            return None
        if owner is not None and pending.owner != owner:
            return None
        return pending

    def list_worlds(self, owner: str) -> List[WorldRecord]:
        with DBManager(self.db_path) as db:
            return db.worlds.list_by_owner(owner)

    def load_world(self, world_id: str, owner: Optional[str] = None) -> Optional[World]:
        with self._lock:
            pending = self._pending_world(world_id, owner)
            if pending is not None:
                return pending.world
        with DBManager(self.db_path) as db:
            record = db.worlds.get(world_id, owner)
        return deserialize_world(record.payload_dict()) if record else None

    # --- Sessions ---

    def new_game(self, owner: str, world_id: str) -> Optional[Session]:
        with self._lock:
            pending = self._pending_world(world_id, owner)
            if pending is not None:
                session = Session(
                    world_id=world_id,
                    state_id=uuid.uuid4().hex,
                    world=pending.world,
                    state=construct_game_state(pending.world),
                )
                pending.followups.append(
                    lambda db: db.game_states.create(
                        owner, world_id, session.state.to_payload(), state_id=session.state_id
                    )
                )
                return session

        with DBManager(self.db_path) as db:
            world_record = db.worlds.get(world_id, owner)
            if world_record is None:
                return None
            world = deserialize_world(world_record.payload_dict())
            state = construct_game_state(world)
            state_record = db.game_states.create(owner, world_id, state.to_payload())
        return Session(world_id=world_id, state_id=state_record.id, world=world, state=state)

    def load_game(self, owner: str, state_id: str) -> Optional[Session]:
        with DBManager(self.db_path) as db:
            state_record: Optional[GameStateRecord] = db.game_states.get(state_id, owner)
            if state_record is None:
                return None
            world_record = db.worlds.get(state_record.world_id, owner)
        if world_record is None:
            return None
        return Session(
            world_id=world_record.id,
            state_id=state_record.id,
            world=deserialize_world(world_record.payload_dict()),
            state=GameState.from_payload(state_record.payload_dict()),
        )

    def save(self, session: Session):
        with DBManager(self.db_path) as db:
            db.game_states.update(session.state_id, session.state.to_payload())

    # --- Gameplay ---

    def select_character(self, session: Session, character_id: str) -> Optional[str]:
        """
        Starts a conversation. Returns None on success, or a message explaining
        why the character cannot be addressed.
        """
        character = session.world.get_character(character_id)
        if character is None:
            return f"There is no one called {character_id} here."
        if character.role == "victim":
            return VICTIM_REFUSAL
        state_service.start_conversation(session.state, character.id)
        self.save(session)
        return None

    def leave(self, session: Session):
        state_service.leave(session.state)
        self.save(session)

    def begin_solving(self, session: Session):
        state_service.begin_solving(session.state)
        self.save(session)

    def talk(self, session: Session, input: Optional[str] = None) -> Optional[DialogueTurn]:
        """Next line from the current interlocutor, or None if not in a conversation."""
        if session.state.current_character is None:
            return None
        character = session.world.get_character(session.state.current_character)
        if character is None:
            return None
        turn = self.dialogue.get_next_dialogue_with_character(
            character, session.world, session.state, input
        )
        self.save(session)
        return turn

    def solve(self, session: Session, input: str) -> Verdict:
        """Puts an accusation to the judge and applies the verdict."""
        if not session.state.is_solving:
            state_service.begin_solving(session.state)
        verdict = self.judge.attempt_solve(session.world, session.state, input)
        state_service.apply_verdict(session.state, verdict)
        self.save(session)
        return verdict

    def speak(self, session: Session, character_id: str, text: str) -> Optional[Iterator[bytes]]:
        return self.media.speak(session.world, character_id, text)
