import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterator, Optional, Tuple

from casefile.constants import JUDGE_CHARACTER_ID, JUDGE_VOICE_ID
from casefile.llm.llm_connector import LLMConnector
from casefile.media.providers import ImageProvider, MediaStore, VoiceProvider
from casefile.models.ids import CharacterID, ClueID
from casefile.models.message import Message
from casefile.models.world import Character, Clue, World
from casefile.prompts.templates import (
    CHARACTER_IMAGE_PROMPT,
    CLUE_IMAGE_PROMPT,
    STYLE_SEED_PROMPT,
)

logger = logging.getLogger(__name__)


def clue_image_prompt(clue: Clue, style_seed: str = "") -> str:
    return CLUE_IMAGE_PROMPT.format(
        name=clue.name, description=clue.description, style_seed=style_seed
    ).strip()


def character_image_prompt(character: Character, style_seed: str = "") -> str:
    return CHARACTER_IMAGE_PROMPT.format(
        name=character.name,
        description=character.description,
        personality=character.personality,
        style_seed=style_seed,
    ).strip()


def _folder(world: World) -> str:
    return world.mystery.title or "untitled"


class MediaService:
    """Images and speech for a world. Providers are optional; missing ones disable the feature."""

    def __init__(
        self,
        llm: LLMConnector,
        image_provider: Optional[ImageProvider] = None,
        voice_provider: Optional[VoiceProvider] = None,
        store: Optional[MediaStore] = None,
        model: Optional[str] = None,
        max_workers: int = 8,
    ):
        self.llm = llm
        self.image_provider = image_provider
        self.voice_provider = voice_provider
        self.store = store
        self.model = model
        self.max_workers = max_workers

    def generate_style_seed(self, world: World) -> str:
        prompt = STYLE_SEED_PROMPT.format(
            title=world.mystery.title, description=world.mystery.description
        )
        return self.llm.get_text_response(
            [Message(role="system", content=prompt)], model=self.model
        ).strip()

    def _render(self, prompt: str, path: str) -> str:
        image = self.image_provider.generate_image(prompt)
        return self.store.save(image.data, f"{path}.{image.extension}", image.mime)

    def illustrate_world(self, world: World) -> World:
        """
        Generates a portrait per character and an image per physical clue,
        concurrently. Returns a new World with image URIs attached; single
        failures are logged and leave that entity without an image.
        """
        if self.image_provider is None or self.store is None:
            return world

        style_seed = self.generate_style_seed(world)
        folder = _folder(world)

        jobs: Dict[Tuple[str, str], Tuple[str, str]] = {}
        for character in world.characters.values():
            jobs[("character", character.id)] = (
                character_image_prompt(character, style_seed),
                f"{folder}/characters/{character.id}-character-image",
            )
        for clue in world.clues.values():
            if clue.type == "physical":
                jobs[("clue", clue.id)] = (
                    clue_image_prompt(clue, style_seed),
                    f"{folder}/clues/{clue.id}-clue-image",
                )

        character_images: Dict[CharacterID, str] = {}
        clue_images: Dict[ClueID, str] = {}
        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="Image") as pool:
            futures = {key: pool.submit(self._render, *job) for key, job in jobs.items()}
            for (kind, entity_id), future in futures.items():
                try:
                    uri = future.result()
                except Exception as e:
                    logger.error(f"Image generation failed for {kind} {entity_id}: {e}")
                    continue
                if kind == "character":
                    character_images[CharacterID(entity_id)] = uri
                else:
                    clue_images[ClueID(entity_id)] = uri

        logger.info(
            f"Generated {len(character_images)} character images and {len(clue_images)} clue images"
        )
        return world.with_images(character_images, clue_images)

    def voice_for(self, world: World, character_id: str) -> Optional[str]:
        if character_id == JUDGE_CHARACTER_ID:
            return JUDGE_VOICE_ID
        character = world.get_character(character_id)
        return character.voice if character else None

    def speak(self, world: World, character_id: str, text: str) -> Optional[Iterator[bytes]]:
        """Audio stream for ``text`` in the character's voice, or None if unavailable."""
        if self.voice_provider is None:
            return None
        voice = self.voice_for(world, character_id)
        if not voice:
            return None
        return self.voice_provider.stream_speech(voice, text)
