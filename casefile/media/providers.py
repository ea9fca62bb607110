from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterator, List


@dataclass
class GeneratedImage:
    data: bytes
    mime: str = "image/png"

    @property
    def extension(self) -> str:
        return self.mime.split("/")[-1] or "png"


@dataclass
class VoiceOption:
    voice_id: str
    name: str
    labels: List[str] = field(default_factory=list)


class ImageProvider(ABC):
    @abstractmethod
    def generate_image(self, prompt: str) -> GeneratedImage:
        pass


class VoiceProvider(ABC):
    @abstractmethod
    def list_voices(self) -> List[VoiceOption]:
        pass

    @abstractmethod
    def stream_speech(self, voice: str, text: str) -> Iterator[bytes]:
        """Yields encoded audio chunks for ``text`` spoken with ``voice``."""
        pass


class MediaStore(ABC):
    @abstractmethod
    def save(self, data: bytes, path: str, mime: str) -> str:
        """Stores ``data`` and returns a URI the front-ends can load."""
        pass
