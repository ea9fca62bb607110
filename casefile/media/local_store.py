import logging
import re
import uuid
from pathlib import Path

from casefile.media.providers import MediaStore

logger = logging.getLogger(__name__)

_UNSAFE = re.compile(r"[^A-Za-z0-9._/-]+")


class LocalMediaStore(MediaStore):
    """Writes media files under a root directory, one random folder per file."""

    def __init__(self, root: str):
        self.root = Path(root)

    def save(self, data: bytes, path: str, mime: str) -> str:
        parts = [p for p in _UNSAFE.sub("_", path).split("/") if p not in ("", ".", "..")] or ["file"]
        target = self.root.joinpath(uuid.uuid4().hex, *parts)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        logger.debug(f"Saved {mime} ({len(data)} bytes) to {target}")
        return target.as_posix()
