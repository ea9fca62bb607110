import os
from dataclasses import dataclass
from typing import Optional

from casefile.constants import MAX_GENERATION_ATTEMPTS

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


@dataclass
class Settings:
    """Runtime configuration, normally populated from the environment."""

    llm_provider: str = "OPENROUTER"
    api_key: Optional[str] = None
    base_url: Optional[str] = OPENROUTER_BASE_URL
    model: Optional[str] = None
    db_path: str = "casefile.db"
    media_dir: str = "media"
    max_generation_attempts: int = MAX_GENERATION_ATTEMPTS

    @classmethod
    def from_env(cls) -> "Settings":
        provider = os.environ.get("LLM_PROVIDER", "OPENROUTER").upper()

        if provider == "GEMINI":
            api_key = os.environ.get("GEMINI_API_KEY")
            base_url = None
        elif provider == "OPENAI":
            api_key = os.environ.get("OPENAI_API_KEY")
            base_url = os.environ.get("OPENAI_API_BASE_URL")
        else:
            api_key = os.environ.get("OPENROUTER_API_KEY")
            base_url = os.environ.get("OPENROUTER_API_BASE_URL", OPENROUTER_BASE_URL)

        return cls(
            llm_provider=provider,
            api_key=api_key,
            base_url=base_url,
            model=os.environ.get("CASEFILE_MODEL") or None,
            db_path=os.environ.get("CASEFILE_DB_PATH", "casefile.db"),
            media_dir=os.environ.get("CASEFILE_MEDIA_DIR", "media"),
            max_generation_attempts=int(
                os.environ.get(
                    "CASEFILE_MAX_GENERATION_ATTEMPTS", MAX_GENERATION_ATTEMPTS
                )
            ),
        )
