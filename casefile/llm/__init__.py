from casefile.config import Settings
from casefile.llm.llm_connector import LLMConnector, ResponseSchema


def get_llm_connector(settings: Settings) -> LLMConnector:
    provider = settings.llm_provider.upper()
    if provider == "GEMINI":
        from casefile.llm.gemini_connector import GeminiConnector

        return GeminiConnector(api_key=settings.api_key, model=settings.model)
    elif provider in ("OPENROUTER", "OPENAI"):
        from casefile.llm.openai_connector import OpenAIConnector

        return OpenAIConnector(
            api_key=settings.api_key, base_url=settings.base_url, model=settings.model
        )
    else:
        raise ValueError(f"Unsupported LLM_PROVIDER: {settings.llm_provider}")


__all__ = ["LLMConnector", "ResponseSchema", "get_llm_connector"]
