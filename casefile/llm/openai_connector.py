import json
import logging
from typing import Any, Dict, List, Optional, Union

import openai

from casefile.config import OPENROUTER_BASE_URL
from casefile.constants import DEFAULT_MODEL
from casefile.errors import (
    CompletionDecodeError,
    CompletionError,
    MissingCredentialError,
)
from casefile.llm.llm_connector import LLMConnector, ResponseSchema
from casefile.models.message import Message

logger = logging.getLogger(__name__)


class OpenAIConnector(LLMConnector):
    """
    Chat completions against any OpenAI-compatible endpoint (OpenRouter by default).

    Reference : https://openrouter.ai/docs/api-reference/chat-completion
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: Optional[str] = OPENROUTER_BASE_URL,
        model: Optional[str] = None,
        client: Optional[openai.OpenAI] = None,
    ):
        if not api_key:
            logger.error("No API key configured for the completion provider.")
            raise MissingCredentialError("Completion provider API key is required.")
        self.default_model = model or DEFAULT_MODEL
        # Retry policy belongs to callers.
        self.client = client or openai.OpenAI(
            api_key=api_key, base_url=base_url, max_retries=0
        )

    def _convert_messages(self, messages: List[Message]) -> List[Dict[str, Any]]:
        return [{"role": m.role, "content": m.content} for m in messages]

    def _complete(
        self,
        messages: List[Message],
        model: Optional[str],
        temperature: Optional[float],
        response_format: Optional[Dict[str, Any]] = None,
    ) -> str:
        kwargs: Dict[str, Any] = {
            "model": model or self.default_model,
            "messages": self._convert_messages(messages),
        }
        if temperature is not None:
            kwargs["temperature"] = temperature
        if response_format is not None:
            kwargs["response_format"] = response_format

        try:
            resp = self.client.chat.completions.create(**kwargs)
        except openai.APIStatusError as e:
            body = e.body if e.body is not None else e.message
            logger.error(f"Provider returned HTTP {e.status_code}: {body}")
            raise CompletionError(
                f"Completion API error: {e.status_code} {json.dumps(body, default=str)}"
            ) from e
        except openai.OpenAIError as e:
            logger.error(f"Completion request failed: {e}")
            raise CompletionError(f"Completion request failed: {e}") from e

        # OpenRouter can report failures inside a 200 response.
        error = getattr(resp, "error", None)
        if error:
            message = error.get("message") if isinstance(error, dict) else str(error)
            logger.error(f"Provider reported an error: {error}")
            raise CompletionError(f"Completion API error: {message}")

        if not resp.choices or resp.choices[0].message is None:
            raise CompletionError("Invalid response format from completion API")

        content = resp.choices[0].message.content
        if content is None:
            raise CompletionError("Invalid response format from completion API")
        return content

    def get_text_response(
        self,
        messages: List[Message],
        model: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> str:
        return self._complete(messages, model, temperature)

    def get_structured_response(
        self,
        messages: List[Message],
        response_schema: ResponseSchema,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> Union[Dict[str, Any], List[Any]]:
        content = self._complete(
            messages,
            model,
            temperature,
            response_format={
                "type": "json_schema",
                "json_schema": response_schema.to_openai(),
            },
        )
        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            logger.error(f"JSON decode error in structured response: {e}")
            logger.error(f"Raw content: {content}")
            raise CompletionDecodeError(
                f"Structured response '{response_schema.name}' is not valid JSON: {e}",
                raw_content=content,
            ) from e
