import json
import logging
from typing import Any, Dict, List, Optional, Union

import httpx
from google import genai
from google.genai import errors, types

from casefile.constants import DEFAULT_GEMINI_MODEL
from casefile.errors import (
    CompletionDecodeError,
    CompletionError,
    MissingCredentialError,
)
from casefile.llm.llm_connector import LLMConnector, ResponseSchema
from casefile.models.message import Message

logger = logging.getLogger(__name__)


class GeminiConnector(LLMConnector):
    def __init__(
        self,
        api_key: Optional[str],
        model: Optional[str] = None,
        client: Optional[genai.Client] = None,
    ):
        if not api_key:
            logger.error("GEMINI_API_KEY environment variable not set.")
            raise MissingCredentialError("GEMINI_API_KEY environment variable not set.")

        self.default_model = model or DEFAULT_GEMINI_MODEL
        self.client = client or genai.Client(api_key=api_key)
        self.default_safety_settings = [
            types.SafetySetting(category=category, threshold="BLOCK_NONE")
            for category in (
                "HARM_CATEGORY_HARASSMENT",
                "HARM_CATEGORY_HATE_SPEECH",
                "HARM_CATEGORY_SEXUALLY_EXPLICIT",
                "HARM_CATEGORY_DANGEROUS_CONTENT",
            )
        ]

    def _split_messages(self, messages: List[Message]):
        """System turns become the system instruction; the rest become contents."""
        system_parts = []
        contents = []
        for msg in messages:
            if msg.role == "system":
                system_parts.append(msg.content)
            else:
                role = "model" if msg.role == "assistant" else "user"
                contents.append(
                    types.Content(role=role, parts=[types.Part.from_text(text=msg.content)])
                )

        if not contents:
            contents.append(
                types.Content(role="user", parts=[types.Part.from_text(text="Please proceed.")])
            )
        return "\n\n".join(system_parts), contents

    def _generate(
        self,
        messages: List[Message],
        model: Optional[str],
        temperature: Optional[float],
        **config: Any,
    ) -> str:
        system_instruction, contents = self._split_messages(messages)
        if system_instruction:
            config["system_instruction"] = [types.Part.from_text(text=system_instruction)]
        if temperature is not None:
            config["temperature"] = temperature
        config["safety_settings"] = self.default_safety_settings

        try:
            response = self.client.models.generate_content(
                model=model or self.default_model,
                contents=contents,
                config=types.GenerateContentConfig(**config),
            )
        except errors.APIError as e:
            logger.error(f"Gemini API error {e.code}: {e.message}")
            raise CompletionError(f"Gemini API error: {e.code} {e.message}") from e
        except (httpx.HTTPError, OSError) as e:
            logger.error(f"Gemini request failed: {e}")
            raise CompletionError(f"Gemini request failed: {e}") from e

        if response.text is None:
            raise CompletionError("Gemini returned empty response (blocked or error).")
        return response.text

    def get_text_response(
        self,
        messages: List[Message],
        model: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> str:
        return self._generate(messages, model, temperature)

    def get_structured_response(
        self,
        messages: List[Message],
        response_schema: ResponseSchema,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> Union[Dict[str, Any], List[Any]]:
        text = self._generate(
            messages,
            model,
            temperature,
            response_mime_type="application/json",
            response_json_schema=response_schema.schema,
        )
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            logger.error(f"Gemini structured response failure. Raw text: {text}")
            raise CompletionDecodeError(
                f"Failed to parse Gemini response for '{response_schema.name}': {e}",
                raw_content=text,
            ) from e
