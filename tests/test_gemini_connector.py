from types import SimpleNamespace

import httpx
import pytest
from google.genai import errors

from casefile.errors import CompletionDecodeError, CompletionError, MissingCredentialError
from casefile.llm.gemini_connector import GeminiConnector
from casefile.llm.schemas import CLUES_UPDATE_SCHEMA
from casefile.models.message import Message


class FakeModels:
    def __init__(self, result):
        self.result = result
        self.kwargs = None

    def generate_content(self, **kwargs):
        self.kwargs = kwargs
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def _connector(result):
    models = FakeModels(result)
    return GeminiConnector(api_key="k", client=SimpleNamespace(models=models)), models


MESSAGES = [
    Message(role="system", content="You are a butler."),
    Message(role="user", content="Who rang?"),
    Message(role="assistant", content="The colonel, sir."),
]


def test_missing_key():
    with pytest.raises(MissingCredentialError):
        GeminiConnector(api_key=None)


def test_roles_are_mapped():
    connector, models = _connector(SimpleNamespace(text="Indeed."))

    assert connector.get_text_response(MESSAGES, temperature=0.7) == "Indeed."

    contents = models.kwargs["contents"]
    assert [c.role for c in contents] == ["user", "model"]
    config = models.kwargs["config"]
    assert config.system_instruction[0].text == "You are a butler."
    assert config.temperature == 0.7
    assert models.kwargs["model"] == "gemini-2.0-flash"


def test_structured_response():
    connector, models = _connector(SimpleNamespace(text='["clue-1", "clue-2"]'))

    assert connector.get_structured_response(MESSAGES, CLUES_UPDATE_SCHEMA) == ["clue-1", "clue-2"]
    assert models.kwargs["config"].response_mime_type == "application/json"


def test_bad_json():
    connector, _ = _connector(SimpleNamespace(text="clue-1"))
    with pytest.raises(CompletionDecodeError):
        connector.get_structured_response(MESSAGES, CLUES_UPDATE_SCHEMA)


def test_blocked_response():
    connector, _ = _connector(SimpleNamespace(text=None))
    with pytest.raises(CompletionError, match="empty response"):
        connector.get_text_response(MESSAGES)


def test_api_error_is_wrapped():
    error = errors.APIError(500, {"error": {"code": 500, "message": "boom", "status": "INTERNAL"}})
    connector, _ = _connector(error)
    with pytest.raises(CompletionError, match="500"):
        connector.get_text_response(MESSAGES)


@pytest.mark.parametrize(
    "error",
    [
        httpx.ConnectError("connection refused"),
        httpx.ReadTimeout("timed out"),
        ConnectionResetError("reset by peer"),
    ],
)
def test_transport_errors_are_wrapped(error):
    connector, _ = _connector(error)
    with pytest.raises(CompletionError, match="Gemini request failed") as exc:
        connector.get_text_response(MESSAGES)
    assert exc.value.__cause__ is error
