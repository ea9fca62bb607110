from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Type, Union

from pydantic import BaseModel, TypeAdapter

from casefile.models.message import Message


@dataclass
class ResponseSchema:
    """A named JSON schema the provider must conform its output to."""

    name: str
    schema: Dict[str, Any]
    strict: bool = True

    @classmethod
    def from_model(
        cls,
        name: str,
        model: Union[Type[BaseModel], TypeAdapter],
        exclude_fields: Iterable[str] = (),
    ) -> "ResponseSchema":
        if isinstance(model, TypeAdapter):
            schema = model.json_schema(by_alias=True)
        else:
            schema = model.model_json_schema(by_alias=True)
        _strictify(schema, set(exclude_fields))
        return cls(name=name, schema=schema)

    def to_openai(self) -> Dict[str, Any]:
        return {"name": self.name, "strict": self.strict, "schema": self.schema}


def _strictify(schema: Any, exclude: set):
    """
    Recursively removes 'title' and 'default', drops excluded properties, and
    closes every object so strict structured-output backends accept it.
    """
    if isinstance(schema, dict):
        schema.pop("title", None)
        schema.pop("default", None)
        props = schema.get("properties")
        if isinstance(props, dict):
            for name in exclude:
                props.pop(name, None)
            schema["required"] = list(props.keys())
            schema["additionalProperties"] = False
        for key, value in schema.items():
            # Keys of these mappings are names, not schema keywords.
            if key in ("properties", "$defs") and isinstance(value, dict):
                for sub in value.values():
                    _strictify(sub, exclude)
            else:
                _strictify(value, exclude)
    elif isinstance(schema, list):
        for item in schema:
            _strictify(item, exclude)


class LLMConnector(ABC):
    """
    One outbound call per method invocation; no retries at this layer.

    Every failure is raised as a CompletionError so callers can apply a single
    retry/repair policy.
    """

    default_model: str = ""

    @abstractmethod
    def get_text_response(
        self,
        messages: List[Message],
        model: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> str:
        pass

    @abstractmethod
    def get_structured_response(
        self,
        messages: List[Message],
        response_schema: ResponseSchema,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> Union[Dict[str, Any], List[Any]]:
        """Returns the parsed JSON object or array. Raises CompletionDecodeError on bad JSON."""
        pass
