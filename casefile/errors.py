from typing import Optional


class CasefileError(Exception):
    """Base class for all engine errors."""


class CompletionError(CasefileError):
    """Transport or provider failure while talking to a completion provider."""


class MissingCredentialError(CompletionError):
    pass


class CompletionDecodeError(CompletionError):
    """The provider answered, but the structured output was not valid JSON."""

    def __init__(self, message: str, raw_content: Optional[str] = None):
        super().__init__(message)
        self.raw_content = raw_content


class WorldValidationError(CasefileError, ValueError):
    """A generated world payload failed a structural or referential check."""

    def __init__(
        self,
        kind: str,
        message: str,
        field: Optional[str] = None,
        suggestion: Optional[str] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.field = field
        self.suggestion = suggestion


class WorldGenerationError(CasefileError):
    """The repair loop ran out of attempts without producing a valid world."""

    def __init__(self, attempts: int, last_error: Optional[WorldValidationError]):
        detail = last_error.message if last_error else "no candidate produced"
        super().__init__(
            f"Failed to generate valid world after {attempts} attempts: {detail}"
        )
        self.attempts = attempts
        self.last_error = last_error


class InvalidTransitionError(CasefileError, ValueError):
    pass
