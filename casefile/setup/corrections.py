import re

from casefile.prompts.templates import RETRY_PROMPT

_COUNT_RE = re.compile(
    r"Not enough (?P<category>\w+) \(minimum (?P<minimum>\d+) required, found (?P<actual>\d+)\)"
)

_COUNT_DETAILS = {
    "locations": "with connections to existing locations",
    "characters": "including suspects and witnesses",
    "clues": "including physical evidence and testimony",
}


def build_correction(message: str) -> str:
    """
    Maps a validation failure message to a targeted instruction for the next
    generation attempt. Pure: depends only on the message text.
    """
    match = _COUNT_RE.search(message)
    if match:
        category = match.group("category")
        missing = int(match.group("minimum")) - int(match.group("actual"))
        detail = _COUNT_DETAILS.get(category, "")
        return f"- Add {missing} more {category} {detail}".rstrip()

    if "not found in characters" in message:
        return (
            f"- FIX culprit reference: {message}\n"
            "  Ensure the culpritId matches an existing character ID, or add the culprit as a character"
        )

    if "references non-existent" in message:
        return (
            f"- FIX invalid references: {message}\n"
            "  Either add the missing entity with exactly that ID or update the reference to an existing ID"
        )

    if "Missing or invalid" in message or "Invalid entry" in message:
        return (
            f"- FIX structural issue: {message}\n"
            "  Return every required section: locations, characters, clues (arrays of objects), mystery and solution (objects)"
        )

    return f"- FIX: {message}"


def create_retry_prompt(correction: str) -> str:
    return RETRY_PROMPT.format(corrections=correction)
