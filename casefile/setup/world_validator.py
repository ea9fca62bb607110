"""
Structural and referential checks for freshly generated world payloads.

Checks run in a fixed order and the first failure is raised; the repair loop
turns that single message into a targeted correction for the next attempt.
"""

import logging
from typing import Any, Dict

from casefile.constants import MIN_CHARACTERS, MIN_CLUES, MIN_LOCATIONS
from casefile.errors import WorldValidationError

logger = logging.getLogger(__name__)

MISSING_STRUCTURE = "MISSING_STRUCTURE"
INSUFFICIENT_COUNT = "INSUFFICIENT_COUNT"
MISSING_CULPRIT = "MISSING_CULPRIT"
INVALID_REFERENCE = "INVALID_REFERENCE"
INVALID_DATA = "INVALID_DATA"

_ARRAYS = ("locations", "characters", "clues")
_OBJECTS = ("mystery", "solution")

# Fields whose entries are ids of other entities.
_REFERENCE_FIELDS = {
    "locations": ("connectedLocations", "clues", "characters"),
    "characters": ("knownClues",),
    "clues": (),
}

_MINIMUMS = {
    "locations": (MIN_LOCATIONS, "with connections to existing locations"),
    "characters": (MIN_CHARACTERS, "including suspects and witnesses"),
    "clues": (MIN_CLUES, "including physical evidence and testimony"),
}


def _check_structure(candidate: Any):
    if not isinstance(candidate, dict):
        raise WorldValidationError(
            MISSING_STRUCTURE,
            "World payload must be a JSON object",
            suggestion="Return a single JSON object with locations, characters, clues, mystery and solution",
        )

    for name in _ARRAYS:
        value = candidate.get(name)
        if not isinstance(value, list):
            raise WorldValidationError(
                MISSING_STRUCTURE,
                f"Missing or invalid {name} array",
                field=name,
                suggestion=f"Provide a valid {name} array",
            )
        for index, entry in enumerate(value):
            if not isinstance(entry, dict):
                raise WorldValidationError(
                    MISSING_STRUCTURE,
                    f"Invalid entry in {name} array at index {index}",
                    field=f"{name}[{index}]",
                    suggestion=f"Every entry in {name} must be an object",
                )

    for name in _OBJECTS:
        if not isinstance(candidate.get(name), dict):
            raise WorldValidationError(
                MISSING_STRUCTURE,
                f"Missing or invalid {name} object",
                field=name,
                suggestion=f"Provide a valid {name} object",
            )

    for name, fields in _REFERENCE_FIELDS.items():
        for index, entry in enumerate(candidate[name]):
            if not isinstance(entry.get("id"), str):
                raise WorldValidationError(
                    MISSING_STRUCTURE,
                    f"Missing or invalid id in {name} array at index {index}",
                    field=f"{name}[{index}].id",
                    suggestion="Every entity needs a string id",
                )
            for ref_field in fields:
                refs = entry.get(ref_field)
                if refs is None:
                    continue
                if not isinstance(refs, list):
                    raise WorldValidationError(
                        MISSING_STRUCTURE,
                        f"Missing or invalid {ref_field} list in {name} entry {entry['id']}",
                        field=f"{name}[{entry['id']}].{ref_field}",
                        suggestion=f"{ref_field} must be an array of id strings",
                    )
                for ref_index, ref in enumerate(refs):
                    if not isinstance(ref, str):
                        raise WorldValidationError(
                            MISSING_STRUCTURE,
                            f"Invalid entry in {ref_field} of {name} entry {entry['id']} at index {ref_index}",
                            field=f"{name}[{entry['id']}].{ref_field}[{ref_index}]",
                            suggestion=f"{ref_field} must contain id strings only",
                        )

    if not isinstance(candidate["solution"].get("culpritId"), str):
        raise WorldValidationError(
            MISSING_STRUCTURE,
            "Missing or invalid culpritId in solution object",
            field="solution.culpritId",
            suggestion="culpritId must be the id string of an existing character",
        )
    crime_scene = candidate["mystery"].get("location_id")
    if crime_scene is not None and not isinstance(crime_scene, str):
        raise WorldValidationError(
            MISSING_STRUCTURE,
            "Missing or invalid location_id in mystery object",
            field="mystery.location_id",
            suggestion="location_id must be the id string of an existing location",
        )


def _check_counts(candidate: Dict[str, Any]):
    for name in _ARRAYS:
        minimum, detail = _MINIMUMS[name]
        actual = len(candidate[name])
        if actual < minimum:
            raise WorldValidationError(
                INSUFFICIENT_COUNT,
                f"Not enough {name} (minimum {minimum} required, found {actual})",
                field=name,
                suggestion=f"Add {minimum - actual} more {name} {detail}",
            )


def _ids(entries) -> set:
    return {entry.get("id") for entry in entries}


def _check_references(candidate: Dict[str, Any]):
    locations = candidate["locations"]
    characters = candidate["characters"]
    location_ids = _ids(locations)
    character_ids = _ids(characters)
    clue_ids = _ids(candidate["clues"])

    culprit_id = candidate["solution"].get("culpritId")
    if culprit_id not in character_ids:
        raise WorldValidationError(
            MISSING_CULPRIT,
            f"Culprit with ID {culprit_id} not found in characters array",
            field="solution.culpritId",
            suggestion="Ensure the culpritId matches an existing character ID",
        )

    # (field on the location, ids it must resolve against, entity noun)
    location_refs = (
        ("connectedLocations", location_ids, "connected location", "location"),
        ("clues", clue_ids, "clue", "clue"),
        ("characters", character_ids, "character", "character"),
    )
    for field, valid_ids, noun, entity in location_refs:
        for loc in locations:
            for ref in loc.get(field) or []:
                if ref not in valid_ids:
                    raise WorldValidationError(
                        INVALID_REFERENCE,
                        f"Location {loc.get('name', loc.get('id'))} references non-existent {noun} {ref}",
                        field=f"locations[{loc.get('id')}].{field}",
                        suggestion=f"Either add the missing {entity} or update the reference to an existing {entity}",
                    )

    for char in characters:
        for ref in char.get("knownClues") or []:
            if ref not in clue_ids:
                raise WorldValidationError(
                    INVALID_REFERENCE,
                    f"Character {char.get('name', char.get('id'))} references non-existent clue {ref}",
                    field=f"characters[{char.get('id')}].knownClues",
                    suggestion="Either add the missing clue or update the reference to an existing clue",
                )

    crime_scene = candidate["mystery"].get("location_id")
    if crime_scene and crime_scene not in location_ids:
        raise WorldValidationError(
            INVALID_REFERENCE,
            f"Mystery references non-existent location {crime_scene}",
            field="mystery.location_id",
            suggestion="Ensure the location_id matches an existing location ID",
        )


def validate_world(candidate: Any) -> None:
    """
    Raises WorldValidationError on the first problem found. Never mutates the
    candidate.
    """
    _check_structure(candidate)
    logger.debug(
        f"Validating world: {len(candidate['locations'])} locations, "
        f"{len(candidate['characters'])} characters, {len(candidate['clues'])} clues"
    )
    _check_counts(candidate)
    _check_references(candidate)
