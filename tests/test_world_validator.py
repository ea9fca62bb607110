import copy

import pytest

from casefile.errors import WorldValidationError
from casefile.setup.world_validator import validate_world


def test_valid_world_passes(payload):
    validate_world(payload)


def test_validation_does_not_mutate(payload):
    snapshot = copy.deepcopy(payload)
    validate_world(payload)
    assert payload == snapshot


@pytest.mark.parametrize("section", ["locations", "characters", "clues"])
def test_missing_array_is_structural(payload, section):
    del payload[section]
    with pytest.raises(WorldValidationError, match=f"Missing or invalid {section} array") as exc:
        validate_world(payload)
    assert exc.value.kind == "MISSING_STRUCTURE"


@pytest.mark.parametrize("section", ["mystery", "solution"])
def test_non_object_section_is_structural(payload, section):
    payload[section] = ["not", "an", "object"]
    with pytest.raises(WorldValidationError, match=f"Missing or invalid {section} object"):
        validate_world(payload)


def test_array_that_is_not_a_list_is_structural(payload):
    payload["clues"] = {"clue-1": {}}
    with pytest.raises(WorldValidationError, match="Missing or invalid clues array"):
        validate_world(payload)


def test_structure_is_checked_before_counts(payload):
    payload["locations"] = payload["locations"][:2]
    del payload["solution"]
    with pytest.raises(WorldValidationError) as exc:
        validate_world(payload)
    assert exc.value.kind == "MISSING_STRUCTURE"


def test_non_object_entry_is_structural(payload):
    payload["characters"][3] = "char-4"
    with pytest.raises(WorldValidationError, match="Invalid entry in characters array at index 3"):
        validate_world(payload)


def test_payload_must_be_an_object():
    with pytest.raises(WorldValidationError) as exc:
        validate_world([])
    assert exc.value.kind == "MISSING_STRUCTURE"


@pytest.mark.parametrize(
    "section,keep,expected",
    [
        ("locations", 3, "Not enough locations (minimum 5 required, found 3)"),
        ("characters", 7, "Not enough characters (minimum 8 required, found 7)"),
        ("clues", 10, "Not enough clues (minimum 15 required, found 10)"),
    ],
)
def test_count_shortfall_names_category_and_count(payload, section, keep, expected):
    payload[section] = payload[section][:keep]
    with pytest.raises(WorldValidationError) as exc:
        validate_world(payload)
    assert exc.value.kind == "INSUFFICIENT_COUNT"
    assert exc.value.message == expected


def test_counts_are_checked_before_references(payload):
    payload["clues"] = payload["clues"][:14]  # leaves dangling clue-15 references too
    with pytest.raises(WorldValidationError) as exc:
        validate_world(payload)
    assert exc.value.kind == "INSUFFICIENT_COUNT"


def test_unknown_culprit_fails(payload):
    payload["solution"]["culpritId"] = "char-99"
    with pytest.raises(WorldValidationError, match="Culprit with ID char-99 not found") as exc:
        validate_world(payload)
    assert exc.value.kind == "MISSING_CULPRIT"


def test_unknown_culprit_is_reported_before_dangling_references(payload):
    payload["solution"]["culpritId"] = "judge"
    payload["locations"][0]["clues"].append("clue-404")
    with pytest.raises(WorldValidationError) as exc:
        validate_world(payload)
    assert exc.value.kind == "MISSING_CULPRIT"


@pytest.mark.parametrize(
    "mutate,expected",
    [
        (
            lambda p: p["locations"][1]["connectedLocations"].append("loc-404"),
            "Location Room 2 references non-existent connected location loc-404",
        ),
        (
            lambda p: p["locations"][2]["clues"].append("clue-404"),
            "Location Room 3 references non-existent clue clue-404",
        ),
        (
            lambda p: p["locations"][4]["characters"].append("char-404"),
            "Location Room 5 references non-existent character char-404",
        ),
        (
            lambda p: p["characters"][0]["knownClues"].append("clue-404"),
            "Character Person 1 references non-existent clue clue-404",
        ),
        (
            lambda p: p["mystery"].update(location_id="loc-404"),
            "Mystery references non-existent location loc-404",
        ),
    ],
)
def test_dangling_reference_names_offender(payload, mutate, expected):
    mutate(payload)
    with pytest.raises(WorldValidationError) as exc:
        validate_world(payload)
    assert exc.value.kind == "INVALID_REFERENCE"
    assert exc.value.message == expected


def test_missing_known_clues_is_allowed(payload):
    del payload["characters"][0]["knownClues"]
    payload["mystery"].pop("location_id")
    validate_world(payload)


@pytest.mark.parametrize(
    "mutate,expected",
    [
        (
            lambda p: p["solution"].update(culpritId=["char-2"]),
            "Missing or invalid culpritId in solution object",
        ),
        (
            lambda p: p["locations"][0]["clues"].append({"id": "clue-1"}),
            "Invalid entry in clues of locations entry loc-1 at index 3",
        ),
        (
            lambda p: p["locations"][2].update(connectedLocations=[["loc-4"]]),
            "Invalid entry in connectedLocations of locations entry loc-3 at index 0",
        ),
        (
            lambda p: p["characters"][1].update(knownClues=7),
            "Missing or invalid knownClues list in characters entry char-2",
        ),
        (
            lambda p: p["locations"][4].update(characters="char-5"),
            "Missing or invalid characters list in locations entry loc-5",
        ),
        (
            lambda p: p["clues"][6].update(id=["clue-7"]),
            "Missing or invalid id in clues array at index 6",
        ),
        (
            lambda p: p["mystery"].update(location_id={"id": "loc-1"}),
            "Missing or invalid location_id in mystery object",
        ),
    ],
)
def test_badly_typed_ids_and_references_are_structural(payload, mutate, expected):
    mutate(payload)
    with pytest.raises(WorldValidationError) as exc:
        validate_world(payload)
    assert exc.value.kind == "MISSING_STRUCTURE"
    assert exc.value.message == expected


def test_reference_types_are_checked_before_counts(payload):
    payload["clues"] = payload["clues"][:3]
    payload["characters"][0]["knownClues"] = {"clue-1": True}
    with pytest.raises(WorldValidationError) as exc:
        validate_world(payload)
    assert exc.value.kind == "MISSING_STRUCTURE"


def test_null_reference_list_is_allowed(payload):
    payload["characters"][7]["knownClues"] = None
    validate_world(payload)
