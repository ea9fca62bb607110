from typing import NewType

# Identifiers are opaque strings, unique only within one world.
LocationID = NewType("LocationID", str)
CharacterID = NewType("CharacterID", str)
ClueID = NewType("ClueID", str)
