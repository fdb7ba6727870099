"""Character catalog: the placeable marker types.

Each type carries its symbol, colour and a placement-count hint. Counts are
informational unless a grid is built with ``enforce_limits=True``.
"""

from story_grid.models import CharacterType

PLACEHOLDER_SYMBOL = "?"
PLACEHOLDER_COLOR = "#000000"

CHESS_CHARACTERS: tuple[CharacterType, ...] = (
    CharacterType(type="queen", symbol="♕", color="#ff9f43", max_count=2),
    CharacterType(type="knight", symbol="♘", color="#10b981", max_count=3),
    CharacterType(type="pawn", symbol="♙", color="#4fc3f7"),
)

_BY_TYPE = {c.type: c for c in CHESS_CHARACTERS}


def lookup(type: str) -> CharacterType | None:
    """Return the catalog entry for a type tag, or None if unknown."""
    return _BY_TYPE.get(type)


def display_attributes(type: str) -> tuple[str, str]:
    """(symbol, color) for a type, falling back to the placeholder glyph."""
    character = lookup(type)
    if character is None:
        return PLACEHOLDER_SYMBOL, PLACEHOLDER_COLOR
    return character.symbol, character.color
