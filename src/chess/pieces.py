"""Defines the types of chess pieces"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Self

from src.core.shared_types import Side


class PieceKind(Enum):
    PAWN = auto()
    KNIGHT = auto()
    BISHOP = auto()
    ROOK = auto()
    QUEEN = auto()
    KING = auto()


# Character used for an empty square in the board serialization
EMPTY_CHAR = "."

CHAR_TO_KIND: dict[str, PieceKind] = {
    "p": PieceKind.PAWN,
    "n": PieceKind.KNIGHT,
    "b": PieceKind.BISHOP,
    "r": PieceKind.ROOK,
    "q": PieceKind.QUEEN,
    "k": PieceKind.KING,
}

KIND_TO_CHAR: dict[PieceKind, str] = {value: key for key, value in CHAR_TO_KIND.items()}


# Worth of a captured piece for the automated opponent. Capturing the King ends the game, so it outweighs everything else.
PIECE_VALUES: dict[PieceKind, int] = {
    PieceKind.PAWN: 1,
    PieceKind.KNIGHT: 3,
    PieceKind.BISHOP: 3,
    PieceKind.ROOK: 5,
    PieceKind.QUEEN: 9,
    PieceKind.KING: 100,
}

PROMOTION_OPTIONS: list[PieceKind] = [
    PieceKind.KNIGHT,
    PieceKind.BISHOP,
    PieceKind.ROOK,
    PieceKind.QUEEN,
]


@dataclass(frozen=True)
class Piece:
    kind: PieceKind
    side: Side

    @property
    def value(self) -> int:
        return PIECE_VALUES[self.kind]

    @classmethod
    def from_char(cls, character: str) -> Self:
        # lower case: Black pieces, upper case: White pieces
        side = Side.WHITE if character.isupper() else Side.BLACK
        kind = CHAR_TO_KIND[character.lower()]
        return cls(kind, side)

    def to_char(self) -> str:
        char = KIND_TO_CHAR[self.kind]
        return char.upper() if self.side == Side.WHITE else char

    def promoted_to(self, kind: PieceKind) -> Self:
        """Pieces are immutable: promotion hands back a new piece of the same side."""
        return type(self)(kind, self.side)


def promotion_kind(letter: Optional[str]) -> Optional[PieceKind]:
    """
    Parse a requested promotion piece. Accepts a letter ('q', 'R', ...) or a full name ('queen').
    Returns None for anything a pawn cannot become.
    """
    if not letter:
        return None
    if len(letter) == 1:
        kind = CHAR_TO_KIND.get(letter.lower())
    else:
        kind = PieceKind.__members__.get(letter.upper())
    return kind if kind in PROMOTION_OPTIONS else None
