"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    """
    Simplified end conditions: there is no attack-based check detection.
    CHECKMATE means a side lost its King, STALEMATE means only the two Kings are left.
    """

    ONGOING = "Ongoing"
    CHECKMATE = "Checkmate"
    STALEMATE = "Stalemate"


class Side(StrEnum):
    WHITE = "White"
    BLACK = "Black"

    @property
    def opponent(self) -> "Side":
        return Side.BLACK if self == Side.WHITE else Side.WHITE


class PromotionPolicy(StrEnum):
    """
    How a pawn reaching the last rank gets promoted.

    AUTO_QUEEN: always a Queen, any requested piece is ignored (the behaviour persisted games were played with).
    HONOR_HINT: use the requested piece letter, falling back to a Queen when none / an unknown one is given.
    """

    AUTO_QUEEN = "auto_queen"
    HONOR_HINT = "honor_hint"
