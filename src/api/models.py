"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Side, Status


# --- REQUEST MODELS ---
class GameRequest(BaseModel):
    """Anything that only needs to know which game: state polling, reset, automated move, delete."""

    game_id: UUID


class MoveRequest(BaseModel):
    game_id: UUID
    from_square: str
    to_square: str
    promote_to: Optional[str] = None

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        """
        Structural check only: two characters, a letter and then a number.
        Whether it names a square on the board is up to the game ("Invalid square format").
        """

        def _looks_like_algebraic_notation(value: str) -> bool:
            if len(value) != 2:
                return False

            first_character = value[0]
            second_character = value[1]
            if not (first_character.isalpha() and second_character.isnumeric()):
                return False
            return True

        if not _looks_like_algebraic_notation(value):
            raise InvalidRequestError(f"Cannot interpret {value!r} as a valid square name.")
        return value


class ValidMovesRequest(BaseModel):
    game_id: UUID
    square: str


# --- RESPONSE MODELS ---
class GameStateResponse(BaseModel):
    game_id: UUID
    board: list[str]  # 8 rows of 8 characters, 8th rank first
    turn: Side
    status: Status
    message: str
    last_move: Optional[str]
    white_captures: int
    black_captures: int
    winner: Optional[Side] = None
    # Tell the client to come back for the automated reply
    opponent_pending: bool = False


class ValidMovesResponse(BaseModel):
    game_id: UUID
    square: str
    valid_moves: list[str]
