"""
Geometry/Base movement and capturing rules

Key idea: Use strategy pattern to define a legality check for each piece type.

These checks only look at the geometry of the move and the occupancy of the board.
Whose turn it is, and whether the destination holds one of your own pieces, is checked by the game (see game.py) BEFORE calling is_legal().
"""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Self

from src.chess.pieces import KIND_TO_CHAR, Piece, PieceKind, promotion_kind
from src.chess.square import (
    BOARD_SIZE,
    INVALID_SQUARE,
    Square,
    distance,
    file_of,
    from_algebraic,
    is_on_board,
    rank_of,
    to_algebraic,
)
from src.core.exceptions import InvalidSquareError
from src.core.shared_types import Side


class Board(Protocol):
    """Just the parts the legality rules need"""

    def piece(self, square: Square) -> Optional[Piece]: ...


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made"""

    from_square: Square
    to_square: Square
    promote_to: Optional[PieceKind] = None

    @classmethod
    def from_notation(cls, notation: str) -> Self:
        """
        Coordinate notation:
        ---

        examples:
        * "e2e4": move the piece that was on e2 to e4
        * "e7e8q" : (pawn) moves from e7 to e8 and asks to become a queen (the q)

        No capture / check symbols, no disambiguation.
        """
        from_square = from_algebraic(notation[:2])
        to_square = from_algebraic(notation[2:4])
        if INVALID_SQUARE in (from_square, to_square) or len(notation) not in (4, 5):
            raise InvalidSquareError(f"Cannot interpret {notation!r} as a move.")
        promote_to = promotion_kind(notation[4]) if len(notation) == 5 else None
        return cls(from_square, to_square, promote_to)

    def to_notation(self) -> str:
        """Source + destination squares, e.g. 'e2e4'. A requested promotion piece is NOT part of the recorded notation."""
        return f"{to_algebraic(self.from_square)}{to_algebraic(self.to_square)}"

    def to_notation_with_promotion(self) -> str:
        piece_char = KIND_TO_CHAR[self.promote_to] if self.promote_to else ""
        return f"{self.to_notation()}{piece_char}"


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


# Row index grows towards White's side of the board, so White pawns move to lower rank indices.
PAWN_DIRECTION: dict[Side, int] = {Side.WHITE: -1, Side.BLACK: 1}
PAWN_START_RANK: dict[Side, int] = {Side.WHITE: 6, Side.BLACK: 1}
PROMOTION_RANK: dict[Side, int] = {Side.WHITE: 0, Side.BLACK: BOARD_SIZE - 1}


def path_is_clear(from_square: Square, to_square: Square, board: Board) -> bool:
    """
    Line of sight for sliding pieces
    ----

    Walk from the square after from_square towards to_square, and make sure nothing stands in between.
    Both endpoints are excluded: who is standing on the destination is not this function's business.

    Steps are +-1 along a rank, +-8 along a file, +-7 / +-9 along a diagonal.
    NOTE: only meaningful for squares that lie on a common rank, file or diagonal.
    """
    step = _sign(rank_of(to_square) - rank_of(from_square)) * BOARD_SIZE + _sign(
        file_of(to_square) - file_of(from_square)
    )
    square = from_square + step
    while square != to_square:
        if board.piece(square) is not None:
            return False
        square += step
    return True


# --- LEGALITY RULES ---
def is_legal_pawn_move(piece: Piece, from_square: Square, to_square: Square, board: Board) -> bool:
    """
    A pawn:
    - moves by a single square forward onto an empty square.
    - It can move by two in their first move (so when on their starting rank), if both squares are empty
    - takes diagonally (and ONLY moves diagonally when taking)

    NOTE: No en passant.
    """
    direction = PAWN_DIRECTION[piece.side]
    df = file_of(to_square) - file_of(from_square)
    dr = rank_of(to_square) - rank_of(from_square)
    target = board.piece(to_square)

    # single push
    if df == 0 and dr == direction:
        return target is None

    # double push from the starting rank
    if df == 0 and dr == 2 * direction:
        passed_square = from_square + direction * BOARD_SIZE
        on_start_rank = rank_of(from_square) == PAWN_START_RANK[piece.side]
        return on_start_rank and board.piece(passed_square) is None and target is None

    # diagonal capture
    if abs(df) == 1 and dr == direction:
        return target is not None and target.side != piece.side

    return False


def is_legal_knight_move(piece: Piece, from_square: Square, to_square: Square, board: Board) -> bool:
    """Knights jump: one of |delta_rank|, |delta_file| is 1, the other is 2"""
    adf = abs(file_of(to_square) - file_of(from_square))
    adr = abs(rank_of(to_square) - rank_of(from_square))
    return {adf, adr} == {1, 2}


def is_legal_bishop_move(piece: Piece, from_square: Square, to_square: Square, board: Board) -> bool:
    """Bishops move diagonally: |delta_rank| = |delta_file|, with nothing in between"""
    adf = abs(file_of(to_square) - file_of(from_square))
    adr = abs(rank_of(to_square) - rank_of(from_square))
    if adf != adr or adf == 0:
        return False
    return path_is_clear(from_square, to_square, board)


def is_legal_rook_move(piece: Piece, from_square: Square, to_square: Square, board: Board) -> bool:
    """Rooks move either horizontally or vertically, with nothing in between"""
    df = file_of(to_square) - file_of(from_square)
    dr = rank_of(to_square) - rank_of(from_square)
    if (df == 0) == (dr == 0):
        return False
    return path_is_clear(from_square, to_square, board)


def is_legal_queen_move(piece: Piece, from_square: Square, to_square: Square, board: Board) -> bool:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return is_legal_rook_move(piece, from_square, to_square, board) or is_legal_bishop_move(
        piece, from_square, to_square, board
    )


def is_legal_king_move(piece: Piece, from_square: Square, to_square: Square, board: Board) -> bool:
    """
    The king can move by a single square at the time, in any direction.

    No castling.
    """
    return distance(from_square, to_square) == 1


# -- STRATEGY PATTERN: LEGALITY RULES ---
LegalityFn = Callable[[Piece, Square, Square, Board], bool]
LEGALITY_RULES: dict[PieceKind, LegalityFn] = {
    PieceKind.PAWN: is_legal_pawn_move,
    PieceKind.KNIGHT: is_legal_knight_move,
    PieceKind.BISHOP: is_legal_bishop_move,
    PieceKind.ROOK: is_legal_rook_move,
    PieceKind.QUEEN: is_legal_queen_move,
    PieceKind.KING: is_legal_king_move,
}


def is_legal(piece: Piece, from_square: Square, to_square: Square, board: Board) -> bool:
    """
    Can the piece move from from_square to to_square on this board?
    ---

    Pure function: no side effects.
    Does NOT check whose turn it is, or whether to_square holds a piece of the same side.
    """
    if not (is_on_board(from_square) and is_on_board(to_square)):
        return False
    if from_square == to_square:
        return False
    rule = LEGALITY_RULES[piece.kind]
    return rule(piece, from_square, to_square, board)


def valid_destinations(square: Square, board: Board) -> list[Square]:
    """
    Every square the piece standing on `square` may move to, in ascending index order.

    Unlike is_legal(), this DOES exclude squares holding a piece of the same side.
    An empty square has no destinations.
    """
    piece = board.piece(square)
    if piece is None:
        return []

    destinations: list[Square] = []
    for to_square in range(BOARD_SIZE * BOARD_SIZE):
        target = board.piece(to_square)
        if target is not None and target.side == piece.side:
            continue
        if is_legal(piece, square, to_square, board):
            destinations.append(to_square)
    return destinations


def reaches_promotion_rank(piece: Piece, to_square: Square) -> bool:
    """Pawn arriving at the rank farthest from its own start"""
    return piece.kind == PieceKind.PAWN and rank_of(to_square) == PROMOTION_RANK[piece.side]
