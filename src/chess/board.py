"""The Game board: storage of the 64 cells, plus the serialization persisted games rely on."""

from dataclasses import dataclass
from typing import Optional, Self

from src.chess.pieces import CHAR_TO_KIND, EMPTY_CHAR, Piece, PieceKind
from src.chess.square import BOARD_SIZE, NUM_SQUARES, Square, is_on_board, to_algebraic
from src.core.exceptions import EmptySquareError, InvalidBoardError, InvalidSquareError
from src.core.shared_types import Side

Cell = Optional[Piece]

STARTING_BOARD = (
    "rnbqkbnr"
    "pppppppp"
    "........"
    "........"
    "........"
    "........"
    "PPPPPPPP"
    "RNBQKBNR"
)


def _check_square(square: Square) -> None:
    if not is_on_board(square):
        raise InvalidSquareError(f"Square index must lie in 0..{NUM_SQUARES - 1}, got {square}")


@dataclass(frozen=True)
class Board:
    """
    Immutable board position.
    ----

    64 cells, row-major: cells[0] is a8, cells[7] is h8, ..., cells[56] is a1, cells[63] is h1.
    A cell is either None (empty) or a Piece.

    NOTE: no castling rights / en passant targets: the simplified rules never need them.
    """

    cells: tuple[Cell, ...]

    def __post_init__(self) -> None:
        if len(self.cells) != NUM_SQUARES:
            raise InvalidBoardError(f"A board needs exactly {NUM_SQUARES} cells, got {len(self.cells)}")

    @classmethod
    def from_string(cls, board_str: str) -> Self:
        """
        Construct a board from its 64-character serialization.

        ex. standard starting position:
        rnbqkbnrpppppppp................................PPPPPPPPRNBQKBNR
        means:
        * the first 8 characters are the 8th rank (a8 through h8): black pieces are lower case
        * '.' marks an empty square
        * the last 8 characters are the 1st rank (a1 through h1): white pieces are upper case
        """
        if len(board_str) != NUM_SQUARES:
            raise InvalidBoardError(
                f"Board string must have {NUM_SQUARES} characters, got {len(board_str)}: {board_str!r}"
            )

        cells: list[Cell] = []
        for character in board_str:
            if character == EMPTY_CHAR:
                cells.append(None)
            elif character.lower() in CHAR_TO_KIND:
                cells.append(Piece.from_char(character))
            else:
                raise InvalidBoardError(f"Unknown character {character!r} in board string {board_str!r}")
        return cls(tuple(cells))

    def to_string(self) -> str:
        return "".join(EMPTY_CHAR if cell is None else cell.to_char() for cell in self.cells)

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_string(STARTING_BOARD)

    def rows(self) -> list[str]:
        """8 strings of 8 characters, top rank (8th) first. For display purposes."""
        board_str = self.to_string()
        return [board_str[row : row + BOARD_SIZE] for row in range(0, NUM_SQUARES, BOARD_SIZE)]

    def piece(self, square: Square) -> Cell:
        _check_square(square)
        return self.cells[square]

    def is_empty(self, square: Square) -> bool:
        return self.piece(square) is None

    def side_of(self, square: Square) -> Side:
        """Side owning the piece on the square. Callers must make sure the square is occupied."""
        piece = self.piece(square)
        if piece is None:
            raise EmptySquareError(f"No piece on {to_algebraic(square)}, so it has no side.")
        return piece.side

    def locate_side(self, side: Side) -> list[Square]:
        """Squares holding a piece of the given side, in ascending index order"""
        return [square for square, cell in enumerate(self.cells) if cell is not None and cell.side == side]

    def count_pieces(self, side: Side) -> int:
        return len(self.locate_side(side))

    def has_king(self, side: Side) -> bool:
        return Piece(PieceKind.KING, side) in self.cells

    def clone_mutable(self) -> "MutableBoard":
        """Independent working copy. Changing it never touches this board."""
        return MutableBoard(list(self.cells))


class MutableBoard:
    """
    Transient working copy used while applying a move.
    ----

    Clone, mutate the clone, then freeze() it into a new immutable Board.
    """

    def __init__(self, cells: list[Cell]) -> None:
        if len(cells) != NUM_SQUARES:
            raise InvalidBoardError(f"A board needs exactly {NUM_SQUARES} cells, got {len(cells)}")
        self._cells = cells

    def piece(self, square: Square) -> Cell:
        _check_square(square)
        return self._cells[square]

    def place_piece(self, piece: Piece, square: Square) -> None:
        _check_square(square)
        self._cells[square] = piece

    def remove_piece(self, square: Square) -> None:
        _check_square(square)
        self._cells[square] = None

    def move_piece(self, from_square: Square, to_square: Square) -> None:
        """Whatever stood on to_square is overwritten (captured)."""
        piece_that_moved = self.piece(from_square)
        if piece_that_moved is None:
            raise EmptySquareError(f"No piece on {to_algebraic(from_square)} to move.")
        self.remove_piece(from_square)
        self.place_piece(piece_that_moved, to_square)

    def freeze(self) -> Board:
        return Board(tuple(self._cells))
