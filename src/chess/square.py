"""
A square on the board, and its algebraic notation.

(placed in its own module as multiple other modules need to import it)

Squares are plain integers 0..63, stored row-major:
* index 0 is the top-left corner (a8), index 7 is h8
* index 56 is a1, index 63 is the bottom-right corner (h1)

So "rank" below is the ROW index counted from the top (0 = the 8th rank in chess notation).
"""

from string import ascii_lowercase

from src.core.exceptions import InvalidSquareError

# Chess board is always 8x8.
BOARD_SIZE = 8
NUM_SQUARES = BOARD_SIZE * BOARD_SIZE

# Returned by from_algebraic() for anything that does not name a square. Never a valid board index.
INVALID_SQUARE = -1

FILE_NAMES = ascii_lowercase[:BOARD_SIZE]
RANK_NAMES = "".join(str(rank) for rank in range(1, BOARD_SIZE + 1))

Square = int


def is_on_board(square: Square) -> bool:
    return 0 <= square < NUM_SQUARES


def file_of(square: Square) -> int:
    """0 = a-file, 7 = h-file"""
    return square % BOARD_SIZE


def rank_of(square: Square) -> int:
    """Row index counted from the top: 0 = 8th rank, 7 = 1st rank"""
    return square // BOARD_SIZE


def square_at(file: int, rank: int) -> Square:
    return rank * BOARD_SIZE + file


def distance(a: Square, b: Square) -> int:
    """Chebyshev distance: the number of king steps needed to walk from a to b."""
    return max(abs(file_of(a) - file_of(b)), abs(rank_of(a) - rank_of(b)))


def is_valid_square(notation: str) -> bool:
    """Valid square should be a (lower case) letter for the file + a single digit for the rank"""
    if len(notation) != 2:
        return False
    file_char, rank_char = notation[0], notation[1]
    return file_char in FILE_NAMES and rank_char in RANK_NAMES


def from_algebraic(notation: str) -> Square:
    """Algebraic notation: 'a8' - 'h1' get converted to 0 - 63. Anything else becomes INVALID_SQUARE."""
    if not is_valid_square(notation):
        return INVALID_SQUARE
    file = FILE_NAMES.index(notation[0])
    rank = BOARD_SIZE - int(notation[1])
    return square_at(file, rank)


def to_algebraic(square: Square) -> str:
    if not is_on_board(square):
        raise InvalidSquareError(f"Square index must lie in 0..{NUM_SQUARES - 1}, got {square}")
    return f"{FILE_NAMES[file_of(square)]}{BOARD_SIZE - rank_of(square)}"
