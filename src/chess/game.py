"""
The game module is the entrypoint into the domain layer for the service layer.
It is responsible for orchestrating all the business logic required to play a turn of the board game -->
passes this information to the service layer, which can then pass it onwards to the API layer.

Every operation takes an immutable GameSnapshot and hands back a new one: nothing is changed in place.
Storing snapshots between requests (and making sure a single game is not updated twice at the same time) is up to the caller.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Self

from src.chess.board import Board
from src.chess.moves import Move, is_legal, reaches_promotion_rank, valid_destinations
from src.chess.pieces import PieceKind, promotion_kind
from src.chess.square import INVALID_SQUARE, from_algebraic, to_algebraic
from src.core.exceptions import GameStateError
from src.core.models import GameModel
from src.core.shared_types import PromotionPolicy, Side, Status

logger = logging.getLogger(__name__)

# --- OUTCOME MESSAGES ---
# Clients show these to the user / match on them, so keep them stable.
GAME_FINISHED = "Game already finished"
INVALID_SQUARE_FORMAT = "Invalid square format"
NO_PIECE = "No piece on source square"
NOT_YOUR_TURN = "Not your turn"
OWN_PIECE_CAPTURE = "Cannot capture your own piece"
ILLEGAL_MOVE = "Illegal move for that piece"
MOVE_APPLIED = "Move applied"


@dataclass(frozen=True)
class GameSnapshot:
    """
    Full state of a game at one point in time.
    ----

    white_captures / black_captures count the pieces each side has taken so far.
    last_move is the coordinate notation of the move that produced this snapshot ("e2e4"), None at the start.
    """

    board: Board
    turn: Side
    status: Status
    last_move: Optional[str] = None
    white_captures: int = 0
    black_captures: int = 0

    @property
    def winner(self) -> Optional[Side]:
        """
        Only defined for checkmate (a side lost its King): the winner is the side whose King is still on the board.
        """
        if self.status != Status.CHECKMATE:
            return None
        if self.board.has_king(Side.WHITE):
            return Side.WHITE
        if self.board.has_king(Side.BLACK):
            return Side.BLACK
        return None

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a snapshot from the information the Service layer actually has"""

        # Validation
        if model.turn not in {side.value for side in Side}:
            raise GameStateError(
                f"Invalid turn: {model.turn!r}. \nPick one from {','.join(side.value for side in Side)}"
            )
        if model.status not in {status.value for status in Status}:
            raise GameStateError(
                f"Invalid status code: {model.status!r}. \nPick one from {','.join(status.value for status in Status)}"
            )
        if model.white_captures < 0 or model.black_captures < 0:
            raise GameStateError("Capture counters cannot be negative.")

        return cls(
            board=Board.from_string(model.board),
            turn=Side(model.turn),
            status=Status(model.status),
            last_move=model.last_move,
            white_captures=model.white_captures,
            black_captures=model.black_captures,
        )

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            board=self.board.to_string(),
            turn=self.turn.value,
            status=self.status.value,
            last_move=self.last_move,
            white_captures=self.white_captures,
            black_captures=self.black_captures,
        )


@dataclass(frozen=True)
class MoveOutcome:
    """Result of a move attempt by a human. Rejected moves hand back the original snapshot."""

    accepted: bool
    snapshot: GameSnapshot
    message: str


@dataclass(frozen=True)
class AutoMoveOutcome:
    """Result of asking the automated opponent to move."""

    moved: bool
    snapshot: GameSnapshot
    message: str


# --- DOMAIN LAYER API CALLED BY SERVICE ---
def default_game() -> GameSnapshot:
    """Standard starting position, White to move."""
    return GameSnapshot(board=Board.starting_position(), turn=Side.WHITE, status=Status.ONGOING)


def reset_game() -> GameSnapshot:
    """Start over: same as a new game (no last move, both capture counters back to zero)."""
    return GameSnapshot(
        board=Board.starting_position(),
        turn=Side.WHITE,
        status=Status.ONGOING,
        last_move=None,
        white_captures=0,
        black_captures=0,
    )


def board_rows(board: Board) -> list[str]:
    """8 strings of 8 characters, 8th rank first."""
    return board.rows()


def detect_status(board: Board) -> Status:
    """
    Simplified end-of-game detection
    ----

    * A side without its King (which includes a side without any piece at all) has been mated --> CHECKMATE
    * Only the two Kings left --> STALEMATE
    * Anything else --> ONGOING

    NOTE: there is no attack analysis here. Being in check does not matter, losing the King does.
    """
    if not (board.has_king(Side.WHITE) and board.has_king(Side.BLACK)):
        return Status.CHECKMATE

    if board.count_pieces(Side.WHITE) == 1 and board.count_pieces(Side.BLACK) == 1:
        return Status.STALEMATE

    return Status.ONGOING


def apply_move(
    snapshot: GameSnapshot,
    move: Move,
    promotion_policy: PromotionPolicy = PromotionPolicy.AUTO_QUEEN,
) -> GameSnapshot:
    """
    Apply an already validated move
    -----

    Shared by the human and the automated path.

    1. clone the board
    2. count the capture (if the destination was occupied) for the side making the move
    3. move the piece, promote a pawn reaching the last rank
    4. record the move, hand the turn to the other side
    5. update game status (if needed)
    """
    board = snapshot.board
    moving_piece = board.piece(move.from_square)
    if moving_piece is None:
        raise GameStateError(f"No piece on {to_algebraic(move.from_square)} to move.")

    # capture bookkeeping, BEFORE the board gets updated
    white_captures = snapshot.white_captures
    black_captures = snapshot.black_captures
    if board.piece(move.to_square) is not None:
        if moving_piece.side == Side.WHITE:
            white_captures += 1
        else:
            black_captures += 1

    working_board = board.clone_mutable()
    working_board.move_piece(move.from_square, move.to_square)

    if reaches_promotion_rank(moving_piece, move.to_square):
        promote_to = _promotion_choice(move.promote_to, promotion_policy)
        working_board.place_piece(moving_piece.promoted_to(promote_to), move.to_square)

    new_board = working_board.freeze()
    return GameSnapshot(
        board=new_board,
        turn=snapshot.turn.opponent,
        status=detect_status(new_board),
        last_move=move.to_notation(),
        white_captures=white_captures,
        black_captures=black_captures,
    )


def apply_human_move(
    snapshot: GameSnapshot,
    from_square: str,
    to_square: str,
    promotion: Optional[str] = None,
    promotion_policy: PromotionPolicy = PromotionPolicy.AUTO_QUEEN,
) -> MoveOutcome:
    """
    Attempt to make a move
    -----

    1. make sure the game is (still) in progress
    2. parse the squares
    3. there must be a piece to move ...
    4. ... and it must be yours
    5. you cannot take your own pieces
    6. the piece must be allowed to move like that
    7. apply the move

    Any failed check returns accepted=False together with the UNCHANGED snapshot.
    """
    if snapshot.status != Status.ONGOING:
        return _reject(snapshot, GAME_FINISHED)

    from_idx = from_algebraic(from_square)
    to_idx = from_algebraic(to_square)
    if from_idx == INVALID_SQUARE or to_idx == INVALID_SQUARE:
        return _reject(snapshot, INVALID_SQUARE_FORMAT)

    board = snapshot.board
    moving_piece = board.piece(from_idx)
    if moving_piece is None:
        return _reject(snapshot, NO_PIECE)

    if moving_piece.side != snapshot.turn:
        return _reject(snapshot, NOT_YOUR_TURN)

    target = board.piece(to_idx)
    if target is not None and target.side == moving_piece.side:
        return _reject(snapshot, OWN_PIECE_CAPTURE)

    if not is_legal(moving_piece, from_idx, to_idx, board):
        return _reject(snapshot, ILLEGAL_MOVE)

    move = Move(from_idx, to_idx, promotion_kind(promotion))
    new_snapshot = apply_move(snapshot, move, promotion_policy)
    logger.debug("accepted %s, status now %s", new_snapshot.last_move, new_snapshot.status)
    return MoveOutcome(
        accepted=True,
        snapshot=new_snapshot,
        message=new_snapshot.last_move or MOVE_APPLIED,
    )


def valid_moves(snapshot: GameSnapshot, square: str) -> list[str]:
    """
    Where can the piece on this square go?
    ----

    Used to highlight destinations for the user. Does not care whose turn it is.
    Empty list for an invalid / empty square, or a finished game.
    """
    if snapshot.status != Status.ONGOING:
        return []

    from_idx = from_algebraic(square)
    if from_idx == INVALID_SQUARE:
        return []

    return [to_algebraic(to_idx) for to_idx in valid_destinations(from_idx, snapshot.board)]


# -- PRIVATE HELPERS ---
def _reject(snapshot: GameSnapshot, message: str) -> MoveOutcome:
    logger.debug("rejected move: %s", message)
    return MoveOutcome(accepted=False, snapshot=snapshot, message=message)


def _promotion_choice(requested: Optional[PieceKind], policy: PromotionPolicy) -> PieceKind:
    """Pawns become Queens, unless the policy lets the player pick (and they picked something valid)."""
    if policy == PromotionPolicy.HONOR_HINT and requested is not None:
        return requested
    return PieceKind.QUEEN
