"""
Automated opponent
----

Greedy, no look-ahead: try every legal move for the side to move, score the position it leads to, keep the best one.

Score of a single move =
* value of the piece it captures (only THIS capture, not a material count of the whole board)
* a small bonus for landing close to the centre of the board
* a bonus for promoting a pawn
* a huge bonus if the move ends the game by taking the King
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional

from src.chess.board import Board
from src.chess.game import GAME_FINISHED, AutoMoveOutcome, GameSnapshot, apply_move
from src.chess.moves import Move, is_legal, reaches_promotion_rank
from src.chess.square import NUM_SQUARES, Square, file_of, rank_of
from src.core.shared_types import Side, Status

logger = logging.getLogger(__name__)

PROMOTION_BONUS = 8
CHECKMATE_BONUS = 1000

# The centre is the 2x2 block d4, e4, d5, e5 (files / rank indices 3 and 4).
CENTER_LOW, CENTER_HIGH = 3, 4
MAX_CENTER_DISTANCE = 6  # from a corner
# Keep the positional bonus below the value of a pawn: position only breaks ties between equal captures.
POSITION_WEIGHT = 0.1

NOT_YOUR_TURN = "Waiting for the other side to move"
NO_LEGAL_MOVES = "No legal moves available"


@dataclass(frozen=True)
class ScoredMove:
    move: Move
    result: GameSnapshot
    score: float


def center_distance(square: Square) -> int:
    """Manhattan distance to the nearest of the four centre squares (0 on the centre, 6 in a corner)"""
    file_distance = max(CENTER_LOW - file_of(square), 0, file_of(square) - CENTER_HIGH)
    rank_distance = max(CENTER_LOW - rank_of(square), 0, rank_of(square) - CENTER_HIGH)
    return file_distance + rank_distance


def positional_bonus(square: Square) -> float:
    return POSITION_WEIGHT * (MAX_CENTER_DISTANCE - center_distance(square))


def candidate_moves(board: Board, side: Side) -> list[Move]:
    """
    All legal moves for the given side.

    Iteration order is fixed (from-square 0..63, then to-square 0..63): the first of several equally good moves wins.
    """
    moves: list[Move] = []
    for from_square in board.locate_side(side):
        piece = board.piece(from_square)
        assert piece is not None
        for to_square in range(NUM_SQUARES):
            target = board.piece(to_square)
            if target is not None and target.side == side:
                continue
            if is_legal(piece, from_square, to_square, board):
                moves.append(Move(from_square, to_square))
    return moves


def score_move(before: GameSnapshot, move: Move, after: GameSnapshot) -> float:
    """Static evaluation of a single move, given the snapshots before and after it was played."""
    score: float = 0

    captured = before.board.piece(move.to_square)
    if captured is not None:
        score += captured.value

    score += positional_bonus(move.to_square)

    moving_piece = before.board.piece(move.from_square)
    if moving_piece is not None and reaches_promotion_rank(moving_piece, move.to_square):
        score += PROMOTION_BONUS

    if after.status == Status.CHECKMATE:
        score += CHECKMATE_BONUS

    return score


def best_move(snapshot: GameSnapshot, side: Side) -> Optional[ScoredMove]:
    """Highest scoring move. Only a strictly better score replaces the current best, so ties go to the first move found."""
    best: Optional[ScoredMove] = None
    for move in candidate_moves(snapshot.board, side):
        result = apply_move(snapshot, move)
        score = score_move(snapshot, move, result)
        if best is None or score > best.score:
            best = ScoredMove(move, result, score)
    return best


def auto_move(snapshot: GameSnapshot, side: Side = Side.BLACK) -> AutoMoveOutcome:
    """
    Let the automated side make a move
    ----

    * Finished game / not our turn: nothing happens.
    * No legal move at all: the game is declared a stalemate (even if detect_status() would call the position ongoing).
    * Otherwise: play the best scoring move.
    """
    if snapshot.status != Status.ONGOING:
        return AutoMoveOutcome(moved=False, snapshot=snapshot, message=GAME_FINISHED)

    if snapshot.turn != side:
        return AutoMoveOutcome(moved=False, snapshot=snapshot, message=NOT_YOUR_TURN)

    chosen = best_move(snapshot, side)
    if chosen is None:
        logger.info("%s has no legal moves, declaring stalemate", side)
        stalemate = replace(snapshot, status=Status.STALEMATE)
        return AutoMoveOutcome(moved=False, snapshot=stalemate, message=NO_LEGAL_MOVES)

    logger.debug("%s plays %s (score %.1f)", side, chosen.result.last_move, chosen.score)
    return AutoMoveOutcome(
        moved=True,
        snapshot=chosen.result,
        message=f"Opponent played {chosen.result.last_move}",
    )
