"""Unit tests for /src/chess/game.py"""

from dataclasses import replace
from typing import Callable

import pytest

from src.chess.board import STARTING_BOARD, Board
from src.chess.game import (
    GAME_FINISHED,
    ILLEGAL_MOVE,
    INVALID_SQUARE_FORMAT,
    NO_PIECE,
    NOT_YOUR_TURN,
    OWN_PIECE_CAPTURE,
    GameSnapshot,
    apply_human_move,
    apply_move,
    board_rows,
    default_game,
    detect_status,
    reset_game,
    valid_moves,
)
from src.chess.moves import Move
from src.chess.pieces import Piece, PieceKind
from src.chess.square import from_algebraic
from src.core.exceptions import GameStateError, InvalidBoardError
from src.core.models import GameModel
from src.core.shared_types import PromotionPolicy, Side, Status

BoardFactory = Callable[[dict[str, str]], Board]


def snapshot_of(board: Board, turn: Side = Side.WHITE) -> GameSnapshot:
    return GameSnapshot(board=board, turn=turn, status=detect_status(board))


# -- CREATION LOGIC --
def test_default_game() -> None:
    game = default_game()
    assert game.board.to_string() == STARTING_BOARD
    assert game.turn == Side.WHITE
    assert game.status == Status.ONGOING
    assert game.last_move is None
    assert game.white_captures == 0
    assert game.black_captures == 0


def test_reset_is_a_fresh_game() -> None:
    assert reset_game() == default_game()


def test_board_rows() -> None:
    rows = board_rows(default_game().board)
    assert len(rows) == 8
    assert all(len(row) == 8 for row in rows)
    assert rows[0] == "rnbqkbnr"
    assert rows[7] == "RNBQKBNR"


# -- ACCEPTED MOVES --
def test_opening_move() -> None:
    game = default_game()
    outcome = apply_human_move(game, "e2", "e4")

    assert outcome.accepted
    assert outcome.message == "e2e4"
    new_game = outcome.snapshot
    assert new_game.board.is_empty(from_algebraic("e2"))
    assert new_game.board.piece(from_algebraic("e4")) == Piece(PieceKind.PAWN, Side.WHITE)
    assert new_game.turn == Side.BLACK
    assert new_game.last_move == "e2e4"
    assert new_game.status == Status.ONGOING

    # the original snapshot is untouched
    assert game == default_game()


def test_turns_alternate() -> None:
    game = default_game()
    for from_name, to_name, side_to_move in [
        ("e2", "e4", Side.BLACK),
        ("e7", "e5", Side.WHITE),
        ("g1", "f3", Side.BLACK),
        ("b8", "c6", Side.WHITE),
    ]:
        outcome = apply_human_move(game, from_name, to_name)
        assert outcome.accepted
        assert outcome.snapshot.turn == side_to_move
        assert outcome.snapshot.turn != game.turn
        game = outcome.snapshot


@pytest.mark.parametrize("mover", list(Side))
def test_capture_accounting(board_with: BoardFactory, mover: Side) -> None:
    """Only the mover's counter goes up, by exactly one"""
    rook, knight = ("R", "n") if mover == Side.WHITE else ("r", "N")
    board = board_with({"e1": "K", "e8": "k", "d4": rook, "d6": knight})
    game = replace(snapshot_of(board, mover), white_captures=2, black_captures=3)

    outcome = apply_human_move(game, "d4", "d6")

    assert outcome.accepted
    if mover == Side.WHITE:
        assert outcome.snapshot.white_captures == 3
        assert outcome.snapshot.black_captures == 3
    else:
        assert outcome.snapshot.white_captures == 2
        assert outcome.snapshot.black_captures == 4


def test_quiet_move_does_not_count_a_capture() -> None:
    outcome = apply_human_move(default_game(), "g1", "f3")
    assert outcome.snapshot.white_captures == 0
    assert outcome.snapshot.black_captures == 0


@pytest.mark.parametrize(
    "pawn, turn, from_name, to_name, expected",
    [
        ("P", Side.WHITE, "a7", "a8", "Q"),
        ("p", Side.BLACK, "h2", "h1", "q"),
    ],
)
def test_promotion_to_queen(
    board_with: BoardFactory, pawn: str, turn: Side, from_name: str, to_name: str, expected: str
) -> None:
    board = board_with({"e1": "K", "e8": "k", from_name: pawn})
    outcome = apply_human_move(snapshot_of(board, turn), from_name, to_name)
    assert outcome.accepted
    assert outcome.snapshot.board.piece(from_algebraic(to_name)) == Piece.from_char(expected)


def test_promotion_hint_ignored_by_default(board_with: BoardFactory) -> None:
    board = board_with({"e1": "K", "e8": "k", "a7": "P"})
    outcome = apply_human_move(snapshot_of(board), "a7", "a8", "n")
    assert outcome.snapshot.board.piece(from_algebraic("a8")) == Piece(PieceKind.QUEEN, Side.WHITE)
    assert outcome.snapshot.last_move == "a7a8"


def test_promotion_hint_honored_when_configured(board_with: BoardFactory) -> None:
    board = board_with({"e1": "K", "e8": "k", "a7": "P"})
    outcome = apply_human_move(
        snapshot_of(board), "a7", "a8", "n", promotion_policy=PromotionPolicy.HONOR_HINT
    )
    assert outcome.snapshot.board.piece(from_algebraic("a8")) == Piece(PieceKind.KNIGHT, Side.WHITE)


def test_unknown_promotion_hint_falls_back_to_queen(board_with: BoardFactory) -> None:
    board = board_with({"e1": "K", "e8": "k", "a7": "P"})
    outcome = apply_human_move(
        snapshot_of(board), "a7", "a8", "k", promotion_policy=PromotionPolicy.HONOR_HINT
    )
    assert outcome.snapshot.board.piece(from_algebraic("a8")) == Piece(PieceKind.QUEEN, Side.WHITE)


def test_apply_move_from_empty_square() -> None:
    with pytest.raises(GameStateError):
        apply_move(default_game(), Move(from_algebraic("e4"), from_algebraic("e5")))


# -- REJECTED MOVES --
@pytest.mark.parametrize(
    "from_name, to_name, message",
    [
        ("z9", "e4", INVALID_SQUARE_FORMAT),
        ("e2", "e44", INVALID_SQUARE_FORMAT),
        ("", "", INVALID_SQUARE_FORMAT),
        ("e4", "e5", NO_PIECE),
        ("e7", "e5", NOT_YOUR_TURN),
        ("e2", "d1", OWN_PIECE_CAPTURE),
        ("a1", "a8", ILLEGAL_MOVE),  # blocked by own pawn
        ("g1", "g3", ILLEGAL_MOVE),
        ("e2", "e5", ILLEGAL_MOVE),
    ],
)
def test_rejected_moves(from_name: str, to_name: str, message: str) -> None:
    game = default_game()
    outcome = apply_human_move(game, from_name, to_name)
    assert not outcome.accepted
    assert outcome.message == message
    # same object back: nothing changed
    assert outcome.snapshot is game
    assert game == default_game()


@pytest.mark.parametrize("status", [Status.CHECKMATE, Status.STALEMATE])
def test_no_moves_after_the_game_ended(status: Status) -> None:
    game = replace(default_game(), status=status)
    outcome = apply_human_move(game, "e2", "e4")
    assert not outcome.accepted
    assert outcome.message == GAME_FINISHED
    assert outcome.snapshot is game


# -- END OF GAME --
def test_detect_status_ongoing() -> None:
    assert detect_status(Board.starting_position()) == Status.ONGOING


def test_detect_status_missing_king(board_with: BoardFactory) -> None:
    assert detect_status(board_with({"e1": "K", "d8": "q"})) == Status.CHECKMATE
    assert detect_status(board_with({"e8": "k", "a1": "R", "a2": "P"})) == Status.CHECKMATE


def test_detect_status_side_without_pieces(board_with: BoardFactory) -> None:
    assert detect_status(board_with({"e1": "K", "a1": "R"})) == Status.CHECKMATE


def test_detect_status_only_kings(board_with: BoardFactory) -> None:
    assert detect_status(board_with({"e1": "K", "e8": "k"})) == Status.STALEMATE


def test_detect_status_king_and_one_more_piece(board_with: BoardFactory) -> None:
    assert detect_status(board_with({"e1": "K", "e8": "k", "a2": "P"})) == Status.ONGOING


def test_taking_the_king_ends_the_game(board_with: BoardFactory) -> None:
    board = board_with({"e1": "K", "h5": "Q", "e8": "k", "a7": "p"})
    outcome = apply_human_move(snapshot_of(board), "h5", "e8")
    assert outcome.accepted
    assert outcome.snapshot.status == Status.CHECKMATE
    assert outcome.snapshot.winner == Side.WHITE
    assert outcome.snapshot.white_captures == 1


def test_capturing_the_last_piece_is_stalemate(board_with: BoardFactory) -> None:
    board = board_with({"e1": "K", "e8": "k", "e2": "p"})
    outcome = apply_human_move(snapshot_of(board), "e1", "e2")
    assert outcome.accepted
    assert outcome.snapshot.status == Status.STALEMATE
    assert outcome.snapshot.winner is None


def test_no_winner_while_ongoing() -> None:
    assert default_game().winner is None


# -- VALID MOVES --
def test_valid_moves_for_a_pawn() -> None:
    assert valid_moves(default_game(), "e2") == ["e4", "e3"]


def test_valid_moves_for_a_knight() -> None:
    assert valid_moves(default_game(), "b8") == ["a6", "c6"]


@pytest.mark.parametrize("square", ["e4", "x9", ""])
def test_no_valid_moves_for_empty_or_invalid_square(square: str) -> None:
    assert valid_moves(default_game(), square) == []


def test_no_valid_moves_in_finished_game() -> None:
    game = replace(default_game(), status=Status.CHECKMATE)
    assert valid_moves(game, "e2") == []


# -- MODEL CONVERSION --
def test_model_round_trip() -> None:
    game = apply_human_move(default_game(), "e2", "e4").snapshot
    model = game.to_model()
    assert model == GameModel(
        board="rnbqkbnr" "pppppppp" "........" "........" "....P..." "........" "PPPP.PPP" "RNBQKBNR",
        turn="Black",
        status="Ongoing",
        last_move="e2e4",
        white_captures=0,
        black_captures=0,
    )
    assert GameSnapshot.from_model(model) == game


@pytest.mark.parametrize(
    "changes, error",
    [
        ({"turn": "Purple"}, GameStateError),
        ({"status": "Resigned"}, GameStateError),
        ({"white_captures": -1}, GameStateError),
        ({"board": "too short"}, InvalidBoardError),
    ],
)
def test_invalid_model(changes: dict, error: type[Exception]) -> None:
    model = replace(default_game().to_model(), **changes)
    with pytest.raises(error):
        GameSnapshot.from_model(model)
