"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging
from typing import Optional
from uuid import UUID

from src.api.models import (
    GameRequest,
    GameStateResponse,
    MoveRequest,
    ValidMovesRequest,
    ValidMovesResponse,
)
from src.chess.game import (
    GameSnapshot,
    apply_human_move,
    board_rows,
    default_game,
    reset_game,
    valid_moves,
)
from src.chess.opponent import auto_move
from src.core.config import Settings, get_settings
from src.core.exceptions import RepositoryError
from src.core.shared_types import Status
from src.db.repository import GameRepository

logger = logging.getLogger(__name__)


class ChessService:
    """Orchestration of layers for chess game against the automated opponent."""

    def __init__(self, repository: GameRepository, settings: Optional[Settings] = None) -> None:
        self.repo = repository
        self.settings = settings or get_settings()

    # -- API routes logic ---
    def create_game(self) -> GameStateResponse:
        """Player requested a new game: standard starting position, White to move."""
        snapshot = default_game()
        _, game_id = self.repo.create_game(snapshot.to_model())
        logger.info("created game %s", game_id)
        return self._create_response(game_id, snapshot, "New game started")

    def get_game_state(self, request: GameRequest) -> GameStateResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend, for instance to pick up the automated reply.
        """
        snapshot = self._fetch_snapshot(request.game_id)
        return self._create_response(request.game_id, snapshot, self._describe(snapshot))

    def make_move(self, request: MoveRequest) -> GameStateResponse:
        """
        Make a move attempt.
        ----

        A rejected move is NOT an error: the unchanged game comes back with the reason as message.
        """
        snapshot = self._fetch_snapshot(request.game_id)

        outcome = apply_human_move(
            snapshot,
            request.from_square,
            request.to_square,
            request.promote_to,
            promotion_policy=self.settings.promotion_policy,
        )
        if not outcome.accepted:
            logger.info(
                "game %s: rejected %s%s (%s)",
                request.game_id,
                request.from_square,
                request.to_square,
                outcome.message,
            )
            return self._create_response(request.game_id, outcome.snapshot, outcome.message)

        self._store(request.game_id, outcome.snapshot)
        logger.info("game %s: played %s", request.game_id, outcome.snapshot.last_move)
        return self._create_response(
            request.game_id,
            outcome.snapshot,
            outcome.message,
            opponent_pending=self._opponent_should_reply(outcome.snapshot),
        )

    def auto_move(self, request: GameRequest) -> GameStateResponse:
        """Let the automated opponent reply. The delay before asking is up to the caller."""
        snapshot = self._fetch_snapshot(request.game_id)
        outcome = auto_move(snapshot, self.settings.opponent_side)

        # no move, but the game may still have changed: being stuck without legal moves ends it
        if outcome.snapshot != snapshot:
            self._store(request.game_id, outcome.snapshot)
        if outcome.moved:
            logger.info("game %s: opponent played %s", request.game_id, outcome.snapshot.last_move)
        return self._create_response(request.game_id, outcome.snapshot, outcome.message)

    def reset_game(self, request: GameRequest) -> GameStateResponse:
        """Start over in the same game record."""
        self._fetch_snapshot(request.game_id)
        snapshot = reset_game()
        self._store(request.game_id, snapshot)
        logger.info("game %s: reset", request.game_id)
        return self._create_response(request.game_id, snapshot, "Game reset")

    def valid_moves(self, request: ValidMovesRequest) -> ValidMovesResponse:
        """Destinations for the piece on the requested square (to highlight them in the UI)."""
        snapshot = self._fetch_snapshot(request.game_id)
        return ValidMovesResponse(
            game_id=request.game_id,
            square=request.square,
            valid_moves=valid_moves(snapshot, request.square),
        )

    def delete_game(self, request: GameRequest) -> None:
        """Handle a request to delete a Game record."""
        if self.repo.delete_game(request.game_id) is None:
            raise RepositoryError(f"Game with game_id={request.game_id} not found.")
        logger.info("deleted game %s", request.game_id)

    # -- Internal helpers --
    def _opponent_should_reply(self, snapshot: GameSnapshot) -> bool:
        return (
            self.settings.auto_reply
            and snapshot.status == Status.ONGOING
            and snapshot.turn == self.settings.opponent_side
        )

    def _describe(self, snapshot: GameSnapshot) -> str:
        if snapshot.status == Status.ONGOING:
            return f"{snapshot.turn} to move"
        if snapshot.winner is not None:
            return f"{snapshot.status}: {snapshot.winner} wins"
        return str(snapshot.status)

    def _create_response(
        self,
        game_id: UUID,
        snapshot: GameSnapshot,
        message: str,
        opponent_pending: bool = False,
    ) -> GameStateResponse:
        """Convert the snapshot to a GameStateResponse (for game with given ID.)"""
        return GameStateResponse(
            game_id=game_id,
            board=board_rows(snapshot.board),
            turn=snapshot.turn,
            status=snapshot.status,
            message=message,
            last_move=snapshot.last_move,
            white_captures=snapshot.white_captures,
            black_captures=snapshot.black_captures,
            winner=snapshot.winner,
            opponent_pending=opponent_pending,
        )

    def _fetch_snapshot(self, game_id: UUID) -> GameSnapshot:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return GameSnapshot.from_model(game_model)

    def _store(self, game_id: UUID, snapshot: GameSnapshot) -> None:
        if self.repo.update_game(game_id, snapshot.to_model()) is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
