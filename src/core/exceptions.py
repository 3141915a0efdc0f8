"""
Custom exceptions.

Rejected moves are NOT exceptions: the engine reports them as values (see MoveOutcome).
These are raised for malformed data crossing a layer boundary, or for contract violations inside the engine.
"""


class GameError(Exception):
    """Top-level exception for anything raised by this application."""


class InvalidSquareError(GameError):
    """A board index outside 0..63 was used."""


class EmptySquareError(GameError):
    """Asked for the side of a piece on a square that holds no piece."""


class InvalidBoardError(GameError):
    """Cannot interpret a string as the 64-character board serialization."""


class GameStateError(GameError):
    """Persisted game data cannot be turned back into a game snapshot."""


class InvalidRequestError(GameError, ValueError):
    """Request data is structurally invalid. (Also a ValueError, so pydantic validators can raise it.)"""


class RepositoryError(GameError):
    """Persistence layer could not find / store the requested game."""
