"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable, Generator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.chess.board import Board
from src.chess.square import NUM_SQUARES, from_algebraic
from src.db.schema import Base

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        Base.metadata.drop_all(bind=engine)
        db.close()


@pytest.fixture
def board_with() -> Callable[[dict[str, str]], Board]:
    """
    Call the inner function with a mapping of square name -> piece character, ex. {"e1": "K", "e8": "k"}.
    All other squares are empty.
    """

    def _create_board(pieces: dict[str, str]) -> Board:
        cells = ["."] * NUM_SQUARES
        for square_name, char in pieces.items():
            cells[from_algebraic(square_name)] = char
        return Board.from_string("".join(cells))

    return _create_board
