"""
Pytest will auto-discover / import this file called 'conftest.py'. ]
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable, Generator
from uuid import UUID, uuid4

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.connect_four.board import Board
from src.core.exceptions import StaleGameError
from src.core.models import GameModel
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
        db.close()
        Base.metadata.drop_all(bind=engine)


class MockRepository:
    """Mock the GameRepository using a dictionary of game models."""

    def __init__(self) -> None:
        self._games: dict[UUID, GameModel] = {}

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        game_id = uuid4()
        self._games[game_id] = game
        return game, game_id

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        return self._games.get(game_id)

    def update_game(
        self, game_id: UUID, game: GameModel, expected_moves: int | None = None
    ) -> GameModel | None:
        """Add new info to existing record, unless it changed since it was read."""
        if game_id not in self._games:
            return None
        if expected_moves is not None and len(self._games[game_id].moves) != expected_moves:
            raise StaleGameError(f"Game {game_id} changed since it was read.")
        self._games[game_id] = game
        return game

    def list_games(self, limit: int) -> list[tuple[UUID, GameModel]]:
        """Dictionaries keep insertion order: newest game is the last one."""
        return list(reversed(self._games.items()))[:limit]

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        return self._games.pop(game_id, None)

    def clear(self) -> None:
        """Clear the repository (useful in between tests)"""
        self._games.clear()


@pytest.fixture
def mock_repository() -> Generator[MockRepository, None, None]:
    """Ensures to clear the repository between tests"""
    repo = MockRepository()
    try:
        yield repo
    finally:
        repo.clear()


@pytest.fixture
def board_from_picture() -> Callable[[str], Board]:
    """
    Build a board from a small drawing, top row first. '.' is empty, 'Y' / 'R' are discs. ex.

        .....
        .....
        ..Y..
        .RYR.
    """

    def _create_board(picture: str) -> Board:
        rows = [line.strip() for line in picture.strip().splitlines()]
        return Board.from_rows([["" if char == "." else char for char in row] for row in rows])

    return _create_board
