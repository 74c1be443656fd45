"""Protocol repository (SQLAlchemy implementation in sql_repository.py, dictionary-backed one in the tests)"""

from typing import Optional, Protocol
from uuid import UUID

from src.core.models import GameModel


class GameRepository(Protocol):
    """Persistence layer orchestration"""

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        ...

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        ...

    def update_game(
        self, game_id: UUID, game: GameModel, expected_moves: Optional[int] = None
    ) -> GameModel | None:
        """
        Add new info to existing record.
        `expected_moves`: number of moves the record held when `game` was derived from it.
        Raises StaleGameError if the record has moved on since.
        """
        ...

    def list_games(self, limit: int) -> list[tuple[UUID, GameModel]]:
        """Most recently created games first."""
        ...

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        ...
