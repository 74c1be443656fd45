"""Implementation of (Game)Repository using SQLAlchemy"""

from copy import deepcopy
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from src.core.exceptions import StaleGameError
from src.core.models import GameModel
from src.db.schema import DBGame


class SQLGameRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        game_db = self._fetch_game(game_id)
        if game_db:
            return self._to_model(game_db)
        return None

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""

        new_id = uuid4()
        game_db = DBGame(id=new_id)
        self._copy_fields(game, game_db)
        self.db.add(game_db)
        self.db.commit()
        self.db.refresh(game_db)
        return self._to_model(game_db), new_id

    def update_game(
        self, game_id: UUID, game: GameModel, expected_moves: Optional[int] = None
    ) -> GameModel | None:
        """
        Add new info to existing record.
        ----

        Two guards against lost updates:
        1. the move log must still hold `expected_moves` moves (the record was not updated since it was read)
        2. the version counter (see DBGame) catches a writer in another session committing in between
        """
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        if expected_moves is not None and len(game_db.moves) != expected_moves:
            raise StaleGameError(
                f"Game {game_id} has {len(game_db.moves)} moves stored, update expected {expected_moves}."
            )
        self._copy_fields(game, game_db)
        try:
            self.db.commit()
        except StaleDataError as error:
            self.db.rollback()
            raise StaleGameError(f"Game {game_id} was updated concurrently.") from error
        self.db.refresh(game_db)
        return self._to_model(game_db)

    def list_games(self, limit: int) -> list[tuple[UUID, GameModel]]:
        """Most recently created games first."""
        query = select(DBGame).order_by(DBGame.created_at.desc()).limit(limit)
        return [(game_db.id, self._to_model(game_db)) for game_db in self.db.scalars(query)]

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        game_model = self._to_model(game_db)
        self.db.delete(game_db)
        self.db.commit()
        return game_model

    def _fetch_game(self, game_id: UUID) -> DBGame | None:
        # always re-read the row, an instance cached in the session may predate another session's commit
        query = select(DBGame).where(DBGame.id == game_id).execution_options(populate_existing=True)
        return self.db.scalar(query)

    def _copy_fields(self, game: GameModel, game_db: DBGame) -> None:
        """
        Write the GameModel onto the record.
        NOTE JSON columns are only flagged as changed on re-assignment, so always hand over fresh copies.
        """
        game_db.human_color = game.human_color
        game_db.mode = game.mode
        game_db.state = game.state
        game_db.board = deepcopy(game.board)
        game_db.current_turn = game.current_turn
        game_db.moves = deepcopy(game.moves)
        game_db.result = game.result
        game_db.winning_cells = deepcopy(game.winning_cells)
        game_db.last_move = deepcopy(game.last_move)

    def _to_model(self, game_db: DBGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            human_color=game_db.human_color,
            mode=game_db.mode,
            state=game_db.state,
            board=deepcopy(game_db.board),
            current_turn=game_db.current_turn,
            moves=deepcopy(game_db.moves),
            result=game_db.result,
            winning_cells=deepcopy(game_db.winning_cells),
            last_move=deepcopy(game_db.last_move),
        )
