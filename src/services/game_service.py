"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import threading
from collections import defaultdict
from uuid import UUID

from loguru import logger

from src.api.models import (
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    ListGamesRequest,
    MoveRequest,
)
from src.connect_four.game import Game
from src.core.exceptions import (
    GameError,
    GameNotFoundError,
    GameStateError,
    NotYourTurnError,
    StaleGameError,
)
from src.core.models import GameModel
from src.core.shared_types import Status
from src.db.repository import GameRepository


class GameService:
    """Orchestration of layers for the Connect-Four game."""

    def __init__(self, repository: GameRepository) -> None:
        self.repo = repository
        # One lock per game: a move is read, validated and stored without another move slipping in between
        self._locks: defaultdict[UUID, threading.Lock] = defaultdict(threading.Lock)
        self._locks_guard = threading.Lock()

    # -- API routes logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """Player requested a new game (against the computer, or to watch the computer play itself)."""

        # Use info in CreateGameRequest to create a new Game, and convert into GameModel
        new_game = Game.new_game(human_color=request.human_color, mode=request.mode)
        created_game_data = new_game.to_model()

        # Store the GameModel in the repository
        stored_game, game_id = self.repo.create_game(created_game_data)
        logger.info(f"Created game {game_id} (mode={request.mode}, human={request.human_color})")

        # Return a GameResponse
        return GameResponse.from_model(game_id, stored_game)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend (and by the turn orchestrator) to check whose turn it is.
        """
        game_model = self._fetch_game(request.game_id)
        return GameResponse.from_model(request.game_id, game_model)

    def make_move(self, request: MoveRequest) -> GameResponse:
        """
        Make a move attempt. This is the only way a stored game changes.
        ----

        Errors of the Game (not playing, wrong turn, invalid column, column full) are passed on untouched.
        """
        with self._lock_for(request.game_id):
            # Retrieve persisted GameModel from repository
            stored_model = self._fetch_game(request.game_id)

            # Create a new Game instance from the retrieved GameModel
            game = Game.from_model(stored_model)

            # Attempt the move
            after_move = game.apply_move(request.color, request.column)

            # Capture updated state in GameModel and store in repository, provided nobody else stored a move meanwhile
            after_move_model = after_move.to_model()
            try:
                self.repo.update_game(
                    request.game_id, after_move_model, expected_moves=len(stored_model.moves)
                )
            except StaleGameError as error:
                raise self._rejection_for_stale_move(request) from error

        logger.info(f"Game {request.game_id}: {request.color} dropped in column {request.column}")
        if after_move.status == Status.FINISHED:
            logger.info(f"Game {request.game_id} finished: {after_move.outcome}")

        # Return a GameResponse
        return GameResponse.from_model(request.game_id, after_move_model)

    def list_games(self, request: ListGamesRequest) -> list[GameResponse]:
        """Show the most recent games."""
        return [
            GameResponse.from_model(game_id, model)
            for game_id, model in self.repo.list_games(request.limit)
        ]

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        with self._lock_for(request.game_id):
            self.repo.delete_game(request.game_id)
        with self._locks_guard:
            self._locks.pop(request.game_id, None)
        logger.info(f"Deleted game {request.game_id}")

    # -- Internal helpers --
    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise GameNotFoundError(f"Game with {game_id=} not found.")
        return game_model

    def _rejection_for_stale_move(self, request: MoveRequest) -> GameError:
        """Another writer (e.g. a second service on the same database) stored a move first: this move answered an outdated turn."""
        current = self._fetch_game(request.game_id)
        logger.warning(f"Game {request.game_id}: {request.color}@{request.column} lost a race against a concurrent move")
        if current.state != Status.PLAYING:
            return GameStateError(f"Game is not in playing state. status: {current.state}")
        return NotYourTurnError(f"The game moved on: {len(current.moves)} moves were stored meanwhile.")

    def _lock_for(self, game_id: UUID) -> threading.Lock:
        with self._locks_guard:
            return self._locks[game_id]
