"""Requests and Response models"""

from typing import Optional, Self
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.connect_four.coordinate import BOARD_DIMENSIONS
from src.core.config import RECENT_GAMES_LIMIT
from src.core.exceptions import ErrorKind, GameError, InvalidRequestError
from src.core.models import GameModel
from src.core.shared_types import Color, GameMode, Outcome, Status


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    human_color: Color
    mode: GameMode


class GetGameRequest(BaseModel):
    game_id: UUID


class MoveRequest(BaseModel):
    game_id: UUID
    color: Color
    # NOTE the range of the column is NOT checked here. The game reports an out-of-range column
    # only after checking the game state and the turn.
    column: int


class ListGamesRequest(BaseModel):
    limit: int = RECENT_GAMES_LIMIT

    @field_validator("limit")
    @classmethod
    def validate_limit(cls, value: int) -> int:
        if value < 1:
            raise InvalidRequestError(f"limit must be a positive number, got {value}.")
        return value


class DeleteGameRequest(BaseModel):
    game_id: UUID


# --- RESPONSE MODELS ---
class CellResponse(BaseModel):
    row: int
    col: int


class MoveResponse(BaseModel):
    color: Color
    column: int
    timestamp: int


class LastMoveResponse(BaseModel):
    color: Color
    column: int
    row: int


class GameResponse(BaseModel):
    game_id: UUID
    human_color: Color
    mode: GameMode
    state: Status
    board: list[list[str]]
    current_turn: Color
    moves: list[MoveResponse]
    result: Optional[Outcome] = None
    winning_cells: list[CellResponse] = Field(default_factory=list)
    last_move: Optional[LastMoveResponse] = None

    @field_validator("board")
    @classmethod
    def validate_board_shape(cls, value: list[list[str]]) -> list[list[str]]:
        columns, rows = BOARD_DIMENSIONS
        if len(value) != rows or any(len(row) != columns for row in value):
            raise InvalidRequestError(f"board must have {rows} rows of {columns} cells.")
        return value

    @classmethod
    def from_model(cls, game_id: UUID, model: GameModel) -> Self:
        return cls(
            game_id=game_id,
            human_color=Color(model.human_color),
            mode=GameMode(model.mode),
            state=Status(model.state),
            board=model.board,
            current_turn=Color(model.current_turn),
            moves=[MoveResponse.model_validate(move) for move in model.moves],
            result=Outcome(model.result) if model.result else None,
            winning_cells=[CellResponse.model_validate(cell) for cell in model.winning_cells],
            last_move=LastMoveResponse.model_validate(model.last_move) if model.last_move else None,
        )


class ErrorResponse(BaseModel):
    """What a caller shows/logs when a request fails. The kind is passed on as-is."""

    kind: ErrorKind
    detail: str

    @classmethod
    def from_error(cls, error: GameError) -> Self:
        return cls(kind=error.kind, detail=str(error))
