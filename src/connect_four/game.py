"""
The Game class will be the entrypoint into the domain layer for the service layer.
It is responsible for orchestrating all the business logic required to play a turn of the board game -->
passes this information to the service layer, which can then pass it onwards to the API layer.

NOTE a Game is a value: `apply_move` never changes the instance it is called on, it returns the next Game.
"""

from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Optional, Self, TypeVar

from src.connect_four.board import Board
from src.connect_four.coordinate import COLS, Coordinate
from src.connect_four.moves import Move, now_ms
from src.core.exceptions import (
    ColumnFullError,
    GameError,
    GameStateError,
    InvalidColumnError,
    NotYourTurnError,
)
from src.core.models import GameModel, MoveRecord
from src.core.shared_types import FIRST_COLOR, Color, GameMode, Outcome, Status

E = TypeVar("E", bound=StrEnum)


@dataclass(frozen=True)
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    human_color: Color
    mode: GameMode
    status: Status
    current_turn: Color
    board: Board
    moves: tuple[Move, ...]
    last_move: Optional[Move] = None
    outcome: Optional[Outcome] = None
    winning_cells: tuple[Coordinate, ...] = ()

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a Game from the information the Service layer actually has"""

        # Validation
        status = _parse(Status, model.state, "state")
        mode = _parse(GameMode, model.mode, "mode")
        human_color = _parse(Color, model.human_color, "color")
        current_turn = _parse(Color, model.current_turn, "color")
        outcome = _parse(Outcome, model.result, "result") if model.result else None

        board = Board.from_rows(model.board)
        winning_cells = tuple(Coordinate.from_record(cell) for cell in model.winning_cells)

        # The move log is the source of truth: replay it and compare every stored field against the result
        game = cls.new_game(human_color, mode)._replay(model.moves)
        if game.board != board:
            raise GameStateError("Stored board does not match the stored move log.")
        if (status, current_turn, outcome, winning_cells) != (
            game.status,
            game.current_turn,
            game.outcome,
            game.winning_cells,
        ):
            raise GameStateError(
                f"Stored state {status}/{current_turn}/{outcome} does not follow from the stored move log "
                f"({game.status}/{game.current_turn}/{game.outcome})."
            )
        if model.last_move is not None and game.last_move is not None:
            if game.last_move.to_last_move_record() != model.last_move:
                raise GameStateError("Stored last move does not match the stored move log.")
        return game

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""

        return GameModel(
            human_color=self.human_color.value,
            mode=self.mode.value,
            state=self.status.value,
            board=self.board.to_rows(),
            current_turn=self.current_turn.value,
            moves=[move.to_record() for move in self.moves],
            result=self.outcome.value if self.outcome else None,
            winning_cells=[cell.to_record() for cell in self.winning_cells],
            last_move=self.last_move.to_last_move_record() if self.last_move else None,
        )

    @classmethod
    def new_game(cls, human_color: str, mode: str) -> Self:
        """Start a new game. The human plays `human_color` (ignored by an ai-vs-ai game); yellow always opens."""
        return cls(
            human_color=_parse(Color, human_color, "color"),
            mode=_parse(GameMode, mode, "mode"),
            status=Status.PLAYING,
            current_turn=FIRST_COLOR,
            board=Board.empty(),
            moves=(),
        )

    @property
    def winner(self) -> Optional[Color]:
        if self.outcome is None:
            return None
        return self.outcome.winner

    @property
    def computer_colors(self) -> tuple[Color, ...]:
        if self.mode == GameMode.AI_VS_AI:
            return (Color.YELLOW, Color.RED)
        return (self.human_color.opponent,)

    @property
    def is_computer_turn(self) -> bool:
        return self.status == Status.PLAYING and self.current_turn in self.computer_colors

    def apply_move(self, color: str, column: int, timestamp: Optional[int] = None) -> Self:
        """
        Attempt to drop a disc and return the resulting Game.
        -----

        1. game must still be playing
        2. must be `color`'s turn
        3. column must exist
        4. column must have room
        5. drop the disc, append to the move log
        6. win --> finished, full board --> draw, otherwise pass the turn

        The checks are done in this order so the reported error does not depend on the caller.
        """
        # make sure the game is (still) in progress
        if self.status != Status.PLAYING:
            raise GameStateError(f"Game is not in playing state. status: {self.status}")

        # make sure it is your turn
        if color != self.current_turn:
            raise NotYourTurnError(
                f"It is not your turn. Waiting for {self.current_turn} to make a move first."
            )
        player_color = self.current_turn

        # check the drop itself
        if not (0 <= column < COLS):
            raise InvalidColumnError(f"Column {column} is outside of [0, {COLS}).")
        if not self.board.can_drop(column):
            raise ColumnFullError(f"Column {column} is full.")

        board, row = self.board.drop(column, player_color)
        move = Move(
            color=player_color,
            column=column,
            row=row,
            sequence=len(self.moves),
            timestamp=timestamp if timestamp is not None else now_ms(),
        )
        after_move = replace(self, board=board, moves=self.moves + (move,), last_move=move)
        return after_move._update_game_status(move)

    # -- PRIVATE HELPERS ---
    def _replay(self, records: list[MoveRecord]) -> Self:
        """Play a stored move log (with its timestamps) on top of this game."""
        game = self
        for sequence, record in enumerate(records):
            try:
                game = game.apply_move(
                    str(record["color"]), int(record["column"]), timestamp=int(record["timestamp"])
                )
            except (GameError, KeyError, ValueError) as error:
                raise GameStateError(f"Stored move log is not playable at move {sequence}: {error}") from error
        return game

    def _update_game_status(self, move: Move) -> Self:
        """Performs checks to see if game has ended and changes status accordingly."""
        won, cells = self.board.check_win_at(move.row, move.column, move.color)
        if won:
            return replace(
                self,
                status=Status.FINISHED,
                outcome=Outcome.won_by(move.color),
                winning_cells=tuple(cells),
            )

        if self.board.is_full():
            return replace(self, status=Status.FINISHED, outcome=Outcome.DRAW)

        return replace(self, current_turn=move.color.opponent)


def _parse(enum_cls: type[E], value: str, what: str) -> E:
    """Turn a stored/requested string into its enum, raising the domain error instead of a ValueError."""
    try:
        return enum_cls(value)
    except ValueError:
        options = ",".join(member.value for member in enum_cls)
        raise GameStateError(f"Invalid {what}: {value!r}. \nPick one from {options}") from None

