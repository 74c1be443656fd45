"""A single drop, as recorded in the game's move log."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable

from src.connect_four.board import Board
from src.core.models import LastMoveRecord, MoveRecord
from src.core.shared_types import Color


def now_ms() -> int:
    """Milliseconds since epoch (UTC). Used to stamp moves."""
    return int(datetime.now(timezone.utc).timestamp() * 1000)


@dataclass(frozen=True)
class Move:
    color: Color
    column: int
    row: int
    sequence: int
    timestamp: int

    def to_record(self) -> MoveRecord:
        return {
            "color": self.color.value,
            "column": self.column,
            "timestamp": self.timestamp,
        }

    def to_last_move_record(self) -> LastMoveRecord:
        return {"color": self.color.value, "column": self.column, "row": self.row}


def replay(moves: Iterable[Move], board: Board | None = None) -> Board:
    """Fold the move log over a board (empty by default). Raises the board's IllegalMoveError on an impossible log."""
    board = board if board is not None else Board.empty()
    for move in moves:
        board, _ = board.drop(move.column, move.color)
    return board
