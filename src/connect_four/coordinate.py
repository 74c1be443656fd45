"""
A cell position on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

# (columns, rows). Row 0 is the top row, discs settle on row ROWS - 1 first.
BOARD_DIMENSIONS = (5, 4)
COLS, ROWS = BOARD_DIMENSIONS


@dataclass(frozen=True)
class Coordinate:
    row: int
    col: int

    @classmethod
    def from_record(cls, record: dict[str, int]) -> Coordinate:
        return cls(row=record["row"], col=record["col"])

    def to_record(self) -> dict[str, int]:
        return {"row": self.row, "col": self.col}

    def is_within_bounds(self) -> bool:
        return (0 <= self.row < ROWS) and (0 <= self.col < COLS)

    def mirrored(self) -> Coordinate:
        """Same cell after reflecting the board left-to-right."""
        return Coordinate(self.row, COLS - 1 - self.col)
