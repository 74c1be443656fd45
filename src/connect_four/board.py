"""The Game board implements all rules that effect the grid: dropping discs and detecting four-in-a-row."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from src.connect_four.coordinate import COLS, ROWS, Coordinate
from src.core.exceptions import ColumnFullError, InvalidBoardError, InvalidColumnError
from src.core.shared_types import Color

Cell = Optional[Color]
Grid = tuple[tuple[Cell, ...], ...]

WIN_LENGTH = 4

VALUE_TO_COLOR: dict[str, Color] = {color.value: color for color in Color}

# Scan directions (d_row, d_col), each walked from its negative extreme towards the positive one.
# NOTE vertical is walked bottom -> top, so a vertical four is reported starting from the lowest disc.
DIRECTIONS: tuple[tuple[int, int], ...] = (
    (0, 1),  # horizontal
    (-1, 0),  # vertical
    (1, 1),  # diagonal, down-right
    (1, -1),  # diagonal, down-left (reported from its top-right end)
)


@dataclass(frozen=True)
class Board:
    grid: Grid

    @classmethod
    def empty(cls) -> Board:
        return cls(tuple(tuple(None for _ in range(COLS)) for _ in range(ROWS)))

    @classmethod
    def from_rows(cls, rows: list[list[str]]) -> Board:
        """
        Construct a board from its persisted form: a list of ROWS rows, top row first,
        every cell one of "Y", "R" or "" (empty).
        """
        if len(rows) != ROWS or any(len(row) != COLS for row in rows):
            raise InvalidBoardError(f"Board must have {ROWS} rows of {COLS} cells.")

        grid: list[tuple[Cell, ...]] = []
        for row in rows:
            cells: list[Cell] = []
            for value in row:
                if value == "":
                    cells.append(None)
                elif value in VALUE_TO_COLOR:
                    cells.append(VALUE_TO_COLOR[value])
                else:
                    raise InvalidBoardError(f"Unknown cell value {value!r}.")
            grid.append(tuple(cells))

        board = cls(tuple(grid))
        board._assert_no_floating_discs()
        return board

    def to_rows(self) -> list[list[str]]:
        return [[cell.value if cell else "" for cell in row] for row in self.grid]

    def cell(self, row: int, col: int) -> Cell:
        return self.grid[row][col]

    # --- DROPPING DISCS ---
    def available_row(self, column: int) -> Optional[int]:
        """Lowest free row of the column (highest row index), None once the column is full."""
        _check_column(column)
        for row in range(ROWS - 1, -1, -1):
            if self.grid[row][column] is None:
                return row
        return None

    def can_drop(self, column: int) -> bool:
        if not (0 <= column < COLS):
            return False
        return self.grid[0][column] is None

    def drop(self, column: int, color: Color) -> tuple[Board, int]:
        """Returns a new board with the disc added, plus the row where the disc landed. The board itself is left untouched."""
        row = self.available_row(column)
        if row is None:
            raise ColumnFullError(f"Column {column} is full.")

        changed = self.grid[row][:column] + (color,) + self.grid[row][column + 1 :]
        grid = self.grid[:row] + (changed,) + self.grid[row + 1 :]
        return Board(grid), row

    def legal_columns(self) -> list[int]:
        return [column for column in range(COLS) if self.can_drop(column)]

    # --- BOARD STATE ---
    def is_full(self) -> bool:
        """Columns fill bottom-up, so checking the top row is enough."""
        return all(cell is not None for cell in self.grid[0])

    def empty_cells(self) -> int:
        return sum(cell is None for row in self.grid for cell in row)

    def filled_cells(self) -> int:
        return ROWS * COLS - self.empty_cells()

    def check_win_at(self, row: int, col: int, color: Color) -> tuple[bool, list[Coordinate]]:
        """
        Look for four-in-a-row of `color` through (row, col).
        ----

        For every direction, walk the seven cells from 3 steps "behind" the point to 3 steps "ahead" of it.
        The first run of at least four contiguous discs wins, and its first four cells get reported
        (these are the cells the frontend highlights, so the order must not change between calls).
        """
        for d_row, d_col in DIRECTIONS:
            run: list[Coordinate] = []
            for step in range(-(WIN_LENGTH - 1), WIN_LENGTH):
                coordinate = Coordinate(row + step * d_row, col + step * d_col)
                if coordinate.is_within_bounds() and self.cell(coordinate.row, coordinate.col) == color:
                    run.append(coordinate)
                    continue
                if len(run) >= WIN_LENGTH:
                    break
                run = []
            if len(run) >= WIN_LENGTH:
                return True, run[:WIN_LENGTH]
        return False, []

    def completes_four(self, row: int, col: int, color: Color) -> bool:
        """Same verdict as check_win_at, without collecting the cells. Used in the search's inner loop."""
        if self.grid[row][col] != color:
            return False
        for d_row, d_col in DIRECTIONS:
            count = 1
            for sign in (1, -1):
                r, c = row + sign * d_row, col + sign * d_col
                while 0 <= r < ROWS and 0 <= c < COLS and self.grid[r][c] == color:
                    count += 1
                    r, c = r + sign * d_row, c + sign * d_col
            if count >= WIN_LENGTH:
                return True
        return False

    def mirrored(self) -> Board:
        """Reflect the board left-to-right."""
        return Board(tuple(tuple(reversed(row)) for row in self.grid))

    # --- VALIDATION ---
    def _assert_no_floating_discs(self) -> None:
        """Within a column, once a disc is found (scanning top-down) every cell below must hold a disc too."""
        for column in range(COLS):
            seen_disc = False
            for row in range(ROWS):
                if self.grid[row][column] is not None:
                    seen_disc = True
                elif seen_disc:
                    raise InvalidBoardError(
                        f"Floating disc in column {column}: empty cell at row {row} below a disc."
                    )


def _check_column(column: int) -> None:
    # negative indexes would silently wrap around to the right edge
    if not (0 <= column < COLS):
        raise InvalidColumnError(f"Column {column} is outside of [0, {COLS}).")
