"""
Computer player: negamax search with alpha-beta pruning and iterative deepening.

Algorithm overview:

    def negamax(board, depth, alpha, beta, to_move):
        if depth == 0 or board is full:
            return evaluate(board, to_move)
        for column in center-out order:
            drop the disc
            if it completes four: return WIN_SCORE - discs on the board
            score = -negamax(child, depth - 1, -beta, -alpha, opponent)
            alpha = max(alpha, score)
            if alpha >= beta: break
        return best score

Wins are worth less the more discs are on the board, so the quickest forced win is preferred.
Everything here is a pure function of (board, color): no randomness, no shared state.
"""

import time
from dataclasses import dataclass, field
from typing import Optional

from loguru import logger

from src.connect_four.board import Board
from src.connect_four.coordinate import COLS, ROWS
from src.core.config import SEARCH_MAX_DEPTH, SEARCH_TIME_LIMIT
from src.core.exceptions import NoLegalMoveError
from src.core.shared_types import Color

# Center columns take part in more lines of four: search them first for better pruning
MOVE_ORDER: tuple[int, ...] = (2, 1, 3, 0, 4)
CENTER_COLUMN = COLS // 2

WIN_SCORE = 100_000
# Best score above this means a forced win was found; deeper search will not change the choice
DECISIVE_SCORE = 50_000
SCORE_INF = 1_000_000

# The board only has ROWS * COLS cells, so no line of play can be longer than this
MAX_PLY = ROWS * COLS


@dataclass(frozen=True)
class SearchResult:
    """Result of a (completed) search."""

    column: int
    score: int
    depth: int
    nodes: int


class SearchTimeout(Exception):
    """Raised inside the recursion once the wall-clock budget is spent."""


@dataclass
class SearchBudget:
    """Node counter + deadline shared by one search."""

    time_limit: float
    started: float = field(default_factory=time.perf_counter)
    nodes: int = 0

    def visit(self) -> None:
        self.nodes += 1
        if time.perf_counter() - self.started > self.time_limit:
            raise SearchTimeout(f"search exceeded {self.time_limit}s after {self.nodes} nodes")


def ordered_columns(board: Board) -> list[int]:
    return [column for column in MOVE_ORDER if board.can_drop(column)]


def column_weight(column: int) -> int:
    return 3 - abs(column - CENTER_COLUMN)


def evaluate(board: Board, color: Color) -> int:
    """
    Static evaluation from `color`'s point of view: own discs count +weight, opponent discs -weight,
    where the weight favours the center column.
    """
    score = 0
    for row in board.grid:
        for column, cell in enumerate(row):
            if cell is None:
                continue
            weight = column_weight(column)
            score += weight if cell == color else -weight
    return score


def winning_score(board: Board) -> int:
    """Score of a win that was just completed on `board`. Fewer discs --> quicker win --> higher score."""
    return WIN_SCORE - board.filled_cells()


def negamax(
    board: Board,
    depth: int,
    alpha: int,
    beta: int,
    to_move: Color,
    budget: Optional[SearchBudget] = None,
) -> int:
    """Score of `board` for the side to move, searched `depth` plies deep."""
    if budget is not None:
        budget.visit()

    depth = min(depth, MAX_PLY)
    if depth <= 0 or board.is_full():
        return evaluate(board, to_move)

    value = -SCORE_INF
    for column in ordered_columns(board):
        child, row = board.drop(column, to_move)
        if child.completes_four(row, column, to_move):
            return winning_score(child)

        score = -negamax(child, depth - 1, -beta, -alpha, to_move.opponent, budget)
        value = max(value, score)
        alpha = max(alpha, score)
        if alpha >= beta:
            break  # cutoff
    return value


def immediate_win(board: Board, color: Color) -> Optional[int]:
    """First column (in search order) that completes four for `color` right now."""
    for column in ordered_columns(board):
        child, row = board.drop(column, color)
        if child.completes_four(row, column, color):
            return column
    return None


def search(
    board: Board,
    color: Color,
    max_depth: int = SEARCH_MAX_DEPTH,
    time_limit: float = SEARCH_TIME_LIMIT,
) -> SearchResult:
    """
    Iterative deepening driver.
    ----

    1. No open column? --> NoLegalMoveError
    2. A column that wins on the spot is returned right away.
    3. Search depth 1, 2, ... up to min(empty cells, max_depth), keeping the best column of the deepest completed depth.
    4. Stop early once the best score is decisive, or when the time budget runs out (the unfinished depth is discarded).
    """
    columns = ordered_columns(board)
    if not columns:
        raise NoLegalMoveError("No column left to drop a disc in.")

    budget = SearchBudget(time_limit=time_limit)

    winning_column = immediate_win(board, color)
    if winning_column is not None:
        child, _ = board.drop(winning_column, color)
        return SearchResult(winning_column, winning_score(child), depth=1, nodes=len(columns))

    deepest = min(board.empty_cells(), max_depth, MAX_PLY)
    result = SearchResult(columns[0], -SCORE_INF, depth=0, nodes=0)
    for depth in range(1, deepest + 1):
        try:
            column, score = _search_root(board, color, depth, columns, budget)
        except SearchTimeout as timeout:
            logger.warning(f"{timeout}; keeping result of depth {result.depth}")
            break

        result = SearchResult(column, score, depth, budget.nodes)
        logger.debug(f"depth {depth}: column {column} score {score} ({budget.nodes} nodes)")
        if score > DECISIVE_SCORE:
            break
    return result


def choose_move(board: Board, color: Color) -> int:
    """Column the computer plays for `color` on `board`."""
    return search(board, color).column


def _search_root(
    board: Board, color: Color, depth: int, columns: list[int], budget: SearchBudget
) -> tuple[int, int]:
    """Best (column, score) at a fixed depth. Ties keep the column that comes first in MOVE_ORDER."""
    best_column = columns[0]
    best_score = -SCORE_INF
    alpha = -SCORE_INF
    for column in columns:
        child, _ = board.drop(column, color)
        score = -negamax(child, depth - 1, -SCORE_INF, -alpha, color.opponent, budget)
        if score > best_score:
            best_column, best_score = column, score
        alpha = max(alpha, score)
    return best_column, best_score
