"""
Drives the computer player(s) of a game.

Whenever the stored game is playing and the side to move is a computer, run the search on the current
board and submit the column through the GameService, like any other move. The search result is never merged
into the stored game directly: if the game changed meanwhile, the service rejects the stale move and the
orchestrator looks at the game again.
"""

import random
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Optional
from uuid import UUID

from loguru import logger

from src.api.models import GameResponse, GetGameRequest, MoveRequest
from src.connect_four.board import Board
from src.connect_four.search import choose_move
from src.core.config import AI_DELAY_MAX, AI_DELAY_MIN, ORCHESTRATOR_MAX_ATTEMPTS
from src.core.exceptions import GameStateError, NoLegalMoveError, NotYourTurnError
from src.core.shared_types import Color, GameMode, Status
from src.services.game_service import GameService

MoveChooser = Callable[[Board, Color], int]


@dataclass
class DelayPolicy:
    """
    How long the computer "thinks" before its move is submitted. Pure presentation pacing, the default is no delay.
    (A browser client would use e.g. 1-3s against a human and 0.5-1.5s for computer vs computer.)
    """

    minimum: float = AI_DELAY_MIN
    maximum: float = AI_DELAY_MAX
    rng: random.Random = field(default_factory=random.Random)

    def next_delay(self) -> float:
        if self.maximum <= 0:
            return 0.0
        return self.rng.uniform(self.minimum, self.maximum)


def is_computer_turn(game: GameResponse) -> bool:
    if game.state != Status.PLAYING:
        return False
    if game.mode == GameMode.AI_VS_AI:
        return True
    return game.current_turn != game.human_color


def fallback_column(board: Board) -> Optional[int]:
    """First column that still takes a disc."""
    legal_columns = board.legal_columns()
    return legal_columns[0] if legal_columns else None


class TurnOrchestrator:
    """Plays the computer's turns of games stored behind a GameService."""

    def __init__(
        self,
        service: GameService,
        delay_policy: Optional[DelayPolicy] = None,
        chooser: MoveChooser = choose_move,
        sleep: Callable[[float], None] = time.sleep,
        max_attempts: int = ORCHESTRATOR_MAX_ATTEMPTS,
    ) -> None:
        self.service = service
        self.delay_policy = delay_policy or DelayPolicy()
        self.chooser = chooser
        self.sleep = sleep
        self.max_attempts = max_attempts

    def play_computer_turn(self, game_id: UUID) -> Optional[GameResponse]:
        """
        Play (at most) one computer move.
        ----

        1. read the game; not the computer's turn --> None
        2. search for a column on the board as read
        3. submit it through the service
        4. rejected because the game moved on (wrong turn / not playing)? --> re-read and start over from 1.
           Gives up (re-raises) after `max_attempts` rejected submissions.
        """
        for attempt in range(1, self.max_attempts + 1):
            game = self.service.get_game_state(GetGameRequest(game_id=game_id))
            if not is_computer_turn(game):
                return None

            color = game.current_turn
            column = self._pick_column(game_id, Board.from_rows(game.board), color)
            delay = self.delay_policy.next_delay()
            if delay > 0:
                self.sleep(delay)

            try:
                return self.service.make_move(
                    MoveRequest(game_id=game_id, color=color, column=column)
                )
            except (NotYourTurnError, GameStateError) as error:
                logger.warning(
                    f"Game {game_id}: computer move {color}@{column} rejected ({error.kind}), "
                    f"attempt {attempt}/{self.max_attempts}"
                )
                if attempt == self.max_attempts:
                    raise
        return None

    def run(self, game_id: UUID) -> GameResponse:
        """Keep playing computer turns until the game is over or waits for the human."""
        while self.play_computer_turn(game_id) is not None:
            pass
        return self.service.get_game_state(GetGameRequest(game_id=game_id))

    def schedule(self, game_id: UUID, executor: ThreadPoolExecutor) -> Future[GameResponse]:
        """Run `run` in the background, so the caller never waits on the search."""
        return executor.submit(self.run, game_id)

    def _pick_column(self, game_id: UUID, board: Board, color: Color) -> int:
        try:
            column = self.chooser(board, color)
        except NoLegalMoveError:
            # a playing game should always have an open column: the stored game is inconsistent
            logger.error(f"Game {game_id}: search found no legal move for {color} on a game still playing")
            column = fallback_column(board)
            if column is None:
                raise
        logger.debug(f"Game {game_id}: computer plays {color} in column {column}")
        return column
