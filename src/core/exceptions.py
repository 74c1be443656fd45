"""
Exceptions raised by the domain, service and persistence layers.

Every exception carries a stable `kind`, so callers (UI, orchestrator, logs) can report the
error category without parsing messages.
"""

from enum import StrEnum


class ErrorKind(StrEnum):
    NOT_PLAYING = "NotPlaying"
    WRONG_TURN = "WrongTurn"
    INVALID_COLUMN = "InvalidColumn"
    COLUMN_FULL = "ColumnFull"
    NOT_FOUND = "NotFound"
    NO_LEGAL_MOVE = "NoLegalMove"
    INVALID_BOARD = "InvalidBoard"
    INVALID_REQUEST = "InvalidRequest"
    GAME_ERROR = "GameError"


class GameError(Exception):
    """Top-level exception of this application."""

    kind: ErrorKind = ErrorKind.GAME_ERROR


class GameStateError(GameError):
    """The game is not in a state that allows the request (e.g. it already finished)."""

    kind = ErrorKind.NOT_PLAYING


class NotYourTurnError(GameError):
    kind = ErrorKind.WRONG_TURN


class IllegalMoveError(GameError):
    """A drop that the rules do not allow."""


class InvalidColumnError(IllegalMoveError):
    kind = ErrorKind.INVALID_COLUMN


class ColumnFullError(IllegalMoveError):
    kind = ErrorKind.COLUMN_FULL


class NoLegalMoveError(GameError):
    """Search was asked for a move on a board without any open column."""

    kind = ErrorKind.NO_LEGAL_MOVE


class InvalidBoardError(GameError):
    """Grid has the wrong shape, unknown cell values, or floating discs."""

    kind = ErrorKind.INVALID_BOARD


class InvalidRequestError(GameError):
    # NOTE not a ValueError: pydantic lets it propagate from validators unchanged
    kind = ErrorKind.INVALID_REQUEST


class RepositoryError(GameError):
    pass


class GameNotFoundError(RepositoryError):
    kind = ErrorKind.NOT_FOUND


class StaleGameError(RepositoryError):
    """The stored game changed after it was read: the update was derived from an outdated state."""
