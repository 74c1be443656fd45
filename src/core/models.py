"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from typing import Optional

# Type aliases to make GameModel easier to read
CellValue = str  # "Y", "R" or "" (empty)
MoveRecord = dict[str, str | int]  # {"color": "Y", "column": 2, "timestamp": 1700000000000}
LastMoveRecord = dict[str, str | int]  # {"color": "Y", "column": 2, "row": 3}
CellRecord = dict[str, int]  # {"row": 3, "col": 2}


@dataclass
class GameModel:
    """Transport-safe representation of a Connect-Four game used between API, Service, DB, and Game layers."""

    human_color: str
    mode: str
    state: str
    board: list[list[CellValue]]
    current_turn: str
    moves: list[MoveRecord]
    result: Optional[str] = None
    winning_cells: list[CellRecord] = field(default_factory=list)
    last_move: Optional[LastMoveRecord] = None
