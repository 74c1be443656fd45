"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    WAITING = "waiting"
    PLAYING = "playing"
    FINISHED = "finished"


class Color(StrEnum):
    YELLOW = "Y"
    RED = "R"

    @property
    def opponent(self) -> "Color":
        return Color.RED if self == Color.YELLOW else Color.YELLOW


# Yellow always opens the game
FIRST_COLOR = Color.YELLOW


class GameMode(StrEnum):
    HUMAN_VS_AI = "human-vs-ai"
    AI_VS_AI = "ai-vs-ai"


class Outcome(StrEnum):
    YELLOW_WON = "Y won"
    RED_WON = "R won"
    DRAW = "draw"

    @classmethod
    def won_by(cls, color: Color) -> "Outcome":
        return cls.YELLOW_WON if color == Color.YELLOW else cls.RED_WON

    @property
    def winner(self) -> Color | None:
        if self == Outcome.DRAW:
            return None
        return Color.YELLOW if self == Outcome.YELLOW_WON else Color.RED
