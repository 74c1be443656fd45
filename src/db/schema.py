"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import JSON
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from src.core.shared_types import Status


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBGame(Base):
    __tablename__ = "games"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    human_color: Mapped[str]
    mode: Mapped[str]
    state: Mapped[str] = mapped_column(default=Status.PLAYING.value, index=True)
    board: Mapped[list[list[str]]] = mapped_column(JSON)
    current_turn: Mapped[str]
    moves: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    result: Mapped[Optional[str]]
    winning_cells: Mapped[list[dict[str, int]]] = mapped_column(JSON, default=list)
    last_move: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    # bumped on every update, a concurrent writer holding an older version fails its flush
    version: Mapped[int] = mapped_column(default=1)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)

    __mapper_args__ = {"version_id_col": version}
