"""Instant game ORM model.

One row per game, keyed by the lottery's own game id. Column names follow
the upstream API field names.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from lotto_ingest.models.base import Base


class Game(Base):
    """A single instant game."""

    __tablename__ = "games"

    mass_game_id: Mapped[int] = mapped_column("massGameId", Integer, primary_key=True, autoincrement=False)
    game_name: Mapped[str] = mapped_column("gameName", String(255), nullable=False)
    game_identifier: Mapped[str] = mapped_column("gameIdentifier", String(50), nullable=False)
    start_date: Mapped[datetime | None] = mapped_column("startDate", DateTime, nullable=True)
    ticket_cost: Mapped[int] = mapped_column("ticketCost", Integer, nullable=False)
    odds: Mapped[str | None] = mapped_column("odds", Text, nullable=True)
    amount_printed: Mapped[int | None] = mapped_column("amountPrinted", Integer, nullable=True)
