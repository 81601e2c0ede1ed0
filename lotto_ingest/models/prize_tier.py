"""Prize tiers for a game (stored separately from the game row)."""

from __future__ import annotations

from sqlalchemy import BigInteger, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from lotto_ingest.models.base import Base


class PrizeTier(Base):
    """One reward bracket of a game. Tier numbers repeat across games."""

    __tablename__ = "prizeTiers"

    prize_tier_id: Mapped[int] = mapped_column("prizeTierId", Integer, primary_key=True, autoincrement=True)
    mass_game_id: Mapped[int] = mapped_column(
        "massGameId", Integer, ForeignKey("games.massGameId", ondelete="CASCADE"), index=True
    )
    tier_number: Mapped[int] = mapped_column("tierNumber", Integer, nullable=False)
    prize_amount: Mapped[int] = mapped_column("prizeAmount", BigInteger, nullable=False)
    total_prizes: Mapped[int] = mapped_column("totalPrizes", Integer, nullable=False)
    paid_prizes: Mapped[int] = mapped_column("paidPrizes", Integer, nullable=False)
    prizes_remaining: Mapped[int] = mapped_column("prizesRemaining", Integer, nullable=False)
    prize_description: Mapped[str] = mapped_column("prizeDescription", Text, nullable=False)
    type_of_win: Mapped[str] = mapped_column("typeOfWin", String(100), nullable=False)
