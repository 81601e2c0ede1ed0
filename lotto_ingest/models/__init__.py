"""ORM models."""

from lotto_ingest.models.game import Game
from lotto_ingest.models.prize_tier import PrizeTier

__all__ = ["Game", "PrizeTier"]
