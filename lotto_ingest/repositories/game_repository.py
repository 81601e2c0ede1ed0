"""Repository layer for game + prize tier persistence."""

from __future__ import annotations

import logging

from sqlalchemy import func, select, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from lotto_ingest.db import create_session_factory
from lotto_ingest.models.game import Game
from lotto_ingest.models.prize_tier import PrizeTier
from lotto_ingest.schemas.game import GameRecord

logger = logging.getLogger(__name__)


class GameRepository:
    """Existence checks and all-or-nothing inserts of a game with its tiers.

    Does not deduplicate: callers check :meth:`exists` first. Inserting an id
    that is already stored raises ``sqlalchemy.exc.IntegrityError``.
    """

    def __init__(self, engine: Engine, session_factory: sessionmaker[Session] | None = None) -> None:
        self._engine = engine
        self._session_factory = session_factory or create_session_factory(engine)

    def check_connection(self) -> bool:
        """Return True if the database answers a trivial query."""

        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            logger.error("Database connection error: %s", exc)
            return False
        return True

    def exists(self, mass_game_id: int) -> bool:
        with self._session_factory() as session:
            return session.get(Game, mass_game_id) is not None

    def count_prize_tiers(self, mass_game_id: int) -> int:
        stmt = select(func.count()).select_from(PrizeTier).where(PrizeTier.mass_game_id == mass_game_id)
        with self._session_factory() as session:
            return int(session.scalar(stmt) or 0)

    def insert_game_with_tiers(self, game: GameRecord) -> None:
        """Insert the game row, then each prize tier in order, in one transaction.

        On any failure the transaction is rolled back and the original
        exception is re-raised.
        """

        session = self._session_factory()
        try:
            session.add(
                Game(
                    mass_game_id=game.mass_game_id,
                    game_name=game.game_name,
                    game_identifier=game.game_identifier,
                    start_date=game.start_date,
                    ticket_cost=game.ticket_cost,
                    odds=game.odds,
                    amount_printed=game.amount_printed,
                )
            )
            session.flush()

            for tier in game.prize_tiers:
                session.add(
                    PrizeTier(
                        mass_game_id=game.mass_game_id,
                        tier_number=tier.tier_number,
                        prize_amount=tier.prize_amount,
                        total_prizes=tier.total_prizes,
                        paid_prizes=tier.paid_prizes,
                        prizes_remaining=tier.prizes_remaining,
                        prize_description=tier.prize_description,
                        type_of_win=tier.type,
                    )
                )
                session.flush()

            session.commit()
        except Exception as exc:
            logger.error("Error inserting game %s: %s", game.mass_game_id, exc)
            try:
                session.rollback()
                logger.info("Transaction rolled back for game %s", game.mass_game_id)
            except Exception:
                logger.exception("Error during rollback for game %s", game.mass_game_id)
            raise
        finally:
            session.close()

        logger.info(
            "Successfully inserted game '%s' (ID: %s) with %s prize tiers",
            game.game_name,
            game.mass_game_id,
            len(game.prize_tiers),
        )
