"""Business logic for one ingestion run: fetch the catalog, store new games."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import DataError, IntegrityError
from tqdm import tqdm

from lotto_ingest.cancellation import CancellationToken
from lotto_ingest.errors import DatabaseUnavailableError
from lotto_ingest.repositories.game_repository import GameRepository
from lotto_ingest.services.catalog_fetcher import CatalogFetcher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngestionSummary:
    fetched: int
    inserted: int
    skipped_existing: int
    failed: int
    fetch_failures: int
    cancelled: bool = False
    tiers_inserted: int = 0


class IngestionService:
    """Stores every fetched game that is not already in the database.

    Games are handled one at a time; each game is committed or rolled back
    on its own. The exists-then-insert check is only safe because nothing
    else writes to the tables during a run.

    Games fetched before a cancellation are still stored. A cancellation
    requested while storing stops the loop before the next game.
    """

    def __init__(
        self,
        catalog: CatalogFetcher,
        repository: GameRepository,
        *,
        show_progress: bool = True,
        cancellation: CancellationToken | None = None,
    ) -> None:
        self._catalog = catalog
        self._repo = repository
        self._show_progress = show_progress
        self._cancellation = cancellation

    def _cancelled_while_storing(self) -> bool:
        return self._cancellation is not None and self._cancellation.cancelled and not self._catalog.cancelled

    def run(self) -> IngestionSummary:
        """Run one pass.

        Raises:
            DatabaseUnavailableError: the database did not answer.
            CatalogError: the game list could not be fetched.
            sqlalchemy.exc.SQLAlchemyError: a storage failure other than a
                rejected row (e.g. the connection dropped mid-run).
        """

        if not self._repo.check_connection():
            raise DatabaseUnavailableError("Failed to connect to the database.")
        logger.info("Database connection successful")

        games = self._catalog.fetch_all()

        inserted = 0
        tiers_inserted = 0
        skipped_existing = 0
        failed = 0
        stopped = False
        for index, game in enumerate(tqdm(games, desc="Storing", disable=not self._show_progress)):
            if self._cancelled_while_storing():
                logger.warning("Operation was canceled; %s fetched games were not stored", len(games) - index)
                stopped = True
                break

            if self._repo.exists(game.mass_game_id):
                logger.debug("Game %s already stored, skipping", game.mass_game_id)
                skipped_existing += 1
                continue

            logger.info("Inserting %s into the database...", game.game_name)
            try:
                self._repo.insert_game_with_tiers(game)
            except (IntegrityError, DataError) as exc:
                logger.warning("Game %s was not stored: %s", game.mass_game_id, exc.orig or exc)
                failed += 1
                continue
            inserted += 1
            tiers_inserted += self._repo.count_prize_tiers(game.mass_game_id)

        summary = IngestionSummary(
            fetched=len(games),
            inserted=inserted,
            skipped_existing=skipped_existing,
            failed=failed,
            fetch_failures=len(self._catalog.failures),
            cancelled=self._catalog.cancelled or stopped,
            tiers_inserted=tiers_inserted,
        )
        logger.info(
            "Run complete: %s fetched, %s inserted with %s prize tiers, %s already stored, %s failed to store, "
            "%s failed to fetch",
            summary.fetched,
            summary.inserted,
            summary.tiers_inserted,
            summary.skipped_existing,
            summary.failed,
            summary.fetch_failures,
        )
        return summary
