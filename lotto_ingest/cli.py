"""Command-line entry point for an ingestion run."""

from __future__ import annotations

import argparse
import dataclasses
import logging
from collections.abc import Sequence

from sqlalchemy.exc import SQLAlchemyError

from lotto_ingest.cancellation import CancellationToken
from lotto_ingest.config import IngestionConfig, get_config, load_environment
from lotto_ingest.db import create_app_engine, init_schema
from lotto_ingest.errors import IngestionError
from lotto_ingest.logging_config import configure_logging
from lotto_ingest.repositories.game_repository import GameRepository
from lotto_ingest.services.catalog_fetcher import CatalogFetcher
from lotto_ingest.services.detail_fetcher import GameDetailFetcher
from lotto_ingest.services.http_client import build_http_session
from lotto_ingest.services.ingestion_service import IngestionService, IngestionSummary
from lotto_ingest.utils.ticket_text import get_extractor

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fetch instant games and their prize tiers into the DB")
    parser.add_argument(
        "--database-url",
        dest="database_url",
        type=str,
        default=None,
        help="Override DB connection string (e.g. sqlite:///./lottery.db)",
    )
    parser.add_argument("--api-url", dest="api_url", type=str, default=None, help="Override the game prizes API URL")
    parser.add_argument("--timeout", dest="timeout_seconds", type=float, default=None)
    parser.add_argument(
        "--lenient-extraction",
        action="store_true",
        help="Also accept looser printed-ticket phrasings such as 'N tickets'",
    )
    parser.add_argument("--log-level", dest="log_level", type=str, default=None)
    parser.add_argument("--no-progress", action="store_true", help="Disable the progress bar")
    return parser


def _apply_overrides(config: IngestionConfig, args: argparse.Namespace) -> IngestionConfig:
    overrides: dict[str, object] = {}
    if args.database_url:
        overrides["database_url"] = str(args.database_url)
    if args.api_url:
        overrides["api_url"] = str(args.api_url)
    if args.timeout_seconds is not None and args.timeout_seconds > 0:
        overrides["timeout_seconds"] = float(args.timeout_seconds)
    if args.lenient_extraction:
        overrides["ticket_extraction"] = "lenient"
    if args.log_level:
        overrides["log_level"] = str(args.log_level)
    if args.no_progress:
        overrides["show_progress"] = False
    return dataclasses.replace(config, **overrides)


def run_pipeline(config: IngestionConfig, cancellation: CancellationToken | None = None) -> IngestionSummary:
    """Wire the fetchers and repository for ``config`` and run one pass."""

    engine = create_app_engine(config.database_url)
    try:
        init_schema(engine)
        http = build_http_session()
        with http:
            detail = GameDetailFetcher(
                http,
                config.api_url,
                timeout_seconds=config.timeout_seconds,
                extractor=get_extractor(config.ticket_extraction),
                cancellation=cancellation,
            )
            catalog = CatalogFetcher(
                http,
                config.api_url,
                detail,
                timeout_seconds=config.timeout_seconds,
                cancellation=cancellation,
            )
            service = IngestionService(
                catalog,
                GameRepository(engine),
                show_progress=config.show_progress,
                cancellation=cancellation,
            )
            return service.run()
    finally:
        engine.dispose()


def main(argv: Sequence[str] | None = None) -> int:
    """Run one ingestion pass. Returns the process exit code."""

    args = _build_parser().parse_args(argv)

    load_environment()
    config = _apply_overrides(get_config(), args)
    configure_logging(config.log_level)

    cancellation = CancellationToken()
    cancellation.install_signal_handlers()

    try:
        summary = run_pipeline(config, cancellation)
    except IngestionError as exc:
        logger.error("Run failed (%s): %s", exc.code, exc.message)
        return 1
    except SQLAlchemyError as exc:
        logger.error("Run failed (database): %s", exc)
        return 1
    finally:
        cancellation.restore_signal_handlers()

    if summary.cancelled:
        logger.warning("Run was canceled before every game was fetched and stored")
    logger.info("Script completed successfully!")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
