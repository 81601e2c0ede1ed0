"""Fetch the instant-game catalog and the detail of every listed game."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import requests
from marshmallow import ValidationError

from lotto_ingest.cancellation import CancellationToken
from lotto_ingest.errors import CatalogError, GameDetailError, OperationCancelled
from lotto_ingest.schemas.game import GameRecord, GameSchema
from lotto_ingest.services.detail_fetcher import GameDetailFetcher
from lotto_ingest.services.http_client import get_json

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchOutcome:
    """Result of fetching one listed game."""

    game_id: int
    game: GameRecord | None = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.game is not None


class CatalogFetcher:
    """Two-stage traversal: list endpoint, then one detail call per game.

    One game failing never stops the traversal; failed games are kept in
    :attr:`failures` and left out of the result. A cancelled detail call
    counts as such a failure, so once the token fires every remaining game
    is skipped without a request.
    """

    def __init__(
        self,
        http: requests.Session,
        api_url: str,
        detail_fetcher: GameDetailFetcher,
        *,
        timeout_seconds: float = 30.0,
        cancellation: CancellationToken | None = None,
    ) -> None:
        self._http = http
        self._api_url = api_url
        self._detail_fetcher = detail_fetcher
        self._timeout_seconds = timeout_seconds
        self._cancellation = cancellation
        self._schema = GameSchema()
        self.failures: list[FetchOutcome] = []
        self.cancelled = False

    def _fetch_listing(self) -> list[Any]:
        try:
            payload = get_json(
                self._http,
                self._api_url,
                timeout_seconds=self._timeout_seconds,
                cancellation=self._cancellation,
            )
        except requests.JSONDecodeError as exc:
            raise CatalogError(f"JSON parsing error: {exc}") from exc
        except requests.RequestException as exc:
            raise CatalogError(f"HTTP request error: {exc}") from exc

        if not isinstance(payload, list) or not payload:
            raise CatalogError("No games found from API response.")
        return payload

    def _listed_game_ids(self, entries: list[Any]) -> list[int]:
        game_ids: list[int] = []
        for index, entry in enumerate(entries):
            if entry is None:
                continue
            try:
                summary: GameRecord = self._schema.load(entry)
            except ValidationError as exc:
                logger.warning("Skipping listing entry %s with invalid fields: %s", index, exc.messages)
                continue

            # Incomplete listing entries come back without an id.
            if summary.mass_game_id == 0:
                logger.info("Skipping game with missing or invalid MassGameId.")
                continue
            game_ids.append(summary.mass_game_id)
        return game_ids

    def _fetch_one(self, game_id: int) -> FetchOutcome:
        logger.info("Fetching details for game ID: %s", game_id)
        try:
            game = self._detail_fetcher.fetch(game_id)
        except OperationCancelled:
            logger.warning("Operation was canceled for game ID %s, skipping.", game_id)
            self.cancelled = True
            return FetchOutcome(game_id, reason="cancelled")
        except requests.JSONDecodeError as exc:
            logger.warning("JSON parsing error for game ID %s: %s", game_id, exc)
            return FetchOutcome(game_id, reason=f"json: {exc}")
        except requests.RequestException as exc:
            logger.warning("Network error while fetching game ID %s: %s", game_id, exc)
            return FetchOutcome(game_id, reason=f"network: {exc}")
        except ValidationError as exc:
            logger.warning("Invalid detail payload for game ID %s: %s", game_id, exc.messages)
            return FetchOutcome(game_id, reason=f"invalid: {exc.messages}")
        except GameDetailError as exc:
            logger.warning("%s, skipping.", exc.message)
            return FetchOutcome(game_id, reason=exc.code)
        except Exception as exc:
            logger.exception("Error fetching details for game ID %s", game_id)
            return FetchOutcome(game_id, reason=f"error: {exc}")
        return FetchOutcome(game_id, game=game)

    def fetch_all(self) -> list[GameRecord]:
        """Return every listed game whose detail was fetched and validated.

        Raises:
            CatalogError: the list endpoint failed or returned no games.
        """

        games: list[GameRecord] = []
        self.failures = []
        self.cancelled = False

        logger.info("Fetching data from %s", self._api_url)
        try:
            game_ids = self._listed_game_ids(self._fetch_listing())
            for game_id in game_ids:
                outcome = self._fetch_one(game_id)
                if outcome.ok:
                    games.append(outcome.game)  # type: ignore[arg-type]
                else:
                    self.failures.append(outcome)
        except OperationCancelled:
            # Only the list call gets here; detail calls are skipped per game.
            logger.warning("Operation was canceled.")
            self.cancelled = True
            return games
        except CatalogError as exc:
            logger.error("Catalog fetch failed: %s", exc.message)
            raise
        except Exception:
            logger.exception("An unexpected error occurred while fetching the catalog")
            raise

        logger.info(
            "Data fetching complete: %s games fetched, %s skipped",
            len(games),
            len(self.failures),
        )
        return games
