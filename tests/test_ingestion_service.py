"""Tests for a full ingestion run against a fake API and SQLite."""

from __future__ import annotations

import pytest

from fake_api import API_URL, FakeLotteryApi, game_detail, prize_tier, rich_text
from lotto_ingest.cancellation import CancellationToken
from lotto_ingest.errors import CatalogError, DatabaseUnavailableError
from lotto_ingest.services.catalog_fetcher import CatalogFetcher
from lotto_ingest.services.detail_fetcher import GameDetailFetcher
from lotto_ingest.services.ingestion_service import IngestionService


def _service(api: FakeLotteryApi, repository, cancellation: CancellationToken | None = None) -> IngestionService:
    detail = GameDetailFetcher(api, API_URL, timeout_seconds=5, cancellation=cancellation)  # type: ignore[arg-type]
    catalog = CatalogFetcher(api, API_URL, detail, timeout_seconds=5, cancellation=cancellation)  # type: ignore[arg-type]
    return IngestionService(catalog, repository, show_progress=False, cancellation=cancellation)


def _api() -> FakeLotteryApi:
    return FakeLotteryApi(
        [{"massGameId": 0}, {"massGameId": 42}, {"massGameId": 100}, {"massGameId": 101}],
        {
            42: game_detail(42, tiers=[]),
            100: game_detail(100, prizeTierInfo=rich_text("based on the sale of approximately 18,144,000 tickets")),
            101: game_detail(101, tiers=[prize_tier(1, 50, 10, 0, 10)], secondChanceInfo=rich_text("10,340,000")),
        },
    )


def test_run_stores_new_games(repository) -> None:
    """Valid games are stored with their tiers and printed counts."""
    summary = _service(_api(), repository).run()

    assert summary.fetched == 2
    assert summary.inserted == 2
    assert summary.fetch_failures == 1
    assert summary.tiers_inserted == 3
    assert repository.exists(100) and repository.exists(101)
    assert not repository.exists(42)
    assert repository.count_prize_tiers(100) == 2
    assert repository.count_prize_tiers(101) == 1


def test_second_run_is_idempotent(repository) -> None:
    """Running twice stores one copy of each game."""
    _service(_api(), repository).run()

    summary = _service(_api(), repository).run()

    assert summary.inserted == 0
    assert summary.skipped_existing == 2
    assert repository.count_prize_tiers(100) == 2


def test_rejected_insert_is_counted_and_run_continues(repository, monkeypatch) -> None:
    """A game the database rejects does not stop later games."""
    insert = repository.insert_game_with_tiers

    def _insert_with_bad_tier(game):
        if game.mass_game_id == 100:
            game.prize_tiers[1].prize_description = None
        insert(game)

    monkeypatch.setattr(repository, "insert_game_with_tiers", _insert_with_bad_tier)

    summary = _service(_api(), repository).run()

    assert summary.failed == 1
    assert summary.inserted == 1
    assert not repository.exists(100)
    assert repository.exists(101)


def test_fatal_catalog_failure_propagates(repository) -> None:
    """An empty catalog aborts the run."""
    with pytest.raises(CatalogError):
        _service(FakeLotteryApi([]), repository).run()


def test_unreachable_database_is_fatal(repository, monkeypatch) -> None:
    """No API calls are made when the database does not answer."""
    api = _api()
    monkeypatch.setattr(repository, "check_connection", lambda: False)

    with pytest.raises(DatabaseUnavailableError):
        _service(api, repository).run()

    assert api.calls == []


def test_cancel_while_storing_stops_before_next_game(repository, monkeypatch) -> None:
    """Games after a cancellation requested mid-store are left unstored."""
    token = CancellationToken()
    insert = repository.insert_game_with_tiers

    def _insert_then_cancel(game):
        insert(game)
        token.cancel()

    monkeypatch.setattr(repository, "insert_game_with_tiers", _insert_then_cancel)

    summary = _service(_api(), repository, cancellation=token).run()

    assert summary.fetched == 2
    assert summary.inserted == 1
    assert summary.cancelled is True
    assert repository.exists(100)
    assert not repository.exists(101)


def test_games_fetched_before_cancel_are_still_stored(repository) -> None:
    """A cancellation during fetching keeps and stores the earlier games."""
    api = _api()
    token = CancellationToken()
    api.on_get = lambda params: token.cancel() if params == {"gameID": 101} else None

    summary = _service(api, repository, cancellation=token).run()

    assert summary.cancelled is True
    assert summary.inserted == 1
    assert summary.fetch_failures == 2
    assert repository.exists(100)
    assert not repository.exists(101)
