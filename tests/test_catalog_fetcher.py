"""Unit tests for the catalog traversal."""

from __future__ import annotations

import pytest

from fake_api import API_URL, FakeLotteryApi, game_detail
from lotto_ingest.cancellation import CancellationToken
from lotto_ingest.errors import CatalogError
from lotto_ingest.services.catalog_fetcher import CatalogFetcher
from lotto_ingest.services.detail_fetcher import GameDetailFetcher


def _catalog(api: FakeLotteryApi, cancellation: CancellationToken | None = None) -> CatalogFetcher:
    detail = GameDetailFetcher(api, API_URL, timeout_seconds=5, cancellation=cancellation)  # type: ignore[arg-type]
    return CatalogFetcher(api, API_URL, detail, timeout_seconds=5, cancellation=cancellation)  # type: ignore[arg-type]


def test_fetch_all_returns_games_with_details() -> None:
    """Each listed game should be fetched through the detail endpoint."""
    api = FakeLotteryApi(
        [{"massGameId": 100, "gameName": "A"}, {"massGameId": 101, "gameName": "B"}],
        {100: game_detail(100), 101: game_detail(101)},
    )

    games = _catalog(api).fetch_all()

    assert [g.mass_game_id for g in games] == [100, 101]
    assert api.calls == [None, {"gameID": 100}, {"gameID": 101}]


def test_zero_id_and_tierless_games_are_excluded() -> None:
    """Entry with id 0 is filtered; game 42 without tiers is dropped."""
    api = FakeLotteryApi(
        [{"massGameId": 0, "gameName": "incomplete"}, {"massGameId": 42}, {"massGameId": 100}],
        {42: game_detail(42, tiers=[]), 100: game_detail(100)},
    )
    catalog = _catalog(api)

    games = catalog.fetch_all()

    assert [g.mass_game_id for g in games] == [100]
    assert {"gameID": 0} not in api.calls
    assert [(f.game_id, f.reason) for f in catalog.failures] == [(42, "game_detail_error")]


def test_null_and_invalid_listing_entries_are_skipped() -> None:
    """Null entries and entries that fail validation do not stop the run."""
    api = FakeLotteryApi([None, {"massGameId": "x"}, {"massGameId": 100}], {100: game_detail(100)})

    games = _catalog(api).fetch_all()

    assert [g.mass_game_id for g in games] == [100]


def test_per_game_failures_do_not_abort_traversal() -> None:
    """Network, status, JSON and schema failures only skip their own game."""
    api = FakeLotteryApi(
        [{"massGameId": i} for i in (1, 2, 3, 4, 5)],
        {2: game_detail(2), 4: {"massGameId": 4, "startDate": "soon"}, 5: game_detail(5)},
    )
    api.network_errors.add(1)
    api.detail_status[2] = 500
    api.raw_detail[3] = b"<html>not json</html>"
    catalog = _catalog(api)

    games = catalog.fetch_all()

    assert [g.mass_game_id for g in games] == [5]
    assert [f.game_id for f in catalog.failures] == [1, 2, 3, 4]
    assert not any(f.ok for f in catalog.failures)


@pytest.mark.parametrize("listing", [[], None, {"games": []}])
def test_empty_or_invalid_listing_is_fatal(listing) -> None:
    """An empty or non-array catalog aborts the run."""
    api = FakeLotteryApi(listing)

    with pytest.raises(CatalogError):
        _catalog(api).fetch_all()


def test_listing_error_status_is_fatal() -> None:
    """A non-success status from the list endpoint aborts the run."""
    api = FakeLotteryApi([{"massGameId": 1}])
    api.listing_status = 502

    with pytest.raises(CatalogError):
        _catalog(api).fetch_all()


def test_cancellation_skips_remaining_games_and_keeps_fetched_games() -> None:
    """Cancelling mid-run skips the rest per game and is not re-raised."""
    api = FakeLotteryApi(
        [{"massGameId": i} for i in (1, 2, 3)],
        {1: game_detail(1), 2: game_detail(2), 3: game_detail(3)},
    )
    token = CancellationToken()
    api.on_get = lambda params: token.cancel() if params == {"gameID": 2} else None
    catalog = _catalog(api, cancellation=token)

    games = catalog.fetch_all()

    assert [g.mass_game_id for g in games] == [1]
    assert catalog.cancelled is True
    assert [(f.game_id, f.reason) for f in catalog.failures] == [(2, "cancelled"), (3, "cancelled")]
    assert {"gameID": 3} not in api.calls


def test_cancelled_listing_returns_no_games() -> None:
    """A token that fired before the list call yields an empty, cancelled run."""
    api = FakeLotteryApi([{"massGameId": 1}], {1: game_detail(1)})
    token = CancellationToken()
    token.cancel()
    catalog = _catalog(api, cancellation=token)

    assert catalog.fetch_all() == []
    assert catalog.cancelled is True
    assert api.calls == []


def test_unexpected_errors_are_reraised(monkeypatch) -> None:
    """Errors outside the per-game handling propagate to the caller."""
    api = FakeLotteryApi([{"massGameId": 1}], {1: game_detail(1)})
    catalog = _catalog(api)

    def _boom() -> list:
        raise RuntimeError("listing exploded")

    monkeypatch.setattr(catalog, "_fetch_listing", _boom)

    with pytest.raises(RuntimeError):
        catalog.fetch_all()
