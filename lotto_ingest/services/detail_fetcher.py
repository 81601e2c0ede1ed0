"""Fetch one game's detail and derive its printed-ticket count."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import requests

from lotto_ingest.cancellation import CancellationToken
from lotto_ingest.errors import MalformedDetailError, NoPrizeTiersError
from lotto_ingest.schemas.game import GameRecord, GameSchema, TicketTextBlock
from lotto_ingest.services.http_client import get_json
from lotto_ingest.utils.ticket_text import TicketExtractor, extract_printed_tickets

logger = logging.getLogger(__name__)

_MISSING = object()


def _get_field(node: Any, key: str, default: Any = _MISSING) -> Any:
    """Look up ``key`` in a JSON object, ignoring case."""

    if not isinstance(node, Mapping):
        raise TypeError(f"expected a JSON object holding {key!r}, got {type(node).__name__}")
    if key in node:
        return node[key]
    wanted = key.lower()
    for name, value in node.items():
        if str(name).lower() == wanted:
            return value
    if default is _MISSING:
        raise KeyError(key)
    return default


def text_runs(block: TicketTextBlock) -> list[Any]:
    """Inline runs of the first paragraph of a rich-text block.

    Path: ``text.content[0].content``.
    """

    try:
        blocks = _get_field(_get_field(block.document, "text"), "content")
        if not isinstance(blocks, list) or not blocks:
            raise TypeError("text.content is not a non-empty array")
        runs = _get_field(blocks[0], "content")
        if not isinstance(runs, list):
            raise TypeError("text.content[0].content is not an array")
    except (KeyError, TypeError) as exc:
        raise MalformedDetailError(
            message=f"Expected JSON property missing under {block.source.value}: {exc}",
            details={"source": block.source.value},
        ) from exc
    return runs


def find_printed_tickets(block: TicketTextBlock | None, extractor: TicketExtractor) -> int | None:
    """Return the first count the extractor finds in the block's text runs."""

    if block is None:
        return None

    for run in text_runs(block):
        value = _get_field(run, "value", None) if isinstance(run, Mapping) else None
        if not isinstance(value, str):
            continue
        printed = extractor(value)
        if printed is not None:
            return printed
    return None


class GameDetailFetcher:
    """Loads a single game from the detail endpoint (``?gameID=<id>``)."""

    def __init__(
        self,
        http: requests.Session,
        api_url: str,
        *,
        timeout_seconds: float = 30.0,
        extractor: TicketExtractor = extract_printed_tickets,
        cancellation: CancellationToken | None = None,
    ) -> None:
        self._http = http
        self._api_url = api_url
        self._timeout_seconds = timeout_seconds
        self._extractor = extractor
        self._cancellation = cancellation
        self._schema = GameSchema()

    def fetch(self, game_id: int) -> GameRecord:
        """Fetch, parse and validate one game.

        Raises:
            requests.RequestException: network failure or non-2xx status.
            marshmallow.ValidationError: payload does not match the game schema.
            MalformedDetailError: rich-text block present but not shaped as expected.
            NoPrizeTiersError: the game has no prize tiers.
            OperationCancelled: cancellation was requested.
        """

        payload = get_json(
            self._http,
            self._api_url,
            params={"gameID": game_id},
            timeout_seconds=self._timeout_seconds,
            cancellation=self._cancellation,
        )
        game: GameRecord = self._schema.load(payload)

        if not game.mass_game_id:
            game.mass_game_id = game_id

        game.amount_printed = find_printed_tickets(game.ticket_text, self._extractor)
        if game.ticket_text is None:
            logger.debug("Game %s has no prize tier or second chance text", game.mass_game_id)

        # The detail payload's tiers may omit or mis-set the owning game id.
        for tier in game.prize_tiers:
            tier.mass_game_id = game.mass_game_id

        if not game.prize_tiers:
            raise NoPrizeTiersError(game.mass_game_id)

        return game
