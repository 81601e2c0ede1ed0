"""Marshmallow schemas for lottery API game payloads.

The API's field casing is not stable, so keys are lower-cased before load
and every field is declared with a lower-case ``data_key``. The optional
rich-text blocks are kept as raw JSON on the loaded record.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from marshmallow import EXCLUDE, Schema, fields, post_load, pre_load


class TicketTextSource(str, Enum):
    """Which detail field carried the printed-ticket copy."""

    PRIZE_TIER_INFO = "prizeTierInfo"
    SECOND_CHANCE_INFO = "secondChanceInfo"


@dataclass(frozen=True)
class TicketTextBlock:
    source: TicketTextSource
    document: Any


@dataclass
class PrizeTierRecord:
    tier_number: int
    prize_amount: int
    total_prizes: int
    paid_prizes: int
    prizes_remaining: int
    prize_description: str
    type: str
    mass_game_id: int = 0


@dataclass
class GameRecord:
    mass_game_id: int
    game_name: str = ""
    game_identifier: str = ""
    start_date: datetime | None = None
    ticket_cost: int = 0
    odds: str | None = None
    amount_printed: int | None = None
    prize_tiers: list[PrizeTierRecord] = field(default_factory=list)
    ticket_text: TicketTextBlock | None = None


def _lower_keys(data: Any) -> Any:
    if not isinstance(data, dict):
        return data
    return {str(k).lower(): v for k, v in data.items()}


class PrizeTierSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    mass_game_id = fields.Integer(data_key="massgameid", load_default=0, allow_none=True)
    tier_number = fields.Integer(data_key="tiernumber", load_default=0)
    prize_amount = fields.Integer(data_key="prizeamount", load_default=0)
    total_prizes = fields.Integer(data_key="totalprizes", load_default=0)
    paid_prizes = fields.Integer(data_key="paidprizes", load_default=0)
    prizes_remaining = fields.Integer(data_key="prizesremaining", load_default=0)
    prize_description = fields.String(data_key="prizedescription", load_default="", allow_none=True)
    type = fields.String(data_key="type", load_default="", allow_none=True)

    @pre_load
    def _normalize_keys(self, data, **kwargs):  # type: ignore[no-untyped-def]
        return _lower_keys(data)

    @post_load
    def _make_record(self, data, **kwargs):  # type: ignore[no-untyped-def]
        return PrizeTierRecord(
            tier_number=data["tier_number"],
            prize_amount=data["prize_amount"],
            total_prizes=data["total_prizes"],
            paid_prizes=data["paid_prizes"],
            prizes_remaining=data["prizes_remaining"],
            prize_description=data["prize_description"] or "",
            type=data["type"] or "",
            mass_game_id=data["mass_game_id"] or 0,
        )


class GameSchema(Schema):
    """Validate a game from either the list or the detail endpoint."""

    class Meta:
        unknown = EXCLUDE

    mass_game_id = fields.Integer(data_key="massgameid", load_default=0, allow_none=True)
    game_name = fields.String(data_key="gamename", load_default="", allow_none=True)
    game_identifier = fields.String(data_key="gameidentifier", load_default="", allow_none=True)
    start_date = fields.DateTime(data_key="startdate", load_default=None, allow_none=True)
    ticket_cost = fields.Integer(data_key="ticketcost", load_default=0, allow_none=True)
    odds = fields.String(data_key="odds", load_default=None, allow_none=True)
    prize_tiers = fields.List(
        fields.Nested(PrizeTierSchema),
        data_key="prizetiers",
        load_default=list,
        allow_none=True,
    )
    prize_tier_info = fields.Raw(data_key="prizetierinfo", load_default=None, allow_none=True)
    second_chance_info = fields.Raw(data_key="secondchanceinfo", load_default=None, allow_none=True)

    @pre_load
    def _normalize_keys(self, data, **kwargs):  # type: ignore[no-untyped-def]
        return _lower_keys(data)

    @post_load
    def _make_record(self, data, **kwargs):  # type: ignore[no-untyped-def]
        ticket_text: TicketTextBlock | None = None
        if data.get("prize_tier_info") is not None:
            ticket_text = TicketTextBlock(TicketTextSource.PRIZE_TIER_INFO, data["prize_tier_info"])
        elif data.get("second_chance_info") is not None:
            ticket_text = TicketTextBlock(TicketTextSource.SECOND_CHANCE_INFO, data["second_chance_info"])

        return GameRecord(
            mass_game_id=data["mass_game_id"] or 0,
            game_name=data["game_name"] or "",
            game_identifier=data["game_identifier"] or "",
            start_date=data["start_date"],
            ticket_cost=data["ticket_cost"] or 0,
            odds=data["odds"],
            prize_tiers=list(data["prize_tiers"] or []),
            ticket_text=ticket_text,
        )
