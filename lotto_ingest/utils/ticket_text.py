"""Extract the printed-ticket count from free-form prize copy.

The lottery API carries the print run only inside descriptive text such as
"Prize structure is based on the sale of approximately 18,144,000 tickets."
Some games instead have a text run holding nothing but the number
("10,340,000").
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence

MIN_PLAUSIBLE_TICKETS = 1_000
MAX_PLAUSIBLE_TICKETS = 1_000_000_000

# ASCII digits, optionally grouped with thousands separators.
_NUMBER = r"([0-9][0-9,]*)"

_APPROXIMATELY_TICKETS = re.compile(rf"approximately\s+{_NUMBER}\s+tickets", re.IGNORECASE)
_STANDALONE_NUMBER = re.compile(rf"\s*{_NUMBER}\s*")

_LENIENT_PATTERNS: tuple[re.Pattern[str], ...] = (
    _APPROXIMATELY_TICKETS,
    re.compile(rf"sale\s+of\s+approximately\s+{_NUMBER}\s+tickets", re.IGNORECASE),
    re.compile(rf"based\s+on\s+(?:the\s+)?sale\s+of\s+approximately\s+{_NUMBER}", re.IGNORECASE),
    re.compile(rf"{_NUMBER}\s+tickets", re.IGNORECASE),
)

TicketExtractor = Callable[[str | None], int | None]


def _parse_plausible(raw: str) -> int | None:
    """Strip separators and return the count if it falls in the plausible range."""

    try:
        value = int(raw.replace(",", ""))
    except ValueError:
        return None
    if MIN_PLAUSIBLE_TICKETS <= value <= MAX_PLAUSIBLE_TICKETS:
        return value
    return None


def _first_plausible(text: str, patterns: Sequence[re.Pattern[str]]) -> int | None:
    for pattern in patterns:
        match = pattern.search(text)
        if match is None:
            continue
        value = _parse_plausible(match.group(1))
        if value is not None:
            return value

    match = _STANDALONE_NUMBER.fullmatch(text)
    if match is not None:
        return _parse_plausible(match.group(1))
    return None


def extract_printed_tickets(text: str | None) -> int | None:
    """Return the number of printed tickets described by ``text``.

    Tries the phrase "approximately N tickets" first, then accepts the whole
    string if it is a bare number. Values outside 1,000..1,000,000,000 are
    rejected.

    Examples:
        >>> extract_printed_tickets("based on the sale of approximately 18,144,000 tickets.")
        18144000
        >>> extract_printed_tickets(" 10,340,000 ")
        10340000
        >>> extract_printed_tickets("999") is None
        True
    """

    if text is None or not text.strip():
        return None
    return _first_plausible(text, (_APPROXIMATELY_TICKETS,))


def extract_printed_tickets_lenient(text: str | None) -> int | None:
    """Like :func:`extract_printed_tickets` but also accepts looser phrasings.

    Recognises "sale of approximately N tickets", "based on the sale of
    approximately N" and a plain "N tickets" before the bare-number fallback.
    """

    if text is None or not text.strip():
        return None
    return _first_plausible(text, _LENIENT_PATTERNS)


def get_extractor(mode: str) -> TicketExtractor:
    """Resolve the extractor for a configured mode ("strict" | "lenient")."""

    if mode == "lenient":
        return extract_printed_tickets_lenient
    return extract_printed_tickets
