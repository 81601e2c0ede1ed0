"""Custom exceptions for ingestion error handling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class IngestionError(Exception):
    """Base ingestion error."""

    code: str
    message: str
    details: Any | None = None

    def __str__(self) -> str:
        return self.message


class CatalogError(IngestionError):
    """The game list could not be fetched or was empty. Fatal to the run."""

    def __init__(self, message: str = "Catalog fetch failed", details: Any | None = None) -> None:
        super().__init__(code="catalog_error", message=message, details=details)


class GameDetailError(IngestionError):
    """A single game's detail could not be used. Only that game is skipped."""

    def __init__(self, message: str = "Game detail error", details: Any | None = None) -> None:
        super().__init__(code="game_detail_error", message=message, details=details)


class NoPrizeTiersError(GameDetailError):
    """Detail payload carried no prize tiers."""

    def __init__(self, game_id: int) -> None:
        super().__init__(message=f"No prize tiers found for game ID {game_id}", details={"game_id": game_id})


class MalformedDetailError(GameDetailError):
    """An expected JSON property was missing from the detail payload."""


class OperationCancelled(IngestionError):
    """Cancellation was requested while a network call was in flight."""

    def __init__(self, message: str = "Operation was canceled", details: Any | None = None) -> None:
        super().__init__(code="cancelled", message=message, details=details)


class DatabaseUnavailableError(IngestionError):
    """The database could not be reached before the run started."""

    def __init__(self, message: str = "Database connection failed", details: Any | None = None) -> None:
        super().__init__(code="database_unavailable", message=message, details=details)
