"""Environment-based configuration."""

from __future__ import annotations

import os
import pathlib
from dataclasses import dataclass

from dotenv import load_dotenv
from sqlalchemy.engine import URL

DEFAULT_API_URL = "https://www.masslottery.com/api/v1/instant-game-prizes"
DEFAULT_TIMEOUT_SECONDS = 30.0
EXTRACTION_MODES = ("strict", "lenient")


def load_environment(project_root: pathlib.Path | None = None) -> None:
    """Load `.env`, then let `.env.local` override it."""

    root = project_root or pathlib.Path.cwd()
    load_dotenv(dotenv_path=root / ".env")
    env_local = root / ".env.local"
    if env_local.exists():
        load_dotenv(dotenv_path=env_local, override=True)


def resolve_database_url() -> str:
    """Resolve DB connection string.

    Priority:
      1) DATABASE_URL (explicit)
      2) Build from MYSQL_* env vars
      3) Fallback to local sqlite
    """

    explicit = os.getenv("DATABASE_URL")
    if explicit:
        return explicit

    host = os.getenv("MYSQL_HOST")
    user = os.getenv("MYSQL_USER")
    database = os.getenv("MYSQL_DATABASE")
    port_raw = os.getenv("MYSQL_PORT")

    if host and user and database:
        try:
            port = int(port_raw) if port_raw else 3306
        except ValueError:
            port = 3306

        url = URL.create(
            drivername="mysql+pymysql",
            username=user,
            password=os.getenv("MYSQL_PASSWORD"),
            host=host,
            port=port,
            database=database,
        )
        return url.render_as_string(hide_password=False)

    return "sqlite:///./lottery.db"


def _resolve_timeout() -> float:
    raw = os.getenv("LOTTERY_API_TIMEOUT")
    if not raw:
        return DEFAULT_TIMEOUT_SECONDS
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_TIMEOUT_SECONDS
    return value if value > 0 else DEFAULT_TIMEOUT_SECONDS


def _resolve_extraction_mode() -> str:
    mode = os.getenv("TICKET_EXTRACTION", "strict").lower().strip()
    return mode if mode in EXTRACTION_MODES else "strict"


@dataclass(frozen=True)
class IngestionConfig:
    """Settings for one ingestion run."""

    database_url: str
    api_url: str = DEFAULT_API_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    ticket_extraction: str = "strict"
    log_level: str = "INFO"
    show_progress: bool = True


def get_config() -> IngestionConfig:
    """Build the run configuration from the environment."""

    return IngestionConfig(
        database_url=resolve_database_url(),
        api_url=os.getenv("LOTTERY_API_URL") or DEFAULT_API_URL,
        timeout_seconds=_resolve_timeout(),
        ticket_extraction=_resolve_extraction_mode(),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
