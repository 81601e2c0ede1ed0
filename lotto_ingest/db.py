"""SQLAlchemy engine + session management.

Uses one short-lived session per unit of work.
"""

from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from lotto_ingest.models.base import Base


def create_app_engine(database_url: str) -> Engine:
    return create_engine(database_url, pool_pre_ping=True, future=True)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_schema(engine: Engine) -> None:
    """Create the games/prizeTiers tables if they are missing."""

    # Import models so they register with Base.metadata
    from lotto_ingest import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
