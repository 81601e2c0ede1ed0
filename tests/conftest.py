"""Pytest fixtures: a file-backed SQLite database per test."""

from __future__ import annotations

import pytest

from lotto_ingest.db import create_app_engine, init_schema
from lotto_ingest.repositories.game_repository import GameRepository


@pytest.fixture
def engine(tmp_path):
    engine = create_app_engine(f"sqlite:///{tmp_path / 'lottery.db'}")
    init_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def repository(engine) -> GameRepository:
    return GameRepository(engine)
