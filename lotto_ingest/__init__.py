"""Instant-game prize ingestion package.

Fetches the instant-game catalog and per-game prize detail from the lottery
API and stores new games with their prize tiers in a relational database.
"""

from __future__ import annotations

__version__ = "0.1.0"
