"""SQLite schema and connection helpers.

All tables live in one database file. Uniqueness constraints carry the
invariants the application relies on:

- ``daily_analyses.date`` is UNIQUE, so at most one analysis exists per day
- ``subscribers.email`` and ``subscribers.token`` are UNIQUE
- ``trending_repos`` is unique per (date, repo_full_name)
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

import aiosqlite

from trending_intel.logging_config import get_logger

logger = get_logger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS daily_analyses (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    date TEXT NOT NULL UNIQUE,
    trending_data TEXT NOT NULL,
    analysis TEXT NOT NULL,
    model TEXT NOT NULL,
    tokens_used INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS trending_repos (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    date TEXT NOT NULL,
    repo_full_name TEXT NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    language TEXT NOT NULL DEFAULT '',
    stars INTEGER NOT NULL DEFAULT 0,
    forks INTEGER NOT NULL DEFAULT 0,
    url TEXT NOT NULL,
    category TEXT NOT NULL,
    ai_summary TEXT NOT NULL DEFAULT '',
    is_new INTEGER NOT NULL DEFAULT 0,
    UNIQUE (date, repo_full_name)
);

CREATE INDEX IF NOT EXISTS idx_trending_repos_date ON trending_repos (date);

CREATE TABLE IF NOT EXISTS subscribers (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    email TEXT NOT NULL UNIQUE,
    token TEXT NOT NULL UNIQUE,
    status TEXT NOT NULL DEFAULT 'active' CHECK (status IN ('active', 'unsubscribed')),
    created_at TEXT NOT NULL,
    unsubscribed_at TEXT
);

CREATE INDEX IF NOT EXISTS idx_subscribers_status ON subscribers (status);
"""


class Database:
    """Opens short-lived aiosqlite connections to one database file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    async def initialize(self) -> None:
        """Create tables and indexes (idempotent)."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        async with self.connect() as db:
            await db.executescript(SCHEMA)
            await db.commit()
        logger.info("Database initialized at %s", self.path)

    @asynccontextmanager
    async def connect(self) -> AsyncIterator[aiosqlite.Connection]:
        async with aiosqlite.connect(self.path) as db:
            db.row_factory = aiosqlite.Row
            yield db
