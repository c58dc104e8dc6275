"""SQLite-backed subscriber registry."""

import sqlite3
from datetime import datetime, timezone
from typing import Optional

import aiosqlite

from trending_intel.adapters.storage.database import Database
from trending_intel.core import (
    ConflictError,
    Subscriber,
    SubscriberRegistry,
    SubscriberStatus,
    UnsubscribeOutcome,
)


def _parse(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


class SQLiteSubscriberRegistry(SubscriberRegistry):
    """Subscriber rows keyed by email, with one-way active -> unsubscribed transitions."""

    def __init__(self, database: Database) -> None:
        self.database = database

    async def add(self, email: str, token: str) -> Subscriber:
        created_at = datetime.now(timezone.utc)
        async with self.database.connect() as db:
            try:
                await db.execute(
                    "INSERT INTO subscribers (email, token, status, created_at) VALUES (?, ?, ?, ?)",
                    (email, token, SubscriberStatus.ACTIVE.value, created_at.isoformat()),
                )
                await db.commit()
            except sqlite3.IntegrityError as e:
                raise ConflictError("Already subscribed") from e

        return Subscriber(email=email, token=token, created_at=created_at)

    async def unsubscribe(self, token: str) -> UnsubscribeOutcome:
        async with self.database.connect() as db:
            cursor = await db.execute(
                """
                UPDATE subscribers SET status = ?, unsubscribed_at = ?
                WHERE token = ? AND status = ?
                """,
                (
                    SubscriberStatus.UNSUBSCRIBED.value,
                    datetime.now(timezone.utc).isoformat(),
                    token,
                    SubscriberStatus.ACTIVE.value,
                ),
            )
            await db.commit()
            if cursor.rowcount > 0:
                return UnsubscribeOutcome.UNSUBSCRIBED

            async with db.execute("SELECT 1 FROM subscribers WHERE token = ?", (token,)) as lookup:
                exists = await lookup.fetchone() is not None

        return UnsubscribeOutcome.ALREADY_UNSUBSCRIBED if exists else UnsubscribeOutcome.INVALID

    async def list_active(self) -> list[Subscriber]:
        async with self.database.connect() as db:
            async with db.execute(
                "SELECT * FROM subscribers WHERE status = ? ORDER BY id",
                (SubscriberStatus.ACTIVE.value,),
            ) as cursor:
                rows = await cursor.fetchall()

        return [_to_subscriber(row) for row in rows]

    async def get(self, email: str) -> Optional[Subscriber]:
        async with self.database.connect() as db:
            async with db.execute("SELECT * FROM subscribers WHERE email = ?", (email,)) as cursor:
                row = await cursor.fetchone()

        return _to_subscriber(row) if row else None


def _to_subscriber(row: aiosqlite.Row) -> Subscriber:
    return Subscriber(
        email=row["email"],
        token=row["token"],
        status=SubscriberStatus(row["status"]),
        created_at=_parse(row["created_at"]),
        unsubscribed_at=_parse(row["unsubscribed_at"]),
    )
