"""SQLite-backed store for daily analyses."""

import json
from datetime import date, datetime
from typing import Optional

import aiosqlite

from trending_intel.adapters.storage.database import Database
from trending_intel.core import (
    AnalysisResult,
    AnalysisStore,
    CandidateRepo,
    DailyAnalysis,
    HistoryEntry,
    TrendingRepoRow,
)
from trending_intel.logging_config import get_logger

logger = get_logger(__name__)


class SQLiteAnalysisStore(AnalysisStore):
    """Persist one analysis per date plus its derived trending repo rows."""

    def __init__(self, database: Database) -> None:
        self.database = database

    async def initialize(self) -> None:
        await self.database.initialize()

    async def exists(self, day: date) -> bool:
        async with self.database.connect() as db:
            async with db.execute(
                "SELECT 1 FROM daily_analyses WHERE date = ?", (day.isoformat(),)
            ) as cursor:
                return await cursor.fetchone() is not None

    async def save(self, analysis: DailyAnalysis, rows: list[TrendingRepoRow]) -> bool:
        """Insert the analysis and its rows in one transaction.

        The insert is guarded by the UNIQUE constraint on date. When another
        run already stored this date nothing is written and False is returned.
        """
        day = analysis.date.isoformat()

        async with self.database.connect() as db:
            cursor = await db.execute(
                """
                INSERT INTO daily_analyses (date, trending_data, analysis, model, tokens_used, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT (date) DO NOTHING
                """,
                (
                    day,
                    json.dumps([repo.to_dict() for repo in analysis.candidates]),
                    json.dumps(analysis.analysis.to_dict()),
                    analysis.model,
                    analysis.tokens_used,
                    analysis.created_at.isoformat(),
                ),
            )
            if cursor.rowcount == 0:
                await db.rollback()
                logger.info("Analysis for %s already exists, nothing written", day)
                return False

            await db.executemany(
                """
                INSERT OR IGNORE INTO trending_repos
                    (date, repo_full_name, description, language, stars, forks, url, category, ai_summary, is_new)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        row.date.isoformat(),
                        row.repo_full_name,
                        row.description,
                        row.language,
                        row.stars,
                        row.forks,
                        row.url,
                        row.category,
                        row.ai_summary,
                        int(row.is_new),
                    )
                    for row in rows
                ],
            )
            await db.commit()

        logger.info("Stored analysis for %s with %d repo rows", day, len(rows))
        return True

    async def get_by_date(self, day: date) -> Optional[DailyAnalysis]:
        async with self.database.connect() as db:
            async with db.execute(
                "SELECT * FROM daily_analyses WHERE date = ?", (day.isoformat(),)
            ) as cursor:
                row = await cursor.fetchone()
        return self._to_daily_analysis(row) if row else None

    async def get_latest(self) -> Optional[DailyAnalysis]:
        async with self.database.connect() as db:
            async with db.execute(
                "SELECT * FROM daily_analyses ORDER BY date DESC LIMIT 1"
            ) as cursor:
                row = await cursor.fetchone()
        return self._to_daily_analysis(row) if row else None

    async def list_since(self, cutoff: date) -> list[DailyAnalysis]:
        async with self.database.connect() as db:
            async with db.execute(
                "SELECT * FROM daily_analyses WHERE date >= ? ORDER BY date DESC",
                (cutoff.isoformat(),),
            ) as cursor:
                rows = await cursor.fetchall()
        return [self._to_daily_analysis(row) for row in rows]

    async def history_since(self, cutoff: date) -> list[HistoryEntry]:
        async with self.database.connect() as db:
            async with db.execute(
                "SELECT date, analysis FROM daily_analyses WHERE date >= ? ORDER BY date DESC",
                (cutoff.isoformat(),),
            ) as cursor:
                rows = await cursor.fetchall()

        entries = []
        for row in rows:
            analysis = AnalysisResult.from_dict(json.loads(row["analysis"]))
            entries.append(
                HistoryEntry(
                    date=date.fromisoformat(row["date"]),
                    headline=analysis.headline,
                    pattern=analysis.pattern,
                    category_count=len(analysis.categories),
                    repo_count=analysis.repo_count,
                )
            )
        return entries

    async def list_trending_repos(self, day: date) -> list[TrendingRepoRow]:
        """Derived rows stored for one date, in insertion order."""
        async with self.database.connect() as db:
            async with db.execute(
                "SELECT * FROM trending_repos WHERE date = ? ORDER BY id", (day.isoformat(),)
            ) as cursor:
                rows = await cursor.fetchall()

        return [
            TrendingRepoRow(
                date=date.fromisoformat(row["date"]),
                repo_full_name=row["repo_full_name"],
                description=row["description"],
                language=row["language"],
                stars=row["stars"],
                forks=row["forks"],
                url=row["url"],
                category=row["category"],
                ai_summary=row["ai_summary"],
                is_new=bool(row["is_new"]),
            )
            for row in rows
        ]

    def _to_daily_analysis(self, row: aiosqlite.Row) -> DailyAnalysis:
        return DailyAnalysis(
            date=date.fromisoformat(row["date"]),
            analysis=AnalysisResult.from_dict(json.loads(row["analysis"])),
            model=row["model"],
            tokens_used=row["tokens_used"],
            created_at=datetime.fromisoformat(row["created_at"]),
            candidates=[CandidateRepo.from_dict(c) for c in json.loads(row["trending_data"])],
        )
