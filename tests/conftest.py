"""Shared fixtures."""

from datetime import date, datetime, timedelta, timezone

import pytest
import pytest_asyncio

from trending_intel.adapters.storage import Database
from trending_intel.core import (
    AnalysisResult,
    CandidateRepo,
    CategoryItem,
    DailyAnalysis,
    NotableItem,
)

NOW = datetime(2024, 1, 10, 12, 0, tzinfo=timezone.utc)
TODAY = date(2024, 1, 10)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_repo():
    """Factory for candidate repositories."""
    def _make(full_name: str, created_days_ago: int = 30, stars: int = 100, **kwargs) -> CandidateRepo:
        return CandidateRepo(
            full_name=full_name,
            description=kwargs.get("description", f"{full_name} description"),
            language=kwargs.get("language", "Python"),
            stars=stars,
            forks=kwargs.get("forks", 10),
            url=f"https://github.com/{full_name}",
            created_at=NOW - timedelta(days=created_days_ago),
            pushed_at=NOW - timedelta(hours=2),
            topics=tuple(kwargs.get("topics", ())),
        )
    return _make


@pytest.fixture
def candidates(make_repo) -> list[CandidateRepo]:
    return [
        make_repo("acme/new-agent", created_days_ago=2, stars=850),
        make_repo("big/framework", created_days_ago=900, stars=42000),
        make_repo("tools/linter", created_days_ago=20, stars=310, language=""),
    ]


@pytest.fixture
def analysis_result() -> AnalysisResult:
    return AnalysisResult(
        headline="Agents eat the toolchain",
        categories={
            "AI/ML": [CategoryItem("acme/new-agent", "Autonomous coding agent", 5)],
            "DevTools": [
                CategoryItem("tools/linter", "Fast linter in Rust", 3),
                CategoryItem("ghost/hallucinated", "Does not exist", 2),
            ],
            "Web": [CategoryItem("big/framework", "Steady release cadence", 1)],
        },
        notable=[NotableItem("acme/new-agent", "Fastest growing repo this week.")],
        pattern="Rust rewrites keep coming",
    )


@pytest.fixture
def make_daily(analysis_result, candidates):
    """Factory for stored daily analyses."""
    def _make(day: date, headline: str = "", tokens_used: int = 1234) -> DailyAnalysis:
        result = analysis_result
        if headline:
            result = AnalysisResult(
                headline=headline,
                categories=analysis_result.categories,
                notable=analysis_result.notable,
                pattern=analysis_result.pattern,
            )
        return DailyAnalysis(
            date=day,
            analysis=result,
            model="claude-3-5-haiku-latest",
            tokens_used=tokens_used,
            created_at=datetime.combine(day, datetime.min.time(), tzinfo=timezone.utc),
            candidates=candidates,
        )
    return _make


@pytest_asyncio.fixture
async def database(tmp_path) -> Database:
    db = Database(tmp_path / "test.db")
    await db.initialize()
    return db
