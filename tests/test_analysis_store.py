"""Tests for the SQLite analysis store."""

from datetime import date

import pytest

from trending_intel.adapters.storage import SQLiteAnalysisStore
from trending_intel.core import TrendingRepoRow


@pytest.fixture
def store(database) -> SQLiteAnalysisStore:
    return SQLiteAnalysisStore(database)


def make_row(day: date, name: str, category: str = "AI/ML", is_new: bool = False) -> TrendingRepoRow:
    return TrendingRepoRow(
        date=day,
        repo_full_name=name,
        description="desc",
        language="Python",
        stars=10,
        forks=1,
        url=f"https://github.com/{name}",
        category=category,
        ai_summary="summary",
        is_new=is_new,
    )


@pytest.mark.asyncio
async def test_save_and_get_round_trip(store, make_daily) -> None:
    """Test that a stored analysis reads back unchanged."""
    daily = make_daily(date(2024, 1, 10))

    assert await store.save(daily, [])
    loaded = await store.get_by_date(date(2024, 1, 10))

    assert loaded is not None
    assert loaded.analysis == daily.analysis
    assert loaded.to_envelope() == daily.to_envelope()
    assert loaded.candidates == daily.candidates
    assert loaded.model == "claude-3-5-haiku-latest"


@pytest.mark.asyncio
async def test_exists(store, make_daily) -> None:
    assert not await store.exists(date(2024, 1, 10))
    await store.save(make_daily(date(2024, 1, 10)), [])
    assert await store.exists(date(2024, 1, 10))


@pytest.mark.asyncio
async def test_save_same_date_twice(store, make_daily) -> None:
    """Test that the second save for a date writes nothing."""
    day = date(2024, 1, 10)
    first = make_daily(day, headline="First run")
    second = make_daily(day, headline="Second run")

    assert await store.save(first, [make_row(day, "a/one")]) is True
    assert await store.save(second, [make_row(day, "b/two")]) is False

    stored = await store.list_since(day)
    assert len(stored) == 1
    assert stored[0].analysis.headline == "First run"
    assert [r.repo_full_name for r in await store.list_trending_repos(day)] == ["a/one"]


@pytest.mark.asyncio
async def test_missing_date(store) -> None:
    assert await store.get_by_date(date(2024, 1, 10)) is None
    assert await store.get_latest() is None


@pytest.mark.asyncio
async def test_get_latest(store, make_daily) -> None:
    for day in (date(2024, 1, 8), date(2024, 1, 10), date(2024, 1, 9)):
        await store.save(make_daily(day), [])

    latest = await store.get_latest()

    assert latest.date == date(2024, 1, 10)


@pytest.mark.asyncio
async def test_list_since_newest_first(store, make_daily) -> None:
    for day in (date(2024, 1, 1), date(2024, 1, 4), date(2024, 1, 9)):
        await store.save(make_daily(day), [])

    days = await store.list_since(date(2024, 1, 3))

    assert [d.date for d in days] == [date(2024, 1, 9), date(2024, 1, 4)]


@pytest.mark.asyncio
async def test_history_projection(store, make_daily) -> None:
    """Test history entries carry counts instead of the full analysis."""
    await store.save(make_daily(date(2024, 1, 9), headline="Tuesday"), [])
    await store.save(make_daily(date(2024, 1, 10), headline="Wednesday"), [])

    history = await store.history_since(date(2024, 1, 1))

    assert [h.headline for h in history] == ["Wednesday", "Tuesday"]
    assert history[0].category_count == 3
    assert history[0].repo_count == 4
    assert history[0].pattern == "Rust rewrites keep coming"


@pytest.mark.asyncio
async def test_trending_rows_stored(store, make_daily) -> None:
    day = date(2024, 1, 10)
    rows = [
        make_row(day, "a/one", "AI/ML", is_new=True),
        make_row(day, "b/two", "Web"),
    ]

    await store.save(make_daily(day), rows)

    assert await store.list_trending_repos(day) == rows
    assert await store.list_trending_repos(date(2024, 1, 9)) == []
