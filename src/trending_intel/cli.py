"""CLI entry point for Trending Intel."""

import asyncio
from pathlib import Path

import typer
import uvicorn

from trending_intel.adapters.digest import HtmlDigestGenerator
from trending_intel.adapters.llm import ClaudeClient
from trending_intel.adapters.notifications import ResendEmailSender
from trending_intel.adapters.sources import GitHubTrendingSource
from trending_intel.adapters.storage import Database, SQLiteAnalysisStore, SQLiteSubscriberRegistry
from trending_intel.api import create_app
from trending_intel.config import Settings, get_settings
from trending_intel.core import RunStatus, TrendingIntelError
from trending_intel.use_cases import AnalysisPipeline, NewsletterDispatcher

app = typer.Typer(help="Daily AI digest of trending GitHub repositories.")

ConfigOption = typer.Option(Path("config.yaml"), "--config", "-c", help="Path to config.yaml")


def build_pipeline(settings: Settings, store: SQLiteAnalysisStore) -> AnalysisPipeline:
    return AnalysisPipeline(
        source=GitHubTrendingSource(settings.github, token=settings.github_token),
        engine=ClaudeClient(settings),
        store=store,
        model=settings.claude.model,
    )


def print_banner(title: str) -> None:
    print("\n" + "=" * 70)
    print(title)
    print("=" * 70)


@app.command("init-db")
def init_db(config: Path = ConfigOption) -> None:
    """Create database tables."""
    settings = get_settings(config)
    asyncio.run(Database(settings.database_path).initialize())
    print(f"✓ Database ready: {settings.database_path}")


@app.command()
def analyze(config: Path = ConfigOption) -> None:
    """Run the daily analysis pipeline (skips if today's analysis exists)."""
    settings = get_settings(config)

    print_banner("📡 TRENDING INTEL - Daily Analysis")
    print("\n🔑 Credentials:")
    if settings.anthropic_api_key:
        print("  ✓ ANTHROPIC_API_KEY")
    else:
        print("  ✗ ANTHROPIC_API_KEY not set (analysis will fail)")
    if settings.github_token:
        print("  ✓ GITHUB_TOKEN")
    else:
        print("  ⚠️  GITHUB_TOKEN not set (lower rate limit)")

    try:
        result = asyncio.run(_analyze(settings))
    except TrendingIntelError as e:
        print(f"\n❌ Run failed: {e}")
        raise typer.Exit(code=1)

    if result.status is RunStatus.SKIPPED:
        print(f"\n⏭️  Analysis for {result.date} already exists, skipped")
        return

    print_banner("✅ DONE")
    print(f"📅 Date: {result.date}")
    print(f"📦 Candidates: {result.candidate_count}")
    print(f"🗂️  Stored repo rows: {result.repo_count}")
    print(f"🔢 Tokens used: {result.tokens_used}")


async def _analyze(settings: Settings):
    store = SQLiteAnalysisStore(Database(settings.database_path))
    await store.initialize()
    return await build_pipeline(settings, store).run_once()


@app.command()
def newsletter(config: Path = ConfigOption) -> None:
    """Send the weekly digest to all active subscribers."""
    settings = get_settings(config)

    print_banner("✉️  TRENDING INTEL - Weekly Newsletter")
    if not settings.resend_api_key:
        print("  ✗ RESEND_API_KEY not set (every send will fail)")

    report = asyncio.run(_newsletter(settings))

    if report.skipped_reason:
        print(f"\n⏭️  Skipped: {report.skipped_reason}")
        return

    print(f"\n✓ Delivered: {report.delivered}/{report.total}")
    for email in report.failed:
        print(f"  ✗ {email}")


async def _newsletter(settings: Settings):
    database = Database(settings.database_path)
    await database.initialize()
    dispatcher = NewsletterDispatcher(
        store=SQLiteAnalysisStore(database),
        registry=SQLiteSubscriberRegistry(database),
        renderer=HtmlDigestGenerator(settings.newsletter.site_name, settings.newsletter.site_url),
        sender=ResendEmailSender(settings.resend_api_key, settings.newsletter),
        config=settings.newsletter,
    )
    return await dispatcher.send_weekly()


@app.command()
def serve(config: Path = ConfigOption) -> None:
    """Serve the HTTP API."""
    settings = get_settings(config)
    database = Database(settings.database_path)
    store = SQLiteAnalysisStore(database)
    api = create_app(
        settings,
        store=store,
        registry=SQLiteSubscriberRegistry(database),
        pipeline=build_pipeline(settings, store),
    )
    uvicorn.run(api, host=settings.api.host, port=settings.api.port)


if __name__ == "__main__":
    app()
