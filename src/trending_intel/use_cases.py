"""Business logic use cases."""

import asyncio
import uuid
from datetime import date, datetime, timedelta
from typing import Callable, Optional

from trending_intel.config import NewsletterConfig
from trending_intel.core import (
    AnalysisEngine,
    AnalysisResult,
    AnalysisStore,
    CandidateRepo,
    DailyAnalysis,
    DigestRenderer,
    DispatchReport,
    EmailSender,
    RunResult,
    RunStatus,
    Subscriber,
    SubscriberRegistry,
    TrendingRepoRow,
    TrendSource,
    UnsubscribeOutcome,
    utc_now,
)
from trending_intel.core.validation import normalize_email
from trending_intel.logging_config import get_logger

logger = get_logger(__name__)

NEW_REPO_WINDOW = timedelta(days=7)


def build_trending_rows(
    day: date,
    analysis: AnalysisResult,
    candidates: list[CandidateRepo],
    now: datetime,
) -> list[TrendingRepoRow]:
    """Derive one row per categorized item, resolved against the fetched candidates.

    Items naming a repository that was not fetched are dropped.
    """
    by_name = {repo.full_name: repo for repo in candidates}
    new_since = now - NEW_REPO_WINDOW
    rows = []

    for category, items in analysis.categories.items():
        for item in items:
            repo = by_name.get(item.repo)
            if repo is None:
                logger.debug("Dropping unknown repo %s from %s", item.repo, category)
                continue
            rows.append(
                TrendingRepoRow(
                    date=day,
                    repo_full_name=repo.full_name,
                    description=repo.description,
                    language=repo.language,
                    stars=repo.stars,
                    forks=repo.forks,
                    url=repo.url,
                    category=category,
                    ai_summary=item.summary,
                    is_new=repo.created_at > new_since,
                )
            )

    return rows


class AnalysisPipeline:
    """Daily fetch -> analyze -> persist run, at most once per UTC date."""

    def __init__(
        self,
        source: TrendSource,
        engine: AnalysisEngine,
        store: AnalysisStore,
        model: str,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.source = source
        self.engine = engine
        self.store = store
        self.model = model
        self.clock = clock

    async def run_once(self, today: Optional[date] = None) -> RunResult:
        """Run the pipeline for ``today`` (UTC date by default).

        Any fetch, analysis or storage error propagates; nothing partial is stored.
        """
        now = self.clock()
        today = today or now.date()

        # Pre-check avoids LLM spend; the UNIQUE insert below is what guarantees one row
        if await self.store.exists(today):
            logger.info("Analysis for %s already exists, skipping", today)
            return RunResult(status=RunStatus.SKIPPED, date=today)

        logger.info("Fetching trending repos...")
        candidates = await self.source.fetch()
        logger.info("Fetched %d repos", len(candidates))

        logger.info("Analyzing with %s...", self.model)
        analysis, tokens_used = await self.engine.analyze(candidates)
        logger.info("Analysis complete, %d tokens used", tokens_used)

        rows = build_trending_rows(today, analysis, candidates, now)
        daily = DailyAnalysis(
            date=today,
            analysis=analysis,
            model=self.model,
            tokens_used=tokens_used,
            created_at=now,
            candidates=candidates,
        )

        if not await self.store.save(daily, rows):
            logger.warning("Analysis for %s was stored by a concurrent run, discarding", today)
            return RunResult(status=RunStatus.SKIPPED, date=today)

        logger.info("Analysis for %s stored successfully", today)
        return RunResult(
            status=RunStatus.STORED,
            date=today,
            candidate_count=len(candidates),
            repo_count=len(rows),
            tokens_used=tokens_used,
        )


class NewsletterDispatcher:
    """Assemble the weekly digest and deliver it to every active subscriber."""

    def __init__(
        self,
        store: AnalysisStore,
        registry: SubscriberRegistry,
        renderer: DigestRenderer,
        sender: EmailSender,
        config: NewsletterConfig,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.store = store
        self.registry = registry
        self.renderer = renderer
        self.sender = sender
        self.config = config
        self.clock = clock

    def unsubscribe_url(self, subscriber: Subscriber) -> str:
        return f"{self.config.api_base_url.rstrip('/')}/api/unsubscribe?token={subscriber.token}"

    async def send_weekly(self) -> DispatchReport:
        """Send the digest. One recipient's failure never aborts the batch."""
        subscribers = await self.registry.list_active()
        if not subscribers:
            logger.info("No active subscribers, skipping newsletter")
            return DispatchReport(delivered=0, total=0, skipped_reason="no active subscribers")

        today = self.clock().date()
        days = await self.store.list_since(today - timedelta(days=self.config.lookback_days))
        if not days:
            logger.info("No content for the past week, skipping newsletter")
            return DispatchReport(
                delivered=0, total=len(subscribers), skipped_reason="no recent analyses"
            )

        subject = f"{self.config.site_name} | Week of {today.isoformat()}"
        base_html = self.renderer.render_weekly(days)
        concurrency = max(1, self.config.concurrency)

        async def deliver(subscriber: Subscriber) -> bool:
            # The personalized body only lives for the duration of its own send
            url = self.unsubscribe_url(subscriber)
            html = self.renderer.personalize(base_html, url)
            try:
                await self.sender.send(subscriber.email, subject, html, url)
            except Exception as e:
                logger.error("Failed to send to %s: %s", subscriber.email, e)
                return False
            return True

        delivered = [False] * len(subscribers)

        if concurrency == 1:
            for index, subscriber in enumerate(subscribers):
                delivered[index] = await deliver(subscriber)
        else:
            queue: asyncio.Queue = asyncio.Queue()
            for item in enumerate(subscribers):
                queue.put_nowait(item)

            async def worker() -> None:
                while not queue.empty():
                    index, subscriber = queue.get_nowait()
                    delivered[index] = await deliver(subscriber)

            await asyncio.gather(*(worker() for _ in range(min(concurrency, len(subscribers)))))

        failed = [s.email for s, ok in zip(subscribers, delivered) if not ok]
        report = DispatchReport(
            delivered=len(subscribers) - len(failed),
            total=len(subscribers),
            failed=failed,
        )
        logger.info("Newsletter sent to %d/%d subscribers", report.delivered, report.total)
        return report


class SubscriptionService:
    """Signup and unsubscribe flows."""

    def __init__(
        self,
        registry: SubscriberRegistry,
        token_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ) -> None:
        self.registry = registry
        self.token_factory = token_factory

    async def signup(self, raw_email: Optional[str]) -> Subscriber:
        """Register an email.

        Raises:
            ValidationError: malformed email
            ConflictError: email already registered, whatever its status
        """
        email = normalize_email(raw_email)
        subscriber = await self.registry.add(email, self.token_factory())
        logger.info("New subscriber registered")
        return subscriber

    async def unsubscribe(self, token: Optional[str]) -> UnsubscribeOutcome:
        if not token or not token.strip():
            return UnsubscribeOutcome.INVALID
        return await self.registry.unsubscribe(token.strip())
