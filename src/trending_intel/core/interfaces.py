"""Core interfaces for adapters."""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

from trending_intel.core.entities import (
    AnalysisResult,
    CandidateRepo,
    DailyAnalysis,
    HistoryEntry,
    Subscriber,
    TrendingRepoRow,
    UnsubscribeOutcome,
)


class TrendSource(ABC):
    """Interface for fetching candidate repositories."""

    @abstractmethod
    async def fetch(self) -> list[CandidateRepo]:
        """Fetch a deduplicated, ordered candidate list."""
        pass


class AnalysisEngine(ABC):
    """Interface for LLM analysis."""

    @abstractmethod
    async def analyze(self, candidates: list[CandidateRepo]) -> tuple[AnalysisResult, int]:
        """Analyze candidates, returning the result and tokens used."""
        pass


class AnalysisStore(ABC):
    """Interface for persisting and reading daily analyses."""

    @abstractmethod
    async def exists(self, day: date) -> bool:
        pass

    @abstractmethod
    async def save(self, analysis: DailyAnalysis, rows: list[TrendingRepoRow]) -> bool:
        """Insert atomically. Returns False if the date already had an analysis."""
        pass

    @abstractmethod
    async def get_by_date(self, day: date) -> Optional[DailyAnalysis]:
        pass

    @abstractmethod
    async def get_latest(self) -> Optional[DailyAnalysis]:
        pass

    @abstractmethod
    async def list_since(self, cutoff: date) -> list[DailyAnalysis]:
        """Full analyses with date >= cutoff, newest first."""
        pass

    @abstractmethod
    async def history_since(self, cutoff: date) -> list[HistoryEntry]:
        """Reduced projections with date >= cutoff, newest first."""
        pass


class SubscriberRegistry(ABC):
    """Interface for subscriber records."""

    @abstractmethod
    async def add(self, email: str, token: str) -> Subscriber:
        """Create an active subscriber. Raises ConflictError on duplicate email."""
        pass

    @abstractmethod
    async def unsubscribe(self, token: str) -> UnsubscribeOutcome:
        pass

    @abstractmethod
    async def list_active(self) -> list[Subscriber]:
        pass


class DigestRenderer(ABC):
    """Interface for rendering the newsletter digest."""

    @abstractmethod
    def render_weekly(self, days: list[DailyAnalysis]) -> str:
        """Render the shared body with an unsubscribe placeholder."""
        pass

    @abstractmethod
    def personalize(self, body: str, unsubscribe_url: str) -> str:
        pass


class EmailSender(ABC):
    """Interface for delivering a single email."""

    @abstractmethod
    async def send(self, to: str, subject: str, html: str, unsubscribe_url: str) -> None:
        """Send one email. Raises DeliveryError on failure."""
        pass
