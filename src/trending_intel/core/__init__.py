"""Core domain layer."""

from trending_intel.core.entities import (
    AnalysisResult,
    CandidateRepo,
    CategoryItem,
    DailyAnalysis,
    DispatchReport,
    HistoryEntry,
    NotableItem,
    RunResult,
    RunStatus,
    Subscriber,
    SubscriberStatus,
    TrendingRepoRow,
    UnsubscribeOutcome,
    parse_timestamp,
    utc_now,
)
from trending_intel.core.errors import (
    AnalysisValidationError,
    ConflictError,
    DeliveryError,
    MalformedResponse,
    TrendingIntelError,
    UpstreamFailure,
    ValidationError,
)
from trending_intel.core.interfaces import (
    AnalysisEngine,
    AnalysisStore,
    DigestRenderer,
    EmailSender,
    SubscriberRegistry,
    TrendSource,
)

__all__ = [
    "AnalysisResult",
    "CandidateRepo",
    "CategoryItem",
    "DailyAnalysis",
    "DispatchReport",
    "HistoryEntry",
    "NotableItem",
    "RunResult",
    "RunStatus",
    "Subscriber",
    "SubscriberStatus",
    "TrendingRepoRow",
    "UnsubscribeOutcome",
    "parse_timestamp",
    "utc_now",
    "AnalysisValidationError",
    "ConflictError",
    "DeliveryError",
    "MalformedResponse",
    "TrendingIntelError",
    "UpstreamFailure",
    "ValidationError",
    "AnalysisEngine",
    "AnalysisStore",
    "DigestRenderer",
    "EmailSender",
    "SubscriberRegistry",
    "TrendSource",
]
