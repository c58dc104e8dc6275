"""Core domain entities."""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: Optional[str]) -> datetime:
    """Parse an ISO-8601 timestamp (GitHub uses a trailing ``Z``) into UTC."""
    if not value:
        return datetime.fromtimestamp(0, tz=timezone.utc)
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class CandidateRepo:
    """Repository snapshot returned by the trend source, not yet categorized."""

    full_name: str
    description: str
    language: str
    stars: int
    forks: int
    url: str
    created_at: datetime
    pushed_at: datetime
    topics: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.full_name:
            raise ValueError("Repository name cannot be empty")

    @classmethod
    def from_api(cls, repo: dict[str, Any]) -> "CandidateRepo":
        """Build from a GitHub search API item."""
        full_name = repo["full_name"]
        return cls(
            full_name=full_name,
            description=repo.get("description") or "",
            language=repo.get("language") or "",
            stars=int(repo.get("stargazers_count") or 0),
            forks=int(repo.get("forks_count") or 0),
            url=repo.get("html_url") or f"https://github.com/{full_name}",
            created_at=parse_timestamp(repo.get("created_at")),
            pushed_at=parse_timestamp(repo.get("pushed_at")),
            topics=tuple(repo.get("topics") or ()),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CandidateRepo":
        return cls(
            full_name=data["full_name"],
            description=data.get("description", ""),
            language=data.get("language", ""),
            stars=data.get("stars", 0),
            forks=data.get("forks", 0),
            url=data.get("url", ""),
            created_at=parse_timestamp(data.get("created_at")),
            pushed_at=parse_timestamp(data.get("pushed_at")),
            topics=tuple(data.get("topics", ())),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "full_name": self.full_name,
            "description": self.description,
            "language": self.language,
            "stars": self.stars,
            "forks": self.forks,
            "url": self.url,
            "created_at": self.created_at.isoformat(),
            "pushed_at": self.pushed_at.isoformat(),
            "topics": list(self.topics),
        }


@dataclass(frozen=True)
class CategoryItem:
    """One categorized repository with its insight and significance (1-5)."""

    repo: str
    summary: str
    significance: int


@dataclass(frozen=True)
class NotableItem:
    """A notable pick with the model's rationale."""

    repo: str
    why: str


@dataclass(frozen=True)
class AnalysisResult:
    """Structured result of one analysis run."""

    headline: str
    categories: dict[str, list[CategoryItem]]
    notable: list[NotableItem]
    pattern: str

    @property
    def repo_count(self) -> int:
        return sum(len(items) for items in self.categories.values())

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AnalysisResult":
        return cls(
            headline=data["headline"],
            categories={
                name: [
                    CategoryItem(
                        repo=item["repo"],
                        summary=item["summary"],
                        significance=item["significance"],
                    )
                    for item in items
                ]
                for name, items in data["categories"].items()
            },
            notable=[NotableItem(repo=n["repo"], why=n["why"]) for n in data.get("notable", [])],
            pattern=data.get("pattern", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "headline": self.headline,
            "categories": {
                name: [
                    {"repo": item.repo, "summary": item.summary, "significance": item.significance}
                    for item in items
                ]
                for name, items in self.categories.items()
            },
            "notable": [{"repo": n.repo, "why": n.why} for n in self.notable],
            "pattern": self.pattern,
        }


@dataclass
class DailyAnalysis:
    """The single stored analysis for one calendar date."""

    date: date
    analysis: AnalysisResult
    model: str
    tokens_used: int
    created_at: datetime
    candidates: list[CandidateRepo] = field(default_factory=list)

    def to_envelope(self) -> dict[str, Any]:
        """API response shape."""
        return {
            "date": self.date.isoformat(),
            "analysis": self.analysis.to_dict(),
            "tokensUsed": self.tokens_used,
            "createdAt": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class TrendingRepoRow:
    """Denormalized per-(date, repository) row derived from an analysis."""

    date: date
    repo_full_name: str
    description: str
    language: str
    stars: int
    forks: int
    url: str
    category: str
    ai_summary: str
    is_new: bool


@dataclass(frozen=True)
class HistoryEntry:
    """Reduced projection of a daily analysis for listing views."""

    date: date
    headline: str
    pattern: str
    category_count: int
    repo_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "headline": self.headline,
            "pattern": self.pattern,
            "categoryCount": self.category_count,
            "repoCount": self.repo_count,
        }


class SubscriberStatus(str, Enum):
    """Subscriber lifecycle state. Only ACTIVE -> UNSUBSCRIBED is allowed."""

    ACTIVE = "active"
    UNSUBSCRIBED = "unsubscribed"


@dataclass
class Subscriber:
    """Newsletter recipient."""

    email: str
    token: str
    status: SubscriberStatus = SubscriberStatus.ACTIVE
    created_at: Optional[datetime] = None
    unsubscribed_at: Optional[datetime] = None


class UnsubscribeOutcome(str, Enum):
    """Result of following an unsubscribe link."""

    UNSUBSCRIBED = "unsubscribed"
    ALREADY_UNSUBSCRIBED = "already_unsubscribed"
    INVALID = "invalid"


class RunStatus(str, Enum):
    """Outcome of a daily pipeline run."""

    STORED = "stored"
    SKIPPED = "skipped"


@dataclass
class RunResult:
    """Summary of a daily pipeline run."""

    status: RunStatus
    date: date
    candidate_count: int = 0
    repo_count: int = 0
    tokens_used: int = 0


@dataclass
class DispatchReport:
    """Summary of a newsletter batch."""

    delivered: int
    total: int
    failed: list[str] = field(default_factory=list)
    skipped_reason: Optional[str] = None
