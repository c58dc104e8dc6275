"""GitHub source for trending repositories."""

import asyncio
from datetime import datetime, timedelta
from typing import Callable, Optional

import httpx

from trending_intel.config import GitHubConfig
from trending_intel.core import CandidateRepo, TrendSource, UpstreamFailure, utc_now
from trending_intel.logging_config import get_logger

logger = get_logger(__name__)


def dedupe_repos(*batches: list[CandidateRepo]) -> list[CandidateRepo]:
    """Concatenate batches in order, keeping the first occurrence of each repository."""
    seen: set[str] = set()
    combined: list[CandidateRepo] = []

    for batch in batches:
        for repo in batch:
            if repo.full_name not in seen:
                seen.add(repo.full_name)
                combined.append(repo)

    return combined


class GitHubTrendingSource(TrendSource):
    """Search GitHub for newly created and recently active popular repositories.

    Two queries run concurrently:
        1. repositories created in the last ``new_repo_days`` with more than
           ``new_repo_min_stars`` stars
        2. repositories pushed in the last ``active_days`` with more than
           ``active_min_stars`` stars

    Results of query 1 come first, so a new repository keeps its place even
    when the second query also surfaces it.
    """

    def __init__(
        self,
        config: GitHubConfig,
        token: Optional[str] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.config = config
        self.token = token
        self.clock = clock

    def build_queries(self) -> tuple[str, str]:
        """Search qualifiers for both queries, relative to the current time."""
        now = self.clock()
        created_since = (now - timedelta(days=self.config.new_repo_days)).date().isoformat()
        pushed_since = (now - timedelta(days=self.config.active_days)).date().isoformat()
        return (
            f"created:>{created_since} stars:>{self.config.new_repo_min_stars}",
            f"pushed:>{pushed_since} stars:>{self.config.active_min_stars}",
        )

    async def fetch(self) -> list[CandidateRepo]:
        """Run both searches and merge them. Fails if either query fails."""
        new_query, active_query = self.build_queries()

        async with httpx.AsyncClient(timeout=self.config.timeout) as client:
            results = await asyncio.gather(
                self._search(client, new_query),
                self._search(client, active_query),
                return_exceptions=True,
            )

        errors = []
        for index, result in enumerate(results, 1):
            if isinstance(result, UpstreamFailure):
                errors.append(f"Query{index}: {result.status_code or result.message}")
            elif isinstance(result, httpx.HTTPError):
                errors.append(f"Query{index}: {type(result).__name__}")
            elif isinstance(result, BaseException):
                raise result

        if errors:
            status_codes = [
                r.status_code for r in results
                if isinstance(r, UpstreamFailure) and r.status_code is not None
            ]
            raise UpstreamFailure(
                "github",
                "search failed: " + " ".join(errors),
                status_code=status_codes[0] if status_codes else None,
            )

        new_repos, active_repos = results
        combined = dedupe_repos(new_repos, active_repos)
        logger.info(
            "Fetched %d new + %d active repos, %d after dedup",
            len(new_repos), len(active_repos), len(combined),
        )
        return combined

    async def _search(self, client: httpx.AsyncClient, query: str) -> list[CandidateRepo]:
        """Execute a search query and return candidates."""
        response = await client.get(
            f"{self.config.api_base}/search/repositories",
            headers=self._get_headers(),
            params={
                "q": query,
                "sort": "stars",
                "order": "desc",
                "per_page": self.config.per_page,
            },
        )

        if response.status_code != 200:
            logger.error("GitHub API error %d for query: %s", response.status_code, query)
            raise UpstreamFailure("github", f"status {response.status_code}", response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            logger.error("GitHub returned a non-JSON body for query: %s", query)
            raise UpstreamFailure("github", "invalid JSON body") from e

        if not isinstance(data, dict) or not isinstance(data.get("items", []), list):
            raise UpstreamFailure("github", "unexpected response shape")

        return [CandidateRepo.from_api(repo) for repo in data.get("items", [])]

    def _get_headers(self) -> dict[str, str]:
        """Get headers for GitHub API requests."""
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "trending-intel",
        }

        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        return headers
