"""Source adapters for fetching candidate repositories."""

from trending_intel.adapters.sources.github_source import GitHubTrendingSource, dedupe_repos

__all__ = ["GitHubTrendingSource", "dedupe_repos"]
