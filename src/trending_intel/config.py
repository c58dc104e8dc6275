"""Configuration management."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

from trending_intel.core.validation import KNOWN_CATEGORIES

ANALYSIS_SYSTEM_PROMPT = (
    "You are an expert software industry analyst. Analyze today's GitHub trending "
    "repositories and produce a structured JSON report. Be concise, insightful, and "
    "opinionated. Focus on what matters to professional developers."
)

ANALYSIS_USER_PROMPT = """Here are today's trending GitHub repositories:

{repos}

Analyze these repos and output ONLY valid JSON (no markdown, no code fences) with this exact structure:

{
  "headline": "One sentence capturing today's biggest theme",
  "categories": {
    "AI/ML": [{ "repo": "owner/name", "summary": "One-line insight", "significance": 1-5 }],
    "Web": [...],
    "DevTools": [...],
    "Infrastructure": [...],
    "Security": [...],
    "Data": [...],
    "Other": [...]
  },
  "notable": [
    { "repo": "owner/name", "why": "2-sentence explanation of why this matters" }
  ],
  "pattern": "Any emerging theme across today's repos"
}

Rules:
- Every repo must appear in exactly one category
- Include 2-3 notable picks maximum
- significance is 1-5 (5 = most significant)
- Empty categories should be omitted
- Be direct and opinionated in summaries"""


@dataclass
class GitHubConfig:
    """GitHub search settings."""
    api_base: str = "https://api.github.com"
    per_page: int = 30
    new_repo_days: int = 7
    new_repo_min_stars: int = 10
    active_days: int = 1
    active_min_stars: int = 500
    timeout: float = 30.0


@dataclass
class ClaudeConfig:
    """Claude API settings."""
    base_url: str = "https://api.anthropic.com/v1"
    model: str = "claude-3-5-haiku-latest"
    max_tokens: int = 4096
    temperature: float = 0.7
    max_retries: int = 2
    initial_retry_delay: float = 2.0
    timeout: float = 60.0


@dataclass
class StorageConfig:
    """Database settings."""
    database_path: Path = Path("data/trending_intel.db")


@dataclass
class NewsletterConfig:
    """Weekly newsletter settings."""
    site_name: str = "Trending Intel"
    site_url: str = "https://trending.example.com"
    api_base_url: str = "http://localhost:8000"
    sender_email: str = "digest@example.com"
    resend_api_base: str = "https://api.resend.com"
    lookback_days: int = 7
    concurrency: int = 1
    timeout: float = 30.0


@dataclass
class ApiConfig:
    """HTTP API settings."""
    allowed_origins: list[str] = field(default_factory=list)
    environment: str = "production"
    host: str = "127.0.0.1"
    port: int = 8000

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


@dataclass
class PromptsConfig:
    """Prompts for LLM."""
    analysis: dict = field(default_factory=lambda: {
        "system": ANALYSIS_SYSTEM_PROMPT,
        "user": ANALYSIS_USER_PROMPT,
    })
    categories: list[str] = field(default_factory=lambda: list(KNOWN_CATEGORIES))


@dataclass
class Settings:
    """Application settings."""

    # API Keys (from environment only)
    anthropic_api_key: str = ""
    github_token: Optional[str] = None
    resend_api_key: str = ""

    # Config sections
    github: GitHubConfig = field(default_factory=GitHubConfig)
    claude: ClaudeConfig = field(default_factory=ClaudeConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    newsletter: NewsletterConfig = field(default_factory=NewsletterConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    prompts: PromptsConfig = field(default_factory=PromptsConfig)

    @property
    def database_path(self) -> Path:
        return self.storage.database_path


def load_config(config_path: Path = Path("config.yaml")) -> dict:
    """Load configuration from YAML file."""
    if not config_path.exists():
        return {}

    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def get_settings(config_path: Path = Path("config.yaml")) -> Settings:
    """Get application settings from YAML config and environment."""
    load_dotenv()
    config = load_config(config_path)

    settings = Settings(
        anthropic_api_key=os.getenv("ANTHROPIC_API_KEY", ""),
        github_token=os.getenv("GITHUB_TOKEN") or None,
        resend_api_key=os.getenv("RESEND_API_KEY", ""),
    )

    for section in ("github", "claude", "newsletter", "api"):
        for key, value in config.get(section, {}).items():
            setattr(getattr(settings, section), key, value)

    if "storage" in config:
        for key, value in config["storage"].items():
            setattr(settings.storage, key, Path(value))

    # Partial overrides merge into the built-in prompts
    prompts = config.get("prompts") or {}
    if prompts.get("analysis"):
        settings.prompts.analysis = {**settings.prompts.analysis, **prompts["analysis"]}
    if prompts.get("categories"):
        settings.prompts.categories = list(prompts["categories"])

    # Environment overrides
    if os.getenv("ALLOWED_ORIGINS"):
        settings.api.allowed_origins = [
            origin.strip() for origin in os.environ["ALLOWED_ORIGINS"].split(",") if origin.strip()
        ]
    if os.getenv("ENVIRONMENT"):
        settings.api.environment = os.environ["ENVIRONMENT"]
    if os.getenv("TRENDING_INTEL_DB"):
        settings.storage.database_path = Path(os.environ["TRENDING_INTEL_DB"])

    return settings
