"""Tests for configuration loading."""

from pathlib import Path

import pytest

from trending_intel.config import Settings, get_settings, load_config
from trending_intel.core.validation import KNOWN_CATEGORIES


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in (
        "ANTHROPIC_API_KEY",
        "GITHUB_TOKEN",
        "RESEND_API_KEY",
        "ALLOWED_ORIGINS",
        "ENVIRONMENT",
        "TRENDING_INTEL_DB",
    ):
        monkeypatch.delenv(key, raising=False)


def test_defaults() -> None:
    settings = Settings()

    assert settings.github.per_page == 30
    assert settings.claude.max_retries == 2
    assert settings.newsletter.lookback_days == 7
    assert settings.newsletter.concurrency == 1
    assert settings.prompts.categories == list(KNOWN_CATEGORIES)
    assert "{repos}" in settings.prompts.analysis["user"]
    assert not settings.api.is_development


def test_missing_file(tmp_path) -> None:
    assert load_config(tmp_path / "missing.yaml") == {}
    assert get_settings(tmp_path / "missing.yaml").github.active_min_stars == 500


def test_yaml_sections(tmp_path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "github:\n"
        "  active_min_stars: 1000\n"
        "claude:\n"
        "  model: claude-sonnet-4-5\n"
        "storage:\n"
        "  database_path: /tmp/intel.db\n"
        "newsletter:\n"
        "  site_name: Repo Radar\n"
        "  concurrency: 4\n",
        encoding="utf-8",
    )

    settings = get_settings(config_path)

    assert settings.github.active_min_stars == 1000
    assert settings.github.per_page == 30
    assert settings.claude.model == "claude-sonnet-4-5"
    assert settings.database_path == Path("/tmp/intel.db")
    assert settings.newsletter.site_name == "Repo Radar"
    assert settings.newsletter.concurrency == 4


def test_env_overrides(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test")
    monkeypatch.setenv("GITHUB_TOKEN", "gh-test")
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example.com, https://b.example.com,")
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.setenv("TRENDING_INTEL_DB", str(tmp_path / "env.db"))

    settings = get_settings(tmp_path / "missing.yaml")

    assert settings.anthropic_api_key == "sk-test"
    assert settings.github_token == "gh-test"
    assert settings.api.allowed_origins == ["https://a.example.com", "https://b.example.com"]
    assert settings.api.is_development
    assert settings.database_path == tmp_path / "env.db"


def test_empty_github_token_is_none(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "")

    assert get_settings(tmp_path / "missing.yaml").github_token is None


def test_partial_prompt_override_keeps_system(tmp_path) -> None:
    """Test that overriding the user prompt leaves the system prompt in place."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "prompts:\n"
        "  analysis:\n"
        "    user: \"Custom prompt for {repos}\"\n",
        encoding="utf-8",
    )

    settings = get_settings(config_path)

    assert settings.prompts.analysis["user"] == "Custom prompt for {repos}"
    assert settings.prompts.analysis["system"] == Settings().prompts.analysis["system"]
    assert settings.prompts.categories == list(KNOWN_CATEGORIES)


def test_category_override(tmp_path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("prompts:\n  categories: [AI/ML, Other]\n", encoding="utf-8")

    settings = get_settings(config_path)

    assert settings.prompts.categories == ["AI/ML", "Other"]
    assert "{repos}" in settings.prompts.analysis["user"]
