"""Tests for analysis and request validation."""

from datetime import date

import pytest

from trending_intel.core import AnalysisValidationError, ValidationError
from trending_intel.core.validation import (
    clamp_int,
    normalize_email,
    parse_date,
    validate_analysis,
)


def valid_payload() -> dict:
    return {
        "headline": "Agents everywhere",
        "categories": {
            "AI/ML": [{"repo": "a/one", "summary": "Agent", "significance": 5}],
            "Web": [{"repo": "b/two", "summary": "Framework", "significance": 1}],
            "Data": [],
        },
        "notable": [{"repo": "a/one", "why": "It matters."}],
        "pattern": "Rust everywhere",
    }


def test_valid_payload() -> None:
    """Test that a well-formed payload becomes an AnalysisResult."""
    result = validate_analysis(valid_payload())

    assert result.headline == "Agents everywhere"
    assert result.categories["AI/ML"][0].significance == 5
    assert result.notable[0].repo == "a/one"


def test_empty_categories_dropped() -> None:
    result = validate_analysis(valid_payload())
    assert "Data" not in result.categories


@pytest.mark.parametrize("significance", [0, 6, -1, 2.5, "3", True, None])
def test_significance_out_of_range(significance) -> None:
    """Test that significance must be an integer in 1..5."""
    payload = valid_payload()
    payload["categories"]["AI/ML"][0]["significance"] = significance

    with pytest.raises(AnalysisValidationError):
        validate_analysis(payload)


def test_repo_in_two_categories() -> None:
    """Test that a repository may only be assigned once."""
    payload = valid_payload()
    payload["categories"]["Web"].append({"repo": "a/one", "summary": "Again", "significance": 2})

    with pytest.raises(AnalysisValidationError, match="a/one appears in both"):
        validate_analysis(payload)


def test_unknown_category() -> None:
    payload = valid_payload()
    payload["categories"]["Blockchain"] = [{"repo": "c/three", "summary": "x", "significance": 2}]

    with pytest.raises(AnalysisValidationError, match="Unknown category"):
        validate_analysis(payload)


def test_custom_category_set() -> None:
    payload = valid_payload()
    payload["categories"] = {"Games": [{"repo": "c/three", "summary": "x", "significance": 2}]}

    result = validate_analysis(payload, known_categories=["Games"])
    assert list(result.categories) == ["Games"]


def test_too_many_notable() -> None:
    payload = valid_payload()
    payload["notable"] = [{"repo": f"x/{i}", "why": "why"} for i in range(4)]

    with pytest.raises(AnalysisValidationError, match="At most 3"):
        validate_analysis(payload)


@pytest.mark.parametrize("payload", [
    [],
    {"categories": {}, "notable": [], "pattern": ""},
    {"headline": "h", "categories": [], "notable": [], "pattern": ""},
    {"headline": "h", "categories": {}, "notable": {}, "pattern": ""},
    {"headline": "h", "categories": {"Web": [{"summary": "x", "significance": 2}]}},
])
def test_malformed_shapes(payload) -> None:
    with pytest.raises(AnalysisValidationError):
        validate_analysis(payload)


def test_normalize_email() -> None:
    assert normalize_email("  Dev@Example.COM ") == "dev@example.com"


@pytest.mark.parametrize("raw", [None, "", "   ", "no-at-sign", "a@b", "a b@c.io", "@c.io", 42])
def test_normalize_email_rejects(raw) -> None:
    with pytest.raises(ValidationError, match="Invalid email"):
        normalize_email(raw)


def test_parse_date() -> None:
    assert parse_date("2024-01-10") == date(2024, 1, 10)


@pytest.mark.parametrize("raw", ["01-10-2024", "2024-1-10", "2024-02-30", "today", ""])
def test_parse_date_rejects(raw) -> None:
    with pytest.raises(ValidationError, match="Invalid date format. Use YYYY-MM-DD"):
        parse_date(raw)


@pytest.mark.parametrize("raw,expected", [
    (None, 30),
    ("abc", 30),
    ("0", 1),
    ("-5", 1),
    ("7", 7),
    ("365", 365),
    ("9999", 365),
])
def test_clamp_int(raw, expected) -> None:
    assert clamp_int(raw, 30, 1, 365) == expected
