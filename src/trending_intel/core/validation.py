"""Validation of LLM output and request input."""

import re
from datetime import date
from typing import Any, Iterable, Optional

from trending_intel.core.entities import AnalysisResult, CategoryItem, NotableItem
from trending_intel.core.errors import AnalysisValidationError, ValidationError

KNOWN_CATEGORIES = ("AI/ML", "Web", "DevTools", "Infrastructure", "Security", "Data", "Other")
MAX_NOTABLE = 3
MIN_SIGNIFICANCE = 1
MAX_SIGNIFICANCE = 5

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
DATE_FORMAT_ERROR = "Invalid date format. Use YYYY-MM-DD"


def validate_analysis(
    payload: Any, known_categories: Iterable[str] = KNOWN_CATEGORIES
) -> AnalysisResult:
    """Check a parsed LLM payload against the analysis schema.

    Rules:
        - headline and pattern are strings, categories an object, notable a list
        - category names come from ``known_categories``
        - every item has string repo/summary and integer significance in 1..5
        - a repository appears in at most one category
        - at most three notable picks

    Empty categories are dropped.

    Raises:
        AnalysisValidationError: on the first violation found
    """
    if not isinstance(payload, dict):
        raise AnalysisValidationError("Analysis must be a JSON object")

    headline = payload.get("headline")
    if not isinstance(headline, str) or not headline.strip():
        raise AnalysisValidationError("'headline' must be a non-empty string")

    pattern = payload.get("pattern", "")
    if not isinstance(pattern, str):
        raise AnalysisValidationError("'pattern' must be a string")

    raw_categories = payload.get("categories")
    if not isinstance(raw_categories, dict):
        raise AnalysisValidationError("'categories' must be an object")

    allowed = set(known_categories)
    assigned: dict[str, str] = {}
    categories: dict[str, list[CategoryItem]] = {}

    for name, items in raw_categories.items():
        if name not in allowed:
            raise AnalysisValidationError(f"Unknown category '{name}'")
        if not isinstance(items, list):
            raise AnalysisValidationError(f"Category '{name}' must be a list")

        parsed_items = []
        for item in items:
            parsed = _validate_category_item(name, item)
            if parsed.repo in assigned:
                raise AnalysisValidationError(
                    f"{parsed.repo} appears in both '{assigned[parsed.repo]}' and '{name}'"
                )
            assigned[parsed.repo] = name
            parsed_items.append(parsed)

        if parsed_items:
            categories[name] = parsed_items

    raw_notable = payload.get("notable", [])
    if not isinstance(raw_notable, list):
        raise AnalysisValidationError("'notable' must be a list")
    if len(raw_notable) > MAX_NOTABLE:
        raise AnalysisValidationError(
            f"At most {MAX_NOTABLE} notable picks allowed, got {len(raw_notable)}"
        )

    notable = []
    for entry in raw_notable:
        if not isinstance(entry, dict):
            raise AnalysisValidationError("Notable pick must be an object")
        repo, why = entry.get("repo"), entry.get("why")
        if not isinstance(repo, str) or not isinstance(why, str):
            raise AnalysisValidationError("Notable pick needs string 'repo' and 'why'")
        notable.append(NotableItem(repo=repo, why=why))

    return AnalysisResult(
        headline=headline,
        categories=categories,
        notable=notable,
        pattern=pattern,
    )


def _validate_category_item(category: str, item: Any) -> CategoryItem:
    if not isinstance(item, dict):
        raise AnalysisValidationError(f"Item in '{category}' must be an object")

    repo = item.get("repo")
    summary = item.get("summary")
    significance = item.get("significance")

    if not isinstance(repo, str) or not repo:
        raise AnalysisValidationError(f"Item in '{category}' is missing 'repo'")
    if not isinstance(summary, str):
        raise AnalysisValidationError(f"{repo}: 'summary' must be a string")
    # bool is an int subclass
    if isinstance(significance, bool) or not isinstance(significance, int):
        raise AnalysisValidationError(f"{repo}: 'significance' must be an integer")
    if not MIN_SIGNIFICANCE <= significance <= MAX_SIGNIFICANCE:
        raise AnalysisValidationError(
            f"{repo}: significance {significance} outside "
            f"{MIN_SIGNIFICANCE}-{MAX_SIGNIFICANCE}"
        )

    return CategoryItem(repo=repo, summary=summary, significance=significance)


def normalize_email(raw: Optional[str]) -> str:
    """Trim and lower-case an email address, rejecting malformed input."""
    if not isinstance(raw, str):
        raise ValidationError("Invalid email")
    email = raw.strip().lower()
    if not email or not EMAIL_PATTERN.match(email):
        raise ValidationError("Invalid email")
    return email


def parse_date(raw: str) -> date:
    """Parse a strict YYYY-MM-DD string."""
    if not DATE_PATTERN.match(raw):
        raise ValidationError(DATE_FORMAT_ERROR)
    try:
        return date.fromisoformat(raw)
    except ValueError as e:
        raise ValidationError(DATE_FORMAT_ERROR) from e


def clamp_int(raw: Optional[str], default: int, minimum: int, maximum: int) -> int:
    """Parse an integer query parameter, falling back to default and clamping to bounds."""
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return max(minimum, min(maximum, value))
