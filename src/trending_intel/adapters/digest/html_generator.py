"""HTML digest generator for the weekly newsletter."""

import html
from datetime import date
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from trending_intel.core import DailyAnalysis, DigestRenderer

TEMPLATES_DIR = Path(__file__).parent / "templates"

UNSUBSCRIBE_PLACEHOLDER = "{{UNSUBSCRIBE_URL}}"
FILLED_MARKER = "●"
EMPTY_MARKER = "○"
MAX_SIGNIFICANCE = 5


def render_significance(significance: int) -> str:
    """Render significance as filled markers followed by empty markers, five in total."""
    filled = max(0, min(MAX_SIGNIFICANCE, significance))
    return FILLED_MARKER * filled + EMPTY_MARKER * (MAX_SIGNIFICANCE - filled)


def format_long_date(day: date) -> str:
    """Format as e.g. 'Wednesday, January 10'."""
    return f"{day:%A, %B} {day.day}"


class HtmlDigestGenerator(DigestRenderer):
    """Render the weekly digest email and standalone message pages."""

    def __init__(self, site_name: str, site_url: str) -> None:
        self.site_name = site_name
        self.site_url = site_url
        self.env = Environment(
            loader=FileSystemLoader(str(TEMPLATES_DIR)),
            autoescape=select_autoescape(["html"]),
        )
        self.env.filters["significance"] = render_significance
        self.env.filters["long_date"] = format_long_date

    def render_weekly(self, days: list[DailyAnalysis]) -> str:
        """Render one shared body; the unsubscribe link is left as a placeholder."""
        template = self.env.get_template("weekly_digest.html")
        return template.render(
            site_name=self.site_name,
            site_url=self.site_url,
            days=days,
            unsubscribe_placeholder=UNSUBSCRIBE_PLACEHOLDER,
        )

    def personalize(self, body: str, unsubscribe_url: str) -> str:
        return body.replace(UNSUBSCRIBE_PLACEHOLDER, html.escape(unsubscribe_url, quote=True))

    def render_page(self, title: str, message: str, link_url: Optional[str] = None) -> str:
        """Render a small confirmation page (used by the unsubscribe endpoint)."""
        template = self.env.get_template("message_page.html")
        return template.render(
            site_name=self.site_name,
            title=title,
            message=message,
            link_url=link_url,
        )
