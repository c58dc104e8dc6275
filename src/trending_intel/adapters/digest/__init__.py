"""Digest renderers."""

from trending_intel.adapters.digest.html_generator import HtmlDigestGenerator, render_significance

__all__ = ["HtmlDigestGenerator", "render_significance"]
