"""Daily AI digest of trending GitHub repositories."""

__version__ = "0.1.0"
