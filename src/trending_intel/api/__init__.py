"""HTTP API."""

from trending_intel.api.app import create_app

__all__ = ["create_app"]
