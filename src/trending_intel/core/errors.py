"""Error taxonomy."""

from typing import Optional


class TrendingIntelError(Exception):
    """Base class for all application errors."""


class UpstreamFailure(TrendingIntelError):
    """A search, LLM or email provider returned a non-success response."""

    def __init__(self, service: str, message: str, status_code: Optional[int] = None) -> None:
        self.service = service
        self.message = message
        self.status_code = status_code
        super().__init__(f"{service}: {message}")


class MalformedResponse(TrendingIntelError):
    """LLM output could not be parsed as JSON."""


class AnalysisValidationError(MalformedResponse):
    """LLM output parsed, but does not match the analysis schema."""


class ValidationError(TrendingIntelError, ValueError):
    """Malformed request input (bad date, bad email)."""


class ConflictError(TrendingIntelError):
    """A unique resource already exists."""


class DeliveryError(TrendingIntelError):
    """Sending a single email failed."""
