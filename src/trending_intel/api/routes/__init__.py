"""API routers."""

from trending_intel.api.routes.analyses import router as analyses_router
from trending_intel.api.routes.health import router as health_router
from trending_intel.api.routes.newsletter import router as newsletter_router

__all__ = ["analyses_router", "health_router", "newsletter_router"]
