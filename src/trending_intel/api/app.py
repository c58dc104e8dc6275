"""FastAPI application for the Trending Intel read API and newsletter signup."""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from trending_intel.adapters.digest import HtmlDigestGenerator
from trending_intel.api.routes import analyses_router, health_router, newsletter_router
from trending_intel.config import Settings
from trending_intel.core import AnalysisStore, SubscriberRegistry
from trending_intel.logging_config import get_logger
from trending_intel.use_cases import AnalysisPipeline, SubscriptionService

logger = get_logger(__name__)


def create_app(
    settings: Settings,
    store: AnalysisStore,
    registry: SubscriberRegistry,
    pipeline: Optional[AnalysisPipeline] = None,
) -> FastAPI:
    """Build the API around explicitly supplied components.

    The pipeline is only used by the development trigger route.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        initialize = getattr(store, "initialize", None)
        if initialize is not None:
            await initialize()
        yield

    app = FastAPI(title="Trending Intel API", version="0.1.0", lifespan=lifespan)

    app.state.settings = settings
    app.state.store = store
    app.state.pipeline = pipeline
    app.state.subscriptions = SubscriptionService(registry)
    app.state.renderer = HtmlDigestGenerator(
        settings.newsletter.site_name, settings.newsletter.site_url
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse({"error": str(exc.detail)}, status_code=exc.status_code)

    # Unexpected errors become a generic 500; details stay in the log
    @app.middleware("http")
    async def internal_error_middleware(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception:
            logger.exception("API error on %s %s", request.method, request.url.path)
            return JSONResponse({"error": "Internal Server Error"}, status_code=500)

    # Added last so it wraps every response, including errors
    if settings.api.is_development:
        origins = ["*"]
    else:
        origins = settings.api.allowed_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    app.include_router(health_router)
    app.include_router(analyses_router)
    app.include_router(newsletter_router)

    return app
