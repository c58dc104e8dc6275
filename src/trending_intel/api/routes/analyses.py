"""Read endpoints for daily analyses."""

from datetime import timedelta
from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from trending_intel.core import ValidationError, utc_now
from trending_intel.core.validation import clamp_int, parse_date

router = APIRouter(prefix="/api", tags=["analyses"])

HISTORY_DEFAULT_DAYS = 30
HISTORY_MIN_DAYS = 1
HISTORY_MAX_DAYS = 365


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


@router.get("/today")
async def get_today(request: Request) -> JSONResponse:
    """Latest stored analysis."""
    analysis = await request.app.state.store.get_latest()
    if analysis is None:
        return error_response("No analysis available yet", 404)
    return JSONResponse(analysis.to_envelope())


@router.get("/date/{date_str}")
async def get_by_date(date_str: str, request: Request) -> JSONResponse:
    """Analysis for one YYYY-MM-DD date."""
    try:
        day = parse_date(date_str)
    except ValidationError as e:
        return error_response(str(e), 400)

    analysis = await request.app.state.store.get_by_date(day)
    if analysis is None:
        return error_response(f"No analysis for {date_str}", 404)
    return JSONResponse(analysis.to_envelope())


@router.get("/history")
async def get_history(request: Request, days: Optional[str] = None) -> JSONResponse:
    """Reduced projections for the last N days (clamped to 1..365)."""
    window = clamp_int(days, HISTORY_DEFAULT_DAYS, HISTORY_MIN_DAYS, HISTORY_MAX_DAYS)
    cutoff = (utc_now() - timedelta(days=window)).date()
    entries = await request.app.state.store.history_since(cutoff)
    return JSONResponse({"data": [entry.to_dict() for entry in entries]})


@router.post("/trigger")
async def trigger(request: Request) -> JSONResponse:
    """Run the daily pipeline on demand. Development only."""
    settings = request.app.state.settings
    pipeline = request.app.state.pipeline
    if not settings.api.is_development or pipeline is None:
        return error_response("Not Found", 404)

    result = await pipeline.run_once()
    return JSONResponse({"status": result.status.value, "date": result.date.isoformat()})
