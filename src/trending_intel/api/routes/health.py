"""Liveness probe."""

from typing import Any

from fastapi import APIRouter

from trending_intel.core import utc_now

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
async def health_check() -> dict[str, Any]:
    return {"status": "ok", "timestamp": utc_now().isoformat()}
