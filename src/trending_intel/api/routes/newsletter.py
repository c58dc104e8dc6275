"""Subscribe and unsubscribe endpoints."""

import json
from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, JSONResponse

from trending_intel.core import ConflictError, UnsubscribeOutcome, ValidationError

router = APIRouter(prefix="/api", tags=["newsletter"])


@router.post("/subscribe")
async def subscribe(request: Request) -> JSONResponse:
    """Register an email for the weekly newsletter."""
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return JSONResponse({"error": "Invalid JSON"}, status_code=400)

    email = body.get("email") if isinstance(body, dict) else None

    try:
        await request.app.state.subscriptions.signup(email)
    except ValidationError as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    except ConflictError as e:
        return JSONResponse({"error": str(e)}, status_code=409)

    return JSONResponse({"status": "subscribed"})


@router.get("/unsubscribe", response_class=HTMLResponse)
async def unsubscribe(request: Request, token: Optional[str] = None) -> HTMLResponse:
    """Follow an unsubscribe link; always answers with an HTML page."""
    renderer = request.app.state.renderer
    newsletter = request.app.state.settings.newsletter
    outcome = await request.app.state.subscriptions.unsubscribe(token)

    if outcome is UnsubscribeOutcome.UNSUBSCRIBED:
        page = renderer.render_page(
            "Unsubscribed",
            f"You've been removed from the {newsletter.site_name} weekly newsletter. "
            "Changed your mind? Visit the site to resubscribe.",
            link_url=newsletter.site_url,
        )
    elif outcome is UnsubscribeOutcome.ALREADY_UNSUBSCRIBED:
        page = renderer.render_page(
            "Already Unsubscribed",
            "This email has already been unsubscribed.",
        )
    else:
        page = renderer.render_page("Invalid Link", "This unsubscribe link is invalid.")

    return HTMLResponse(page)
