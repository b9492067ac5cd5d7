"""Health endpoint.

Routes
------
GET /health    → service status and moderation capability
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request

from sitescan.config import settings

router = APIRouter()


@router.get("")
def health(request: Request) -> dict[str, Any]:
    """Report whether the moderation classifier is configured.

    Scans still run without it; only rule-based violations are found then.
    """
    moderation = request.app.state.moderation
    return {
        "status": "ok",
        "moderation": {
            "configured": moderation.configured,
            "provider": settings.llm_provider,
            "model": settings.moderation_model,
        },
    }
