"""FastAPI application factory.

Lifespan
--------
On startup the app resolves the moderation classifier once from
``settings`` and stores a :class:`ModerationAdapter` on
``app.state.moderation``; every request shares it.

Routers
-------
    /scan    — run a compliance scan for one homepage URL
    /health  — moderation capability status
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sitescan import __version__
from sitescan.audit.moderation import ModerationAdapter, build_moderation_client
from sitescan.config import settings

from sitescan.api.routers import health as health_router
from sitescan.api.routers import scan as scan_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the shared moderation adapter on startup."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    app.state.moderation = ModerationAdapter(build_moderation_client(settings), settings)
    yield


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="sitescan API",
        description=(
            "Ad-policy compliance scanner: crawls a site from its homepage, "
            "classifies content posts, checks them with rule-based detectors "
            "and an LLM moderation classifier, and returns a scored report."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(scan_router.router, prefix="/scan", tags=["scan"])
    app.include_router(health_router.router, prefix="/health", tags=["health"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn sitescan.api.app:app --reload
app = create_app()
