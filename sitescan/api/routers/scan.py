"""Scan endpoint.

Routes
------
POST /scan    Body: {"url": "https://..."}    → run_scan
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, HttpUrl

from sitescan.audit.crawler import ScanError
from sitescan.audit.scanner import run_scan

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class ScanRequest(BaseModel):
    url: HttpUrl


class ViolationOut(BaseModel):
    type: str
    excerpt: str
    confidence: float


class FindingOut(BaseModel):
    url: str
    violations: list[ViolationOut]
    summary: str
    suggestions: list[str]
    quality_issues: list[str]


class RequiredPagesOut(BaseModel):
    found: list[str]
    missing: list[str]


class SiteStructureOut(BaseModel):
    post_count: int
    has_meta_tags: bool
    has_good_headers: bool
    structure_warnings: list[str]


class ScanResponse(BaseModel):
    url: str
    total_violations: int
    required_pages: RequiredPagesOut
    site_structure: SiteStructureOut
    homepage: FindingOut
    page_findings: list[FindingOut]
    suggestions: list[str]
    score: int
    summary: str
    scanned_at: str


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=ScanResponse,
    responses={
        500: {"description": "Unexpected failure during the scan."},
        502: {"description": "Homepage unreachable; scan aborted."},
    },
)
def scan_endpoint(body: ScanRequest, request: Request) -> Any:
    """Crawl the site at ``url`` and return its compliance report.

    Runs in FastAPI's worker thread pool; the scan itself fans out to its own
    thread pools for crawling and per-post analysis.
    """
    try:
        report = run_scan(str(body.url), request.app.state.moderation)
    except ScanError as exc:
        return JSONResponse(
            status_code=502, content={"error": "Scan failed", "message": str(exc)}
        )
    except Exception as exc:
        logger.exception("[SCAN] Unexpected failure for %s", body.url)
        return JSONResponse(
            status_code=500, content={"error": "Scan failed", "message": str(exc)}
        )
    return report.to_dict()
