"""Tests for the /scan and /health API endpoints.

The moderation client is never built: ``build_moderation_client`` is patched
to return ``None`` and ``run_scan`` is patched where a canned report is
needed.  No network or LLM calls are made.
"""

from __future__ import annotations

import importlib
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from sitescan.api.app import create_app
from sitescan.audit.crawler import ScanError
from sitescan.audit.models import (
    PageFinding,
    RequiredPages,
    ScanReport,
    SiteStructure,
    Violation,
    ViolationType,
)
from sitescan.audit.moderation import ModerationAdapter


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def client(monkeypatch):
    """Return a TestClient whose lifespan builds an unconfigured adapter."""
    # `sitescan.api.app` is shadowed by the re-exported FastAPI instance.
    app_module = importlib.import_module("sitescan.api.app")
    monkeypatch.setattr(app_module, "build_moderation_client", lambda config: None)
    app = create_app()
    with TestClient(app, raise_server_exceptions=True) as c:
        yield c


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _report(url: str = "https://example.com/") -> ScanReport:
    finding = PageFinding(
        url=url + "casino-night-review",
        violations=[Violation(ViolationType.GAMBLING, "casino", 0.95)],
        summary="Gambling promotion",
        suggestions=["Remove gambling promotion"],
    )
    return ScanReport(
        url=url,
        total_violations=1,
        required_pages=RequiredPages(found=["about"], missing=["terms"]),
        site_structure=SiteStructure(
            post_count=12,
            has_meta_tags=True,
            has_good_headers=False,
            structure_warnings=["Weak header structure", "Low content volume"],
        ),
        homepage=PageFinding(url=url, summary="Clean"),
        page_findings=[finding],
        suggestions=["Remove gambling promotion", "Add missing pages: terms"],
        score=65,
        summary="1 violations found across 1 pages.",
        scanned_at="2026-01-01T00:00:00+00:00",
    )


# ---------------------------------------------------------------------------
# POST /scan
# ---------------------------------------------------------------------------

class TestScanEndpoint:
    def test_returns_report(self, client) -> None:
        with patch("sitescan.api.routers.scan.run_scan", return_value=_report()) as run:
            resp = client.post("/scan", json={"url": "https://example.com"})

        assert resp.status_code == 200
        body = resp.json()
        assert body["score"] == 65
        assert body["required_pages"] == {"found": ["about"], "missing": ["terms"]}
        assert body["site_structure"]["post_count"] == 12
        assert body["page_findings"][0]["violations"][0] == {
            "type": "Gambling", "excerpt": "casino", "confidence": 0.95,
        }
        assert body["homepage"]["quality_issues"] == []
        url_arg, moderation = run.call_args[0]
        assert url_arg == "https://example.com/"
        assert isinstance(moderation, ModerationAdapter)

    def test_homepage_failure_maps_to_502(self, client) -> None:
        with patch(
            "sitescan.api.routers.scan.run_scan",
            side_effect=ScanError("Failed to fetch homepage: https://down.example/"),
        ):
            resp = client.post("/scan", json={"url": "https://down.example"})

        assert resp.status_code == 502
        assert resp.json() == {
            "error": "Scan failed",
            "message": "Failed to fetch homepage: https://down.example/",
        }

    def test_unexpected_error_returns_error_body(self, client) -> None:
        with patch("sitescan.api.routers.scan.run_scan", side_effect=RuntimeError("parser crashed")):
            resp = client.post("/scan", json={"url": "https://example.com"})

        assert resp.status_code == 500
        assert resp.json() == {"error": "Scan failed", "message": "parser crashed"}

    @pytest.mark.parametrize("payload", [{}, {"url": "not a url"}, {"url": "ftp://example.com"}])
    def test_invalid_body_rejected(self, client, payload) -> None:
        with patch("sitescan.api.routers.scan.run_scan") as run:
            resp = client.post("/scan", json=payload)
        assert resp.status_code == 422
        run.assert_not_called()


# ---------------------------------------------------------------------------
# GET /health
# ---------------------------------------------------------------------------

class TestHealthEndpoint:
    def test_unconfigured(self, client) -> None:
        resp = client.get("/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "ok"
        assert body["moderation"]["configured"] is False

    def test_configured(self, client) -> None:
        client.app.state.moderation = ModerationAdapter(MagicMock())
        resp = client.get("/health")
        assert resp.json()["moderation"]["configured"] is True
