"""End-to-end tests for ``run_scan`` against an in-memory fake site.

Mocking strategy
----------------
* Network — a ``FakeSite`` callable replaces ``fetch_page`` and serves
  canned HTML keyed by URL.
* LLM calls — the moderation adapter wraps either no client or a
  ``MagicMock`` whose ``.invoke()`` returns a fake ``AIMessage``-like object.
"""

from __future__ import annotations

import json
import random
from dataclasses import replace
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from sitescan.audit.crawler import ScanError
from sitescan.audit.moderation import ModerationAdapter
from sitescan.audit.scanner import DUPLICATE_ISSUE, run_scan
from sitescan.config import Settings
from sitescan.scraper.models import PageResult


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

BASE = "https://example.com/"
REQUIRED_LINKS = ["/about", "/contact", "/privacy-policy", "/terms", "/disclaimer"]
WORDS = [
    "river", "garden", "window", "silver", "market", "planet", "coffee",
    "yellow", "mountain", "pencil", "blanket", "harbor", "violin", "meadow",
    "lantern", "orchard", "canvas", "ribbon", "pepper", "marble",
]


def _filler(seed: int, n: int = 320) -> str:
    rng = random.Random(seed)
    return " ".join(rng.choice(WORDS) for _ in range(n))


def _post_html(seed: int, extra: str = "") -> str:
    return (
        "<html><head><title>Entry</title></head><body>"
        f"<article><h1>Entry {seed}</h1><h2>Section</h2>"
        f"<p>{extra} {_filler(seed)}</p></article>"
        "</body></html>"
    )


def _homepage_html(links: list[str], extra: str = "") -> str:
    anchors = "".join(f'<a href="{link}">{link.strip("/")}</a> ' for link in links)
    return (
        "<html><head><title>River Garden</title>"
        '<meta name="description" content="Notes from the river garden.">'
        "</head><body>"
        f"<h1>River Garden</h1><h2>Latest</h2><h3>Archive</h3>"
        f"<nav>{anchors}</nav><p>{extra} {_filler(10_000)}</p>"
        "</body></html>"
    )


def _post_paths(n: int) -> list[str]:
    return [f"/quiet-river-notes-{i}" for i in range(n)]


class FakeSite:
    """Serves canned HTML by URL; unknown URLs fail, listed ones raise."""

    def __init__(self, pages: dict[str, str], raising: set[str] = frozenset()):
        self.pages = pages
        self.raising = raising

    def __call__(self, url: str) -> PageResult:
        if url in self.raising:
            raise RuntimeError("connection reset")
        if url not in self.pages:
            return PageResult(url=url)
        return PageResult(url=url, html=self.pages[url], ok=True, status_code=200)


def _site(post_count: int, required: list[str] = REQUIRED_LINKS, overrides: dict[int, str] | None = None) -> FakeSite:
    posts = _post_paths(post_count)
    pages = {BASE: _homepage_html(required + posts)}
    for i, path in enumerate(posts):
        pages[BASE + path.lstrip("/")] = (overrides or {}).get(i) or _post_html(i)
    return FakeSite(pages)


def _config(**overrides) -> Settings:
    return replace(Settings(), **overrides)


def _fake_ai_message(content: str) -> SimpleNamespace:
    return SimpleNamespace(content=content)


def _casino_classifier() -> MagicMock:
    """Flags gambling whenever the prompt mentions a casino."""

    def invoke(messages):
        if "casino" in messages[1].content.lower():
            return _fake_ai_message(json.dumps({
                "violations": [{"type": "Gambling", "excerpt": "casino", "confidence": 0.95}],
                "summary": "Gambling promotion",
                "suggestions": ["Remove gambling promotion"],
            }))
        return _fake_ai_message('{"violations": [], "summary": "Clean", "suggestions": []}')

    client = MagicMock()
    client.invoke.side_effect = invoke
    return client


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------

class TestCompliantSite:
    def test_clean_site_without_classifier(self) -> None:
        config = _config()
        report = run_scan(BASE, ModerationAdapter(None, config), fetch=_site(25), config=config)

        assert report.url == BASE
        assert report.total_violations == 0
        assert report.required_pages.missing == []
        assert report.required_pages.found == ["about", "contact", "privacy", "terms", "disclaimer"]
        assert report.site_structure.post_count == 25
        assert report.site_structure.has_meta_tags is True
        assert report.site_structure.has_good_headers is True
        assert report.site_structure.structure_warnings == ["Low content volume"]
        assert report.homepage.quality_issues == []
        assert report.page_findings == []
        assert report.score == 90
        assert report.summary == "Site appears compliant."
        assert report.scanned_at

    def test_report_serialises(self) -> None:
        config = _config()
        data = run_scan(BASE, ModerationAdapter(None, config), fetch=_site(3), config=config).to_dict()
        json.dumps(data)
        assert set(data) == {
            "url", "total_violations", "required_pages", "site_structure", "homepage",
            "page_findings", "suggestions", "score", "summary", "scanned_at",
        }
        assert data["summary"] == "Low content (3 posts)."


class TestHomepageFailure:
    def test_unreachable_homepage_raises(self) -> None:
        config = _config()
        with pytest.raises(ScanError):
            run_scan(BASE, ModerationAdapter(None, config), fetch=FakeSite({}), config=config)


class TestViolations:
    def test_classifier_violation_and_missing_page(self) -> None:
        config = _config()
        casino = _post_html(0, extra="Visit our casino tonight and win big.")
        site = _site(5, required=REQUIRED_LINKS[:-1], overrides={0: casino})
        report = run_scan(BASE, ModerationAdapter(_casino_classifier(), config), fetch=site, config=config)

        assert report.total_violations == 1
        assert report.required_pages.missing == ["disclaimer"]
        assert [f.url for f in report.page_findings] == [BASE + "quiet-river-notes-0"]
        assert report.page_findings[0].violations[0].type.value == "Gambling"
        assert report.score == 70
        assert report.summary == "1 violations found across 1 pages."
        assert report.suggestions == ["Remove gambling promotion", "Add missing pages: disclaimer"]

    def test_rule_violation_without_classifier(self) -> None:
        config = _config()
        scammy = _post_html(1, extra="Learn to make money fast.")
        report = run_scan(
            BASE, ModerationAdapter(None, config), fetch=_site(25, overrides={1: scammy}), config=config
        )
        assert report.total_violations == 1
        assert report.page_findings[0].violations[0].type.value == "Misleading"
        assert report.score == 85


class TestDuplicatesAndFailures:
    def test_duplicate_posts_flag_exactly_one(self) -> None:
        config = _config()
        twin = _post_html(99)
        report = run_scan(
            BASE, ModerationAdapter(None, config), fetch=_site(25, overrides={3: twin, 4: twin}), config=config
        )
        assert len(report.page_findings) == 1
        assert report.page_findings[0].quality_issues == [DUPLICATE_ISSUE]
        assert report.page_findings[0].url in {BASE + "quiet-river-notes-3", BASE + "quiet-river-notes-4"}
        assert report.total_violations == 0

    def test_failing_post_is_absorbed(self) -> None:
        config = _config()
        site = _site(25)
        del site.pages[BASE + "quiet-river-notes-2"]
        site.raising = {BASE + "quiet-river-notes-5"}
        report = run_scan(BASE, ModerationAdapter(None, config), fetch=site, config=config)

        assert report.site_structure.post_count == 25
        assert report.page_findings == []
        assert report.score == 90

    def test_thin_post_reported(self) -> None:
        config = _config()
        thin = "<html><body><article><h1>Short</h1><h2>Part</h2><p>river garden</p></article></body></html>"
        report = run_scan(
            BASE, ModerationAdapter(None, config), fetch=_site(25, overrides={7: thin}), config=config
        )
        assert [f.quality_issues for f in report.page_findings] == [["Thin content: 4 words (minimum 300)"]]
        assert report.total_violations == 0


class TestHomepageSeparation:
    @pytest.mark.parametrize("self_link", ["/en-us/", "/en-us", "/en-us/#top", "https://EXAMPLE.com/en-us/"])
    def test_self_linking_homepage_is_not_a_post(self, self_link: str) -> None:
        config = _config()
        home = "https://example.com/en-us/"
        posts = _post_paths(25)
        pages = {home: _homepage_html([self_link] + REQUIRED_LINKS + posts, extra="Learn to make money fast.")}
        for i, path in enumerate(posts):
            pages[BASE + path.lstrip("/")] = _post_html(i)

        report = run_scan(home, ModerationAdapter(None, config), fetch=FakeSite(pages), config=config)

        assert report.site_structure.post_count == 25
        assert report.page_findings == []
        assert report.total_violations == 1
        assert report.homepage.violations[0].type.value == "Misleading"
        assert report.score == 85
