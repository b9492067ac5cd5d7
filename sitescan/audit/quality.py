"""Content-quality checks for a single parsed page."""

from __future__ import annotations

from sitescan.audit.models import QualityReport
from sitescan.config import settings
from sitescan.scraper.models import ParsedPage


def analyze_quality(page: ParsedPage, min_words: int | None = None) -> QualityReport:
    """Score the textual substance and heading structure of *page*.

    Words are counted over the main content region (``content_text`` already
    falls back to the whole body when the page has no content container).
    A proper hierarchy needs at least one ``h1`` plus at least one ``h2`` or
    ``h3``.  Problems are appended to ``issues`` in a fixed order.
    """
    threshold = settings.min_word_count if min_words is None else min_words
    word_count = len(page.content_text.split())
    issues: list[str] = []

    if word_count < threshold:
        issues.append(f"Thin content: {word_count} words (minimum {threshold})")

    h1 = page.headings.get("h1", 0)
    sub = page.headings.get("h2", 0) + page.headings.get("h3", 0)
    if h1 == 0:
        issues.append("Missing H1 heading")
    elif sub == 0:
        issues.append("No H2/H3 subheadings")

    return QualityReport(
        word_count=word_count,
        has_proper_heading_hierarchy=h1 > 0 and sub > 0,
        issues=issues,
    )
