"""Compliance score, suggestion list and summary line for a scan.

The score starts at 100 and every signal subtracts a fixed number of points
(weights live in :class:`~sitescan.config.Settings`).  Deductions are a
plain sum, so their order never matters; the result is clamped to
``[0, 100]`` and rounded.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from sitescan.audit.models import PageFinding
from sitescan.config import Settings, settings


@dataclass(frozen=True)
class ScoreSignals:
    violations: int
    missing_pages: int
    homepage_issues: int
    post_count: int
    has_meta_tags: bool
    has_good_headers: bool


def post_volume_penalty(post_count: int, config: Settings = settings) -> int:
    """Tiered deduction for sites with few content posts."""
    if post_count < config.low_post_threshold:
        return config.low_post_penalty
    if post_count < config.target_post_threshold:
        return config.target_post_penalty
    return 0


def compute_score(signals: ScoreSignals, config: Settings = settings) -> int:
    deductions = (
        signals.violations * config.violation_penalty
        + signals.missing_pages * config.missing_page_penalty
        + signals.homepage_issues * config.homepage_issue_penalty
        + post_volume_penalty(signals.post_count, config)
        + (0 if signals.has_meta_tags else config.missing_meta_penalty)
        + (0 if signals.has_good_headers else config.weak_headers_penalty)
    )
    return int(round(max(0, min(100, 100 - deductions))))


def check_required_pages(links: Iterable[str], required: Iterable[str]) -> Tuple[List[str], List[str]]:
    """Split *required* page names into those some link mentions and the rest."""
    lowered = [link.lower() for link in links]
    found: List[str] = []
    missing: List[str] = []
    for page in required:
        if any(page in link for link in lowered):
            found.append(page)
        else:
            missing.append(page)
    return found, missing


def structure_warnings(
    has_meta_tags: bool, has_good_headers: bool, post_count: int, config: Settings = settings
) -> List[str]:
    warnings: List[str] = []
    if not has_meta_tags:
        warnings.append("Missing meta description")
    if not has_good_headers:
        warnings.append("Weak header structure")
    if post_count < config.target_post_threshold:
        warnings.append("Low content volume")
    return warnings


def build_suggestions(
    homepage: PageFinding,
    findings: Iterable[PageFinding],
    missing_pages: List[str],
    cap: int | None = None,
) -> List[str]:
    """Concatenate homepage and page suggestions, then cap the list.

    No deduplication is done; the missing-pages hint comes last.
    """
    limit = settings.max_suggestions if cap is None else cap
    suggestions = list(homepage.suggestions)
    for finding in findings:
        suggestions.extend(finding.suggestions)
    if missing_pages:
        suggestions.append(f"Add missing pages: {', '.join(missing_pages)}")
    return suggestions[:limit]


def build_summary(
    total_violations: int,
    pages_with_violations: int,
    post_count: int,
    config: Settings = settings,
) -> str:
    """One-line verdict: violations, then low content, then compliant."""
    if total_violations > 0:
        return f"{total_violations} violations found across {pages_with_violations} pages."
    if post_count < config.low_post_threshold:
        return f"Low content ({post_count} posts)."
    return "Site appears compliant."
