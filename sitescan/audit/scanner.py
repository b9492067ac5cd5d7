"""High-level runner for one compliance scan.

``run_scan`` is the single public function in this module.  It crawls the
site, classifies the frontier, analyses the homepage and every content post,
and folds the results into a :class:`ScanReport`.

Posts are analysed in fixed-size batches on a ``ThreadPoolExecutor``; each
batch finishes before the next starts.  Within a batch, completion order is
arbitrary, and the only state the workers share is the duplicate-content
ledger, which serialises its own access.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime, timezone
from typing import Iterable, List
from urllib.parse import urlsplit, urlunsplit

from sitescan.audit.classifier import classify_posts
from sitescan.audit.crawler import Fetcher, crawl_site
from sitescan.audit.duplicates import ContentLedger
from sitescan.audit.models import (
    PageFinding,
    RequiredPages,
    ScanReport,
    SiteStructure,
)
from sitescan.audit.moderation import ModerationAdapter
from sitescan.audit.quality import analyze_quality
from sitescan.audit.rules import detect_violations, suggestions_for
from sitescan.audit.scoring import (
    ScoreSignals,
    build_suggestions,
    build_summary,
    check_required_pages,
    compute_score,
    structure_warnings,
)
from sitescan.config import Settings, settings
from sitescan.scraper.extractor import build_context, parse_page
from sitescan.scraper.fetcher import fetch_page
from sitescan.scraper.links import strip_fragment
from sitescan.scraper.models import ParsedPage

logger = logging.getLogger(__name__)

DUPLICATE_ISSUE = "Duplicate content detected"


def _page_key(url: str) -> str:
    """Host-insensitive, fragment-free URL with no trailing slash."""
    parts = urlsplit(strip_fragment(url))
    return urlunsplit(parts._replace(netloc=parts.netloc.lower(), path=parts.path.rstrip("/")))


def _without_homepage(posts: Iterable[str], *homepage_urls: str) -> List[str]:
    home = {_page_key(u) for u in homepage_urls}
    return [p for p in posts if _page_key(p) not in home]


def _finding_summary(moderation_summary: str, rule_count: int) -> str:
    if rule_count and moderation_summary:
        return f"{moderation_summary} ({rule_count} rule-based issue(s))"
    if rule_count:
        return f"{rule_count} rule-based issue(s) detected"
    return moderation_summary


def _analyze_homepage(
    page: ParsedPage, moderation: ModerationAdapter, config: Settings
) -> PageFinding:
    quality = analyze_quality(page, config.min_word_count)
    rule_violations = detect_violations(page, config)
    verdict = moderation.moderate(
        build_context(page, page.body_text, config.max_context_chars),
        url=page.url,
        context="homepage",
    )
    return PageFinding(
        url=page.url,
        violations=verdict.violations + rule_violations,
        summary=_finding_summary(verdict.summary, len(rule_violations)),
        suggestions=verdict.suggestions + suggestions_for(rule_violations),
        quality_issues=list(quality.issues),
    )


def analyze_post(
    url: str,
    moderation: ModerationAdapter,
    ledger: ContentLedger,
    fetch: Fetcher = fetch_page,
    config: Settings = settings,
) -> PageFinding | None:
    """Analyse one content post; return ``None`` when there is nothing to report.

    A failed fetch yields ``None``.  The classifier is only consulted when the
    page context reaches ``config.min_context_chars``.
    """
    fetched = fetch(url)
    if not fetched.ok:
        return None

    page = parse_page(fetched)
    quality = analyze_quality(page, config.min_word_count)
    issues = list(quality.issues)
    if ledger.check_and_add(page.content_text):
        issues.append(DUPLICATE_ISSUE)

    rule_violations = detect_violations(page, config)

    context = build_context(page, page.content_text, config.max_context_chars)
    verdict_summary = ""
    violations = list(rule_violations)
    suggestions = suggestions_for(rule_violations)
    if len(context) >= config.min_context_chars:
        verdict = moderation.moderate(context, url=url, context="post")
        violations = verdict.violations + violations
        suggestions = verdict.suggestions + suggestions
        verdict_summary = verdict.summary

    finding = PageFinding(
        url=url,
        violations=violations,
        summary=_finding_summary(verdict_summary, len(rule_violations)),
        suggestions=suggestions,
        quality_issues=issues,
    )
    return finding if finding.has_signals else None


def analyze_posts(
    posts: List[str],
    moderation: ModerationAdapter,
    fetch: Fetcher = fetch_page,
    config: Settings = settings,
) -> List[PageFinding]:
    """Analyse *posts* in batches of ``config.analysis_concurrency``."""
    ledger = ContentLedger(
        config.duplicate_threshold, config.duplicate_min_length, config.duplicate_length_ratio
    )
    findings: List[PageFinding] = []
    size = max(1, config.analysis_concurrency)

    with ThreadPoolExecutor(max_workers=size) as pool:
        for start in range(0, len(posts), size):
            batch = posts[start:start + size]
            future_to_url = {
                pool.submit(analyze_post, url, moderation, ledger, fetch, config): url
                for url in batch
            }
            for future in as_completed(future_to_url):
                url = future_to_url[future]
                try:
                    finding = future.result()
                except Exception as exc:
                    logger.warning("[ANALYZE] ✗ Failed %r: %s", url, exc)
                    continue
                if finding is not None:
                    findings.append(finding)
            logger.info(
                "[ANALYZE] %d/%d post(s) analysed", min(start + size, len(posts)), len(posts)
            )

    return findings


def run_scan(
    url: str,
    moderation: ModerationAdapter,
    fetch: Fetcher = fetch_page,
    config: Settings = settings,
) -> ScanReport:
    """Run a full compliance scan of the site at *url*.

    Args:
        url: Absolute homepage URL.
        moderation: Adapter wrapping the (possibly unconfigured) classifier.
        fetch: Page fetcher, injectable for tests.
        config: Threshold and weight settings.

    Raises:
        ScanError: If the homepage cannot be fetched.  Nothing else escapes.
    """
    logger.info("[SCAN] Starting scan for %s", url)
    crawl = crawl_site(url, fetch=fetch, config=config)

    found, missing = check_required_pages(crawl.homepage_links, config.required_pages)
    posts = _without_homepage(classify_posts(crawl.urls), url, crawl.homepage.url)
    logger.info("[SCAN] %d post-like URL(s) among %d discovered", len(posts), len(crawl.urls))

    home = parse_page(crawl.homepage)
    homepage = _analyze_homepage(home, moderation, config)
    has_meta_tags = home.has_meta_description
    has_good_headers = sum(home.headings.values()) > 2

    findings = analyze_posts(posts, moderation, fetch=fetch, config=config)

    total_violations = len(homepage.violations) + sum(len(f.violations) for f in findings)
    pages_with_violations = sum(1 for f in [homepage, *findings] if f.violations)

    score = compute_score(
        ScoreSignals(
            violations=total_violations,
            missing_pages=len(missing),
            homepage_issues=len(homepage.quality_issues),
            post_count=len(posts),
            has_meta_tags=has_meta_tags,
            has_good_headers=has_good_headers,
        ),
        config,
    )

    report = ScanReport(
        url=url,
        total_violations=total_violations,
        required_pages=RequiredPages(found=found, missing=missing),
        site_structure=SiteStructure(
            post_count=len(posts),
            has_meta_tags=has_meta_tags,
            has_good_headers=has_good_headers,
            structure_warnings=structure_warnings(
                has_meta_tags, has_good_headers, len(posts), config
            ),
        ),
        homepage=homepage,
        page_findings=findings,
        suggestions=build_suggestions(homepage, findings, missing, config.max_suggestions),
        score=score,
        summary=build_summary(total_violations, pages_with_violations, len(posts), config),
        scanned_at=datetime.now(timezone.utc).isoformat(),
    )
    logger.info(
        "[SCAN] Complete for %s: %d posts, %d issues, score %d/100",
        url, len(posts), total_violations, score,
    )
    return report
