"""Deterministic violation checks run on every analysed page.

These rules only flag unambiguous breaches and cost nothing to evaluate.
They run alongside the moderation classifier, not instead of it, and their
results are simply added to whatever the classifier reports.
"""

from __future__ import annotations

import re

from sitescan.audit.models import Violation, ViolationType
from sitescan.config import Settings, settings
from sitescan.scraper.models import ParsedPage

MISLEADING_PHRASES = (
    "100% working crack",
    "cracked version",
    "crack download",
    "free download full version",
    "keygen download",
    "serial key generator",
    "license key free",
    "activation key free",
    "nulled script",
    "watch free movies online",
    "guaranteed to win",
    "claim your prize",
    "you have won",
    "get rich quick",
    "make money fast",
    "miracle cure",
)

PIRACY_KEYWORDS = ("torrent", "crack", "warez", "pirate", "nulled", "free download", "magnet:")
MEDIA_KEYWORDS = (
    "movie", "film", "episode", "season", "series", "album", "mp3",
    "song", "game", "software", "ebook", "1080p", "720p", "bluray", "full hd",
)

AFFILIATE_PATTERNS = re.compile(
    r"(amzn\.to|amazon\.[a-z.]+/.*[?&]tag=|[?&](ref|aff|affiliate|aff_id|affid)=|"
    r"/go/|/recommends/|clickbank|shareasale|awin1\.com|impact\.com|"
    r"click\.linksynergy|partnerize|jdoqocy|tkqlhce|anrdoezrs)",
    re.IGNORECASE,
)
DISCLOSURE_WORDS = re.compile(
    r"\b(affiliate|disclosure|sponsored|commission|paid partnership|advertisement)\b",
    re.IGNORECASE,
)

AD_SELECTOR = (
    "ins.adsbygoogle, [data-ad-slot], [data-ad-client], "
    "iframe[src*='doubleclick'], iframe[src*='googlesyndication'], "
    "iframe[src*='adservice'], div.ad-slot, div.ad-unit, div.advertisement"
)

_CONFIDENCE = {
    ViolationType.MISLEADING: 0.95,
    ViolationType.COPYRIGHT: 0.9,
    ViolationType.AFFILIATE_DISCLOSURE: 0.85,
    ViolationType.EXCESSIVE_ADS: 0.9,
}

_SUGGESTIONS = {
    ViolationType.MISLEADING: "Remove misleading download or money-making claims",
    ViolationType.COPYRIGHT: "Remove links to pirated or copyrighted downloads",
    ViolationType.AFFILIATE_DISCLOSURE: "Add a clear affiliate or sponsorship disclosure",
    ViolationType.EXCESSIVE_ADS: "Reduce the number of ad units per page",
}


def _excerpt(text: str, needle: str, width: int = 60) -> str:
    index = text.lower().find(needle)
    if index < 0:
        return needle
    start = max(0, index - width)
    return text[start:index + len(needle) + width].strip()


def _phrase_violations(page: ParsedPage) -> list[Violation]:
    lower = page.body_text.lower()
    return [
        Violation(ViolationType.MISLEADING, _excerpt(page.body_text, phrase), _CONFIDENCE[ViolationType.MISLEADING])
        for phrase in MISLEADING_PHRASES
        if phrase in lower
    ]


def _copyright_violations(page: ParsedPage) -> list[Violation]:
    found: list[Violation] = []
    for anchor in page.soup.find_all("a", href=True):
        label = anchor.get_text(" ", strip=True)
        haystack = f"{anchor.get('href', '')} {label}".lower()
        if any(k in haystack for k in PIRACY_KEYWORDS) and any(k in haystack for k in MEDIA_KEYWORDS):
            found.append(
                Violation(
                    ViolationType.COPYRIGHT,
                    (label or anchor["href"])[:160],
                    _CONFIDENCE[ViolationType.COPYRIGHT],
                )
            )
    return found


def _affiliate_violation(page: ParsedPage) -> list[Violation]:
    monetised = [
        a for a in page.soup.find_all("a", href=True)
        if AFFILIATE_PATTERNS.search(a["href"]) or "sponsored" in (a.get("rel") or [])
    ]
    if not monetised or DISCLOSURE_WORDS.search(page.body_text):
        return []
    excerpt = f"{len(monetised)} monetised link(s) without disclosure, e.g. {monetised[0]['href']}"
    return [
        Violation(ViolationType.AFFILIATE_DISCLOSURE, excerpt[:200], _CONFIDENCE[ViolationType.AFFILIATE_DISCLOSURE])
    ]


def count_ad_units(page: ParsedPage) -> int:
    """Return the number of distinct ad-serving elements on *page*."""
    return len({id(el) for el in page.soup.select(AD_SELECTOR)})


def _ads_violation(page: ParsedPage, limit: int) -> list[Violation]:
    count = count_ad_units(page)
    if count <= limit:
        return []
    return [
        Violation(
            ViolationType.EXCESSIVE_ADS,
            f"{count} ad units on page (limit {limit})",
            _CONFIDENCE[ViolationType.EXCESSIVE_ADS],
        )
    ]


def detect_violations(page: ParsedPage, config: Settings = settings) -> list[Violation]:
    """Return every rule-based violation found on *page*, in rule order."""
    return (
        _phrase_violations(page)
        + _copyright_violations(page)
        + _affiliate_violation(page)
        + _ads_violation(page, config.max_ad_units)
    )


def suggestions_for(violations: list[Violation]) -> list[str]:
    """One remediation hint per distinct rule-based violation type."""
    hints: list[str] = []
    for violation in violations:
        hint = _SUGGESTIONS.get(violation.type)
        if hint and hint not in hints:
            hints.append(hint)
    return hints
