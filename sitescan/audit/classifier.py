"""URL classifier: separates content posts from structural pages.

The decision is made from the URL alone, so it can run before any extra
network I/O.  Rules are evaluated in a fixed order and each one returns a
:class:`Verdict`; the first verdict other than ``FALLTHROUGH`` decides.

Order
-----
1. ``fragment``: a ``#`` in the URL rejects it.
2. ``tool-keyword``: download/crack/tool paths are accepted outright.
3. ``structural``: listing, taxonomy, feed, account and admin paths are
   rejected.
4. ``content-slug``: a descriptive final path segment is accepted.

Rule 2 must run before rule 3: tool pages are often category- or
pagination-shaped and would otherwise be filtered out.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List, Tuple
from urllib.parse import urlsplit

from sitescan.scraper.links import strip_fragment


class Verdict(str, Enum):
    OVERRIDE = "override"
    REJECT = "reject"
    ACCEPT = "accept"
    FALLTHROUGH = "fallthrough"


@dataclass(frozen=True)
class Classification:
    verdict: Verdict
    rule: str

    @property
    def is_post(self) -> bool:
        return self.verdict in (Verdict.OVERRIDE, Verdict.ACCEPT)


TOOL_KEYWORDS = (
    "download",
    "crack",
    "keygen",
    "serial-key",
    "license-key",
    "activation-key",
    "product-key",
    "activator",
    "patch",
    "torrent",
    "apk",
    "nulled",
    "warez",
    "full-version",
    "portable",
    "software",
    "tool",
)

STRUCTURAL_SEGMENTS = frozenset({
    "category", "categories", "tag", "tags", "topics", "author", "authors",
    "page", "feed", "rss", "atom", "search", "archive", "archives", "date",
    "wp-admin", "wp-json", "wp-content", "wp-includes", "wp-login.php",
    "xmlrpc.php", "admin", "dashboard", "login", "logout", "signin",
    "sign-in", "signup", "sign-up", "register", "account", "my-account",
    "profile", "password", "lost-password", "reset-password", "cart",
    "checkout", "basket", "comments", "trackback", "amp", "embed",
    "attachment", "cdn-cgi", "sitemap", "sitemap.xml", "about", "about-us",
    "contact", "contact-us", "privacy", "privacy-policy", "terms",
    "terms-of-service", "terms-and-conditions", "disclaimer", "cookie-policy",
})

_PAGINATION = re.compile(r"/page/\d+(/|$)")
_TRAILING_FEED = re.compile(r"/feed/?$")

RESERVED_SLUGS = frozenset({"page", "category", "tag"})
MIN_SLUG_LENGTH = 4


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

def _fragment_rule(url: str, path: str) -> Verdict:
    return Verdict.REJECT if "#" in url else Verdict.FALLTHROUGH


def _tool_keyword_rule(url: str, path: str) -> Verdict:
    if any(keyword in path for keyword in TOOL_KEYWORDS):
        return Verdict.OVERRIDE
    return Verdict.FALLTHROUGH


def _structural_rule(url: str, path: str) -> Verdict:
    if _PAGINATION.search(path) or _TRAILING_FEED.search(path):
        return Verdict.REJECT
    segments = [s for s in path.split("/") if s]
    if any(segment in STRUCTURAL_SEGMENTS for segment in segments):
        return Verdict.REJECT
    return Verdict.FALLTHROUGH


def _content_slug_rule(url: str, path: str) -> Verdict:
    segments = [s for s in path.split("/") if s]
    if not segments:
        return Verdict.FALLTHROUGH
    slug = segments[-1]
    if len(slug) > MIN_SLUG_LENGTH and not slug.isdigit() and slug not in RESERVED_SLUGS:
        return Verdict.ACCEPT
    return Verdict.FALLTHROUGH


DECISION_LIST: Tuple[Tuple[str, Callable[[str, str], Verdict]], ...] = (
    ("fragment", _fragment_rule),
    ("tool-keyword", _tool_keyword_rule),
    ("structural", _structural_rule),
    ("content-slug", _content_slug_rule),
)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def classify_url(url: str) -> Classification:
    """Run *url* through :data:`DECISION_LIST` and return the deciding verdict.

    URLs that cannot be parsed are rejected under the ``malformed`` rule;
    URLs no rule decides on are rejected under ``default``.
    """
    try:
        path = urlsplit(url.strip().lower()).path
    except ValueError:
        return Classification(Verdict.REJECT, "malformed")

    for name, rule in DECISION_LIST:
        verdict = rule(url, path)
        if verdict is not Verdict.FALLTHROUGH:
            return Classification(verdict, name)
    return Classification(Verdict.REJECT, "default")


def is_content_post(url: str) -> bool:
    """Return ``True`` if *url* looks like a content post worth analysing."""
    return classify_url(url).is_post


def classify_posts(urls: Iterable[str]) -> List[str]:
    """Filter *urls* down to content posts, deduplicated by fragment-free URL.

    Input order is preserved.
    """
    seen: set[str] = set()
    posts: List[str] = []
    for url in urls:
        if not is_content_post(url):
            continue
        canonical = strip_fragment(url)
        if canonical not in seen:
            seen.add(canonical)
            posts.append(canonical)
    return posts
