"""Same-host link discovery for the crawler."""

from __future__ import annotations

import re
from typing import List
from urllib.parse import urljoin, urlsplit, urlunsplit

from bs4 import BeautifulSoup

_ASSET_EXTENSIONS = re.compile(
    r"\.(jpe?g|png|gif|svg|webp|ico|pdf|zip|rar|mp4|mp3|css|js|woff2?|ttf|xml)$",
    re.IGNORECASE,
)

# Reply-spam and share-button variants of a page already in the link set.
_NOISE_QUERY = re.compile(r"(^|&)(replytocom|share)=", re.IGNORECASE)

_SKIPPED_SCHEMES = ("mailto:", "tel:", "javascript:")


def strip_fragment(url: str) -> str:
    """Return *url* without its ``#fragment`` part."""
    parts = urlsplit(url)
    return urlunsplit(parts._replace(fragment=""))


def _host(url: str) -> str:
    return (urlsplit(url).hostname or "").lower()


def extract_links(html: str, origin_url: str) -> List[str]:
    """Return the deduplicated same-host links found in *html*.

    Relative hrefs are resolved against *origin_url*.  Fragment-only, mail,
    telephone and script links are skipped, as are links to other hosts,
    static assets and reply/share query variants.  Fragments are stripped
    from every returned URL.  Hrefs that cannot be parsed are dropped.

    Document order is preserved so callers can take a stable prefix.
    """
    base_host = _host(origin_url)
    if not base_host or not html:
        return []

    soup = BeautifulSoup(html, "html.parser")
    seen: set[str] = set()
    links: List[str] = []

    for anchor in soup.find_all("a", href=True):
        href = (anchor.get("href") or "").strip()
        if not href or href.startswith("#") or href.lower().startswith(_SKIPPED_SCHEMES):
            continue
        try:
            parts = urlsplit(urljoin(origin_url, href))
            if parts.scheme not in ("http", "https"):
                continue
            if (parts.hostname or "").lower() != base_host:
                continue
        except ValueError:
            continue

        if _ASSET_EXTENSIONS.search(parts.path) or _NOISE_QUERY.search(parts.query):
            continue

        full = urlunsplit(parts._replace(netloc=parts.netloc.lower(), fragment=""))
        if full not in seen:
            seen.add(full)
            links.append(full)

    return links
