"""HTTP fetcher used by the crawler and the per-page analysis.

``fetch_page`` never raises for ordinary network or HTTP problems: every
failure is reported as a :class:`PageResult` with ``ok=False`` so callers can
treat a missing page as "no links, no findings" rather than an error.
"""

from __future__ import annotations

import logging

import httpx

from sitescan.config import settings
from sitescan.scraper.models import PageResult

logger = logging.getLogger(__name__)

_DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/122.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


def fetch_page(url: str, timeout: float | None = None) -> PageResult:
    """Fetch *url* and return a :class:`PageResult`.

    Applies ``settings.fetch_timeout`` unless *timeout* is given, follows at
    most ``settings.max_redirects`` redirects and does not retry.

    Returns:
        ``PageResult(ok=True)`` carrying the decoded body for a 2xx response,
        otherwise ``PageResult(ok=False)`` with whatever status code was seen.
    """
    try:
        with httpx.Client(
            headers=_DEFAULT_HEADERS,
            timeout=timeout if timeout is not None else settings.fetch_timeout,
            follow_redirects=True,
            max_redirects=settings.max_redirects,
            verify=settings.verify_tls,
        ) as client:
            response = client.get(url)
            response.raise_for_status()
            return PageResult(
                url=url, html=response.text, ok=True, status_code=response.status_code
            )
    except httpx.HTTPStatusError as exc:
        logger.warning("[FETCH] %s returned HTTP %s", url, exc.response.status_code)
        return PageResult(url=url, status_code=exc.response.status_code)
    except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
        logger.warning("[FETCH] Failed to fetch %s: %s", url, exc)
        return PageResult(url=url)
