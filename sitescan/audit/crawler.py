"""Bounded two-phase crawl starting from a site's homepage.

Phase 1 fetches the homepage and seeds the frontier with its links; a failed
homepage fetch aborts the scan with :class:`ScanError`.  Phase 2 fetches a
fixed prefix of the seed links **in parallel** and merges whatever they link
to, until the frontier outgrows the page budget.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Callable, Iterable, List

from sitescan.config import Settings, settings
from sitescan.scraper.fetcher import fetch_page
from sitescan.scraper.links import extract_links
from sitescan.scraper.models import PageResult

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], PageResult]


class ScanError(RuntimeError):
    """Raised when a scan cannot proceed at all (homepage unreachable)."""


class CrawlFrontier:
    """Insertion-ordered set of discovered URLs shared by crawl workers.

    Every read and write goes through one lock.  Once the frontier holds more
    than ``max_pages`` URLs it stops accepting new ones.
    """

    def __init__(self, max_pages: int, seeds: Iterable[str] = ()) -> None:
        self.max_pages = max_pages
        self._urls: dict[str, None] = dict.fromkeys(seeds)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._urls)

    def is_full(self) -> bool:
        with self._lock:
            return len(self._urls) > self.max_pages

    def merge(self, links: Iterable[str]) -> int:
        """Add *links* until the budget is exceeded; return how many were new."""
        added = 0
        with self._lock:
            for link in links:
                if len(self._urls) > self.max_pages:
                    break
                if link not in self._urls:
                    self._urls[link] = None
                    added += 1
        return added

    def snapshot(self) -> List[str]:
        with self._lock:
            return list(self._urls)


@dataclass
class CrawlResult:
    homepage: PageResult
    homepage_links: List[str] = field(default_factory=list)
    urls: List[str] = field(default_factory=list)


def _expand(link: str, frontier: CrawlFrontier, fetch: Fetcher) -> int:
    if frontier.is_full():
        return 0
    page = fetch(link)
    if not page.ok:
        return 0
    return frontier.merge(extract_links(page.html, page.url))


def crawl_site(
    homepage_url: str,
    fetch: Fetcher = fetch_page,
    config: Settings = settings,
) -> CrawlResult:
    """Crawl from *homepage_url* and return the discovered frontier.

    Args:
        homepage_url: Absolute URL the scan starts from.
        fetch: Page fetcher; defaults to :func:`fetch_page`.
        config: Settings supplying ``max_pages`` and ``seed_expansion_limit``.

    Raises:
        ScanError: If the homepage cannot be fetched or comes back empty.
    """
    homepage = fetch(homepage_url)
    if not homepage.ok or not homepage.html.strip():
        raise ScanError(f"Failed to fetch homepage: {homepage_url}")

    seeds = extract_links(homepage.html, homepage_url)
    frontier = CrawlFrontier(config.max_pages, seeds)
    logger.info("[CRAWL] %d link(s) on homepage %s", len(seeds), homepage_url)

    batch = seeds[: config.seed_expansion_limit]
    if batch:
        with ThreadPoolExecutor(max_workers=len(batch)) as pool:
            future_to_url = {
                pool.submit(_expand, link, frontier, fetch): link for link in batch
            }
            for future in as_completed(future_to_url):
                link = future_to_url[future]
                try:
                    added = future.result()
                    logger.debug("[CRAWL] %s added %d link(s)", link, added)
                except Exception as exc:
                    logger.warning("[CRAWL] Expansion failed for %r: %s", link, exc)

    urls = frontier.snapshot()
    logger.info("[CRAWL] Frontier holds %d URL(s)", len(urls))
    return CrawlResult(homepage=homepage, homepage_links=seeds, urls=urls)
