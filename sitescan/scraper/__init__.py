"""Scraper package — page fetch, parsing and link extraction."""

from sitescan.scraper.extractor import build_context, parse_page
from sitescan.scraper.fetcher import fetch_page
from sitescan.scraper.links import extract_links, strip_fragment
from sitescan.scraper.models import PageResult, ParsedPage

__all__ = [
    "fetch_page",
    "parse_page",
    "build_context",
    "extract_links",
    "strip_fragment",
    "PageResult",
    "ParsedPage",
]
