"""Audit pipeline package: crawl, classify, analyse and score a site.

Public re-exports so callers can write::

    from sitescan.audit import run_scan, ModerationAdapter
"""

from sitescan.audit.classifier import classify_url, is_content_post
from sitescan.audit.crawler import ScanError, crawl_site
from sitescan.audit.moderation import ModerationAdapter, build_moderation_client
from sitescan.audit.scanner import run_scan

__all__ = [
    "run_scan",
    "crawl_site",
    "classify_url",
    "is_content_post",
    "ModerationAdapter",
    "build_moderation_client",
    "ScanError",
]
