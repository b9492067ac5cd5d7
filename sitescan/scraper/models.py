"""Data models for the scraper layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class PageResult:
    """The outcome of a single URL fetch.

    ``ok`` is ``False`` whenever no usable page arrived (network error,
    timeout, TLS failure, non-2xx status); ``html`` is then empty.
    """

    url: str
    html: str = ""
    ok: bool = False
    status_code: int = 0


@dataclass
class ParsedPage:
    """Queryable view of a fetched page.

    ``soup`` is the full document tree (scripts included, so ad markup stays
    inspectable).  The text fields are visible text only, with whitespace
    collapsed.
    """

    url: str
    soup: Any
    title: str = ""
    h1: str = ""
    meta_description: str = ""
    body_text: str = ""
    content_text: str = ""
    has_meta_description: bool = False
    has_content_container: bool = False
    headings: dict[str, int] = field(default_factory=dict)
