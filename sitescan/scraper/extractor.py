"""Content extraction: turns a fetched :class:`PageResult` into a :class:`ParsedPage`."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup
from bs4.element import Comment

from sitescan.scraper.models import PageResult, ParsedPage

# Containers that usually hold the article body on blog/CMS themes.
CONTENT_SELECTOR = "main, article, .post-content, .entry-content, .content"

_INVISIBLE_TAGS = {"script", "style", "noscript", "template", "head", "title"}


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _collapse(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def _visible_text(node) -> str:
    """Join the visible text under *node*, skipping scripts, styles and comments."""
    if node is None:
        return ""
    parts = [
        str(s)
        for s in node.find_all(string=True)
        if not isinstance(s, Comment) and s.parent is not None and s.parent.name not in _INVISIBLE_TAGS
    ]
    return _collapse(" ".join(parts))


def _content_containers(soup: BeautifulSoup) -> list:
    """Return the outermost elements matching :data:`CONTENT_SELECTOR`.

    Nested matches (an ``article`` inside ``main``) are dropped so their text
    is not counted twice.
    """
    matches = soup.select(CONTENT_SELECTOR)
    ids = {id(m) for m in matches}
    return [m for m in matches if not any(id(p) in ids for p in m.parents)]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_page(page: PageResult) -> ParsedPage:
    """Parse *page* into a :class:`ParsedPage`.

    ``content_text`` is the text of the main content containers, falling back
    to the whole body when the page has none of them.
    """
    soup = BeautifulSoup(page.html or "", "html.parser")

    title = _collapse(soup.title.get_text()) if soup.title else ""
    first_h1 = soup.find("h1")
    h1 = _collapse(first_h1.get_text()) if first_h1 else ""

    meta_description = ""
    meta_tag = soup.find("meta", attrs={"name": re.compile(r"^description$", re.I)})
    if meta_tag and meta_tag.get("content"):
        meta_description = (meta_tag["content"] or "").strip()

    body_text = _visible_text(soup.body or soup)
    containers = _content_containers(soup)
    if containers:
        content_text = _collapse(" ".join(_visible_text(c) for c in containers))
    else:
        content_text = body_text

    headings = {level: len(soup.find_all(level)) for level in ("h1", "h2", "h3")}

    return ParsedPage(
        url=page.url,
        soup=soup,
        title=title,
        h1=h1,
        meta_description=meta_description,
        body_text=body_text,
        content_text=content_text,
        has_meta_description=meta_tag is not None,
        has_content_container=bool(containers),
        headings=headings,
    )


def build_context(page: ParsedPage, text: str, limit: int) -> str:
    """Return the labelled context block sent to the moderation classifier."""
    context = (
        f"TITLE: {page.title}\n"
        f"H1: {page.h1}\n"
        f"META: {page.meta_description}\n"
        f"CONTENT: {text}\n"
    )
    return context[:limit]
