"""Tests for same-host link extraction."""

from __future__ import annotations

from sitescan.scraper.links import extract_links, strip_fragment

_HTML = """\
<html><body>
  <a href="post-a">Relative</a>
  <a href="/about">About</a>
  <a href="https://example.com/post-b">Absolute</a>
  <a href="https://other.com/elsewhere">Other host</a>
  <a href="mailto:owner@example.com">Mail</a>
  <a href="tel:+100000">Phone</a>
  <a href="javascript:void(0)">Script</a>
  <a href="#top">Fragment only</a>
  <a href="/img/logo.PNG">Asset</a>
  <a href="/files/brochure.pdf">Asset</a>
  <a href="/post-b?replytocom=12">Reply spam</a>
  <a href="/post-c#comments">With fragment</a>
  <a href="/post-c">Duplicate</a>
  <a href="http://[::1">Malformed</a>
  <a href="HTTPS://EXAMPLE.COM/Case-Post">Upper-case host</a>
  <a href="ftp://example.com/pub">FTP</a>
  <a>No href</a>
</body></html>
"""


class TestExtractLinks:
    def test_returns_same_host_links_in_document_order(self) -> None:
        links = extract_links(_HTML, "https://example.com/blog/")
        assert links == [
            "https://example.com/blog/post-a",
            "https://example.com/about",
            "https://example.com/post-b",
            "https://example.com/post-c",
            "https://example.com/Case-Post",
        ]

    def test_excludes_other_hosts(self) -> None:
        links = extract_links(_HTML, "https://example.com/")
        assert not any("other.com" in link for link in links)

    def test_excludes_assets_and_reply_spam(self) -> None:
        links = extract_links(_HTML, "https://example.com/")
        assert not any(link.lower().endswith((".png", ".pdf")) for link in links)
        assert not any("replytocom" in link for link in links)

    def test_links_are_fragment_free_and_unique(self) -> None:
        links = extract_links(_HTML, "https://example.com/")
        assert all("#" not in link for link in links)
        assert len(links) == len(set(links))

    def test_share_variants_skipped(self) -> None:
        html = '<a href="/post-d?share=facebook">Share</a><a href="/post-d?page=2">Keep</a>'
        assert extract_links(html, "https://example.com/") == ["https://example.com/post-d?page=2"]

    def test_empty_html_returns_empty(self) -> None:
        assert extract_links("", "https://example.com/") == []

    def test_no_links_returns_empty(self) -> None:
        assert extract_links("<html><body>no links</body></html>", "https://example.com/") == []


class TestStripFragment:
    def test_removes_fragment(self) -> None:
        assert strip_fragment("https://example.com/a?x=1#frag") == "https://example.com/a?x=1"

    def test_leaves_plain_url_untouched(self) -> None:
        assert strip_fragment("https://example.com/a") == "https://example.com/a"
