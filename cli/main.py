"""sitescan CLI — entry-point for running compliance scans locally.

Usage:
    python cli/main.py --help

Commands:
    scan      → crawl a site and print its compliance report
    classify  → show how the URL classifier treats one or more URLs
    links     → fetch one page and list the same-host links it contains
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from sitescan.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import json
import logging
from typing import List

import typer

from sitescan.audit.classifier import classify_url
from sitescan.audit.crawler import ScanError
from sitescan.config import settings

app = typer.Typer(
    name="sitescan",
    help="Ad-policy compliance scanner CLI.",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log crawl and analysis progress."),
) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


# ---------------------------------------------------------------------------
# Scan
# ---------------------------------------------------------------------------
@app.command("scan")
def scan(
    url: str = typer.Option(..., help="Homepage URL of the site to scan."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON report."),
) -> None:
    """Crawl a site and print its compliance report."""
    from sitescan.audit.moderation import ModerationAdapter, build_moderation_client
    from sitescan.audit.scanner import run_scan
    from cli.rendering import render_report

    moderation = ModerationAdapter(build_moderation_client(settings), settings)
    if not moderation.configured:
        typer.echo("[scan] Moderation classifier not configured; rule-based checks only.", err=True)

    typer.echo(f"[scan] Scanning {url!r} …", err=True)
    try:
        report = run_scan(url, moderation)
    except ScanError as exc:
        typer.echo(f"[scan] Scan failed: {exc}", err=True)
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(report.to_dict(), indent=2))
    else:
        typer.echo(render_report(report))


# ---------------------------------------------------------------------------
# Classify
# ---------------------------------------------------------------------------
@app.command("classify")
def classify(
    urls: List[str] = typer.Argument(..., help="URLs to classify."),
) -> None:
    """Show the verdict and deciding rule for each URL."""
    for url in urls:
        result = classify_url(url)
        mark = "POST" if result.is_post else "skip"
        typer.echo(f"  {mark:<4}  {result.verdict.value:<8}  {result.rule:<13}  {url}")


# ---------------------------------------------------------------------------
# Links
# ---------------------------------------------------------------------------
@app.command("links")
def links(
    url: str = typer.Option(..., help="Page URL to fetch."),
) -> None:
    """Fetch a page and list its same-host links with their classification."""
    from sitescan.scraper import extract_links, fetch_page

    typer.echo(f"[links] Fetching {url!r} …")
    page = fetch_page(url)
    if not page.ok:
        typer.echo(f"[links] Fetch failed (HTTP {page.status_code or 'n/a'}).")
        raise typer.Exit(1)

    found = extract_links(page.html, page.url)
    typer.echo(f"[links] {len(found)} same-host link(s):")
    for link in found:
        mark = "POST" if classify_url(link).is_post else "    "
        typer.echo(f"  {mark}  {link}")


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
