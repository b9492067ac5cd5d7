"""Utilities for rendering scan reports in the CLI."""

from __future__ import annotations

from typing import List

from sitescan.audit.models import PageFinding, ScanReport


def _render_finding(finding: PageFinding, prefix: str) -> List[str]:
    lines = [f"{prefix}{finding.url}"]
    child = prefix.replace("├── ", "│   ").replace("└── ", "    ")
    if finding.summary:
        lines.append(f"{child}  {finding.summary}")
    for v in finding.violations:
        lines.append(f"{child}  ✗ [{v.type.value}] {v.excerpt!r} ({v.confidence:.2f})")
    for issue in finding.quality_issues:
        lines.append(f"{child}  ! {issue}")
    return lines


def render_report(report: ScanReport) -> str:
    """Render *report* as a plain-text summary with a findings tree."""
    structure = report.site_structure
    lines = [
        f"Scan of {report.url}  ({report.scanned_at})",
        f"Score   : {report.score}/100",
        f"Summary : {report.summary}",
        f"Posts   : {structure.post_count}",
        f"Pages   : found={', '.join(report.required_pages.found) or '-'}  "
        f"missing={', '.join(report.required_pages.missing) or '-'}",
    ]
    if structure.structure_warnings:
        lines.append(f"Warnings: {'; '.join(structure.structure_warnings)}")

    lines.append("")
    lines.append("🏠 Homepage")
    lines.extend(_render_finding(report.homepage, "└── "))

    if report.page_findings:
        lines.append("")
        lines.append(f"📄 Findings ({len(report.page_findings)})")
        count = len(report.page_findings)
        for i, finding in enumerate(report.page_findings):
            connector = "└── " if i == count - 1 else "├── "
            lines.extend(_render_finding(finding, connector))

    if report.suggestions:
        lines.append("")
        lines.append("💡 Suggestions")
        lines.extend(f"  - {s}" for s in report.suggestions)

    return "\n".join(lines)
