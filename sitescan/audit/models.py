"""Dataclass models produced by the audit pipeline.

These are plain Python objects; the HTTP layer serialises them through
``ScanReport.to_dict``.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any


class ViolationType(str, Enum):
    # Labels returned by the moderation classifier
    ADULT = "Adult"
    GAMBLING = "Gambling"
    SCAM = "Scam"
    FAKE = "Fake"
    HARMFUL = "Harmful"
    HATE = "Hate"
    # Labels emitted by the rule-based detector
    MISLEADING = "Misleading"
    COPYRIGHT = "Copyright"
    AFFILIATE_DISCLOSURE = "AffiliateDisclosure"
    EXCESSIVE_ADS = "ExcessiveAds"
    OTHER = "Other"

    @classmethod
    def from_label(cls, label: Any) -> "ViolationType":
        """Map a free-form classifier label onto a known type (``Other`` if unknown)."""
        text = str(label or "").strip().lower()
        for member in cls:
            if member.value.lower() == text:
                return member
        return cls.OTHER


@dataclass(frozen=True)
class Violation:
    type: ViolationType
    excerpt: str
    confidence: float

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "excerpt": self.excerpt, "confidence": self.confidence}


@dataclass
class QualityReport:
    word_count: int
    has_proper_heading_hierarchy: bool
    issues: list[str] = field(default_factory=list)


@dataclass
class ModerationVerdict:
    violations: list[Violation] = field(default_factory=list)
    summary: str = ""
    suggestions: list[str] = field(default_factory=list)


@dataclass
class PageFinding:
    """Everything worth reporting about one analysed page."""

    url: str
    violations: list[Violation] = field(default_factory=list)
    summary: str = ""
    suggestions: list[str] = field(default_factory=list)
    quality_issues: list[str] = field(default_factory=list)

    @property
    def has_signals(self) -> bool:
        return bool(self.violations or self.quality_issues)

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "violations": [v.to_dict() for v in self.violations],
            "summary": self.summary,
            "suggestions": list(self.suggestions),
            "quality_issues": list(self.quality_issues),
        }


@dataclass(frozen=True)
class RequiredPages:
    found: list[str]
    missing: list[str]


@dataclass(frozen=True)
class SiteStructure:
    post_count: int
    has_meta_tags: bool
    has_good_headers: bool
    structure_warnings: list[str]


@dataclass(frozen=True)
class ScanReport:
    url: str
    total_violations: int
    required_pages: RequiredPages
    site_structure: SiteStructure
    homepage: PageFinding
    page_findings: list[PageFinding]
    suggestions: list[str]
    score: int
    summary: str
    scanned_at: str

    def to_dict(self) -> dict[str, Any]:
        """Return the public JSON-ready form of the report."""
        return {
            "url": self.url,
            "total_violations": self.total_violations,
            "required_pages": asdict(self.required_pages),
            "site_structure": asdict(self.site_structure),
            "homepage": self.homepage.to_dict(),
            "page_findings": [f.to_dict() for f in self.page_findings],
            "suggestions": list(self.suggestions),
            "score": self.score,
            "summary": self.summary,
            "scanned_at": self.scanned_at,
        }
