"""Centralised settings for the sitescan compliance scanner.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).

Every threshold and scoring weight used by the audit pipeline lives here so a
single threshold set is applied consistently across a scan.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() not in {"0", "false", "no", "off"}


def _env_list(name: str, default: str) -> list[str]:
    return [item.strip().lower() for item in os.environ.get(name, default).split(",") if item.strip()]


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------
    fetch_timeout: float = field(
        default_factory=lambda: float(os.environ.get("FETCH_TIMEOUT", "20.0"))
    )
    max_redirects: int = field(
        default_factory=lambda: int(os.environ.get("MAX_REDIRECTS", "5"))
    )
    verify_tls: bool = field(
        default_factory=lambda: _env_bool("VERIFY_TLS", "false")
    )

    # ------------------------------------------------------------------
    # Crawl budget
    # ------------------------------------------------------------------
    max_pages: int = field(
        default_factory=lambda: int(os.environ.get("MAX_PAGES", "500"))
    )
    seed_expansion_limit: int = field(
        default_factory=lambda: int(os.environ.get("SEED_EXPANSION_LIMIT", "15"))
    )
    analysis_concurrency: int = field(
        default_factory=lambda: int(os.environ.get("ANALYSIS_CONCURRENCY", "10"))
    )

    # ------------------------------------------------------------------
    # Content analysis
    # ------------------------------------------------------------------
    min_word_count: int = field(
        default_factory=lambda: int(os.environ.get("MIN_WORD_COUNT", "300"))
    )
    duplicate_threshold: float = field(
        default_factory=lambda: float(os.environ.get("DUPLICATE_THRESHOLD", "0.8"))
    )
    duplicate_min_length: int = field(
        default_factory=lambda: int(os.environ.get("DUPLICATE_MIN_LENGTH", "100"))
    )
    # Priors shorter than this share of the candidate are not comparable.
    duplicate_length_ratio: float = field(
        default_factory=lambda: float(os.environ.get("DUPLICATE_LENGTH_RATIO", "0.8"))
    )
    max_context_chars: int = field(
        default_factory=lambda: int(os.environ.get("MAX_CONTEXT_CHARS", "16000"))
    )
    min_context_chars: int = field(
        default_factory=lambda: int(os.environ.get("MIN_CONTEXT_CHARS", "200"))
    )
    max_ad_units: int = field(
        default_factory=lambda: int(os.environ.get("MAX_AD_UNITS", "3"))
    )
    required_pages: list[str] = field(
        default_factory=lambda: _env_list(
            "REQUIRED_PAGES", "about,contact,privacy,terms,disclaimer"
        )
    )

    # ------------------------------------------------------------------
    # Moderation classifier
    # ------------------------------------------------------------------
    llm_provider: str = field(
        default_factory=lambda: os.environ.get("LLM_PROVIDER", "openai")
    )
    openai_chat_model: str = field(
        default_factory=lambda: os.environ.get("OPENAI_CHAT_MODEL", "gpt-4o-mini")
    )
    ollama_chat_model: str = field(
        default_factory=lambda: os.environ.get("OLLAMA_CHAT_MODEL", "ministral-3:8b")
    )
    ollama_base_url: str = field(
        default_factory=lambda: os.environ.get("OLLAMA_BASE_URL", "http://localhost:11434")
    )
    moderation_temperature: float = field(
        default_factory=lambda: float(os.environ.get("MODERATION_TEMPERATURE", "0.1"))
    )
    moderation_max_tokens: int = field(
        default_factory=lambda: int(os.environ.get("MODERATION_MAX_TOKENS", "700"))
    )
    moderation_confidence_threshold: float = field(
        default_factory=lambda: float(os.environ.get("MODERATION_CONFIDENCE_THRESHOLD", "0.8"))
    )

    # ------------------------------------------------------------------
    # Scoring weights (points deducted from 100)
    # ------------------------------------------------------------------
    violation_penalty: int = field(
        default_factory=lambda: int(os.environ.get("VIOLATION_PENALTY", "5"))
    )
    missing_page_penalty: int = field(
        default_factory=lambda: int(os.environ.get("MISSING_PAGE_PENALTY", "5"))
    )
    homepage_issue_penalty: int = field(
        default_factory=lambda: int(os.environ.get("HOMEPAGE_ISSUE_PENALTY", "2"))
    )
    low_post_threshold: int = field(
        default_factory=lambda: int(os.environ.get("LOW_POST_THRESHOLD", "20"))
    )
    low_post_penalty: int = field(
        default_factory=lambda: int(os.environ.get("LOW_POST_PENALTY", "20"))
    )
    target_post_threshold: int = field(
        default_factory=lambda: int(os.environ.get("TARGET_POST_THRESHOLD", "40"))
    )
    target_post_penalty: int = field(
        default_factory=lambda: int(os.environ.get("TARGET_POST_PENALTY", "10"))
    )
    missing_meta_penalty: int = field(
        default_factory=lambda: int(os.environ.get("MISSING_META_PENALTY", "5"))
    )
    weak_headers_penalty: int = field(
        default_factory=lambda: int(os.environ.get("WEAK_HEADERS_PENALTY", "5"))
    )
    max_suggestions: int = field(
        default_factory=lambda: int(os.environ.get("MAX_SUGGESTIONS", "10"))
    )

    @property
    def moderation_model(self) -> str:
        """Name of the chat model the active provider will use."""
        if self.llm_provider == "openai":
            return self.openai_chat_model
        return self.ollama_chat_model


# Module-level singleton — import this everywhere:
#   from sitescan.config import settings
settings = Settings()
