"""Content moderation through an external LLM classifier.

Moderation providers
--------------------
``openai`` (default)
    ``langchain_openai.ChatOpenAI``; requires ``OPENAI_API_KEY``.  Without a
    key no client is built and every verdict is neutral.

``ollama``
    ``langchain_ollama.ChatOllama`` against ``OLLAMA_BASE_URL``.

The client is built once by :func:`build_moderation_client` and handed to a
:class:`ModerationAdapter`.  The adapter never raises: an unconfigured
client, a failed call or an unreadable reply all produce an empty verdict
whose ``summary`` says why.
"""

from __future__ import annotations

import json
import logging
import os
import re
from enum import Enum
from typing import Any

from langchain_core.messages import HumanMessage, SystemMessage

from sitescan.audit.models import ModerationVerdict, Violation, ViolationType
from sitescan.config import Settings, settings

logger = logging.getLogger(__name__)

DANGER_KEYWORDS = (
    "casino", "betting", "gamble", "porn", "sex", "scam", "fake download",
    "lottery", "win money", "get rich", "miracle cure", "hack", "crack",
    "torrent", "free iphone", "make money fast", "hate speech",
)

SAFE_KEYWORDS = (
    "how to", "tutorial", "guide", "tips", "review", "best", "top",
    "education", "learning", "news", "updates", "opinion", "analysis",
    "recipe", "cooking", "travel", "lifestyle", "fitness", "health",
)

SYSTEM_PROMPT = """You are a STRICT AdSense policy auditor. ONLY flag clear, serious violations.
Return ONLY valid raw JSON, no markdown:
{
  "violations": [
    {"type": "Adult|Gambling|Scam|Fake|Harmful|Hate", "excerpt": "short quote", "confidence": 0.95}
  ],
  "summary": "Brief explanation",
  "suggestions": ["Remove adult content", "Fix misleading claims"]
}

Rules:
- Only flag a violation when you are certain; do not guess.
- Ignore general topics, educational content, news, opinions, mild language.
- Return empty arrays when there is no clear violation.

Flag only:
- explicit sexual content
- gambling or betting promotion
- scams or fraud schemes
- fake software or downloads
- harmful or deceptive practices
- hate speech or promotion of violence

Example: "This article discusses online casinos" is fine;
"Visit our casino site to win big money" is a violation."""

_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


class Screen(str, Enum):
    ESCALATE = "escalate"
    SKIP = "skip"
    REVIEW = "review"


def prefilter(text: str) -> Screen:
    """Decide whether *text* needs the external classifier.

    Danger keywords are checked first and always escalate, even when a safe
    keyword is present too.
    """
    lower = (text or "").lower()
    if any(keyword in lower for keyword in DANGER_KEYWORDS):
        return Screen.ESCALATE
    if any(keyword in lower for keyword in SAFE_KEYWORDS):
        return Screen.SKIP
    return Screen.REVIEW


def build_moderation_client(config: Settings = settings) -> Any | None:
    """Return a LangChain chat model for *config*, or ``None`` if unconfigured."""
    if config.llm_provider == "openai":
        api_key = os.environ.get("OPENAI_API_KEY", "")
        if not api_key:
            logger.warning("[MODERATION] OPENAI_API_KEY is not set; moderation disabled.")
            return None
        from langchain_openai import ChatOpenAI

        return ChatOpenAI(
            model=config.openai_chat_model,
            temperature=config.moderation_temperature,
            max_tokens=config.moderation_max_tokens,
            api_key=api_key,
        )

    from langchain_ollama import ChatOllama

    return ChatOllama(
        model=config.ollama_chat_model,
        base_url=config.ollama_base_url,
        temperature=config.moderation_temperature,
        num_predict=config.moderation_max_tokens,
    )


# ---------------------------------------------------------------------------
# Response parsing
# ---------------------------------------------------------------------------

def _parse_violation(item: Any) -> Violation | None:
    if not isinstance(item, dict):
        return None
    try:
        confidence = float(item.get("confidence", 0))
    except (TypeError, ValueError):
        return None
    return Violation(
        type=ViolationType.from_label(item.get("type")),
        excerpt=str(item.get("excerpt") or "")[:300],
        confidence=max(0.0, min(1.0, confidence)),
    )


def parse_verdict(raw: str, threshold: float) -> ModerationVerdict | None:
    """Turn a raw classifier reply into a verdict, or ``None`` if unreadable.

    Only violations whose confidence is strictly above *threshold* survive.
    """
    cleaned = _FENCE.sub("", raw or "").strip()
    match = _JSON_OBJECT.search(cleaned)
    if not match:
        return None
    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict):
        return None

    items = data.get("violations")
    violations = [
        v for v in (_parse_violation(i) for i in (items if isinstance(items, list) else []))
        if v is not None and v.confidence > threshold
    ]
    suggestions = data.get("suggestions")
    return ModerationVerdict(
        violations=violations,
        summary=str(data.get("summary") or ""),
        suggestions=[str(s) for s in suggestions if s] if isinstance(suggestions, list) else [],
    )


# ---------------------------------------------------------------------------
# Adapter
# ---------------------------------------------------------------------------

class ModerationAdapter:
    """Wraps the classifier call with the keyword pre-filter and confidence cut."""

    def __init__(self, client: Any | None, config: Settings = settings) -> None:
        self.client = client
        self.config = config

    @property
    def configured(self) -> bool:
        return self.client is not None

    def moderate(self, text: str, url: str = "", context: str = "") -> ModerationVerdict:
        """Return the moderation verdict for *text*.

        Args:
            text: Page context (title, H1, meta and content) to classify.
            url: Page URL, included in the prompt.
            context: Short description of the page role, e.g. ``"homepage"``.
        """
        if self.client is None:
            return ModerationVerdict(summary="Moderation unavailable: classifier not configured")

        screen = prefilter(text)
        if screen is Screen.SKIP:
            return ModerationVerdict(summary="Safe content")

        prompt = (
            f"URL: {url}\n"
            f"Page type: {context or 'page'}\n\n"
            f"{text[: self.config.max_context_chars]}"
        )
        try:
            response = self.client.invoke(
                [SystemMessage(content=SYSTEM_PROMPT), HumanMessage(content=prompt)]
            )
        except Exception as exc:
            logger.error("[MODERATION] Classifier call failed for %s: %s", url, exc)
            return ModerationVerdict(summary=f"Moderation error: {exc}")

        raw = response.content if hasattr(response, "content") else str(response)
        verdict = parse_verdict(
            raw if isinstance(raw, str) else str(raw),
            self.config.moderation_confidence_threshold,
        )
        if verdict is None:
            logger.warning("[MODERATION] Malformed classifier reply for %s", url)
            return ModerationVerdict(summary="Malformed moderation response")

        logger.debug(
            "[MODERATION] %s (%s): %d violation(s)", url, screen.value, len(verdict.violations)
        )
        return verdict
