"""Approximate duplicate-content detection.

The comparison is position-aligned: two texts agree at index ``i`` when they
hold the same character there.  Shifted copies are missed and a long shared
prefix dominates; report scores depend on exactly this behaviour.
"""

from __future__ import annotations

import re
import threading
from typing import Iterable

from sitescan.config import settings


def normalize_text(text: str) -> str:
    """Collapse whitespace and lower-case *text*."""
    return re.sub(r"\s+", " ", text or "").strip().lower()


def _agreement(a: str, b: str) -> tuple[int, int]:
    length = min(len(a), len(b))
    matches = sum(1 for i in range(length) if a[i] == b[i])
    return matches, length


def _matches_any(
    text: str,
    normalized_priors: Iterable[str],
    threshold: float,
    min_length: int,
    length_ratio: float,
) -> bool:
    for prior in normalized_priors:
        if len(prior) < len(text) * length_ratio:
            continue
        matches, length = _agreement(text, prior)
        if length > min_length and matches / length > threshold:
            return True
    return False


def is_duplicate(
    candidate: str,
    prior_texts: Iterable[str],
    threshold: float | None = None,
    min_length: int | None = None,
    length_ratio: float | None = None,
) -> bool:
    """Return ``True`` if *candidate* nearly matches any of *prior_texts*.

    Only priors of comparable or greater length are considered: a prior
    shorter than ``length_ratio`` times the candidate is skipped.  For the
    rest, the overlapping prefix (the shorter of the two lengths) is compared
    character by character.  Pairs whose overlap is not longer than
    *min_length* are skipped.  Duplication is declared when the share of
    agreeing positions exceeds *threshold*.
    """
    return _matches_any(
        normalize_text(candidate),
        (normalize_text(p) for p in prior_texts),
        settings.duplicate_threshold if threshold is None else threshold,
        settings.duplicate_min_length if min_length is None else min_length,
        settings.duplicate_length_ratio if length_ratio is None else length_ratio,
    )


class ContentLedger:
    """Thread-safe accumulator of page texts already analysed in a scan.

    Texts are normalised once, when they are recorded.
    """

    def __init__(
        self,
        threshold: float | None = None,
        min_length: int | None = None,
        length_ratio: float | None = None,
    ) -> None:
        self.threshold = settings.duplicate_threshold if threshold is None else threshold
        self.min_length = settings.duplicate_min_length if min_length is None else min_length
        self.length_ratio = settings.duplicate_length_ratio if length_ratio is None else length_ratio
        self._texts: list[str] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._texts)

    def check_and_add(self, text: str) -> bool:
        """Record *text* and return whether it duplicates an earlier entry.

        The check and the append happen under one lock, so of two identical
        pages analysed concurrently exactly one is reported as the duplicate.
        """
        normalized = normalize_text(text)
        with self._lock:
            duplicate = _matches_any(
                normalized, self._texts, self.threshold, self.min_length, self.length_ratio
            )
            self._texts.append(normalized)
        return duplicate
