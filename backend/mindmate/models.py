"""
File: mindmate/models.py
Internal data structures used during scoring and aggregation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Tuple


class ModelFamily(str, Enum):
    """Label vocabulary a hosted model answers with."""

    SENTIMENT = "sentiment"
    EMOTION = "emotion"


class SentimentLabel(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


@dataclass(frozen=True)
class ModelDescriptor:
    """Static configuration of one hosted classification model."""

    name: str
    endpoint: str
    weight: float  # 0..1, normalized by the total weight at aggregation time
    family: ModelFamily = ModelFamily.SENTIMENT


@dataclass(frozen=True)
class ModelResult:
    """Normalized answer of a single model (or of the keyword fallback)."""

    score: float  # [0, 1], 0 = negative, 1 = positive
    label: SentimentLabel
    confidence: float  # [0, 1]
    origin_model: str


@dataclass(frozen=True)
class EnsembleResult:
    """Combined sentiment of a journal entry.

    This is the record the persistence layer stores next to the entry.
    """

    final_score: float
    final_label: SentimentLabel
    confidence: float  # capped at 0.95, exactly 0.3 for fallback results
    emotions: FrozenSet[str] = field(default_factory=frozenset)
    contributing_results: Tuple[ModelResult, ...] = ()

    @property
    def is_fallback(self) -> bool:
        """True when no hosted model contributed to the result."""
        return all(r.origin_model == FALLBACK_MODEL_NAME for r in self.contributing_results)


@dataclass(frozen=True)
class SentimentScore:
    """Two-field result kept for legacy callers."""

    score: float
    label: SentimentLabel


FALLBACK_MODEL_NAME = "keyword-fallback"


__all__ = [
    "ModelFamily",
    "SentimentLabel",
    "ModelDescriptor",
    "ModelResult",
    "EnsembleResult",
    "SentimentScore",
    "FALLBACK_MODEL_NAME",
]
