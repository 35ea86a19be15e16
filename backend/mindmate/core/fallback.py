"""
Keyword-based sentiment used when no hosted model is reachable.
"""
from __future__ import annotations

import logging
from typing import Tuple

from mindmate.config import FALLBACK_CONFIDENCE
from mindmate.models import FALLBACK_MODEL_NAME, ModelResult, SentimentLabel

logger = logging.getLogger(__name__)


# Lexical stems; a token hits when it contains a stem ("happiness" -> "happ")
POSITIVE_STEMS: Tuple[str, ...] = (
    "happ", "joy", "excit", "great", "wonderful", "amazing", "fantastic", "love",
    "good", "better", "best", "excellent", "perfect", "beautiful", "grateful", "thankful",
    "bless", "lucky", "success", "achiev", "accomplish", "proud", "confident", "hope",
    "calm", "peace", "relax", "glad", "enjoy", "smile",
)

NEGATIVE_STEMS: Tuple[str, ...] = (
    "sad", "angry", "frustrat", "disappoint", "worr", "anxi", "stress", "tired",
    "exhaust", "hurt", "pain", "difficult", "struggl", "problem", "bad", "terrible",
    "awful", "hate", "upset", "mad", "depress", "lonely", "scare", "afraid",
    "fear", "cry", "miserable", "overwhelm", "nervous", "hopeless",
)

POSITIVE_BASE_SCORE = 0.7
NEGATIVE_BASE_SCORE = 0.3
NEUTRAL_SCORE = 0.5
RATIO_SPAN = 0.3
MIN_HIT_RATIO = 0.05


def count_hits(tokens: list[str]) -> Tuple[int, int]:
    """
    Count tokens containing a positive and a negative stem.

    A token may count towards both lists.

    Args:
        tokens: Lowercased whitespace-separated tokens

    Returns:
        Tuple of (positive_hits, negative_hits)
    """
    positive_hits = sum(1 for token in tokens if any(stem in token for stem in POSITIVE_STEMS))
    negative_hits = sum(1 for token in tokens if any(stem in token for stem in NEGATIVE_STEMS))
    return positive_hits, negative_hits


def fallback_sentiment(content: str) -> ModelResult:
    """
    Score raw text by the share of positive and negative tokens.

    Positive results land in [0.7, 1.0], negative in [0.0, 0.3], anything else
    is neutral at exactly 0.5. Confidence is always low.

    Args:
        content: Raw (not preprocessed) entry text

    Returns:
        ModelResult attributed to the keyword fallback
    """
    tokens = (content or "").lower().split()
    if not tokens:
        return _result(NEUTRAL_SCORE, SentimentLabel.NEUTRAL)

    positive_hits, negative_hits = count_hits(tokens)
    positive_ratio = positive_hits / len(tokens)
    negative_ratio = negative_hits / len(tokens)

    if positive_ratio > negative_ratio and positive_ratio > MIN_HIT_RATIO:
        return _result(POSITIVE_BASE_SCORE + positive_ratio * RATIO_SPAN, SentimentLabel.POSITIVE)
    if negative_ratio > positive_ratio and negative_ratio > MIN_HIT_RATIO:
        return _result(NEGATIVE_BASE_SCORE - negative_ratio * RATIO_SPAN, SentimentLabel.NEGATIVE)
    return _result(NEUTRAL_SCORE, SentimentLabel.NEUTRAL)


def _result(score: float, label: SentimentLabel) -> ModelResult:
    logger.debug("Keyword fallback scored %.3f (%s)", score, label.value)
    return ModelResult(
        score=score,
        label=label,
        confidence=FALLBACK_CONFIDENCE,
        origin_model=FALLBACK_MODEL_NAME,
    )
