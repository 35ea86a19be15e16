"""
Hugging Face Inference API adapter for hosted text classifiers.
"""
from __future__ import annotations

import logging
from typing import Any, Optional, Tuple

import httpx

from mindmate.config import settings
from mindmate.models import ModelDescriptor, ModelFamily, ModelResult, SentimentLabel
from mindmate.utils import clamp_to_unit_range

logger = logging.getLogger(__name__)


# Emotion classifiers answer with emotion names instead of polarity labels
EMOTION_POSITIVE_KEYWORDS = ("joy", "love")
EMOTION_NEGATIVE_KEYWORDS = ("anger", "sadness", "fear")

# Class-index labels used by older sentiment checkpoints
POSITIVE_CLASS_TOKEN = "label_2"
NEGATIVE_CLASS_TOKEN = "label_0"


class MalformedResponseError(ValueError):
    """Raised when a model answers with an unexpected payload."""


def map_label(raw_label: str, family: ModelFamily) -> SentimentLabel:
    """
    Map a model-specific label onto positive/neutral/negative.

    Args:
        raw_label: Label as returned by the model
        family: Label vocabulary of the model

    Returns:
        Canonical sentiment label
    """
    label = raw_label.lower()

    if family == ModelFamily.EMOTION:
        if any(keyword in label for keyword in EMOTION_POSITIVE_KEYWORDS):
            return SentimentLabel.POSITIVE
        if any(keyword in label for keyword in EMOTION_NEGATIVE_KEYWORDS):
            return SentimentLabel.NEGATIVE
        return SentimentLabel.NEUTRAL

    if "positive" in label or label == POSITIVE_CLASS_TOKEN:
        return SentimentLabel.POSITIVE
    if "negative" in label or label == NEGATIVE_CLASS_TOKEN:
        return SentimentLabel.NEGATIVE
    return SentimentLabel.NEUTRAL


def extract_top_prediction(payload: Any) -> Tuple[str, float]:
    """
    Read the highest-scoring label/score pair from an inference response.

    Accepts both ``[[{label, score}, ...]]`` and ``[{label, score}, ...]``.

    Raises:
        MalformedResponseError: If no label/score pair can be read
    """
    candidates = payload
    if isinstance(candidates, list) and candidates and isinstance(candidates[0], list):
        candidates = candidates[0]

    if not isinstance(candidates, list) or not candidates:
        raise MalformedResponseError(f"Unexpected payload: {str(payload)[:200]}")

    top = max(candidates, key=lambda c: float(c["score"]))
    return str(top["label"]), float(top["score"])


def to_model_result(raw_label: str, raw_score: float, descriptor: ModelDescriptor) -> ModelResult:
    """
    Normalize a raw prediction into a ModelResult on the 0 (negative) .. 1 (positive) scale.
    """
    label = map_label(raw_label, descriptor.family)
    confidence = clamp_to_unit_range(raw_score)

    if label == SentimentLabel.POSITIVE:
        score = confidence
    elif label == SentimentLabel.NEGATIVE:
        score = 1.0 - confidence
    else:
        score = 0.5

    return ModelResult(
        score=score,
        label=label,
        confidence=confidence,
        origin_model=descriptor.name,
    )


async def query_model(
    text: str,
    descriptor: ModelDescriptor,
    client: httpx.AsyncClient,
    api_key: Optional[str] = None,
    timeout: Optional[float] = None,
) -> Optional[ModelResult]:
    """
    Classify text with one hosted model.

    Never raises for remote problems: a missing key, a timeout, an HTTP error
    or a malformed payload all yield None and the model is left out of the vote.

    Args:
        text: Preprocessed entry text
        descriptor: Model to call
        client: Shared HTTP client
        api_key: Inference API token (defaults to settings)
        timeout: Per-call timeout in seconds (defaults to settings)

    Returns:
        ModelResult, or None when the model is unavailable
    """
    token = settings.HUGGINGFACE_API_KEY if api_key is None else api_key
    if not token:
        logger.debug("No inference API key configured; skipping %s", descriptor.name)
        return None

    headers = {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json",
    }

    try:
        response = await client.post(
            descriptor.endpoint,
            json={"inputs": text},
            headers=headers,
            timeout=settings.MODEL_TIMEOUT_SECONDS if timeout is None else timeout,
        )
        response.raise_for_status()
        raw_label, raw_score = extract_top_prediction(response.json())
    except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
        logger.warning("Model %s unavailable: %s: %s", descriptor.name, type(e).__name__, e)
        return None

    return to_model_result(raw_label, raw_score, descriptor)
