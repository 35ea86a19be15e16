"""
Ensemble sentiment scoring for journal entries.

This module queries the hosted classifiers concurrently, combines their answers
by weighted vote and degrades to the keyword heuristic when none of them answer.
"""
from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence

import httpx

from mindmate.adapters.huggingface import query_model
from mindmate.config import (
    DEFAULT_MODEL_WEIGHT,
    FALLBACK_CONFIDENCE,
    MAX_ENSEMBLE_CONFIDENCE,
    MODEL_DESCRIPTORS,
    MODEL_WEIGHTS,
    settings,
)
from mindmate.core.fallback import fallback_sentiment
from mindmate.core.preprocess import extract_emotions, preprocess
from mindmate.models import (
    EnsembleResult,
    ModelDescriptor,
    ModelResult,
    SentimentLabel,
    SentimentScore,
)
from mindmate.utils import clamp_to_unit_range, weighted_mean

logger = logging.getLogger(__name__)


# Winner on an exact tie of weighted votes
LABEL_TIE_BREAK_ORDER = (
    SentimentLabel.NEUTRAL,
    SentimentLabel.POSITIVE,
    SentimentLabel.NEGATIVE,
)


def model_weight(model_name: str) -> float:
    """
    Look up the static weight of a model by name.

    Args:
        model_name: ModelResult.origin_model

    Returns:
        Configured weight, or DEFAULT_MODEL_WEIGHT for unknown models
    """
    return MODEL_WEIGHTS.get(model_name, DEFAULT_MODEL_WEIGHT)


def vote_label(results: Sequence[ModelResult]) -> SentimentLabel:
    """
    Pick the label with the largest summed weight.

    Exact ties resolve in LABEL_TIE_BREAK_ORDER.
    """
    votes: Dict[SentimentLabel, float] = defaultdict(float)
    for result in results:
        votes[result.label] += model_weight(result.origin_model)

    # max() keeps the first maximal element
    return max(LABEL_TIE_BREAK_ORDER, key=lambda label: votes[label])


def aggregate(results: Iterable[Optional[ModelResult]], content: str) -> EnsembleResult:
    """
    Combine per-model answers into one EnsembleResult.

    Args:
        results: One entry per queried model, None for unavailable models
        content: Original (not preprocessed) entry text

    Returns:
        EnsembleResult; a low-confidence fallback result if no model answered
    """
    available: List[ModelResult] = [r for r in results if r is not None]
    emotions = extract_emotions(content)

    if not available:
        logger.info("No hosted model answered; using keyword fallback")
        fallback = fallback_sentiment(content)
        return EnsembleResult(
            final_score=fallback.score,
            final_label=fallback.label,
            confidence=FALLBACK_CONFIDENCE,
            emotions=emotions,
            contributing_results=(fallback,),
        )

    weights = [model_weight(r.origin_model) for r in available]
    final_score = clamp_to_unit_range(weighted_mean([r.score for r in available], weights))
    mean_confidence = sum(r.confidence for r in available) / len(available)

    return EnsembleResult(
        final_score=final_score,
        final_label=vote_label(available),
        confidence=min(mean_confidence, MAX_ENSEMBLE_CONFIDENCE),
        emotions=emotions,
        contributing_results=tuple(available),
    )


async def query_models(
    text: str,
    descriptors: Sequence[ModelDescriptor] = MODEL_DESCRIPTORS,
    client: Optional[httpx.AsyncClient] = None,
    api_key: Optional[str] = None,
) -> List[Optional[ModelResult]]:
    """
    Query all hosted models concurrently.

    Each call carries its own timeout; there is no overall deadline.

    Returns:
        Results in descriptor order, None for unavailable models
    """
    if client is None:
        async with httpx.AsyncClient(timeout=settings.MODEL_TIMEOUT_SECONDS) as own_client:
            return await query_models(text, descriptors, own_client, api_key)

    return list(await asyncio.gather(
        *(query_model(text, descriptor, client, api_key=api_key) for descriptor in descriptors)
    ))


async def analyze_sentiment_enhanced(
    content: str,
    client: Optional[httpx.AsyncClient] = None,
    api_key: Optional[str] = None,
) -> EnsembleResult:
    """
    Score a journal entry with the full ensemble.

    Always returns a result; remote failures only lower the number of
    contributing models.

    Args:
        content: Raw journal entry text
        client: Optional shared HTTP client
        api_key: Inference API token (defaults to settings)

    Returns:
        EnsembleResult including confidence and emotion tags
    """
    text = preprocess(content)
    results = await query_models(text, client=client, api_key=api_key)

    result = aggregate(results, content)
    logger.info(
        "Scored entry: label=%s score=%.3f confidence=%.2f models=%d",
        result.final_label.value,
        result.final_score,
        result.confidence,
        0 if result.is_fallback else len(result.contributing_results),
    )
    return result


async def score_sentiment(
    content: str,
    client: Optional[httpx.AsyncClient] = None,
    api_key: Optional[str] = None,
) -> SentimentScore:
    """
    Two-field sentiment for legacy callers.
    """
    result = await analyze_sentiment_enhanced(content, client=client, api_key=api_key)
    return SentimentScore(score=result.final_score, label=result.final_label)
