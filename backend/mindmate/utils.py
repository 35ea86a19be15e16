"""
Shared utility functions for the journaling sentiment service.
"""
from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Sequence


def now_utc() -> datetime:
    """
    Get current UTC datetime with timezone information.

    Returns:
        Current UTC datetime
    """
    return datetime.now(timezone.utc)


def normalize_whitespace(text: str | None) -> str:
    """
    Collapse runs of whitespace into single spaces.

    Args:
        text: Input text string (can be None)

    Returns:
        Normalized text with single spaces and trimmed edges
    """
    if not text:
        return ""
    return re.sub(r"\s+", " ", text).strip()


def clamp_to_unit_range(value: float) -> float:
    """
    Clamp a float value to the range [0.0, 1.0].

    Args:
        value: Input float value

    Returns:
        Value clamped to [0.0, 1.0] range
    """
    return max(0.0, min(1.0, value))


def weighted_mean(values: Sequence[float], weights: Sequence[float]) -> float:
    """
    Weighted arithmetic mean; falls back to the plain mean for zero total weight.

    Args:
        values: Values to average
        weights: One non-negative weight per value

    Returns:
        Weighted mean, 0.0 for empty input
    """
    if not values:
        return 0.0

    total_weight = sum(weights)
    if not total_weight:
        return sum(values) / len(values)

    return sum(v * w for v, w in zip(values, weights)) / total_weight
