"""
Text preprocessing and coarse emotion tagging for journal entries.
"""
from __future__ import annotations

import re
from typing import Dict, FrozenSet, List, Tuple

from mindmate.utils import normalize_whitespace


# Common English function words dropped before model calls
STOP_WORDS: FrozenSet[str] = frozenset([
    "the", "and", "for", "are", "but", "not", "you", "all", "any", "can",
    "had", "her", "was", "one", "our", "out", "just", "get", "has", "him",
    "his", "how", "its", "may", "new", "now", "old", "see", "two", "who",
    "did", "she", "use", "way", "too", "this", "that", "with", "have",
    "from", "they", "been", "were", "said", "each", "which", "their",
    "there", "what", "about", "would", "these", "other", "into", "than",
    "then", "them", "some", "could", "when", "your", "will", "also",
])

# Declaration order is the checking order
EMOTION_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "joy": ("happy", "joy", "excited", "cheerful", "delighted", "glad", "thrilled", "elated"),
    "sadness": ("sad", "depressed", "unhappy", "lonely", "heartbroken", "miserable", "gloomy", "crying"),
    "anger": ("angry", "mad", "furious", "annoyed", "irritated", "frustrated", "rage"),
    "fear": ("afraid", "scared", "anxious", "worried", "nervous", "terrified", "panic", "fear"),
    "surprise": ("surprised", "shocked", "amazed", "astonished", "unexpected", "stunned"),
    "disgust": ("disgusted", "gross", "revolted", "repulsed", "nauseated", "sick of"),
    "love": ("love", "adore", "caring", "affection", "cherish", "romantic"),
    "gratitude": ("grateful", "thankful", "appreciate", "blessed", "gratitude", "thanks"),
}

_NON_WORD_RE = re.compile(r"[^\w\s]|_")
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")


def preprocess(text: str) -> str:
    """
    Normalize raw entry text for model consumption.

    Lowercases, replaces punctuation with spaces, collapses whitespace and
    drops short tokens and stop words.

    Args:
        text: Raw journal entry

    Returns:
        Space-joined token string, possibly empty
    """
    cleaned = normalize_whitespace(_NON_WORD_RE.sub(" ", (text or "").lower()))
    tokens = [
        token for token in cleaned.split(" ")
        if len(token) > 2 and token not in STOP_WORDS
    ]
    return " ".join(tokens)


def split_into_sentences(text: str) -> List[str]:
    """
    Split text on sentence terminators, keeping pieces longer than 10 characters.

    Args:
        text: Raw text

    Returns:
        List of trimmed sentences
    """
    pieces = (piece.strip() for piece in _SENTENCE_SPLIT_RE.split(text or ""))
    return [piece for piece in pieces if len(piece) > 10]


def extract_emotions(text: str) -> FrozenSet[str]:
    """
    Tag the emotions whose keywords occur anywhere in the text.

    Args:
        text: Raw text

    Returns:
        Set of emotion names
    """
    lowered = (text or "").lower()
    return frozenset(
        emotion
        for emotion, keywords in EMOTION_KEYWORDS.items()
        if any(keyword in lowered for keyword in keywords)
    )
