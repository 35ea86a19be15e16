"""
LLM-powered summaries and reflective insights for journal entries.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Optional, Sequence

import openai
from openai import AsyncOpenAI

from mindmate.config import settings
from mindmate.schemas import DeepAnalysis, EntryInsights, JournalEntryIn

logger = logging.getLogger(__name__)


def _get_openai_client() -> Optional[AsyncOpenAI]:
    """Get OpenAI client only when an API key is available."""
    if not settings.OPENAI_API_KEY:
        return None
    return AsyncOpenAI(api_key=settings.OPENAI_API_KEY)


SUMMARY_PROMPT = (
    "Summarize the user's journal entry in 1-2 concise, empathetic sentences. "
    "Reflect the overall tone without giving advice."
)

INSIGHTS_SYSTEM_PROMPT = (
    "You are a supportive AI companion that analyzes journal entries and provides gentle, "
    "helpful suggestions. Always respond with valid JSON in the exact format requested."
)

INSIGHTS_PROMPT = """Analyze this journal entry comprehensively and provide detailed, supportive guidance.

Entry: "{content}"

Please respond in the following JSON format:
{{
  "sentiment": "positive" | "negative" | "neutral",
  "confidence": number (0-100),
  "suggestion": "A detailed, gentle, supportive suggestion based on the entry content",
  "emotions": ["array of specific emotions detected"],
  "insights": ["array of 2-3 deeper insights about the emotional patterns"],
  "suggestions": ["array of 3-4 actionable suggestions"],
  "patterns": ["array of 2-3 behavioral or emotional patterns noticed"],
  "growthAreas": ["array of 2-3 areas for personal growth"]
}}

Guidelines:
- For positive entries: affirm, and suggest ways to maintain momentum
- For negative entries: offer coping strategies, validate feelings, gently reframe
- For neutral entries: prompt deeper reflection and mindfulness
- Confidence should reflect how clear the sentiment is"""

SUMMARY_UNCONFIGURED = "Summary unavailable - OpenAI API key not configured"
SUMMARY_QUOTA = "Summary unavailable - OpenAI quota exceeded. Please check your billing."
SUMMARY_RATE_LIMITED = "Summary unavailable - OpenAI rate limit exceeded. Please try again later."
SUMMARY_AUTH = "Summary unavailable - OpenAI API key invalid."
SUMMARY_UNAVAILABLE = "Summary unavailable"

# Substituted for a non-string suggestion in an otherwise usable answer
SHORT_SUGGESTION = "Thank you for sharing your thoughts."


def completion_text(response: Any) -> str:
    """First choice content of a chat completion, empty when there is none."""
    if not response.choices:
        return ""
    message = response.choices[0].message
    return (message.content if message else None) or ""


async def summarize_text(content: str) -> str:
    """
    Summarize a journal entry in one or two sentences.

    Args:
        content: Raw entry text

    Returns:
        Summary, or a fixed explanation of why none is available
    """
    client = _get_openai_client()
    if not client:
        logger.warning("OpenAI API key not configured. Returning fallback summary.")
        return SUMMARY_UNCONFIGURED

    try:
        response = await client.chat.completions.create(
            model=settings.OPENAI_MODEL,
            messages=[
                {"role": "system", "content": SUMMARY_PROMPT},
                {"role": "user", "content": content},
            ],
            max_tokens=100,
            temperature=0.7,
        )
    except openai.RateLimitError as e:
        logger.error("OpenAI rate limit: %s", e)
        return SUMMARY_QUOTA if "quota" in str(e).lower() else SUMMARY_RATE_LIMITED
    except openai.AuthenticationError as e:
        logger.error("OpenAI authentication failed: %s", e)
        return SUMMARY_AUTH
    except openai.OpenAIError as e:
        logger.error("OpenAI error: %s", e)
        return SUMMARY_UNAVAILABLE

    summary = completion_text(response).strip()
    return summary or SUMMARY_UNAVAILABLE


def parse_json_object(text: str) -> Optional[Dict[str, Any]]:
    """
    Parse a JSON object from model output, tolerating surrounding prose.

    Args:
        text: Raw completion text

    Returns:
        Parsed dict, or None if no JSON object can be read
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        match = re.search(r"\{[\s\S]*\}", text)
        if not match:
            return None
        try:
            data = json.loads(match.group(0))
        except json.JSONDecodeError:
            return None

    return data if isinstance(data, dict) else None


def _string_list(value: Any, default: List[str]) -> List[str]:
    if not isinstance(value, list):
        return default
    return [item for item in value if isinstance(item, str)]


def sanitize_insights(data: Dict[str, Any]) -> EntryInsights:
    """
    Validate LLM output field by field, substituting defaults for bad values.
    """
    defaults = EntryInsights()

    sentiment = data.get("sentiment")
    if sentiment not in ("positive", "negative", "neutral"):
        sentiment = defaults.sentiment

    confidence = data.get("confidence")
    if isinstance(confidence, (int, float)) and not isinstance(confidence, bool):
        confidence = max(0.0, min(100.0, float(confidence)))
    else:
        confidence = defaults.confidence

    suggestion = data.get("suggestion")
    if not isinstance(suggestion, str):
        suggestion = SHORT_SUGGESTION

    return EntryInsights(
        sentiment=sentiment,
        confidence=confidence,
        suggestion=suggestion,
        emotions=_string_list(data.get("emotions"), defaults.emotions),
        insights=_string_list(data.get("insights"), defaults.insights),
        suggestions=_string_list(data.get("suggestions"), defaults.suggestions),
        patterns=_string_list(data.get("patterns"), defaults.patterns),
        growth_areas=_string_list(data.get("growthAreas"), defaults.growth_areas),
    )


async def generate_entry_insights(content: str) -> EntryInsights:
    """
    Generate reflective insights for a journal entry.

    Args:
        content: Raw entry text

    Returns:
        Sanitized insights; defaults when the LLM is unavailable or unusable
    """
    client = _get_openai_client()
    if not client:
        logger.warning("OpenAI API key not configured. Returning default insights.")
        return EntryInsights()

    try:
        response = await client.chat.completions.create(
            model=settings.OPENAI_MODEL,
            messages=[
                {"role": "system", "content": INSIGHTS_SYSTEM_PROMPT},
                {"role": "user", "content": INSIGHTS_PROMPT.format(content=content)},
            ],
            temperature=0.7,
            max_tokens=300,
        )
    except openai.OpenAIError as e:
        logger.error("AI analysis error: %s", e)
        return EntryInsights()

    data = parse_json_object(completion_text(response))
    if data is None:
        logger.warning("AI analysis returned no JSON object; using default insights")
        return EntryInsights()

    return sanitize_insights(data)


# Deep analysis reads at most this many of the most recent entries
MAX_DEEP_ANALYSIS_ENTRIES = 10

DEEP_ANALYSIS_SYSTEM_PROMPT = (
    "You are a compassionate AI companion that provides deep, personalized insights about "
    "emotional patterns and personal growth. Always respond with valid JSON in the exact format requested."
)

DEEP_ANALYSIS_PROMPT = """You are a compassionate AI companion analyzing a user's journal entries to provide deep, personalized insights about their emotional patterns and personal growth.

User's Recent Entries:
{entries}

Please provide a comprehensive analysis in the following JSON format:
{{
  "emotionalPatterns": "Analysis of recurring emotional themes and patterns",
  "growthAreas": "Areas where the user shows potential for personal development",
  "strengths": "Positive patterns and strengths observed",
  "challenges": "Challenges or difficult patterns that might need attention",
  "recommendations": "Specific, actionable recommendations for continued growth",
  "insightSummary": "A warm, empathetic summary paragraph that captures the essence of their journey",
  "confidence": number (0-100, how confident you are in this analysis)
}}

Guidelines:
- Be warm, empathetic, and supportive in tone
- Focus on patterns across multiple entries, not individual entries
- Acknowledge both strengths and areas for growth
- Include disclaimers that this is reflective support, not psychological advice
- Confidence should reflect how clear the patterns are across entries"""

# No entries to analyze yet
WELCOME_ANALYSIS = DeepAnalysis(
    emotional_patterns="Start writing entries to receive personalized insights.",
    growth_areas="Continue your journaling practice to identify growth areas.",
    strengths="Your commitment to self-reflection is a strength in itself.",
    challenges="As you continue journaling, deeper patterns will emerge.",
    recommendations="Try to write at least one entry daily to build momentum.",
    insight_summary="Welcome to your wellness journey! Keep writing and we'll provide deeper insights as you progress.",
    confidence=30,
)

# The LLM answered but not with JSON
UNPARSED_ANALYSIS = DeepAnalysis(
    emotional_patterns="Your entries show a thoughtful approach to self-reflection and emotional awareness.",
    growth_areas="Continue exploring your emotional patterns and consider setting small, achievable goals for personal development.",
    strengths="You demonstrate consistent self-reflection and emotional awareness in your journaling practice.",
    challenges="Consider exploring any recurring themes or patterns that might benefit from deeper reflection.",
    recommendations="Continue your journaling practice and consider exploring new perspectives on recurring themes.",
    insight_summary="Your journaling journey shows growth and self-awareness. Keep reflecting and exploring your inner world.",
    confidence=60,
)

# The LLM is unavailable or failed
UNAVAILABLE_ANALYSIS = UNPARSED_ANALYSIS.model_copy(update={"confidence": 50})

# Per-field substitutes for an otherwise usable answer
FIELD_DEFAULTS = DeepAnalysis(
    emotional_patterns="Your entries show thoughtful emotional reflection.",
    growth_areas="Continue exploring your emotional patterns and personal development.",
    strengths="You demonstrate consistent self-reflection and emotional awareness.",
    challenges="Consider exploring any recurring themes that might benefit from deeper reflection.",
    recommendations="Continue your journaling practice and explore new perspectives.",
    insight_summary="Your journaling journey shows growth and self-awareness.",
    confidence=70,
)

_DEEP_ANALYSIS_KEYS = {
    "emotional_patterns": "emotionalPatterns",
    "growth_areas": "growthAreas",
    "strengths": "strengths",
    "challenges": "challenges",
    "recommendations": "recommendations",
    "insight_summary": "insightSummary",
}


def format_entries_context(entries: Sequence[JournalEntryIn]) -> str:
    """
    Render entries as numbered prompt blocks.

    Entries without a stored sentiment are shown as neutral at 50%.
    """
    blocks = []
    for index, entry in enumerate(entries, start=1):
        date = entry.created_at.date().isoformat() if entry.created_at else "undated"
        label = entry.label or "neutral"
        confidence = round((0.5 if entry.confidence is None else entry.confidence) * 100)
        blocks.append(
            f"Entry {index} ({date}):\n"
            f"Content: \"{entry.content}\"\n"
            f"Sentiment: {label} ({confidence}% confidence)\n"
            f"Emotions: {', '.join(entry.emotions) or 'Not detected'}\n"
            f"AI Summary: {entry.summary or 'No summary available'}"
        )
    return "\n\n".join(blocks)


def sanitize_deep_analysis(data: Dict[str, Any]) -> DeepAnalysis:
    """
    Validate LLM output field by field, substituting defaults for bad values.
    """
    fields: Dict[str, Any] = {}
    for field_name, key in _DEEP_ANALYSIS_KEYS.items():
        value = data.get(key)
        fields[field_name] = value if isinstance(value, str) else getattr(FIELD_DEFAULTS, field_name)

    confidence = data.get("confidence")
    if isinstance(confidence, (int, float)) and not isinstance(confidence, bool):
        fields["confidence"] = max(0.0, min(100.0, float(confidence)))
    else:
        fields["confidence"] = FIELD_DEFAULTS.confidence

    return DeepAnalysis(**fields)


async def generate_deep_analysis(entries: Sequence[JournalEntryIn]) -> DeepAnalysis:
    """
    Analyze emotional patterns across a user's recent entries.

    Args:
        entries: Journal entries, newest first; only the first ten are read

    Returns:
        Sanitized analysis; fixed texts when there are no entries or the LLM fails
    """
    if not entries:
        return WELCOME_ANALYSIS

    client = _get_openai_client()
    if not client:
        logger.warning("OpenAI API key not configured. Returning default deep analysis.")
        return UNAVAILABLE_ANALYSIS

    recent = list(entries)[:MAX_DEEP_ANALYSIS_ENTRIES]
    try:
        response = await client.chat.completions.create(
            model=settings.OPENAI_MODEL,
            messages=[
                {"role": "system", "content": DEEP_ANALYSIS_SYSTEM_PROMPT},
                {"role": "user", "content": DEEP_ANALYSIS_PROMPT.format(entries=format_entries_context(recent))},
            ],
            temperature=0.7,
            max_tokens=800,
        )
    except openai.OpenAIError as e:
        logger.error("Deep analysis error: %s", e)
        return UNAVAILABLE_ANALYSIS

    text = completion_text(response)
    if not text:
        logger.warning("Deep analysis returned an empty completion")
        return UNAVAILABLE_ANALYSIS

    data = parse_json_object(text)
    if data is None:
        logger.warning("Deep analysis returned no JSON object; using default analysis")
        return UNPARSED_ANALYSIS

    return sanitize_deep_analysis(data)
