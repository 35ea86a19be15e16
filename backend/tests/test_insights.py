"""Unit tests for LLM summaries and entry insights."""
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import openai
import pytest

from mindmate.schemas import EntryInsights, JournalEntryIn
from mindmate.services import insights
from mindmate.services.insights import (
    WELCOME_ANALYSIS,
    format_entries_context,
    generate_deep_analysis,
    generate_entry_insights,
    parse_json_object,
    sanitize_deep_analysis,
    sanitize_insights,
    summarize_text,
)


def _completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _client(content=None, error=None):
    client = MagicMock()
    client.chat.completions.create = AsyncMock(
        return_value=_completion(content), side_effect=error,
    )
    return client


def _rate_limit(message):
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    return openai.RateLimitError(message, response=httpx.Response(429, request=request), body=None)


class TestSummarizeText:
    """Tests for entry summaries."""

    @pytest.mark.asyncio
    async def test_unconfigured(self):
        assert await summarize_text("A long day") == insights.SUMMARY_UNCONFIGURED

    @pytest.mark.asyncio
    async def test_summary(self):
        client = _client("  You had a long but rewarding day.  ")
        with patch("mindmate.services.insights._get_openai_client", return_value=client):
            summary = await summarize_text("A long day")

        assert summary == "You had a long but rewarding day."
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["max_tokens"] == 100
        assert kwargs["messages"][-1]["content"] == "A long day"

    @pytest.mark.asyncio
    async def test_empty_completion(self):
        with patch("mindmate.services.insights._get_openai_client", return_value=_client(None)):
            assert await summarize_text("A long day") == insights.SUMMARY_UNAVAILABLE

    @pytest.mark.asyncio
    async def test_quota_exceeded(self):
        client = _client(error=_rate_limit("You exceeded your current quota"))
        with patch("mindmate.services.insights._get_openai_client", return_value=client):
            assert await summarize_text("A long day") == insights.SUMMARY_QUOTA

    @pytest.mark.asyncio
    async def test_rate_limited(self):
        client = _client(error=_rate_limit("Rate limit reached for requests"))
        with patch("mindmate.services.insights._get_openai_client", return_value=client):
            assert await summarize_text("A long day") == insights.SUMMARY_RATE_LIMITED

    @pytest.mark.asyncio
    async def test_connection_error(self):
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        client = _client(error=openai.APIConnectionError(request=request))
        with patch("mindmate.services.insights._get_openai_client", return_value=client):
            assert await summarize_text("A long day") == insights.SUMMARY_UNAVAILABLE

    @pytest.mark.asyncio
    async def test_no_choices(self):
        client = MagicMock()
        client.chat.completions.create = AsyncMock(return_value=SimpleNamespace(choices=[]))
        with patch("mindmate.services.insights._get_openai_client", return_value=client):
            assert await summarize_text("A long day") == insights.SUMMARY_UNAVAILABLE


class TestParseJsonObject:
    def test_plain_json(self):
        assert parse_json_object('{"sentiment": "positive"}') == {"sentiment": "positive"}

    def test_json_inside_prose(self):
        text = 'Here you go:\n```json\n{"sentiment": "negative"}\n```'
        assert parse_json_object(text) == {"sentiment": "negative"}

    def test_no_json(self):
        assert parse_json_object("I cannot help with that.") is None

    def test_array_is_rejected(self):
        assert parse_json_object('["positive"]') is None


class TestSanitizeInsights:
    """Tests for field-by-field validation."""

    def test_valid_payload(self):
        result = sanitize_insights({
            "sentiment": "positive",
            "confidence": 82,
            "suggestion": "Keep noting what went well.",
            "emotions": ["Content", "Proud"],
            "insights": ["You notice small wins."],
            "suggestions": ["Share the good news with a friend."],
            "patterns": ["Evening reflection"],
            "growthAreas": ["Celebrating progress"],
        })
        assert result.sentiment == "positive"
        assert result.confidence == 82
        assert result.emotions == ["Content", "Proud"]
        assert result.growth_areas == ["Celebrating progress"]

    def test_invalid_fields_use_defaults(self):
        defaults = EntryInsights()
        result = sanitize_insights({
            "sentiment": "ecstatic",
            "confidence": "high",
            "suggestion": 3,
            "emotions": "happy",
        })
        assert result.sentiment == "neutral"
        assert result.confidence == 50
        assert result.suggestion == "Thank you for sharing your thoughts."
        assert result.emotions == defaults.emotions
        assert result.patterns == defaults.patterns

    def test_confidence_is_clamped(self):
        assert sanitize_insights({"confidence": 140}).confidence == 100
        assert sanitize_insights({"confidence": -5}).confidence == 0

    def test_non_strings_are_filtered(self):
        result = sanitize_insights({"insights": ["Steady mood", 7, None, "Good sleep"]})
        assert result.insights == ["Steady mood", "Good sleep"]


class TestGenerateEntryInsights:
    @pytest.mark.asyncio
    async def test_unconfigured_returns_defaults(self):
        assert await generate_entry_insights("A calm day") == EntryInsights()

    @pytest.mark.asyncio
    async def test_parses_completion(self):
        content = json.dumps({"sentiment": "negative", "confidence": 70, "emotions": ["Tired"]})
        with patch("mindmate.services.insights._get_openai_client", return_value=_client(content)):
            result = await generate_entry_insights("Long shift, no sleep")

        assert result.sentiment == "negative"
        assert result.confidence == 70
        assert result.emotions == ["Tired"]

    @pytest.mark.asyncio
    async def test_unparseable_completion_returns_defaults(self):
        with patch("mindmate.services.insights._get_openai_client", return_value=_client("Sorry!")):
            assert await generate_entry_insights("Long shift") == EntryInsights()

    @pytest.mark.asyncio
    async def test_api_error_returns_defaults(self):
        client = _client(error=_rate_limit("Rate limit reached"))
        with patch("mindmate.services.insights._get_openai_client", return_value=client):
            assert await generate_entry_insights("Long shift") == EntryInsights()

    @pytest.mark.asyncio
    async def test_no_choices_returns_defaults(self):
        client = MagicMock()
        client.chat.completions.create = AsyncMock(return_value=SimpleNamespace(choices=[]))
        with patch("mindmate.services.insights._get_openai_client", return_value=client):
            assert await generate_entry_insights("Long shift") == EntryInsights()


def _entries(count):
    return [
        JournalEntryIn(content=f"Entry number {i}", label="positive", confidence=0.8, emotions=["joy"])
        for i in range(count)
    ]


class TestFormatEntriesContext:
    def test_entry_block(self):
        entry = JournalEntryIn(
            content="Walked by the river",
            created_at="2026-10-01T08:30:00Z",
            label="positive",
            confidence=0.84,
            emotions=["joy", "gratitude"],
            summary="A peaceful morning walk.",
        )
        assert format_entries_context([entry]) == (
            "Entry 1 (2026-10-01):\n"
            "Content: \"Walked by the river\"\n"
            "Sentiment: positive (84% confidence)\n"
            "Emotions: joy, gratitude\n"
            "AI Summary: A peaceful morning walk."
        )

    def test_missing_sentiment(self):
        context = format_entries_context([JournalEntryIn(content="Quiet day")])
        assert "Entry 1 (undated)" in context
        assert "Sentiment: neutral (50% confidence)" in context
        assert "Emotions: Not detected" in context
        assert "AI Summary: No summary available" in context


class TestSanitizeDeepAnalysis:
    def test_valid_payload(self):
        result = sanitize_deep_analysis({
            "emotionalPatterns": "Mornings feel lighter than evenings.",
            "growthAreas": "Setting boundaries at work.",
            "strengths": "Consistent gratitude.",
            "challenges": "Late-night worry.",
            "recommendations": "Try a wind-down routine.",
            "insightSummary": "You are steadily finding balance.",
            "confidence": 78,
        })
        assert result.emotional_patterns == "Mornings feel lighter than evenings."
        assert result.insight_summary == "You are steadily finding balance."
        assert result.confidence == 78

    def test_invalid_fields_use_defaults(self):
        result = sanitize_deep_analysis({"strengths": ["list"], "confidence": "high"})
        assert result.strengths == "You demonstrate consistent self-reflection and emotional awareness."
        assert result.challenges == "Consider exploring any recurring themes that might benefit from deeper reflection."
        assert result.confidence == 70

    def test_confidence_is_clamped(self):
        assert sanitize_deep_analysis({"confidence": 250}).confidence == 100


class TestGenerateDeepAnalysis:
    @pytest.mark.asyncio
    async def test_no_entries_returns_welcome(self):
        client = _client("{}")
        with patch("mindmate.services.insights._get_openai_client", return_value=client):
            result = await generate_deep_analysis([])

        assert result == WELCOME_ANALYSIS
        assert result.confidence == 30
        client.chat.completions.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_unconfigured(self):
        result = await generate_deep_analysis(_entries(2))
        assert result.confidence == 50

    @pytest.mark.asyncio
    async def test_parses_completion(self):
        content = json.dumps({"emotionalPatterns": "Steady optimism.", "confidence": 88})
        client = _client(content)
        with patch("mindmate.services.insights._get_openai_client", return_value=client):
            result = await generate_deep_analysis(_entries(3))

        assert result.emotional_patterns == "Steady optimism."
        assert result.confidence == 88
        assert result.strengths == "You demonstrate consistent self-reflection and emotional awareness."

    @pytest.mark.asyncio
    async def test_reads_at_most_ten_entries(self):
        client = _client("{}")
        with patch("mindmate.services.insights._get_openai_client", return_value=client):
            await generate_deep_analysis(_entries(12))

        prompt = client.chat.completions.create.call_args.kwargs["messages"][-1]["content"]
        assert "Entry 10 (" in prompt
        assert "Entry 11 (" not in prompt

    @pytest.mark.asyncio
    async def test_unparseable_completion(self):
        with patch("mindmate.services.insights._get_openai_client", return_value=_client("Sorry!")):
            result = await generate_deep_analysis(_entries(1))
        assert result.confidence == 60

    @pytest.mark.asyncio
    async def test_no_choices(self):
        client = MagicMock()
        client.chat.completions.create = AsyncMock(return_value=SimpleNamespace(choices=[]))
        with patch("mindmate.services.insights._get_openai_client", return_value=client):
            result = await generate_deep_analysis(_entries(1))
        assert result.confidence == 50

    @pytest.mark.asyncio
    async def test_api_error(self):
        client = _client(error=_rate_limit("Rate limit reached"))
        with patch("mindmate.services.insights._get_openai_client", return_value=client):
            result = await generate_deep_analysis(_entries(1))
        assert result.confidence == 50
