"""
Main FastAPI application and routing layer.
"""
from __future__ import annotations

import asyncio
import logging

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from mindmate.config import settings
from mindmate.core.sentiment import analyze_sentiment_enhanced, score_sentiment
from mindmate.schemas import (
    DeepAnalysis,
    DeepAnalysisRequest,
    EnsembleResponse,
    EntryAnalysisResponse,
    EntryInsights,
    EntryRequest,
    SentimentScoreResponse,
)
from mindmate.services.insights import (
    generate_deep_analysis,
    generate_entry_insights,
    summarize_text,
)
from mindmate.utils import now_utc

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL, format=settings.LOG_FORMAT)
logger = logging.getLogger(__name__)


# Initialize FastAPI app
app = FastAPI(
    title="MindMate AI Sentiment API",
    version="0.1.0",
    description="Ensemble sentiment scoring and reflective insights for journal entries",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "ok",
        "as_of": now_utc().isoformat(),
        "service": "mindmate-sentiment-api",
        "hosted_models_configured": bool(settings.HUGGINGFACE_API_KEY),
        "llm_configured": bool(settings.OPENAI_API_KEY),
    }


@app.post("/sentiment", response_model=SentimentScoreResponse)
async def post_sentiment(request: EntryRequest):
    """Score an entry and return the legacy score/label pair."""
    try:
        result = await score_sentiment(request.content)
    except Exception as e:
        logger.error(f"Error scoring entry: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

    return SentimentScoreResponse(score=result.score, label=result.label.value)


@app.post("/sentiment/enhanced", response_model=EnsembleResponse)
async def post_sentiment_enhanced(request: EntryRequest):
    """Score an entry with confidence, emotion tags and per-model results."""
    try:
        result = await analyze_sentiment_enhanced(request.content)
    except Exception as e:
        logger.error(f"Error scoring entry: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

    return EnsembleResponse.from_result(result)


@app.post("/entries/analyze", response_model=EntryAnalysisResponse)
async def analyze_entry(request: EntryRequest):
    """
    Produce the sentiment record stored alongside a new journal entry.

    The ensemble and the summary run concurrently.
    """
    try:
        result, summary = await asyncio.gather(
            analyze_sentiment_enhanced(request.content),
            summarize_text(request.content),
        )
    except Exception as e:
        logger.error(f"Error analyzing entry: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

    return EntryAnalysisResponse(
        sentiment=EnsembleResponse.from_result(result),
        summary=summary,
        as_of=now_utc(),
    )


@app.post("/entries/insights", response_model=EntryInsights)
async def entry_insights(request: EntryRequest):
    """Reflective insights and suggestions for an entry."""
    if not request.content.strip():
        raise HTTPException(status_code=400, detail="Entry text is required")

    return await generate_entry_insights(request.content)


@app.post("/entries/deep-analysis", response_model=DeepAnalysis)
async def deep_analysis(request: DeepAnalysisRequest):
    """Patterns and growth areas across the user's most recent entries."""
    return await generate_deep_analysis(request.entries)


if __name__ == "__main__":
    # For development
    import uvicorn
    uvicorn.run("mindmate.main:app", host="0.0.0.0", port=settings.PORT, reload=True)
