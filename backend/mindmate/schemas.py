# mindmate/schemas.py
from datetime import datetime
from pydantic import BaseModel, Field
from typing import Literal, List, Optional

from mindmate.config import MAX_CONTENT_LENGTH
from mindmate.models import EnsembleResult, ModelResult

Label = Literal["positive", "neutral", "negative"]


class EntryRequest(BaseModel):
    content: str = Field(..., max_length=MAX_CONTENT_LENGTH)


class SentimentScoreResponse(BaseModel):
    score: float
    label: Label


class ModelResultOut(BaseModel):
    score: float = Field(..., ge=0.0, le=1.0)
    label: Label
    confidence: float = Field(..., ge=0.0, le=1.0)
    origin_model: str

    @classmethod
    def from_result(cls, result: ModelResult) -> "ModelResultOut":
        return cls(
            score=result.score,
            label=result.label.value,
            confidence=result.confidence,
            origin_model=result.origin_model,
        )


class EnsembleResponse(BaseModel):
    final_score: float = Field(..., ge=0.0, le=1.0)
    final_label: Label
    confidence: float = Field(..., ge=0.0, le=0.95)
    emotions: List[str] = Field(default_factory=list)          # sorted for stable output
    contributing_results: List[ModelResultOut] = Field(default_factory=list)
    degraded: bool = False

    @classmethod
    def from_result(cls, result: EnsembleResult) -> "EnsembleResponse":
        return cls(
            final_score=result.final_score,
            final_label=result.final_label.value,
            confidence=result.confidence,
            emotions=sorted(result.emotions),
            contributing_results=[ModelResultOut.from_result(r) for r in result.contributing_results],
            degraded=result.is_fallback,
        )


class EntryInsights(BaseModel):
    sentiment: Label = "neutral"
    confidence: float = Field(default=50, ge=0, le=100)
    suggestion: str = "Thank you for sharing your thoughts. Consider reflecting on what brought you to write this entry today."
    emotions: List[str] = Field(default_factory=lambda: ["Reflective"])
    insights: List[str] = Field(default_factory=lambda: ["Your entry shows emotional awareness and self-reflection skills."])
    suggestions: List[str] = Field(default_factory=lambda: ["Consider reflecting on what brought you to write this entry today."])
    patterns: List[str] = Field(default_factory=lambda: ["Clear emotional expression with good self-awareness"])
    growth_areas: List[str] = Field(default_factory=lambda: ["Regular reflection practice to build emotional intelligence"])


class EntryAnalysisResponse(BaseModel):
    sentiment: EnsembleResponse
    summary: str
    as_of: datetime


class JournalEntryIn(BaseModel):
    content: str = Field(..., max_length=MAX_CONTENT_LENGTH)
    created_at: Optional[datetime] = None
    label: Optional[Label] = None
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    emotions: List[str] = Field(default_factory=list)
    summary: Optional[str] = None


class DeepAnalysisRequest(BaseModel):
    entries: List[JournalEntryIn] = Field(default_factory=list)   # newest first


class DeepAnalysis(BaseModel):
    emotional_patterns: str
    growth_areas: str
    strengths: str
    challenges: str
    recommendations: str
    insight_summary: str
    confidence: float = Field(..., ge=0, le=100)
