"""
Application configuration with environment variable support.
"""
from __future__ import annotations

from typing import Dict, Tuple

from pydantic_settings import BaseSettings

from mindmate.models import ModelDescriptor, ModelFamily


class Settings(BaseSettings):
    # Hosted classification models
    HUGGINGFACE_API_KEY: str = ""
    HUGGINGFACE_API_URL: str = "https://api-inference.huggingface.co/models"
    MODEL_TIMEOUT_SECONDS: float = 15.0

    # LLM summaries and insights
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o-mini"

    # Server
    CORS_ALLOW_ORIGINS: str = "*"
    PORT: int = 8000

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @property
    def cors_origins(self) -> list[str]:
        return [item.strip() for item in self.CORS_ALLOW_ORIGINS.split(",") if item.strip()]


settings = Settings(_env_file=".env", _env_file_encoding="utf-8")


def _model_endpoint(model_id: str) -> str:
    return f"{settings.HUGGINGFACE_API_URL.rstrip('/')}/{model_id}"


# Hosted model ensemble
# Weights need not sum to 1; the aggregator divides by the total weight.
MODEL_DESCRIPTORS: Tuple[ModelDescriptor, ...] = (
    ModelDescriptor(
        name="cardiffnlp/twitter-roberta-base-sentiment-latest",
        endpoint=_model_endpoint("cardiffnlp/twitter-roberta-base-sentiment-latest"),
        weight=0.4,
        family=ModelFamily.SENTIMENT,
    ),
    ModelDescriptor(
        name="cardiffnlp/twitter-roberta-base-sentiment",
        endpoint=_model_endpoint("cardiffnlp/twitter-roberta-base-sentiment"),
        weight=0.3,
        family=ModelFamily.SENTIMENT,
    ),
    ModelDescriptor(
        name="j-hartmann/emotion-english-distilroberta-base",
        endpoint=_model_endpoint("j-hartmann/emotion-english-distilroberta-base"),
        weight=0.3,
        family=ModelFamily.EMOTION,
    ),
)

MODEL_WEIGHTS: Dict[str, float] = {d.name: d.weight for d in MODEL_DESCRIPTORS}
DEFAULT_MODEL_WEIGHT: float = 0.3

# Confidence bounds
MAX_ENSEMBLE_CONFIDENCE: float = 0.95
FALLBACK_CONFIDENCE: float = 0.3

# Journal entries are bounded by the calling layer
MAX_CONTENT_LENGTH: int = 5000
