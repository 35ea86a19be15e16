"""Shared fixtures: no test ever reaches a real hosted model or LLM."""
import httpx
import pytest

from mindmate.config import settings


@pytest.fixture(autouse=True)
def no_credentials(monkeypatch):
    monkeypatch.setattr(settings, "HUGGINGFACE_API_KEY", "")
    monkeypatch.setattr(settings, "OPENAI_API_KEY", "")


@pytest.fixture
def make_client():
    """Factory for an AsyncClient served by an in-process handler."""

    def _make(handler):
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make
