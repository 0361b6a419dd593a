"""
Request-scoped helpers — resolve the LLM config and the analysis store.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header

from impact_analyzer.config import LLMConfig, Settings, get_settings
from impact_analyzer.services.analysis_store import (
    AnalysisStore,
    InMemoryAnalysisStore,
    SqliteAnalysisStore,
)


class APIKeys:
    """Container for per-request API keys extracted from headers."""

    def __init__(
        self,
        deepseek: str | None = None,
        openai: str | None = None,
        groq: str | None = None,
    ):
        self.deepseek = deepseek
        self.openai = openai
        self.groq = groq

    def get_key(self, provider: str) -> str | None:
        """Get the key for a specific provider."""
        return getattr(self, provider, None)


async def get_api_keys(
    x_deepseek_key: Optional[str] = Header(None, alias="X-DeepSeek-Key"),
    x_openai_key: Optional[str] = Header(None, alias="X-OpenAI-Key"),
    x_groq_key: Optional[str] = Header(None, alias="X-Groq-Key"),
) -> APIKeys:
    """FastAPI dependency that extracts API keys from request headers."""
    return APIKeys(
        deepseek=x_deepseek_key or None,
        openai=x_openai_key or None,
        groq=x_groq_key or None,
    )


async def get_llm_config(
    keys: APIKeys = Depends(get_api_keys),
    settings: Settings = Depends(get_settings),
) -> LLMConfig:
    """Completion settings for this request; a header key wins over the server key."""
    provider = settings.llm_provider
    return LLMConfig(
        provider=provider,
        model_key=settings.llm_model_key,
        api_key=keys.get_key(provider) or settings.provider_key(provider),
        timeout_seconds=settings.llm_timeout_seconds,
        json_mode=settings.llm_json_mode,
    )


@lru_cache
def _build_store(backend: str, database_path: str) -> AnalysisStore:
    if backend == "memory":
        return InMemoryAnalysisStore()
    if backend == "sqlite":
        return SqliteAnalysisStore(database_path)
    raise ValueError(f"Unknown store backend: {backend}")


def get_store(settings: Settings = Depends(get_settings)) -> AnalysisStore:
    """One store per (backend, path), shared across requests."""
    return _build_store(settings.store_backend, settings.database_path)
