from functools import lru_cache
from typing import Optional

from pydantic import BaseModel
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    app_name: str = "AI Job Impact Analyzer"
    debug: bool = False
    log_level: str = "INFO"

    # CORS
    frontend_url: str = "http://localhost:3000"

    # LLM API Keys (server defaults, a request may override them via headers)
    deepseek_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    groq_api_key: Optional[str] = None

    # Analysis model
    llm_provider: str = "deepseek"
    llm_model_key: str = "deepseek-chat"
    llm_timeout_seconds: float = 180.0
    llm_json_mode: bool = True

    # Persistence: "sqlite" | "memory"
    store_backend: str = "sqlite"
    database_path: str = "data/analyses.db"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    def provider_key(self, provider: str) -> str | None:
        """Server-side API key for a provider, if one is configured."""
        return getattr(self, f"{provider}_api_key", None)


@lru_cache
def get_settings() -> Settings:
    return Settings()


class LLMConfig(BaseModel):
    """Everything the completion call needs, resolved once per request."""

    model_config = {"frozen": True}

    provider: str
    model_key: str
    api_key: Optional[str] = None
    timeout_seconds: float = 180.0
    json_mode: bool = True
    prompt_name: str = "impact_analysis"


# ── Model Registry ──────────────────────────────────────────────────────────

MODELS = {
    "deepseek": {
        "deepseek-chat": "deepseek/deepseek-chat",
    },
    "openai": {
        "gpt-4o-mini": "openai/gpt-4o-mini",
        "gpt-4o": "openai/gpt-4o",
    },
    "groq": {
        # may ignore JSON mode
        "llama-3.3-70b": "groq/llama-3.3-70b-versatile",
    },
}

# ── Prompt Configuration ────────────────────────────────────────────────────

PROMPT_CONFIG = {
    "impact_analysis": {"temperature": 0.7, "max_tokens": 3000},
}
