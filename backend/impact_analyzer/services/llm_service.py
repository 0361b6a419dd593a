"""
LLM Service — chat completions for the analysis pipeline via LiteLLM.

Responsibilities:
  • Resolve the provider/model pair from the MODELS registry
  • Send one completion request per analysis, JSON mode where supported
  • Bound the call by the configured timeout (no automatic retries)
  • Turn every provider failure into a ProviderError result
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import litellm
from litellm import acompletion

from impact_analyzer.config import MODELS, PROMPT_CONFIG, LLMConfig
from impact_analyzer.models.error_models import ErrorKind
from impact_analyzer.utils.result import Ok, Result, fail

logger = logging.getLogger(__name__)

# Silence verbose LiteLLM logs
litellm.suppress_debug_info = True


# ── Helpers ──────────────────────────────────────────────────────────────────


def _resolve_model_id(provider: str, model_key: str) -> str:
    """Look up the LiteLLM model_id from our registry."""
    provider_models = MODELS.get(provider)
    if not provider_models:
        raise ValueError(f"Unknown provider: {provider}")
    model_id = provider_models.get(model_key)
    if not model_id:
        raise ValueError(f"Unknown model: {model_key} for provider {provider}")
    return model_id


def _describe_provider_error(e: Exception) -> str:
    """Short, user-safe description of a provider exception."""
    if isinstance(e, (asyncio.TimeoutError, litellm.Timeout)):
        return "The AI provider did not respond in time."
    if isinstance(e, ValueError):
        return str(e)
    raw_error = str(e).lower()
    if "401" in raw_error or "invalid_api_key" in raw_error or "invalid api key" in raw_error or "authentication" in raw_error:
        return "The AI provider rejected the API key."
    if "429" in raw_error or "rate_limit" in raw_error or "rate limit" in raw_error or "too many requests" in raw_error:
        return "The AI provider is rate limiting requests."
    if "404" in raw_error or "model_not_found" in raw_error or "model not found" in raw_error or "does not exist" in raw_error:
        return "The configured model is not available from the AI provider."
    return f"AI provider request failed: {type(e).__name__}"


# ── Core Completion ──────────────────────────────────────────────────────────


async def complete(config: LLMConfig, messages: list[dict[str, str]]) -> str:
    """
    Send a chat completion request via LiteLLM and return the assistant text.

    Raises on any provider failure, including an empty completion.
    """
    model_id = _resolve_model_id(config.provider, config.model_key)
    defaults = PROMPT_CONFIG.get(config.prompt_name, {})

    kwargs: dict[str, Any] = {
        "model": model_id,
        "messages": messages,
        "temperature": defaults.get("temperature", 0.7),
        "max_tokens": defaults.get("max_tokens", 3000),
        "api_key": config.api_key,
        "timeout": config.timeout_seconds,
        "num_retries": 0,
    }
    if config.json_mode:
        kwargs["response_format"] = {"type": "json_object"}

    logger.info(
        f"LLM call: provider={config.provider} model={model_id} "
        f"timeout={config.timeout_seconds}s json_mode={config.json_mode}"
    )

    response = await asyncio.wait_for(acompletion(**kwargs), timeout=config.timeout_seconds)
    content = response.choices[0].message.content
    if not content:
        raise ValueError("Empty response from AI provider")

    logger.info(f"LLM response: {len(content)} chars, usage={getattr(response, 'usage', None)}")
    logger.debug(f"Raw completion: {content}")
    return content


async def request_completion(config: LLMConfig, messages: list[dict[str, str]]) -> Result[str]:
    """complete() as a Result: any failure becomes a ProviderError."""
    if not config.api_key:
        logger.error(f"No API key configured for provider '{config.provider}'")
        return fail(
            ErrorKind.PROVIDER_ERROR,
            f"No API key configured for provider '{config.provider}'.",
        )

    try:
        return Ok(await complete(config, messages))
    except Exception as e:
        logger.error(f"LLM error ({config.provider}/{config.model_key}): {type(e).__name__}: {e}")
        return fail(ErrorKind.PROVIDER_ERROR, _describe_provider_error(e))
