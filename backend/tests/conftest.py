"""Shared test fixtures."""

from __future__ import annotations

import copy
import json
from typing import Any
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from impact_analyzer.config import LLMConfig
from impact_analyzer.main import app
from impact_analyzer.models.query_models import JobQuery
from impact_analyzer.services.analysis_store import InMemoryAnalysisStore
from impact_analyzer.utils.dependencies import get_llm_config, get_store

SAMPLE_ANALYSIS: dict[str, Any] = {
    "overview": {
        "impactScore": 65,
        "summary": "AI tools will automate a large share of routine coding and testing work.",
        "timeframe": "2-5 years",
    },
    "responsibilities": {
        "current": [
            {
                "task": "Writing boilerplate code",
                "automationRisk": 85,
                "reasoning": "Code assistants already generate CRUD endpoints and tests.",
                "timeline": "1-2 years",
                "humanValue": "Choosing what to build and reviewing generated code",
            }
        ],
        "emerging": [
            {
                "task": "Reviewing AI-generated pull requests",
                "importance": 80,
                "timeline": "1-3 years",
                "reasoning": "Someone has to own correctness.",
            }
        ],
    },
    "skills": {
        "current": [
            {
                "skill": "Python",
                "currentRelevance": 90,
                "futureRelevance": 75,
                "automationRisk": 55.5,
                "reasoning": "Syntax matters less, design matters more.",
            }
        ],
        "recommended": [
            {
                "skill": "LLM application design",
                "importance": 95,
                "timeline": "Next 6 months",
                "resources": ["Coursera: Generative AI with LLMs"],
            }
        ],
    },
    "opportunities": [
        {
            "title": "AI tooling specialist",
            "description": "Build internal tooling around code assistants.",
            "actionItems": ["Prototype an internal assistant"],
            "timeline": "6-12 months",
            "potentialOutcome": "Team lead role for developer productivity",
        }
    ],
    "threats": [
        {
            "title": "Fewer junior positions",
            "description": "Entry-level tasks are the easiest to automate.",
            "riskLevel": 70,
            "mitigationSteps": ["Move toward system design work"],
            "timeline": "2-4 years",
        }
    ],
    "recommendations": {
        "immediate": ["Adopt a code assistant in daily work"],
        "shortTerm": ["Ship one LLM-backed feature"],
        "longTerm": ["Specialize in AI system architecture"],
    },
}


@pytest.fixture
def analysis_payload() -> dict[str, Any]:
    """A fresh, valid provider payload that tests may mutate."""
    return copy.deepcopy(SAMPLE_ANALYSIS)


@pytest.fixture
def analysis_json(analysis_payload: dict[str, Any]) -> str:
    return json.dumps(analysis_payload)


@pytest.fixture
def job_query() -> JobQuery:
    return JobQuery(job_title="Software Engineer", industry="Technology")


@pytest.fixture
def llm_config() -> LLMConfig:
    return LLMConfig(
        provider="deepseek",
        model_key="deepseek-chat",
        api_key="test-key",
        timeout_seconds=5.0,
    )


@pytest.fixture
def memory_store() -> InMemoryAnalysisStore:
    return InMemoryAnalysisStore()


@pytest.fixture
def client(llm_config: LLMConfig, memory_store: InMemoryAnalysisStore):
    """TestClient wired to an in-memory store and a fake provider key."""
    app.dependency_overrides[get_llm_config] = lambda: llm_config
    app.dependency_overrides[get_store] = lambda: memory_store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _make_completion(text: str | None) -> MagicMock:
    """Build a mock LiteLLM ModelResponse-like object."""
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = text
    response.usage = {"prompt_tokens": 100, "completion_tokens": 50}
    return response


@pytest.fixture
def make_completion():
    return _make_completion
