"""HTTP-level tests for the analysis endpoints."""

from __future__ import annotations

import asyncio
import json
from unittest.mock import AsyncMock, patch

from impact_analyzer.config import LLMConfig, Settings
from impact_analyzer.main import app
from impact_analyzer.models.error_models import USER_MESSAGES, ErrorKind
from impact_analyzer.utils.dependencies import APIKeys, get_llm_config

ACOMPLETION_PATH = "impact_analyzer.services.llm_service.acompletion"

SOFTWARE_ENGINEER = {"jobTitle": "Software Engineer", "industry": "Technology"}


class TestAnalyzeEndpoint:
    def test_returns_validated_analysis(self, client, memory_store, analysis_json, make_completion):
        mock = AsyncMock(return_value=make_completion(analysis_json))
        with patch(ACOMPLETION_PATH, mock):
            response = client.post("/analyze", json=SOFTWARE_ENGINEER)

        assert response.status_code == 200
        body = response.json()
        analysis = body["analysis"]
        assert 0 <= analysis["overview"]["impactScore"] <= 100
        for section in ("current", "emerging"):
            assert isinstance(analysis["responsibilities"][section], list)
        for section in ("current", "recommended"):
            assert isinstance(analysis["skills"][section], list)
        assert isinstance(analysis["opportunities"], list)
        assert isinstance(analysis["threats"], list)
        assert body["id"]
        assert body["createdAt"]
        assert len(memory_store) == 1

    def test_optional_fields_reach_the_prompt(self, client, analysis_json, make_completion):
        mock = AsyncMock(return_value=make_completion(analysis_json))
        payload = {**SOFTWARE_ENGINEER, "responsibilities": "Code review", "skills": "Rust"}
        with patch(ACOMPLETION_PATH, mock):
            client.post("/analyze", json=payload)

        user_prompt = mock.call_args.kwargs["messages"][1]["content"]
        assert "Code review" in user_prompt
        assert "Rust" in user_prompt

    def test_missing_opportunities_default_to_empty(
        self, client, analysis_payload, make_completion
    ):
        del analysis_payload["opportunities"]
        del analysis_payload["threats"]
        mock = AsyncMock(return_value=make_completion(json.dumps(analysis_payload)))
        with patch(ACOMPLETION_PATH, mock):
            response = client.post("/analyze", json=SOFTWARE_ENGINEER)

        assert response.status_code == 200
        assert response.json()["analysis"]["opportunities"] == []
        assert response.json()["analysis"]["threats"] == []

    def test_missing_job_title_is_400(self, client, memory_store):
        mock = AsyncMock()
        with patch(ACOMPLETION_PATH, mock):
            response = client.post("/analyze", json={"industry": "Technology"})

        assert response.status_code == 400
        body = response.json()
        assert body["kind"] == "invalid_query"
        assert body["error"] == USER_MESSAGES[ErrorKind.INVALID_QUERY]
        assert body["details"] == "Job title is required"
        mock.assert_not_called()
        assert len(memory_store) == 0

    def test_malformed_body_is_400(self, client):
        response = client.post(
            "/analyze",
            content="not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_query"

    def test_wrong_field_type_is_400(self, client):
        response = client.post("/analyze", json={"jobTitle": 42, "industry": "Technology"})
        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_query"

    def test_provider_timeout_is_500_and_stores_nothing(self, client, memory_store):
        mock = AsyncMock(side_effect=asyncio.TimeoutError())
        with patch(ACOMPLETION_PATH, mock):
            response = client.post("/analyze", json=SOFTWARE_ENGINEER)

        assert response.status_code == 500
        body = response.json()
        assert body["kind"] == "provider_error"
        assert body["error"] == USER_MESSAGES[ErrorKind.PROVIDER_ERROR]
        assert len(memory_store) == 0

    def test_incomplete_overview_is_validation_failure(
        self, client, memory_store, analysis_payload, make_completion
    ):
        analysis_payload["overview"] = {"summary": "Partial"}
        mock = AsyncMock(return_value=make_completion(json.dumps(analysis_payload)))
        with patch(ACOMPLETION_PATH, mock):
            response = client.post("/analyze", json=SOFTWARE_ENGINEER)

        assert response.status_code == 500
        body = response.json()
        assert body["kind"] == "validation_failure"
        assert "overview.impactScore" in body["details"]
        assert len(memory_store) == 0

    def test_truncated_completion_is_parse_failure(self, client, make_completion):
        mock = AsyncMock(return_value=make_completion('{"overview": {"impactScore": 70,'))
        with patch(ACOMPLETION_PATH, mock):
            response = client.post("/analyze", json=SOFTWARE_ENGINEER)

        assert response.status_code == 500
        body = response.json()
        assert body["kind"] == "parse_failure"
        assert "impactScore" not in body.get("details", "")

    def test_missing_api_key_is_provider_error(self, client, llm_config):
        app.dependency_overrides[get_llm_config] = lambda: llm_config.model_copy(
            update={"api_key": None}
        )
        mock = AsyncMock()
        with patch(ACOMPLETION_PATH, mock):
            response = client.post("/analyze", json=SOFTWARE_ENGINEER)

        assert response.status_code == 500
        assert response.json()["kind"] == "provider_error"
        mock.assert_not_called()


class TestStoredAnalyses:
    def _analyze(self, client, analysis_json, make_completion) -> str:
        mock = AsyncMock(return_value=make_completion(analysis_json))
        with patch(ACOMPLETION_PATH, mock):
            return client.post("/analyze", json=SOFTWARE_ENGINEER).json()["id"]

    def test_get_by_id(self, client, analysis_json, make_completion):
        analysis_id = self._analyze(client, analysis_json, make_completion)

        response = client.get(f"/analyze/{analysis_id}")
        assert response.status_code == 200
        body = response.json()
        assert body["id"] == analysis_id
        assert body["jobTitle"] == "Software Engineer"
        assert body["status"] == "completed"
        assert body["analysis"]["overview"]["impactScore"] == 65

    def test_get_unknown_id_is_404(self, client):
        assert client.get("/analyze/unknown").status_code == 404

    def test_latest_for_query(self, client, analysis_json, make_completion):
        analysis_id = self._analyze(client, analysis_json, make_completion)

        response = client.get(
            "/analyze/latest",
            params={"jobTitle": "software engineer", "industry": "technology"},
        )
        assert response.status_code == 200
        assert response.json()["id"] == analysis_id

    def test_latest_not_found(self, client):
        response = client.get("/analyze/latest", params=SOFTWARE_ENGINEER)
        assert response.status_code == 404

    def test_latest_rejects_bad_query(self, client):
        response = client.get(
            "/analyze/latest", params={"jobTitle": "Dev; rm -rf", "industry": "Technology"}
        )
        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_query"


class TestLLMConfigDependency:
    async def test_header_key_overrides_server_key(self):
        settings = Settings(deepseek_api_key="server-key", _env_file=None)
        config = await get_llm_config(APIKeys(deepseek="header-key"), settings)
        assert isinstance(config, LLMConfig)
        assert config.api_key == "header-key"

    async def test_falls_back_to_server_key(self):
        settings = Settings(deepseek_api_key="server-key", _env_file=None)
        config = await get_llm_config(APIKeys(), settings)
        assert config.api_key == "server-key"
        assert config.provider == "deepseek"


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
