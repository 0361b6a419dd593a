"""
Analysis Service — run one job query through the analysis pipeline.

Pipeline steps:
  1. Validate the submitted job details → JobQuery
  2. Build the analyst prompt
  3. Request a completion from the configured provider
  4. Normalize the completion into JSON
  5. Validate it against AnalysisResult
  6. Persist the validated record

Every step returns a Result; the first Err ends the request and nothing is
stored unless validation passed.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from impact_analyzer.config import LLMConfig
from impact_analyzer.models.analysis_models import AnalysisRecord
from impact_analyzer.models.error_models import ErrorKind
from impact_analyzer.models.query_models import AnalyzeRequest, JobQuery
from impact_analyzer.prompts.impact_analyst import build_messages
from impact_analyzer.services.analysis_store import AnalysisStore
from impact_analyzer.services.llm_service import request_completion
from impact_analyzer.services.response_normalizer import normalize_response
from impact_analyzer.services.schema_validator import validate_analysis
from impact_analyzer.utils.result import Err, Ok, Result, fail

logger = logging.getLogger(__name__)


# ── Public API ───────────────────────────────────────────────────────────────


def build_job_query(req: AnalyzeRequest) -> Result[JobQuery]:
    """Check the raw request body; InvalidQuery when a field is missing or malformed."""
    if not req.job_title or not req.job_title.strip():
        return fail(ErrorKind.INVALID_QUERY, "Job title is required")
    if not req.industry or not req.industry.strip():
        return fail(ErrorKind.INVALID_QUERY, "Industry is required")

    try:
        return Ok(JobQuery.model_validate(req.model_dump(by_alias=True)))
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        return fail(ErrorKind.INVALID_QUERY, problems)


async def run_analysis(
    query: JobQuery,
    *,
    llm: LLMConfig,
    store: AnalysisStore,
) -> Result[AnalysisRecord]:
    """Analyze one job query end to end."""
    logger.info(f"Analyzing job: title={query.job_title} industry={query.industry}")

    completion = await request_completion(llm, build_messages(query))
    if isinstance(completion, Err):
        return completion

    parsed = normalize_response(completion.value)
    if isinstance(parsed, Err):
        logger.debug(f"Cleaned text on parse failure: {parsed.error.cleaned_text}")
        return parsed

    validated = validate_analysis(parsed.value)
    if isinstance(validated, Err):
        return validated

    try:
        analysis_id = store.store(query, validated.value)
        record = store.get(analysis_id)
    except Exception as e:
        logger.error(f"Failed to store analysis for '{query.job_title}': {type(e).__name__}: {e}")
        return fail(ErrorKind.PERSISTENCE_ERROR, "The analysis could not be saved.")

    if record is None:
        return fail(ErrorKind.PERSISTENCE_ERROR, f"Stored analysis '{analysis_id}' could not be read back.")

    logger.info(
        f"Analysis complete: id={record.id} impactScore={record.analysis.overview.impact_score}"
    )
    return Ok(record)
