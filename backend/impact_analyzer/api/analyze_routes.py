from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from impact_analyzer.config import LLMConfig
from impact_analyzer.models.analysis_models import AnalysisRecord, AnalyzeResponse
from impact_analyzer.models.error_models import ErrorKind, ErrorResponse
from impact_analyzer.models.query_models import AnalyzeRequest
from impact_analyzer.services.analysis_service import build_job_query, run_analysis
from impact_analyzer.services.analysis_store import AnalysisStore
from impact_analyzer.utils.dependencies import get_llm_config, get_store
from impact_analyzer.utils.result import Err

router = APIRouter()

_ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


def error_response(err: Err) -> JSONResponse:
    """Map a failed Result to the API error body."""
    status_code = 400 if err.kind == ErrorKind.INVALID_QUERY else 500
    return JSONResponse(status_code=status_code, content=err.error.to_response_body())


@router.post("/analyze", response_model=AnalyzeResponse, responses=_ERROR_RESPONSES)
async def analyze_job(
    req: AnalyzeRequest,
    llm: LLMConfig = Depends(get_llm_config),
    store: AnalysisStore = Depends(get_store),
):
    """Analyze how AI is likely to affect a job and store the report."""
    query = build_job_query(req)
    if isinstance(query, Err):
        return error_response(query)

    result = await run_analysis(query.value, llm=llm, store=store)
    if isinstance(result, Err):
        return error_response(result)

    record = result.value
    return AnalyzeResponse(id=record.id, created_at=record.created_at, analysis=record.analysis)


@router.get("/analyze/latest", response_model=AnalysisRecord, responses=_ERROR_RESPONSES)
async def get_latest_analysis(
    job_title: str = Query(..., alias="jobTitle"),
    industry: str = Query(...),
    store: AnalysisStore = Depends(get_store),
):
    """Most recent stored analysis for a job title and industry."""
    query = build_job_query(AnalyzeRequest(job_title=job_title, industry=industry))
    if isinstance(query, Err):
        return error_response(query)

    record = store.fetch_latest(query.value)
    if not record:
        raise HTTPException(status_code=404, detail="No analysis found for this job")
    return record


@router.get("/analyze/{analysis_id}", response_model=AnalysisRecord)
async def get_analysis(analysis_id: str, store: AnalysisStore = Depends(get_store)):
    """Retrieve a stored analysis by ID."""
    record = store.get(analysis_id)
    if not record:
        raise HTTPException(status_code=404, detail="Analysis not found")
    return record
