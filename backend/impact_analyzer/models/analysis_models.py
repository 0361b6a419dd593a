from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# The one response shape the service accepts: numeric 0-100 importance and
# risk levels, plain-string resources and recommendations.
SCHEMA_VERSION = "2024-numeric"

Score = Annotated[float, Field(ge=0, le=100)]


class _Strict(BaseModel):
    """camelCase on the wire, no type coercion, extra provider keys ignored."""

    model_config = ConfigDict(
        strict=True,
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ── Report Sections ─────────────────────────────────────────────────────────


class Overview(_Strict):
    impact_score: int = Field(ge=0, le=100)
    summary: str = Field(min_length=1)
    timeframe: str = Field(min_length=1)


class CurrentResponsibility(_Strict):
    task: str
    automation_risk: Score
    reasoning: str
    timeline: str
    human_value: str


class EmergingResponsibility(_Strict):
    task: str
    importance: Score
    timeline: str
    reasoning: Optional[str] = None


class Responsibilities(_Strict):
    current: list[CurrentResponsibility] = Field(min_length=1)
    emerging: list[EmergingResponsibility] = Field(min_length=1)


class CurrentSkill(_Strict):
    skill: str
    current_relevance: Score
    future_relevance: Score
    automation_risk: Score
    reasoning: str


class RecommendedSkill(_Strict):
    skill: str
    importance: Score
    timeline: str
    resources: list[str]


class Skills(_Strict):
    current: list[CurrentSkill] = Field(min_length=1)
    recommended: list[RecommendedSkill] = Field(min_length=1)


class Opportunity(_Strict):
    title: str
    description: str
    action_items: list[str]
    timeline: str
    potential_outcome: str


class Threat(_Strict):
    title: str
    description: str
    risk_level: Score
    mitigation_steps: list[str]
    timeline: str


class Recommendations(_Strict):
    immediate: list[str] = Field(min_length=1)
    short_term: list[str] = Field(min_length=1)
    long_term: list[str] = Field(min_length=1)


class AnalysisResult(_Strict):
    """Validated AI impact report for one job query."""

    overview: Overview
    responsibilities: Responsibilities
    skills: Skills
    opportunities: list[Opportunity]
    threats: list[Threat]
    recommendations: Recommendations


# ── Persistence / Response Models ───────────────────────────────────────────


class AnalysisRecord(BaseModel):
    """A stored analysis. Never mutated after it is written."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    job_title: str
    industry: str
    responsibilities: Optional[str] = None
    skills: Optional[str] = None
    query_key: str
    schema_version: str = SCHEMA_VERSION
    status: str = "completed"
    analysis: AnalysisResult
    created_at: datetime


class AnalyzeResponse(BaseModel):
    """Successful POST /analyze body."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    created_at: datetime
    analysis: AnalysisResult


class PdfRequest(BaseModel):
    """Client-rendered report HTML to export."""

    html: str = Field(min_length=1)
