import hashlib
import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from impact_analyzer.utils.text_cleanup import collapse_whitespace, normalize_text

# Letters, digits, spaces and basic punctuation
NAME_PATTERN = re.compile(r"^[a-zA-Z0-9\s\-&()]+$")
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
FREE_TEXT_MAX_LENGTH = 2000


# ── Request Models ──────────────────────────────────────────────────────────


class AnalyzeRequest(BaseModel):
    """Raw POST /analyze body. Checked by JobQuery, not here."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    job_title: Optional[str] = None
    industry: Optional[str] = None
    responsibilities: Optional[str] = None
    skills: Optional[str] = None


# ── Domain Models ───────────────────────────────────────────────────────────


class JobQuery(BaseModel):
    """A validated, immutable job description submitted for analysis."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    job_title: str = Field(min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    industry: str = Field(min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    responsibilities: Optional[str] = Field(default=None, max_length=FREE_TEXT_MAX_LENGTH)
    skills: Optional[str] = Field(default=None, max_length=FREE_TEXT_MAX_LENGTH)

    @field_validator("job_title", "industry", mode="before")
    @classmethod
    def clean_name(cls, v: object) -> object:
        if isinstance(v, str):
            return collapse_whitespace(v)
        return v

    @field_validator("job_title", "industry")
    @classmethod
    def name_charset(cls, v: str) -> str:
        if not NAME_PATTERN.match(v):
            msg = "may only contain letters, numbers, spaces, and basic punctuation (- & ( ))"
            raise ValueError(msg)
        return v

    @field_validator("responsibilities", "skills", mode="before")
    @classmethod
    def blank_to_none(cls, v: object) -> object:
        if isinstance(v, str):
            v = normalize_text(v)
            return v or None
        return v

    def fingerprint(self) -> str:
        """Stable key for 'the same question', ignoring case and spacing."""
        key = f"{self.job_title.lower()}|{self.industry.lower()}"
        return hashlib.md5(key.encode("utf-8")).hexdigest()
