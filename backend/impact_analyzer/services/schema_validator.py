"""
Schema Validator — check a parsed completion against AnalysisResult.

All violations are collected, not just the first, so a failed response can be
diagnosed in one pass. The only tolerated omission is `opportunities` /
`threats`, which older responses left out and which default to empty lists.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from impact_analyzer.models.analysis_models import AnalysisResult
from impact_analyzer.models.error_models import ErrorKind, Violation
from impact_analyzer.utils.result import Ok, Result, fail

logger = logging.getLogger(__name__)

OPTIONAL_SECTIONS = ("opportunities", "threats")

_MAX_ACTUAL_CHARS = 60


def validate_analysis(data: Any) -> Result[AnalysisResult]:
    """Validate a parsed JSON value into an AnalysisResult."""
    if not isinstance(data, dict):
        violation = Violation(path="$", expected="JSON object", actual=_describe(data))
        return fail(ErrorKind.VALIDATION_FAILURE, violations=[violation])

    try:
        result = AnalysisResult.model_validate(backfill_optional_sections(data))
    except ValidationError as e:
        violations = [_to_violation(err) for err in e.errors()]
        logger.warning(
            f"Analysis failed validation with {len(violations)} violation(s): "
            + "; ".join(str(v) for v in violations[:5])
        )
        return fail(ErrorKind.VALIDATION_FAILURE, violations=violations)

    return Ok(result)


def backfill_optional_sections(data: dict[str, Any]) -> dict[str, Any]:
    """Copy of `data` with missing or null optional sections set to []."""
    patched = dict(data)
    for key in OPTIONAL_SECTIONS:
        if patched.get(key) is None:
            patched[key] = []
    return patched


# ── Helpers ──────────────────────────────────────────────────────────────────


def _to_violation(err: dict[str, Any]) -> Violation:
    """Convert one pydantic error entry into a Violation."""
    path = _format_path(err.get("loc", ()))
    if err.get("type") == "missing":
        return Violation(path=path, expected="required field", actual="missing")
    return Violation(path=path, expected=_expected(err), actual=_describe(err.get("input")))


def _format_path(loc: tuple) -> str:
    """('skills', 'current', 0, 'skill') → 'skills.current[0].skill'."""
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path or "$"


def _expected(err: dict[str, Any]) -> str:
    """Lower-cased pydantic message without its 'Input should be' lead-in."""
    msg = str(err.get("msg", "valid value"))
    for prefix in ("Input should be ", "Input should have "):
        if msg.startswith(prefix):
            return msg[len(prefix):]
    return msg[:1].lower() + msg[1:]


def _describe(value: Any) -> str:
    if value is None:
        return "null"
    text = repr(value)
    if len(text) > _MAX_ACTUAL_CHARS:
        text = text[: _MAX_ACTUAL_CHARS - 3] + "..."
    return f"{type(value).__name__} {text}"
