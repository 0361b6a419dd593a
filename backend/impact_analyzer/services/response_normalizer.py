"""
Response Normalizer — turn a raw LLM completion into a parsed JSON value.

Providers do not always honour JSON mode. The completion may arrive wrapped in
markdown fences, with trailing commas, or cut off mid-object when the token
limit is reached. Repairs are purely textual:

  1. parse directly; valid JSON is returned untouched
  2. unwrap a ``` / ```json fenced block and parse again
  3. drop prose before the first bracket, remove trailing/duplicate commas,
     fix punctuation between adjacent objects
  4. scan with a string-aware depth counter and cut back to the last point
     where depth returned to zero
  5. parse again, or fail

Missing closing brackets are never invented: a lone truncated object is a
parse failure, not a partial result.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from impact_analyzer.models.error_models import ErrorKind
from impact_analyzer.utils.result import Ok, Result, fail

logger = logging.getLogger(__name__)

_OPEN_FENCE_RE = re.compile(r"^[ \t]*```(?:json)?", re.IGNORECASE | re.MULTILINE)
_CLOSE_FENCE_RE = re.compile(r"^[ \t]*```[ \t]*$|```[ \t]*\Z", re.MULTILINE)

# (pattern, replacement) applied in order on the failure path
_REPAIRS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r",(\s*[}\]])"), r"\1"),  # trailing comma before a closer
    (re.compile(r",\s*,"), ","),          # duplicate commas
    (re.compile(r"}\s*{"), "},{"),        # adjacent objects
    (re.compile(r"]\s*{"), "],{"),
    (re.compile(r"}\s*]"), "}]"),
]


# ── Public API ───────────────────────────────────────────────────────────────


def normalize_response(raw: str) -> Result[Any]:
    """Parse a completion into JSON, repairing common LLM formatting drift."""
    try:
        _, value = _clean_and_parse(raw)
    except ValueError as e:
        logger.warning(f"Unrecoverable completion ({len(raw or '')} chars): {e}")
        return fail(
            ErrorKind.PARSE_FAILURE,
            str(e),
            cleaned_text=_best_effort(raw),
        )
    return Ok(value)


def clean_json_text(raw: str) -> str:
    """
    Return JSON text that json.loads accepts.

    Already-valid input comes back unchanged apart from surrounding
    whitespace. Raises ValueError when no repair produces valid JSON.
    """
    text, _ = _clean_and_parse(raw)
    return text


def strip_code_fences(text: str) -> str:
    """
    Unwrap a markdown fenced block.

    Only a fence that opens a line counts; backticks inside JSON strings are
    left alone. Text before the opening fence and after the closing one is
    dropped.
    """
    text = text.strip()
    opening = _OPEN_FENCE_RE.search(text)
    if not opening:
        return text

    body = text[opening.end():]
    closings = list(_CLOSE_FENCE_RE.finditer(body))
    if closings:
        body = body[: closings[-1].start()]
    return body.strip()


# ── Parsing ──────────────────────────────────────────────────────────────────


def _clean_and_parse(raw: str | None) -> tuple[str, Any]:
    text = (raw or "").strip()
    if not text:
        raise ValueError("Completion is empty")

    ok, value = _try_parse(text)
    if ok:
        return text, value

    unfenced = strip_code_fences(text)
    if not unfenced:
        raise ValueError("Completion is empty")
    if unfenced != text:
        ok, value = _try_parse(unfenced)
        if ok:
            return unfenced, value

    logger.info("Completion is not valid JSON, attempting repair")
    repaired = _repair(unfenced)

    ok, value = _try_parse(repaired)
    if ok:
        logger.info(f"Repaired completion ({len(text)} → {len(repaired)} chars)")
        return repaired, value

    raise ValueError("Unable to repair malformed JSON response")


def _try_parse(text: str) -> tuple[bool, Any]:
    """(True, value) when text is valid JSON, else (False, None)."""
    try:
        return True, json.loads(text)
    except (ValueError, RecursionError):
        # RecursionError: deeply nested input overflows the decoder
        return False, None


# ── Repair Steps ─────────────────────────────────────────────────────────────


def _repair(text: str) -> str:
    start = _first_bracket(text)
    if start == -1:
        return text
    text = text[start:]

    for pattern, replacement in _REPAIRS:
        text = pattern.sub(replacement, text)

    return _truncate_to_balanced(text)


def _first_bracket(text: str) -> int:
    positions = [i for i in (text.find("{"), text.find("[")) if i != -1]
    return min(positions) if positions else -1


def _truncate_to_balanced(text: str) -> str:
    """Cut back to the last index where bracket depth returned to zero."""
    depth = 0
    in_string = False
    escape = False
    last_balanced = -1

    for i, char in enumerate(text):
        if escape:
            escape = False
            continue
        if char == "\\":
            escape = True
            continue
        if char == '"':
            in_string = not in_string
            continue
        if in_string:
            continue

        if char in "{[":
            depth += 1
        elif char in "}]":
            depth -= 1
            if depth == 0:
                last_balanced = i

    if last_balanced == -1:
        return text
    if depth != 0 or text[last_balanced + 1:].strip():
        return text[: last_balanced + 1]
    return text


def _best_effort(raw: str | None) -> str:
    """Cleaned text kept for diagnostics on failure."""
    text = strip_code_fences(raw or "")
    return _repair(text) if text else ""
