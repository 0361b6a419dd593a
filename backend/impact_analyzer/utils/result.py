"""
Explicit success/failure values threaded through the analysis pipeline.

Each stage returns Ok(value) or Err(AnalysisError) so the failure kinds are
visible in signatures instead of travelling as exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union

from impact_analyzer.models.error_models import AnalysisError, ErrorKind, Violation

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    error: AnalysisError

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind


Result = Union[Ok[T], Err]


def fail(
    kind: ErrorKind,
    details: Optional[str] = None,
    *,
    violations: Optional[list[Violation]] = None,
    cleaned_text: Optional[str] = None,
) -> Err:
    """Shorthand for building an Err."""
    return Err(
        AnalysisError(
            kind=kind,
            details=details,
            violations=violations or [],
            cleaned_text=cleaned_text,
        )
    )
