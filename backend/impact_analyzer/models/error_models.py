from enum import Enum
from typing import Optional

from pydantic import BaseModel


class ErrorKind(str, Enum):
    """Terminal failure kinds of a single analysis request."""

    INVALID_QUERY = "invalid_query"
    PROVIDER_ERROR = "provider_error"
    PARSE_FAILURE = "parse_failure"
    VALIDATION_FAILURE = "validation_failure"
    PERSISTENCE_ERROR = "persistence_error"


# What the person submitting the query should do next: fix input, retry, or wait.
USER_MESSAGES = {
    ErrorKind.INVALID_QUERY: "Please check the job title and industry and try again.",
    ErrorKind.PROVIDER_ERROR: "The analysis service is unavailable right now. Please wait a few minutes and try again.",
    ErrorKind.PARSE_FAILURE: "The AI response could not be read. Please try again.",
    ErrorKind.VALIDATION_FAILURE: "The AI response was incomplete. Please try again or rephrase the job title.",
    ErrorKind.PERSISTENCE_ERROR: "The analysis finished but could not be saved. Please try again later.",
}


class Violation(BaseModel):
    """A single schema violation in a provider response."""

    path: str
    expected: str
    actual: str

    def __str__(self) -> str:
        return f"{self.path}: expected {self.expected}, got {self.actual}"


class AnalysisError(BaseModel):
    """Failure value carried by Err results."""

    kind: ErrorKind
    details: Optional[str] = None
    violations: list[Violation] = []
    cleaned_text: Optional[str] = None  # diagnostics only, never sent to clients

    @property
    def message(self) -> str:
        return USER_MESSAGES[self.kind]

    def to_response_body(self) -> dict:
        body: dict = {"error": self.message, "kind": self.kind.value}
        if self.violations:
            body["details"] = "; ".join(str(v) for v in self.violations)
        elif self.details:
            body["details"] = self.details
        return body


class ErrorResponse(BaseModel):
    """Error body returned by the API."""

    error: str
    kind: Optional[str] = None
    details: Optional[str] = None
