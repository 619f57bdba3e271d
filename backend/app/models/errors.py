"""Error types for the geospatial pipeline and the HTTP envelope.

Pipeline code raises ``PipelineError`` subclasses. Their ``user_message``
is safe to show; the underlying cause is kept only as ``__cause__``.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ErrorCode(str, Enum):
    """Machine-readable error codes returned by the API."""

    NOT_FOUND = "NOT_FOUND"
    NETWORK_ERROR = "NETWORK_ERROR"
    PARSE_ERROR = "PARSE_ERROR"
    ANALYSIS_FAILED = "ANALYSIS_FAILED"
    ROUTING_FAILED = "ROUTING_FAILED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    API_ERROR = "API_ERROR"


class AppError(BaseModel):
    """Error payload sent to clients."""

    code: ErrorCode
    message: str
    user_message: str
    details: Optional[dict] = Field(None, description="Extra debugging context")


class PipelineError(Exception):
    """Base class for failures surfaced by the pipeline."""

    code = ErrorCode.API_ERROR
    default_message = "Something went wrong. Please try again."

    def __init__(self, user_message: str | None = None) -> None:
        self.user_message = user_message or self.default_message
        super().__init__(self.user_message)

    def to_app_error(self) -> AppError:
        return AppError(code=self.code, message=str(self), user_message=self.user_message)


class NotFound(PipelineError):
    """No source produced a usable result."""

    code = ErrorCode.NOT_FOUND
    default_message = "Place not found. Try a more specific name."


class NetworkFailure(PipelineError):
    """A request could not complete."""

    code = ErrorCode.NETWORK_ERROR
    default_message = "The upstream service could not be reached."


class ParseFailure(PipelineError):
    """A response had an unexpected shape."""

    code = ErrorCode.PARSE_ERROR
    default_message = "The upstream service returned an unexpected response."


class AnalysisFailed(PipelineError):
    """Nearby-place analysis could not be produced."""

    code = ErrorCode.ANALYSIS_FAILED
    default_message = "Unable to analyze this area right now."


class RoutingFailed(PipelineError):
    """No viable route could be produced."""

    code = ErrorCode.ROUTING_FAILED
    default_message = "Unable to calculate a route."
