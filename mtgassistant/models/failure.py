"""
Failure Explanation Envelope.

Every user-visible outcome of the web service is wrapped in an
ApiResponse and classified as success, known failure, or unknown failure.
Terminal errors raised by the extraction pipeline derive from KnownError
so that callers can render them as a single explained message.

Error taxonomy:
- TransportError: the log stream could not be read. Fatal.
- NoOccurrenceError: a fully read log held no event of a required kind.
- IndexBuildError: the card data directory could not be indexed. Fatal,
  no partial index is published.

Malformed payloads for a single occurrence are not terminal; they are
raised as DecodeError inside the decoders and skipped by the scanner.
"""

from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field, PrivateAttr


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input failures
    INVALID_INPUT = "invalid_input"
    PAYLOAD_TOO_LARGE = "payload_too_large"

    # Resource failures
    NOT_FOUND = "not_found"
    EMPTY_RESULT = "empty_result"

    # Service failures
    TRANSPORT_ERROR = "transport_error"
    SERVICE_UNAVAILABLE = "service_unavailable"

    # Unknown
    UNKNOWN = "unknown"


class OutcomeType(str, Enum):
    """High-level outcome classification."""

    SUCCESS = "success"
    KNOWN_FAILURE = "known_failure"
    UNKNOWN_FAILURE = "unknown_failure"


T = TypeVar("T")


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )
    suggestion: str | None = Field(
        default=None,
        description="Suggested action for the user",
    )


class ApiResponse(BaseModel, Generic[T]):
    """
    Universal response envelope for all API endpoints.

    Every response is classified into one of the outcome types,
    ensuring no failure reaches the user unexplained.
    """

    outcome: OutcomeType = Field(
        ...,
        description="High-level classification of the result",
    )
    data: T | None = Field(
        default=None,
        description="Response data (present on success)",
    )
    failure: FailureDetail | None = Field(
        default=None,
        description="Failure details (present on non-success)",
    )

    # Set only by finalize_response()
    _finalized: bool = PrivateAttr(default=False)

    @classmethod
    def known_failure(
        cls,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ) -> "ApiResponse[Any]":
        """
        Create a known failure response.

        Use when the system knows exactly why the operation failed.
        Example: no collection in the uploaded log, unreadable data directory.
        """
        return cls(
            outcome=OutcomeType.KNOWN_FAILURE,
            failure=FailureDetail(
                kind=kind,
                message=message,
                detail=detail,
                suggestion=suggestion,
            ),
        )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ApiResponse[Any]:
        """Convert to an ApiResponse."""
        return ApiResponse.known_failure(
            kind=self.kind,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
        )


class TransportError(KnownError):
    """Raised when the log stream cannot be read at all."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(
            kind=FailureKind.TRANSPORT_ERROR,
            message="The log file could not be read.",
            detail=reason,
            suggestion="Check that the log file exists and is readable.",
            status_code=400,
        )


class NoOccurrenceError(KnownError):
    """
    Raised when a fully scanned log holds no event of a required kind.

    Only callers that need at least one snapshot raise this; list-returning
    finders report the same situation as an empty list.
    """

    def __init__(self, event_kind: str):
        self.event_kind = event_kind
        super().__init__(
            kind=FailureKind.EMPTY_RESULT,
            message=f"No {event_kind.replace('_', ' ')} data found in the log.",
            detail=f"event kind: {event_kind}",
            suggestion=(
                "Make sure detailed logs are enabled in the Arena client "
                "and restart it before exporting."
            ),
            status_code=422,
        )


class IndexBuildError(KnownError):
    """Raised when the card data directory cannot be turned into an index."""

    def __init__(self, data_dir: str, reason: str):
        self.data_dir = data_dir
        self.reason = reason
        super().__init__(
            kind=FailureKind.SERVICE_UNAVAILABLE,
            message="The card database could not be built.",
            detail=f"{data_dir}: {reason}",
            suggestion="Point the data directory at the Arena Downloads/Data folder.",
            status_code=503,
        )


# =============================================================================
# FAILURE AUTHORITY BOUNDARY
# =============================================================================
#
# All user-visible responses pass through finalize_response().
#
# =============================================================================


STANDARD_MESSAGES: dict[OutcomeType, str] = {
    OutcomeType.UNKNOWN_FAILURE: (
        "I failed and I don't know why. Try re-uploading the log or retrying."
    ),
}

STANDARD_SUGGESTIONS: dict[OutcomeType, str] = {
    OutcomeType.UNKNOWN_FAILURE: "If this persists, please report the issue.",
}


def finalize_response(response: ApiResponse[Any]) -> ApiResponse[Any]:
    """
    Finalize a response through the authority boundary.

    Args:
        response: The ApiResponse to finalize

    Returns:
        The same response, marked as having passed through the boundary

    Raises:
        ValueError: If response structure is invalid
    """
    if response.outcome == OutcomeType.SUCCESS:
        if response.failure is not None:
            raise ValueError("Success response must not have failure details")
    else:
        if response.failure is None:
            raise ValueError(f"{response.outcome.value} response must have failure details")

    response._finalized = True

    return response


def is_finalized(response: ApiResponse[Any]) -> bool:
    """Check if a response has passed through the authority boundary."""
    return response._finalized


def create_known_failure_from(error: KnownError) -> ApiResponse[Any]:
    """Create a finalized known failure response from a KnownError."""
    return finalize_response(error.to_response())


def create_unknown_failure(exception: Exception) -> ApiResponse[Any]:
    """
    Create an unknown failure response from an exception.

    The message is fixed and cannot be customized.
    """
    response: ApiResponse[Any] = ApiResponse(
        outcome=OutcomeType.UNKNOWN_FAILURE,
        failure=FailureDetail(
            kind=FailureKind.UNKNOWN,
            message=STANDARD_MESSAGES[OutcomeType.UNKNOWN_FAILURE],
            detail=type(exception).__name__,
            suggestion=STANDARD_SUGGESTIONS[OutcomeType.UNKNOWN_FAILURE],
        ),
    )

    return finalize_response(response)


def create_success(data: T) -> ApiResponse[T]:
    """
    Create a success response.

    Args:
        data: The response data

    Returns:
        A finalized success response
    """
    response = ApiResponse[T](outcome=OutcomeType.SUCCESS, data=data)
    return finalize_response(response)
