"""
Tests for the failure envelope.

Every user-visible response passes through finalize_response(); terminal
pipeline errors render as known failures with their own status codes.
"""

import gc
import json
import weakref
from unittest.mock import MagicMock

import pytest

from mtgassistant.api.uploads import LogTooLargeError
from mtgassistant.main import known_error_handler, unknown_error_handler
from mtgassistant.models.failure import (
    STANDARD_MESSAGES,
    STANDARD_SUGGESTIONS,
    ApiResponse,
    FailureDetail,
    FailureKind,
    IndexBuildError,
    NoOccurrenceError,
    OutcomeType,
    TransportError,
    create_known_failure_from,
    create_success,
    create_unknown_failure,
    finalize_response,
    is_finalized,
)
from mtgassistant.models.snapshots import EventKind


class TestFinalizeResponse:
    def test_success_response_is_finalized(self) -> None:
        response = ApiResponse(outcome=OutcomeType.SUCCESS, data={"key": "value"})
        finalized = finalize_response(response)

        assert is_finalized(finalized)

    def test_unfinalized_response_not_marked(self) -> None:
        response = ApiResponse(outcome=OutcomeType.SUCCESS, data={"key": "value"})

        assert not is_finalized(response)

    def test_success_with_failure_raises(self) -> None:
        response = ApiResponse(
            outcome=OutcomeType.SUCCESS,
            data={"key": "value"},
            failure=FailureDetail(kind=FailureKind.UNKNOWN, message="oops"),
        )

        with pytest.raises(ValueError, match="must not have failure"):
            finalize_response(response)

    def test_failure_without_details_raises(self) -> None:
        response = ApiResponse(outcome=OutcomeType.KNOWN_FAILURE, failure=None)

        with pytest.raises(ValueError, match="must have failure details"):
            finalize_response(response)

    def test_new_response_is_never_finalized(self) -> None:
        """Discarded finalized responses do not mark later ones."""
        for _ in range(100):
            create_success({"key": "value"})

        response = ApiResponse(outcome=OutcomeType.SUCCESS, data={"key": "value"})

        assert not is_finalized(response)

    def test_finalizing_does_not_retain_response(self) -> None:
        response = create_success({"key": "value"})
        ref = weakref.ref(response)

        del response
        gc.collect()

        assert ref() is None

    def test_create_success_is_finalized(self) -> None:
        response = create_success({"cards": []})

        assert is_finalized(response)
        assert response.data == {"cards": []}


class TestUnknownFailure:
    def test_uses_standard_message(self) -> None:
        response = create_unknown_failure(ValueError("secret internals"))

        assert response.outcome == OutcomeType.UNKNOWN_FAILURE
        assert response.failure is not None
        assert response.failure.message == STANDARD_MESSAGES[OutcomeType.UNKNOWN_FAILURE]
        assert response.failure.suggestion == STANDARD_SUGGESTIONS[OutcomeType.UNKNOWN_FAILURE]

    def test_detail_is_type_only(self) -> None:
        response = create_unknown_failure(ValueError("secret internals"))

        assert response.failure is not None
        assert response.failure.detail == "ValueError"


class TestKnownErrors:
    def test_transport_error(self) -> None:
        error = TransportError("permission denied")

        assert error.kind == FailureKind.TRANSPORT_ERROR
        assert error.status_code == 400
        assert error.detail == "permission denied"

    def test_no_occurrence_error(self) -> None:
        error = NoOccurrenceError(EventKind.BOOSTER_OPEN.value)

        assert error.kind == FailureKind.EMPTY_RESULT
        assert error.status_code == 422
        assert error.message == "No booster open data found in the log."
        assert error.event_kind == "booster_open"

    def test_index_build_error(self) -> None:
        error = IndexBuildError("/data", "no card records found")

        assert error.status_code == 503
        assert error.detail == "/data: no card records found"

    def test_log_too_large_error(self) -> None:
        error = LogTooLargeError(1024)

        assert error.kind == FailureKind.PAYLOAD_TOO_LARGE
        assert error.status_code == 413

    def test_known_failure_from_error(self) -> None:
        response = create_known_failure_from(NoOccurrenceError(EventKind.COLLECTION.value))

        assert is_finalized(response)
        assert response.outcome == OutcomeType.KNOWN_FAILURE
        assert response.failure is not None
        assert response.failure.kind == FailureKind.EMPTY_RESULT
        assert response.failure.suggestion


class TestExceptionHandlers:
    async def test_known_error_keeps_status(self) -> None:
        response = await known_error_handler(MagicMock(), IndexBuildError("/data", "missing"))

        assert response.status_code == 503
        body = json.loads(response.body)
        assert body["outcome"] == "known_failure"
        assert body["failure"]["kind"] == "service_unavailable"

    async def test_unexpected_error_is_unknown_failure(self) -> None:
        response = await unknown_error_handler(MagicMock(), RuntimeError("boom"))

        assert response.status_code == 500
        body = json.loads(response.body)
        assert body["outcome"] == "unknown_failure"
        assert body["failure"]["detail"] == "RuntimeError"
        assert "boom" not in response.body.decode()
