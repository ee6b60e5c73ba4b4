"""Unit tests for attempt classification."""

import pytest

from newsletter_wizard.runtime.classifier import (
    FailureCause,
    classify,
    parse_error_body,
)
from newsletter_wizard.runtime.errors import ERROR_MESSAGES, ApiError, ErrorKind
from newsletter_wizard.runtime.outcome import (
    HttpFailure,
    MalformedResponse,
    NetworkFailure,
    Success,
    TimeoutFailure,
)


class TestParseErrorBody:
    """Tests for the two accepted error body shapes."""

    def test_structured_shape(self):
        body = {"error": {"code": "GENERATION_FAILED", "message": "Model overloaded"}}
        assert parse_error_body(body) == ("GENERATION_FAILED", "Model overloaded")

    def test_structured_shape_without_code(self):
        assert parse_error_body({"error": {"message": "Invalid source"}}) == (None, "Invalid source")

    def test_legacy_error_string(self):
        assert parse_error_body({"error": "Workspace not found"}) == (None, "Workspace not found")

    def test_legacy_message_field(self):
        assert parse_error_body({"message": "Bad token"}) == (None, "Bad token")

    def test_non_dict_body(self):
        assert parse_error_body(None) == (None, None)
        assert parse_error_body(["oops"]) == (None, None)

    def test_ignores_non_string_values(self):
        assert parse_error_body({"error": {"code": 7, "message": None}}) == (None, None)


class TestClassifyTransportFailures:
    def test_network_error_is_retryable(self):
        result = classify(NetworkFailure(detail="ConnectError"))

        assert result.kind is ErrorKind.NETWORK_ERROR
        assert result.retryable is True
        assert result.cause is FailureCause.NETWORK
        assert result.message == ERROR_MESSAGES[ErrorKind.NETWORK_ERROR]

    def test_timeout_is_retryable(self):
        result = classify(TimeoutFailure(timeout_ms=50))

        assert result.kind is ErrorKind.TIMEOUT
        assert result.retryable is True
        assert result.cause is FailureCause.TIMEOUT

    def test_malformed_success_body_is_fatal(self):
        result = classify(MalformedResponse(status=200))

        assert result.kind is ErrorKind.UNKNOWN
        assert result.retryable is False
        assert result.status == 200

    def test_success_is_not_classified(self):
        with pytest.raises(ValueError):
            classify(Success(status=200, body={}))


class TestClassifyHttpFailures:
    def test_429_is_rate_limit(self):
        result = classify(HttpFailure(status=429, retry_after=7.0))

        assert result.kind is ErrorKind.RATE_LIMIT
        assert result.retryable is True
        assert result.cause is FailureCause.RATE_LIMITED
        assert result.retry_after == 7.0

    def test_429_ignores_body_code(self):
        result = classify(HttpFailure(status=429, body={"error": {"code": "PROCESSING_FAILED"}}))
        assert result.kind is ErrorKind.RATE_LIMIT

    def test_5xx_without_code_is_unknown_and_retryable(self):
        result = classify(HttpFailure(status=503))

        assert result.kind is ErrorKind.UNKNOWN
        assert result.retryable is True
        assert result.cause is FailureCause.SERVER_ERROR

    def test_5xx_keeps_server_code(self):
        body = {"error": {"code": "GENERATION_FAILED", "message": "LLM down"}}
        result = classify(HttpFailure(status=500, body=body))

        assert result.kind is ErrorKind.GENERATION_FAILED
        assert result.retryable is True
        assert result.message == ERROR_MESSAGES[ErrorKind.GENERATION_FAILED]

    @pytest.mark.parametrize("status", [400, 401, 403, 404, 409, 422])
    def test_4xx_is_not_retryable(self, status):
        result = classify(HttpFailure(status=status))

        assert result.retryable is False
        assert result.cause is FailureCause.CLIENT_ERROR
        assert result.status == status

    def test_4xx_uses_body_code(self):
        body = {"error": {"code": "PROCESSING_FAILED", "message": "Unsupported file"}}
        result = classify(HttpFailure(status=400, body=body))

        assert result.kind is ErrorKind.PROCESSING_FAILED
        assert result.server_code == "PROCESSING_FAILED"
        assert result.message == ERROR_MESSAGES[ErrorKind.PROCESSING_FAILED]

    def test_4xx_unrecognised_code_is_unknown_with_server_message(self):
        body = {"error": {"code": "INVALID_INPUT", "message": "Topic is required"}}
        result = classify(HttpFailure(status=400, body=body))

        assert result.kind is ErrorKind.UNKNOWN
        assert result.server_code == "INVALID_INPUT"
        assert result.message == "Topic is required"

    def test_legacy_body_uses_its_message(self):
        result = classify(HttpFailure(status=400, body={"error": "Confirmation required"}))

        assert result.kind is ErrorKind.UNKNOWN
        assert result.message == "Confirmation required"

    def test_is_deterministic(self):
        outcome = HttpFailure(status=502, body={"message": "upstream"})
        assert classify(outcome) == classify(outcome)


class TestToError:
    def test_builds_api_error(self):
        result = classify(HttpFailure(status=404, body={"error": "Not found"}))

        error = result.to_error(debug_id="req-1")

        assert isinstance(error, ApiError)
        assert error.code is ErrorKind.UNKNOWN
        assert error.message == "Not found"
        assert error.retryable is False
        assert error.status == 404
        assert error.debug_id == "req-1"
