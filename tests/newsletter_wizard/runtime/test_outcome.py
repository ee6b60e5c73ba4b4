"""Unit tests for building attempt outcomes from responses."""

import httpx
import pytest

from newsletter_wizard.runtime.outcome import (
    HttpFailure,
    MalformedResponse,
    Success,
    outcome_from_response,
    parse_retry_after,
)


class TestParseRetryAfter:
    def test_integer_seconds(self):
        assert parse_retry_after("7") == 7.0

    def test_fractional_seconds(self):
        assert parse_retry_after(" 1.5 ") == 1.5

    def test_missing(self):
        assert parse_retry_after(None) is None

    def test_http_date_is_ignored(self):
        assert parse_retry_after("Wed, 21 Oct 2015 07:28:00 GMT") is None

    def test_negative_is_ignored(self):
        assert parse_retry_after("-3") is None

    def test_nan_is_ignored(self):
        assert parse_retry_after("nan") is None

    @pytest.mark.parametrize("value", ["inf", "Infinity", "-inf", "1e400"])
    def test_infinite_is_ignored(self, value):
        assert parse_retry_after(value) is None


class TestOutcomeFromResponse:
    def test_success_with_json(self):
        outcome = outcome_from_response(200, b'{"results": []}')
        assert outcome == Success(status=200, body={"results": []})

    def test_empty_success_body_is_none(self):
        assert outcome_from_response(204, b"") == Success(status=204, body=None)

    def test_malformed_success_body(self):
        outcome = outcome_from_response(200, b"<html>gateway</html>")
        assert isinstance(outcome, MalformedResponse)
        assert outcome.status == 200

    def test_error_with_json_body(self):
        outcome = outcome_from_response(400, b'{"error": {"code": "PROCESSING_FAILED"}}')
        assert outcome == HttpFailure(
            status=400, body={"error": {"code": "PROCESSING_FAILED"}}, retry_after=None
        )

    def test_error_with_unparseable_body(self):
        outcome = outcome_from_response(502, b"Bad Gateway")
        assert outcome == HttpFailure(status=502, body=None, retry_after=None)

    def test_reads_retry_after_header(self):
        headers = httpx.Headers({"retry-after": "7"})
        outcome = outcome_from_response(429, b"{}", headers)
        assert isinstance(outcome, HttpFailure)
        assert outcome.retry_after == 7.0

    def test_reads_retry_after_from_plain_dict(self):
        outcome = outcome_from_response(429, b"", {"Retry-After": "2"})
        assert outcome.retry_after == 2.0
