"""
Classification of failed attempts.

classify() is a pure function from AttemptOutcome to ErrorClassification.
It decides the ErrorKind shown to callers, whether the invoker may try
again, and which failure cause drives the backoff delay.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .errors import ApiError, ErrorKind, user_message
from .outcome import (
    AttemptOutcome,
    HttpFailure,
    MalformedResponse,
    NetworkFailure,
    Success,
    TimeoutFailure,
)


class FailureCause(str, Enum):
    """What went wrong on the wire, independent of the reported ErrorKind."""

    NETWORK = "network"
    TIMEOUT = "timeout"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    CLIENT_ERROR = "client_error"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class ErrorClassification:
    """Classified failure of one attempt.

    Attributes:
        kind: Error kind surfaced to callers.
        retryable: Whether the invoker may make another attempt.
        message: User-facing message.
        cause: Wire-level failure cause, used to pick the backoff delay.
        status: HTTP status, if a response was received.
        retry_after: Server-advertised delay in seconds (429 only).
        server_code: Raw code from the error body, if any.
    """

    kind: ErrorKind
    retryable: bool
    message: str
    cause: FailureCause
    status: int | None = None
    retry_after: float | None = None
    server_code: str | None = None

    def to_error(self, debug_id: str | None = None) -> ApiError:
        """Build the ApiError reported to the caller for this classification."""
        return ApiError(
            self.message,
            code=self.kind,
            retryable=self.retryable,
            status=self.status,
            server_code=self.server_code,
            debug_id=debug_id,
        )


def parse_error_body(body: Any) -> tuple[str | None, str | None]:
    """Extract (code, message) from an error response body.

    Two shapes are accepted:
        {"error": {"code": "...", "message": "..."}}
        {"error": "..."} or {"message": "..."}  (legacy)

    The legacy shape never carries a code.

    Args:
        body: Parsed JSON body, or None.

    Returns:
        Tuple of (code, message); either may be None.
    """
    if not isinstance(body, dict):
        return None, None

    error = body.get("error")
    if isinstance(error, dict):
        code = error.get("code")
        message = error.get("message")
        return (
            code if isinstance(code, str) and code else None,
            message if isinstance(message, str) and message else None,
        )

    # Legacy shape
    if isinstance(error, str) and error:
        return None, error
    message = body.get("message")
    if isinstance(message, str) and message:
        return None, message
    return None, None


def classify(outcome: AttemptOutcome) -> ErrorClassification:
    """Classify a failed attempt.

    Args:
        outcome: Outcome of the attempt. Must not be Success.

    Returns:
        The classification for the outcome.

    Raises:
        ValueError: If called with a Success outcome.
    """
    if isinstance(outcome, Success):
        raise ValueError("Successful outcomes are not classified")

    if isinstance(outcome, NetworkFailure):
        return _for_kind(ErrorKind.NETWORK_ERROR, True, FailureCause.NETWORK)

    if isinstance(outcome, TimeoutFailure):
        return _for_kind(ErrorKind.TIMEOUT, True, FailureCause.TIMEOUT)

    if isinstance(outcome, MalformedResponse):
        return _for_kind(
            ErrorKind.UNKNOWN, False, FailureCause.MALFORMED, status=outcome.status
        )

    if isinstance(outcome, HttpFailure):
        return _classify_http(outcome)

    raise TypeError(f"Unsupported attempt outcome: {outcome!r}")


def _classify_http(outcome: HttpFailure) -> ErrorClassification:
    server_code, server_message = parse_error_body(outcome.body)

    if outcome.status == 429:
        return ErrorClassification(
            kind=ErrorKind.RATE_LIMIT,
            retryable=True,
            message=user_message(ErrorKind.RATE_LIMIT),
            cause=FailureCause.RATE_LIMITED,
            status=429,
            retry_after=outcome.retry_after,
            server_code=server_code,
        )

    kind = ErrorKind.from_code(server_code)
    if outcome.status >= 500:
        retryable, cause = True, FailureCause.SERVER_ERROR
    else:
        retryable, cause = False, FailureCause.CLIENT_ERROR

    return ErrorClassification(
        kind=kind,
        retryable=retryable,
        message=user_message(kind, server_message),
        cause=cause,
        status=outcome.status,
        server_code=server_code,
    )


def _for_kind(
    kind: ErrorKind,
    retryable: bool,
    cause: FailureCause,
    status: int | None = None,
) -> ErrorClassification:
    return ErrorClassification(
        kind=kind,
        retryable=retryable,
        message=user_message(kind),
        cause=cause,
        status=status,
    )
