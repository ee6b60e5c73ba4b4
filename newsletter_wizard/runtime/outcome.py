"""
Outcome of a single transport attempt.

Every attempt ends in exactly one of these values. The invoker never
inspects exceptions to decide what to do next; it hands the outcome to the
classifier and acts on the result.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Any, Mapping, Union


@dataclass(frozen=True)
class Success:
    """2xx response with a parsed JSON body."""

    status: int
    body: Any


@dataclass(frozen=True)
class NetworkFailure:
    """The request never reached the server (DNS, refused connection, reset)."""

    detail: str = ""


@dataclass(frozen=True)
class TimeoutFailure:
    """The deadline elapsed before a response arrived."""

    timeout_ms: int | None = None


@dataclass(frozen=True)
class HttpFailure:
    """Non-2xx response.

    body is the parsed JSON error body, or None when it could not be parsed.
    retry_after is the server's Retry-After header in seconds, if valid.
    """

    status: int
    body: Any = None
    retry_after: float | None = None


@dataclass(frozen=True)
class MalformedResponse:
    """2xx response whose body is not valid JSON."""

    status: int
    detail: str = ""


AttemptOutcome = Union[Success, NetworkFailure, TimeoutFailure, HttpFailure, MalformedResponse]


def parse_retry_after(value: str | None) -> float | None:
    """Parse a Retry-After header given in seconds.

    Args:
        value: Raw header value.

    Returns:
        Finite non-negative delay in seconds, or None otherwise.
    """
    if value is None:
        return None
    try:
        seconds = float(value.strip())
    except ValueError:
        return None
    if not math.isfinite(seconds) or seconds < 0:
        return None
    return seconds


def outcome_from_response(
    status: int,
    content: bytes,
    headers: Mapping[str, str] | None = None,
) -> AttemptOutcome:
    """Build the outcome for a response that arrived before the deadline.

    Args:
        status: HTTP status code.
        content: Raw response body.
        headers: Response headers (case-insensitive mapping preferred).

    Returns:
        Success, HttpFailure or MalformedResponse.
    """
    headers = headers or {}
    body: Any = None
    error: str | None = None
    if content:
        try:
            body = json.loads(content)
        except ValueError as e:  # includes JSONDecodeError and UnicodeDecodeError
            error = str(e)

    if 200 <= status < 300:
        if error is not None:
            return MalformedResponse(status=status, detail=error)
        # 204 and other empty bodies come back as None
        return Success(status=status, body=body)

    retry_after = parse_retry_after(headers.get("Retry-After") or headers.get("retry-after"))
    return HttpFailure(status=status, body=body, retry_after=retry_after)
