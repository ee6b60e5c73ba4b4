"""
Error taxonomy for remote function invocation.

ApiError is the single exception type callers ever see from the runtime.
Its code is one of ErrorKind and its message comes from a closed table of
user-facing messages, so UI code can render it directly.
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Machine-readable failure categories surfaced to callers."""

    RATE_LIMIT = "RATE_LIMIT"
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT = "TIMEOUT"
    AUTH_ERROR = "AUTH_ERROR"
    PROCESSING_FAILED = "PROCESSING_FAILED"
    GENERATION_FAILED = "GENERATION_FAILED"
    CANCELLED = "CANCELLED"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_code(cls, code: Any) -> "ErrorKind":
        """Map a server-reported code onto the taxonomy.

        Args:
            code: Raw code from an error body. May be missing or not a string.

        Returns:
            The matching ErrorKind, or UNKNOWN for anything unrecognised.
        """
        if isinstance(code, str):
            try:
                return cls(code)
            except ValueError:
                pass
        return cls.UNKNOWN


ERROR_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.RATE_LIMIT: "Too many requests. Please wait a moment and try again.",
    ErrorKind.NETWORK_ERROR: "Network connection failed. Please check your internet connection.",
    ErrorKind.TIMEOUT: "The request took too long. Please try again.",
    ErrorKind.AUTH_ERROR: "Authentication failed. Please log in again.",
    ErrorKind.PROCESSING_FAILED: "Processing failed. Please check your input and try again.",
    ErrorKind.GENERATION_FAILED: "Content generation failed. Please try with different input.",
    ErrorKind.CANCELLED: "The request was cancelled.",
    ErrorKind.UNKNOWN: "An unexpected error occurred. Please try again.",
}


def user_message(kind: ErrorKind | str | None, server_message: str | None = None) -> str:
    """Look up the user-facing message for an error kind.

    UNKNOWN has no specific wording of its own, so a message supplied by the
    server is preferred over the generic text in that case.

    Args:
        kind: Error kind (or raw code string).
        server_message: Optional message taken from the error body.

    Returns:
        Message safe to show to an end user.
    """
    resolved = ErrorKind.from_code(kind.value if isinstance(kind, ErrorKind) else kind)
    if resolved is ErrorKind.UNKNOWN and server_message:
        return server_message
    return ERROR_MESSAGES.get(resolved, ERROR_MESSAGES[ErrorKind.UNKNOWN])


class ApiError(Exception):
    """Failure of a remote function invocation.

    Attributes:
        code: ErrorKind for programmatic branching (e.g. re-login on AUTH_ERROR).
        message: Human-readable message safe for display.
        retryable: Whether offering a manual retry makes sense.
        status: HTTP status of the last attempt, if a response was received.
        server_code: Raw error code reported by the server, if any.
        cause: Underlying exception, if any.
        debug_id: Identifier for correlating logs with a support ticket.
    """

    def __init__(
        self,
        message: str,
        code: ErrorKind = ErrorKind.UNKNOWN,
        retryable: bool = False,
        status: int | None = None,
        server_code: str | None = None,
        cause: BaseException | None = None,
        debug_id: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.retryable = retryable
        self.status = status
        self.server_code = server_code
        self.cause = cause
        self.debug_id = debug_id or str(uuid.uuid4())[:8]

    @classmethod
    def of(cls, kind: ErrorKind, **kwargs: Any) -> "ApiError":
        """Build an error for a kind using its default message and retryability."""
        kwargs.setdefault("retryable", kind in RETRYABLE_KINDS)
        return cls(ERROR_MESSAGES[kind], code=kind, **kwargs)

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"ApiError(code={self.code.value!r}, "
            f"message={self.message!r}, "
            f"retryable={self.retryable}, "
            f"status={self.status!r}, "
            f"debug_id={self.debug_id!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary for UI payloads.

        Returns:
            Dictionary with code, message, retryable flag and debug id.
        """
        return {
            "code": self.code.value,
            "message": self.message,
            "retryable": self.retryable,
            "debug_id": self.debug_id,
        }


RETRYABLE_KINDS = frozenset(
    {ErrorKind.RATE_LIMIT, ErrorKind.NETWORK_ERROR, ErrorKind.TIMEOUT}
)
