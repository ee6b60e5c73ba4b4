"""
Invocation request and options.

InvocationRequest describes one logical call: which function, what payload,
which credential and how much retry/timeout budget it has. It is created
fresh by the caller and never mutated.
"""

from __future__ import annotations

import json
import uuid
from typing import Any

from pydantic import BaseModel, Field, field_validator

from .auth import AuthMode


class InvocationOptions(BaseModel):
    """Retry and timeout budget for one invocation.

    Attributes:
        max_retries: Maximum number of attempts (including the first).
            Values below 1 are treated as 1.
        timeout_ms: Per-attempt deadline in milliseconds.
    """

    max_retries: int = 3
    timeout_ms: int = Field(default=30_000, gt=0)

    model_config = {"frozen": True}

    @field_validator("max_retries")
    @classmethod
    def _at_least_one_attempt(cls, value: int) -> int:
        return max(value, 1)

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000


class InvocationRequest(BaseModel):
    """One logical call to a remote function.

    Attributes:
        function_name: Name of the deployed function (e.g. "rag-search").
        body: JSON-serialisable payload, sent verbatim.
        auth_mode: Anonymous service key or the user's session token.
        options: Retry/timeout budget.
        request_id: Correlation id used in log lines.
    """

    function_name: str = Field(min_length=1)
    body: Any = Field(default_factory=dict)
    auth_mode: AuthMode = AuthMode.ANONYMOUS
    options: InvocationOptions = Field(default_factory=InvocationOptions)
    request_id: str = Field(default_factory=lambda: str(uuid.uuid4())[:8])

    model_config = {"frozen": True}

    @field_validator("function_name")
    @classmethod
    def _strip_slashes(cls, value: str) -> str:
        name = value.strip().strip("/")
        if not name:
            raise ValueError("function_name must not be empty")
        return name

    def encode_body(self) -> bytes:
        """Encode the payload once; every attempt sends these exact bytes.

        Raises:
            TypeError: If the body is not JSON-serialisable.
            ValueError: If the body contains NaN/Infinity or circular references.
        """
        return json.dumps(self.body, separators=(",", ":"), allow_nan=False).encode("utf-8")
