"""
Base definitions for backend function wrappers.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from newsletter_wizard.runtime import CancelToken, FunctionInvoker, InvocationOptions


def to_payload(request: BaseModel | dict[str, Any]) -> dict[str, Any]:
    """Convert a request model (or plain dict) to the JSON body to send.

    Unset optional fields are left out, matching what the web client sends.
    """
    if isinstance(request, BaseModel):
        return request.model_dump(mode="json", exclude_none=True)
    return dict(request)


class FunctionGroup:
    """Group of related backend functions sharing one invoker."""

    def __init__(self, invoker: FunctionInvoker):
        self._invoker = invoker

    async def _anonymous(
        self,
        function_name: str,
        body: BaseModel | dict[str, Any],
        options: InvocationOptions | None = None,
        cancel_token: CancelToken | None = None,
    ) -> dict[str, Any]:
        return await self._invoker.invoke_anonymous(
            function_name, to_payload(body), options=options, cancel_token=cancel_token
        )

    async def _authenticated(
        self,
        function_name: str,
        body: BaseModel | dict[str, Any],
        options: InvocationOptions | None = None,
        cancel_token: CancelToken | None = None,
    ) -> dict[str, Any]:
        return await self._invoker.invoke_authenticated(
            function_name, to_payload(body), options=options, cancel_token=cancel_token
        )
