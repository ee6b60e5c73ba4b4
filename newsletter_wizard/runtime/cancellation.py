"""
Cancellation primitives for the invocation loop.

A CancelToken lets code outside an invocation (e.g. a view that was closed)
stop it. run_until() races an awaitable against a deadline and a token,
cancelling the awaitable when either fires, so both in-flight requests and
backoff waits can be interrupted.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Awaitable, TypeVar

from loguru import logger

T = TypeVar("T")


class InvocationCancelled(Exception):
    """Raised by run_until() when its CancelToken fires."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class DeadlineExceeded(Exception):
    """Raised by run_until() when its deadline elapses."""


class CancelToken:
    """One-shot external cancellation signal.

    Example:
        token = CancelToken()
        task = asyncio.create_task(invoker.invoke_anonymous("rag-search", body, cancel_token=token))
        token.cancel("view closed")
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self.reason: str | None = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str = "cancelled") -> None:
        """Signal cancellation. Only the first reason is kept."""
        if not self._event.is_set():
            self.reason = reason
            self._event.set()

    async def wait(self) -> None:
        """Wait until the token is cancelled."""
        await self._event.wait()

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise InvocationCancelled(self.reason or "cancelled")


async def run_until(
    aw: Awaitable[T],
    timeout: float | None = None,
    token: CancelToken | None = None,
) -> T:
    """Await `aw`, cancelling it if the deadline elapses or the token fires.

    The awaitable is always cancelled and awaited before this returns or
    raises, so no work is left running in the background.

    Args:
        aw: Coroutine or future to run.
        timeout: Deadline in seconds, or None for no deadline.
        token: Optional external cancellation token.

    Returns:
        The result of `aw`.

    Raises:
        DeadlineExceeded: If the deadline elapsed first.
        InvocationCancelled: If the token fired first.
    """
    if token is not None and token.cancelled:
        if inspect.iscoroutine(aw):
            aw.close()
        token.raise_if_cancelled()

    task = asyncio.ensure_future(aw)
    waiters: set[asyncio.Future] = {task}
    token_waiter: asyncio.Future | None = None
    if token is not None:
        token_waiter = asyncio.ensure_future(token.wait())
        waiters.add(token_waiter)

    try:
        done, _ = await asyncio.wait(
            waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED
        )
    except asyncio.CancelledError:
        # Outer task cancelled: take the inner work down with it
        await _cancel_and_wait(task)
        raise
    finally:
        if token_waiter is not None and not token_waiter.done():
            token_waiter.cancel()

    if task in done:
        return task.result()

    await _cancel_and_wait(task)
    if token_waiter is not None and token_waiter in done:
        raise InvocationCancelled(token.reason or "cancelled")
    raise DeadlineExceeded()


async def _cancel_and_wait(task: asyncio.Future) -> None:
    if task.done():
        return
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        # Expected from the inner task; re-raise only if we were cancelled too
        current = asyncio.current_task()
        if current is not None and current.cancelling():
            raise
    except Exception as e:
        # The attempt is already abandoned, a late failure changes nothing
        logger.debug(f"Cancelled attempt finished with {type(e).__name__}")
