"""
Resilient invoker for backend serverless functions.

FunctionInvoker runs the attempt loop for one logical call:

    resolve credential -> send (with deadline) -> classify -> back off -> repeat

Attempts are strictly sequential. Every failure that reaches the caller is
an ApiError carrying the classification of the last attempt.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from loguru import logger
from pydantic import BaseModel, Field

from .auth import AuthCredential, AuthMode, AuthResolver, SessionProvider
from .backoff import DEFAULT_BACKOFF_POLICY, BackoffPolicy
from .cancellation import CancelToken, DeadlineExceeded, InvocationCancelled, run_until
from .classifier import classify
from .errors import ApiError, ErrorKind
from .outcome import AttemptOutcome, Success, TimeoutFailure
from .request import InvocationOptions, InvocationRequest
from .transport import HttpxTransport, Transport

if TYPE_CHECKING:
    from newsletter_wizard.config import Settings


class InvokerConfig(BaseModel):
    """Explicit configuration handed to a FunctionInvoker.

    Attributes:
        base_url: URL that "/{function_name}" is appended to.
        anon_key: Static anonymous service credential.
        default_options: Options used when a call does not pass its own.
    """

    base_url: str
    anon_key: str
    default_options: InvocationOptions = Field(default_factory=InvocationOptions)

    model_config = {"frozen": True}

    @classmethod
    def from_settings(cls, settings: "Settings") -> "InvokerConfig":
        """Build the config from application settings."""
        return cls(
            base_url=settings.functions_url,
            anon_key=settings.SUPABASE_ANON_KEY,
            default_options=InvocationOptions(
                max_retries=settings.INVOKE_MAX_RETRIES,
                timeout_ms=settings.INVOKE_TIMEOUT_MS,
            ),
        )

    def function_url(self, function_name: str) -> str:
        return f"{self.base_url.rstrip('/')}/{function_name}"


class FunctionInvoker:
    """Call backend functions with auth resolution, timeouts and retries.

    Example:
        config = InvokerConfig(base_url="https://xyz.supabase.co/functions/v1", anon_key="...")
        async with FunctionInvoker(config, session_provider=auth) as invoker:
            results = await invoker.invoke_anonymous("rag-search", {"query": "ai"})
            export = await invoker.invoke_authenticated("export-user-data", {})
    """

    def __init__(
        self,
        config: InvokerConfig,
        session_provider: SessionProvider | None = None,
        transport: Transport | None = None,
        backoff: BackoffPolicy | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """Initialize the invoker.

        Args:
            config: Base URL, anonymous key and default options.
            session_provider: Source of user sessions for authenticated calls.
            transport: Transport to send attempts with. A pooled
                HttpxTransport is created (and owned) if None.
            backoff: Backoff policy. Uses DEFAULT_BACKOFF_POLICY if None.
            sleep: Coroutine used to wait between attempts.
        """
        self.config = config
        self.backoff = backoff or DEFAULT_BACKOFF_POLICY
        self._auth = AuthResolver(config.anon_key, session_provider)
        self._transport = transport or HttpxTransport()
        self._owns_transport = transport is None
        self._sleep = sleep

    @classmethod
    def from_settings(
        cls,
        settings: "Settings",
        session_provider: SessionProvider | None = None,
        **kwargs: Any,
    ) -> "FunctionInvoker":
        """Create an invoker wired from application settings."""
        backoff = kwargs.pop("backoff", None) or BackoffPolicy(
            rate_limit_default_delay=settings.RATE_LIMIT_DEFAULT_DELAY,
            timeout_delay=settings.TIMEOUT_RETRY_DELAY,
            max_delay=settings.BACKOFF_MAX_DELAY,
        )
        return cls(
            InvokerConfig.from_settings(settings),
            session_provider=session_provider,
            backoff=backoff,
            **kwargs,
        )

    async def close(self) -> None:
        """Close the transport if this invoker created it."""
        if self._owns_transport:
            await self._transport.close()

    async def __aenter__(self) -> "FunctionInvoker":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def invoke_anonymous(
        self,
        function_name: str,
        body: Any = None,
        options: InvocationOptions | None = None,
        cancel_token: CancelToken | None = None,
    ) -> Any:
        """Call a function with the anonymous service key.

        Args:
            function_name: Deployed function name.
            body: JSON-serialisable payload (defaults to {}).
            options: Retry/timeout budget. Uses the configured defaults if None.
            cancel_token: Optional external cancellation token.

        Returns:
            Parsed JSON body of the first successful attempt.

        Raises:
            ApiError: On any failure.
        """
        return await self.invoke(
            self._build_request(function_name, body, AuthMode.ANONYMOUS, options),
            cancel_token=cancel_token,
        )

    async def invoke_authenticated(
        self,
        function_name: str,
        body: Any = None,
        options: InvocationOptions | None = None,
        cancel_token: CancelToken | None = None,
    ) -> Any:
        """Call a function with the current user's session token.

        Raises ApiError(AUTH_ERROR) without touching the network when no
        valid session is available.
        """
        return await self.invoke(
            self._build_request(function_name, body, AuthMode.SESSION, options),
            cancel_token=cancel_token,
        )

    def _build_request(
        self,
        function_name: str,
        body: Any,
        auth_mode: AuthMode,
        options: InvocationOptions | None,
    ) -> InvocationRequest:
        return InvocationRequest(
            function_name=function_name,
            body={} if body is None else body,
            auth_mode=auth_mode,
            options=options or self.config.default_options,
        )

    async def invoke(
        self,
        request: InvocationRequest,
        cancel_token: CancelToken | None = None,
    ) -> Any:
        """Run the attempt loop for a request.

        Args:
            request: The invocation to perform.
            cancel_token: Optional external cancellation token. Cancelling it
                interrupts an in-flight attempt or a backoff wait.

        Returns:
            Parsed JSON body of the first successful attempt.

        Raises:
            ApiError: For auth failures, non-retryable failures, exhausted
                retries, cancellation and unexpected errors.
        """
        rid = request.request_id
        name = request.function_name
        max_attempts = request.options.max_retries

        try:
            content = request.encode_body()
        except (TypeError, ValueError) as e:
            logger.error(f"[{rid}] Body for {name} is not JSON-serialisable: {e}")
            raise ApiError.of(ErrorKind.UNKNOWN, cause=e, debug_id=rid) from e

        url = self.config.function_url(name)

        try:
            for attempt in range(1, max_attempts + 1):
                credential = await run_until(
                    self._auth.resolve(request.auth_mode), token=cancel_token
                )
                if credential is None:
                    logger.warning(f"[{rid}] No valid session for {name}")
                    raise ApiError.of(ErrorKind.AUTH_ERROR, debug_id=rid)

                outcome = await self._attempt(url, content, credential, request, cancel_token)
                if isinstance(outcome, Success):
                    if attempt > 1:
                        logger.info(f"[{rid}] {name} succeeded on attempt {attempt}/{max_attempts}")
                    return outcome.body

                classification = classify(outcome)
                if not classification.retryable:
                    logger.warning(
                        f"[{rid}] {name} failed with non-retryable {classification.kind.value} "
                        f"(status={classification.status})"
                    )
                    raise classification.to_error(debug_id=rid)

                if attempt >= max_attempts:
                    logger.warning(
                        f"[{rid}] Max retries ({max_attempts}) exceeded for {name}: "
                        f"{classification.kind.value}"
                    )
                    raise classification.to_error(debug_id=rid)

                delay = self.backoff.delay_for(classification, attempt)
                logger.info(
                    f"[{rid}] Retry {attempt}/{max_attempts} for {name} "
                    f"({classification.kind.value}, status={classification.status}) in {delay:.2f}s"
                )
                await run_until(self._sleep(delay), token=cancel_token)

        except InvocationCancelled as e:
            logger.info(f"[{rid}] {name} cancelled: {e.reason}")
            raise ApiError.of(ErrorKind.CANCELLED, cause=e, debug_id=rid) from e

        # Should not reach here: max_attempts is always >= 1
        raise RuntimeError(f"Retry loop exited unexpectedly for {name}")

    async def _attempt(
        self,
        url: str,
        content: bytes,
        credential: AuthCredential,
        request: InvocationRequest,
        cancel_token: CancelToken | None,
    ) -> AttemptOutcome:
        """Send one attempt, bounded by the request's deadline."""
        headers = {
            "Content-Type": "application/json",
            "Authorization": credential.authorization_header(),
        }
        timeout = request.options.timeout_seconds
        try:
            return await run_until(
                self._transport.send(url, content, headers, timeout),
                timeout=timeout,
                token=cancel_token,
            )
        except DeadlineExceeded:
            return TimeoutFailure(timeout_ms=request.options.timeout_ms)
        except InvocationCancelled:
            raise
        except Exception as e:
            logger.error(f"[{request.request_id}] Unexpected transport error: {type(e).__name__}")
            raise ApiError.of(ErrorKind.UNKNOWN, cause=e, debug_id=request.request_id) from e
