"""
Credential resolution for remote function calls.

Anonymous calls use the static service key from configuration. Session
calls read the current user's access token from a SessionProvider every
time they are resolved; nothing is cached here, since a token may be
rotated or revoked between attempts.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Protocol, runtime_checkable

from loguru import logger


class AuthMode(str, Enum):
    """Which credential a call is made with."""

    ANONYMOUS = "anonymous"
    SESSION = "session"


@dataclass(frozen=True)
class Session:
    """Authenticated user session as exposed by the auth collaborator."""

    access_token: str
    expires_at: datetime | None = None


@dataclass(frozen=True)
class AuthCredential:
    """Bearer credential attached to one attempt."""

    token: str
    expires_at: datetime | None = None

    def is_expired(self, now: datetime | None = None) -> bool:
        """Check whether the credential has passed its expiry."""
        if self.expires_at is None:
            return False
        return self.expires_at <= (now or datetime.now(timezone.utc))

    def authorization_header(self) -> str:
        return f"Bearer {self.token}"

    def __repr__(self) -> str:
        # Never expose the token in logs or tracebacks
        return f"AuthCredential(token='***', expires_at={self.expires_at!r})"


@runtime_checkable
class SessionProvider(Protocol):
    """Source of the current user session."""

    def get_current_session(self) -> Session | None | Awaitable[Session | None]:
        """
        Return the current session, or None when nobody is signed in.

        May be a coroutine function. Implementations may raise; the resolver
        treats any error as "no session".
        """
        ...


def _to_datetime(value: Any) -> datetime | None:
    """Normalise an expiry given as datetime or epoch seconds."""
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    return None


class AuthResolver:
    """Resolve the credential for an attempt.

    Example:
        resolver = AuthResolver(anon_key="public-anon-key", session_provider=provider)
        credential = await resolver.resolve(AuthMode.SESSION)
        if credential is None:
            ...  # signed out or session expired
    """

    def __init__(self, anon_key: str, session_provider: SessionProvider | None = None):
        """Initialize the resolver.

        Args:
            anon_key: Static anonymous service key.
            session_provider: Source of user sessions. Session calls always
                fail to resolve when this is None.
        """
        self._anonymous = AuthCredential(token=anon_key)
        self._session_provider = session_provider

    async def resolve(self, mode: AuthMode) -> AuthCredential | None:
        """Resolve the credential for a call.

        Args:
            mode: Auth mode of the call.

        Returns:
            The credential to use, or None if a session is required but
            missing, expired, or could not be read.
        """
        if mode is AuthMode.ANONYMOUS:
            return self._anonymous
        return await self._resolve_session()

    async def _resolve_session(self) -> AuthCredential | None:
        if self._session_provider is None:
            logger.warning("Session credential requested but no session provider is configured")
            return None

        try:
            session = self._session_provider.get_current_session()
            if inspect.isawaitable(session):
                session = await session
        except Exception as e:
            logger.warning(f"Session provider failed: {type(e).__name__}")
            return None

        if session is None:
            return None

        token = getattr(session, "access_token", None)
        if not token:
            return None

        credential = AuthCredential(
            token=token,
            expires_at=_to_datetime(getattr(session, "expires_at", None)),
        )
        if credential.is_expired():
            logger.info("Session has expired; caller must re-authenticate")
            return None
        return credential
