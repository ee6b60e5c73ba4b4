"""
Remote function invocation runtime for newsletter-wizard.

This package provides the client side of calling backend serverless
functions reliably:
- FunctionInvoker: Attempt loop with per-call auth, deadline and retries
- AuthResolver: Anonymous key vs. per-user session token
- classify: Outcome -> (ErrorKind, retryable, message)
- BackoffPolicy: Delay chosen by failure cause
- ApiError: The only error type callers ever see
"""

from .auth import AuthCredential, AuthMode, AuthResolver, Session, SessionProvider
from .backoff import DEFAULT_BACKOFF_POLICY, BackoffPolicy
from .cancellation import CancelToken
from .classifier import ErrorClassification, FailureCause, classify
from .errors import ERROR_MESSAGES, ApiError, ErrorKind
from .invoker import FunctionInvoker, InvokerConfig
from .request import InvocationOptions, InvocationRequest
from .transport import HttpxTransport, Transport

__all__ = [
    "ApiError",
    "AuthCredential",
    "AuthMode",
    "AuthResolver",
    "BackoffPolicy",
    "CancelToken",
    "DEFAULT_BACKOFF_POLICY",
    "ERROR_MESSAGES",
    "ErrorClassification",
    "ErrorKind",
    "FailureCause",
    "FunctionInvoker",
    "HttpxTransport",
    "InvocationOptions",
    "InvocationRequest",
    "InvokerConfig",
    "Session",
    "SessionProvider",
    "Transport",
    "classify",
]
