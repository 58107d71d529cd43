"""Project-native typed exceptions for webhook delivery failures."""

from __future__ import annotations

from enum import Enum

from workflow_notifier.domain import NotifierError


class DispatchErrorKind(str, Enum):
    """Classification of webhook delivery failures."""

    TIMEOUT = "timeout"
    TRANSPORT_FAILURE = "transport_failure"
    REJECTED_BY_BACKEND = "rejected_by_backend"


class DispatchError(NotifierError):
    """Base exception for webhook delivery failures.

    Attributes:
        kind: Failure classification.
        attempts: Number of HTTP attempts made before giving up.
    """

    kind: DispatchErrorKind = DispatchErrorKind.TRANSPORT_FAILURE

    def __init__(self, message: str, attempts: int = 1):
        super().__init__(message)
        self.attempts = attempts


class DispatchTimeoutError(DispatchError, TimeoutError):
    """No response within the request timeout, after the retry budget was spent."""

    kind = DispatchErrorKind.TIMEOUT


class DispatchTransportError(DispatchError, ConnectionError):
    """Connection-level failure, after the retry budget was spent."""

    kind = DispatchErrorKind.TRANSPORT_FAILURE


class DispatchRejectedError(DispatchError):
    """Backend answered with a non-2xx status; never retried.

    Attributes:
        status_code: HTTP status returned by the backend.
        response_excerpt: Leading part of the response body for diagnostics.
    """

    kind = DispatchErrorKind.REJECTED_BY_BACKEND

    def __init__(self, message: str, status_code: int, response_excerpt: str = "", attempts: int = 1):
        super().__init__(message=message, attempts=attempts)
        self.status_code = status_code
        self.response_excerpt = response_excerpt
