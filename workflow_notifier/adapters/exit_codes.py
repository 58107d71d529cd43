"""Stable process exit codes for notifier outcomes.

The codes let the invoking workflow tell configuration mistakes apart from
transient delivery failures:

| Outcome                                      | Code |
|----------------------------------------------|------|
| Notification delivered                       | 0    |
| Malformed job-results input                  | 1    |
| Delivery timeout or transport failure        | 2    |
| Missing or invalid context/config input      | 3    |
| Backend rejected the payload (non-2xx)       | 4    |
"""

from __future__ import annotations

from enum import IntEnum

from workflow_notifier.config import SettingsLoadError
from workflow_notifier.domain import JobResultsParseError, NotifierValidationError

from .webhook_errors import DispatchError, DispatchRejectedError


class NotifierExitCode(IntEnum):
    """Known process exit codes."""

    SUCCESS = 0
    PARSE_ERROR = 1
    DISPATCH_FAILED = 2
    VALIDATION_ERROR = 3
    DISPATCH_REJECTED = 4


def exit_code_for_exception(error: Exception) -> NotifierExitCode:
    """Map an expected failure to its exit code.

    Args:
        error: Caught exception.

    Returns:
        NotifierExitCode: Exit code for the failure class.

    Raises:
        TypeError: Raised when the exception is not an expected notifier
            failure; such errors are programming faults and must propagate.
    """

    if isinstance(error, JobResultsParseError):
        return NotifierExitCode.PARSE_ERROR
    if isinstance(error, (NotifierValidationError, SettingsLoadError)):
        return NotifierExitCode.VALIDATION_ERROR
    if isinstance(error, DispatchRejectedError):
        return NotifierExitCode.DISPATCH_REJECTED
    if isinstance(error, DispatchError):
        return NotifierExitCode.DISPATCH_FAILED
    raise TypeError(f"no exit code mapping for {type(error).__name__}")
