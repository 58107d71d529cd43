"""Project-native typed exceptions for input parsing and validation failures."""

from __future__ import annotations


class NotifierError(Exception):
    """Base exception for all expected notifier failures."""


class JobResultsParseError(NotifierError, ValueError):
    """Malformed job-results input.

    Attributes:
        token: Offending input token, when one can be named.
    """

    def __init__(self, message: str, token: str | None = None):
        super().__init__(message)
        self.token = token


class NotifierValidationError(NotifierError, ValueError):
    """Missing or invalid context or configuration field.

    Attributes:
        field_name: Name of the offending field.
    """

    def __init__(self, message: str, field_name: str):
        super().__init__(message)
        self.field_name = field_name
