"""Job-result input parsing.

Job results arrive either as `name:status` tokens separated by newlines or
whitespace, or as a flat JSON object mapping job names to statuses. Format
detection happens once here: input whose trimmed text starts with `{` must be
valid JSON, there is no fallback to the line format.
"""

from __future__ import annotations

import json
from typing import Iterable

from .errors import JobResultsParseError
from .models import JobResult, JobResultSet, StatusKind

_JOB_STATUS_SEPARATOR = ":"
_STATUS_BY_TOKEN = {status.value: status for status in StatusKind}


def domain_parse_job_results(raw: str) -> JobResultSet:
    """Parse raw job-result text into an ordered job result set.

    Args:
        raw: Line/space-delimited `name:status` tokens or a JSON object.

    Returns:
        JobResultSet: Parsed job outcomes in input order.

    Raises:
        JobResultsParseError: Raised when input is empty or any token, key or
            value is malformed.
    """

    normalized_raw = (raw or "").strip()
    if not normalized_raw:
        raise JobResultsParseError("job results input is empty")

    if normalized_raw.startswith("{"):
        pairs = _domain_parse_json_pairs(normalized_raw)
    else:
        pairs = _domain_parse_token_pairs(normalized_raw)

    return domain_build_job_result_set(pairs)


def domain_parse_status_kind(value: str) -> StatusKind | None:
    """Resolve one status token to `StatusKind`.

    Args:
        value: Candidate status text, matched exactly after trimming.

    Returns:
        StatusKind | None: Resolved status, or None when the token is unknown.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return _STATUS_BY_TOKEN.get(value.strip())


def domain_build_job_result_set(pairs: Iterable[tuple[str, StatusKind]]) -> JobResultSet:
    """Build a job result set, keeping the last status for repeated names.

    A repeated job keeps the position of its first appearance.

    Args:
        pairs: Ordered `(name, status)` pairs.

    Returns:
        JobResultSet: Deduplicated ordered job outcomes.

    Raises:
        JobResultsParseError: Raised when no pairs were supplied.
    """

    statuses_by_name: dict[str, StatusKind] = {}
    for name, status in pairs:
        statuses_by_name[name] = status

    if not statuses_by_name:
        raise JobResultsParseError("job results input contains no jobs")

    return JobResultSet(
        results=tuple(JobResult(name=name, status=status) for name, status in statuses_by_name.items())
    )


def _domain_parse_token_pairs(normalized_raw: str) -> list[tuple[str, StatusKind]]:
    """Parse the line/space-delimited format.

    Args:
        normalized_raw: Trimmed non-empty input.

    Returns:
        list[tuple[str, StatusKind]]: Ordered pairs, duplicates included.

    Raises:
        JobResultsParseError: Raised on the first malformed token.
    """

    pairs: list[tuple[str, StatusKind]] = []
    for line in normalized_raw.splitlines():
        for token in line.split():
            pairs.append(_domain_parse_token(token))
    return pairs


def _domain_parse_token(token: str) -> tuple[str, StatusKind]:
    """Parse one `name:status` token.

    Args:
        token: Whitespace-free token.

    Returns:
        tuple[str, StatusKind]: Job name and status.

    Raises:
        JobResultsParseError: Raised when separator, name or status is invalid.
    """

    if token.count(_JOB_STATUS_SEPARATOR) != 1:
        raise JobResultsParseError(
            f"invalid job result token {token!r}: expected exactly one ':' in 'name:status'",
            token=token,
        )

    name, status_text = token.split(_JOB_STATUS_SEPARATOR)
    name = name.strip()
    if not name:
        raise JobResultsParseError(f"invalid job result token {token!r}: job name is empty", token=token)

    status = domain_parse_status_kind(status_text)
    if status is None:
        raise JobResultsParseError(
            f"invalid job result token {token!r}: unknown status {status_text!r}",
            token=token,
        )
    return name, status


def _domain_parse_json_pairs(normalized_raw: str) -> list[tuple[str, StatusKind]]:
    """Parse the flat JSON object format.

    Args:
        normalized_raw: Trimmed input starting with `{`.

    Returns:
        list[tuple[str, StatusKind]]: Ordered pairs, duplicates included.

    Raises:
        JobResultsParseError: Raised when decoding fails or any entry is invalid.
    """

    try:
        raw_pairs = json.loads(normalized_raw, object_pairs_hook=list)
    except json.JSONDecodeError as error:
        raise JobResultsParseError(f"job results look like JSON but failed to decode: {error.msg}") from error

    if not isinstance(raw_pairs, list):
        raise JobResultsParseError("job results JSON must be an object mapping job names to statuses")

    pairs: list[tuple[str, StatusKind]] = []
    for name, status_value in raw_pairs:
        if not isinstance(status_value, str):
            raise JobResultsParseError(
                f"invalid status for job {name!r}: expected a string, got {type(status_value).__name__}",
                token=name,
            )
        pairs.append(_domain_parse_token(f"{name}{_JOB_STATUS_SEPARATOR}{status_value}"))
    return pairs
