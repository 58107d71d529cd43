"""Workflow-run context decoding and validation.

The loosely typed GitHub Actions context blob is decoded and validated here,
once, into an immutable `WorkflowContext`. Later stages only consume the
validated record.
"""

from __future__ import annotations

import json
from typing import Final, Mapping

from .errors import NotifierValidationError
from .models import UNKNOWN_SENTINEL, WorkflowContext

CONTEXT_REQUIRED_FIELDS: Final[tuple[str, ...]] = ("repository", "workflow_name")
CONTEXT_OPTIONAL_FIELDS: Final[tuple[str, ...]] = ("branch", "commit_sha", "actor", "run_id", "run_url")
_GITHUB_CONTEXT_INPUT_NAME: Final[str] = "github-context"


def domain_build_workflow_context(fields: Mapping[str, object]) -> WorkflowContext:
    """Validate raw context fields and build an immutable workflow context.

    Args:
        fields: Mapping keyed by `WorkflowContext` attribute names. Unknown keys
            are ignored.

    Returns:
        WorkflowContext: Validated context with sentinel-filled optional fields.

    Raises:
        NotifierValidationError: Raised when a required field is missing or
            blank, or when a field holds a non-scalar value.
    """

    normalized_values: dict[str, str] = {}
    for field_name in CONTEXT_REQUIRED_FIELDS:
        value = _domain_context_normalize_value(field_name, fields.get(field_name))
        if value is None:
            raise NotifierValidationError(f"required context field '{field_name}' is missing or blank", field_name)
        normalized_values[field_name] = value

    for field_name in CONTEXT_OPTIONAL_FIELDS:
        value = _domain_context_normalize_value(field_name, fields.get(field_name))
        normalized_values[field_name] = value if value is not None else UNKNOWN_SENTINEL

    return WorkflowContext(**normalized_values)


def domain_decode_github_context(raw: str | None) -> dict[str, object]:
    """Decode the serialized GitHub Actions `github` context.

    Args:
        raw: JSON text, or blank when no context was supplied.

    Returns:
        dict[str, object]: Decoded top-level object, empty for blank input.

    Raises:
        NotifierValidationError: Raised when the text is not a JSON object.
    """

    normalized_raw = (raw or "").strip()
    if not normalized_raw:
        return {}

    try:
        decoded = json.loads(normalized_raw)
    except json.JSONDecodeError as error:
        raise NotifierValidationError(
            f"{_GITHUB_CONTEXT_INPUT_NAME} is not valid JSON: {error.msg}",
            _GITHUB_CONTEXT_INPUT_NAME,
        ) from error

    if not isinstance(decoded, dict):
        raise NotifierValidationError(f"{_GITHUB_CONTEXT_INPUT_NAME} must be a JSON object", _GITHUB_CONTEXT_INPUT_NAME)
    return decoded


def domain_context_fields_from_github(github_values: Mapping[str, object]) -> dict[str, object]:
    """Map GitHub context keys onto `WorkflowContext` field names.

    Pull-request runs report `head_ref` as the source branch; it is preferred
    over `ref_name` when present. The run URL is derived from `server_url`,
    `repository` and `run_id`.

    Args:
        github_values: GitHub context mapping (decoded blob or `GITHUB_*` env).

    Returns:
        dict[str, object]: Context fields that were present in the source.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    repository = github_values.get("repository")
    run_id = github_values.get("run_id")
    server_url = github_values.get("server_url")

    mapped_fields: dict[str, object] = {
        "repository": repository,
        "workflow_name": github_values.get("workflow"),
        "branch": github_values.get("head_ref") or github_values.get("ref_name"),
        "commit_sha": github_values.get("sha"),
        "actor": github_values.get("actor"),
        "run_id": run_id,
    }
    if all(_domain_context_is_present(value) for value in (server_url, repository, run_id)):
        base_url = str(server_url).strip().rstrip("/")
        mapped_fields["run_url"] = f"{base_url}/{str(repository).strip()}/actions/runs/{str(run_id).strip()}"

    return {key: value for key, value in mapped_fields.items() if _domain_context_is_present(value)}


def domain_merge_context_fields(*sources: Mapping[str, object]) -> dict[str, object]:
    """Merge context field sources, earlier sources taking precedence.

    Args:
        sources: Mappings keyed by `WorkflowContext` field names, highest
            precedence first. Blank values never override.

    Returns:
        dict[str, object]: Merged context fields.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    merged_fields: dict[str, object] = {}
    for source in sources:
        for field_name, value in source.items():
            if field_name in merged_fields or not _domain_context_is_present(value):
                continue
            merged_fields[field_name] = value
    return merged_fields


def _domain_context_normalize_value(field_name: str, value: object | None) -> str | None:
    """Normalize one raw context value to stripped text.

    Args:
        field_name: Field being normalized, used in error messages.
        value: Raw value.

    Returns:
        str | None: Stripped text, or None when missing or blank.

    Raises:
        NotifierValidationError: Raised when value is not a scalar.
    """

    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise NotifierValidationError(
            f"context field '{field_name}' must be a string, got {type(value).__name__}",
            field_name,
        )
    normalized_value = str(value).strip()
    return normalized_value or None


def _domain_context_is_present(value: object | None) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True
