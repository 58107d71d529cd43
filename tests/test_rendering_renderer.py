"""Regression tests for backend selection and payload rendering."""

from __future__ import annotations

import json

import pytest

from workflow_notifier.domain import (
    NotifierValidationError,
    StatusKind,
    WorkflowContext,
    domain_aggregate_overall_status,
    domain_parse_job_results,
)
from workflow_notifier.rendering import (
    SLACK_MAX_SECTION_BLOCKS,
    SLACK_SECTION_TEXT_MAX_LENGTH,
    STATUS_PRESENTATION,
    Backend,
    MattermostPayload,
    SlackPayload,
    backend_from_type_code,
    render_notification_payload,
)


def _build_context() -> WorkflowContext:
    """Return a deterministic fully populated workflow context.

    Returns:
        WorkflowContext: Context fixture.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return WorkflowContext(
        repository="acme/api",
        workflow_name="CI",
        branch="main",
        commit_sha="0123456789abcdef",
        actor="octocat",
        run_id="987",
        run_url="https://github.com/acme/api/actions/runs/987",
    )


@pytest.mark.parametrize(
    ("type_code", "expected_backend"),
    [
        ("mattermost", Backend.MATTERMOST),
        ("1", Backend.MATTERMOST),
        ("MatterMost", Backend.MATTERMOST),
        ("slack", Backend.SLACK),
        (" 2 ", Backend.SLACK),
        ("SLACK", Backend.SLACK),
    ],
)
def test_rendering_backend_type_codes_accept_names_and_legacy_aliases(
    type_code: str,
    expected_backend: Backend,
) -> None:
    """Resolve backend names and numeric aliases case-insensitively.

    Args:
        type_code: Raw notification type.
        expected_backend: Expected backend.

    Returns:
        None: Assertions validate backend resolution.

    Raises:
        AssertionError: Raised when resolution is incorrect.
    """

    assert backend_from_type_code(type_code) is expected_backend


@pytest.mark.parametrize("type_code", ["", "3", "teams", None])
def test_rendering_backend_type_code_rejects_unknown_values(type_code: str | None) -> None:
    with pytest.raises(NotifierValidationError) as error_info:
        backend_from_type_code(type_code)

    assert error_info.value.field_name == "notification-type"


def test_rendering_mattermost_payload_uses_overall_color_and_input_order() -> None:
    """Render a failure Mattermost payload with red side bar and ordered job lines.

    Returns:
        None: Assertions validate Mattermost payload shape.

    Raises:
        AssertionError: Raised when payload content is incorrect.
    """

    jobs = domain_parse_job_results("tests:success\nbuild:failure")
    overall = domain_aggregate_overall_status(jobs)

    payload = render_notification_payload(Backend.MATTERMOST, overall, jobs, _build_context(), "cicd-notifications")

    assert isinstance(payload, MattermostPayload)
    body = payload.payload_body()
    attachment = body["attachments"][0]
    assert body["channel"] == "cicd-notifications"
    assert attachment["color"] == "#FF0000"
    assert attachment["title"] == "❌ CI: Failure"
    assert attachment["text"] == "tests: ✅ Success\nbuild: ❌ Failure"
    assert attachment["footer"] == "Run: https://github.com/acme/api/actions/runs/987"


def test_rendering_slack_payload_has_header_section_context_and_no_color() -> None:
    """Render a Slack block-kit payload without a color bar.

    Returns:
        None: Assertions validate Slack payload shape.

    Raises:
        AssertionError: Raised when payload content is incorrect.
    """

    jobs = domain_parse_job_results("lint:success deploy:skipped")

    payload = render_notification_payload(Backend.SLACK, StatusKind.SKIPPED, jobs, _build_context(), "C0123456")

    assert isinstance(payload, SlackPayload)
    body = payload.payload_body()
    assert body["channel"] == "C0123456"
    assert "color" not in json.dumps(body)
    header, section, context = body["blocks"]
    assert header["type"] == "header"
    assert header["text"]["text"] == "⏭️ CI: Skipped"
    assert section["text"]["text"] == "lint: ✅ Success\ndeploy: ⏭️ Skipped"
    context_texts = [element["text"] for element in context["elements"]]
    assert context_texts == [
        "*Repository:* acme/api",
        "*Branch:* main",
        "*Commit:* 0123456",
        "*Actor:* octocat",
        "*Run:* https://github.com/acme/api/actions/runs/987",
    ]


@pytest.mark.parametrize("backend", list(Backend))
def test_rendering_is_deterministic_across_calls(backend: Backend) -> None:
    """Serialize identical inputs to byte-identical payloads.

    Args:
        backend: Backend under test.

    Returns:
        None: Assertions validate deterministic serialization.

    Raises:
        AssertionError: Raised when serialization differs between calls.
    """

    jobs = domain_parse_job_results('{"build": "success", "tests": "cancelled"}')
    overall = domain_aggregate_overall_status(jobs)

    first = render_notification_payload(backend, overall, jobs, _build_context(), "alerts").payload_serialize()
    second = render_notification_payload(backend, overall, jobs, _build_context(), "alerts").payload_serialize()

    assert first == second
    assert json.loads(first.decode("utf-8"))["channel"] == "alerts"


def test_rendering_presentation_table_matches_status_contract() -> None:
    assert STATUS_PRESENTATION[StatusKind.SUCCESS].color == "#00FF00"
    assert STATUS_PRESENTATION[StatusKind.FAILURE].color == "#FF0000"
    assert STATUS_PRESENTATION[StatusKind.CANCELLED].color == "#808080"
    assert STATUS_PRESENTATION[StatusKind.SKIPPED].color == "#FFA500"
    assert [STATUS_PRESENTATION[status].label for status in StatusKind] == [
        "Success",
        "Failure",
        "Cancelled",
        "Skipped",
    ]


def test_rendering_unknown_backend_is_a_contract_violation() -> None:
    jobs = domain_parse_job_results("build:success")

    with pytest.raises(TypeError, match="unsupported backend"):
        render_notification_payload("discord", StatusKind.SUCCESS, jobs, _build_context(), "alerts")  # type: ignore[arg-type]


def test_rendering_slack_header_is_truncated_to_block_limit() -> None:
    jobs = domain_parse_job_results("build:success")
    context = WorkflowContext(repository="acme/api", workflow_name="W" * 200)

    payload = render_notification_payload(Backend.SLACK, StatusKind.SUCCESS, jobs, context, "alerts")

    assert len(payload.title) == 150
    assert payload.title.endswith("…")


def test_rendering_slack_large_matrix_is_split_into_bounded_sections() -> None:
    """Split 150 job lines across section blocks within Slack's text limit.

    Returns:
        None: Assertions validate section sizing and ordering.

    Raises:
        AssertionError: Raised when a section exceeds the limit or drops jobs.
    """

    job_names = [f"integration-matrix-job-{index:03d}" for index in range(150)]
    jobs = domain_parse_job_results("\n".join(f"{name}:success" for name in job_names))

    payload = render_notification_payload(Backend.SLACK, StatusKind.SUCCESS, jobs, _build_context(), "alerts")

    blocks = payload.payload_body()["blocks"]
    section_texts = [block["text"]["text"] for block in blocks if block["type"] == "section"]
    assert len(section_texts) > 1
    assert all(len(text) <= SLACK_SECTION_TEXT_MAX_LENGTH for text in section_texts)
    rendered_lines = "\n".join(section_texts).splitlines()
    assert rendered_lines == [f"{name}: ✅ Success" for name in job_names]
    assert blocks[0]["type"] == "header"
    assert blocks[-1]["type"] == "context"


def test_rendering_slack_overflowing_block_budget_summarizes_remaining_jobs() -> None:
    """Cap section blocks and report how many job lines were left out.

    Returns:
        None: Assertions validate block cap and omitted-job count.

    Raises:
        AssertionError: Raised when the block cap or count is wrong.
    """

    job_names = [f"job-{index:04d}-" + "x" * 170 for index in range(1000)]
    jobs = domain_parse_job_results("\n".join(f"{name}:failure" for name in job_names))

    payload = render_notification_payload(Backend.SLACK, StatusKind.FAILURE, jobs, _build_context(), "alerts")

    blocks = payload.payload_body()["blocks"]
    assert len(blocks) == SLACK_MAX_SECTION_BLOCKS + 2
    section_texts = [block["text"]["text"] for block in blocks if block["type"] == "section"]
    assert all(len(text) <= SLACK_SECTION_TEXT_MAX_LENGTH for text in section_texts)
    kept_lines = "\n".join(section_texts).splitlines()
    overflow_line = kept_lines.pop()
    assert kept_lines == [f"{name}: ❌ Failure" for name in job_names[: len(kept_lines)]]
    assert overflow_line == f"… and {1000 - len(kept_lines)} more"


def test_rendering_slack_escapes_mrkdwn_control_characters() -> None:
    """Escape `&`, `<` and `>` in job names, context values and the fallback text.

    Returns:
        None: Assertions validate escaping.

    Raises:
        AssertionError: Raised when control syntax leaks into mrkdwn.
    """

    jobs = domain_parse_job_results("<!channel>:failure build&test:success")
    context = WorkflowContext(repository="acme/api", workflow_name="Deploy <prod>", actor="<@U123>")

    payload = render_notification_payload(Backend.SLACK, StatusKind.FAILURE, jobs, context, "alerts")

    body = payload.payload_body()
    header, section, context_block = body["blocks"]
    assert section["text"]["text"] == "&lt;!channel&gt;: ❌ Failure\nbuild&amp;test: ✅ Success"
    assert "*Actor:* &lt;@U123&gt;" in [element["text"] for element in context_block["elements"]]
    assert body["text"] == "❌ Deploy &lt;prod&gt;: Failure"
    assert header["text"]["text"] == "❌ Deploy <prod>: Failure"
