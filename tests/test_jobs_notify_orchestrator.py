"""Regression tests for the notification orchestrator pipeline."""

from __future__ import annotations

import json

import httpx
import pytest
from structlog.testing import capture_logs

import workflow_notifier.adapters.webhook_dispatcher as dispatcher_module
from workflow_notifier.adapters import DispatchRejectedError, DispatchResult, NotifierExitCode, WebhookDispatcher
from workflow_notifier.domain import StageStatus, StatusKind
from workflow_notifier.jobs import NotifyOrchestrator, NotifyOrchestratorConfig, NotifyRequest
from workflow_notifier.rendering import Backend, MattermostPayload, NotificationPayload

WEBHOOK_URL = "https://chat.example.test/hooks/abc123"
GITHUB_CONTEXT = json.dumps(
    {
        "repository": "acme/api",
        "ref_name": "main",
        "sha": "0123456789abcdef",
        "actor": "octocat",
        "run_id": "987",
        "server_url": "https://github.com",
        "workflow": "CI Pipeline",
    }
)


class _DispatcherStub:
    """Dispatcher stub that records calls and returns or raises a configured outcome."""

    def __init__(self, outcome: DispatchResult | Exception | None = None):
        """Initialize stub state.

        Args:
            outcome: Result to return or exception to raise; defaults to a 200 result.

        Returns:
            None: Initializer does not return values.

        Raises:
            RuntimeError: This stub does not raise runtime errors.
        """

        self.outcome = outcome
        self.calls: list[tuple[str, NotificationPayload]] = []

    def adapter_send(self, url: str, payload: NotificationPayload) -> DispatchResult:
        self.calls.append((url, payload))
        if isinstance(self.outcome, Exception):
            raise self.outcome
        if self.outcome is not None:
            return self.outcome
        return DispatchResult(backend=payload.backend, status_code=200, attempts=1, elapsed_seconds=0.0)

    def adapter_close(self) -> None:
        return None


def test_jobs_notify_end_to_end_mattermost_failure_payload(monkeypatch: pytest.MonkeyPatch) -> None:
    """Deliver a red Mattermost payload for a failing run with jobs in input order.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Returns:
        None: Assertions validate the full pipeline against a mock transport.

    Raises:
        AssertionError: Raised when pipeline output is incorrect.
    """

    monkeypatch.setattr(dispatcher_module.time, "sleep", lambda _seconds: None)
    sent_bodies: list[dict[str, object]] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        sent_bodies.append(json.loads(request.content))
        return httpx.Response(200, text="ok")

    with WebhookDispatcher(transport=httpx.MockTransport(_handler)) as dispatcher:
        orchestrator = NotifyOrchestrator(dispatcher=dispatcher)
        result = orchestrator.job_execute(
            NotifyRequest(
                webhook_url=WEBHOOK_URL,
                notification_type="mattermost",
                job_results="tests:success\nbuild:failure",
                workflow_name="CI",
                github_context=GITHUB_CONTEXT,
            )
        )

    assert result.exit_code is NotifierExitCode.SUCCESS
    assert result.overall_status is StatusKind.FAILURE
    assert result.dispatch_result is not None and result.dispatch_result.status_code == 200
    assert len(sent_bodies) == 1
    body = sent_bodies[0]
    assert body["channel"] == "cicd-notifications"
    attachment = body["attachments"][0]
    assert attachment["color"] == "#FF0000"
    assert attachment["title"] == "❌ CI: Failure"
    job_lines = attachment["text"].splitlines()
    assert job_lines == ["tests: ✅ Success", "build: ❌ Failure"]
    assert attachment["footer"] == "Run: https://github.com/acme/api/actions/runs/987"
    assert [event.stage for event in result.stage_timeline if event.status is StageStatus.COMPLETED] == [
        "parse",
        "context",
        "render",
        "dispatch",
        "run",
    ]


def test_jobs_notify_parse_error_sends_nothing() -> None:
    """Stop before dispatch and report the parse exit code on malformed input.

    Returns:
        None: Assertions validate no partial delivery.

    Raises:
        AssertionError: Raised when a notification is sent on parse failure.
    """

    dispatcher = _DispatcherStub()
    orchestrator = NotifyOrchestrator(dispatcher=dispatcher)

    result = orchestrator.job_execute(
        NotifyRequest(webhook_url=WEBHOOK_URL, notification_type="slack", job_results="build:weird")
    )

    assert result.exit_code is NotifierExitCode.PARSE_ERROR
    assert dispatcher.calls == []
    assert result.error_message is not None and "build:weird" in result.error_message
    assert result.stage_timeline[-2].stage == "parse"
    assert result.stage_timeline[-2].status is StageStatus.FAILED


@pytest.mark.parametrize(
    "request_overrides",
    [
        {"notification_type": "teams"},
        {"workflow_name": "", "github_context": ""},
        {"github_context": "{broken"},
    ],
)
def test_jobs_notify_validation_errors_map_to_validation_exit_code(request_overrides: dict[str, str]) -> None:
    """Report validation failures for bad type codes, missing workflow names and bad context.

    Args:
        request_overrides: Fields overriding an otherwise valid request.

    Returns:
        None: Assertions validate exit code mapping.

    Raises:
        AssertionError: Raised when validation failures are mis-mapped.
    """

    request_values: dict[str, object] = {
        "webhook_url": WEBHOOK_URL,
        "notification_type": "mattermost",
        "job_results": "build:success",
        "workflow_name": "CI",
        "github_context": '{"repository": "acme/api"}',
    }
    request_values.update(request_overrides)
    dispatcher = _DispatcherStub()

    result = NotifyOrchestrator(dispatcher=dispatcher).job_execute(NotifyRequest(**request_values))

    assert result.exit_code is NotifierExitCode.VALIDATION_ERROR
    assert result.overall_status is StatusKind.SUCCESS
    assert dispatcher.calls == []


def test_jobs_notify_workflow_name_and_repository_fall_back_to_context_sources() -> None:
    """Resolve workflow name from github-context and repository from ambient env.

    Returns:
        None: Assertions validate context precedence.

    Raises:
        AssertionError: Raised when fallbacks are not applied.
    """

    dispatcher = _DispatcherStub()
    orchestrator = NotifyOrchestrator(
        dispatcher=dispatcher,
        config=NotifyOrchestratorConfig(
            default_channel="builds",
            github_environment={"repository": "acme/env-repo", "workflow": "Env Workflow", "actor": "ci-bot"},
        ),
    )

    result = orchestrator.job_execute(
        NotifyRequest(
            webhook_url=WEBHOOK_URL,
            notification_type="2",
            job_results="build:success",
            github_context='{"workflow": "Context Workflow"}',
        )
    )

    assert result.exit_code is NotifierExitCode.SUCCESS
    _, payload = dispatcher.calls[0]
    body = payload.payload_body()
    assert payload.backend is Backend.SLACK
    assert body["channel"] == "builds"
    assert body["blocks"][0]["text"]["text"] == "✅ Context Workflow: Success"
    context_texts = [element["text"] for element in body["blocks"][2]["elements"]]
    assert "*Repository:* acme/env-repo" in context_texts
    assert "*Actor:* ci-bot" in context_texts


def test_jobs_notify_rejection_reports_rejection_exit_code() -> None:
    dispatcher = _DispatcherStub(outcome=DispatchRejectedError("webhook rejected the payload with HTTP 404", 404))

    result = NotifyOrchestrator(dispatcher=dispatcher).job_execute(
        NotifyRequest(
            webhook_url=WEBHOOK_URL,
            notification_type="1",
            job_results="build:cancelled",
            workflow_name="CI",
            github_context=GITHUB_CONTEXT,
        )
    )

    assert result.exit_code is NotifierExitCode.DISPATCH_REJECTED
    assert result.overall_status is StatusKind.CANCELLED
    assert isinstance(result.payload, MattermostPayload)
    assert result.dispatch_result is None
    assert "HTTP 404" in (result.error_message or "")


def test_jobs_notify_dry_run_renders_without_dispatch() -> None:
    """Render the payload without calling the dispatcher in dry-run mode.

    Returns:
        None: Assertions validate dry-run behavior.

    Raises:
        AssertionError: Raised when dry-run dispatches.
    """

    dispatcher = _DispatcherStub()

    result = NotifyOrchestrator(dispatcher=dispatcher).job_execute(
        NotifyRequest(
            webhook_url="",
            notification_type="slack",
            job_results='{"lint": "success"}',
            workflow_name="CI",
            channel="C999",
            github_context=GITHUB_CONTEXT,
            dry_run=True,
        )
    )

    assert result.exit_code is NotifierExitCode.SUCCESS
    assert dispatcher.calls == []
    assert result.payload is not None
    assert result.payload.payload_body()["channel"] == "C999"


def test_jobs_notify_orchestrator_rejects_invalid_dependencies() -> None:
    with pytest.raises(ValueError, match="dispatcher"):
        NotifyOrchestrator(dispatcher=None)  # type: ignore[arg-type]

    with pytest.raises(ValueError, match="default_channel"):
        NotifyOrchestrator(dispatcher=_DispatcherStub(), config=NotifyOrchestratorConfig(default_channel=" "))


def test_jobs_notify_final_run_events_carry_stage_timeline() -> None:
    """Log the full stage timeline with the completed and failed run events.

    Returns:
        None: Assertions validate logged diagnostics.

    Raises:
        AssertionError: Raised when the timeline is not logged.
    """

    orchestrator = NotifyOrchestrator(dispatcher=_DispatcherStub())

    with capture_logs() as captured_events:
        orchestrator.job_execute(
            NotifyRequest(
                webhook_url=WEBHOOK_URL,
                notification_type="slack",
                job_results="build:success",
                workflow_name="CI",
                github_context=GITHUB_CONTEXT,
            )
        )
        orchestrator.job_execute(
            NotifyRequest(webhook_url=WEBHOOK_URL, notification_type="slack", job_results="")
        )

    run_events = {event["event"]: event for event in captured_events if event["event"].startswith("notify.run.")}
    completed_timeline = run_events["notify.run.completed"]["timeline"]
    assert [(entry["stage"], entry["status"]) for entry in completed_timeline][-2:] == [
        ("dispatch", "completed"),
        ("run", "completed"),
    ]
    assert completed_timeline[-2]["details"] == {"status_code": 200, "attempts": 1}
    failed_timeline = run_events["notify.run.failed"]["timeline"]
    assert [(entry["stage"], entry["status"]) for entry in failed_timeline] == [
        ("parse", "started"),
        ("parse", "failed"),
        ("run", "failed"),
    ]
