"""Typed interfaces for job-layer orchestration responsibilities."""

from dataclasses import dataclass
from typing import Protocol

from workflow_notifier.adapters import DispatchResult, NotifierExitCode
from workflow_notifier.domain import StageEvent, StatusKind
from workflow_notifier.rendering import NotificationPayload


@dataclass(frozen=True)
class NotifyRequest:
    """Raw invocation inputs supplied by the command-line wrapper.

    Attributes:
        webhook_url: Destination webhook URL.
        notification_type: Backend type code (`mattermost`, `1`, `slack`, `2`).
        job_results: Raw job-result text.
        workflow_name: Workflow display name; may fall back to the GitHub context.
        channel: Target channel; blank selects the configured default.
        github_context: Serialized GitHub Actions `github` context.
        dry_run: Render without delivering.
    """

    webhook_url: str
    notification_type: str
    job_results: str
    workflow_name: str = ""
    channel: str = ""
    github_context: str = ""
    dry_run: bool = False


@dataclass(frozen=True)
class NotifyExecutionResult:
    """Result contract for one notification run.

    Attributes:
        exit_code: Process exit code for the run.
        overall_status: Aggregated status when parsing succeeded.
        payload: Rendered payload when rendering succeeded.
        dispatch_result: Delivery metadata when delivery succeeded.
        error_message: Human-readable failure message.
        stage_timeline: Stage transitions in recording order, also logged with
            the final run event.
    """

    exit_code: NotifierExitCode
    overall_status: StatusKind | None = None
    payload: NotificationPayload | None = None
    dispatch_result: DispatchResult | None = None
    error_message: str | None = None
    stage_timeline: tuple[StageEvent, ...] = ()


class NotifyOrchestratorPort(Protocol):
    """Port definition for running the notification pipeline."""

    def job_execute(self, request: NotifyRequest) -> NotifyExecutionResult:
        """Run parse, aggregate, render and dispatch once.

        Args:
            request: Raw invocation inputs.

        Returns:
            NotifyExecutionResult: Final execution status payload.

        Raises:
            TypeError: Raised on programming-contract violations.
        """
