"""Job-layer notification orchestrator that logs a stage timeline per run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

import structlog

from workflow_notifier.adapters import NotifierExitCode, WebhookDispatcherPort, exit_code_for_exception
from workflow_notifier.domain import (
    NotifierError,
    StageStatus,
    StageTimeline,
    domain_aggregate_overall_status,
    domain_build_workflow_context,
    domain_context_fields_from_github,
    domain_decode_github_context,
    domain_merge_context_fields,
    domain_parse_job_results,
)
from workflow_notifier.rendering import (
    DEFAULT_MATTERMOST_USERNAME,
    backend_from_type_code,
    render_notification_payload,
)

from .interfaces import NotifyExecutionResult, NotifyOrchestratorPort, NotifyRequest

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class NotifyOrchestratorConfig:
    """Configuration values for notification orchestration.

    Attributes:
        default_channel: Channel used when the request supplies none.
        mattermost_username: Bot display name for Mattermost posts.
        github_environment: Ambient GitHub values keyed like the `github`
            context; lowest-precedence context source.
    """

    default_channel: str = "cicd-notifications"
    mattermost_username: str = DEFAULT_MATTERMOST_USERNAME
    github_environment: Mapping[str, str] = field(default_factory=dict)


class NotifyOrchestrator(NotifyOrchestratorPort):
    """Concrete orchestrator for one parse-render-dispatch run."""

    def __init__(self, dispatcher: WebhookDispatcherPort, config: NotifyOrchestratorConfig | None = None):
        """Initialize orchestrator dependencies.

        Args:
            dispatcher: Adapter used for webhook delivery.
            config: Orchestration configuration.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when dependencies or config values are invalid.
        """

        if dispatcher is None:
            raise ValueError("dispatcher must not be None")
        resolved_config = config or NotifyOrchestratorConfig()
        if not resolved_config.default_channel.strip():
            raise ValueError("config.default_channel must not be blank")

        self._dispatcher = dispatcher
        self._config = resolved_config

    def job_execute(self, request: NotifyRequest) -> NotifyExecutionResult:
        """Run the notification pipeline once.

        Nothing is delivered when any stage before dispatch fails.

        Args:
            request: Raw invocation inputs.

        Returns:
            NotifyExecutionResult: Exit code, intermediate results and timeline.

        Raises:
            TypeError: Raised on programming-contract violations in rendering.
        """

        timeline = StageTimeline()
        overall_status = None
        payload = None
        current_stage = "parse"

        try:
            timeline.timeline_record("parse", StageStatus.STARTED)
            jobs = domain_parse_job_results(request.job_results)
            overall_status = domain_aggregate_overall_status(jobs)
            timeline.timeline_record(
                "parse",
                StageStatus.COMPLETED,
                job_count=len(jobs),
                overall_status=overall_status.value,
            )

            current_stage = "context"
            timeline.timeline_record("context", StageStatus.STARTED)
            backend = backend_from_type_code(request.notification_type)
            context = domain_build_workflow_context(
                domain_merge_context_fields(
                    {"workflow_name": request.workflow_name},
                    domain_context_fields_from_github(domain_decode_github_context(request.github_context)),
                    domain_context_fields_from_github(self._config.github_environment),
                )
            )
            timeline.timeline_record(
                "context",
                StageStatus.COMPLETED,
                backend=backend.value,
                repository=context.repository,
            )

            current_stage = "render"
            channel = request.channel.strip() or self._config.default_channel
            payload = render_notification_payload(
                backend=backend,
                overall=overall_status,
                jobs=jobs,
                ctx=context,
                channel=channel,
                mattermost_username=self._config.mattermost_username,
            )
            timeline.timeline_record("render", StageStatus.COMPLETED, channel=channel)

            if request.dry_run:
                timeline.timeline_record("run", StageStatus.COMPLETED, dry_run=True)
                logger.info(
                    "notify.run.dry_run",
                    backend=backend.value,
                    overall_status=overall_status.value,
                    timeline=timeline.timeline_as_log_field(),
                )
                return NotifyExecutionResult(
                    exit_code=NotifierExitCode.SUCCESS,
                    overall_status=overall_status,
                    payload=payload,
                    stage_timeline=timeline.timeline_events(),
                )

            current_stage = "dispatch"
            timeline.timeline_record("dispatch", StageStatus.STARTED)
            dispatch_result = self._dispatcher.adapter_send(request.webhook_url, payload)
            timeline.timeline_record(
                "dispatch",
                StageStatus.COMPLETED,
                status_code=dispatch_result.status_code,
                attempts=dispatch_result.attempts,
            )
        except NotifierError as error:
            exit_code = exit_code_for_exception(error)
            timeline.timeline_record(
                current_stage,
                StageStatus.FAILED,
                error_type=type(error).__name__,
                exit_code=int(exit_code),
            )
            timeline.timeline_record("run", StageStatus.FAILED)
            logger.error(
                "notify.run.failed",
                stage=current_stage,
                error=str(error),
                exit_code=int(exit_code),
                timeline=timeline.timeline_as_log_field(),
            )
            return NotifyExecutionResult(
                exit_code=exit_code,
                overall_status=overall_status,
                payload=payload,
                error_message=str(error),
                stage_timeline=timeline.timeline_events(),
            )

        timeline.timeline_record("run", StageStatus.COMPLETED)
        logger.info(
            "notify.run.completed",
            overall_status=overall_status.value,
            status_code=dispatch_result.status_code,
            timeline=timeline.timeline_as_log_field(),
        )
        return NotifyExecutionResult(
            exit_code=NotifierExitCode.SUCCESS,
            overall_status=overall_status,
            payload=payload,
            dispatch_result=dispatch_result,
            stage_timeline=timeline.timeline_events(),
        )
