"""Main module entrypoint for command-line execution.

This module reads invocation inputs from flags or the environment, runs one
notification, and exits with the documented status code.
"""

from __future__ import annotations

import argparse
import sys
from typing import NoReturn, Sequence

from workflow_notifier.adapters import NotifierExitCode
from workflow_notifier.bootstrap import bootstrap_create_dispatcher, bootstrap_create_notify_orchestrator
from workflow_notifier.config import NotifierSettings, SettingsLoadError, config_load_settings
from workflow_notifier.jobs import NotifyRequest
from workflow_notifier.observability import observability_configure_logging


class _NotifierArgumentParser(argparse.ArgumentParser):
    """Argument parser reporting usage errors with the validation exit code."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        print(f"ERROR: {self.prog}: {message}", file=sys.stderr)
        raise SystemExit(int(NotifierExitCode.VALIDATION_ERROR))


def main(argv: Sequence[str] | None = None) -> None:
    """Run one notification with validated configuration.

    Args:
        argv: Optional argument list; defaults to `sys.argv[1:]`.

    Returns:
        None: Returns normally on success.

    Raises:
        SystemExit: Raised with a non-zero code when the run fails.
    """

    parsed_arguments = main_build_argument_parser().parse_args(argv)

    try:
        settings = config_load_settings()
    except SettingsLoadError as error:
        observability_configure_logging()
        print(f"ERROR: {error}", file=sys.stderr)
        raise SystemExit(int(NotifierExitCode.VALIDATION_ERROR)) from error

    observability_configure_logging(log_level=settings.log_level, log_format=settings.log_format)
    request = main_build_notify_request(parsed_arguments=parsed_arguments, settings=settings)

    with bootstrap_create_dispatcher(settings) as dispatcher:
        orchestrator = bootstrap_create_notify_orchestrator(settings=settings, dispatcher=dispatcher)
        execution_result = orchestrator.job_execute(request)

    if request.dry_run and execution_result.payload is not None:
        print(execution_result.payload.payload_serialize().decode("utf-8"))

    if execution_result.exit_code != NotifierExitCode.SUCCESS:
        print(f"ERROR: {execution_result.error_message}", file=sys.stderr)
        raise SystemExit(int(execution_result.exit_code))


def main_build_argument_parser() -> argparse.ArgumentParser:
    """Build the command-line parser; every input falls back to the environment."""

    argument_parser = _NotifierArgumentParser(
        prog="workflow-notifier",
        description="Send a CI/CD workflow status notification to Mattermost or Slack",
    )
    argument_parser.add_argument("--webhook-url", dest="webhook_url", help="Destination webhook URL (env: WEBHOOK_URL)")
    argument_parser.add_argument(
        "--notification-type",
        dest="notification_type",
        help="Backend: mattermost, 1, slack or 2 (env: NOTIFICATION_TYPE)",
    )
    argument_parser.add_argument("--channel", dest="channel", help="Target channel (env: CHANNEL)")
    argument_parser.add_argument("--workflow-name", dest="workflow_name", help="Workflow name (env: WORKFLOW_NAME)")
    argument_parser.add_argument(
        "--job-results",
        dest="job_results",
        help="Job results as 'name:status' tokens or a JSON object (env: JOB_RESULTS)",
    )
    argument_parser.add_argument(
        "--github-context",
        dest="github_context",
        help="JSON-encoded GitHub Actions github context (env: GITHUB_CONTEXT)",
    )
    argument_parser.add_argument(
        "--dry-run",
        dest="dry_run",
        action="store_true",
        help="Render and print the payload without sending it",
    )
    return argument_parser


def main_build_notify_request(parsed_arguments: argparse.Namespace, settings: NotifierSettings) -> NotifyRequest:
    """Resolve invocation inputs, flags taking precedence over settings.

    Args:
        parsed_arguments: Parsed command-line flags.
        settings: Validated runtime settings.

    Returns:
        NotifyRequest: Raw inputs for the orchestrator.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    def _resolve(flag_value: str | None, setting_value: str) -> str:
        return flag_value if flag_value is not None else setting_value

    return NotifyRequest(
        webhook_url=_resolve(parsed_arguments.webhook_url, settings.webhook_url),
        notification_type=_resolve(parsed_arguments.notification_type, settings.notification_type),
        job_results=_resolve(parsed_arguments.job_results, settings.job_results),
        workflow_name=_resolve(parsed_arguments.workflow_name, settings.workflow_name),
        channel=_resolve(parsed_arguments.channel, settings.channel),
        github_context=_resolve(parsed_arguments.github_context, settings.github_context),
        dry_run=bool(parsed_arguments.dry_run),
    )


if __name__ == "__main__":
    main()
