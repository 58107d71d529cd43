"""Application bootstrap wiring for dependency assembly from settings."""

from workflow_notifier.adapters import WebhookDispatcher, WebhookDispatcherPort
from workflow_notifier.config import NotifierSettings
from workflow_notifier.jobs import NotifyOrchestrator, NotifyOrchestratorConfig


def bootstrap_create_dispatcher(settings: NotifierSettings) -> WebhookDispatcher:
    """Build the webhook dispatcher from validated settings.

    Args:
        settings: Validated runtime settings.

    Returns:
        WebhookDispatcher: Dispatcher owning a pooled HTTP client.

    Raises:
        ValueError: Raised when timeout or retry settings are out of range.
    """

    return WebhookDispatcher(
        request_timeout_seconds=settings.request_timeout_seconds,
        max_retries=settings.max_retries,
        retry_backoff_seconds=settings.retry_backoff_seconds,
    )


def bootstrap_create_notify_orchestrator(
    settings: NotifierSettings,
    dispatcher: WebhookDispatcherPort,
) -> NotifyOrchestrator:
    """Build the notification orchestrator for the CLI trigger surface.

    Args:
        settings: Validated runtime settings.
        dispatcher: Webhook dispatcher used for delivery.

    Returns:
        NotifyOrchestrator: Fully wired orchestrator instance.

    Raises:
        ValueError: Raised when configuration values are invalid.
    """

    return NotifyOrchestrator(
        dispatcher=dispatcher,
        config=NotifyOrchestratorConfig(
            default_channel=settings.default_channel,
            mattermost_username=settings.mattermost_username,
            github_environment=settings.settings_github_environment(),
        ),
    )
