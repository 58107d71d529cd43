"""Typed interfaces for adapter-layer responsibilities."""

from dataclasses import dataclass
from typing import Protocol

from workflow_notifier.rendering import Backend, NotificationPayload


@dataclass(frozen=True)
class DispatchResult:
    """Result contract for a delivered notification.

    Attributes:
        backend: Backend the payload was rendered for.
        status_code: HTTP status returned by the webhook.
        attempts: Number of HTTP attempts, including the successful one.
        elapsed_seconds: Wall time spent across all attempts.
    """

    backend: Backend
    status_code: int
    attempts: int
    elapsed_seconds: float


class WebhookDispatcherPort(Protocol):
    """Port definition for delivering rendered payloads to a webhook."""

    def adapter_send(self, url: str, payload: NotificationPayload) -> DispatchResult:
        """Deliver one payload to the webhook URL.

        Args:
            url: Destination webhook URL.
            payload: Rendered backend payload.

        Returns:
            DispatchResult: Delivery metadata for a 2xx response.

        Raises:
            DispatchError: Raised when delivery fails or is rejected.
            NotifierValidationError: Raised when the URL is unusable.
        """

    def adapter_close(self) -> None:
        """Release transport resources held by the dispatcher."""
