"""Webhook dispatcher delivering rendered payloads over HTTP."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Final

import httpx
import structlog

from workflow_notifier.domain import NotifierValidationError
from workflow_notifier.rendering import NotificationPayload

from .interfaces import DispatchResult, WebhookDispatcherPort
from .webhook_errors import (
    DispatchError,
    DispatchRejectedError,
    DispatchTimeoutError,
    DispatchTransportError,
)

logger = structlog.get_logger(__name__)

WEBHOOK_URL_INPUT_NAME: Final[str] = "webhook-url"
_RESPONSE_EXCERPT_MAX_LENGTH: Final[int] = 200


@dataclass(frozen=True)
class _DispatchRetryPolicy:
    """Immutable retry policy for transport-level failures.

    Attributes:
        max_retries: Retries allowed after the first attempt.
        backoff_seconds: Fixed delay before each retry.
    """

    max_retries: int
    backoff_seconds: float

    def policy_max_attempts(self) -> int:
        """Return the total number of sequential attempts allowed."""

        return 1 + self.max_retries


class WebhookDispatcher(WebhookDispatcherPort):
    """Deliver notification payloads with a bounded timeout and one retry.

    Transport failures (connection refused or reset, timeouts) are retried
    after a fixed backoff. Non-2xx responses are final: they indicate a
    rejected payload or a misconfigured webhook.
    """

    _USER_AGENT: Final[str] = "workflow-notifier/1.0 (Python/httpx)"

    def __init__(
        self,
        request_timeout_seconds: float = 10.0,
        max_retries: int = 1,
        retry_backoff_seconds: float = 2.0,
        transport: httpx.BaseTransport | None = None,
        clock: Callable[[], float] | None = None,
    ):
        """Initialize the dispatcher and its pooled HTTP client.

        Args:
            request_timeout_seconds: Ceiling for one whole HTTP attempt,
                including reading the response body.
            max_retries: Transport-failure retries, `0` or `1`.
            retry_backoff_seconds: Fixed delay before a retry.
            transport: Optional httpx transport override.
            clock: Optional monotonic clock used for elapsed-time reporting.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when configuration values are out of range.
        """

        if request_timeout_seconds <= 0:
            raise ValueError("request_timeout_seconds must be > 0")
        if max_retries not in (0, 1):
            raise ValueError("max_retries must be 0 or 1")
        if retry_backoff_seconds < 0:
            raise ValueError("retry_backoff_seconds must be >= 0")

        self._request_timeout_seconds = request_timeout_seconds
        self._retry_policy = _DispatchRetryPolicy(max_retries=max_retries, backoff_seconds=retry_backoff_seconds)
        self._clock = clock or time.monotonic
        self._client = httpx.Client(
            timeout=request_timeout_seconds,
            transport=transport,
            headers={"User-Agent": self._USER_AGENT},
            follow_redirects=False,
        )

    def __enter__(self) -> WebhookDispatcher:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.adapter_close()

    def adapter_close(self) -> None:
        """Close the pooled HTTP client."""

        self._client.close()

    def adapter_send(self, url: str, payload: NotificationPayload) -> DispatchResult:
        """POST one serialized payload to the webhook URL.

        Args:
            url: Destination webhook URL.
            payload: Rendered backend payload.

        Returns:
            DispatchResult: Delivery metadata for a 2xx response.

        Raises:
            NotifierValidationError: Raised when the URL is blank or not HTTP(S).
            DispatchRejectedError: Raised immediately on a non-2xx response.
            DispatchTimeoutError: Raised when the last attempt timed out.
            DispatchTransportError: Raised when the last attempt failed to connect.
        """

        webhook_url = self._adapter_validate_url(url)
        target_label = f"{webhook_url.scheme}://{webhook_url.host}"
        body = payload.payload_serialize()
        max_attempts = self._retry_policy.policy_max_attempts()
        started_at = self._clock()

        for attempt in range(1, max_attempts + 1):
            logger.info(
                "notify.dispatch.attempt",
                target=target_label,
                backend=payload.backend.value,
                attempt=attempt,
                payload_bytes=len(body),
            )
            try:
                response, response_content = self._adapter_post_within_deadline(webhook_url, body)
            except httpx.TimeoutException as error:
                failure: DispatchError = DispatchTimeoutError(
                    f"webhook request timed out after {attempt} attempt(s)",
                    attempts=attempt,
                )
                cause: Exception = error
            except httpx.TransportError as error:
                failure = DispatchTransportError(
                    f"webhook transport failed after {attempt} attempt(s): {error}",
                    attempts=attempt,
                )
                cause = error
            else:
                return self._adapter_handle_response(
                    response=response,
                    response_content=response_content,
                    payload=payload,
                    attempt=attempt,
                    started_at=started_at,
                    target_label=target_label,
                )

            if attempt < max_attempts:
                logger.warning(
                    "notify.dispatch.retrying",
                    target=target_label,
                    attempt=attempt,
                    error_kind=failure.kind.value,
                    error=str(cause),
                    backoff_seconds=self._retry_policy.backoff_seconds,
                )
                if self._retry_policy.backoff_seconds > 0:
                    time.sleep(self._retry_policy.backoff_seconds)
                continue

            logger.error(
                "notify.dispatch.failed",
                target=target_label,
                attempts=attempt,
                error_kind=failure.kind.value,
                error=str(cause),
            )
            raise failure from cause

        raise RuntimeError("dispatch loop exited without a result")

    def _adapter_post_within_deadline(self, webhook_url: httpx.URL, body: bytes) -> tuple[httpx.Response, bytes]:
        """POST once and read the response body before the attempt deadline.

        The httpx timeout bounds each connect, write and read phase; the
        deadline bounds the whole attempt, including a trickled response body.

        Args:
            webhook_url: Validated webhook URL.
            body: Serialized payload.

        Returns:
            tuple[httpx.Response, bytes]: Response metadata and its full body.

        Raises:
            httpx.TimeoutException: Raised when a phase or the whole attempt
                exceeds the ceiling.
            httpx.TransportError: Raised on connection and protocol failures.
        """

        deadline = self._clock() + self._request_timeout_seconds
        with self._client.stream(
            "POST",
            webhook_url,
            content=body,
            headers={"Content-Type": "application/json"},
        ) as response:
            chunks: list[bytes] = []
            self._adapter_check_deadline(deadline, response.request)
            for chunk in response.iter_bytes():
                chunks.append(chunk)
                self._adapter_check_deadline(deadline, response.request)
        return response, b"".join(chunks)

    def _adapter_check_deadline(self, deadline: float, request: httpx.Request) -> None:
        if self._clock() > deadline:
            raise httpx.ReadTimeout(
                f"response not completed within {self._request_timeout_seconds}s",
                request=request,
            )

    def _adapter_handle_response(
        self,
        response: httpx.Response,
        response_content: bytes,
        payload: NotificationPayload,
        attempt: int,
        started_at: float,
        target_label: str,
    ) -> DispatchResult:
        """Convert one HTTP response into a result or a rejection error.

        Args:
            response: Backend response.
            response_content: Fully read response body.
            payload: Payload that was sent.
            attempt: One-based attempt number.
            started_at: Clock value captured before the first attempt.
            target_label: Redacted webhook label for logs.

        Returns:
            DispatchResult: Delivery metadata for 2xx responses.

        Raises:
            DispatchRejectedError: Raised for any non-2xx status.
        """

        if response.is_success:
            elapsed_seconds = max(0.0, self._clock() - started_at)
            logger.info(
                "notify.dispatch.delivered",
                target=target_label,
                status_code=response.status_code,
                attempts=attempt,
            )
            return DispatchResult(
                backend=payload.backend,
                status_code=response.status_code,
                attempts=attempt,
                elapsed_seconds=elapsed_seconds,
            )

        response_excerpt = response_content.decode(response.encoding or "utf-8", errors="replace")[
            :_RESPONSE_EXCERPT_MAX_LENGTH
        ]
        logger.error(
            "notify.dispatch.rejected",
            target=target_label,
            status_code=response.status_code,
            response_excerpt=response_excerpt,
        )
        raise DispatchRejectedError(
            f"webhook rejected the payload with HTTP {response.status_code}",
            status_code=response.status_code,
            response_excerpt=response_excerpt,
            attempts=attempt,
        )

    def _adapter_validate_url(self, url: str) -> httpx.URL:
        """Validate the webhook URL before any I/O.

        Args:
            url: Raw webhook URL.

        Returns:
            httpx.URL: Parsed HTTP(S) URL.

        Raises:
            NotifierValidationError: Raised when the URL is blank, malformed or
                not HTTP(S).
        """

        normalized_url = (url or "").strip()
        if not normalized_url:
            raise NotifierValidationError(f"{WEBHOOK_URL_INPUT_NAME} is required", WEBHOOK_URL_INPUT_NAME)

        try:
            webhook_url = httpx.URL(normalized_url)
        except httpx.InvalidURL as error:
            raise NotifierValidationError(f"{WEBHOOK_URL_INPUT_NAME} is malformed", WEBHOOK_URL_INPUT_NAME) from error

        if webhook_url.scheme not in ("http", "https") or not webhook_url.host:
            raise NotifierValidationError(
                f"{WEBHOOK_URL_INPUT_NAME} must be an absolute http(s) URL",
                WEBHOOK_URL_INPUT_NAME,
            )
        return webhook_url
