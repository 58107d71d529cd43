"""Backend selection and backend-specific notification payload contracts."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Final, Union

from workflow_notifier.domain import NotifierValidationError

NOTIFICATION_TYPE_INPUT_NAME: Final[str] = "notification-type"


class Backend(str, Enum):
    """Closed set of supported chat backends."""

    MATTERMOST = "mattermost"
    SLACK = "slack"


_BACKEND_BY_TYPE_CODE: Final[dict[str, Backend]] = {
    "mattermost": Backend.MATTERMOST,
    "1": Backend.MATTERMOST,
    "slack": Backend.SLACK,
    "2": Backend.SLACK,
}


def backend_from_type_code(type_code: str | None) -> Backend:
    """Resolve an external notification type code to a backend.

    Accepts backend names and the legacy numeric aliases `1` (Mattermost) and
    `2` (Slack), case-insensitively.

    Args:
        type_code: Raw notification type input.

    Returns:
        Backend: Selected backend.

    Raises:
        NotifierValidationError: Raised when the code is blank or unknown.
    """

    normalized_code = (type_code or "").strip().lower()
    if not normalized_code:
        raise NotifierValidationError(f"{NOTIFICATION_TYPE_INPUT_NAME} is required", NOTIFICATION_TYPE_INPUT_NAME)

    backend = _BACKEND_BY_TYPE_CODE.get(normalized_code)
    if backend is None:
        supported_codes = ", ".join(_BACKEND_BY_TYPE_CODE)
        raise NotifierValidationError(
            f"unsupported {NOTIFICATION_TYPE_INPUT_NAME} {type_code!r}; expected one of: {supported_codes}",
            NOTIFICATION_TYPE_INPUT_NAME,
        )
    return backend


def _payload_serialize_body(body: dict[str, Any]) -> bytes:
    return json.dumps(body, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


@dataclass(frozen=True)
class MattermostPayload:
    """Rendered Mattermost incoming-webhook message with one attachment.

    Attributes:
        channel: Target channel name, passed through verbatim.
        username: Display name of the posting bot.
        title: Rendered title with overall emoji and label.
        color: Side-bar color keyed to the overall status.
        emoji: Overall status emoji.
        job_lines: `name: emoji label` lines in input order.
        link: Workflow run URL.
    """

    channel: str
    username: str
    title: str
    color: str
    emoji: str
    job_lines: tuple[str, ...]
    link: str

    @property
    def backend(self) -> Backend:
        return Backend.MATTERMOST

    def payload_body(self) -> dict[str, Any]:
        """Return the Mattermost webhook JSON body.

        Returns:
            dict[str, Any]: JSON-compatible body with insertion-ordered keys.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        return {
            "channel": self.channel,
            "username": self.username,
            "attachments": [
                {
                    "fallback": self.title,
                    "color": self.color,
                    "title": self.title,
                    "text": "\n".join(self.job_lines),
                    "footer": f"Run: {self.link}",
                }
            ],
        }

    def payload_serialize(self) -> bytes:
        """Return the deterministic UTF-8 JSON encoding of the body."""

        return _payload_serialize_body(self.payload_body())


@dataclass(frozen=True)
class SlackPayload:
    """Rendered Slack block-kit message.

    Slack messages carry no color bar; status is conveyed by emoji and label.

    Attributes:
        channel: Target channel ID, passed through verbatim.
        title: Header text with overall emoji, workflow name and label.
        fallback_text: Notification fallback, the title escaped for mrkdwn.
        emoji: Overall status emoji.
        job_sections: mrkdwn section texts holding job lines in input order.
        context_lines: Repository, branch, commit, actor and run lines.
        link: Workflow run URL.
    """

    channel: str
    title: str
    fallback_text: str
    emoji: str
    job_sections: tuple[str, ...]
    context_lines: tuple[str, ...]
    link: str

    @property
    def backend(self) -> Backend:
        return Backend.SLACK

    def payload_body(self) -> dict[str, Any]:
        """Return the Slack webhook JSON body.

        Returns:
            dict[str, Any]: JSON-compatible body with a header block, one
                section block per job section and a context block.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        return {
            "channel": self.channel,
            "text": self.fallback_text,
            "blocks": [
                {
                    "type": "header",
                    "text": {"type": "plain_text", "text": self.title, "emoji": True},
                },
                *(
                    {"type": "section", "text": {"type": "mrkdwn", "text": section_text}}
                    for section_text in self.job_sections
                ),
                {
                    "type": "context",
                    "elements": [{"type": "mrkdwn", "text": line} for line in self.context_lines],
                },
            ],
        }

    def payload_serialize(self) -> bytes:
        """Return the deterministic UTF-8 JSON encoding of the body."""

        return _payload_serialize_body(self.payload_body())


NotificationPayload = Union[MattermostPayload, SlackPayload]
