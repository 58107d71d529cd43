"""Rendering layer package for backend-specific notification payloads."""

from .payloads import (
	NOTIFICATION_TYPE_INPUT_NAME,
	Backend,
	MattermostPayload,
	NotificationPayload,
	SlackPayload,
	backend_from_type_code,
)
from .renderer import (
	DEFAULT_MATTERMOST_USERNAME,
	SLACK_MAX_SECTION_BLOCKS,
	SLACK_SECTION_TEXT_MAX_LENGTH,
	STATUS_PRESENTATION,
	StatusPresentation,
	render_job_lines,
	render_mattermost_payload,
	render_notification_payload,
	render_slack_escape,
	render_slack_payload,
	render_slack_sections,
	render_title,
)

__all__ = [
	"Backend",
	"DEFAULT_MATTERMOST_USERNAME",
	"MattermostPayload",
	"NOTIFICATION_TYPE_INPUT_NAME",
	"NotificationPayload",
	"SLACK_MAX_SECTION_BLOCKS",
	"SLACK_SECTION_TEXT_MAX_LENGTH",
	"STATUS_PRESENTATION",
	"SlackPayload",
	"StatusPresentation",
	"backend_from_type_code",
	"render_job_lines",
	"render_mattermost_payload",
	"render_notification_payload",
	"render_slack_escape",
	"render_slack_payload",
	"render_slack_sections",
	"render_title",
]
