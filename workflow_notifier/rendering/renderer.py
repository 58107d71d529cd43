"""Pure rendering of aggregated workflow outcomes into backend payloads.

Rendering performs no I/O and is deterministic: identical inputs always
serialize to identical bytes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from workflow_notifier.domain import JobResultSet, StatusKind, WorkflowContext

from .payloads import Backend, MattermostPayload, NotificationPayload, SlackPayload

DEFAULT_MATTERMOST_USERNAME: Final[str] = "CI/CD Notifier"
SLACK_HEADER_MAX_LENGTH: Final[int] = 150
SLACK_SECTION_TEXT_MAX_LENGTH: Final[int] = 3000
# 50 blocks per message, minus the header and context blocks.
SLACK_MAX_SECTION_BLOCKS: Final[int] = 48


@dataclass(frozen=True)
class StatusPresentation:
    """Display attributes shared by every backend for one status.

    Attributes:
        emoji: Status emoji.
        color: Hex color code.
        label: Human-readable label.
    """

    emoji: str
    color: str
    label: str


STATUS_PRESENTATION: Final[dict[StatusKind, StatusPresentation]] = {
    StatusKind.SUCCESS: StatusPresentation(emoji="✅", color="#00FF00", label="Success"),
    StatusKind.FAILURE: StatusPresentation(emoji="❌", color="#FF0000", label="Failure"),
    StatusKind.CANCELLED: StatusPresentation(emoji="◻️", color="#808080", label="Cancelled"),
    StatusKind.SKIPPED: StatusPresentation(emoji="⏭️", color="#FFA500", label="Skipped"),
}


def render_notification_payload(
    backend: Backend,
    overall: StatusKind,
    jobs: JobResultSet,
    ctx: WorkflowContext,
    channel: str,
    mattermost_username: str = DEFAULT_MATTERMOST_USERNAME,
) -> NotificationPayload:
    """Render the payload variant for the selected backend.

    Args:
        backend: Target chat backend.
        overall: Aggregated workflow status.
        jobs: Job outcomes in display order.
        ctx: Validated workflow context.
        channel: Target channel name or ID, passed through verbatim.
        mattermost_username: Bot display name used by the Mattermost variant.

    Returns:
        NotificationPayload: Backend-specific immutable payload.

    Raises:
        TypeError: Raised when `backend` is not a supported `Backend` value.
    """

    if backend is Backend.MATTERMOST:
        return render_mattermost_payload(
            overall=overall,
            jobs=jobs,
            ctx=ctx,
            channel=channel,
            username=mattermost_username,
        )
    if backend is Backend.SLACK:
        return render_slack_payload(overall=overall, jobs=jobs, ctx=ctx, channel=channel)
    raise TypeError(f"unsupported backend: {backend!r}")


def render_mattermost_payload(
    overall: StatusKind,
    jobs: JobResultSet,
    ctx: WorkflowContext,
    channel: str,
    username: str = DEFAULT_MATTERMOST_USERNAME,
) -> MattermostPayload:
    """Render an attachment-style Mattermost payload.

    Args:
        overall: Aggregated workflow status.
        jobs: Job outcomes in display order.
        ctx: Validated workflow context.
        channel: Target channel name.
        username: Bot display name.

    Returns:
        MattermostPayload: Payload colored by the overall status.

    Raises:
        RuntimeError: This renderer does not raise runtime errors.
    """

    presentation = STATUS_PRESENTATION[overall]
    return MattermostPayload(
        channel=channel,
        username=username,
        title=render_title(overall=overall, workflow_name=ctx.workflow_name),
        color=presentation.color,
        emoji=presentation.emoji,
        job_lines=render_job_lines(jobs),
        link=ctx.run_url,
    )


def render_slack_payload(
    overall: StatusKind,
    jobs: JobResultSet,
    ctx: WorkflowContext,
    channel: str,
) -> SlackPayload:
    """Render a block-kit Slack payload.

    Job names and context values are escaped for mrkdwn, and job lines are
    packed into as many section blocks as Slack's size limits require.

    Args:
        overall: Aggregated workflow status.
        jobs: Job outcomes in display order.
        ctx: Validated workflow context.
        channel: Target channel ID.

    Returns:
        SlackPayload: Payload with header, job sections and context lines.

    Raises:
        RuntimeError: This renderer does not raise runtime errors.
    """

    presentation = STATUS_PRESENTATION[overall]
    title = render_title(overall=overall, workflow_name=ctx.workflow_name)
    if len(title) > SLACK_HEADER_MAX_LENGTH:
        title = title[: SLACK_HEADER_MAX_LENGTH - 1] + "…"

    return SlackPayload(
        channel=channel,
        title=title,
        fallback_text=render_slack_escape(title),
        emoji=presentation.emoji,
        job_sections=render_slack_sections(render_job_lines(jobs, escape_markup=True)),
        context_lines=(
            f"*Repository:* {render_slack_escape(ctx.repository)}",
            f"*Branch:* {render_slack_escape(ctx.branch)}",
            f"*Commit:* {render_slack_escape(ctx.short_sha)}",
            f"*Actor:* {render_slack_escape(ctx.actor)}",
            f"*Run:* {render_slack_escape(ctx.run_url)}",
        ),
        link=ctx.run_url,
    )


def render_title(overall: StatusKind, workflow_name: str) -> str:
    presentation = STATUS_PRESENTATION[overall]
    return f"{presentation.emoji} {workflow_name}: {presentation.label}"


def render_job_lines(jobs: JobResultSet, escape_markup: bool = False) -> tuple[str, ...]:
    """Render `name: emoji label` lines in input order.

    Args:
        jobs: Job outcomes in display order.
        escape_markup: Escape job names for Slack mrkdwn.

    Returns:
        tuple[str, ...]: One line per job.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    lines: list[str] = []
    for job_result in jobs:
        presentation = STATUS_PRESENTATION[job_result.status]
        job_name = render_slack_escape(job_result.name) if escape_markup else job_result.name
        lines.append(f"{job_name}: {presentation.emoji} {presentation.label}")
    return tuple(lines)


def render_slack_escape(text: str) -> str:
    """Escape the three characters Slack mrkdwn treats as control syntax."""

    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def render_slack_sections(job_lines: tuple[str, ...]) -> tuple[str, ...]:
    """Pack job lines into section texts that fit Slack block limits.

    Lines are kept whole and in order. A single line longer than a section is
    truncated with `…`. When more than `SLACK_MAX_SECTION_BLOCKS` sections
    would be needed, the last kept section ends with an `… and N more` line.

    Args:
        job_lines: Rendered job lines in display order.

    Returns:
        tuple[str, ...]: Newline-joined section texts.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    sections: list[list[str]] = []
    current_section: list[str] = []
    current_length = 0
    for line in job_lines:
        if len(line) > SLACK_SECTION_TEXT_MAX_LENGTH:
            line = line[: SLACK_SECTION_TEXT_MAX_LENGTH - 1] + "…"
        separator_length = 1 if current_section else 0
        if current_section and current_length + separator_length + len(line) > SLACK_SECTION_TEXT_MAX_LENGTH:
            sections.append(current_section)
            current_section = [line]
            current_length = len(line)
            continue
        current_section.append(line)
        current_length += separator_length + len(line)
    if current_section:
        sections.append(current_section)

    if len(sections) > SLACK_MAX_SECTION_BLOCKS:
        omitted_count = sum(len(section) for section in sections[SLACK_MAX_SECTION_BLOCKS:])
        sections = sections[:SLACK_MAX_SECTION_BLOCKS]
        last_section = sections[-1]
        while True:
            overflow_line = f"… and {omitted_count} more"
            if len("\n".join([*last_section, overflow_line])) <= SLACK_SECTION_TEXT_MAX_LENGTH:
                break
            last_section.pop()
            omitted_count += 1
        last_section.append(overflow_line)

    return tuple("\n".join(section) for section in sections)
