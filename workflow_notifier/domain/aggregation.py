"""Overall workflow status aggregation."""

from __future__ import annotations

from typing import Final

from .models import JobResultSet, StatusKind

# First status present wins; success is the fallback for an all-success set.
STATUS_PRECEDENCE: Final[tuple[StatusKind, ...]] = (
    StatusKind.FAILURE,
    StatusKind.CANCELLED,
    StatusKind.SKIPPED,
    StatusKind.SUCCESS,
)


def domain_aggregate_overall_status(jobs: JobResultSet) -> StatusKind:
    """Reduce per-job outcomes to one overall workflow status.

    Args:
        jobs: Non-empty job result set.

    Returns:
        StatusKind: Highest-precedence status present in the set.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    present_statuses = jobs.job_statuses()
    for status in STATUS_PRECEDENCE:
        if status in present_statuses:
            return status
    return StatusKind.SUCCESS
