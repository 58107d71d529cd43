"""Typed domain models shared across runtime layers.

This module provides the immutable data contracts that flow from job-result
parsing through aggregation and rendering.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final, Iterator

UNKNOWN_SENTINEL: Final[str] = "unknown"


class StatusKind(str, Enum):
    """Closed set of per-job and overall workflow outcomes."""

    SUCCESS = "success"
    FAILURE = "failure"
    CANCELLED = "cancelled"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class JobResult:
    """One job outcome.

    Attributes:
        name: Non-empty job name without `:` separators.
        status: Job outcome.
    """

    name: str
    status: StatusKind


@dataclass(frozen=True)
class JobResultSet:
    """Ordered, non-empty collection of job outcomes keyed by job name.

    Attributes:
        results: Job outcomes in order of first appearance in the input.
    """

    results: tuple[JobResult, ...]

    def __post_init__(self) -> None:
        """Validate collection invariants.

        Returns:
            None: Validation does not return a value.

        Raises:
            ValueError: Raised when the set is empty or job names repeat.
        """

        if not self.results:
            raise ValueError("JobResultSet must contain at least one job")
        seen_names: set[str] = set()
        for job_result in self.results:
            if job_result.name in seen_names:
                raise ValueError(f"duplicate job name in JobResultSet: {job_result.name}")
            seen_names.add(job_result.name)

    def __len__(self) -> int:
        return len(self.results)

    def __iter__(self) -> Iterator[JobResult]:
        return iter(self.results)

    def job_names(self) -> tuple[str, ...]:
        """Return job names in rendering order.

        Returns:
            tuple[str, ...]: Ordered job names.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        return tuple(job_result.name for job_result in self.results)

    def job_status(self, name: str) -> StatusKind:
        """Return the status recorded for one job.

        Args:
            name: Job name.

        Returns:
            StatusKind: Recorded job status.

        Raises:
            KeyError: Raised when the job is not part of the set.
        """

        for job_result in self.results:
            if job_result.name == name:
                return job_result.status
        raise KeyError(name)

    def job_statuses(self) -> frozenset[StatusKind]:
        """Return the distinct statuses present in the set."""

        return frozenset(job_result.status for job_result in self.results)

    def as_mapping(self) -> dict[str, str]:
        """Return an insertion-ordered `name -> status value` mapping."""

        return {job_result.name: job_result.status.value for job_result in self.results}


@dataclass(frozen=True)
class WorkflowContext:
    """Immutable snapshot of ambient workflow-run metadata used for display.

    Optional attributes hold `UNKNOWN_SENTINEL` when the source did not supply
    them, so renderers never branch on presence.

    Attributes:
        repository: Repository slug, e.g. `owner/repo`.
        workflow_name: Human-readable workflow name.
        branch: Branch or ref name.
        commit_sha: Full commit SHA.
        actor: User that triggered the run.
        run_id: Workflow run identifier.
        run_url: Browser URL of the workflow run.
    """

    repository: str
    workflow_name: str
    branch: str = UNKNOWN_SENTINEL
    commit_sha: str = UNKNOWN_SENTINEL
    actor: str = UNKNOWN_SENTINEL
    run_id: str = UNKNOWN_SENTINEL
    run_url: str = UNKNOWN_SENTINEL

    @property
    def short_sha(self) -> str:
        """Return the seven-character abbreviated commit SHA."""

        if self.commit_sha == UNKNOWN_SENTINEL:
            return UNKNOWN_SENTINEL
        return self.commit_sha[:7]
