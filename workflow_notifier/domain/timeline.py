"""Ordered stage-transition record for one notification run."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Mapping


class StageStatus(str, Enum):
    """Transition markers recorded for a pipeline stage."""

    STARTED = "started"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class StageEvent:
    """One recorded stage transition.

    Attributes:
        stage: Stage name, e.g. `parse` or `dispatch`.
        status: Transition marker.
        at_utc: Timezone-aware UTC timestamp of the transition.
        details: Structured details; empty when none were recorded.
    """

    stage: str
    status: StageStatus
    at_utc: datetime
    details: Mapping[str, Any] = field(default_factory=dict)

    def event_as_log_field(self) -> dict[str, object]:
        """Return a JSON-compatible mapping suitable for a structlog field.

        Returns:
            dict[str, object]: Stage, status, ISO timestamp and optional details.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        log_field: dict[str, object] = {
            "stage": self.stage,
            "status": self.status.value,
            "at_utc": self.at_utc.isoformat(),
        }
        if self.details:
            log_field["details"] = dict(self.details)
        return log_field


def _timeline_utc_now() -> datetime:
    return datetime.now(timezone.utc)


class StageTimeline:
    """Append-only list of stage transitions in recording order."""

    def __init__(self, clock: Callable[[], datetime] | None = None):
        self._clock = clock or _timeline_utc_now
        self._events: list[StageEvent] = []

    def timeline_record(self, stage: str, status: StageStatus, **details: Any) -> StageEvent:
        """Append one transition stamped with the current UTC time.

        Args:
            stage: Stage name.
            status: Transition marker.
            **details: Structured details kept with the event.

        Returns:
            StageEvent: Recorded event.

        Raises:
            ValueError: Raised when the stage name is blank.
        """

        if not stage.strip():
            raise ValueError("stage must not be blank")
        event = StageEvent(stage=stage, status=status, at_utc=self._clock(), details=dict(details))
        self._events.append(event)
        return event

    def timeline_events(self) -> tuple[StageEvent, ...]:
        return tuple(self._events)

    def timeline_as_log_field(self) -> list[dict[str, object]]:
        """Return every event as a JSON-compatible mapping, oldest first."""

        return [event.event_as_log_field() for event in self._events]
