"""Browser automation run record and its state machine."""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, Mapping, Optional

from browser_runner.core.enums import RunStatus, RunTrigger
from browser_runner.core.exceptions import InvalidTransitionError

ALLOWED_TRANSITIONS: Mapping[RunStatus, FrozenSet[RunStatus]] = {
    RunStatus.SCHEDULED: frozenset({RunStatus.RUNNING, RunStatus.CANCELLED}),
    RunStatus.RUNNING: frozenset({RunStatus.COMPLETED, RunStatus.FAILED, RunStatus.CANCELLED}),
    RunStatus.FAILED: frozenset({RunStatus.RETRYING}),
    RunStatus.RETRYING: frozenset({RunStatus.RUNNING, RunStatus.CANCELLED}),
    RunStatus.COMPLETED: frozenset({RunStatus.PROCESSED}),
    RunStatus.CANCELLED: frozenset(),
    RunStatus.PROCESSED: frozenset(),
}

TERMINAL_STATUSES: FrozenSet[RunStatus] = frozenset(
    {RunStatus.COMPLETED, RunStatus.FAILED, RunStatus.CANCELLED, RunStatus.PROCESSED}
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class RunRecord:
    """
    One scheduled execution of a browser-driven action.

    ``type`` and ``payload`` are kept as stored (string and serialized JSON);
    they are validated when the run is dispatched, not when it is loaded.
    """

    id: int
    browser_config_id: int
    user_id: str
    tenant: str
    type: str
    payload: Optional[str] = None
    status: RunStatus = RunStatus.SCHEDULED
    scheduled_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    run_duration: Optional[int] = None
    retry_count: int = 0
    priority: int = 0
    triggered_by: Optional[RunTrigger] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    log_location: Optional[str] = None
    _clock: Any = field(default=_utcnow, repr=False, compare=False)

    @property
    def is_terminal(self) -> bool:
        """Whether the run has reached an end state."""
        return self.status in TERMINAL_STATUSES

    def can_transition(self, target: RunStatus) -> bool:
        """Check whether ``target`` is reachable from the current status."""
        return target in ALLOWED_TRANSITIONS[self.status]

    def _transition(self, target: RunStatus) -> datetime:
        if not self.can_transition(target):
            raise InvalidTransitionError(self.id, self.status.value, target.value)
        now = self._clock()
        self.status = target
        self.updated_at = now
        return now

    def _finish(self, target: RunStatus) -> None:
        now = self._transition(target)
        if self.started_at is not None and now < self.started_at:
            now = self.started_at
        self.finished_at = now
        if self.started_at is not None:
            self.run_duration = int((now - self.started_at).total_seconds())

    def start(self) -> None:
        """SCHEDULED/RETRYING -> RUNNING."""
        now = self._transition(RunStatus.RUNNING)
        self.started_at = now
        self.finished_at = None
        self.run_duration = None

    def complete(self) -> None:
        """RUNNING -> COMPLETED."""
        self._finish(RunStatus.COMPLETED)

    def fail(self) -> None:
        """
        RUNNING -> FAILED.

        A run that fails before it was started (e.g. its browser config could
        not be resolved) passes through RUNNING first, so it ends with a
        zero-length duration instead of a finish time without a start time.
        """
        if self.status in (RunStatus.SCHEDULED, RunStatus.RETRYING):
            self.start()
        self._finish(RunStatus.FAILED)

    def cancel(self) -> None:
        """SCHEDULED/RUNNING/RETRYING -> CANCELLED (external actor)."""
        if self.status is RunStatus.RUNNING:
            self._finish(RunStatus.CANCELLED)
        else:
            self._transition(RunStatus.CANCELLED)
            self.finished_at = self.updated_at

    def mark_retrying(self) -> None:
        """FAILED -> RETRYING (scheduler re-dispatch)."""
        self._transition(RunStatus.RETRYING)
        self.retry_count += 1

    def mark_processed(self) -> None:
        """COMPLETED -> PROCESSED once the result has been consumed."""
        self._transition(RunStatus.PROCESSED)

    def to_dict(self) -> Dict[str, Any]:
        """Convert run to dictionary."""
        return {
            "id": self.id,
            "browser_config_id": self.browser_config_id,
            "user_id": self.user_id,
            "tenant": self.tenant,
            "type": self.type,
            "payload": self.payload,
            "status": self.status.value,
            "scheduled_at": self.scheduled_at,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "run_duration": self.run_duration,
            "retry_count": self.retry_count,
            "priority": self.priority,
            "triggered_by": self.triggered_by.value if self.triggered_by else None,
            "log_location": self.log_location,
        }

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "RunRecord":
        """Build a run from a ``browser_automation_runs`` row."""
        payload = row.get("payload")
        if payload is not None and not isinstance(payload, str):
            payload = json.dumps(payload)
        triggered_by = row.get("triggered_by")
        return cls(
            id=row["id"],
            browser_config_id=row["browser_config_id"],
            user_id=row["user_id"],
            tenant=row["tenant"],
            type=row["type"],
            payload=payload,
            status=RunStatus(row.get("status") or RunStatus.SCHEDULED.value),
            scheduled_at=row.get("scheduled_at"),
            started_at=row.get("started_at"),
            finished_at=row.get("finished_at"),
            run_duration=row.get("run_duration"),
            retry_count=row.get("retry_count") or 0,
            priority=row.get("priority") or 0,
            triggered_by=RunTrigger(triggered_by) if triggered_by else None,
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
            log_location=row.get("log_location"),
        )
