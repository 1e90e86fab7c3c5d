"""Tests for the run record state machine."""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from browser_runner.core.enums import RunStatus, RunTrigger
from browser_runner.core.exceptions import InvalidTransitionError
from browser_runner.models.run import ALLOWED_TRANSITIONS, TERMINAL_STATUSES, RunRecord
from tests.helpers import FIXED_NOW, make_run


class FakeClock:
    """Clock returning queued instants."""

    def __init__(self, *instants):
        self.instants = list(instants)

    def __call__(self):
        return self.instants.pop(0) if len(self.instants) > 1 else self.instants[0]


class TestTransitions:
    """Tests for allowed and forbidden transitions."""

    def test_start_sets_started_at(self):
        """Test SCHEDULED -> RUNNING records the start time."""
        run = make_run(_clock=FakeClock(FIXED_NOW))

        run.start()

        assert run.status is RunStatus.RUNNING
        assert run.started_at == FIXED_NOW
        assert run.finished_at is None
        assert run.run_duration is None

    def test_complete_records_duration(self):
        """Test RUNNING -> COMPLETED records finish time and whole-second duration."""
        run = make_run(_clock=FakeClock(FIXED_NOW, FIXED_NOW + timedelta(seconds=42, milliseconds=900)))
        run.start()

        run.complete()

        assert run.status is RunStatus.COMPLETED
        assert run.finished_at == FIXED_NOW + timedelta(seconds=42, milliseconds=900)
        assert run.run_duration == 42
        assert run.is_terminal

    def test_finish_never_before_start(self):
        """Test a clock stepping backwards cannot produce a negative duration."""
        run = make_run(_clock=FakeClock(FIXED_NOW, FIXED_NOW - timedelta(seconds=5)))
        run.start()

        run.fail()

        assert run.finished_at == FIXED_NOW
        assert run.run_duration == 0

    def test_fail_from_scheduled_passes_through_running(self):
        """Test a run failing before start still gets a start time."""
        run = make_run(_clock=FakeClock(FIXED_NOW))

        run.fail()

        assert run.status is RunStatus.FAILED
        assert run.started_at == FIXED_NOW
        assert run.finished_at == FIXED_NOW
        assert run.run_duration == 0

    def test_cannot_complete_scheduled_run(self):
        """Test SCHEDULED -> COMPLETED is rejected."""
        run = make_run()

        with pytest.raises(InvalidTransitionError) as exc_info:
            run.complete()

        assert exc_info.value.details["from"] == "SCHEDULED"
        assert exc_info.value.details["to"] == "COMPLETED"
        assert run.status is RunStatus.SCHEDULED

    @pytest.mark.parametrize(
        "status", [RunStatus.COMPLETED, RunStatus.CANCELLED, RunStatus.PROCESSED]
    )
    def test_terminal_states_cannot_restart(self, status):
        """Test end states never go back to RUNNING."""
        run = make_run(status=status)

        with pytest.raises(InvalidTransitionError):
            run.start()

    def test_retry_cycle(self):
        """Test FAILED -> RETRYING -> RUNNING increments the retry count."""
        run = make_run()
        run.start()
        run.fail()

        run.mark_retrying()
        run.start()

        assert run.status is RunStatus.RUNNING
        assert run.retry_count == 1

    def test_cancel_running_run(self):
        """Test cancelling a running run records its duration."""
        run = make_run(_clock=FakeClock(FIXED_NOW, FIXED_NOW + timedelta(seconds=3)))
        run.start()

        run.cancel()

        assert run.status is RunStatus.CANCELLED
        assert run.run_duration == 3

    def test_cancel_scheduled_run(self):
        """Test cancelling a scheduled run sets the finish time only."""
        run = make_run(_clock=FakeClock(FIXED_NOW))

        run.cancel()

        assert run.status is RunStatus.CANCELLED
        assert run.finished_at == FIXED_NOW
        assert run.started_at is None

    def test_mark_processed(self):
        """Test COMPLETED -> PROCESSED."""
        run = make_run()
        run.start()
        run.complete()

        run.mark_processed()

        assert run.status is RunStatus.PROCESSED

    def test_transition_table_covers_every_status(self):
        """Test every status has an entry and terminal ones only lead to bookkeeping."""
        assert set(ALLOWED_TRANSITIONS) == set(RunStatus)
        for status in TERMINAL_STATUSES:
            assert RunStatus.RUNNING not in ALLOWED_TRANSITIONS[status]


class TestRowMapping:
    """Tests for RunRecord.from_row / to_dict."""

    def test_from_row_serializes_dict_payload(self):
        """Test JSONB payloads decoded by the driver are serialized back to text."""
        row = {
            "id": 5,
            "browser_config_id": 2,
            "user_id": "u",
            "tenant": "t",
            "type": "GET_MESSAGES",
            "payload": {"profileUrl": "https://www.linkedin.com/in/x"},
            "status": "RUNNING",
            "triggered_by": "SCHEDULER",
            "retry_count": None,
        }

        run = RunRecord.from_row(row)

        assert run.payload == '{"profileUrl": "https://www.linkedin.com/in/x"}'
        assert run.status is RunStatus.RUNNING
        assert run.triggered_by is RunTrigger.SCHEDULER
        assert run.retry_count == 0

    def test_to_dict_uses_enum_values(self):
        """Test dictionary form contains plain strings."""
        started = datetime(2024, 1, 1, tzinfo=timezone.utc)
        data = make_run(status=RunStatus.RUNNING, started_at=started).to_dict()

        assert data["status"] == "RUNNING"
        assert data["started_at"] == started
        assert data["triggered_by"] is None
