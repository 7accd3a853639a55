"""Tests for Pydantic models."""

from datetime import datetime, timedelta

import pytest
from pydantic import ValidationError

from trk.models.timesheet import MIN_SPAN, Session, Timesheet
from trk.models.visit import (
    CheckoutKind,
    HookOutcome,
    HookStatus,
    SkipReason,
    VisitEvent,
)


class TestCheckoutKind:
    """Test suite for CheckoutKind enum."""

    def test_values_match_git_flag(self):
        """Test values are the strings git passes as the third argument."""
        assert CheckoutKind.FILE.value == "0"
        assert CheckoutKind.BRANCH.value == "1"


class TestVisitEvent:
    """Test suite for VisitEvent model."""

    def test_timestamp_defaults_to_now(self):
        before = datetime.now()
        visit = VisitEvent(branch_name="main")

        assert before <= visit.timestamp <= datetime.now()

    def test_empty_branch_name_rejected(self):
        with pytest.raises(ValidationError):
            VisitEvent(branch_name="")


class TestHookOutcome:
    """Test suite for HookOutcome constructors."""

    def test_skipped(self):
        outcome = HookOutcome.skipped(SkipReason.DETACHED_HEAD, exit_code=1)

        assert outcome.status == HookStatus.SKIPPED
        assert outcome.reason == SkipReason.DETACHED_HEAD
        assert outcome.branch_name is None
        assert outcome.exit_code == 1

    def test_recorded(self):
        outcome = HookOutcome.recorded("main")

        assert outcome.status == HookStatus.RECORDED
        assert outcome.branch_name == "main"
        assert outcome.exit_code == 0
        assert outcome.error is None

    def test_failed(self):
        outcome = HookOutcome.failed("main", "store is gone")

        assert outcome.status == HookStatus.FAILED
        assert outcome.error == "store is gone"
        assert outcome.exit_code == 1


class TestSession:
    """Test suite for Session model."""

    def test_new_session_spans_one_second(self):
        session = Session()

        assert session.running is True
        assert session.end - session.start == MIN_SPAN
        assert session.branches == set()

    def test_add_branch_deduplicates(self):
        session = Session()

        assert session.add_branch("main") is True
        assert session.add_branch("main") is True

        assert session.branches == {"main"}

    def test_add_branch_ignored_when_finalized(self):
        session = Session()
        session.finalize()

        assert session.add_branch("main") is False
        assert session.branches == set()

    def test_finalize_twice_keeps_first_end(self):
        session = Session()
        first = datetime.now() + timedelta(minutes=5)
        session.finalize(first)
        session.finalize(first + timedelta(hours=1))

        assert session.running is False
        assert session.end == first + MIN_SPAN

    def test_branches_serialize_sorted(self):
        session = Session(branches={"zeta", "alpha", "main"})

        data = session.model_dump(mode="json")

        assert data["branches"] == ["alpha", "main", "zeta"]


class TestTimesheet:
    """Test suite for Timesheet model."""

    def test_user_required(self):
        with pytest.raises(ValidationError):
            Timesheet(user="")

    def test_record_visit_without_session_only_logs(self):
        sheet = Timesheet(user="Test User")

        sheet.record_visit(VisitEvent(branch_name="main"))

        assert [v.branch_name for v in sheet.visits] == ["main"]
        assert sheet.sessions == []

    def test_record_visit_attaches_to_running_session(self):
        sheet = Timesheet(user="Test User", sessions=[Session()])

        sheet.record_visit(VisitEvent(branch_name="feature/x"))

        assert sheet.last_session.branches == {"feature/x"}

    def test_backdated_visit_never_moves_end_backwards(self):
        sheet = Timesheet(user="Test User", sessions=[Session()])
        sheet_end = sheet.end
        session_end = sheet.last_session.end

        sheet.record_visit(VisitEvent(branch_name="old", timestamp=datetime(2020, 1, 1)))

        assert sheet.end == sheet_end
        assert sheet.last_session.end == session_end
        assert sheet.last_session.branches == {"old"}

    def test_later_visit_extends_end(self):
        sheet = Timesheet(user="Test User", sessions=[Session()])
        later = datetime.now() + timedelta(hours=2)

        sheet.record_visit(VisitEvent(branch_name="main", timestamp=later))

        assert sheet.end == later + MIN_SPAN
        assert sheet.last_session.end == later

    def test_record_visit_trims_oldest(self):
        sheet = Timesheet(user="Test User")

        for name in ["a", "b", "c", "d"]:
            sheet.record_visit(VisitEvent(branch_name=name), max_visits=2)

        assert [v.branch_name for v in sheet.visits] == ["c", "d"]

    def test_json_roundtrip_preserves_sessions(self):
        sheet = Timesheet(user="Test User", sessions=[Session(branches={"main"})])

        restored = Timesheet.model_validate(sheet.model_dump(mode="json"))

        assert restored.user == "Test User"
        assert restored.sessions[0].branches == {"main"}
        assert restored.sessions[0].end == sheet.sessions[0].end
