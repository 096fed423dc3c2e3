"""Tests for AuthenticationSession."""

from __future__ import annotations

import pytest

from payfone_auth.core.auth.session import AuthenticationSession
from payfone_auth.core.auth.types import FlowState
from tests.fixtures import FINISH_URL, START_URL


@pytest.fixture
def session():
    """In-progress session."""
    return AuthenticationSession(start_url=START_URL, finish_url=FINISH_URL, in_progress=True)


class TestSession:
    """Session state and result building."""

    def test_sessions_are_isolated(self):
        """Every session gets its own id and history."""
        first = AuthenticationSession(start_url=START_URL, finish_url=FINISH_URL)
        second = AuthenticationSession(start_url=START_URL, finish_url=FINISH_URL)

        first.transition(FlowState.FETCHING_START_URL)

        assert first.session_id != second.session_id
        assert second.history == []
        assert second.state is FlowState.IDLE

    def test_transition_records_history(self, session):
        """Transitions append the previous state."""
        session.transition(FlowState.FETCHING_DEVICE_IP)
        session.transition(FlowState.FETCHING_START_URL)

        assert session.state is FlowState.FETCHING_START_URL
        assert session.history == [FlowState.IDLE, FlowState.FETCHING_DEVICE_IP]

    def test_no_transition_after_terminal(self, session):
        """A finished session cannot move again."""
        session.fail(500, "A network error occurred.")

        with pytest.raises(RuntimeError):
            session.transition(FlowState.FETCHING_FINISH_URL)

    def test_success_result(self, session):
        """A successful session reports device info."""
        session.device_ip = "203.0.113.7"
        session.succeed(0, "Success.", "+15551234567", "CarrierX", "alias1")

        result = session.to_result()

        assert result.is_authenticated is True
        assert result.status_code == 0
        assert result.device_ip == "203.0.113.7"
        assert result.session_id == session.session_id
        assert result.device_info.as_dict() == {"number": "+15551234567", "carrier": "CarrierX", "pfid": "alias1"}

    def test_failure_result(self, session):
        """A failed session has no device info."""
        session.fail(404, "Not Found")

        result = session.to_result()

        assert session.state is FlowState.FAILED
        assert result.is_authenticated is False
        assert result.device_info is None
        assert tuple(result) == (404, "Not Found", False, None)

    def test_closed_only_after_terminal_and_delivered(self, session):
        """is_closed needs a terminal state and a cleared in_progress flag."""
        assert session.is_closed is False

        session.fail(3, "Missing token")
        assert session.is_closed is False

        session.in_progress = False
        assert session.is_closed is True
