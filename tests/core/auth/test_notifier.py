"""Tests for the status, debug, and completion notifier."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest

from payfone_auth.core.auth.notifier import Notifier
from payfone_auth.core.auth.session import AuthenticationSession
from tests.fixtures import FINISH_URL, START_URL


@pytest.fixture
def session():
    """In-progress session."""
    return AuthenticationSession(start_url=START_URL, finish_url=FINISH_URL, in_progress=True)


class TestCompletion:
    """Exactly-once completion."""

    def test_complete_fires_once(self, session):
        """on_complete receives the result, then the session closes."""
        on_complete = MagicMock()
        notifier = Notifier(on_complete)
        session.succeed(0, "Success.", "+15551234567", "CarrierX", "alias1")
        assert session.is_closed is False

        notifier.complete(session)

        on_complete.assert_called_once_with(
            0,
            "Success.",
            True,
            {"number": "+15551234567", "carrier": "CarrierX", "pfid": "alias1"},
        )
        assert session.in_progress is False
        assert session.is_closed is True
        assert notifier.completed is True

        with pytest.raises(RuntimeError):
            notifier.complete(session)
        assert on_complete.call_count == 1

    def test_in_progress_true_during_callback(self, session):
        """The callback still sees the session as open."""
        seen = []
        notifier = Notifier(lambda *args: seen.append((session.in_progress, session.is_closed)))
        session.fail(2, "Data was not returned from Authentication call.")

        notifier.complete(session)

        assert seen == [(True, False)]
        assert session.is_closed is True

    def test_raising_callback_still_closes_session(self, session):
        """Errors from on_complete propagate but in_progress is cleared."""
        notifier = Notifier(MagicMock(side_effect=ValueError("caller bug")))
        session.fail(404, "Not Found")

        with pytest.raises(ValueError):
            notifier.complete(session)

        assert session.is_closed is True


class TestStatus:
    """Progress reporting."""

    def test_status_is_non_decreasing(self):
        """Checkpoints never go backwards."""
        on_status = MagicMock()
        notifier = Notifier(on_status=on_status)

        for percent in (5, 55, 33, 55, 75):
            notifier.status(percent, "step")

        assert [c.args[0] for c in on_status.call_args_list] == [5, 55, 55, 55, 75]

    def test_status_is_clamped_to_100(self):
        """Percentages stay within [0, 100]."""
        on_status = MagicMock()
        Notifier(on_status=on_status).status(150, "done")
        on_status.assert_called_once_with(100, "done")


class TestLoggerFallback:
    """Routing to the package logger when callbacks are missing or broken."""

    def test_default_sinks_use_logger(self):
        """Without callbacks, status and debug go to the logger."""
        logger = MagicMock(spec=logging.Logger)
        notifier = Notifier(logger=logger)

        notifier.debug("Starting Authentication.")
        notifier.status(5, "Starting Authentication.")

        logger.debug.assert_called_once_with("Starting Authentication.")
        logger.info.assert_called_once_with("STATUS: %s%% - %s", 5, "Starting Authentication.")

    def test_default_sink_caplog(self, caplog):
        """Debug narration reaches the package logger."""
        with caplog.at_level(logging.DEBUG, logger="payfone_auth"):
            Notifier().debug("Fetching device IP address -> started.")

        assert "Fetching device IP address -> started." in caplog.text

    def test_failing_debug_callback_is_logged(self):
        """A raising debug callback does not break the flow."""
        logger = MagicMock(spec=logging.Logger)
        notifier = Notifier(on_debug=MagicMock(side_effect=ValueError("boom")), logger=logger)

        notifier.debug("message")

        logger.warning.assert_called_once()
