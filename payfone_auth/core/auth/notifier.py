"""Status, debug, and completion notification plumbing.

Callbacks are optional. When a status or debug callback is not supplied,
the message goes to the package logger instead.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from ...const import PROGRESS_COMPLETE, PROGRESS_NOTIFYING
from .session import AuthenticationSession

_LOGGER = logging.getLogger(__name__)

CompletionCallback = Callable[[int, str, bool, dict[str, str] | None], Any]
StatusCallback = Callable[[int, str], Any]
DebugCallback = Callable[[str], Any]


class Notifier:
    """Routes flow notifications for one session.

    Status values are clamped so they never go backwards, even when a
    redirect chase re-enters an earlier checkpoint.
    """

    def __init__(
        self,
        on_complete: CompletionCallback | None = None,
        on_status: StatusCallback | None = None,
        on_debug: DebugCallback | None = None,
        logger: logging.Logger | None = None,
    ):
        """Initialize notifier.

        Args:
            on_complete: Called exactly once with the final result
            on_status: Receives (percent, activity) progress updates
            on_debug: Receives diagnostic narration
            logger: Sink used when on_status/on_debug are not supplied
        """
        self._on_complete = on_complete
        self._on_status = on_status
        self._on_debug = on_debug
        self._logger = logger or _LOGGER
        self._last_percent = 0
        self._completed = False

    @property
    def completed(self) -> bool:
        """Whether the completion callback has already fired."""
        return self._completed

    def debug(self, message: str) -> None:
        """Emit a debugging message."""
        if self._on_debug is None:
            self._logger.debug(message)
            return
        try:
            self._on_debug(message)
        except Exception:
            self._logger.warning("Debug callback raised", exc_info=True)

    def status(self, percent: int, activity: str) -> None:
        """Emit a progress update."""
        percent = max(self._last_percent, min(percent, PROGRESS_COMPLETE))
        self._last_percent = percent
        if self._on_status is None:
            self._logger.info("STATUS: %s%% - %s", percent, activity)
            return
        try:
            self._on_status(percent, activity)
        except Exception:
            self._logger.warning("Status callback raised", exc_info=True)

    def complete(self, session: AuthenticationSession) -> None:
        """Notify the caller of the session's final result.

        Fires the completion callback at most once, then clears the
        session's in-progress flag.
        """
        if self._completed:
            raise RuntimeError(f"Completion already delivered for session {session.session_id}")
        self._completed = True

        self.status(PROGRESS_NOTIFYING, "Notifying caller of results.")
        self.debug("Notifying caller of results.")
        device_info = session.device_info()
        try:
            if self._on_complete is not None:
                self._on_complete(
                    session.final_status,
                    session.final_description,
                    session.is_authenticated,
                    device_info.as_dict() if device_info else None,
                )
        finally:
            session.in_progress = False
        self.status(PROGRESS_COMPLETE, "Authentication complete.")
