"""Result feedback state read by the presentation layer.

Holds the scanner's session state and the latest classified outcome.  It
is overwritten, not queued: the viewer sees the latest scan result, never
a history.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from pycheckin._redact import redact_for_log
from pycheckin.models._base import CheckInBaseModel
from pycheckin.models.outcome import Found, LookupFailed, NotFound, Outcome, OutcomeNotice
from pycheckin.models.session import IDLE, SessionState

_logger = logging.getLogger(__name__)

OutcomeListener = Callable[[OutcomeNotice], None]
StateListener = Callable[[SessionState], None]


class FeedbackSnapshot(CheckInBaseModel):
    session_state: SessionState
    current_outcome: Outcome | None = None


class ResultFeedbackState:
    """Latest session state and outcome, with change notification.

    Only the lifecycle controller calls :meth:`set_session_state` and only
    the resolution dispatcher calls :meth:`set_outcome`.  Listeners run
    synchronously on the event loop; a failing listener is logged and
    skipped.
    """

    def __init__(self) -> None:
        self._session_state: SessionState = IDLE
        self._current_outcome: Found | NotFound | LookupFailed | None = None
        self._outcome_listeners: list[OutcomeListener] = []
        self._state_listeners: list[StateListener] = []

    @property
    def session_state(self) -> SessionState:
        return self._session_state

    @property
    def current_outcome(self) -> Found | NotFound | LookupFailed | None:
        return self._current_outcome

    def snapshot(self) -> FeedbackSnapshot:
        return FeedbackSnapshot(session_state=self._session_state, current_outcome=self._current_outcome)

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def add_outcome_listener(self, listener: OutcomeListener) -> Callable[[], None]:
        """Register a notification sink; returns a callable that unregisters it."""
        self._outcome_listeners.append(listener)
        return lambda: self._remove(self._outcome_listeners, listener)

    def add_state_listener(self, listener: StateListener) -> Callable[[], None]:
        """Register a session state observer; returns a callable that unregisters it."""
        self._state_listeners.append(listener)
        return lambda: self._remove(self._state_listeners, listener)

    @staticmethod
    def _remove(listeners: list, listener: object) -> None:
        if listener in listeners:
            listeners.remove(listener)

    # ------------------------------------------------------------------
    # Writers
    # ------------------------------------------------------------------

    def set_session_state(self, state: SessionState) -> None:
        if state == self._session_state:
            return
        self._session_state = state
        for listener in list(self._state_listeners):
            try:
                listener(state)
            except Exception:
                _logger.warning("Session state listener failed", exc_info=True)

    def set_outcome(self, outcome: Found | NotFound | LookupFailed) -> None:
        """Replace the current outcome and notify every sink."""
        self._current_outcome = outcome
        _logger.debug("Current outcome: %s", redact_for_log(outcome))
        notice = OutcomeNotice(outcome=outcome)
        for listener in list(self._outcome_listeners):
            try:
                listener(notice)
            except Exception:
                _logger.warning("Notification sink failed", exc_info=True)
