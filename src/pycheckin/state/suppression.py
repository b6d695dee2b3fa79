"""Per-session duplicate suppression.

A camera sampling continuously re-decodes a code held in front of it many
times per second.  This window turns that burst into a single admitted
scan while still letting the same student check in again after a
deliberate re-scan.
"""

from __future__ import annotations

import logging

from pycheckin._constants import DEFAULT_SUPPRESSION_WINDOW
from pycheckin.models.events import SuppressionEntry
from pycheckin.models.session import SessionPhase, SessionState
from pycheckin.state.policy import is_stale, should_admit

_logger = logging.getLogger(__name__)


class SuppressionWindow:
    """Admission filter keyed by raw payload.

    This is the only writer of the suppression table.  The lifecycle
    controller clears it through :meth:`on_session_state` so suppression
    never leaks from one session into the next.
    """

    def __init__(self, window: float = DEFAULT_SUPPRESSION_WINDOW) -> None:
        if window <= 0:
            raise ValueError(f"window must be positive, got {window}")
        self._window = window
        self._entries: dict[str, SuppressionEntry] = {}

    @property
    def window(self) -> float:
        return self._window

    def admit(self, payload: str, observed_at: float) -> bool:
        """Return True if the decode is a new scan, recording it.

        Dropped duplicates return False and leave the table untouched.
        """
        entry = self._entries.get(payload)
        last = entry.last_accepted_at if entry is not None else None
        if not should_admit(last_accepted_at=last, observed_at=observed_at, window=self._window):
            return False
        self._entries[payload] = SuppressionEntry(payload=payload, last_accepted_at=observed_at)
        return True

    def get(self, payload: str) -> SuppressionEntry | None:
        return self._entries.get(payload)

    def __len__(self) -> int:
        return len(self._entries)

    def prune(self, now: float) -> int:
        """Drop entries that can no longer suppress anything; return how many."""
        stale = [
            payload
            for payload, entry in self._entries.items()
            if is_stale(last_accepted_at=entry.last_accepted_at, now=now, window=self._window)
        ]
        for payload in stale:
            del self._entries[payload]
        return len(stale)

    def reset(self) -> None:
        if self._entries:
            _logger.debug("Clearing %d suppression entries", len(self._entries))
        self._entries.clear()

    def on_session_state(self, state: SessionState) -> None:
        """Transition listener: clear on entry into a session and on its end."""
        if state.phase in (SessionPhase.ACTIVE, SessionPhase.IDLE):
            self.reset()
