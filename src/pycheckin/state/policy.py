"""Deterministic duplicate admission policy.

This module contains *no* state.  The suppression window owns the table
and asks these functions whether an event may pass.
"""

from __future__ import annotations


def should_admit(
    *,
    last_accepted_at: float | None,
    observed_at: float,
    window: float,
) -> bool:
    """Decide whether a decode of an already-seen payload is a new scan.

    Policy:
    - Never seen in this session: admit.
    - Seen: admit only if strictly more than ``window`` seconds elapsed
      since the last admission.  An ``observed_at`` older than the last
      admission is never admitted.
    """
    if last_accepted_at is None:
        return True
    return (observed_at - last_accepted_at) > window


def is_stale(*, last_accepted_at: float, now: float, window: float) -> bool:
    """Whether an entry can no longer suppress anything at ``now``."""
    return (now - last_accepted_at) > window
