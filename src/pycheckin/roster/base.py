"""Roster lookup interface consumed by the resolution dispatcher."""

from __future__ import annotations

from typing import Protocol

from pycheckin.models.roster import RosterRecord


class RosterLookupService(Protocol):
    """Resolve a scanned code to a roster record.

    Returns ``None`` when the roster has no such code.  Transport and
    service failures are raised (ideally as
    :class:`~pycheckin.exceptions.RosterLookupError`).  Retry policy, if
    any, belongs to the implementation.
    """

    async def lookup(self, code: str) -> RosterRecord | None:
        ...
