"""Resolution of admitted payloads into classified outcomes."""

from __future__ import annotations

import asyncio
import functools
import logging

from pycheckin._constants import DEFAULT_LOOKUP_TIMEOUT
from pycheckin.models.outcome import Found, LookupFailed, NotFound
from pycheckin.roster.base import RosterLookupService
from pycheckin.state.feedback import ResultFeedbackState

_logger = logging.getLogger(__name__)

AnyOutcome = Found | NotFound | LookupFailed


def normalize_payload(payload: str) -> str:
    """Trim surrounding whitespace; the roster owns every other rule."""
    return payload.strip()


class ResolutionDispatcher:
    """Look up admitted payloads and publish the classified outcome.

    Each lookup runs as its own task.  Lookups for different codes may
    overlap and their outcomes land in the feedback state in completion
    order; a second request for a code that is already being looked up
    joins the pending lookup instead of issuing another one.

    Lookups are never cancelled by the scanner stopping: the answer is
    still meaningful to the operator.
    """

    def __init__(
        self,
        roster: RosterLookupService,
        feedback: ResultFeedbackState,
        *,
        lookup_timeout: float | None = DEFAULT_LOOKUP_TIMEOUT,
    ) -> None:
        self._roster = roster
        self._feedback = feedback
        self._lookup_timeout = lookup_timeout or None
        self._tasks: dict[str, asyncio.Task[AnyOutcome]] = {}

    @property
    def in_flight(self) -> frozenset[str]:
        """Codes with a lookup currently outstanding."""
        return frozenset(code for code, task in self._tasks.items() if not task.done())

    def submit(self, payload: str) -> asyncio.Task[AnyOutcome] | None:
        """Schedule a lookup; ``None`` if one for this code is already pending."""
        code = normalize_payload(payload)
        if code in self._tasks:
            _logger.debug("Lookup for %r already in flight", code)
            return None
        return self._start(code)

    async def resolve(self, payload: str) -> AnyOutcome:
        """Look up ``payload``, publish the outcome, and return it."""
        code = normalize_payload(payload)
        task = self._tasks.get(code) or self._start(code)
        # Cancelling the caller must not cancel the lookup itself.
        return await asyncio.shield(task)

    async def drain(self) -> None:
        """Wait until every outstanding lookup has published its outcome."""
        while True:
            pending = [task for task in self._tasks.values() if not task.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    def _start(self, code: str) -> asyncio.Task[AnyOutcome]:
        loop = asyncio.get_running_loop()
        task = loop.create_task(self._run(code), name=f"pycheckin-lookup-{code}")
        self._tasks[code] = task
        task.add_done_callback(functools.partial(self._forget, code))
        return task

    def _forget(self, code: str, task: asyncio.Task[AnyOutcome]) -> None:
        if self._tasks.get(code) is task:
            del self._tasks[code]

    async def _run(self, code: str) -> AnyOutcome:
        outcome = await self._classify(code)
        self._feedback.set_outcome(outcome)
        return outcome

    async def _classify(self, code: str) -> AnyOutcome:
        deadline = asyncio.timeout(self._lookup_timeout)
        try:
            async with deadline:
                record = await self._roster.lookup(code)
        except TimeoutError as exc:
            if not deadline.expired():
                # Raised by the roster itself, not by our deadline.
                return self._failed(code, exc)
            _logger.warning("Roster lookup for %r timed out", code)
            return LookupFailed(payload=code, reason=f"Roster lookup timed out after {self._lookup_timeout:g}s")
        except Exception as exc:
            return self._failed(code, exc)

        if record is None:
            return NotFound(payload=code)
        return Found(record=record)

    @staticmethod
    def _failed(code: str, exc: Exception) -> LookupFailed:
        _logger.warning("Roster lookup for %r failed: %s", code, exc, exc_info=True)
        return LookupFailed(payload=code, reason=str(exc) or type(exc).__name__)
