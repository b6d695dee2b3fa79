from __future__ import annotations

import asyncio

import pytest
from conftest import FakeRoster

from pycheckin.dispatcher import ResolutionDispatcher, normalize_payload
from pycheckin.exceptions import RosterLookupError
from pycheckin.models.outcome import Found, LookupFailed, NotFound, OutcomeNotice
from pycheckin.models.roster import RosterRecord
from pycheckin.state.feedback import ResultFeedbackState


def _dispatcher(roster: FakeRoster, **kwargs: float) -> tuple[ResolutionDispatcher, ResultFeedbackState]:
    feedback = ResultFeedbackState()
    return ResolutionDispatcher(roster, feedback, **kwargs), feedback


def test_normalize_only_trims() -> None:
    assert normalize_payload("  STU-0042\n") == "STU-0042"
    assert normalize_payload("stu-0042") == "stu-0042"


@pytest.mark.asyncio
async def test_classification_replaces_current_outcome(roster: FakeRoster, student: RosterRecord) -> None:
    roster.errors["BROKEN"] = RosterLookupError("HTTP 503 from /rest/v1/students", status_code=503)
    dispatcher, feedback = _dispatcher(roster)

    found = await dispatcher.resolve("STU-0042")
    assert found == Found(record=student)
    assert feedback.current_outcome == found

    missing = await dispatcher.resolve("STU-9999")
    assert missing == NotFound(payload="STU-9999")
    assert feedback.current_outcome == missing

    failed = await dispatcher.resolve("BROKEN")
    assert isinstance(failed, LookupFailed)
    assert "503" in failed.reason
    assert feedback.current_outcome == failed


@pytest.mark.asyncio
async def test_lookup_uses_trimmed_code(roster: FakeRoster) -> None:
    dispatcher, _ = _dispatcher(roster)

    outcome = await dispatcher.resolve("  STU-0042 \n")

    assert roster.calls == ["STU-0042"]
    assert isinstance(outcome, Found)


@pytest.mark.asyncio
async def test_unexpected_exception_becomes_lookup_failed(roster: FakeRoster) -> None:
    roster.errors["STU-0042"] = ConnectionResetError()
    dispatcher, _ = _dispatcher(roster)

    outcome = await dispatcher.resolve("STU-0042")

    assert outcome == LookupFailed(payload="STU-0042", reason="ConnectionResetError")


@pytest.mark.asyncio
async def test_same_code_is_never_looked_up_twice_concurrently(roster: FakeRoster) -> None:
    gate = asyncio.Event()
    roster.gates["STU-0042"] = gate
    dispatcher, _ = _dispatcher(roster)

    first = dispatcher.submit("STU-0042")
    second = dispatcher.submit(" STU-0042 ")
    joined = asyncio.create_task(dispatcher.resolve("STU-0042"))
    await asyncio.sleep(0)

    assert first is not None
    assert second is None
    assert dispatcher.in_flight == frozenset({"STU-0042"})

    gate.set()
    assert await first == await joined
    assert roster.calls == ["STU-0042"]

    await asyncio.sleep(0)
    assert dispatcher.in_flight == frozenset()


@pytest.mark.asyncio
async def test_outcomes_land_in_completion_order(roster: FakeRoster, student: RosterRecord) -> None:
    slow = asyncio.Event()
    fast = asyncio.Event()
    roster.gates["STU-0042"] = slow
    roster.gates["STU-0043"] = fast
    dispatcher, feedback = _dispatcher(roster)

    slow_task = dispatcher.submit("STU-0042")
    fast_task = dispatcher.submit("STU-0043")
    assert slow_task is not None and fast_task is not None

    fast.set()
    await fast_task
    assert isinstance(feedback.current_outcome, Found)
    assert feedback.current_outcome.record.code == "STU-0043"

    # Issued first, completed last: it wins the slot.
    slow.set()
    await slow_task
    assert feedback.current_outcome == Found(record=student)


@pytest.mark.asyncio
async def test_timeout_classifies_as_lookup_failed(roster: FakeRoster) -> None:
    roster.gates["STU-0042"] = asyncio.Event()
    dispatcher, _ = _dispatcher(roster, lookup_timeout=0.01)

    outcome = await dispatcher.resolve("STU-0042")

    assert isinstance(outcome, LookupFailed)
    assert "timed out" in outcome.reason


@pytest.mark.asyncio
async def test_sinks_receive_each_outcome_and_failures_are_isolated(roster: FakeRoster) -> None:
    dispatcher, feedback = _dispatcher(roster)
    received: list[OutcomeNotice] = []

    def broken_sink(_notice: OutcomeNotice) -> None:
        raise RuntimeError("display gone")

    feedback.add_outcome_listener(broken_sink)
    unsubscribe = feedback.add_outcome_listener(received.append)

    await dispatcher.resolve("STU-0042")
    await dispatcher.resolve("STU-9999")
    unsubscribe()
    await dispatcher.resolve("STU-0043")

    assert [notice.outcome.kind for notice in received] == ["found", "not_found"]


@pytest.mark.asyncio
async def test_drain_waits_for_all_lookups(roster: FakeRoster) -> None:
    gate = asyncio.Event()
    roster.gates["STU-0042"] = gate
    dispatcher, feedback = _dispatcher(roster)
    dispatcher.submit("STU-0042")

    drain = asyncio.create_task(dispatcher.drain())
    await asyncio.sleep(0)
    assert not drain.done()

    gate.set()
    await asyncio.wait_for(drain, 1.0)
    assert isinstance(feedback.current_outcome, Found)


@pytest.mark.asyncio
async def test_roster_timeout_without_deadline_is_lookup_failed(roster: FakeRoster) -> None:
    roster.errors["STU-0042"] = TimeoutError("socket read timed out")
    dispatcher, feedback = _dispatcher(roster, lookup_timeout=0)

    outcome = await dispatcher.resolve("STU-0042")

    assert outcome == LookupFailed(payload="STU-0042", reason="socket read timed out")
    assert feedback.current_outcome == outcome


@pytest.mark.asyncio
async def test_roster_timeout_is_not_reported_as_our_deadline(roster: FakeRoster) -> None:
    roster.errors["STU-0042"] = TimeoutError()
    dispatcher, _ = _dispatcher(roster, lookup_timeout=10.0)

    outcome = await dispatcher.resolve("STU-0042")

    assert outcome == LookupFailed(payload="STU-0042", reason="TimeoutError")
