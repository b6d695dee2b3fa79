from __future__ import annotations

import logging

import pytest

from pycheckin.models import FailureReason, Found, LookupFailed, NotFound, OutcomeNotice, RosterRecord, SessionState
from pycheckin.models.session import SessionPhase
from pycheckin.notify import LoggingNotificationSink, Toast, ToastVariant, build_state_toast, build_toast


def test_build_toast_per_outcome() -> None:
    record = RosterRecord(code="STU-0042", display_name="Ana Torres")

    assert build_toast(Found(record=record)) == Toast(title="Student found", description="Ana Torres (STU-0042)")

    missing = build_toast(NotFound(payload="STU-9999"))
    assert missing.title == "Student not found"
    assert missing.variant == ToastVariant.DESTRUCTIVE

    failed = build_toast(LookupFailed(payload="STU-0042", reason="HTTP 503"))
    assert failed.title == "Lookup failed"
    assert "HTTP 503" in failed.description
    assert failed.variant == ToastVariant.DESTRUCTIVE


def test_build_state_toast_only_for_failures() -> None:
    assert build_state_toast(SessionState(phase=SessionPhase.ACTIVE)) is None

    denied = build_state_toast(SessionState.failed(FailureReason.PERMISSION_DENIED, "Access to camera denied"))
    assert denied is not None
    assert denied.title == "Camera access denied"
    assert denied.description == "Access to camera denied"

    missing = build_state_toast(SessionState.failed(FailureReason.DEVICE_UNAVAILABLE))
    assert missing is not None
    assert missing.title == "Could not start the scanner"


def test_logging_sink_levels(caplog: pytest.LogCaptureFixture) -> None:
    sink = LoggingNotificationSink(logging.getLogger("checkin.test"))

    with caplog.at_level(logging.INFO, logger="checkin.test"):
        sink(OutcomeNotice(outcome=Found(record=RosterRecord(code="STU-0042", display_name="Ana"))))
        sink(OutcomeNotice(outcome=NotFound(payload="STU-9999")))
        sink.on_session_state(SessionState.failed(FailureReason.DEVICE_UNAVAILABLE, "no camera"))
        sink.on_session_state(SessionState())

    assert [record.levelno for record in caplog.records] == [logging.INFO, logging.WARNING, logging.ERROR]
    assert "Student found: Ana (STU-0042)" in caplog.records[0].getMessage()
