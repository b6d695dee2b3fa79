from __future__ import annotations

import pydantic
import pytest

from pycheckin.models import (
    DecodeEvent,
    FailureReason,
    Found,
    LookupFailed,
    NotFound,
    OutcomeKind,
    OutcomeNotice,
    RosterRecord,
    SessionPhase,
    SessionState,
    outcome_adapter,
)


def test_roster_record_code_is_trimmed_and_required() -> None:
    assert RosterRecord(code=" STU-0042 ", display_name="Ana").code == "STU-0042"

    with pytest.raises(pydantic.ValidationError):
        RosterRecord(code="   ", display_name="Nobody")


def test_models_are_frozen() -> None:
    event = DecodeEvent(payload="STU-0042", observed_at=1.5)

    with pytest.raises(pydantic.ValidationError):
        event.payload = "other"  # type: ignore[misc]


def test_decode_event_keeps_raw_payload() -> None:
    assert DecodeEvent(payload="  STU-0042\n", observed_at=0.0).payload == "  STU-0042\n"


def test_outcome_variants_are_tagged() -> None:
    record = RosterRecord(code="STU-0042", display_name="Ana")

    assert Found(record=record).kind == OutcomeKind.FOUND
    assert Found(record=record).payload == "STU-0042"
    assert NotFound(payload="X").kind == OutcomeKind.NOT_FOUND
    assert LookupFailed(payload="X", reason="boom").kind == OutcomeKind.LOOKUP_FAILED


def test_outcome_adapter_picks_variant_from_kind() -> None:
    found = outcome_adapter.validate_python(
        {"kind": "found", "record": {"code": "STU-0042", "display_name": "Ana", "metadata": {"grade": "5"}}}
    )
    failed = outcome_adapter.validate_python({"kind": "lookup_failed", "payload": "X", "reason": "HTTP 500"})

    assert isinstance(found, Found)
    assert found.record.metadata == {"grade": "5"}
    assert isinstance(failed, LookupFailed)

    with pytest.raises(pydantic.ValidationError):
        outcome_adapter.validate_python({"kind": "duplicate", "payload": "X"})


def test_outcome_notice_serializes_with_kind() -> None:
    notice = OutcomeNotice(outcome=NotFound(payload="STU-9999"))

    assert notice.model_dump(mode="json") == {"outcome": {"kind": "not_found", "payload": "STU-9999"}}


def test_session_state_reason_matches_phase() -> None:
    failed = SessionState.failed(FailureReason.PERMISSION_DENIED, "denied")
    assert failed.phase == SessionPhase.FAILED
    assert not failed.is_busy

    assert SessionState(phase=SessionPhase.ACTIVE).is_running
    assert SessionState(phase=SessionPhase.STARTING).is_busy

    with pytest.raises(pydantic.ValidationError):
        SessionState(phase=SessionPhase.FAILED)
    with pytest.raises(pydantic.ValidationError):
        SessionState(phase=SessionPhase.ACTIVE, reason=FailureReason.DEVICE_UNAVAILABLE)
