"""Data models for scanner events, roster records and outcomes."""

from pycheckin.models._base import CheckInBaseModel
from pycheckin.models.events import DecodeEvent, SuppressionEntry
from pycheckin.models.outcome import (
    Found,
    LookupFailed,
    NotFound,
    Outcome,
    OutcomeKind,
    OutcomeNotice,
    outcome_adapter,
)
from pycheckin.models.roster import RosterRecord
from pycheckin.models.session import FailureReason, SessionPhase, SessionState

__all__ = [
    "CheckInBaseModel",
    "DecodeEvent",
    "FailureReason",
    "Found",
    "LookupFailed",
    "NotFound",
    "Outcome",
    "OutcomeKind",
    "OutcomeNotice",
    "RosterRecord",
    "SessionPhase",
    "SessionState",
    "SuppressionEntry",
    "outcome_adapter",
]
