"""Scanner session state."""

from __future__ import annotations

from enum import StrEnum

from pydantic import model_validator

from pycheckin.models._base import CheckInBaseModel


class SessionPhase(StrEnum):
    IDLE = "idle"
    STARTING = "starting"
    ACTIVE = "active"
    STOPPING = "stopping"
    FAILED = "failed"


class FailureReason(StrEnum):
    DEVICE_UNAVAILABLE = "device_unavailable"
    PERMISSION_DENIED = "permission_denied"


class SessionState(CheckInBaseModel):
    """Phase of the capture session, plus the failure reason when failed.

    ``reason`` is set exactly when ``phase`` is :attr:`SessionPhase.FAILED`.
    """

    phase: SessionPhase = SessionPhase.IDLE
    reason: FailureReason | None = None
    message: str | None = None

    @model_validator(mode="after")
    def _reason_matches_phase(self) -> SessionState:
        if (self.phase == SessionPhase.FAILED) != (self.reason is not None):
            raise ValueError("reason must be set exactly when phase is failed")
        return self

    @classmethod
    def failed(cls, reason: FailureReason, message: str | None = None) -> SessionState:
        return cls(phase=SessionPhase.FAILED, reason=reason, message=message)

    @property
    def is_running(self) -> bool:
        """Whether the decode source should currently be sampling frames."""
        return self.phase == SessionPhase.ACTIVE

    @property
    def is_busy(self) -> bool:
        """Whether a session is open or being opened."""
        return self.phase in (SessionPhase.STARTING, SessionPhase.ACTIVE)


IDLE = SessionState()
