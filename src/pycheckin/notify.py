"""Operator-facing notifications.

Turns outcomes and failed session states into short toast messages.  A
host application registers any callable taking an
:class:`~pycheckin.models.OutcomeNotice` as a notification sink;
:class:`LoggingNotificationSink` is the built-in one.
"""

from __future__ import annotations

import logging
from enum import StrEnum

from pycheckin.models._base import CheckInBaseModel
from pycheckin.models.outcome import Found, LookupFailed, NotFound, OutcomeNotice
from pycheckin.models.session import FailureReason, SessionPhase, SessionState

_logger = logging.getLogger(__name__)


class ToastVariant(StrEnum):
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


class Toast(CheckInBaseModel):
    title: str
    description: str
    variant: ToastVariant = ToastVariant.DEFAULT


def build_toast(outcome: Found | NotFound | LookupFailed) -> Toast:
    """Toast for a classified outcome."""
    if isinstance(outcome, Found):
        record = outcome.record
        return Toast(title="Student found", description=f"{record.display_name} ({record.code})")
    if isinstance(outcome, NotFound):
        return Toast(
            title="Student not found",
            description=f"No student with code {outcome.payload!r}",
            variant=ToastVariant.DESTRUCTIVE,
        )
    return Toast(
        title="Lookup failed",
        description=f"Could not check {outcome.payload!r}: {outcome.reason}",
        variant=ToastVariant.DESTRUCTIVE,
    )


def build_state_toast(state: SessionState) -> Toast | None:
    """Toast for a failed session; ``None`` for every other phase."""
    if state.phase != SessionPhase.FAILED:
        return None
    if state.reason == FailureReason.PERMISSION_DENIED:
        title = "Camera access denied"
    else:
        title = "Could not start the scanner"
    return Toast(
        title=title,
        description=state.message or "No camera could be opened",
        variant=ToastVariant.DESTRUCTIVE,
    )


class LoggingNotificationSink:
    """Notification sink that writes each toast to a logger."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or _logger

    def __call__(self, notice: OutcomeNotice) -> None:
        toast = build_toast(notice.outcome)
        level = logging.INFO if toast.variant == ToastVariant.DEFAULT else logging.WARNING
        self._logger.log(level, "%s: %s", toast.title, toast.description)

    def on_session_state(self, state: SessionState) -> None:
        toast = build_state_toast(state)
        if toast is not None:
            self._logger.error("%s: %s", toast.title, toast.description)
