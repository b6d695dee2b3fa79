"""pycheckin - Async QR check-in engine: camera decodes resolved against a roster."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pycheckin")
except PackageNotFoundError:
    __version__ = "0+local"
from pycheckin.capture import CaptureDevice, DecodeSource
from pycheckin.config import CameraProfile, CheckInConfig
from pycheckin.dispatcher import ResolutionDispatcher
from pycheckin.exceptions import (
    CheckInConfigError,
    CheckInError,
    DeviceError,
    DeviceUnavailableError,
    FrameDecodeError,
    PermissionDeniedError,
    RosterLookupError,
)
from pycheckin.lifecycle import LifecycleController
from pycheckin.models import (
    DecodeEvent,
    FailureReason,
    Found,
    LookupFailed,
    NotFound,
    Outcome,
    OutcomeKind,
    OutcomeNotice,
    RosterRecord,
    SessionPhase,
    SessionState,
    SuppressionEntry,
)
from pycheckin.notify import LoggingNotificationSink, Toast, ToastVariant, build_state_toast, build_toast
from pycheckin.roster import HttpRosterLookup, InMemoryRoster, RosterLookupService
from pycheckin.scanner import CheckInScanner
from pycheckin.state.feedback import FeedbackSnapshot, ResultFeedbackState
from pycheckin.state.suppression import SuppressionWindow

__all__ = [
    "__version__",
    "CameraProfile",
    "CaptureDevice",
    "CheckInConfig",
    "CheckInConfigError",
    "CheckInError",
    "CheckInScanner",
    "DecodeEvent",
    "DecodeSource",
    "DeviceError",
    "DeviceUnavailableError",
    "FailureReason",
    "FeedbackSnapshot",
    "Found",
    "FrameDecodeError",
    "HttpRosterLookup",
    "InMemoryRoster",
    "LifecycleController",
    "LoggingNotificationSink",
    "LookupFailed",
    "NotFound",
    "Outcome",
    "OutcomeKind",
    "OutcomeNotice",
    "PermissionDeniedError",
    "ResolutionDispatcher",
    "ResultFeedbackState",
    "RosterLookupError",
    "RosterLookupService",
    "RosterRecord",
    "SessionPhase",
    "SessionState",
    "SuppressionEntry",
    "SuppressionWindow",
    "Toast",
    "ToastVariant",
    "build_state_toast",
    "build_toast",
]
