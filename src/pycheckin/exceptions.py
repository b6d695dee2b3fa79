"""Custom exception hierarchy for pycheckin."""

from __future__ import annotations


class CheckInError(Exception):
    """Base exception for all pycheckin errors."""


class CheckInConfigError(CheckInError):
    """Invalid or missing configuration."""


class DeviceError(CheckInError):
    """Capture device could not be acquired for a session.

    Device errors are terminal for the current session: the scanner moves
    to the failed phase and only an explicit ``start()`` tries again.
    """

    def __init__(self, message: str, *, device: str = "") -> None:
        self.device = device
        super().__init__(message)


class DeviceUnavailableError(DeviceError):
    """No capture device could be opened."""


class PermissionDeniedError(DeviceError):
    """The platform denied access to the capture device."""


class FrameDecodeError(CheckInError):
    """A single frame could not be read or decoded.

    Never fatal: the sampling loop logs it and moves on to the next frame.
    """


class RosterLookupError(CheckInError):
    """Roster lookup failed (network, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)
