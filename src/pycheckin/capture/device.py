"""Capture device capability consumed by the decode source."""

from __future__ import annotations

from typing import Any, Protocol


class CaptureDevice(Protocol):
    """Structural interface over a camera plus a QR decoding primitive.

    The engine never talks to a physical camera directly.  Having a
    protocol here makes it easy to pass test doubles while keeping the
    production implementation (:class:`~pycheckin.capture.opencv.OpenCvCaptureDevice`)
    concrete.

    ``acquire`` raises :class:`~pycheckin.exceptions.DeviceUnavailableError`
    or :class:`~pycheckin.exceptions.PermissionDeniedError`.
    ``decode_next_frame`` returns the decoded text, or ``None`` when the
    frame holds no code; it may raise
    :class:`~pycheckin.exceptions.FrameDecodeError` for a bad frame.
    """

    async def acquire(self) -> Any:
        ...

    async def release(self, handle: Any) -> None:
        ...

    async def decode_next_frame(self, handle: Any) -> str | None:
        ...
