"""OpenCV camera adapter with pyzbar QR decoding.

OpenCV and zbar calls block, so every device call runs in a worker thread
via :func:`asyncio.to_thread`.  The engine state itself is only touched
from the event loop.
"""

from __future__ import annotations

import asyncio
import logging
import os

import cv2
import numpy as np
from pyzbar.pyzbar import ZBarSymbol, decode

from pycheckin.config import CameraProfile
from pycheckin.exceptions import DeviceUnavailableError, FrameDecodeError, PermissionDeniedError

_logger = logging.getLogger(__name__)


def decode_qr(frame: np.ndarray) -> str | None:
    """Return the text of the first QR code found in ``frame``, or ``None``."""
    if frame is None or frame.size == 0:
        return None
    gray = cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY) if frame.ndim == 3 else frame
    for symbol in decode(gray, symbols=[ZBarSymbol.QRCODE]):
        try:
            return symbol.data.decode("utf-8")
        except UnicodeDecodeError:
            _logger.debug("QR payload is not UTF-8 (%d bytes); using latin-1", len(symbol.data))
            return symbol.data.decode("latin-1")
    return None


class OpenCvCaptureDevice:
    """Capture device backed by ``cv2.VideoCapture``.

    The handle returned by :meth:`acquire` is the ``VideoCapture`` itself.
    """

    def __init__(self, camera: CameraProfile | None = None) -> None:
        self._camera = camera or CameraProfile()

    @property
    def camera(self) -> CameraProfile:
        return self._camera

    async def acquire(self) -> cv2.VideoCapture:
        return await asyncio.to_thread(self._open)

    async def release(self, handle: cv2.VideoCapture) -> None:
        await asyncio.to_thread(handle.release)

    async def decode_next_frame(self, handle: cv2.VideoCapture) -> str | None:
        return await asyncio.to_thread(self._read_and_decode, handle)

    def _open(self) -> cv2.VideoCapture:
        path = self._camera.device_path
        # OpenCV reports a denied device the same way as a missing one.
        if os.path.exists(path) and not os.access(path, os.R_OK | os.W_OK):
            raise PermissionDeniedError(f"Access to camera {path} denied", device=path)

        capture = cv2.VideoCapture(self._camera.index)
        if not capture.isOpened():
            capture.release()
            raise DeviceUnavailableError(f"Cannot open camera {self._camera.index}", device=path)

        if self._camera.width:
            capture.set(cv2.CAP_PROP_FRAME_WIDTH, self._camera.width)
        if self._camera.height:
            capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self._camera.height)
        _logger.debug("Opened camera index=%d", self._camera.index)
        return capture

    @staticmethod
    def _read_and_decode(capture: cv2.VideoCapture) -> str | None:
        ok, frame = capture.read()
        if not ok or frame is None:
            raise FrameDecodeError("Camera returned no frame")
        return decode_qr(frame)
