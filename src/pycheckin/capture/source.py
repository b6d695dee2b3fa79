"""Frame sampling loop over a capture device."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from collections.abc import Callable
from typing import Any

from pycheckin._constants import DEFAULT_SAMPLE_INTERVAL
from pycheckin.capture.device import CaptureDevice
from pycheckin.exceptions import CheckInError, FrameDecodeError
from pycheckin.models.events import DecodeEvent

_logger = logging.getLogger(__name__)

EventHandler = Callable[[DecodeEvent], None]


class DecodeSource:
    """Owns the device handle and the task that samples frames from it.

    Usage (normally driven by the lifecycle controller)::

        source = DecodeSource(device)
        await source.open()          # acquire the device
        source.run(on_event)         # start sampling
        ...
        await source.close()         # stop sampling, then release

    ``close`` returns only after the sampling task has finished its
    current frame and the handle has been released, so repeated
    open/close cycles never leak a handle.
    """

    def __init__(
        self,
        device: CaptureDevice,
        *,
        sample_interval: float = DEFAULT_SAMPLE_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._device = device
        self._sample_interval = sample_interval
        self._clock = clock
        self._handle: Any = None
        self._acquired = False
        self._task: asyncio.Task[None] | None = None
        self._stop_event = asyncio.Event()
        self._abandoned: set[asyncio.Task[None]] = set()

    @property
    def device(self) -> CaptureDevice:
        return self._device

    @property
    def is_open(self) -> bool:
        """Whether a device handle is currently held."""
        return self._acquired

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def open(self) -> None:
        """Acquire the capture device.

        Device errors propagate unchanged; on failure no handle is held.
        If the caller is cancelled mid-acquire, the handle the device
        eventually returns is released in the background.
        """
        if self._acquired:
            return
        acquiring = asyncio.ensure_future(self._device.acquire())
        try:
            handle = await asyncio.shield(acquiring)
        except asyncio.CancelledError:
            acquiring.add_done_callback(self._release_abandoned)
            raise
        self._handle = handle
        self._acquired = True
        _logger.debug("Capture device acquired")

    def run(self, on_event: EventHandler) -> None:
        """Start the sampling task, emitting each decode to ``on_event``."""
        if not self._acquired:
            raise CheckInError("Decode source is not open")
        if self.is_running:
            return
        self._stop_event = asyncio.Event()
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(
            self._sample_loop(self._handle, on_event, self._stop_event),
            name="pycheckin-decode-loop",
        )

    async def close(self) -> None:
        """Stop sampling and release the handle.  Safe to call repeatedly.

        The sampling task finishes the frame it is reading (at most one)
        before the handle is released.
        """
        task = self._task
        self._task = None
        if task is not None and not task.done():
            self._stop_event.set()
            await asyncio.shield(task)

        if not self._acquired:
            return
        handle = self._handle
        self._handle = None
        self._acquired = False
        await self._device.release(handle)
        _logger.debug("Capture device released")

    def _release_abandoned(self, acquiring: asyncio.Future[Any]) -> None:
        if acquiring.cancelled() or acquiring.exception() is not None:
            return
        _logger.debug("Releasing capture device acquired after open was cancelled")
        task = asyncio.get_running_loop().create_task(self._device.release(acquiring.result()))
        self._abandoned.add(task)
        task.add_done_callback(self._abandoned.discard)

    async def _sample_loop(self, handle: Any, on_event: EventHandler, stop: asyncio.Event) -> None:
        while not stop.is_set():
            try:
                payload = await self._device.decode_next_frame(handle)
                if payload is not None and not stop.is_set():
                    on_event(DecodeEvent(payload=payload, observed_at=self._clock()))
            except FrameDecodeError as exc:
                _logger.debug("Frame skipped: %s", exc)
            except Exception:
                _logger.warning("Decode loop error; continuing", exc_info=True)
            with contextlib.suppress(TimeoutError):
                async with asyncio.timeout(self._sample_interval):
                    await stop.wait()
