"""High-level async check-in scanner."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from pycheckin.capture.device import CaptureDevice
from pycheckin.capture.source import DecodeSource
from pycheckin.config import CheckInConfig
from pycheckin.dispatcher import ResolutionDispatcher
from pycheckin.lifecycle import LifecycleController
from pycheckin.models.outcome import Found, LookupFailed, NotFound, OutcomeNotice
from pycheckin.models.session import SessionState
from pycheckin.roster.base import RosterLookupService
from pycheckin.state.feedback import ResultFeedbackState
from pycheckin.state.suppression import SuppressionWindow

_logger = logging.getLogger(__name__)


class CheckInScanner:
    """Camera-to-roster check-in engine.

    Wires the decode source, duplicate suppression, resolution dispatcher,
    feedback state and lifecycle controller from one configuration.

    Usage::

        async with HttpRosterLookup.from_config(config) as roster:
            async with CheckInScanner(config, roster=roster, on_outcome=show) as scanner:
                await scanner.start()
                ...

    Leaving the context stops the session and waits for outstanding
    lookups, so their outcomes are still delivered.
    """

    def __init__(
        self,
        config: CheckInConfig | None = None,
        *,
        roster: RosterLookupService,
        device: CaptureDevice | None = None,
        on_outcome: Callable[[OutcomeNotice], None] | None = None,
        on_state: Callable[[SessionState], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config or CheckInConfig()
        if device is None:
            # pyzbar loads the zbar shared library at import time.
            from pycheckin.capture.opencv import OpenCvCaptureDevice

            device = OpenCvCaptureDevice(self._config.camera)

        self._feedback = ResultFeedbackState()
        self._suppression = SuppressionWindow(self._config.suppression_window)
        self._dispatcher = ResolutionDispatcher(
            roster,
            self._feedback,
            lookup_timeout=self._config.lookup_timeout,
        )
        self._source = DecodeSource(
            device,
            sample_interval=self._config.sample_interval,
            clock=clock,
        )
        self._controller = LifecycleController(
            self._source,
            self._suppression,
            self._dispatcher,
            self._feedback,
            stop_on_success=self._config.stop_on_success,
        )
        if on_outcome is not None:
            self._feedback.add_outcome_listener(on_outcome)
        if on_state is not None:
            self._feedback.add_state_listener(on_state)

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> CheckInScanner:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.stop()
        await self.drain()

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def config(self) -> CheckInConfig:
        return self._config

    @property
    def state(self) -> SessionState:
        return self._controller.state

    @property
    def current_outcome(self) -> Found | NotFound | LookupFailed | None:
        return self._feedback.current_outcome

    @property
    def feedback(self) -> ResultFeedbackState:
        return self._feedback

    @property
    def suppression(self) -> SuppressionWindow:
        return self._suppression

    @property
    def dispatcher(self) -> ResolutionDispatcher:
        return self._dispatcher

    @property
    def controller(self) -> LifecycleController:
        return self._controller

    @property
    def source(self) -> DecodeSource:
        return self._source

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def start(self, *, stop_on_success: bool | None = None) -> SessionState:
        """Start scanning.  See :meth:`LifecycleController.start`."""
        return await self._controller.start(stop_on_success=stop_on_success)

    async def stop(self) -> SessionState:
        """Stop scanning.  See :meth:`LifecycleController.stop`."""
        return await self._controller.stop()

    async def resolve(self, payload: str) -> Found | NotFound | LookupFailed:
        """Resolve a code entered by hand, bypassing the camera and suppression."""
        _logger.debug("Manual resolve of %r", payload)
        return await self._dispatcher.resolve(payload)

    async def drain(self) -> None:
        """Wait for every outstanding roster lookup to publish its outcome."""
        await self._dispatcher.drain()
