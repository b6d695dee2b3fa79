"""Scanner lifecycle state machine.

::

    Idle --start()--> Starting --device acquired--> Active
    Starting --device/permission error--> Failed
    Active --stop()--> Stopping --released--> Idle
    Failed --start()--> Starting
    Failed --stop()--> Stopping --> Idle

The controller is the single source of truth for whether the decode
source should be running.  No transition leaves a device handle acquired
outside the Active phase.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from pycheckin.capture.source import DecodeSource
from pycheckin.dispatcher import ResolutionDispatcher
from pycheckin.exceptions import DeviceError, DeviceUnavailableError, PermissionDeniedError
from pycheckin.models.events import DecodeEvent
from pycheckin.models.session import IDLE, FailureReason, SessionPhase, SessionState
from pycheckin.state.feedback import ResultFeedbackState
from pycheckin.state.suppression import SuppressionWindow

_logger = logging.getLogger(__name__)

TransitionListener = Callable[[SessionState], None]

_STARTING = SessionState(phase=SessionPhase.STARTING)
_ACTIVE = SessionState(phase=SessionPhase.ACTIVE)
_STOPPING = SessionState(phase=SessionPhase.STOPPING)


def _failure_reason(exc: DeviceError) -> FailureReason:
    if isinstance(exc, PermissionDeniedError):
        return FailureReason.PERMISSION_DENIED
    return FailureReason.DEVICE_UNAVAILABLE


class LifecycleController:
    """Owns start/stop of the capture session and routes its decodes.

    Decodes flow ``DecodeSource -> SuppressionWindow -> ResolutionDispatcher``
    and only while the session is Active.  Every transition is published
    to the feedback state, to the suppression window (which resets on
    entering and leaving a session) and to any extra transition listener.

    Parameters
    ----------
    stop_on_success : bool
        Default start policy.  When true the session stops after the first
        admitted scan; the lookup for that scan still completes.
    """

    def __init__(
        self,
        source: DecodeSource,
        suppression: SuppressionWindow,
        dispatcher: ResolutionDispatcher,
        feedback: ResultFeedbackState,
        *,
        stop_on_success: bool = False,
    ) -> None:
        self._source = source
        self._suppression = suppression
        self._dispatcher = dispatcher
        self._state: SessionState = IDLE
        self._listeners: list[TransitionListener] = [
            feedback.set_session_state,
            suppression.on_session_state,
        ]
        self._default_stop_on_success = stop_on_success
        self._stop_on_success = stop_on_success
        self._halted = False
        self._stop_requested = False
        self._starting: asyncio.Future[None] | None = None
        self._stopping: asyncio.Future[None] | None = None
        self._stop_task: asyncio.Task[SessionState] | None = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def stop_on_success(self) -> bool:
        """Policy of the current (or most recent) session."""
        return self._stop_on_success

    def add_transition_listener(self, listener: TransitionListener) -> None:
        self._listeners.append(listener)

    def _transition(self, state: SessionState) -> None:
        previous = self._state
        self._state = state
        _logger.debug("Session %s -> %s", previous.phase, state.phase)
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                _logger.warning("Transition listener failed", exc_info=True)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self, *, stop_on_success: bool | None = None) -> SessionState:
        """Open a capture session and start sampling.

        A no-op returning the current state while a session is starting or
        active.  Raises :class:`DeviceUnavailableError` or
        :class:`PermissionDeniedError` after moving to the failed phase.
        """
        if self._stopping is not None:
            await asyncio.shield(self._stopping)
        if self._state.is_busy:
            return self._state

        self._stop_on_success = self._default_stop_on_success if stop_on_success is None else stop_on_success
        self._halted = False
        self._stop_requested = False
        starting: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._starting = starting
        self._transition(_STARTING)

        try:
            await self._source.open()
        except DeviceError as exc:
            _logger.warning("Capture device unavailable: %s", exc)
            self._transition(SessionState.failed(_failure_reason(exc), str(exc)))
            raise
        except asyncio.CancelledError:
            self._transition(IDLE)
            raise
        except Exception as exc:
            _logger.warning("Capture device failed to open", exc_info=True)
            self._transition(SessionState.failed(FailureReason.DEVICE_UNAVAILABLE, str(exc)))
            raise DeviceUnavailableError(f"Capture device failed to open: {exc}") from exc
        finally:
            self._starting = None
            starting.set_result(None)

        if self._stop_requested:
            # A concurrent stop() is waiting on us; it releases the handle.
            return self._state

        self._transition(_ACTIVE)
        self._source.run(self._on_decode)
        return self._state

    async def stop(self) -> SessionState:
        """Stop sampling, release the device and return to Idle.

        Idempotent.  When racing a pending :meth:`start`, waits for the
        acquisition to settle and releases whatever it acquired.  Never
        cancels a roster lookup already issued.
        """
        if self._stopping is not None:
            await asyncio.shield(self._stopping)
            return self._state
        if self._state.phase == SessionPhase.IDLE:
            return self._state

        stopping: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._stopping = stopping
        try:
            starting = self._starting
            if starting is not None:
                self._stop_requested = True
                await asyncio.shield(starting)

            self._transition(_STOPPING)
            try:
                await self._source.close()
            except Exception:
                _logger.warning("Releasing capture device failed", exc_info=True)
            self._transition(IDLE)
        finally:
            self._stopping = None
            stopping.set_result(None)
        return self._state

    # ------------------------------------------------------------------
    # Decode routing
    # ------------------------------------------------------------------

    def _on_decode(self, event: DecodeEvent) -> None:
        if self._state.phase != SessionPhase.ACTIVE or self._halted:
            return
        if not self._suppression.admit(event.payload, event.observed_at):
            return
        self._suppression.prune(event.observed_at)
        _logger.debug("Admitted scan %r at %.3f", event.payload, event.observed_at)
        self._dispatcher.submit(event.payload)

        if self._stop_on_success:
            self._halted = True
            self._stop_task = asyncio.get_running_loop().create_task(self.stop(), name="pycheckin-stop-on-success")
