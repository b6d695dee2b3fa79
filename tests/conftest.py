from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import Iterable
from typing import Any

import pytest

from pycheckin.config import CheckInConfig
from pycheckin.models.roster import RosterRecord
from pycheckin.scanner import CheckInScanner

Frame = tuple[Any, float]


class FakeCaptureDevice:
    """Scripted camera.

    Each ``decode_next_frame`` pops the next ``(payload, t)`` frame and
    moves the fake clock to ``t``.  A payload may be ``None`` (no code in
    the frame) or an exception instance to raise.  Once the script runs
    out, ``exhausted`` is set and every further frame is empty.
    """

    def __init__(
        self,
        frames: Iterable[Frame] = (),
        *,
        acquire_error: Exception | None = None,
    ) -> None:
        self.frames: deque[Frame] = deque(frames)
        self.acquire_error = acquire_error
        self.acquire_gate: asyncio.Event | None = None
        self.now = 0.0
        self.acquire_calls = 0
        self.decode_calls = 0
        self.open_handles: set[int] = set()
        self.released: list[int] = []
        self.exhausted = asyncio.Event()

    def clock(self) -> float:
        return self.now

    def load(self, frames: Iterable[Frame]) -> None:
        self.frames.extend(frames)
        self.exhausted = asyncio.Event()

    async def acquire(self) -> int:
        self.acquire_calls += 1
        if self.acquire_gate is not None:
            await self.acquire_gate.wait()
        if self.acquire_error is not None:
            raise self.acquire_error
        handle = self.acquire_calls
        self.open_handles.add(handle)
        return handle

    async def release(self, handle: int) -> None:
        self.open_handles.discard(handle)
        self.released.append(handle)

    async def decode_next_frame(self, handle: int) -> str | None:
        assert handle in self.open_handles, "decode on a released handle"
        self.decode_calls += 1
        if not self.frames:
            self.exhausted.set()
            return None
        payload, at = self.frames.popleft()
        self.now = at
        if isinstance(payload, Exception):
            raise payload
        return payload


class FakeRoster:
    """Roster double recording every lookup.

    ``errors`` maps a code to the exception its lookup raises; ``gates``
    maps a code to an event the lookup waits on before answering.
    """

    def __init__(self, records: Iterable[RosterRecord] = ()) -> None:
        self.records = {record.code: record for record in records}
        self.errors: dict[str, Exception] = {}
        self.gates: dict[str, asyncio.Event] = {}
        self.calls: list[str] = []

    async def lookup(self, code: str) -> RosterRecord | None:
        self.calls.append(code)
        gate = self.gates.get(code)
        if gate is not None:
            await gate.wait()
        error = self.errors.get(code)
        if error is not None:
            raise error
        return self.records.get(code)


def make_scanner(
    device: FakeCaptureDevice,
    roster: FakeRoster,
    **config: Any,
) -> CheckInScanner:
    config.setdefault("sample_interval", 0.0)
    return CheckInScanner(CheckInConfig(**config), roster=roster, device=device, clock=device.clock)


async def wait_exhausted(device: FakeCaptureDevice, timeout: float = 2.0) -> None:
    await asyncio.wait_for(device.exhausted.wait(), timeout)


@pytest.fixture
def student() -> RosterRecord:
    return RosterRecord(code="STU-0042", display_name="Ana Torres", metadata={"grade": "5th"})


@pytest.fixture
def roster(student: RosterRecord) -> FakeRoster:
    return FakeRoster([student, RosterRecord(code="STU-0043", display_name="Luis Vega")])
