#!/usr/bin/env python3
"""Run a live check-in session against the local camera.

Scanned QR codes are resolved against the remote roster configured via
``CHECKIN_ROSTER_URL`` / ``CHECKIN_ROSTER_API_KEY``, or against a fixed
list of demo codes with ``--demo-codes``.

Usage
-----
::

    export CHECKIN_ROSTER_URL="https://project.example.co"
    export CHECKIN_ROSTER_API_KEY="..."
    python scripts/live_checkin.py --duration 60

    python scripts/live_checkin.py --demo-codes 12345678 98765432 11223344

Options::

    --camera N           Camera index (default: CHECKIN_CAMERA_INDEX or 0)
    --duration SECONDS   Stop after this many seconds (default: until Ctrl+C)
    --once               Stop after the first admitted scan
    --demo-codes CODE..  Use an in-memory roster instead of the remote one
    --verbose, -v        Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import sys
from contextlib import AsyncExitStack

from pycheckin import (
    CheckInConfig,
    CheckInConfigError,
    CheckInScanner,
    DeviceError,
    HttpRosterLookup,
    InMemoryRoster,
    LoggingNotificationSink,
    RosterLookupService,
    SessionPhase,
)


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Live QR check-in against a roster")
    parser.add_argument("--camera", type=int, help="Camera index")
    parser.add_argument("--duration", type=float, help="Stop after this many seconds")
    parser.add_argument("--once", action="store_true", help="Stop after the first admitted scan")
    parser.add_argument("--demo-codes", nargs="+", metavar="CODE", help="Use an in-memory roster of these codes")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser.parse_args()


async def _wait_for_session_end(scanner: CheckInScanner, duration: float | None) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + duration if duration else None
    while scanner.state.phase == SessionPhase.ACTIVE:
        if deadline is not None and loop.time() >= deadline:
            return
        await asyncio.sleep(0.2)


async def main() -> int:
    args = _parse_args()
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.INFO, format="%(message)s")

    overrides: dict[str, object] = {"stop_on_success": args.once}
    if args.camera is not None:
        overrides["camera"] = {"index": args.camera}
    try:
        config = CheckInConfig.from_env(**overrides)
    except CheckInConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    sink = LoggingNotificationSink()

    async with AsyncExitStack() as stack:
        roster: RosterLookupService
        if args.demo_codes:
            roster = InMemoryRoster.from_codes(args.demo_codes)
        else:
            try:
                roster = await stack.enter_async_context(HttpRosterLookup.from_config(config))
            except CheckInConfigError as exc:
                print(f"Configuration error: {exc}", file=sys.stderr)
                return 2

        scanner = await stack.enter_async_context(
            CheckInScanner(config, roster=roster, on_outcome=sink, on_state=sink.on_session_state)
        )
        try:
            await scanner.start()
        except DeviceError:
            return 1

        with contextlib.suppress(KeyboardInterrupt, asyncio.CancelledError):
            await _wait_for_session_end(scanner, args.duration)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
