"""Decode events produced by the sampling loop."""

from __future__ import annotations

from pydantic import Field

from pycheckin.models._base import CheckInBaseModel


class DecodeEvent(CheckInBaseModel):
    """One successful frame decode.

    ``observed_at`` is read from the engine clock (``time.monotonic`` unless
    a different clock is injected) at the moment the frame decoded.  The
    payload is the raw decoded text; trimming happens at lookup time.
    """

    payload: str
    observed_at: float = Field(..., description="Engine clock reading in seconds")


class SuppressionEntry(CheckInBaseModel):
    """Last admission time of one payload inside the active session."""

    payload: str
    last_accepted_at: float
