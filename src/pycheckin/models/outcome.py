"""Classified lookup outcomes.

An outcome is a tagged union discriminated on ``kind``::

    Found(record)              the code resolved to a roster record
    NotFound(payload)          the roster has no such code
    LookupFailed(payload, reason)  the lookup itself failed

``NotFound`` is a normal, expected classification and not an error.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Literal

from pydantic import Field, TypeAdapter

from pycheckin.models._base import CheckInBaseModel
from pycheckin.models.roster import RosterRecord


class OutcomeKind(StrEnum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    LOOKUP_FAILED = "lookup_failed"


class Found(CheckInBaseModel):
    kind: Literal["found"] = "found"
    record: RosterRecord

    @property
    def payload(self) -> str:
        return self.record.code


class NotFound(CheckInBaseModel):
    kind: Literal["not_found"] = "not_found"
    payload: str


class LookupFailed(CheckInBaseModel):
    kind: Literal["lookup_failed"] = "lookup_failed"
    payload: str
    reason: str


Outcome = Annotated[Found | NotFound | LookupFailed, Field(discriminator="kind")]
"""Discriminated union of every outcome variant."""

outcome_adapter: TypeAdapter[Found | NotFound | LookupFailed] = TypeAdapter(Outcome)
"""Validates serialized outcomes back into the matching variant."""


class OutcomeNotice(CheckInBaseModel):
    """Event delivered to notification sinks when the current outcome changes."""

    outcome: Outcome
