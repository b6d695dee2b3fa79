"""Roster record model."""

from __future__ import annotations

from pydantic import Field, field_validator

from pycheckin.models._base import CheckInBaseModel


class RosterRecord(CheckInBaseModel):
    """A roster entry as returned by a lookup.

    Parameters
    ----------
    code : str
        The student code the QR payload resolves to.
    display_name : str
        Name shown to the operator on a successful check-in.
    metadata : dict
        Remaining roster columns (grade, guardian, ...) as strings.
    """

    code: str
    display_name: str
    metadata: dict[str, str] = Field(default_factory=dict)

    @field_validator("code")
    @classmethod
    def _normalize_code(cls, value: str) -> str:
        code = value.strip()
        if not code:
            raise ValueError("code must be non-empty")
        return code
