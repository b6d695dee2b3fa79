"""Base model shared by every pycheckin data model.

Models are immutable: an outcome or a session state handed to a listener
can never change under it, and replacing the "current" value is a single
reference assignment.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class CheckInBaseModel(BaseModel):
    """Frozen pydantic model rejecting unknown fields."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
    )
