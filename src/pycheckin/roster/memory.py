"""In-memory roster for demos, kiosks without a backend, and tests."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from pycheckin.models.roster import RosterRecord


class InMemoryRoster:
    """Fixed roster keyed by exact code."""

    def __init__(self, records: Iterable[RosterRecord] = ()) -> None:
        self._records: dict[str, RosterRecord] = {record.code: record for record in records}

    @classmethod
    def from_codes(cls, codes: Iterable[str]) -> InMemoryRoster:
        """Build a roster where each code is also its display name."""
        return cls(RosterRecord(code=code, display_name=code) for code in codes)

    @classmethod
    def from_mapping(cls, names: Mapping[str, str]) -> InMemoryRoster:
        """Build a roster from a ``{code: display_name}`` mapping."""
        return cls(RosterRecord(code=code, display_name=name) for code, name in names.items())

    def add(self, record: RosterRecord) -> None:
        self._records[record.code] = record

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, code: object) -> bool:
        return code in self._records

    async def lookup(self, code: str) -> RosterRecord | None:
        return self._records.get(code)
