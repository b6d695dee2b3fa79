"""Roster lookup services."""

from pycheckin.roster.base import RosterLookupService
from pycheckin.roster.http import HttpRosterLookup
from pycheckin.roster.memory import InMemoryRoster

__all__ = ["HttpRosterLookup", "InMemoryRoster", "RosterLookupService"]
