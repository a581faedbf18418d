"""Severity definitions for rule findings."""

from __future__ import annotations

from enum import Enum


class Severity(str, Enum):
    """Enumerate the supported severity levels, most severe first."""

    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"

    @property
    def rank(self) -> int:
        """Return an integer ranking to drive ordering and exit code decisions."""

        ordering = {
            Severity.ERROR: 2,
            Severity.WARNING: 1,
            Severity.NOTE: 0,
        }
        return ordering[self]

    @property
    def sarif_level(self) -> str:
        return self.value
