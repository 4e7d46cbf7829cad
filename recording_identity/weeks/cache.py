"""Lookup caches used by week inference.

WeekCache is the historical (student, coach, date) -> week mapping. It is
an injected dependency so the cascade can run against a plain dict in
tests and a shared store in production.
"""

from datetime import date
from typing import Protocol, runtime_checkable


@runtime_checkable
class WeekCache(Protocol):
    """Get/set interface for historical week mappings."""

    def get(self, student: str, coach: str, session_date: date) -> int | None:
        """Return the remembered week, or None."""
        ...

    def set(self, student: str, coach: str, session_date: date, week: int) -> None:
        """Remember the week of a session."""
        ...


class InMemoryWeekCache:
    """Dict-backed WeekCache.

    Names are compared case-insensitively.
    """

    def __init__(self, entries: dict[tuple[str, str, date], int] | None = None):
        self._entries: dict[tuple[str, str, date], int] = {}
        for (student, coach, session_date), week in (entries or {}).items():
            self.set(student, coach, session_date, week)

    @staticmethod
    def _key(student: str, coach: str, session_date: date) -> tuple[str, str, date]:
        return (student.strip().lower(), coach.strip().lower(), session_date)

    def get(self, student: str, coach: str, session_date: date) -> int | None:
        return self._entries.get(self._key(student, coach, session_date))

    def set(self, student: str, coach: str, session_date: date, week: int) -> None:
        self._entries[self._key(student, coach, session_date)] = week

    def __len__(self) -> int:
        return len(self._entries)
