"""
Source of "now" for everything that compares against wall-clock time.

Times are naive local wall-clock values: the portal compares time-of-day
only and does not handle timezones.
"""

from datetime import datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime:
        ...


class SystemClock:
    """Local wall-clock time."""

    def now(self) -> datetime:
        return datetime.now()


class FixedClock:
    """Clock pinned to a moment; tests move it with ``advance``."""

    def __init__(self, moment: datetime) -> None:
        self._moment = moment

    def now(self) -> datetime:
        return self._moment

    def advance(self, **kwargs) -> None:
        self._moment = self._moment + timedelta(**kwargs)
