"""
Time primitives for reservations.

A reservation holds its asset for the same wall-clock window on every day of
its span, so a conflict needs both a shared day (DaySpan) and an overlapping
window on that day (TimeRange).
"""

from dataclasses import dataclass
from datetime import date, time, timedelta
from typing import Iterator


@dataclass(frozen=True)
class TimeRange:
    """Half-open wall-clock window ``[start, end)`` on one day."""

    day: date
    start: time
    end: time

    def __post_init__(self) -> None:
        if self.end <= self.start:
            raise ValueError("TimeRange end must be after start")


def overlaps(a: TimeRange, b: TimeRange) -> bool:
    """True when both windows are on the same day and intersect.

    Touching endpoints do not overlap: 09:00-10:00 and 10:00-11:00 are free
    of each other.
    """
    return a.day == b.day and a.start < b.end and b.start < a.end


@dataclass(frozen=True)
class DaySpan:
    """Occupied-day set ``{start, start+1, ..., start+days-1}``."""

    start: date
    days: int = 1

    def __post_init__(self) -> None:
        if self.days < 1:
            raise ValueError("DaySpan must cover at least one day")

    @property
    def end(self) -> date:
        return self.start + timedelta(days=self.days - 1)

    def dates(self) -> Iterator[date]:
        for offset in range(self.days):
            yield self.start + timedelta(days=offset)

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def intersects(self, other: "DaySpan") -> bool:
        return self.start <= other.end and other.start <= self.end

    def shared_days(self, other: "DaySpan") -> list[date]:
        if not self.intersects(other):
            return []
        first = max(self.start, other.start)
        last = min(self.end, other.end)
        return [first + timedelta(days=n) for n in range((last - first).days + 1)]
