"""Human-readable start labels for event cards."""

from datetime import date, datetime, time


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'}"


def format_clock(value: time) -> str:
    """12-hour clock without a leading zero, e.g. ``2:05 PM``."""
    hours = value.hour % 12 or 12
    suffix = "PM" if value.hour >= 12 else "AM"
    return f"{hours}:{value.minute:02d} {suffix}"


def describe_start(start_date: date, time_start: time, now: datetime) -> str:
    """Describe when an event starts relative to ``now``.

    Future starts read "Starts at H:MM AM/PM" when they are later today and
    "Upcoming" otherwise. Past starts use the coarsest whole unit:
    "Started 30 minutes ago", "Started 1 hour ago", "Started 2 days ago".
    """
    start = datetime.combine(start_date, time_start)
    if start > now:
        if start.date() == now.date():
            return f"Starts at {format_clock(time_start)}"
        return "Upcoming"

    minutes = int((now - start).total_seconds() // 60)
    if minutes < 1:
        return "Started just now"
    if minutes < 60:
        return f"Started {_plural(minutes, 'minute')} ago"
    hours = minutes // 60
    if hours < 24:
        return f"Started {_plural(hours, 'hour')} ago"
    return f"Started {_plural(hours // 24, 'day')} ago"
