"""Date and time display formats (US English, independent of process locale)."""

from datetime import date, datetime, time

_WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
_MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def weekday_full_name(day: date) -> str:
    """'Monday'"""
    return _WEEKDAYS[day.weekday()]


def weekday_short_name(day: date) -> str:
    """'Mon'"""
    return _WEEKDAYS[day.weekday()][:3]


def month_and_day(day: date) -> str:
    """'Jun 3'"""
    return f"{_MONTHS[day.month - 1][:3]} {day.day}"


def header_date(day: date) -> str:
    """'Mon, Jun 3' — order card header secondary text."""
    return f"{weekday_short_name(day)}, {month_and_day(day)}"


def header_date_range(start: date, end: date) -> str:
    return f"{header_date(start)} - {header_date(end)}"


def short_day(day: date) -> str:
    """'Mon 3'"""
    return f"{weekday_short_name(day)} {day.day}"


def full_date(day: date) -> str:
    """'03.06.2024'"""
    return f"{day.day:02d}.{day.month:02d}.{day.year}"


def hour(value: time) -> str:
    """'4:00 PM'"""
    h = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    return f"{h}:{value.minute:02d} {suffix}"


def iso_time(value: time) -> str:
    """'16:00' (seconds shown only when non-zero)."""
    if value.second or value.microsecond:
        return value.isoformat()
    return f"{value.hour:02d}:{value.minute:02d}"


def date_time(value: datetime) -> str:
    """'03.06.2024 4:00 PM'"""
    return f"{full_date(value.date())} {hour(value.time())}"


def storefront_date(day: date | None) -> dict[str, str] | None:
    """Card date block: {'day': 'Jun 3', 'weekday': 'Monday', 'date': '2024-06-03'}."""
    if day is None:
        return None
    return {
        "day": month_and_day(day),
        "weekday": weekday_full_name(day),
        "date": day.isoformat(),
    }
