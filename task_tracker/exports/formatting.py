import re
from datetime import date, datetime

DATE_FORMAT = "%b %d, %Y"
TIMESTAMP_FORMAT = "%b %d, %Y %H:%M"

_WHITESPACE = re.compile(r"\s+")


def clean_description(text: str) -> str:
    """Drop bullet markers and fold the text onto one line."""
    return _WHITESPACE.sub(" ", (text or "").replace("•", "")).strip()


def ordinal(n: int) -> str:
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def long_date(day: date) -> str:
    """``October 18th, 2026``"""
    return f"{day:%B} {ordinal(day.day)}, {day.year}"


def long_timestamp(moment: datetime) -> str:
    """``October 18th, 2026 2:05 PM``"""
    hour = moment.hour % 12 or 12
    return f"{long_date(moment)} {hour}:{moment:%M %p}"


def format_day(task, fmt: str = DATE_FORMAT) -> str:
    day = task.day
    return day.strftime(fmt) if day else task.date


def format_long_day(task) -> str:
    day = task.day
    return long_date(day) if day else task.date


def export_filename(now: datetime, extension: str) -> str:
    return f"task-tracker-{now:%Y-%m-%d-%H%M%S}.{extension}"
