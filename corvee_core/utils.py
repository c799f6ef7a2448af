from __future__ import annotations

import calendar
import re
import unicodedata
from datetime import date
from typing import Iterable, Protocol

from .errors import ValidationError
from .localization import Localizer

MONTHS: tuple[str, ...] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

_DATE_TOKEN = re.compile(r"EEEE|EE|MMMM|MMM|MM|M|dd|d|yyyy|yy")


class Interval(Protocol):
    start: date
    end: date


def to_nfc(value: str) -> str:
    return unicodedata.normalize("NFC", value)


def parse_iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise ValidationError(f"Invalid date (use YYYY-MM-DD): {value}") from exc


def month_index(value: str | int) -> int:
    """Resolve an English month name or a 1-12 number to a month index."""
    if isinstance(value, int):
        token = value
    else:
        raw = value.strip()
        if raw.isdigit():
            token = int(raw)
        else:
            lowered = raw.lower()
            for idx, name in enumerate(MONTHS, start=1):
                if name.lower() == lowered:
                    return idx
            raise ValidationError(f"Unknown month: {value}")
    if not 1 <= token <= 12:
        raise ValidationError(f"Unknown month: {value}")
    return token


def month_name(index: int) -> str:
    return MONTHS[index - 1]


def days_in_month(year: int, month: int) -> list[date]:
    _first_weekday, count = calendar.monthrange(year, month)
    return [date(year, month, day) for day in range(1, count + 1)]


def is_within_interval(day: date, interval: Interval) -> bool:
    return interval.start <= day <= interval.end


def covered_by_any(day: date, intervals: Iterable[Interval]) -> bool:
    return any(is_within_interval(day, interval) for interval in intervals)


def format_date(day: date, pattern: str, locale: str) -> str:
    """Render ``day`` with a small subset of date-fns tokens (EE, dd, MMM, ...)."""
    localizer = Localizer(locale)

    def replace(match: re.Match[str]) -> str:
        token = match.group(0)
        if token == "EEEE":
            return localizer.weekday(day.weekday(), long=True)
        if token == "EE":
            return localizer.weekday(day.weekday())
        if token == "MMMM":
            return localizer.month(day.month, long=True)
        if token == "MMM":
            return localizer.month(day.month)
        if token == "MM":
            return f"{day.month:02d}"
        if token == "M":
            return str(day.month)
        if token == "dd":
            return f"{day.day:02d}"
        if token == "d":
            return str(day.day)
        if token == "yyyy":
            return f"{day.year:04d}"
        return f"{day.year % 100:02d}"

    return _DATE_TOKEN.sub(replace, pattern)
