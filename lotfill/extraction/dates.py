"""Issued-date resolution.

Two labeled lines are consulted, in order:

1. ``DATE ENTERED: MM/DD/YY`` (or ``MM/DD/YYYY``, slash or dash separated).
2. The ``Sent:`` header of a forwarded mail, whose remainder is free text and
   is tried against a fixed list of grammars.

The first rule that yields a structurally valid date wins. Numeric forms are
read month-first; nothing here tries to guess day-first input.
"""

import re
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import ClassVar

from dateutil import parser as date_parser

from lotfill.extraction.base import BaseResolver
from lotfill.extraction.exceptions import ParseMiss

# Keys are the first four, then first three, letters of a month name.
MONTH_NUMBERS: dict[str, int] = {
    "jan": 1, "janu": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5,
    "jun": 6, "jul": 7, "july": 7, "aug": 8, "sep": 9, "sept": 9,
    "oct": 10, "nov": 11, "dec": 12,
}

# A header is parsed against both; any difference means a component was missing.
_FILL_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))

_WEEKDAY_MONTH_RE = re.compile(
    r"^(?:[A-Za-z]+,?\s+)?([A-Za-z]+)\s+(\d{1,2}),\s*(\d{4})\s+(\d{1,2}):(\d{2})\s*([AP]M)"
    r"(?:\s*[A-Z]{2,5})?$",
    re.IGNORECASE,
)
_DAY_MONTH_RE = re.compile(
    r"^(?:[A-Za-z]{3},\s*)?(\d{1,2})\s+([A-Za-z]{3,})\s+(\d{4})\s+(\d{1,2}):(\d{2})(?::\d{2})?"
    r"\s*(?:[A-Z]{1,5}|[+\-]\d{2}:?\d{2})?$",
    re.IGNORECASE,
)
_MDY_RE = re.compile(r"(\d{1,2})/(\d{1,2})/(\d{4})")
_LEADING_NUMERIC_RE = re.compile(r"^\s*(\d{1,2})[/\-.]\d{1,2}[/\-.]\d{2,4}\b")
_YMD_RE = re.compile(r"(\d{4})[-/.](\d{1,2})[-/.](\d{1,2})")


def month_number(name: str) -> int | None:
    key = name.lower()
    return MONTH_NUMBERS.get(key[:4]) or MONTH_NUMBERS.get(key[:3])


def iso_date(year: int, month: int, day: int) -> str:
    return f"{year:04d}-{month:02d}-{day:02d}"


def wall_clock_date(
    year: int, month: int, day: int, hour: int = 0, minute: int = 0
) -> str | None:
    """Date of a wall-clock moment, rolling overflowing fields forward.

    ``September 31`` becomes October 1st and ``11:30 PM`` plus an hour past
    midnight lands on the next day. Returns None outside datetime's range.
    """
    try:
        moment = datetime(year, month, 1) + timedelta(
            days=day - 1, hours=hour, minutes=minute
        )
    except (ValueError, OverflowError):
        return None
    return iso_date(moment.year, moment.month, moment.day)


def parse_generic(raw: str) -> str | None:
    """Free-form parse of a complete date.

    Time zones are ignored so the date is the one written. Headers without a
    full year, month and day yield None, and so do numeric dates whose first
    number cannot be a month: those are left to the month-first rule.
    """
    numeric = _LEADING_NUMERIC_RE.match(raw)
    if numeric is not None and int(numeric.group(1)) > 12:
        return None
    try:
        first, second = (
            date_parser.parse(raw, default=default, ignoretz=True) for default in _FILL_DEFAULTS
        )
    except (ValueError, OverflowError):
        return None
    if first.date() != second.date():
        return None
    return iso_date(first.year, first.month, first.day)


def parse_weekday_month(raw: str) -> str | None:
    """``Thursday, September 18, 2025 11:15 AM [PDT]``"""
    match = _WEEKDAY_MONTH_RE.match(raw)
    if match is None:
        return None
    month = month_number(match.group(1))
    if month is None:
        return None
    hour = int(match.group(4))
    meridiem = match.group(6).upper()
    if meridiem == "PM" and hour < 12:
        hour += 12
    if meridiem == "AM" and hour == 12:
        hour = 0
    return wall_clock_date(
        int(match.group(3)), month, int(match.group(2)), hour, int(match.group(5))
    )


def parse_day_month(raw: str) -> str | None:
    """``[Thu, ]18 Sep 2025 10:15[:00] [GMT|+0900]``"""
    match = _DAY_MONTH_RE.match(raw)
    if match is None:
        return None
    month = month_number(match.group(2))
    if month is None:
        return None
    return wall_clock_date(
        int(match.group(3)),
        month,
        int(match.group(1)),
        int(match.group(4)),
        int(match.group(5)),
    )


def parse_numeric_mdy(raw: str) -> str | None:
    match = _MDY_RE.search(raw)
    if match is None:
        return None
    month, day, year = match.groups()
    return f"{year}-{month.zfill(2)}-{day.zfill(2)}"


def parse_numeric_ymd(raw: str) -> str | None:
    match = _YMD_RE.search(raw)
    if match is None:
        return None
    year, month, day = match.groups()
    return f"{year}-{month.zfill(2)}-{day.zfill(2)}"


class DateResolver(BaseResolver[str]):
    """Resolves the issued date as ``YYYY-MM-DD``."""

    field = "issued_date"

    _ENTERED_RE: ClassVar[re.Pattern[str]] = re.compile(
        r"^\s*DATE\s+ENTERED\s*:?\s*(\d{1,2})[/\-](\d{1,2})[/\-](\d{2,4})",
        re.IGNORECASE | re.MULTILINE,
    )
    _SENT_RE: ClassVar[re.Pattern[str]] = re.compile(
        r"^\s*Sent\s*:?\s*(.+)$",
        re.IGNORECASE | re.MULTILINE,
    )

    HEADER_RULES: ClassVar[tuple[Callable[[str], str | None], ...]] = (
        parse_generic,
        parse_weekday_month,
        parse_day_month,
        parse_numeric_mdy,
        parse_numeric_ymd,
    )

    def parse(self, text: str) -> str:
        result = self.parse_entered(text) or self.parse_sent(text)
        if result is None:
            raise ParseMiss(self.field, "no DATE ENTERED or Sent date")
        return result

    def parse_entered(self, text: str) -> str | None:
        match = self._ENTERED_RE.search(text)
        if match is None:
            return None
        month, day, year = (int(group) for group in match.groups())
        if len(match.group(3)) == 2:
            year += 2000
        return iso_date(year, month, day)

    def parse_sent(self, text: str) -> str | None:
        match = self._SENT_RE.search(text)
        if match is None:
            return None
        raw = match.group(1).strip()
        for rule in self.HEADER_RULES:
            result = rule(raw)
            if result is not None:
                return result
        return None
