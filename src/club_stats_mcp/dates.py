"""Lenient date parsing for imported spreadsheets."""

import re
from datetime import date, datetime, timedelta
from typing import Any, Optional


# Spreadsheet serial day 0
SERIAL_EPOCH = date(1899, 12, 30)

_DAY_FIRST = re.compile(r"^(\d{1,2})[/-](\d{1,2})[/-](\d{2,4})$")
_SERIAL = re.compile(r"^\d{1,6}(\.\d+)?$")


def parse_date(value: Any) -> Optional[date]:
    """Parse a date from the formats found in club spreadsheets.

    Accepts ``date``/``datetime`` objects, spreadsheet serial numbers,
    day-first strings (``25/12/2023``, ``25-12-23``) and ISO strings.
    Returns None when the value cannot be understood.
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if value != value:  # NaN from pandas
            return None
        try:
            return SERIAL_EPOCH + timedelta(days=int(value))
        except OverflowError:
            return None

    text = str(value).strip()
    if not text:
        return None

    if _SERIAL.match(text):
        return parse_date(float(text))

    parts = _DAY_FIRST.match(text)
    if parts:
        day, month, year = (int(p) for p in parts.groups())
        if year < 100:
            year += 2000
        # Month-first input is only detectable when the day cannot be a month
        if day <= 12 < month:
            day, month = month, day
        try:
            return date(year, month, day)
        except ValueError:
            return None

    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass

    for fmt in ("%d %B %Y", "%B %d, %Y", "%b %d, %Y", "%d %b %Y"):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    return None
