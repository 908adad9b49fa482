from __future__ import annotations

import datetime as dt
import re
from typing import List, Optional, Tuple

_MONTH_RE = re.compile(r"^(-?\d{4,})-(0[1-9]|1[0-2])$")


class MonthFormatError(ValueError):
    """Raised when a month token is not of the form YYYY-MM."""


def parse_month(token: str) -> Tuple[int, int]:
    if not isinstance(token, str):
        raise MonthFormatError(f"Month token must be a string, got {type(token).__name__}")
    match = _MONTH_RE.match(token)
    if match is None:
        raise MonthFormatError(f"Invalid month token {token!r}; expected YYYY-MM")
    return int(match.group(1)), int(match.group(2))


def format_month(year: int, month: int) -> str:
    sign = "-" if year < 0 else ""
    return f"{sign}{abs(year):04d}-{month:02d}"


def _ordinal(token: str) -> int:
    year, month = parse_month(token)
    return year * 12 + (month - 1)


def _from_ordinal(ordinal: int) -> str:
    year, month_index = divmod(ordinal, 12)
    return format_month(year, month_index + 1)


def add_months(month: str, count: int) -> str:
    """Shift a month token by ``count`` months (negative moves backwards)."""
    return _from_ordinal(_ordinal(month) + int(count))


def months_between(start: str, end: str) -> int:
    """Signed number of calendar months from ``start`` to ``end``."""
    return _ordinal(end) - _ordinal(start)


def month_range(start: str, end: str) -> List[str]:
    """Inclusive ordered list of months from ``start`` to ``end``."""
    total = months_between(start, end)
    if total < 0:
        raise ValueError(f"month_range start {start} is after end {end}")
    first = _ordinal(start)
    return [_from_ordinal(first + i) for i in range(total + 1)]


def compare_months(a: str, b: str) -> int:
    diff = months_between(b, a)
    return (diff > 0) - (diff < 0)


def is_month_in_range(month: str, start: Optional[str] = None, end: Optional[str] = None) -> bool:
    if start is not None and compare_months(month, start) < 0:
        return False
    if end is not None and compare_months(month, end) > 0:
        return False
    return True


def months_for_year(year: int) -> List[str]:
    return [format_month(year, m) for m in range(1, 13)]


def current_month(today: Optional[dt.date] = None) -> str:
    today = today or dt.date.today()
    return format_month(today.year, today.month)
