"""Free-text date and budget parsers used during lead normalization.

Both parsers are total: bad input yields a safe default instead of raising.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from email.utils import parsedate_to_datetime
from typing import Any, NamedTuple

_UK_DATETIME_RE = re.compile(r"(\d{1,2})/(\d{1,2})/(\d{4})\s*(\d{1,2}):(\d{2})\s*(am|pm)?", re.IGNORECASE)
_UK_DATE_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_ISO_PREFIX_RE = re.compile(r"^\d{4}-\d{2}-\d{2}")

_FALLBACK_DATE_FORMATS = (
    "%b %d, %Y",
    "%B %d, %Y",
    "%b %d %Y",
    "%d %b %Y",
    "%d %B %Y",
    "%Y/%m/%d",
    "%d-%m-%Y",
    "%d.%m.%Y",
)

_CURRENCY_RE = re.compile(r"[£$€,\s]")
_THOUSANDS_RE = re.compile(r"(\d+\.?\d*)K", re.IGNORECASE)
_MILLIONS_RE = re.compile(r"(\d+\.?\d*)(M|Million)", re.IGNORECASE)
_NUMBER_RE = re.compile(r"^\d*\.?\d+")
_DIGITS_RE = re.compile(r"\d+\.?\d*")
_RANGE_SPLIT_RE = re.compile(r"[-–—]")


class BudgetRange(NamedTuple):
    min: float | None
    max: float | None


def _finite(amount: Any) -> float | None:
    if amount is None:
        return None
    try:
        amount = float(amount)
    except OverflowError:
        return None
    return amount if math.isfinite(amount) else None


def _now_iso(now: datetime | None) -> str:
    return (now or datetime.now()).isoformat()


def _parse_uk_datetime(match: re.Match) -> datetime:
    day, month, year, hours, minutes, meridiem = match.groups()
    hour = int(hours)
    if meridiem:
        meridiem = meridiem.lower()
        if meridiem == "pm" and hour < 12:
            hour += 12
        elif meridiem == "am" and hour == 12:
            hour = 0
    return datetime(int(year), int(month), int(day), hour, int(minutes))


def _parse_iso(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        parsed = date.fromisoformat(value[:10])
        return datetime(parsed.year, parsed.month, parsed.day)


def _parse_generic(value: str) -> datetime | None:
    try:
        return parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        pass
    for fmt in _FALLBACK_DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


def parse_date(value: Any, now: datetime | None = None) -> str:
    """Parse a free-text date into an ISO 8601 string.

    Recognizes, in order: UK ``D/M/YYYY H:MMam``, UK ``D/M/YYYY``, ISO-prefixed
    strings, then a handful of common written formats. Anything else, including
    empty input, falls back to the current timestamp.
    """
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day).isoformat()
    if value is None:
        return _now_iso(now)

    text = str(value).strip()
    if not text:
        return _now_iso(now)

    try:
        uk_match = _UK_DATETIME_RE.search(text)
        if uk_match:
            return _parse_uk_datetime(uk_match).isoformat()

        uk_date = _UK_DATE_RE.match(text)
        if uk_date:
            day, month, year = uk_date.groups()
            return datetime(int(year), int(month), int(day)).isoformat()

        if _ISO_PREFIX_RE.match(text):
            return _parse_iso(text).isoformat()

        parsed = _parse_generic(text)
        if parsed is not None:
            return parsed.isoformat()
    except (ValueError, OverflowError):
        pass

    return _now_iso(now)


def _parse_amount(segment: str) -> float | None:
    cleaned = _CURRENCY_RE.sub("", segment)
    if not cleaned:
        return None

    thousands = _THOUSANDS_RE.search(cleaned)
    if thousands:
        return _finite(float(thousands.group(1)) * 1_000)

    if _MILLIONS_RE.search(cleaned):
        number = _DIGITS_RE.search(cleaned)
        return _finite(float(number.group(0)) * 1_000_000) if number else None

    number = _NUMBER_RE.match(cleaned)
    return _finite(float(number.group(0))) if number else None


def parse_budget_amount(value: Any) -> float | None:
    """Parse a single budget amount such as ``£750K`` or ``1.5m``."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return _finite(value)
    return _parse_amount(str(value))


def parse_budget_range(value: Any) -> BudgetRange:
    """Parse ``"£400K - £500K"`` style strings into numeric bounds.

    A single value collapses to a point range; an unparseable side is ``None``.
    """
    if value is None or isinstance(value, bool) or value == "":
        return BudgetRange(None, None)
    if isinstance(value, (int, float)):
        amount = _finite(value)
        return BudgetRange(amount, amount)

    parts = [part.strip() for part in _RANGE_SPLIT_RE.split(str(value))]
    low = _parse_amount(parts[0]) if parts[0] else None
    if len(parts) > 1 and parts[1]:
        high = _parse_amount(parts[1])
    else:
        high = _parse_amount(parts[0])
    return BudgetRange(low, high)
