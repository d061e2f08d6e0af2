"""Value parsing for loosely-typed upstream records."""

from __future__ import annotations

import re
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

_MISSING = object()

# Non-ISO formats seen in spreadsheet exports
_DATE_FORMATS = (
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%Y/%m/%d",
)


def get_field(record: Mapping[str, Any], path: str) -> Any:
    """Look up a dotted path (``metadata.lease_id``) in a nested mapping.

    Returns None when any segment is missing or not a mapping.
    """
    value: Any = record
    for part in path.split("."):
        if not isinstance(value, Mapping):
            return None
        value = value.get(part, _MISSING)
        if value is _MISSING:
            return None
    return value


def is_blank(value: Any) -> bool:
    """True for None and whitespace-only strings."""
    return value is None or (isinstance(value, str) and not value.strip())


def parse_amount(value: Any) -> Decimal | None:
    """Parse a monetary value: 1200, 1200.5, '$1,200.00', '(85.00)'.

    Parenthesised values are negative. Returns None for anything that is not
    a finite number (including booleans and empty strings).
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(str(value))
    elif isinstance(value, str):
        s = value.strip().replace("$", "").replace(",", "").replace(" ", "")
        if not s:
            return None
        negative = s.startswith("(") and s.endswith(")")
        if negative:
            s = s[1:-1]
        if not re.fullmatch(r"[+-]?(\d+(\.\d*)?|\.\d+)", s):
            return None
        try:
            result = Decimal(s)
        except InvalidOperation:
            return None
        if negative:
            result = -result
    else:
        return None
    if not result.is_finite():
        return None
    return result


def parse_date(value: Any) -> datetime | None:
    """Parse a timestamp into an aware UTC datetime.

    Accepts datetime, date, epoch seconds, ISO-8601 strings (a trailing ``Z``
    is allowed) and a few spreadsheet formats. Naive values are taken as UTC.
    Returns None if the value cannot be parsed.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        parsed = _parse_date_string(s)
        if parsed is None:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _parse_date_string(s: str) -> datetime | None:
    iso = s[:-1] + "+00:00" if s.endswith(("Z", "z")) else s
    try:
        return datetime.fromisoformat(iso)
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt)
        except ValueError:
            continue
    return None
