"""Parsing of raw item fields: timestamps into day keys, positions into pixels.

Both parsers raise a typed error on bad input; callers decide whether to
skip the item.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from typing import Any

from datemarkers.errors import MarkerLayoutError, TimestampParseError

_MONTHS: dict[str, int] = {
    "january": 1,
    "february": 2,
    "march": 3,
    "april": 4,
    "may": 5,
    "june": 6,
    "july": 7,
    "august": 8,
    "september": 9,
    "october": 10,
    "november": 11,
    "december": 12,
}

# "Friday, November 21, 2025 at 3:14 PM" -- the weekday is matched but ignored.
_LONG_DATE_RE = re.compile(
    r"^\s*[^,]+,\s+(?P<month>[A-Za-z]+)\s+(?P<day>\d{1,2}),\s+(?P<year>\d{4})"
)

# Leading number of a CSS length such as "120px" or "-3.5px".
_LEADING_NUMBER_RE = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+))")


def parse_day_key(raw: str) -> date:
    """Parse a raw item timestamp into its calendar day.

    Accepts the long tooltip form ``"<Weekday>, <Month> <D>, <YYYY>..."``
    (month names are matched in English regardless of the process locale)
    and ISO-8601 dates or datetimes.

    Raises
    ------
    TimestampParseError
        If *raw* matches neither form or names an impossible date.
    """
    text = raw.strip()

    match = _LONG_DATE_RE.match(text)
    if match is not None:
        month = _MONTHS.get(match.group("month").lower())
        if month is None:
            raise TimestampParseError(
                f"Unknown month name in timestamp {raw!r}",
                context={"raw": raw},
            )
        try:
            return date(int(match.group("year")), month, int(match.group("day")))
        except ValueError as exc:
            raise TimestampParseError(
                f"Invalid calendar date in timestamp {raw!r}",
                context={"raw": raw},
                cause=exc,
            ) from exc

    try:
        return datetime.fromisoformat(text).date()
    except ValueError as exc:
        raise TimestampParseError(
            f"Unrecognised timestamp {raw!r}",
            context={"raw": raw},
            cause=exc,
        ) from exc


def coerce_position(value: Any, ordinal: int | None = None) -> float:
    """Turn an item's reported position into a finite pixel offset.

    Numbers are used as-is; strings contribute their leading number, so
    ``"120px"`` becomes ``120.0``.

    Raises
    ------
    MarkerLayoutError
        If the value is missing, non-numeric, or not finite.
    """
    context = {"position": value, "ordinal": ordinal}
    if value is None or isinstance(value, bool):
        raise MarkerLayoutError("Item has no position", context=context)

    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = _LEADING_NUMBER_RE.match(value)
        if match is None:
            raise MarkerLayoutError(
                f"Unparsable position {value!r}", context=context,
            )
        number = float(match.group(1))
    else:
        raise MarkerLayoutError(
            f"Unsupported position type {type(value).__name__}", context=context,
        )

    if not math.isfinite(number):
        raise MarkerLayoutError(f"Non-finite position {value!r}", context=context)
    return number
