"""
Best-effort converters for loosely-typed request input.

Query strings and form bodies can deliver a field as a single string, as a
list of strings (repeated keys) or not at all. These helpers normalize such
values into the primitive a caller expects and never raise: unusable input
degrades to a safe default ("" / 0 / INVALID_DATE).
"""

import re
from datetime import date, datetime, time, timezone
from typing import Any, Union

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class _InvalidDate:
    """Sentinel for an unparsable date. Falsy, never equal to a real date."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "InvalidDate"

    def isoformat(self) -> str:
        return "Invalid Date"


INVALID_DATE = _InvalidDate()

DateResult = Union[datetime, _InvalidDate]


def _first(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        # JSON spelling
        return "true" if value else "false"
    try:
        return str(value)
    except Exception:  # noqa: BLE001 - broken __str__ degrades to empty
        return ""


def coerce_string(value: Any) -> str:
    """First element of a list (or the value itself) as a string; None -> ""."""
    return _as_text(_first(value))


def coerce_integer(value: Any) -> int:
    """
    Parse the leading integer digits of a value.

    >>> coerce_integer(["42", "7"])
    42
    >>> coerce_integer("12px")
    12
    >>> coerce_integer("abc")
    0
    """
    match = _LEADING_INT.match(coerce_string(value))
    if not match:
        return 0
    return int(match.group(1))


def coerce_date(value: Any) -> DateResult:
    """
    Parse a calendar date or date-time.

    Accepts datetime/date objects and ISO-8601 strings (a trailing "Z" is
    read as UTC). Naive values are assumed to be UTC. Anything else returns
    INVALID_DATE, which callers must check with is_valid_date() before use.
    """
    raw = _first(value)
    if isinstance(raw, datetime):
        return raw if raw.tzinfo else raw.replace(tzinfo=timezone.utc)
    if isinstance(raw, date):
        return datetime.combine(raw, time.min, tzinfo=timezone.utc)

    text = coerce_string(raw).strip()
    if not text:
        return INVALID_DATE
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return INVALID_DATE
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def coerce_identity(value: Any) -> Any:
    """Return the value unchanged, for fields that are intentionally untyped."""
    return value


def is_valid_date(value: Any) -> bool:
    return isinstance(value, datetime)
