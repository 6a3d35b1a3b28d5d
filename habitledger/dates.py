"""Date-key normalization and day iteration.

A date key is a 'YYYY-MM-DD' string for one local calendar day. Keys are
always built from local year/month/day components, never from a
UTC-shifted timestamp.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, tzinfo
from typing import Any, Iterator

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

# Fallback when the account creation date is missing or unreadable.
DEFAULT_EPOCH = date(2024, 1, 1)

# Two parse defaults that differ in every date field.
_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


def _looks_like_key(text: str) -> bool:
    return len(text) >= 10 and text[4] == "-" and text[7] == "-"


def _key_from_parts(year: int, month: int, day: int) -> str:
    return f"{year:04d}-{month:02d}-{day:02d}"


def normalize_date_key(value: Any, tz: tzinfo | None = None) -> str:
    """Return the 'YYYY-MM-DD' key for *value*, or '' if it can't be read.

    Strings that already start with a key are truncated to it verbatim.
    Aware datetimes are moved into *tz* first when one is given, so the
    key is the calendar day as the user sees it.
    """
    if isinstance(value, str):
        text = value.strip()
        if _looks_like_key(text):
            return text[:10]
        if not text:
            return ""
        try:
            value = date_parser.parse(text, default=_DEFAULTS[0])
            partial = date_parser.parse(text, default=_DEFAULTS[1]).date() != value.date()
        except (ValueError, OverflowError):
            logger.debug("Unparseable date string %r", text)
            return ""
        if partial:
            # Missing year/month/day would come from the defaults.
            logger.debug("Incomplete date string %r", text)
            return ""

    if isinstance(value, datetime):
        if tz is not None and value.tzinfo is not None:
            value = value.astimezone(tz)
        return _key_from_parts(value.year, value.month, value.day)
    if isinstance(value, date):
        return _key_from_parts(value.year, value.month, value.day)
    return ""


def parse_date_key(key: str) -> date | None:
    """Parse a date key back into a date. Empty or invalid keys give None."""
    if not key:
        return None
    try:
        return date.fromisoformat(key[:10])
    except ValueError:
        logger.debug("Invalid date key %r", key)
        return None


def to_date(value: Any, tz: tzinfo | None = None) -> date | None:
    """Any supported date representation -> local calendar date (or None)."""
    return parse_date_key(normalize_date_key(value, tz))


def resolve_epoch(value: Any) -> date:
    """Account epoch with the fixed fallback for missing/malformed input."""
    return to_date(value) or DEFAULT_EPOCH


def resolve_today(value: Any) -> date:
    return to_date(value) or date.today()


def js_weekday(d: date) -> int:
    """Weekday index counted from Sunday (0=Sunday .. 6=Saturday)."""
    return d.isoweekday() % 7


def iter_days(start: date, end: date) -> Iterator[date]:
    """Every day from *start* to *end* inclusive, oldest first."""
    current = start
    while current <= end:
        yield current
        if current == end:
            break
        current += timedelta(days=1)


def iter_days_back(start: date, end: date) -> Iterator[date]:
    """Every day from *start* down to *end* inclusive, newest first."""
    current = start
    while current >= end:
        yield current
        if current == end:
            break
        current -= timedelta(days=1)
