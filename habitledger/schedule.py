"""Schedule matcher: is a habit due on a given day?

Upstream schedules come in several encodings (locale weekday names, ISO
weekday numbers, Sunday-based numbers, raw arrays). HabitSchedule has
already normalized them to lower-cased tokens; this module builds the
matching tokens for a day and applies the precedence rules.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date
from typing import Any

from habitledger.dates import js_weekday, normalize_date_key, to_date
from habitledger.ledger import CompletionLedger
from habitledger.models import HabitSchedule

ENGLISH_DAYS = ("sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday")

ORDINALS = {"first": 0, "second": 1, "third": 2, "fourth": 3}


# ── Localized weekday names ───────────────────────────────────


@dataclass(frozen=True)
class WeekdayNames:
    """Full and abbreviated weekday names, Sunday first."""

    full: tuple[str, ...]
    short: tuple[str, ...]

    @classmethod
    def for_locale(cls, locale: str | None) -> WeekdayNames:
        """Built-in names for a locale code like 'cs' or 'en-GB'. Unknown -> English."""
        code = (locale or "en").strip().lower().replace("_", "-").split("-")[0]
        return BUILTIN_WEEKDAY_NAMES.get(code, BUILTIN_WEEKDAY_NAMES["en"])

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> WeekdayNames | None:
        """Explicit names from profile.yaml; None unless both lists have 7 entries."""
        if not d or not isinstance(d, dict):
            return None
        full = d.get("full") or []
        short = d.get("short") or []
        if len(full) != 7 or len(short) != 7:
            return None
        return cls(
            full=tuple(str(n).strip().lower() for n in full),
            short=tuple(str(n).strip().lower() for n in short),
        )


BUILTIN_WEEKDAY_NAMES = {
    "en": WeekdayNames(
        full=ENGLISH_DAYS,
        short=("sun", "mon", "tue", "wed", "thu", "fri", "sat"),
    ),
    "cs": WeekdayNames(
        full=("neděle", "pondělí", "úterý", "středa", "čtvrtek", "pátek", "sobota"),
        short=("ne", "po", "út", "st", "čt", "pá", "so"),
    ),
}


# ── Token matching ────────────────────────────────────────────


def weekday_tokens(day: date, names: WeekdayNames | None = None) -> frozenset[str]:
    """All tokens that name *day*'s weekday.

    Sunday-based number, Monday-based number (Sunday is '7'), English
    name, localized full and abbreviated names.
    """
    names = names or BUILTIN_WEEKDAY_NAMES["en"]
    idx = js_weekday(day)
    return frozenset(
        token.lower()
        for token in (
            str(idx),
            str(day.isoweekday()),
            ENGLISH_DAYS[idx],
            names.full[idx],
            names.short[idx],
        )
    )


def matches_nth_weekday(day: date, token: str) -> bool:
    """Match tokens like 'first_monday' or 'last_friday' against *day*."""
    ordinal, sep, weekday = token.partition("_")
    if not sep or weekday not in ENGLISH_DAYS:
        return False
    if ENGLISH_DAYS[js_weekday(day)] != weekday:
        return False
    if ordinal == "last":
        return day.day + 7 > calendar.monthrange(day.year, day.month)[1]
    if ordinal not in ORDINALS:
        return False
    return (day.day - 1) // 7 == ORDINALS[ordinal]


def matches_recurrence(
    schedule: HabitSchedule,
    day: date,
    date_key: str,
    names: WeekdayNames | None = None,
) -> bool:
    """The recurrence rule alone: daily, weekdays, nth weekday, specific dates."""
    if schedule.frequency == "daily":
        return True
    if schedule.selected_days & weekday_tokens(day, names):
        return True
    if schedule.frequency == "monthly":
        if any(matches_nth_weekday(day, token) for token in schedule.selected_days):
            return True
    return bool(date_key) and date_key in schedule.specific_dates


def is_due(
    schedule: HabitSchedule,
    day: Any,
    date_key: str = "",
    ledger: CompletionLedger | None = None,
    names: WeekdayNames | None = None,
) -> bool:
    """Whether the habit should show up / be expected on *day*.

    Precedence: always_show, an explicit completion on that day, then the
    recurrence rule. An unreadable day is never due.
    """
    resolved = to_date(day)
    if resolved is None:
        return False
    if not date_key:
        date_key = normalize_date_key(resolved)

    if schedule.always_show:
        return True
    if ledger is not None and ledger.is_completed(date_key):
        return True
    return matches_recurrence(schedule, resolved, date_key, names)
