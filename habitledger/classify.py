"""Day-state classification for calendar cells.

Combines the schedule matcher, the ledger and the day's position
relative to today and the account epoch into a DayState.
"""

from __future__ import annotations

import calendar
from datetime import date
from typing import Any

from habitledger.dates import iter_days, normalize_date_key, resolve_epoch, resolve_today, to_date
from habitledger.ledger import CompletionLedger
from habitledger.models import DayCell, DayState, HabitSchedule, Outcome
from habitledger.schedule import WeekdayNames, is_due


def classify_day(
    schedule: HabitSchedule,
    ledger: CompletionLedger,
    day: date,
    today: date,
    epoch: date,
    names: WeekdayNames | None = None,
) -> tuple[DayState, bool]:
    """Classify resolved dates. Returns (state, planned).

    *planned* is the schedule's own verdict, ignoring the ledger; it is
    what the toggle machine needs to decide between MISSED and cleared.
    """
    date_key = normalize_date_key(day)
    planned = is_due(schedule, day, date_key, None, names)
    # a completed day is always due, whatever the schedule says now
    scheduled = planned or ledger.is_completed(date_key)

    if day < epoch:
        return DayState.INACTIVE, planned

    outcome = ledger.get(date_key)
    is_today = day == today
    is_future = day > today
    overlay = DayState.TODAY if is_today else DayState(0)

    if outcome is Outcome.COMPLETED:
        state = DayState.COMPLETED | overlay
    elif outcome is Outcome.MISSED:
        state = DayState.MISSED | overlay
    elif is_today:
        state = (DayState.PLANNED if scheduled else DayState.NOT_SCHEDULED) | overlay
    elif scheduled:
        state = DayState.PLANNED_FUTURE if is_future else DayState.PLANNED
    elif not is_future:
        state = DayState.NOT_SCHEDULED
    else:
        state = DayState.NOT_SCHEDULED_FUTURE
    return state, planned


def classify(
    schedule: HabitSchedule,
    ledger: CompletionLedger,
    day: Any,
    today: Any,
    epoch: Any = None,
    names: WeekdayNames | None = None,
) -> DayState:
    """Classify one day for one habit.

    *day*, *today* and *epoch* accept anything the date-key normalizer
    reads. An unreadable day is NOT_SCHEDULED; a missing epoch falls back
    to DEFAULT_EPOCH.
    """
    resolved = to_date(day)
    if resolved is None:
        return DayState.NOT_SCHEDULED
    state, _ = classify_day(
        schedule,
        CompletionLedger.from_raw(ledger),
        resolved,
        resolve_today(today),
        resolve_epoch(epoch),
        names,
    )
    return state


def classify_range(
    schedule: HabitSchedule,
    ledger: CompletionLedger,
    start: Any,
    end: Any,
    today: Any,
    epoch: Any = None,
    names: WeekdayNames | None = None,
) -> list[DayCell]:
    """Classify every day of a week/timeline window, oldest first."""
    first = to_date(start)
    last = to_date(end)
    if first is None or last is None:
        return []
    ledger = CompletionLedger.from_raw(ledger)
    today_date = resolve_today(today)
    epoch_date = resolve_epoch(epoch)

    cells = []
    for day in iter_days(first, last):
        state, planned = classify_day(schedule, ledger, day, today_date, epoch_date, names)
        cells.append(DayCell(date_key=normalize_date_key(day), state=state, scheduled=planned))
    return cells


def classify_month(
    schedule: HabitSchedule,
    ledger: CompletionLedger,
    year: int,
    month: int,
    today: Any,
    epoch: Any = None,
    names: WeekdayNames | None = None,
) -> list[DayCell]:
    """Classify every day of a calendar month."""
    days_in_month = calendar.monthrange(year, month)[1]
    return classify_range(
        schedule,
        ledger,
        date(year, month, 1),
        date(year, month, days_in_month),
        today,
        epoch,
        names,
    )
