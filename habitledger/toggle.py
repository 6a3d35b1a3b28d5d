"""Toggle state machine for day cells.

Users move forward from absence toward completion, and can step back
from completion to MISSED (if the day was due) or to cleared (if not).
"""

from __future__ import annotations

from typing import Any

from habitledger.classify import classify_day
from habitledger.dates import normalize_date_key, parse_date_key, resolve_epoch, resolve_today
from habitledger.ledger import CompletionLedger
from habitledger.models import DayState, HabitSchedule, Outcome, ToggleResult
from habitledger.schedule import WeekdayNames


def next_value(state: DayState, is_scheduled: bool) -> Outcome:
    """Next ledger value for a click on a cell currently in *state*."""
    base = state.base
    if state.is_today:
        return Outcome.UNMARKED if base == DayState.COMPLETED else Outcome.COMPLETED
    if base == DayState.COMPLETED:
        return Outcome.MISSED if is_scheduled else Outcome.UNMARKED
    # MISSED, PLANNED, NOT_SCHEDULED and anything else all move to completed
    return Outcome.COMPLETED


def apply_toggle(
    schedule: HabitSchedule,
    ledger: CompletionLedger,
    day: Any,
    today: Any,
    epoch: Any = None,
    names: WeekdayNames | None = None,
) -> ToggleResult:
    """Classify *day*, compute its next value and return the updated ledger.

    Raises ValueError for an unreadable date or a non-interactive day
    (before the epoch, or in the future and unmarked).
    """
    date_key = normalize_date_key(day)
    resolved = parse_date_key(date_key)
    if resolved is None:
        raise ValueError(f"Invalid date: {day!r}")

    ledger = CompletionLedger.from_raw(ledger)
    state, planned = classify_day(
        schedule, ledger, resolved, resolve_today(today), resolve_epoch(epoch), names
    )
    if not state.interactive:
        raise ValueError(f"Day {date_key} is {state.label} and cannot be toggled")

    outcome = next_value(state, planned)
    return ToggleResult(
        date_key=date_key,
        previous=ledger.get(date_key),
        outcome=outcome,
        ledger=ledger.set(date_key, outcome),
    )
