"""Streak and totals calculator.

Walks a habit's ledger over the account lifetime. Unmarked days are
transparent for streaks (they neither extend nor break a run); missed
days are hard breaks.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from habitledger.dates import (
    iter_days,
    iter_days_back,
    js_weekday,
    normalize_date_key,
    parse_date_key,
    resolve_epoch,
    resolve_today,
)
from habitledger.ledger import CompletionLedger
from habitledger.models import HabitRecord, HabitSchedule, HabitSummary, Outcome, PlanStats
from habitledger.schedule import ENGLISH_DAYS, WeekdayNames, matches_recurrence


def current_streak(ledger: CompletionLedger, epoch: date) -> int:
    """Completed days counted back from the latest completion to the last miss."""
    last = parse_date_key(ledger.last_completed() or "")
    if last is None:
        return 0
    streak = 0
    for day in iter_days_back(last, epoch):
        outcome = ledger.get(normalize_date_key(day))
        if outcome is Outcome.COMPLETED:
            streak += 1
        elif outcome is Outcome.MISSED:
            break
    return streak


def summarize(
    ledger: Any,
    epoch: Any,
    today: Any,
    schedule: HabitSchedule | None = None,
) -> HabitSummary:
    """Totals and streaks for one habit.

    Days in [epoch, today] with no entry whose English weekday name is in
    the schedule's selected days count as implicitly missed. Only the
    weekday names are checked here, not always_show or specific dates.
    """
    ledger = CompletionLedger.from_raw(ledger)
    epoch_date = resolve_epoch(epoch)
    today_date = resolve_today(today)
    selected = schedule.selected_days if schedule is not None else frozenset()

    summary = HabitSummary(
        total_completed=len(ledger.completed_keys()),
        total_missed=len(ledger.missed_keys()),
    )

    running = 0
    for day in iter_days(epoch_date, today_date):
        outcome = ledger.get(normalize_date_key(day))
        if outcome is Outcome.COMPLETED:
            running += 1
            summary.longest_streak = max(summary.longest_streak, running)
        elif outcome is Outcome.MISSED:
            running = 0
        elif ENGLISH_DAYS[js_weekday(day)] in selected:
            summary.total_missed += 1

    summary.current_streak = current_streak(ledger, epoch_date)
    return summary


def streak_runs(ledger: Any, epoch: Any, today: Any) -> list[dict[str, Any]]:
    """Every streak in [epoch, today] as {'start', 'end', 'length'}, oldest first."""
    ledger = CompletionLedger.from_raw(ledger)
    runs: list[dict[str, Any]] = []
    start = end = None
    length = 0
    for day in iter_days(resolve_epoch(epoch), resolve_today(today)):
        key = normalize_date_key(day)
        outcome = ledger.get(key)
        if outcome is Outcome.COMPLETED:
            if start is None:
                start = key
            end = key
            length += 1
        elif outcome is Outcome.MISSED and length:
            runs.append({"start": start, "end": end, "length": length})
            start = end = None
            length = 0
    if length:
        runs.append({"start": start, "end": end, "length": length})
    return runs


def plan_stats(
    schedule: HabitSchedule,
    ledger: Any,
    start: Any,
    today: Any,
    names: WeekdayNames | None = None,
) -> PlanStats:
    """How well the plan was followed between *start* and *today*.

    Planned days follow the recurrence rule only; completions on other
    days are reported separately.
    """
    ledger = CompletionLedger.from_raw(ledger)
    stats = PlanStats()
    for day in iter_days(resolve_epoch(start), resolve_today(today)):
        key = normalize_date_key(day)
        completed = ledger.is_completed(key)
        if matches_recurrence(schedule, day, key, names):
            stats.total_planned += 1
            if completed:
                stats.completed_on_plan += 1
        elif completed:
            stats.completed_outside_plan += 1
    if stats.total_planned:
        stats.completion_rate = stats.completed_on_plan / stats.total_planned
    return stats


def habit_start_date(record: HabitRecord, today: Any = None) -> date:
    """When statistics for a habit begin.

    An explicit start date wins; otherwise the earlier of the creation
    date and the first completion, falling back to today.
    """
    explicit = parse_date_key(record.start_date)
    if explicit is not None:
        return explicit

    candidates = []
    created = parse_date_key(record.created_at)
    if created is not None:
        candidates.append(created)
    completed = record.ledger.completed_keys() if record.ledger is not None else []
    if completed:
        candidates.append(parse_date_key(completed[0]))
    candidates = [c for c in candidates if c is not None]
    if candidates:
        return min(candidates)
    return resolve_today(today)
