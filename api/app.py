from __future__ import annotations

from datetime import timedelta
from typing import Any

from fastapi import Body, FastAPI, HTTPException

from habitledger import (
    HabitRecord,
    account_epoch as _account_epoch,
    apply_toggle,
    classify_month,
    classify_range,
    habit_start_date,
    normalize_date_key,
    plan_stats,
    streak_runs,
    summarize,
    to_date,
    today_date as _today_date,
    weekday_names as _weekday_names,
)

app = FastAPI(title="Habit Ledger API", version="0.1.0")


# ── Request helpers ───────────────────────────────────────────


def _habit(payload: dict[str, Any]) -> HabitRecord:
    habit = payload.get("habit")
    if not isinstance(habit, dict):
        raise HTTPException(status_code=400, detail="Missing habit")
    return HabitRecord.from_dict(habit)


def _window(payload: dict[str, Any]) -> tuple[Any, Any]:
    """(epoch, today) from the request, falling back to the workspace profile."""
    epoch = to_date(payload.get("epoch")) or _account_epoch()
    today = to_date(payload.get("today")) or _today_date()
    return epoch, today


def _int(payload: dict[str, Any], name: str) -> int:
    try:
        return int(payload[name])
    except (KeyError, TypeError, ValueError):
        raise HTTPException(status_code=400, detail=f"Invalid {name}: {payload.get(name)!r}")


# ── Endpoints ─────────────────────────────────────────────────


@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"ok": "true"}


@app.get("/api/date-key")
def api_date_key(value: str = "") -> dict[str, str]:
    """Normalize any date string to its YYYY-MM-DD key ('' if unreadable)."""
    return {"key": normalize_date_key(value)}


@app.post("/api/habits/classify")
def api_classify(payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
    """Day states for a month ({year, month}) or a window ({start, end}, default last 7 days)."""
    habit = _habit(payload)
    epoch, today = _window(payload)
    names = _weekday_names()

    if "year" in payload or "month" in payload:
        year, month = _int(payload, "year"), _int(payload, "month")
        if not 1 <= year <= 9999:
            raise HTTPException(status_code=400, detail=f"Invalid year: {year}")
        if not 1 <= month <= 12:
            raise HTTPException(status_code=400, detail=f"Invalid month: {month}")
        cells = classify_month(habit.schedule, habit.ledger, year, month, today, epoch, names)
    else:
        end = to_date(payload.get("end")) or today
        start = to_date(payload.get("start")) or end - timedelta(days=6)
        if start > end:
            raise HTTPException(status_code=400, detail="start must not be after end")
        cells = classify_range(habit.schedule, habit.ledger, start, end, today, epoch, names)

    return {"habitId": habit.id, "days": [c.to_dict() for c in cells]}


@app.post("/api/habits/toggle")
def api_toggle(payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
    """Compute the next value for a clicked day.

    The caller persists the returned value and swaps in the returned
    completions wholesale.
    """
    habit = _habit(payload)
    epoch, today = _window(payload)
    try:
        result = apply_toggle(
            habit.schedule, habit.ledger, payload.get("date"), today, epoch, _weekday_names()
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True, "habitId": habit.id, **result.to_dict()}


@app.post("/api/habits/summary")
def api_summary(payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
    """Totals, streaks and plan adherence for one habit."""
    habit = _habit(payload)
    epoch, today = _window(payload)
    start = habit_start_date(habit, today)
    summary = summarize(habit.ledger, epoch, today, habit.schedule)
    return {
        "habitId": habit.id,
        **summary.to_dict(),
        "streakHistory": streak_runs(habit.ledger, epoch, today),
        "startDate": start.isoformat(),
        "plan": plan_stats(habit.schedule, habit.ledger, start, today, _weekday_names()).to_dict(),
    }
