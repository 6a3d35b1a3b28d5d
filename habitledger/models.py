"""Typed models for the habit completion ledger.

All record-like models use from_dict/to_dict for JSON/YAML serialization.
camelCase and snake_case keys are both accepted on input; camelCase is
emitted on output. Unknown keys are ignored; missing keys use defaults.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum, Flag, auto
from typing import Any

from habitledger.dates import normalize_date_key

logger = logging.getLogger(__name__)

FREQUENCIES = ("daily", "weekly", "monthly", "custom")


# ── Outcomes & day states ─────────────────────────────────────


class Outcome(Enum):
    """What the ledger says about one day. UNMARKED is never stored."""

    COMPLETED = "completed"
    MISSED = "missed"
    UNMARKED = "unmarked"


class DayState(Flag):
    """Classification of one calendar day for one habit.

    TODAY is an overlay, combined with exactly one of COMPLETED, MISSED,
    PLANNED or NOT_SCHEDULED.
    """

    COMPLETED = auto()
    MISSED = auto()
    TODAY = auto()
    PLANNED = auto()
    PLANNED_FUTURE = auto()
    NOT_SCHEDULED = auto()
    NOT_SCHEDULED_FUTURE = auto()
    INACTIVE = auto()

    @property
    def base(self) -> DayState:
        """The state with the TODAY overlay removed."""
        return DayState(self.value & ~DayState.TODAY.value)

    @property
    def is_today(self) -> bool:
        return bool(self & DayState.TODAY)

    @property
    def interactive(self) -> bool:
        return self.base not in _NON_INTERACTIVE

    @property
    def label(self) -> str:
        """'completed', 'planned-future', ... ('today' for a bare overlay)."""
        base = self.base
        if not base:
            return "today"
        return base.name.lower().replace("_", "-")


_NON_INTERACTIVE = (
    DayState.INACTIVE,
    DayState.PLANNED_FUTURE,
    DayState.NOT_SCHEDULED_FUTURE,
)


# ── Schedule ──────────────────────────────────────────────────


def _decode_list(raw: Any) -> list[Any]:
    """Turn a JSON-encoded array, comma-separated string or collection into a list."""
    if raw is None:
        return []
    if isinstance(raw, (list, tuple, set, frozenset)):
        return list(raw)
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return []
        try:
            parsed = json.loads(text)
        except ValueError:
            parsed = None
        if isinstance(parsed, list):
            return parsed
        return [part.strip() for part in text.split(",")]
    logger.debug("Unsupported list encoding %r, treating as empty", type(raw).__name__)
    return []


def parse_day_tokens(raw: Any) -> frozenset[str]:
    """Normalize selected weekday tokens to a lower-cased set."""
    tokens = set()
    for value in _decode_list(raw):
        if value is None:
            continue
        token = str(value).strip().lower()
        if token:
            tokens.add(token)
    return frozenset(tokens)


def parse_specific_dates(raw: Any) -> frozenset[str]:
    """Normalize an explicit date list to a set of date keys."""
    keys = set()
    for value in _decode_list(raw):
        key = normalize_date_key(value)
        if key:
            keys.add(key)
    return frozenset(keys)


def _first_present(d: dict[str, Any], *names: str) -> Any:
    for name in names:
        if d.get(name) is not None:
            return d[name]
    return None


@dataclass(frozen=True)
class HabitSchedule:
    """Recurrence configuration of a habit, normalized once at the boundary."""

    frequency: str = "daily"
    selected_days: frozenset[str] = frozenset()
    specific_dates: frozenset[str] = frozenset()
    always_show: bool = False

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> HabitSchedule:
        if not d or not isinstance(d, dict):
            return cls()
        frequency = str(d.get("frequency") or "daily").strip().lower()
        if frequency not in FREQUENCIES:
            logger.debug("Unknown frequency %r, matching by selected days only", frequency)
        specific = _first_present(d, "selectedDates", "selected_dates")
        if specific is None:
            specific = _first_present(d, "dates", "specificDates", "specific_dates")
        always_show = d.get("alwaysShow", d.get("always_show", False))
        if isinstance(always_show, str):
            always_show = always_show.strip().lower() == "true"
        return cls(
            frequency=frequency,
            selected_days=parse_day_tokens(_first_present(d, "selectedDays", "selected_days")),
            specific_dates=parse_specific_dates(specific),
            always_show=bool(always_show),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "frequency": self.frequency,
            "selectedDays": sorted(self.selected_days),
            "alwaysShow": self.always_show,
        }
        if self.specific_dates:
            d["specificDates"] = sorted(self.specific_dates)
        return d


# ── Habit record ──────────────────────────────────────────────


@dataclass
class HabitRecord:
    """A habit as delivered by the external API collaborator."""

    id: str = ""
    name: str = ""
    schedule: HabitSchedule = field(default_factory=HabitSchedule)
    ledger: Any = None  # CompletionLedger
    start_date: str = ""
    created_at: str = ""

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> HabitRecord:
        from habitledger.ledger import CompletionLedger

        if not d or not isinstance(d, dict):
            return cls(ledger=CompletionLedger())
        completions = _first_present(d, "completions", "habit_completions", "habitCompletions")
        return cls(
            id=str(d.get("id", "")),
            name=str(d.get("name", "")),
            schedule=HabitSchedule.from_dict(d),
            ledger=CompletionLedger.from_raw(completions),
            start_date=normalize_date_key(_first_present(d, "startDate", "start_date")),
            created_at=normalize_date_key(_first_present(d, "createdAt", "created_at")),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"id": self.id, "name": self.name}
        d.update(self.schedule.to_dict())
        d["completions"] = self.ledger.to_raw() if self.ledger is not None else {}
        if self.start_date:
            d["startDate"] = self.start_date
        if self.created_at:
            d["createdAt"] = self.created_at
        return d


# ── Engine outputs ────────────────────────────────────────────


@dataclass
class DayCell:
    """One classified day, as handed to calendar/timeline renderers."""

    date_key: str
    state: DayState
    scheduled: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date_key,
            "state": self.state.label,
            "today": self.state.is_today,
            "interactive": self.state.interactive,
            "scheduled": self.scheduled,
        }


@dataclass
class ToggleResult:
    date_key: str
    previous: Outcome
    outcome: Outcome
    ledger: Any  # CompletionLedger

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date_key,
            "previous": self.previous.value,
            "value": self.outcome.value,
            "completions": self.ledger.to_raw(),
        }


@dataclass
class HabitSummary:
    total_completed: int = 0
    total_missed: int = 0
    current_streak: int = 0
    longest_streak: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalCompleted": self.total_completed,
            "totalMissed": self.total_missed,
            "currentStreak": self.current_streak,
            "longestStreak": self.longest_streak,
        }


@dataclass
class PlanStats:
    total_planned: int = 0
    completed_on_plan: int = 0
    completed_outside_plan: int = 0
    completion_rate: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalPlanned": self.total_planned,
            "completedOnPlan": self.completed_on_plan,
            "completedOutsidePlan": self.completed_outside_plan,
            "completionRate": round(self.completion_rate, 3),
        }
