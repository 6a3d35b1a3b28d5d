"""Habit Ledger core library — completion ledger and streak engine.

Public API re-exports for convenient imports:
    from habitledger import classify, next_value, summarize, ...
"""

# Dates
from habitledger.dates import (
    DEFAULT_EPOCH,
    normalize_date_key,
    parse_date_key,
    to_date,
    iter_days,
    iter_days_back,
)

# Models
from habitledger.models import (
    Outcome,
    DayState,
    HabitSchedule,
    HabitRecord,
    DayCell,
    ToggleResult,
    HabitSummary,
    PlanStats,
)

# Ledger
from habitledger.ledger import CompletionLedger, coerce_outcome

# Schedule matching
from habitledger.schedule import (
    WeekdayNames,
    weekday_tokens,
    matches_recurrence,
    is_due,
)

# Classification
from habitledger.classify import classify, classify_range, classify_month

# Toggle
from habitledger.toggle import next_value, apply_toggle

# Streaks & totals
from habitledger.streaks import (
    summarize,
    current_streak,
    streak_runs,
    plan_stats,
    habit_start_date,
)

# Workspace
from habitledger.workspace import (
    workspace_root,
    profile_path,
    load_profile,
    get_user_timezone,
    today_str,
    today_date,
    account_epoch,
    weekday_names,
)
