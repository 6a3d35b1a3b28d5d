"""Tests for habitledger/toggle.py — toggle state machine."""

import pytest

from habitledger.classify import classify
from habitledger.ledger import CompletionLedger
from habitledger.models import DayState, Outcome
from habitledger.toggle import apply_toggle, next_value

EPOCH = "2024-01-01"
TODAY = "2024-01-08"


def test_transition_table():
    assert next_value(DayState.COMPLETED, True) is Outcome.MISSED
    assert next_value(DayState.COMPLETED, False) is Outcome.UNMARKED
    assert next_value(DayState.MISSED, True) is Outcome.COMPLETED
    assert next_value(DayState.MISSED, False) is Outcome.COMPLETED
    assert next_value(DayState.PLANNED, True) is Outcome.COMPLETED
    assert next_value(DayState.NOT_SCHEDULED, False) is Outcome.COMPLETED


def test_today_overlay_transitions():
    assert next_value(DayState.COMPLETED | DayState.TODAY, True) is Outcome.UNMARKED
    assert next_value(DayState.COMPLETED | DayState.TODAY, False) is Outcome.UNMARKED
    assert next_value(DayState.MISSED | DayState.TODAY, True) is Outcome.COMPLETED
    assert next_value(DayState.PLANNED | DayState.TODAY, True) is Outcome.COMPLETED
    assert next_value(DayState.NOT_SCHEDULED | DayState.TODAY, False) is Outcome.COMPLETED
    assert next_value(DayState.TODAY, False) is Outcome.COMPLETED


def test_missed_has_no_hysteresis():
    first = next_value(DayState.MISSED, True)
    second = next_value(DayState.MISSED, True)
    assert first is second is Outcome.COMPLETED


def test_scheduled_day_cycles(mwf_schedule):
    ledger = CompletionLedger()
    seen = []
    for _ in range(3):
        result = apply_toggle(mwf_schedule, ledger, "2024-01-05", TODAY, EPOCH)
        seen.append(result.outcome)
        ledger = result.ledger
    assert seen == [Outcome.COMPLETED, Outcome.MISSED, Outcome.COMPLETED]


def test_unscheduled_completed_day_clears(mwf_schedule):
    ledger = CompletionLedger.from_raw({"2024-01-02": True})
    result = apply_toggle(mwf_schedule, ledger, "2024-01-02", TODAY, EPOCH)
    assert result.previous is Outcome.COMPLETED
    assert result.outcome is Outcome.UNMARKED
    assert "2024-01-02" not in result.ledger
    assert classify(mwf_schedule, result.ledger, "2024-01-02", TODAY, EPOCH) == DayState.NOT_SCHEDULED


def test_today_completed_reverts_to_base(mwf_schedule, mwf_ledger):
    result = apply_toggle(mwf_schedule, mwf_ledger, "2024-01-08", TODAY, EPOCH)
    assert result.outcome is Outcome.UNMARKED
    state = classify(mwf_schedule, result.ledger, "2024-01-08", TODAY, EPOCH)
    assert state == DayState.PLANNED | DayState.TODAY


def test_toggle_reads_ledger_passed_in(mwf_schedule):
    """Today's branch looks at the ledger given, not at any earlier copy."""
    stale = CompletionLedger()
    fresh = stale.set("2024-01-08", Outcome.COMPLETED)
    assert apply_toggle(mwf_schedule, fresh, "2024-01-08", TODAY, EPOCH).outcome is Outcome.UNMARKED
    assert apply_toggle(mwf_schedule, stale, "2024-01-08", TODAY, EPOCH).outcome is Outcome.COMPLETED


def test_non_interactive_days_rejected(mwf_schedule, mwf_ledger):
    with pytest.raises(ValueError, match="inactive"):
        apply_toggle(mwf_schedule, mwf_ledger, "2023-12-25", TODAY, EPOCH)
    with pytest.raises(ValueError, match="planned-future"):
        apply_toggle(mwf_schedule, mwf_ledger, "2024-01-10", TODAY, EPOCH)
    with pytest.raises(ValueError, match="Invalid date"):
        apply_toggle(mwf_schedule, mwf_ledger, "someday", TODAY, EPOCH)


def test_toggle_result_to_dict(mwf_schedule, mwf_ledger):
    result = apply_toggle(mwf_schedule, mwf_ledger, "2024-01-05", TODAY, EPOCH)
    d = result.to_dict()
    assert d["date"] == "2024-01-05"
    assert d["previous"] == "unmarked"
    assert d["value"] == "completed"
    assert d["completions"]["2024-01-05"] is True
