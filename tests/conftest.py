"""Shared test fixtures for habit ledger tests."""

from __future__ import annotations

import os
from pathlib import Path

import pytest
import yaml

from habitledger.ledger import CompletionLedger
from habitledger.models import HabitSchedule


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a temporary workspace with a profile.yaml."""
    root = tmp_path / "habits"
    root.mkdir(parents=True)

    profile = {
        "timezone": "Europe/Prague",
        "locale": "cs",
        "account_created_at": "2024-01-01",
    }
    (root / "profile.yaml").write_text(
        yaml.dump(profile, default_flow_style=False, allow_unicode=True), encoding="utf-8"
    )

    os.environ["HABIT_LEDGER_ROOT"] = str(root)
    yield root
    # Cleanup
    if "HABIT_LEDGER_ROOT" in os.environ:
        del os.environ["HABIT_LEDGER_ROOT"]


@pytest.fixture
def mwf_habit() -> dict:
    """Monday/Wednesday/Friday habit completed on Jan 1, 3 and 8 2024."""
    return {
        "id": "h1",
        "name": "Stretching",
        "frequency": "weekly",
        "selectedDays": ["monday", "wednesday", "friday"],
        "alwaysShow": False,
        "completions": {"2024-01-01": True, "2024-01-03": True, "2024-01-08": True},
    }


@pytest.fixture
def mwf_schedule(mwf_habit) -> HabitSchedule:
    return HabitSchedule.from_dict(mwf_habit)


@pytest.fixture
def mwf_ledger(mwf_habit) -> CompletionLedger:
    return CompletionLedger.from_raw(mwf_habit["completions"])
