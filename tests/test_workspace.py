"""Tests for habitledger/workspace.py — profile-driven configuration."""

from datetime import date

from habitledger.dates import DEFAULT_EPOCH
from habitledger.workspace import (
    account_epoch,
    get_user_timezone,
    load_profile,
    today_str,
    weekday_names,
    workspace_root,
)


def test_workspace_root_from_env(workspace):
    assert workspace_root() == workspace.resolve()


def test_profile_values(workspace):
    assert load_profile(workspace)["locale"] == "cs"
    assert str(get_user_timezone(workspace)) == "Europe/Prague"
    assert account_epoch(workspace) == date(2024, 1, 1)
    assert weekday_names(workspace).full[1] == "pondělí"


def test_today_str_is_a_date_key(workspace):
    key = today_str(workspace)
    assert len(key) == 10
    assert key[4] == "-" and key[7] == "-"


def test_missing_profile_uses_defaults(tmp_path):
    assert load_profile(tmp_path) == {}
    assert str(get_user_timezone(tmp_path)) == "UTC"
    assert account_epoch(tmp_path) == DEFAULT_EPOCH
    assert weekday_names(tmp_path).full[1] == "monday"


def test_broken_profile_uses_defaults(tmp_path):
    (tmp_path / "profile.yaml").write_text("timezone: [unclosed\n", encoding="utf-8")
    assert load_profile(tmp_path) == {}
    (tmp_path / "profile.yaml").write_text(
        "timezone: Mars/Olympus\naccount_created_at: whenever\n", encoding="utf-8"
    )
    assert str(get_user_timezone(tmp_path)) == "UTC"
    assert account_epoch(tmp_path) == DEFAULT_EPOCH


def test_explicit_weekday_names(tmp_path):
    (tmp_path / "profile.yaml").write_text(
        "locale: cs\n"
        "weekday_names:\n"
        "  full: [Sonntag, Montag, Dienstag, Mittwoch, Donnerstag, Freitag, Samstag]\n"
        "  short: [so, mo, di, mi, do, fr, sa]\n",
        encoding="utf-8",
    )
    assert weekday_names(tmp_path).full[1] == "montag"
