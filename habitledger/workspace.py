"""Workspace root, profile, timezone and locale helpers."""

from __future__ import annotations

import logging
import os
from datetime import date, datetime
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from habitledger.dates import DEFAULT_EPOCH, to_date
from habitledger.fileio import read_yaml
from habitledger.schedule import WeekdayNames

logger = logging.getLogger(__name__)


def workspace_root() -> Path:
    """Get the workspace root directory (contains profile.yaml)."""
    return Path(
        os.environ.get("HABIT_LEDGER_ROOT", str(Path.home() / "habits"))
    ).expanduser().resolve()


def profile_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "profile.yaml"


def load_profile(root: Path | None = None) -> dict[str, Any]:
    return read_yaml(profile_path(root))


def get_user_timezone(root: Path | None = None) -> ZoneInfo:
    """Get user's timezone from profile.yaml, defaulting to UTC."""
    name = load_profile(root).get("timezone")
    if name:
        try:
            return ZoneInfo(str(name))
        except (ZoneInfoNotFoundError, ValueError):
            logger.debug("Unknown timezone %r, using UTC", name)
    return ZoneInfo("UTC")


def now_local(root: Path | None = None) -> datetime:
    return datetime.now(get_user_timezone(root))


def today_date(root: Path | None = None) -> date:
    """Today's calendar date in the user's timezone."""
    return now_local(root).date()


def today_str(root: Path | None = None) -> str:
    """Get today's date key (YYYY-MM-DD) in user's timezone."""
    return today_date(root).isoformat()


def account_epoch(root: Path | None = None) -> date:
    """Account creation day from profile.yaml, or DEFAULT_EPOCH."""
    raw = load_profile(root).get("account_created_at")
    return to_date(raw, get_user_timezone(root)) or DEFAULT_EPOCH


def weekday_names(root: Path | None = None) -> WeekdayNames:
    """Localized weekday names: explicit lists win over the locale code."""
    profile = load_profile(root)
    explicit = WeekdayNames.from_dict(profile.get("weekday_names") or {})
    if explicit is not None:
        return explicit
    return WeekdayNames.for_locale(profile.get("locale"))
