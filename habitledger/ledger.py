"""Sparse per-habit completion ledger.

Maps date keys to COMPLETED or MISSED. A missing key means UNMARKED;
that value is never stored. Ledgers are immutable: set() returns a new
ledger and callers swap it in wholesale.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Iterator

from habitledger.dates import normalize_date_key
from habitledger.models import Outcome

logger = logging.getLogger(__name__)

_TRUE_STRINGS = {"true", "completed"}
_FALSE_STRINGS = {"false", "missed"}


def coerce_outcome(value: Any) -> Outcome:
    """Read one wire value: True/'true' -> COMPLETED, False/'false' -> MISSED."""
    if isinstance(value, Outcome):
        return value
    if value is True:
        return Outcome.COMPLETED
    if value is False:
        return Outcome.MISSED
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return Outcome.COMPLETED
        if text in _FALSE_STRINGS:
            return Outcome.MISSED
    return Outcome.UNMARKED


@dataclass(frozen=True)
class CompletionLedger:
    entries: Mapping[str, Outcome] = field(default_factory=dict)

    @classmethod
    def from_raw(cls, raw: Any) -> CompletionLedger:
        """Build a ledger from a mapping or a JSON-encoded mapping.

        Anything unreadable yields an empty ledger.
        """
        if raw is None:
            return cls()
        if isinstance(raw, CompletionLedger):
            return raw
        if isinstance(raw, (str, bytes)):
            try:
                raw = json.loads(raw)
            except ValueError:
                logger.debug("Completions are not valid JSON, using an empty ledger")
                return cls()
        if not isinstance(raw, Mapping):
            logger.debug("Completions of type %s ignored", type(raw).__name__)
            return cls()

        entries: dict[str, Outcome] = {}
        for key, value in raw.items():
            outcome = coerce_outcome(value)
            if outcome is Outcome.UNMARKED:
                continue
            date_key = normalize_date_key(key)
            if not date_key:
                logger.debug("Dropping completion with unreadable date %r", key)
                continue
            entries[date_key] = outcome
        return cls(entries)

    def get(self, date_key: str) -> Outcome:
        if not date_key:
            return Outcome.UNMARKED
        return self.entries.get(date_key, Outcome.UNMARKED)

    def set(self, date_key: str, outcome: Outcome) -> CompletionLedger:
        """Return a new ledger with *date_key* set; UNMARKED removes the entry."""
        if not date_key:
            return self
        entries = dict(self.entries)
        if outcome is Outcome.UNMARKED:
            entries.pop(date_key, None)
        else:
            entries[date_key] = outcome
        return CompletionLedger(entries)

    def is_completed(self, date_key: str) -> bool:
        return self.get(date_key) is Outcome.COMPLETED

    def is_missed(self, date_key: str) -> bool:
        return self.get(date_key) is Outcome.MISSED

    def completed_keys(self) -> list[str]:
        return sorted(k for k, v in self.entries.items() if v is Outcome.COMPLETED)

    def missed_keys(self) -> list[str]:
        return sorted(k for k, v in self.entries.items() if v is Outcome.MISSED)

    def last_completed(self) -> str | None:
        """Chronologically latest completed key."""
        keys = self.completed_keys()
        return keys[-1] if keys else None

    def items(self) -> Iterator[tuple[str, Outcome]]:
        for key in sorted(self.entries):
            yield key, self.entries[key]

    def to_raw(self) -> dict[str, bool]:
        return {key: outcome is Outcome.COMPLETED for key, outcome in self.items()}

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, date_key: object) -> bool:
        return date_key in self.entries
