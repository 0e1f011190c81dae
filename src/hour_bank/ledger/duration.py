"""Duration calculation from a same-day start/end time pair."""

from __future__ import annotations

import re
from dataclasses import dataclass

from hour_bank.ledger.types import Duration

_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


@dataclass(frozen=True)
class DurationResult:
    """Outcome of a time-range calculation.

    An invalid range never raises; ``valid`` is False and the duration is
    zero. Callers block submission on it.
    """

    duration: Duration
    valid: bool
    error: str | None = None

    @property
    def hours(self) -> int:
        return self.duration.hours

    @property
    def minutes(self) -> int:
        return self.duration.minutes


def parse_clock(value: str) -> int | None:
    """Parse "HH:MM" (24h) into minutes since midnight, or None if malformed."""
    match = _CLOCK_RE.match(value.strip())
    if match is None:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return None
    return hours * 60 + minutes


def calculate_duration(start_time: str | None, end_time: str | None) -> DurationResult:
    """Derive the duration between two clock times on the same day.

    - either time missing: (0, 0), valid
    - end before start: invalid (no cross-midnight ranges)
    - end equal to start: (0, 0), valid
    """
    if not start_time or not end_time:
        return DurationResult(Duration(), valid=True)

    start = parse_clock(start_time)
    end = parse_clock(end_time)
    if start is None or end is None:
        return DurationResult(Duration(), valid=False, error="Times must be in HH:MM format")

    if end < start:
        return DurationResult(
            Duration(), valid=False, error="End time must not be earlier than start time"
        )

    return DurationResult(Duration.from_minutes(end - start), valid=True)
