"""Type definitions for the hour bank ledger."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, Union

REGULARIZED = "regularized"


class Role(str, Enum):
    """Access roles."""

    ADMIN = "ADMIN"  # HR
    LEADER = "LEADER"
    EMPLOYEE = "EMPLOYEE"


class RecordType(str, Enum):
    """Signed effect of an occurrence on the hour bank."""

    CREDIT = "CREDIT"
    DEBIT = "DEBIT"
    NEUTRAL = "NEUTRAL"


class EntryFlow(str, Enum):
    """Entry points that create records, each with its own label table."""

    SELF_SERVICE = "self_service"
    MANUAL = "manual"
    BULK = "bulk"


class Timed(Protocol):
    """Anything the balance engine can fold."""

    type: Any
    hours: int
    minutes: int


@dataclass(frozen=True)
class Duration:
    """Non-negative duration split into hours and minutes."""

    hours: int = 0
    minutes: int = 0

    @property
    def total_minutes(self) -> int:
        return self.hours * 60 + self.minutes

    @property
    def is_zero(self) -> bool:
        return self.total_minutes == 0

    @classmethod
    def from_minutes(cls, total: int) -> Duration:
        if total < 0:
            raise ValueError(f"Duration cannot be negative: {total}")
        return cls(hours=total // 60, minutes=total % 60)


@dataclass
class EntryDraft:
    """Candidate record as submitted by a form, before classification."""

    employee_id: str
    date: dt.date
    occurrence_type: str
    reason: str
    start_time: str | None = None
    end_time: str | None = None
    hours: int = 0
    minutes: int = 0


# ============================================================================
# Record variants
# ============================================================================


@dataclass(frozen=True)
class _RecordFields:
    id: str
    employee_id: str
    employee_name: str
    date: dt.date
    hours: int
    minutes: int
    type: RecordType
    occurrence_type: str
    reason: str
    created_at: dt.datetime
    created_by: str
    start_time: str | None = None
    end_time: str | None = None

    @property
    def total_minutes(self) -> int:
        return self.hours * 60 + self.minutes


@dataclass(frozen=True)
class RegularRecord(_RecordFields):
    """A single, balance-affecting (or informational) occurrence."""

    kind: str = "regular"


@dataclass(frozen=True)
class BatchRecord(_RecordFields):
    """A record created by a bulk action; siblings share batch_id."""

    batch_id: str = ""
    kind: str = "batch"

    def __post_init__(self) -> None:
        if not self.batch_id:
            raise ValueError("BatchRecord requires a batch_id")


@dataclass(frozen=True)
class AdjustmentRecord(_RecordFields):
    """Zero-impact regularization of a missing punch."""

    batch_id: str | None = None
    status: str = REGULARIZED
    kind: str = "adjustment"

    def __post_init__(self) -> None:
        if self.hours != 0 or self.minutes != 0:
            raise ValueError(
                f"Adjustment records must have zero duration, got {self.hours}h {self.minutes}m"
            )


RecordVariant = Union[RegularRecord, BatchRecord, AdjustmentRecord]


def record_variant(row: Any) -> RecordVariant:
    """Convert a persisted record (ORM row or similar) to its variant."""
    common = dict(
        id=row.id,
        employee_id=row.employee_id,
        employee_name=row.employee_name,
        date=row.date,
        hours=row.hours,
        minutes=row.minutes,
        type=RecordType(row.type),
        occurrence_type=row.occurrence_type,
        reason=row.reason,
        created_at=row.created_at,
        created_by=row.created_by,
        start_time=row.start_time,
        end_time=row.end_time,
    )
    if row.is_adjustment or row.status == REGULARIZED:
        return AdjustmentRecord(batch_id=row.batch_id, **common)
    if row.batch_id:
        return BatchRecord(batch_id=row.batch_id, **common)
    return RegularRecord(**common)
