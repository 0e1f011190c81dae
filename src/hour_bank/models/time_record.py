"""Time record (hour bank occurrence) model."""

from __future__ import annotations

import datetime as dt
from uuid import uuid4

from sqlalchemy import Boolean, CheckConstraint, Date, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from hour_bank.models.base import Base

# Fields that may differ between records of the same batch
PER_RECORD_FIELDS = frozenset(
    {"id", "employee_id", "employee_name", "created_by", "created_at", "batch_id"}
)

# Fields a batch update may change on every sibling at once
SHARED_FIELDS = frozenset(
    {
        "date",
        "hours",
        "minutes",
        "start_time",
        "end_time",
        "type",
        "occurrence_type",
        "reason",
        "status",
        "is_adjustment",
    }
)


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class TimeRecord(Base):
    """A dated occurrence entered into an employee's hour bank.

    employee_name is a snapshot taken at creation time and is not kept in
    sync with later renames.
    """

    __tablename__ = "time_record"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=lambda: str(uuid4()))
    employee_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    employee_name: Mapped[str] = mapped_column(String, nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    hours: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    start_time: Mapped[str | None] = mapped_column(String(5), nullable=True)
    end_time: Mapped[str | None] = mapped_column(String(5), nullable=True)
    type: Mapped[str] = mapped_column(String, nullable=False)
    occurrence_type: Mapped[str] = mapped_column(String, nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    created_by: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    batch_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    status: Mapped[str | None] = mapped_column(String, nullable=True)
    is_adjustment: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        CheckConstraint("type IN ('CREDIT', 'DEBIT', 'NEUTRAL')", name="time_record_type_check"),
        CheckConstraint("hours >= 0 AND minutes >= 0", name="time_record_duration_check"),
        CheckConstraint(
            "NOT (is_adjustment OR status = 'regularized') OR (hours = 0 AND minutes = 0)",
            name="time_record_adjustment_zero_check",
        ),
    )

    @property
    def total_minutes(self) -> int:
        return self.hours * 60 + self.minutes
