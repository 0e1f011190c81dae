"""Entry validation: turn a submitted draft into persistable record fields.

Validation runs before any store I/O; a draft that fails it never reaches
the database.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from hour_bank.ledger.classification import OccurrenceOption, classify, classify_any
from hour_bank.ledger.duration import calculate_duration, parse_clock
from hour_bank.ledger.types import REGULARIZED, Duration, EntryDraft, EntryFlow, RecordType


class EntryValidationError(Exception):
    """Raised when a draft cannot be submitted."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


@dataclass(frozen=True)
class PreparedEntry:
    """Validated, classified entry ready to be persisted."""

    option: OccurrenceOption
    duration: Duration
    start_time: str | None
    end_time: str | None
    is_adjustment: bool

    @property
    def status(self) -> str | None:
        return REGULARIZED if self.is_adjustment else None

    def record_fields(self) -> dict[str, Any]:
        """Fields shared by every record built from this entry."""
        return {
            "hours": self.duration.hours,
            "minutes": self.duration.minutes,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "type": self.option.type.value,
            "occurrence_type": self.option.label,
            "status": self.status,
            "is_adjustment": self.is_adjustment,
        }


def prepare_entry(
    draft: EntryDraft,
    flow: EntryFlow | None,
    preferred_flow: EntryFlow | None = None,
) -> PreparedEntry:
    """Classify and validate a draft.

    With ``flow`` set, the label must belong to that flow's table. With
    ``flow`` None (record edits), the label is looked up in every table.

    Raises EntryValidationError listing every problem found, or
    UnknownOccurrenceError for a label outside the tables.
    """
    option = classify(draft.occurrence_type, flow) if flow else classify_any(
        draft.occurrence_type, preferred_flow
    )
    errors: list[str] = []

    if not draft.reason or not draft.reason.strip():
        errors.append("Reason is required")

    start_time = draft.start_time or None
    end_time = draft.end_time or None

    if option.regularization:
        if flow is EntryFlow.MANUAL and not start_time:
            errors.append("The time of the missing punch is required")
        if start_time and parse_clock(start_time) is None:
            errors.append("Times must be in HH:MM format")
        if errors:
            raise EntryValidationError(errors)
        # Regularizations only fix the attendance log
        return PreparedEntry(
            option=option,
            duration=Duration(),
            start_time=start_time,
            end_time=end_time,
            is_adjustment=True,
        )

    if start_time and end_time:
        result = calculate_duration(start_time, end_time)
        if not result.valid:
            errors.append(result.error or "Invalid time range")
        duration = result.duration
    else:
        if draft.hours < 0:
            errors.append("Hours cannot be negative")
        if not 0 <= draft.minutes <= 59:
            errors.append("Minutes must be between 0 and 59")
        duration = Duration(max(draft.hours, 0), min(max(draft.minutes, 0), 59))
        for value in (start_time, end_time):
            if value and parse_clock(value) is None:
                errors.append("Times must be in HH:MM format")

    if duration.is_zero and option.type is not RecordType.NEUTRAL and not errors:
        errors.append("Duration must be greater than zero for this occurrence type")

    if errors:
        raise EntryValidationError(errors)

    return PreparedEntry(
        option=option,
        duration=duration,
        start_time=start_time,
        end_time=end_time,
        is_adjustment=False,
    )
