"""Record service - entry points that create, edit and delete occurrences.

Every entry is classified and validated before it reaches the store.
Records that belong to a batch are always edited and deleted together
with their siblings.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date as date_type
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from hour_bank.ledger.entries import EntryValidationError, prepare_entry
from hour_bank.ledger.types import EntryDraft, EntryFlow
from hour_bank.models import Employee, TimeRecord
from hour_bank.services.access import AccessPolicy
from hour_bank.services.app_state import AppState
from hour_bank.services.batch_service import BatchResult, BatchService
from hour_bank.services.record_store import RecordStore

logger = logging.getLogger(__name__)

# Fields a caller may change when editing a record or batch
EDITABLE_FIELDS = frozenset(
    {"date", "start_time", "end_time", "hours", "minutes", "occurrence_type", "reason"}
)
NULLABLE_FIELDS = frozenset({"start_time", "end_time"})


class RecordNotFoundError(Exception):
    """Raised when a record, batch or employee does not exist."""

    def __init__(self, kind: str, key: str):
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} '{key}' not found")


@dataclass(frozen=True)
class WriteResult:
    """Outcome of an edit or delete, for one record or a whole batch."""

    targeted: int
    affected: int
    batch_id: str | None = None

    @property
    def success(self) -> bool:
        return self.targeted > 0 and self.affected == self.targeted

    @property
    def partial(self) -> bool:
        return self.affected < self.targeted

    @property
    def summary(self) -> str:
        return f"{self.affected} of {self.targeted} affected"

    @classmethod
    def from_batch(cls, result: BatchResult) -> WriteResult:
        return cls(targeted=result.targeted, affected=result.affected, batch_id=result.batch_id)


class RecordService:
    """Service for the hour bank's occurrence records.

    Operations:
    - create_entry: self-service or manual single entry
    - create_bulk: one record per selected employee, sharing a batch_id
    - update_record / delete_record: single record, or its whole batch
    - update_batch / delete_batch: address a batch by id
    """

    def __init__(
        self,
        session: AsyncSession,
        store: RecordStore | None = None,
        state: AppState | None = None,
    ):
        self.session = session
        self.store = store or RecordStore(session)
        self.batches = BatchService(session, self.store)
        self.state = state or AppState(self.store)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_record(self, record_id: str) -> TimeRecord:
        record = await self.store.get(TimeRecord, record_id)
        if record is None:
            raise RecordNotFoundError("Record", record_id)
        return record

    async def list_visible(self, user: Employee) -> list[TimeRecord]:
        """Records ``user`` may browse, newest date first."""
        await self.state.ensure_loaded()
        return AccessPolicy.visible_records(user, self.state.records)

    async def get_batch(self, user: Employee, batch_id: str) -> list[TimeRecord]:
        """Records of a batch the caller may edit, ordered by employee name."""
        siblings = await self.batches.get_batch(batch_id)
        if not siblings:
            raise RecordNotFoundError("Batch", batch_id)
        # Siblings share one author
        AccessPolicy.ensure_can_edit(user, siblings[0])
        return siblings

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    async def create_entry(
        self, user: Employee, flow: EntryFlow, draft: EntryDraft
    ) -> TimeRecord | None:
        """Create a single record. Returns None if the store write fails."""
        if flow is EntryFlow.BULK:
            raise ValueError("Bulk entries go through create_bulk")
        AccessPolicy.ensure_can_create(user, flow, draft.employee_id)

        employee = await self.store.get(Employee, draft.employee_id)
        if employee is None:
            raise RecordNotFoundError("Employee", draft.employee_id)

        prepared = prepare_entry(draft, flow)
        record = TimeRecord(
            id=str(uuid4()),
            employee_id=employee.id,
            employee_name=employee.name,
            date=draft.date,
            reason=draft.reason.strip(),
            created_at=datetime.now(timezone.utc),
            created_by=user.id,
            **prepared.record_fields(),
        )
        if not await self.store.set(record):
            return None

        logger.info(
            "Record %s (%s, %s) created for %s by %s",
            record.id,
            prepared.option.label,
            prepared.option.type.value,
            employee.id,
            user.id,
        )
        await self._changed()
        return await self.store.get(TimeRecord, record.id)

    async def create_bulk(
        self,
        user: Employee,
        employee_ids: Sequence[str],
        date: date_type,
        occurrence_type: str,
        reason: str,
        hours: int = 0,
        minutes: int = 0,
    ) -> BatchResult:
        """Apply one occurrence to several employees as a single batch."""
        AccessPolicy.ensure_admin(user, "create bulk entries")

        unique_ids = list(dict.fromkeys(employee_ids))
        if not unique_ids:
            raise EntryValidationError(["Select at least one employee"])

        draft = EntryDraft(
            employee_id="",
            date=date,
            occurrence_type=occurrence_type,
            reason=reason,
            hours=hours,
            minutes=minutes,
        )
        prepared = prepare_entry(draft, EntryFlow.BULK)

        employees = []
        missing = []
        for employee_id in unique_ids:
            employee = await self.store.get(Employee, employee_id)
            if employee is None:
                missing.append(employee_id)
            else:
                employees.append(employee)
        if missing:
            raise EntryValidationError([f"Unknown employee '{m}'" for m in missing])

        result = await self.batches.create_batch(
            employees, prepared, date=date, reason=reason.strip(), author_id=user.id
        )
        if result.affected:
            await self._changed()
        return result

    # ------------------------------------------------------------------
    # Edits and deletes
    # ------------------------------------------------------------------

    async def update_record(
        self, user: Employee, record_id: str, changes: dict[str, Any]
    ) -> WriteResult:
        """Edit a record; edits to a batch member apply to the whole batch."""
        record = await self.get_record(record_id)
        AccessPolicy.ensure_can_edit(user, record)
        data = self._edited_fields(record, changes)

        if record.batch_id:
            result = WriteResult.from_batch(await self.batches.update_batch(record.batch_id, data))
        else:
            ok = await self.store.update(TimeRecord, record.id, data)
            if not ok:
                await self._ensure_still_exists(record)
            result = WriteResult(targeted=1, affected=1 if ok else 0)

        if result.affected:
            await self._changed()
        return result

    async def delete_record(self, user: Employee, record_id: str) -> WriteResult:
        """Delete a record; deleting a batch member removes the whole batch."""
        record = await self.get_record(record_id)
        AccessPolicy.ensure_can_edit(user, record)

        if record.batch_id:
            result = WriteResult.from_batch(await self.batches.delete_batch(record.batch_id))
        else:
            ok = await self.store.delete(TimeRecord, record.id)
            if not ok:
                await self._ensure_still_exists(record)
            result = WriteResult(targeted=1, affected=1 if ok else 0)

        if result.affected:
            await self._changed()
        return result

    async def update_batch(
        self, user: Employee, batch_id: str, changes: dict[str, Any]
    ) -> WriteResult:
        siblings = await self.get_batch(user, batch_id)
        data = self._edited_fields(siblings[0], changes)
        result = WriteResult.from_batch(await self.batches.update_batch(batch_id, data))
        if result.affected:
            await self._changed()
        return result

    async def delete_batch(self, user: Employee, batch_id: str) -> WriteResult:
        await self.get_batch(user, batch_id)
        result = WriteResult.from_batch(await self.batches.delete_batch(batch_id))
        if result.affected:
            await self._changed()
        return result

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _edited_fields(self, record: TimeRecord, changes: dict[str, Any]) -> dict[str, Any]:
        """Validate an edit against the record's current values.

        Returns the full set of shared fields to write. A new hours/minutes
        value without new times switches the record to a plain duration.
        """
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be edited: {sorted(unknown)}")
        nulls = sorted(k for k, v in changes.items() if v is None and k not in NULLABLE_FIELDS)
        if nulls:
            raise ValueError(f"Fields cannot be null: {nulls}")

        start_time = changes.get("start_time", record.start_time)
        end_time = changes.get("end_time", record.end_time)
        duration_changed = "hours" in changes or "minutes" in changes
        times_changed = "start_time" in changes or "end_time" in changes
        if duration_changed and not times_changed:
            start_time = end_time = None

        draft = EntryDraft(
            employee_id=record.employee_id,
            date=changes.get("date", record.date),
            occurrence_type=changes.get("occurrence_type", record.occurrence_type),
            reason=changes.get("reason", record.reason),
            start_time=start_time,
            end_time=end_time,
            hours=changes.get("hours", record.hours),
            minutes=changes.get("minutes", record.minutes),
        )
        preferred = EntryFlow.BULK if record.batch_id else None
        prepared = prepare_entry(draft, flow=None, preferred_flow=preferred)
        return {"date": draft.date, "reason": draft.reason.strip(), **prepared.record_fields()}

    async def _ensure_still_exists(self, record: TimeRecord) -> None:
        # Removed since it was read: not found rather than a store failure
        if await self.store.exists(TimeRecord, record.id) is False:
            raise RecordNotFoundError("Record", record.id)

    async def _changed(self) -> None:
        await self.state.changed()
