"""Batch consistency layer for records that share a batch_id.

Records created by one bulk action are edited and deleted together. The
store only guarantees atomicity per chunk, so a batch spanning several
chunks can end up partially applied. Nothing is retried or rolled back;
the result reports how many records were actually affected against how
many were targeted, and a mismatch is left for an operator to reconcile.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from hour_bank.ledger.entries import PreparedEntry
from hour_bank.models import PER_RECORD_FIELDS, SHARED_FIELDS, Employee, TimeRecord
from hour_bank.services.record_store import RecordStore, WriteKind, WriteOp

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchResult:
    """Outcome of a batch operation."""

    batch_id: str
    targeted: int
    affected: int

    @property
    def success(self) -> bool:
        return self.affected == self.targeted

    @property
    def partial(self) -> bool:
        return self.affected < self.targeted

    @property
    def summary(self) -> str:
        return f"{self.affected} of {self.targeted} affected"


class BatchService:
    """Create, update and delete records as one batch."""

    def __init__(self, session: AsyncSession, store: RecordStore | None = None):
        self.session = session
        self.store = store or RecordStore(session)

    async def get_batch(self, batch_id: str) -> list[TimeRecord]:
        return await self.store.list(TimeRecord, order_by="employee_name", batch_id=batch_id)

    async def create_batch(
        self,
        employees: Sequence[Employee],
        entry: PreparedEntry,
        date: Any,
        reason: str,
        author_id: str,
    ) -> BatchResult:
        """Build one record per employee from shared fields and persist them."""
        batch_id = str(uuid4())
        created_at = datetime.now(timezone.utc)
        shared = entry.record_fields()

        operations = []
        for employee in employees:
            record_id = str(uuid4())
            data = {
                **shared,
                "id": record_id,
                "batch_id": batch_id,
                "employee_id": employee.id,
                "employee_name": employee.name,
                "date": date,
                "reason": reason,
                "created_at": created_at,
                "created_by": author_id,
            }
            operations.append(
                WriteOp(kind=WriteKind.SET, model=TimeRecord, id=record_id, data=data)
            )

        affected = await self.store.batch_commit(operations)
        result = BatchResult(batch_id=batch_id, targeted=len(operations), affected=affected)
        self._log_result("create", result)
        return result

    async def update_batch(self, batch_id: str, changes: dict[str, Any]) -> BatchResult:
        """Apply the same shared-field changes to every record of a batch.

        Raises ValueError if ``changes`` touches per-record fields.
        """
        forbidden = set(changes) & PER_RECORD_FIELDS
        if forbidden:
            raise ValueError(f"Per-record fields cannot be batch-updated: {sorted(forbidden)}")
        unknown = set(changes) - SHARED_FIELDS
        if unknown:
            raise ValueError(f"Unknown record fields: {sorted(unknown)}")

        siblings = await self.get_batch(batch_id)
        operations = [
            WriteOp(kind=WriteKind.UPDATE, model=TimeRecord, id=r.id, data=dict(changes))
            for r in siblings
        ]
        affected = await self.store.batch_commit(operations)
        result = BatchResult(batch_id=batch_id, targeted=len(operations), affected=affected)
        self._log_result("update", result)
        return result

    async def delete_batch(self, batch_id: str) -> BatchResult:
        """Remove every record of a batch."""
        siblings = await self.get_batch(batch_id)
        operations = [
            WriteOp(kind=WriteKind.DELETE, model=TimeRecord, id=r.id) for r in siblings
        ]
        affected = await self.store.batch_commit(operations)
        result = BatchResult(batch_id=batch_id, targeted=len(operations), affected=affected)
        self._log_result("delete", result)
        return result

    def _log_result(self, action: str, result: BatchResult) -> None:
        if result.success:
            logger.info("Batch %s %s: %s", result.batch_id, action, result.summary)
        else:
            logger.warning(
                "Partial batch %s for %s: %s; manual reconciliation required",
                action,
                result.batch_id,
                result.summary,
            )
