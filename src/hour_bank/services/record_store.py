"""Typed CRUD client over the record store.

Single-record writes report success as a boolean and batch writes report
how many operations were committed. Store failures are logged and rolled
back here, at the I/O boundary, and never propagate to callers.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeVar

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hour_bank.config import get_settings
from hour_bank.models import Base

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class WriteKind(str, Enum):
    SET = "set"
    UPDATE = "update"
    DELETE = "delete"


@dataclass
class WriteOp:
    """One write inside a batch commit."""

    kind: WriteKind
    model: type[Base]
    id: str
    data: dict[str, Any] = field(default_factory=dict)


def _primary_key(model: type[Base]) -> Any:
    return model.__mapper__.primary_key[0]


class RecordStore:
    """CRUD against one collection (table) per model, keyed by id."""

    def __init__(self, session: AsyncSession, chunk_size: int | None = None):
        self.session = session
        self.chunk_size = chunk_size or get_settings().batch_chunk_size
        if self.chunk_size < 1:
            raise ValueError("chunk_size must be positive")

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list(
        self,
        model: type[ModelT],
        order_by: Any = None,
        descending: bool = False,
        **filters: Any,
    ) -> list[ModelT]:
        """List every entity of a model, optionally filtered by equality."""
        query = select(model)
        for name, value in filters.items():
            query = query.where(getattr(model, name) == value)
        if order_by is not None:
            column = getattr(model, order_by) if isinstance(order_by, str) else order_by
            query = query.order_by(column.desc() if descending else column)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get(self, model: type[ModelT], entity_id: str) -> ModelT | None:
        return await self.session.get(model, entity_id)

    async def exists(self, model: type[Base], entity_id: str) -> bool | None:
        """Whether the row is in the store, bypassing the session's identity map.

        Returns None if the store cannot be reached.
        """
        try:
            result = await self.session.execute(
                select(_primary_key(model)).where(_primary_key(model) == entity_id)
            )
        except SQLAlchemyError:
            logger.exception("Failed to look up %s %s", model.__name__, entity_id)
            await self.session.rollback()
            return None
        return result.first() is not None

    # ------------------------------------------------------------------
    # Single-record writes
    # ------------------------------------------------------------------

    async def set(self, entity: Base) -> bool:
        """Insert or replace an entity."""
        try:
            await self.session.merge(entity)
            await self.session.commit()
        except SQLAlchemyError:
            logger.exception("Failed to save %s", type(entity).__name__)
            await self.session.rollback()
            return False
        return True

    async def update(self, model: type[Base], entity_id: str, data: dict[str, Any]) -> bool:
        """Apply field changes to one entity. Returns False if it does not exist."""
        try:
            result = await self.session.execute(
                update(model).where(_primary_key(model) == entity_id).values(**data)
            )
            await self.session.commit()
        except SQLAlchemyError:
            logger.exception("Failed to update %s %s", model.__name__, entity_id)
            await self.session.rollback()
            return False
        return (result.rowcount or 0) > 0

    async def delete(self, model: type[Base], entity_id: str) -> bool:
        """Delete one entity. Returns False if nothing was removed."""
        try:
            result = await self.session.execute(
                delete(model).where(_primary_key(model) == entity_id)
            )
            await self.session.commit()
        except SQLAlchemyError:
            logger.exception("Failed to delete %s %s", model.__name__, entity_id)
            await self.session.rollback()
            return False
        return (result.rowcount or 0) > 0

    # ------------------------------------------------------------------
    # Batch writes
    # ------------------------------------------------------------------

    async def batch_commit(self, operations: Sequence[WriteOp]) -> int:
        """Commit operations in sequential chunks of at most ``chunk_size``.

        Each chunk is atomic on its own. The first failing chunk is rolled
        back and no further chunks are sent; earlier chunks stay committed.
        Returns the number of operations that were committed.
        """
        committed = 0
        for start in range(0, len(operations), self.chunk_size):
            chunk = operations[start : start + self.chunk_size]
            try:
                for op in chunk:
                    await self._apply(op)
                await self.session.commit()
            except SQLAlchemyError:
                logger.exception(
                    "Batch chunk %d failed; %d of %d operations committed",
                    start // self.chunk_size,
                    committed,
                    len(operations),
                )
                await self.session.rollback()
                break
            committed += len(chunk)
        return committed

    async def _apply(self, op: WriteOp) -> None:
        pk = _primary_key(op.model)
        if op.kind is WriteKind.SET:
            await self.session.merge(op.model(**op.data))
        elif op.kind is WriteKind.UPDATE:
            await self.session.execute(update(op.model).where(pk == op.id).values(**op.data))
        elif op.kind is WriteKind.DELETE:
            await self.session.execute(delete(op.model).where(pk == op.id))

