"""Application state container.

Holds the in-memory employee, record and picklist lists that dashboards,
reports and record listings are computed from. One container is shared by
the services and read views of a request: it is loaded on first read, and
services call ``changed()`` after a write has been confirmed so later reads
see the change.
"""

from __future__ import annotations

import logging

from hour_bank.models import AppSetting, Employee, TimeRecord
from hour_bank.services.record_store import RecordStore

logger = logging.getLogger(__name__)


class AppState:
    """Snapshot of everything the dashboards and reports display."""

    def __init__(self, store: RecordStore):
        self.store = store
        self.employees: list[Employee] = []
        self.records: list[TimeRecord] = []
        self.companies: list[AppSetting] = []
        self.teams: list[AppSetting] = []
        self.loaded = False

    async def refresh(self) -> None:
        """Re-fetch all collections."""
        self.employees = await self.store.list(Employee, order_by="name")
        self.records = await self.store.list(TimeRecord, order_by="date", descending=True)
        self.companies = await self.store.list(AppSetting, order_by="name", kind="company")
        self.teams = await self.store.list(AppSetting, order_by="name", kind="team")
        self.loaded = True
        logger.debug(
            "State refreshed: %d employees, %d records, %d companies, %d teams",
            len(self.employees),
            len(self.records),
            len(self.companies),
            len(self.teams),
        )

    async def ensure_loaded(self) -> None:
        if not self.loaded:
            await self.refresh()

    async def changed(self) -> None:
        """Called by services after a confirmed write.

        A state nobody has read yet stays unloaded; the next read fetches
        the current data anyway.
        """
        if self.loaded:
            await self.refresh()

    def employees_by_id(self) -> dict[str, Employee]:
        return {e.id: e for e in self.employees}
