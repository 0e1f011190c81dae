"""Company and team picklists."""

from __future__ import annotations

import logging
from enum import Enum
from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from hour_bank.models import AppSetting, Employee
from hour_bank.services.access import AccessPolicy
from hour_bank.services.app_state import AppState
from hour_bank.services.record_service import RecordNotFoundError
from hour_bank.services.record_store import RecordStore, WriteKind, WriteOp

logger = logging.getLogger(__name__)

DEFAULT_COMPANIES = ("Arca Plast", "Arca Mania", "Rearca", "Taex Transportadora")
DEFAULT_TEAMS = (
    "Embalagem",
    "Engenharia",
    "Estoque",
    "Excelência Operacional",
    "Financeiro",
    "Gente e Gestão",
    "Gestão",
    "Gestão da Produção",
    "Gestão Estratégica",
    "Injeção",
    "Logística",
    "Manutenção",
    "Marketing",
    "Mercado",
    "Serviços Gerais",
    "Sopro",
    "Suprimentos",
    "TI",
)


class SettingKind(str, Enum):
    COMPANY = "company"
    TEAM = "team"


class SettingsService:
    """Picklist CRUD. Reads are open to everyone; writes are ADMIN-only."""

    def __init__(
        self,
        session: AsyncSession,
        store: RecordStore | None = None,
        state: AppState | None = None,
    ):
        self.session = session
        self.store = store or RecordStore(session)
        self.state = state or AppState(self.store)

    async def list_settings(self, kind: SettingKind) -> list[AppSetting]:
        await self.state.ensure_loaded()
        if SettingKind(kind) is SettingKind.COMPANY:
            return list(self.state.companies)
        return list(self.state.teams)

    async def add_setting(self, user: Employee, kind: SettingKind, name: str) -> AppSetting | None:
        AccessPolicy.ensure_admin(user, f"add {SettingKind(kind).value} entries")
        name = name.strip()
        if not name:
            raise ValueError("Name is required")

        setting = AppSetting(id=str(uuid4()), kind=SettingKind(kind).value, name=name)
        if not await self.store.set(setting):
            return None
        await self._changed()
        return await self.store.get(AppSetting, setting.id)

    async def rename_setting(
        self, user: Employee, kind: SettingKind, setting_id: str, name: str
    ) -> bool:
        AccessPolicy.ensure_admin(user, f"edit {SettingKind(kind).value} entries")
        name = name.strip()
        if not name:
            raise ValueError("Name is required")
        await self._get(kind, setting_id)

        ok = await self.store.update(AppSetting, setting_id, {"name": name})
        if ok:
            await self._changed()
        return ok

    async def delete_setting(self, user: Employee, kind: SettingKind, setting_id: str) -> bool:
        """Remove a picklist entry. Employees already assigned to it keep the name."""
        AccessPolicy.ensure_admin(user, f"delete {SettingKind(kind).value} entries")
        await self._get(kind, setting_id)

        ok = await self.store.delete(AppSetting, setting_id)
        if ok:
            logger.info("%s entry %s deleted by %s", SettingKind(kind).value, setting_id, user.id)
            await self._changed()
        return ok

    async def seed_defaults(self) -> int:
        """Fill the company and team picklists on a fresh install.

        Runs only when both lists are empty. Seeds the default names plus
        every company and team already assigned to an employee. Returns the
        number of entries written.
        """
        await self.state.refresh()
        if self.state.companies or self.state.teams:
            return 0

        names = {
            SettingKind.COMPANY: dict.fromkeys(DEFAULT_COMPANIES),
            SettingKind.TEAM: dict.fromkeys(DEFAULT_TEAMS),
        }
        for employee in self.state.employees:
            if employee.company and employee.company.strip():
                names[SettingKind.COMPANY][employee.company.strip()] = None
            if employee.team and employee.team.strip():
                names[SettingKind.TEAM][employee.team.strip()] = None

        operations = []
        for kind, entries in names.items():
            for name in entries:
                setting_id = str(uuid4())
                operations.append(
                    WriteOp(
                        WriteKind.SET,
                        AppSetting,
                        setting_id,
                        {"id": setting_id, "kind": kind.value, "name": name},
                    )
                )

        written = await self.store.batch_commit(operations)
        if written < len(operations):
            logger.error("Picklist seeding stopped: %d of %d written", written, len(operations))
        else:
            logger.info("Seeded %d picklist entries", written)
        await self._changed()
        return written

    async def _get(self, kind: SettingKind, setting_id: str) -> AppSetting:
        setting = await self.store.get(AppSetting, setting_id)
        if setting is None or setting.kind != SettingKind(kind).value:
            raise RecordNotFoundError(SettingKind(kind).value.capitalize(), setting_id)
        return setting

    async def _changed(self) -> None:
        await self.state.changed()
