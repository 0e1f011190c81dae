"""Employee management for HR."""

from __future__ import annotations

import logging
from typing import Any
from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from hour_bank.ledger.types import Role
from hour_bank.models import Employee
from hour_bank.services.access import AccessPolicy
from hour_bank.services.app_state import AppState
from hour_bank.services.record_service import RecordNotFoundError
from hour_bank.services.record_store import RecordStore

logger = logging.getLogger(__name__)

# Profile fields HR may change outside of role changes
PROFILE_FIELDS = frozenset({"name", "username", "email", "team", "company", "active"})


class EmployeeService:
    """Create, edit, re-role and remove employee profiles.

    Every mutation requires an ADMIN caller. Removing an employee keeps
    their time records.
    """

    def __init__(
        self,
        session: AsyncSession,
        store: RecordStore | None = None,
        state: AppState | None = None,
    ):
        self.session = session
        self.store = store or RecordStore(session)
        self.state = state or AppState(self.store)

    async def list_employees(self, active_only: bool = False) -> list[Employee]:
        await self.state.ensure_loaded()
        if active_only:
            return [e for e in self.state.employees if e.active]
        return list(self.state.employees)

    async def get_employee(self, employee_id: str) -> Employee:
        employee = await self.store.get(Employee, employee_id)
        if employee is None:
            raise RecordNotFoundError("Employee", employee_id)
        return employee

    async def add_employee(
        self,
        user: Employee,
        name: str,
        username: str,
        email: str = "",
        role: Role = Role.EMPLOYEE,
        team: str = "",
        company: str = "",
        active: bool = True,
    ) -> Employee | None:
        """Register a new profile. Returns None if the store write fails."""
        AccessPolicy.ensure_admin(user, "add employees")
        employee = Employee(
            id=str(uuid4()),
            name=name.strip(),
            username=username.strip(),
            email=email.strip().lower(),
            role=Role(role).value,
            team=team,
            company=company,
            active=active,
        )
        if not await self.store.set(employee):
            return None
        logger.info("Employee %s added by %s", employee.id, user.id)
        await self._changed()
        return await self.store.get(Employee, employee.id)

    async def update_employee(
        self, user: Employee, employee_id: str, changes: dict[str, Any]
    ) -> bool:
        AccessPolicy.ensure_admin(user, "edit employees")
        unknown = set(changes) - PROFILE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be edited: {sorted(unknown)}")
        await self.get_employee(employee_id)
        if not changes:
            return True

        ok = await self.store.update(Employee, employee_id, dict(changes))
        if ok:
            await self._changed()
        return ok

    async def change_role(self, user: Employee, employee_id: str, role: Role) -> bool:
        """Assign a role. Nobody may change their own role."""
        AccessPolicy.ensure_admin(user, "change roles")
        AccessPolicy.ensure_not_self(user, employee_id, "change their own role")
        await self.get_employee(employee_id)

        ok = await self.store.update(Employee, employee_id, {"role": Role(role).value})
        if ok:
            logger.info("Role of %s set to %s by %s", employee_id, Role(role).value, user.id)
            await self._changed()
        return ok

    async def delete_employee(self, user: Employee, employee_id: str) -> bool:
        AccessPolicy.ensure_admin(user, "delete employees")
        AccessPolicy.ensure_not_self(user, employee_id, "delete their own profile")
        await self.get_employee(employee_id)

        ok = await self.store.delete(Employee, employee_id)
        if ok:
            logger.info("Employee %s deleted by %s", employee_id, user.id)
            await self._changed()
        return ok

    async def _changed(self) -> None:
        await self.state.changed()
