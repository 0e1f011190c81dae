"""Role-gated access rules for records, entries and employee management."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, TypeVar

from hour_bank.ledger.types import EntryFlow, Role

if TYPE_CHECKING:
    from hour_bank.models import Employee, TimeRecord

RecordT = TypeVar("RecordT")


class PermissionDeniedError(Exception):
    """Raised when a user attempts an action their role does not allow."""

    def __init__(self, user_id: str, action: str, reason: str | None = None):
        self.user_id = user_id
        self.action = action
        self.reason = reason
        msg = f"User '{user_id}' may not {action}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class AccessPolicy:
    """Access rules per role.

    - ADMIN: sees and edits every record; manages employees and picklists
    - LEADER: sees and edits only the records it authored
    - EMPLOYEE: no raw record listing; dashboard scoped to itself
    """

    # Flows each role may create entries through
    ENTRY_FLOWS: dict[Role, set[EntryFlow]] = {
        Role.ADMIN: {EntryFlow.SELF_SERVICE, EntryFlow.MANUAL, EntryFlow.BULK},
        Role.LEADER: {EntryFlow.SELF_SERVICE},
        Role.EMPLOYEE: {EntryFlow.SELF_SERVICE},
    }

    @classmethod
    def is_admin(cls, user: Employee) -> bool:
        return user.role == Role.ADMIN

    @classmethod
    def can_view_record(cls, user: Employee, record: TimeRecord) -> bool:
        if user.role == Role.ADMIN:
            return True
        if user.role == Role.LEADER:
            return record.created_by == user.id
        return False

    @classmethod
    def can_edit_record(cls, user: Employee, record: TimeRecord) -> bool:
        """Admins edit everything; leaders only what they created."""
        return cls.can_view_record(user, record)

    @classmethod
    def visible_records(cls, user: Employee, records: Iterable[RecordT]) -> list[RecordT]:
        """Filter a record list down to what ``user`` may browse."""
        if user.role == Role.ADMIN:
            return list(records)
        if user.role == Role.LEADER:
            return [r for r in records if r.created_by == user.id]
        return []

    @classmethod
    def dashboard_scope(cls, user: Employee) -> str | None:
        """Employee id the dashboard is pinned to, or None for unrestricted."""
        if user.role == Role.EMPLOYEE:
            return user.id
        return None

    @classmethod
    def ensure_can_create(cls, user: Employee, flow: EntryFlow, employee_id: str) -> None:
        if flow not in cls.ENTRY_FLOWS.get(Role(user.role), set()):
            raise PermissionDeniedError(user.id, f"create {flow.value} entries")
        if user.role == Role.EMPLOYEE and employee_id != user.id:
            raise PermissionDeniedError(
                user.id, "create entries for other employees", "employees may only self-enter"
            )

    @classmethod
    def ensure_can_view(cls, user: Employee, record: TimeRecord) -> None:
        if not cls.can_view_record(user, record):
            raise PermissionDeniedError(user.id, f"view record {record.id}")

    @classmethod
    def ensure_can_edit(cls, user: Employee, record: TimeRecord) -> None:
        if not cls.can_edit_record(user, record):
            raise PermissionDeniedError(user.id, f"modify record {record.id}")

    @classmethod
    def ensure_admin(cls, user: Employee, action: str) -> None:
        if not cls.is_admin(user):
            raise PermissionDeniedError(user.id, action, "administrator role required")

    @classmethod
    def ensure_not_self(cls, user: Employee, target_id: str, action: str) -> None:
        """Users never change their own role or delete their own profile."""
        if user.id == target_id:
            raise PermissionDeniedError(
                user.id, action, "must be done by another administrator"
            )

    @classmethod
    def ensure_can_view_reports(cls, user: Employee) -> None:
        """Grouped and consolidated balances span every employee: HR only."""
        cls.ensure_admin(user, "view balance reports")
