"""Tests for role-based access rules."""

from types import SimpleNamespace

import pytest

from hour_bank.ledger.types import EntryFlow
from hour_bank.services.access import AccessPolicy, PermissionDeniedError

ADMIN = SimpleNamespace(id="u-admin", role="ADMIN")
LEADER = SimpleNamespace(id="u-leader", role="LEADER")
EMPLOYEE = SimpleNamespace(id="u-emp", role="EMPLOYEE")


def rec(record_id: str, created_by: str):
    return SimpleNamespace(id=record_id, created_by=created_by)


RECORDS = [rec("r1", "u-admin"), rec("r2", "u-leader"), rec("r3", "u-other-leader")]


class TestVisibility:
    def test_admin_sees_all(self):
        assert AccessPolicy.visible_records(ADMIN, RECORDS) == RECORDS

    def test_leader_sees_own_records_only(self):
        visible = AccessPolicy.visible_records(LEADER, RECORDS)

        assert [r.id for r in visible] == ["r2"]
        assert all(r.created_by == LEADER.id for r in visible)

    def test_employee_sees_no_raw_records(self):
        assert AccessPolicy.visible_records(EMPLOYEE, RECORDS) == []

    def test_edit_follows_visibility(self):
        assert AccessPolicy.can_edit_record(LEADER, RECORDS[1]) is True
        assert AccessPolicy.can_edit_record(LEADER, RECORDS[2]) is False
        assert AccessPolicy.can_edit_record(ADMIN, RECORDS[2]) is True

    def test_ensure_can_edit_raises(self):
        with pytest.raises(PermissionDeniedError) as exc_info:
            AccessPolicy.ensure_can_edit(LEADER, RECORDS[0])

        assert exc_info.value.user_id == LEADER.id


class TestEntryCreation:
    def test_employee_self_service_for_self(self):
        AccessPolicy.ensure_can_create(EMPLOYEE, EntryFlow.SELF_SERVICE, EMPLOYEE.id)

    def test_employee_cannot_enter_for_others(self):
        with pytest.raises(PermissionDeniedError):
            AccessPolicy.ensure_can_create(EMPLOYEE, EntryFlow.SELF_SERVICE, "someone-else")

    def test_leader_self_service_for_anyone(self):
        AccessPolicy.ensure_can_create(LEADER, EntryFlow.SELF_SERVICE, "someone-else")

    @pytest.mark.parametrize("flow", [EntryFlow.MANUAL, EntryFlow.BULK])
    @pytest.mark.parametrize("user", [LEADER, EMPLOYEE])
    def test_manual_and_bulk_are_admin_only(self, user, flow):
        with pytest.raises(PermissionDeniedError):
            AccessPolicy.ensure_can_create(user, flow, user.id)

    @pytest.mark.parametrize("flow", list(EntryFlow))
    def test_admin_uses_every_flow(self, flow):
        AccessPolicy.ensure_can_create(ADMIN, flow, "someone-else")


class TestScopes:
    def test_dashboard_scope(self):
        assert AccessPolicy.dashboard_scope(EMPLOYEE) == EMPLOYEE.id
        assert AccessPolicy.dashboard_scope(LEADER) is None
        assert AccessPolicy.dashboard_scope(ADMIN) is None

    def test_reports_are_admin_only(self):
        AccessPolicy.ensure_can_view_reports(ADMIN)
        for user in (LEADER, EMPLOYEE):
            with pytest.raises(PermissionDeniedError):
                AccessPolicy.ensure_can_view_reports(user)

    def test_self_protection(self):
        with pytest.raises(PermissionDeniedError) as exc_info:
            AccessPolicy.ensure_not_self(ADMIN, ADMIN.id, "change their own role")

        assert exc_info.value.action == "change their own role"
        AccessPolicy.ensure_not_self(ADMIN, "u-other", "change their own role")

    def test_ensure_admin(self):
        AccessPolicy.ensure_admin(ADMIN, "add employees")
        with pytest.raises(PermissionDeniedError):
            AccessPolicy.ensure_admin(LEADER, "add employees")
