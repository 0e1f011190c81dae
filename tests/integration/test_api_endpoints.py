"""API endpoint integration tests.

Tests the FastAPI endpoints against a per-test SQLite database.
"""

from httpx import AsyncClient

from hour_bank.services.record_service import RecordService
from hour_bank.services.record_store import RecordStore

DAY = "2024-03-11"


def entry(employee_id: str, occurrence_type: str = "BH Positivo", **overrides):
    payload = {
        "employee_id": employee_id,
        "date": DAY,
        "occurrence_type": occurrence_type,
        "reason": "Inventário mensal",
        "hours": 2,
        "minutes": 0,
    }
    payload.update(overrides)
    return payload


class TestHealthEndpoints:
    """Test health check endpoints."""

    async def test_health_check(self, client: AsyncClient):
        """Health endpoint should return 200."""
        response = await client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "healthy"

    async def test_readiness_check(self, client: AsyncClient):
        response = await client.get("/ready")
        assert response.status_code == 200
        assert response.json()["status"] == "ready"

    async def test_liveness_check(self, client: AsyncClient):
        response = await client.get("/live")
        assert response.status_code == 200
        assert response.json()["status"] == "alive"


class TestAuthEndpoints:
    """Registration, login and caller identity."""

    async def test_register_and_login(self, client: AsyncClient):
        """First login provisions an EMPLOYEE profile."""
        response = await client.post(
            "/auth/register",
            json={"email": "joana@arcaplast.com.br", "password": "segredo1", "display_name": "Joana"},
        )
        assert response.status_code == 201
        uid = response.json()["uid"]

        response = await client.post(
            "/auth/login", json={"email": "joana@arcaplast.com.br", "password": "segredo1"}
        )
        assert response.status_code == 200
        profile = response.json()
        assert profile["id"] == uid
        assert profile["role"] == "EMPLOYEE"
        assert profile["team"] == "Geral"
        assert profile["username"] == "joana"

    async def test_duplicate_registration(self, client: AsyncClient):
        payload = {"email": "dup@arcaplast.com.br", "password": "segredo1"}
        await client.post("/auth/register", json=payload)

        response = await client.post("/auth/register", json=payload)
        assert response.status_code == 409

    async def test_super_admin_email_cannot_self_register(self, client: AsyncClient):
        """The e-mail promoted to ADMIN on first login is not open for registration."""
        response = await client.post(
            "/auth/register", json={"email": "TI@arcaplast.com.br", "password": "attacker1"}
        )
        assert response.status_code == 403

        response = await client.post(
            "/auth/login", json={"email": "ti@arcaplast.com.br", "password": "attacker1"}
        )
        assert response.status_code == 401

    async def test_wrong_password(self, client: AsyncClient):
        await client.post(
            "/auth/register", json={"email": "wrong@arcaplast.com.br", "password": "segredo1"}
        )

        response = await client.post(
            "/auth/login", json={"email": "wrong@arcaplast.com.br", "password": "errada"}
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid e-mail or password."

    async def test_me(self, client: AsyncClient, employee, headers):
        response = await client.get("/api/v1/me", headers=headers(employee))

        assert response.status_code == 200
        assert response.json()["name"] == "Bruno Silva"

    async def test_missing_identity_header(self, client: AsyncClient):
        response = await client.get("/api/v1/me")
        assert response.status_code == 400

    async def test_unknown_identity(self, client: AsyncClient):
        response = await client.get("/api/v1/me", headers={"X-Employee-ID": "ghost"})
        assert response.status_code == 401

    async def test_inactive_identity(self, client: AsyncClient, make_employee, headers):
        former = await make_employee("Ex Colaborador", active=False)

        response = await client.get("/api/v1/me", headers=headers(former))
        assert response.status_code == 401


class TestRecordEndpoints:
    """Single-record entry, listing, edit and delete."""

    async def test_self_service_entry(self, client: AsyncClient, employee, headers):
        response = await client.post(
            "/api/v1/records/self-service",
            headers=headers(employee),
            json=entry(employee.id, start_time="17:00", end_time="18:30"),
        )

        assert response.status_code == 201
        data = response.json()
        assert data["type"] == "CREDIT"
        assert (data["hours"], data["minutes"]) == (1, 30)
        assert data["created_by"] == employee.id

    async def test_self_service_for_colleague_forbidden(
        self, client: AsyncClient, employee, other_employee, headers
    ):
        response = await client.post(
            "/api/v1/records/self-service",
            headers=headers(employee),
            json=entry(other_employee.id),
        )
        assert response.status_code == 403

    async def test_validation_errors(self, client: AsyncClient, employee, headers):
        response = await client.post(
            "/api/v1/records/self-service",
            headers=headers(employee),
            json=entry(employee.id, minutes=75, reason=""),
        )

        assert response.status_code == 422
        assert response.json()["detail"] == [
            "Reason is required",
            "Minutes must be between 0 and 59",
        ]

    async def test_unknown_occurrence_type(self, client: AsyncClient, employee, headers):
        response = await client.post(
            "/api/v1/records/self-service",
            headers=headers(employee),
            json=entry(employee.id, "Folga"),
        )
        assert response.status_code == 422

    async def test_manual_entry_admin_only(
        self, client: AsyncClient, admin, leader, employee, headers
    ):
        payload = entry(employee.id, "Hora Extra")

        response = await client.post("/api/v1/records/manual", headers=headers(leader), json=payload)
        assert response.status_code == 403

        response = await client.post("/api/v1/records/manual", headers=headers(admin), json=payload)
        assert response.status_code == 201

    async def test_store_failure_is_503(self, client: AsyncClient, employee, headers, monkeypatch):
        async def refuse(self, entity):
            return False

        monkeypatch.setattr(RecordStore, "set", refuse)

        response = await client.post(
            "/api/v1/records/self-service", headers=headers(employee), json=entry(employee.id)
        )
        assert response.status_code == 503

    async def test_listing_by_role(
        self, client: AsyncClient, admin, leader, employee, make_record, headers
    ):
        own = await make_record(employee, leader)
        await make_record(employee, admin)

        admin_view = (await client.get("/api/v1/records", headers=headers(admin))).json()
        leader_view = (await client.get("/api/v1/records", headers=headers(leader))).json()
        employee_view = (await client.get("/api/v1/records", headers=headers(employee))).json()

        assert admin_view["total"] == 2
        assert [r["id"] for r in leader_view["items"]] == [own.id]
        assert employee_view == {"items": [], "total": 0}

    async def test_edit_and_delete(self, client: AsyncClient, admin, employee, make_record, headers):
        record = await make_record(employee, admin, occurrence_type="Hora Extra")

        response = await client.patch(
            f"/api/v1/records/{record.id}", headers=headers(admin), json={"minutes": 45}
        )
        assert response.status_code == 200
        assert response.json()["summary"] == "1 of 1 affected"

        fetched = (await client.get(f"/api/v1/records/{record.id}", headers=headers(admin))).json()
        assert (fetched["hours"], fetched["minutes"]) == (1, 45)

        response = await client.delete(f"/api/v1/records/{record.id}", headers=headers(admin))
        assert response.status_code == 200

        response = await client.get(f"/api/v1/records/{record.id}", headers=headers(admin))
        assert response.status_code == 404

    async def test_null_field_is_rejected(
        self, client: AsyncClient, admin, employee, make_record, headers
    ):
        record = await make_record(employee, admin, occurrence_type="Hora Extra", hours=2)

        response = await client.patch(
            f"/api/v1/records/{record.id}", headers=headers(admin), json={"hours": None}
        )
        assert response.status_code == 422

        fetched = (await client.get(f"/api/v1/records/{record.id}", headers=headers(admin))).json()
        assert fetched["hours"] == 2

    async def test_record_kinds(self, client: AsyncClient, admin, employee, headers):
        """Responses tell regular, batch and adjustment records apart."""
        regular = await client.post(
            "/api/v1/records/self-service", headers=headers(employee), json=entry(employee.id)
        )
        adjustment = await client.post(
            "/api/v1/records/self-service",
            headers=headers(employee),
            json=entry(employee.id, "Ausência de Batida", start_time="08:00", hours=0),
        )
        batch = await client.post(
            "/api/v1/batches",
            headers=headers(admin),
            json={
                "employee_ids": [employee.id],
                "date": DAY,
                "occurrence_type": "BH Positivo (Crédito)",
                "reason": "Inventário",
                "hours": 1,
            },
        )

        assert regular.json()["kind"] == "regular"
        assert regular.json()["batch_id"] is None
        data = adjustment.json()
        assert (data["kind"], data["is_adjustment"], data["status"]) == (
            "adjustment",
            True,
            "regularized",
        )
        assert (data["hours"], data["minutes"]) == (0, 0)
        batch_id = batch.json()["batch_id"]
        members = (await client.get(f"/api/v1/batches/{batch_id}", headers=headers(admin))).json()
        assert [m["kind"] for m in members] == ["batch"]

    async def test_leader_cannot_edit_others(
        self, client: AsyncClient, admin, leader, employee, make_record, headers
    ):
        record = await make_record(employee, admin)

        response = await client.patch(
            f"/api/v1/records/{record.id}", headers=headers(leader), json={"hours": 3}
        )
        assert response.status_code == 403

    async def test_occurrence_types(self, client: AsyncClient, employee, headers):
        response = await client.get(
            "/api/v1/records/occurrence-types", headers=headers(employee), params={"flow": "bulk"}
        )

        assert response.status_code == 200
        assert [o["type"] for o in response.json()] == ["CREDIT", "DEBIT", "NEUTRAL"]


class TestBatchEndpoints:
    """Bulk entries created, edited and deleted as one unit."""

    async def test_batch_lifecycle(
        self, client: AsyncClient, admin, employee, other_employee, headers
    ):
        response = await client.post(
            "/api/v1/batches",
            headers=headers(admin),
            json={
                "employee_ids": [employee.id, other_employee.id],
                "date": DAY,
                "occurrence_type": "BH Positivo (Crédito)",
                "reason": "Inventário",
                "hours": 1,
            },
        )
        assert response.status_code == 201
        created = response.json()
        assert created["summary"] == "2 of 2 affected"
        batch_id = created["batch_id"]

        response = await client.patch(
            f"/api/v1/batches/{batch_id}", headers=headers(admin), json={"hours": 3}
        )
        assert response.status_code == 200

        records = (await client.get(f"/api/v1/batches/{batch_id}", headers=headers(admin))).json()
        assert {r["hours"] for r in records} == {3}
        assert {r["employee_id"] for r in records} == {employee.id, other_employee.id}

        # Deleting one member removes the whole batch
        response = await client.delete(
            f"/api/v1/records/{records[0]['id']}", headers=headers(admin)
        )
        assert response.json()["affected"] == 2

        response = await client.get(f"/api/v1/batches/{batch_id}", headers=headers(admin))
        assert response.status_code == 404

    async def test_partial_batch_is_207(
        self, client: AsyncClient, admin, employee, other_employee, headers, monkeypatch
    ):
        async def short_commit(self, operations):
            return len(operations) - 1

        monkeypatch.setattr(RecordStore, "batch_commit", short_commit)

        response = await client.post(
            "/api/v1/batches",
            headers=headers(admin),
            json={
                "employee_ids": [employee.id, other_employee.id],
                "date": DAY,
                "occurrence_type": "BH Negativo (Débito)",
                "reason": "Parada",
                "hours": 1,
            },
        )

        assert response.status_code == 207
        assert response.json()["summary"] == "1 of 2 affected"

    async def test_batch_requires_admin(self, client: AsyncClient, leader, employee, headers):
        response = await client.post(
            "/api/v1/batches",
            headers=headers(leader),
            json={
                "employee_ids": [employee.id],
                "date": DAY,
                "occurrence_type": "BH Positivo (Crédito)",
                "reason": "Inventário",
                "hours": 1,
            },
        )
        assert response.status_code == 403

    async def test_empty_selection(self, client: AsyncClient, admin, headers):
        response = await client.post(
            "/api/v1/batches",
            headers=headers(admin),
            json={
                "employee_ids": [],
                "date": DAY,
                "occurrence_type": "BH Positivo (Crédito)",
                "reason": "Inventário",
                "hours": 1,
            },
        )
        assert response.status_code == 422
        assert response.json()["detail"] == ["Select at least one employee"]


class TestBalanceEndpoints:
    """Dashboards and reports."""

    async def test_dashboard(
        self, client: AsyncClient, admin, employee, other_employee, make_record, headers
    ):
        await make_record(employee, admin, type="CREDIT", hours=2)
        await make_record(employee, admin, type="DEBIT", hours=1, minutes=30)
        await make_record(other_employee, admin, type="NEUTRAL", hours=1)

        response = await client.get(
            "/api/v1/balances/dashboard",
            headers=headers(admin),
            params={"employee_id": other_employee.id},
        )
        data = response.json()
        assert data["balance"] == "0:00"
        assert data["neutral_count"] == 1
        assert data["employee_count"] == 1

        response = await client.get(
            "/api/v1/balances/dashboard",
            headers=headers(admin),
            params={"employee_id": employee.id},
        )
        assert response.json()["balance"] == "0:30"

    async def test_employee_dashboard_pinned_to_self(
        self, client: AsyncClient, admin, employee, other_employee, make_record, headers
    ):
        await make_record(employee, admin, type="CREDIT", hours=1)
        await make_record(other_employee, admin, type="CREDIT", hours=5)

        response = await client.get(
            "/api/v1/balances/dashboard",
            headers=headers(employee),
            params={"employee_id": other_employee.id},
        )

        assert response.json()["balance"] == "1:00"

    async def test_groups_by_company(
        self, client: AsyncClient, admin, employee, other_employee, make_record, headers
    ):
        await make_record(employee, admin, type="CREDIT", hours=2)
        await make_record(other_employee, admin, type="DEBIT", hours=1)

        response = await client.get(
            "/api/v1/balances/groups", headers=headers(admin), params={"by": "company"}
        )

        groups = {g["group"]: g["balance"] for g in response.json()}
        assert groups == {"Arca Log": "-1:00", "Arca Plast": "2:00"}

    async def test_reports_forbidden_for_employees(self, client: AsyncClient, employee, headers):
        response = await client.get("/api/v1/balances/groups", headers=headers(employee))
        assert response.status_code == 403

        response = await client.get("/api/v1/balances/consolidated", headers=headers(employee))
        assert response.status_code == 403

    async def test_reports_forbidden_for_leaders(
        self, client: AsyncClient, admin, leader, employee, make_record, headers
    ):
        """Leaders only see records they authored, never company-wide balances."""
        await make_record(employee, admin, type="CREDIT", hours=7)

        response = await client.get("/api/v1/balances/consolidated", headers=headers(leader))
        assert response.status_code == 403
        assert "Bruno Silva" not in response.text

        response = await client.get(
            "/api/v1/balances/groups", headers=headers(leader), params={"by": "employee"}
        )
        assert response.status_code == 403

    async def test_consolidated(
        self, client: AsyncClient, admin, employee, make_record, headers
    ):
        await make_record(employee, admin, type="CREDIT", hours=2)

        response = await client.get("/api/v1/balances/consolidated", headers=headers(admin))

        rows = {r["name"]: r for r in response.json()}
        assert rows["Bruno Silva"]["balance"] == "2h 00m"
        assert rows["Ana Admin"]["raw_balance"] == 0


class TestEmployeeEndpoints:
    async def test_admin_manages_employees(self, client: AsyncClient, admin, headers):
        response = await client.post(
            "/api/v1/employees",
            headers=headers(admin),
            json={"name": "Diego Ramos", "username": "diego.ramos", "team": "Expedição"},
        )
        assert response.status_code == 201
        diego = response.json()

        response = await client.put(
            f"/api/v1/employees/{diego['id']}", headers=headers(admin), json={"company": "Arca Log"}
        )
        assert response.json()["company"] == "Arca Log"

        response = await client.patch(
            f"/api/v1/employees/{diego['id']}/role", headers=headers(admin), json={"role": "LEADER"}
        )
        assert response.json()["role"] == "LEADER"

        response = await client.delete(f"/api/v1/employees/{diego['id']}", headers=headers(admin))
        assert response.status_code == 204

    async def test_leader_cannot_add(self, client: AsyncClient, leader, headers):
        response = await client.post(
            "/api/v1/employees",
            headers=headers(leader),
            json={"name": "Diego Ramos", "username": "diego.ramos"},
        )
        assert response.status_code == 403

    async def test_self_protection(self, client: AsyncClient, admin, headers):
        response = await client.patch(
            f"/api/v1/employees/{admin.id}/role", headers=headers(admin), json={"role": "EMPLOYEE"}
        )
        assert response.status_code == 403

        response = await client.delete(f"/api/v1/employees/{admin.id}", headers=headers(admin))
        assert response.status_code == 403

    async def test_list(self, client: AsyncClient, admin, employee, headers):
        response = await client.get("/api/v1/employees", headers=headers(employee))

        assert [e["name"] for e in response.json()] == ["Ana Admin", "Bruno Silva"]


class TestSettingsEndpoints:
    async def test_picklist_crud(self, client: AsyncClient, admin, headers):
        response = await client.post(
            "/api/v1/settings/team", headers=headers(admin), json={"name": "Produção"}
        )
        assert response.status_code == 201
        team_id = response.json()["id"]

        response = await client.put(
            f"/api/v1/settings/team/{team_id}", headers=headers(admin), json={"name": "Montagem"}
        )
        assert response.json()["name"] == "Montagem"

        response = await client.get("/api/v1/settings/team", headers=headers(admin))
        assert [s["name"] for s in response.json()] == ["Montagem"]

        response = await client.delete(f"/api/v1/settings/team/{team_id}", headers=headers(admin))
        assert response.status_code == 204

    async def test_unknown_kind(self, client: AsyncClient, admin, headers):
        response = await client.get("/api/v1/settings/department", headers=headers(admin))
        assert response.status_code == 422

    async def test_leader_cannot_write(self, client: AsyncClient, leader, headers):
        response = await client.post(
            "/api/v1/settings/company", headers=headers(leader), json={"name": "Arca Log"}
        )
        assert response.status_code == 403


class TestUnexpectedErrors:
    async def test_catch_all_handler(self, client: AsyncClient, admin, headers, monkeypatch):
        async def explode(self, user):
            raise RuntimeError("boom")

        monkeypatch.setattr(RecordService, "list_visible", explode)

        response = await client.get("/api/v1/records", headers=headers(admin))

        assert response.status_code == 500
        assert response.json() == {
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
