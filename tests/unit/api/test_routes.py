"""API tests: routes wired to in-memory fakes through dependency overrides."""

from __future__ import annotations

import httpx
import pytest

from leadflow.adapters.persistence.database import get_session
from leadflow.application.use_cases.auto_fill_rules import AutoFillRuleUseCase
from leadflow.application.use_cases.create_lead import CreateLeadUseCase
from leadflow.application.use_cases.distribute_leads import BulkDistributeUseCase
from leadflow.application.use_cases.manual_assign import ManualAssignUseCase
from leadflow.application.use_cases.reset_daily_counts import ResetDailyCountsUseCase
from leadflow.domain.entities.allocation_rule import AllocationRule
from leadflow.domain.entities.lead import Lead
from leadflow.domain.entities.specialization import Specialization
from leadflow.domain.value_objects.enums import LeadStatus
from leadflow.infrastructure.api import dependencies as deps
from leadflow.main import create_app
from tests.fakes import Env, FakeSpecializationRepo, employee


class FakeSession:
    def __init__(self):
        self.commits = 0

    async def commit(self):
        self.commits += 1

    async def rollback(self):
        pass


@pytest.fixture
def env():
    return Env(
        employees=[employee(1), employee(2), employee(3, is_active=False)],
        rules=[AllocationRule(id=None, rule_code="R1", product_group_ids=[7], assigned_sales_ids=[2])],
        leads=[Lead(id=None, full_name="Pham D", interested_product_group_id=7)],
        product_group_ids=[7, 8],
    )


@pytest.fixture
def client(env):
    app = create_app()
    session = FakeSession()
    specializations = FakeSpecializationRepo([
        Specialization(sales_employee_id=1, product_group_id=8),
        Specialization(sales_employee_id=3, product_group_id=8),
    ])

    async def fake_session():
        yield session

    app.dependency_overrides.update({
        get_session: fake_session,
        deps.get_lead_repo: lambda: env.lead_repo,
        deps.get_employee_repo: lambda: env.employee_repo,
        deps.get_rule_repo: lambda: env.rule_repo,
        deps.get_specialization_repo: lambda: specializations,
        deps.get_product_group_repo: lambda: env.product_group_repo,
        deps.get_assign_lead_uc: lambda: env.assign_uc,
        deps.get_create_lead_uc: lambda: CreateLeadUseCase(env.lead_repo, env.employee_repo, env.assign_uc),
        deps.get_bulk_distribute_uc: lambda: BulkDistributeUseCase(env.assign_uc, env.lead_repo, env.uow),
        deps.get_manual_assign_uc: lambda: ManualAssignUseCase(
            env.lead_repo, env.employee_repo, env.log_repo, env.clock
        ),
        deps.get_auto_fill_uc: lambda: AutoFillRuleUseCase(
            env.rule_repo, specializations, env.employee_repo
        ),
        deps.get_reset_daily_uc: lambda: ResetDailyCountsUseCase(env.counter_store),
    })
    transport = httpx.ASGITransport(app=app)
    return httpx.AsyncClient(transport=transport, base_url="http://test")


# ─── Leads ───────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_create_lead_assigns_by_rule(client):
    async with client:
        resp = await client.post(
            "/api/leads",
            json={"full_name": "Hoang E", "interested_product_group_id": 7,
                  "customer_group": "Doanh nghiệp"},
        )
    assert resp.status_code == 201
    body = resp.json()
    assert body["lead"]["status"] == "new"
    assert body["assignment"]["sales_employee_id"] == 2
    assert body["assignment"]["method"] == "product_based"
    assert body["reason"] is None


@pytest.mark.asyncio
async def test_create_lead_rejects_unknown_customer_group(client):
    async with client:
        resp = await client.post("/api/leads", json={"full_name": "X", "customer_group": "Nope"})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_create_lead_without_employees_still_created(client, env):
    for e in env.employee_repo.employees.values():
        e.is_active = False
    async with client:
        resp = await client.post("/api/leads", json={"full_name": "Hoang E"})
    assert resp.status_code == 201
    assert resp.json()["assignment"] is None
    assert resp.json()["reason"] == "no_eligible_assignee"


@pytest.mark.asyncio
async def test_get_lead_not_found(client):
    async with client:
        resp = await client.get("/api/leads/999")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_assign_single_lead_then_idempotent(client, env):
    async with client:
        first = await client.post("/api/leads/1/assign")
        second = await client.post("/api/leads/1/assign")
    assert first.json()["status"] == "ok"
    assert first.json()["assignment"]["sales_employee_id"] == 2
    assert second.json()["assignment"]["already_assigned"] is True
    assert env.counter_store.increments == 1


@pytest.mark.asyncio
async def test_manual_assignment(client, env):
    async with client:
        ok = await client.put("/api/leads/1/assignment", json={"sales_employee_id": 1})
        inactive = await client.put("/api/leads/1/assignment", json={"sales_employee_id": 3})
        missing = await client.put("/api/leads/77/assignment", json={"sales_employee_id": 1})
    assert ok.status_code == 200
    assert ok.json()["assignment_method"] == "manual"
    assert inactive.status_code == 400
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_list_leads_filters_unassigned(client):
    async with client:
        resp = await client.get("/api/leads", params={"unassigned": True})
    assert resp.json()["count"] == 1


@pytest.mark.asyncio
async def test_list_leads_pages_in_repository(client, env):
    for _ in range(4):
        env.lead_repo._store(Lead(id=None, full_name="Vo F"))
    env.lead_repo.leads[2].assigned_sales_id = 1

    async with client:
        resp = await client.get(
            "/api/leads", params={"status": "new", "unassigned": True, "limit": 2, "offset": 1}
        )
        too_big = await client.get("/api/leads", params={"limit": 10_000})

    body = resp.json()
    assert body["count"] == 4
    assert [lead["id"] for lead in body["data"]] == [4, 3]
    assert env.lead_repo.search_calls[0] == (LeadStatus.NEW, None, True, 2, 1)
    assert too_big.status_code == 422


# ─── Allocation ──────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_auto_distribute_report(client, env):
    env.lead_repo._store(Lead(id=None, full_name="Vo F"))
    async with client:
        resp = await client.post("/api/allocation/auto-distribute")
    assert resp.status_code == 200
    body = resp.json()
    assert body["totalLeads"] == 2
    assert body["assignedCount"] == 2
    assert body["assignedByRule"] == 1
    assert body["assignedByRoundRobin"] == 1
    assert body["timedOut"] is False


@pytest.mark.asyncio
async def test_rule_crud_and_auto_fill(client, env):
    async with client:
        created = await client.post(
            "/api/allocation-rules",
            json={"rule_code": "R2", "product_group_ids": [8, 8], "assigned_sales_ids": []},
        )
        rule_id = created.json()["id"]
        filled = await client.post(f"/api/allocation-rules/{rule_id}/auto-fill")
        missing = await client.post("/api/allocation-rules/999/auto-fill")
        deleted = await client.delete(f"/api/allocation-rules/{rule_id}")
    assert created.status_code == 201
    assert created.json()["product_group_ids"] == [8]
    # Employee 3 is specialized in 8 but inactive
    assert filled.json()["assigned_sales_ids"] == [1]
    assert missing.status_code == 404
    assert deleted.status_code == 200
    assert rule_id not in env.rule_repo.rules


@pytest.mark.asyncio
async def test_auto_fill_all(client):
    async with client:
        resp = await client.post("/api/allocation-rules/auto-fill")
    assert resp.json() == {"status": "ok", "updated": 1}


# ─── Sales employees ─────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_reset_daily(client, env):
    env.employee(1).today_count = 4
    env.employee(1).total_count = 4
    async with client:
        resp = await client.post("/api/sales-employees/reset-daily")
    assert resp.json() == {"status": "ok", "reset": 2}
    assert env.employee(1).today_count == 0
    assert env.employee(1).total_count == 4


@pytest.mark.asyncio
async def test_employees_by_product_group(client):
    async with client:
        resp = await client.get("/api/sales-employees/by-product-group/8")
    assert [e["id"] for e in resp.json()] == [1]


# ─── Product groups ──────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_create_and_list_product_groups(client):
    async with client:
        created = await client.post("/api/product-groups", json={"code": "PG9", "name": "Bình giữ nhiệt"})
        listed = await client.get("/api/product-groups")
    assert created.status_code == 201
    assert created.json()["id"] == 9
    assert [g["code"] for g in listed.json()] == ["PG7", "PG8", "PG9"]


@pytest.mark.asyncio
async def test_create_lead_with_unusable_preset_assignee_is_400(client, env):
    async with client:
        inactive = await client.post("/api/leads", json={"full_name": "Vo G", "assigned_sales_id": 3})
        unknown = await client.post("/api/leads", json={"full_name": "Vo G", "assigned_sales_id": 42})
    assert inactive.status_code == 400
    assert unknown.status_code == 400
    assert len(env.lead_repo.leads) == 1
