"""Tests for BulkDistributeUseCase."""

from __future__ import annotations

import pytest

from leadflow.application.use_cases.distribute_leads import BulkDistributeUseCase
from leadflow.domain.entities.allocation_rule import AllocationRule
from leadflow.domain.entities.lead import Lead
from leadflow.domain.value_objects.enums import AssignmentMethod
from tests.fakes import Env, employee


def _leads(n: int, product: int | None = None) -> list[Lead]:
    return [Lead(id=None, full_name="Lead", interested_product_group_id=product) for _ in range(n)]


class StepClock:
    """Monotonic clock advancing a fixed step per call."""

    def __init__(self, step: float):
        self._t = 0.0
        self._step = step

    def __call__(self) -> float:
        self._t += self._step
        return self._t


@pytest.mark.asyncio
async def test_bulk_aggregate_rule_and_round_robin():
    """10 unassigned leads, 3 matching a rule → 10 assigned, 3 by rule, 7 by round robin."""
    env = Env(
        employees=[employee(1), employee(2), employee(3)],
        rules=[AllocationRule(id=None, rule_code="R1", product_group_ids=[7], assigned_sales_ids=[3])],
        leads=_leads(3, product=7) + _leads(7),
        product_group_ids=[7],
    )
    uc = BulkDistributeUseCase(env.assign_uc, env.lead_repo, env.uow)

    report = await uc.execute()

    assert report.total_leads == 10
    assert report.assigned_count == 10
    assert report.assigned_by_rule == 3
    assert report.assigned_by_round_robin == 7
    assert report.failed_count == 0
    assert report.skipped_count == 0
    assert not report.timed_out
    assert all(l.assigned_sales_id is not None for l in env.lead_repo.leads.values())
    assert env.employee(3).total_count >= 3


@pytest.mark.asyncio
async def test_bulk_skips_already_assigned_and_processes_in_creation_order():
    env = Env(employees=[employee(1), employee(2)], leads=_leads(3))
    env.lead_repo.leads[1].assigned_sales_id = 2
    env.lead_repo.leads[1].assignment_method = AssignmentMethod.MANUAL

    report = await BulkDistributeUseCase(env.assign_uc, env.lead_repo, env.uow).execute()

    assert report.total_leads == 2
    assert report.assigned_count == 2
    assert [log.lead_id for log in env.log_repo.logs] == [2, 3]


@pytest.mark.asyncio
async def test_bulk_no_active_employees_counts_failures():
    env = Env(employees=[employee(1, is_active=False)], leads=_leads(4))

    report = await BulkDistributeUseCase(env.assign_uc, env.lead_repo, env.uow).execute()

    assert report.total_leads == 4
    assert report.assigned_count == 0
    assert report.failed_count == 4
    assert all(l.assigned_sales_id is None for l in env.lead_repo.leads.values())


@pytest.mark.asyncio
async def test_bulk_deadline_returns_partial_report():
    env = Env(employees=[employee(1), employee(2)], leads=_leads(10))
    # started=1, checks at 2, 3, 4, 5 → elapsed passes 3.5 on the fourth check
    uc = BulkDistributeUseCase(env.assign_uc, env.lead_repo, env.uow, monotonic=StepClock(1.0))

    report = await uc.execute(deadline_seconds=3.5)

    assert report.timed_out
    assert report.total_leads == 10
    assert report.processed_count == 3
    assert report.assigned_count == 3
    remaining = [l for l in env.lead_repo.leads.values() if l.assigned_sales_id is None]
    assert len(remaining) == 7


@pytest.mark.asyncio
async def test_bulk_unexpected_error_is_isolated_per_lead():
    env = Env(employees=[employee(1), employee(2)], leads=_leads(3))
    real_execute = env.assign_uc.execute

    async def flaky(lead):
        if lead.id == 2:
            raise RuntimeError("boom")
        return await real_execute(lead)

    env.assign_uc.execute = flaky
    report = await BulkDistributeUseCase(env.assign_uc, env.lead_repo, env.uow).execute()

    assert report.assigned_count == 2
    assert report.skipped_count == 1
    assert env.lead_repo.leads[2].assigned_sales_id is None


@pytest.mark.asyncio
async def test_bulk_snapshot_failure_propagates():
    env = Env(employees=[employee(1)])

    async def broken():
        raise ConnectionError("database unavailable")

    env.lead_repo.get_unassigned = broken
    with pytest.raises(ConnectionError):
        await BulkDistributeUseCase(env.assign_uc, env.lead_repo, env.uow).execute()


@pytest.mark.asyncio
async def test_report_to_dict_keys():
    env = Env(employees=[employee(1)], leads=_leads(1))
    report = await BulkDistributeUseCase(env.assign_uc, env.lead_repo, env.uow).execute()
    assert report.to_dict() == {
        "totalLeads": 1,
        "processedCount": 1,
        "assignedCount": 1,
        "assignedByRule": 0,
        "assignedByRoundRobin": 1,
        "failedCount": 0,
        "skippedCount": 0,
        "timedOut": False,
    }


@pytest.mark.asyncio
async def test_bulk_commits_after_every_lead():
    env = Env(employees=[employee(1), employee(2)], leads=_leads(3))
    uc = BulkDistributeUseCase(env.assign_uc, env.lead_repo, env.uow)
    commits_seen = []
    real_execute = env.assign_uc.execute

    async def tracking(lead):
        commits_seen.append(env.uow.commits)
        return await real_execute(lead)

    env.assign_uc.execute = tracking
    report = await uc.execute()

    assert report.assigned_count == 3
    # Lead n starts only after the n-1 earlier leads were committed
    assert commits_seen == [0, 1, 2]
    assert env.uow.commits == 3


@pytest.mark.asyncio
async def test_bulk_rolls_back_failed_lead_and_keeps_going():
    env = Env(employees=[employee(1)], leads=_leads(3))
    real_execute = env.assign_uc.execute

    async def flaky(lead):
        if lead.id == 1:
            raise RuntimeError("boom")
        return await real_execute(lead)

    env.assign_uc.execute = flaky
    report = await BulkDistributeUseCase(env.assign_uc, env.lead_repo, env.uow).execute()

    assert report.assigned_count == 2
    assert env.uow.rollbacks == 1
    assert env.uow.commits == 2
