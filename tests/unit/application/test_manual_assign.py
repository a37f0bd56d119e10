"""Tests for ManualAssignUseCase and ResetDailyCountsUseCase."""

from datetime import datetime, timezone

import pytest

from leadflow.application.use_cases.manual_assign import ManualAssignUseCase
from leadflow.application.use_cases.reset_daily_counts import ResetDailyCountsUseCase
from leadflow.domain.entities.lead import Lead
from leadflow.domain.value_objects.enums import AssignmentMethod
from tests.fakes import Env, FakeClock, employee

STAMP = datetime(2025, 12, 31, 17, 0, tzinfo=timezone.utc)


def _manual(env: Env) -> ManualAssignUseCase:
    return ManualAssignUseCase(env.lead_repo, env.employee_repo, env.log_repo, FakeClock())


# ─── Manual assignment ───────────────────────────────────────────────


@pytest.mark.asyncio
async def test_manual_assign_overwrites_and_logs():
    env = Env(
        employees=[employee(1), employee(2)],
        leads=[Lead(id=None, full_name="A", assigned_sales_id=1,
                    assignment_method=AssignmentMethod.ROUND_ROBIN)],
    )

    lead = await _manual(env).execute(1, 2)

    assert lead.assigned_sales_id == 2
    assert lead.assignment_method is AssignmentMethod.MANUAL
    assert env.log_repo.logs[0].method is AssignmentMethod.MANUAL
    assert env.counter_store.increments == 0
    assert env.employee(2).today_count == 0


@pytest.mark.asyncio
async def test_manual_assign_unknown_lead():
    env = Env(employees=[employee(1)])
    with pytest.raises(LookupError):
        await _manual(env).execute(99, 1)


@pytest.mark.asyncio
async def test_manual_assign_inactive_employee():
    env = Env(employees=[employee(1, is_active=False)], leads=[Lead(id=None, full_name="A")])
    with pytest.raises(ValueError):
        await _manual(env).execute(1, 1)
    assert env.lead_repo.leads[1].assigned_sales_id is None


@pytest.mark.asyncio
async def test_engine_does_not_override_manual_assignment():
    env = Env(employees=[employee(1), employee(2)], leads=[Lead(id=None, full_name="A")])
    await _manual(env).execute(1, 2)

    result = await env.assign_uc.execute(await env.lead_repo.get_by_id(1))

    assert result.value.already_assigned
    assert env.lead_repo.leads[1].assigned_sales_id == 2


# ─── Daily reset ─────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_daily_reset_only_touches_today_count():
    env = Env(employees=[
        employee(1, today_count=5, total_count=40, last_assigned_at=STAMP),
        employee(2, today_count=2, total_count=9),
        employee(3, today_count=7, total_count=7, is_active=False),
    ])

    reset = await ResetDailyCountsUseCase(env.counter_store).execute()

    assert reset == 2
    assert env.employee(1).today_count == 0
    assert env.employee(1).total_count == 40
    assert env.employee(1).last_assigned_at == STAMP
    assert env.employee(2).today_count == 0
    assert env.employee(2).total_count == 9
    # Inactive employees keep their counters
    assert env.employee(3).today_count == 7
