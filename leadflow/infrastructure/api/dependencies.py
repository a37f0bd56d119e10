"""FastAPI dependency injection — wires adapters into use cases."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from leadflow.adapters.persistence.database import get_session
from leadflow.adapters.persistence.repositories import (
    SqlAssignmentLogRepository,
    SqlCounterStore,
    SqlEmployeeRepository,
    SqlLeadRepository,
    SqlProductGroupRepository,
    SqlRuleRepository,
    SqlSpecializationRepository,
)
from leadflow.adapters.persistence.unit_of_work import SqlUnitOfWork
from leadflow.application.use_cases.assign_lead import AssignLeadUseCase
from leadflow.application.use_cases.auto_fill_rules import AutoFillRuleUseCase
from leadflow.application.use_cases.create_lead import CreateLeadUseCase
from leadflow.application.use_cases.distribute_leads import BulkDistributeUseCase
from leadflow.application.use_cases.manual_assign import ManualAssignUseCase
from leadflow.application.use_cases.reset_daily_counts import ResetDailyCountsUseCase


def get_lead_repo(session: AsyncSession = Depends(get_session)) -> SqlLeadRepository:
    return SqlLeadRepository(session)


def get_employee_repo(session: AsyncSession = Depends(get_session)) -> SqlEmployeeRepository:
    return SqlEmployeeRepository(session)


def get_rule_repo(session: AsyncSession = Depends(get_session)) -> SqlRuleRepository:
    return SqlRuleRepository(session)


def get_specialization_repo(
    session: AsyncSession = Depends(get_session),
) -> SqlSpecializationRepository:
    return SqlSpecializationRepository(session)


def get_product_group_repo(
    session: AsyncSession = Depends(get_session),
) -> SqlProductGroupRepository:
    return SqlProductGroupRepository(session)


def _build_assign_uc(session: AsyncSession) -> AssignLeadUseCase:
    return AssignLeadUseCase(
        lead_repo=SqlLeadRepository(session),
        employee_repo=SqlEmployeeRepository(session),
        rule_repo=SqlRuleRepository(session),
        product_group_repo=SqlProductGroupRepository(session),
        counter_store=SqlCounterStore(session),
        log_repo=SqlAssignmentLogRepository(session),
        uow=SqlUnitOfWork(session),
    )


def get_assign_lead_uc(session: AsyncSession = Depends(get_session)) -> AssignLeadUseCase:
    return _build_assign_uc(session)


def get_create_lead_uc(session: AsyncSession = Depends(get_session)) -> CreateLeadUseCase:
    return CreateLeadUseCase(
        lead_repo=SqlLeadRepository(session),
        employee_repo=SqlEmployeeRepository(session),
        assign_lead=_build_assign_uc(session),
    )


def get_bulk_distribute_uc(
    session: AsyncSession = Depends(get_session),
) -> BulkDistributeUseCase:
    return BulkDistributeUseCase(
        assign_lead=_build_assign_uc(session),
        lead_repo=SqlLeadRepository(session),
        uow=SqlUnitOfWork(session),
    )


def get_manual_assign_uc(session: AsyncSession = Depends(get_session)) -> ManualAssignUseCase:
    return ManualAssignUseCase(
        lead_repo=SqlLeadRepository(session),
        employee_repo=SqlEmployeeRepository(session),
        log_repo=SqlAssignmentLogRepository(session),
    )


def get_auto_fill_uc(session: AsyncSession = Depends(get_session)) -> AutoFillRuleUseCase:
    return AutoFillRuleUseCase(
        rule_repo=SqlRuleRepository(session),
        specialization_repo=SqlSpecializationRepository(session),
        employee_repo=SqlEmployeeRepository(session),
    )


def get_reset_daily_uc(session: AsyncSession = Depends(get_session)) -> ResetDailyCountsUseCase:
    return ResetDailyCountsUseCase(counter_store=SqlCounterStore(session))
