"""SQLAlchemy repository implementations."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from leadflow.adapters.persistence.models import (
    AllocationRuleModel,
    AssignmentLogModel,
    LeadModel,
    ProductGroupModel,
    SalesEmployeeModel,
    SpecializationModel,
)
from leadflow.application.ports.assignment_log_repo import AssignmentLogRepository
from leadflow.application.ports.counter_store import CounterStore
from leadflow.application.ports.employee_repo import EmployeeRepository
from leadflow.application.ports.lead_repo import LeadRepository
from leadflow.application.ports.rule_repo import RuleRepository
from leadflow.application.ports.specialization_repo import (
    ProductGroupRepository,
    SpecializationRepository,
)
from leadflow.domain.entities.allocation_rule import AllocationRule
from leadflow.domain.entities.assignment import AssignmentLog
from leadflow.domain.entities.lead import Lead
from leadflow.domain.entities.product_group import ProductGroup
from leadflow.domain.entities.sales_employee import SalesEmployee
from leadflow.domain.entities.specialization import Specialization
from leadflow.domain.errors import TransientStorageError
from leadflow.domain.value_objects.enums import (
    AssignmentMethod,
    CustomerGroup,
    LeadStatus,
)

logger = logging.getLogger(__name__)

# ─── Mappers ─────────────────────────────────────────────────────────


def _employee_to_domain(m: SalesEmployeeModel) -> SalesEmployee:
    return SalesEmployee(
        id=m.id,
        employee_code=m.employee_code,
        full_name=m.full_name,
        email=m.email,
        phone=m.phone,
        is_active=m.is_active,
        round_robin_order=m.round_robin_order,
        today_count=m.daily_lead_count,
        total_count=m.total_lead_count,
        last_assigned_at=m.last_assigned_at,
    )


def _product_group_to_domain(m: ProductGroupModel) -> ProductGroup:
    return ProductGroup(id=m.id, code=m.code, name=m.name, is_active=m.is_active)


def _specialization_to_domain(m: SpecializationModel) -> Specialization:
    return Specialization(
        sales_employee_id=m.sales_employee_id,
        product_group_id=m.product_group_id,
        is_primary=m.is_primary,
    )


def _rule_to_domain(m: AllocationRuleModel) -> AllocationRule:
    customer_group = None
    is_active = m.is_active
    if m.customer_group:
        try:
            customer_group = CustomerGroup(m.customer_group)
        except ValueError:
            # Unknown tag: the rule can never match, keep it out of matching
            logger.warning(
                "Rule %s has unknown customer group %r, treating as inactive",
                m.rule_code, m.customer_group,
            )
            is_active = False
    return AllocationRule(
        id=m.id,
        rule_code=m.rule_code,
        customer_group=customer_group,
        product_group_ids=list(m.product_group_ids or []),
        assigned_sales_ids=list(m.assigned_sales_ids or []),
        is_active=is_active,
        created_at=m.created_at,
    )


def _lead_to_domain(m: LeadModel) -> Lead:
    try:
        status = LeadStatus(m.status)
    except ValueError:
        logger.warning("Lead %s has unknown status %r, reading it as new", m.id, m.status)
        status = LeadStatus.NEW

    customer_group = None
    if m.customer_group:
        try:
            customer_group = CustomerGroup(m.customer_group)
        except ValueError:
            # Legacy free-text label: the lead only matches rules without a customer group
            logger.warning(
                "Lead %s has unknown customer group %r, ignoring it", m.id, m.customer_group
            )

    return Lead(
        id=m.id,
        full_name=m.full_name,
        phone=m.phone,
        email=m.email,
        status=status,
        customer_group=customer_group,
        interested_product_group_id=m.interested_product_group_id,
        assigned_sales_id=m.assigned_sales_id,
        assignment_method=AssignmentMethod(m.assignment_method) if m.assignment_method else None,
        assigned_at=m.assigned_at,
        created_at=m.created_at,
    )


def _log_to_domain(m: AssignmentLogModel) -> AssignmentLog:
    return AssignmentLog(
        id=m.id,
        lead_id=m.lead_id,
        sales_employee_id=m.sales_employee_id,
        method=AssignmentMethod(m.method) if m.method else None,
        reason=m.reason,
        created_at=m.created_at,
    )


# ─── Repositories ────────────────────────────────────────────────────


class SqlEmployeeRepository(EmployeeRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, employee: SalesEmployee) -> SalesEmployee:
        m = SalesEmployeeModel(
            employee_code=employee.employee_code,
            full_name=employee.full_name,
            email=employee.email,
            phone=employee.phone,
            is_active=employee.is_active,
            round_robin_order=employee.round_robin_order,
            daily_lead_count=employee.today_count,
            total_lead_count=employee.total_count,
            last_assigned_at=employee.last_assigned_at,
        )
        self._s.add(m)
        await self._s.flush()
        employee.id = m.id
        return employee

    async def update(self, employee: SalesEmployee) -> SalesEmployee:
        # Counters are owned by SqlCounterStore and deliberately not written here
        await self._s.execute(
            update(SalesEmployeeModel)
            .where(SalesEmployeeModel.id == employee.id)
            .values(
                full_name=employee.full_name,
                email=employee.email,
                phone=employee.phone,
                is_active=employee.is_active,
                round_robin_order=employee.round_robin_order,
            )
        )
        await self._s.flush()
        return employee

    async def get_by_id(self, employee_id: int) -> SalesEmployee | None:
        m = await self._s.get(SalesEmployeeModel, employee_id)
        return _employee_to_domain(m) if m else None

    async def get_all(self) -> list[SalesEmployee]:
        result = await self._s.execute(
            select(SalesEmployeeModel).order_by(SalesEmployeeModel.id)
        )
        return [_employee_to_domain(m) for m in result.scalars()]

    async def get_active(self) -> list[SalesEmployee]:
        result = await self._s.execute(
            select(SalesEmployeeModel)
            .where(SalesEmployeeModel.is_active.is_(True))
            .order_by(SalesEmployeeModel.id)
            .execution_options(populate_existing=True)
        )
        return [_employee_to_domain(m) for m in result.scalars()]


class SqlCounterStore(CounterStore):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def increment(self, employee_id: int, assigned_at: datetime) -> int:
        result = await self._s.execute(
            update(SalesEmployeeModel)
            .where(SalesEmployeeModel.id == employee_id)
            .values(
                daily_lead_count=SalesEmployeeModel.daily_lead_count + 1,
                total_lead_count=SalesEmployeeModel.total_lead_count + 1,
                last_assigned_at=assigned_at,
            )
            .returning(SalesEmployeeModel.daily_lead_count)
            .execution_options(synchronize_session=False)
        )
        new_value = result.scalar_one_or_none()
        if new_value is None:
            raise TransientStorageError(f"Sales employee {employee_id} disappeared")
        return new_value

    async def reset_daily(self) -> int:
        result = await self._s.execute(
            update(SalesEmployeeModel)
            .where(SalesEmployeeModel.is_active.is_(True))
            .values(daily_lead_count=0)
            .execution_options(synchronize_session=False)
        )
        await self._s.flush()
        return result.rowcount


class SqlProductGroupRepository(ProductGroupRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, group: ProductGroup) -> ProductGroup:
        m = ProductGroupModel(code=group.code, name=group.name, is_active=group.is_active)
        self._s.add(m)
        await self._s.flush()
        group.id = m.id
        return group

    async def get_all(self) -> list[ProductGroup]:
        result = await self._s.execute(select(ProductGroupModel).order_by(ProductGroupModel.id))
        return [_product_group_to_domain(m) for m in result.scalars()]

    async def get_ids(self) -> set[int]:
        result = await self._s.execute(select(ProductGroupModel.id))
        return set(result.scalars())


class SqlSpecializationRepository(SpecializationRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def add(self, specialization: Specialization) -> Specialization:
        m = SpecializationModel(
            sales_employee_id=specialization.sales_employee_id,
            product_group_id=specialization.product_group_id,
            is_primary=specialization.is_primary,
        )
        await self._s.merge(m)
        await self._s.flush()
        return specialization

    async def remove(self, employee_id: int, product_group_id: int) -> bool:
        result = await self._s.execute(
            delete(SpecializationModel).where(
                SpecializationModel.sales_employee_id == employee_id,
                SpecializationModel.product_group_id == product_group_id,
            )
        )
        await self._s.flush()
        return result.rowcount > 0

    async def get_by_employee(self, employee_id: int) -> list[Specialization]:
        result = await self._s.execute(
            select(SpecializationModel)
            .where(SpecializationModel.sales_employee_id == employee_id)
            .order_by(SpecializationModel.product_group_id)
        )
        return [_specialization_to_domain(m) for m in result.scalars()]

    async def get_by_product_groups(self, product_group_ids: list[int]) -> list[Specialization]:
        if not product_group_ids:
            return []
        result = await self._s.execute(
            select(SpecializationModel)
            .where(SpecializationModel.product_group_id.in_(product_group_ids))
            .order_by(SpecializationModel.sales_employee_id)
        )
        return [_specialization_to_domain(m) for m in result.scalars()]


class SqlRuleRepository(RuleRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, rule: AllocationRule) -> AllocationRule:
        m = AllocationRuleModel(
            rule_code=rule.rule_code,
            customer_group=rule.customer_group.value if rule.customer_group else None,
            product_group_ids=list(rule.product_group_ids),
            assigned_sales_ids=list(rule.assigned_sales_ids),
            is_active=rule.is_active,
        )
        self._s.add(m)
        await self._s.flush()
        await self._s.refresh(m)
        rule.id = m.id
        rule.created_at = m.created_at
        return rule

    async def update(self, rule: AllocationRule) -> AllocationRule:
        await self._s.execute(
            update(AllocationRuleModel)
            .where(AllocationRuleModel.id == rule.id)
            .values(
                rule_code=rule.rule_code,
                customer_group=rule.customer_group.value if rule.customer_group else None,
                product_group_ids=list(rule.product_group_ids),
                assigned_sales_ids=list(rule.assigned_sales_ids),
                is_active=rule.is_active,
            )
        )
        await self._s.flush()
        return rule

    async def set_assigned_sales(self, rule_id: int, sales_ids: list[int]) -> None:
        await self._s.execute(
            update(AllocationRuleModel)
            .where(AllocationRuleModel.id == rule_id)
            .values(assigned_sales_ids=list(sales_ids))
        )
        await self._s.flush()

    async def delete(self, rule_id: int) -> bool:
        result = await self._s.execute(
            delete(AllocationRuleModel).where(AllocationRuleModel.id == rule_id)
        )
        await self._s.flush()
        return result.rowcount > 0

    async def get_by_id(self, rule_id: int) -> AllocationRule | None:
        m = await self._s.get(AllocationRuleModel, rule_id, populate_existing=True)
        return _rule_to_domain(m) if m else None

    async def get_all(self) -> list[AllocationRule]:
        result = await self._s.execute(
            select(AllocationRuleModel)
            .order_by(AllocationRuleModel.created_at, AllocationRuleModel.id)
            .execution_options(populate_existing=True)
        )
        return [_rule_to_domain(m) for m in result.scalars()]


class SqlLeadRepository(LeadRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, lead: Lead) -> Lead:
        m = LeadModel(
            full_name=lead.full_name,
            phone=lead.phone,
            email=lead.email,
            status=lead.status.value,
            customer_group=lead.customer_group.value if lead.customer_group else None,
            interested_product_group_id=lead.interested_product_group_id,
            assigned_sales_id=lead.assigned_sales_id,
            assignment_method=lead.assignment_method.value if lead.assignment_method else None,
            assigned_at=lead.assigned_at,
        )
        self._s.add(m)
        await self._s.flush()
        await self._s.refresh(m)
        lead.id = m.id
        lead.created_at = m.created_at
        return lead

    async def get_by_id(self, lead_id: int) -> Lead | None:
        m = await self._s.get(LeadModel, lead_id, populate_existing=True)
        return _lead_to_domain(m) if m else None

    async def search(
        self,
        status: LeadStatus | None = None,
        assigned_sales_id: int | None = None,
        unassigned: bool = False,
        limit: int | None = None,
        offset: int = 0,
    ) -> tuple[list[Lead], int]:
        conditions = []
        if status is not None:
            conditions.append(LeadModel.status == status.value)
        if assigned_sales_id is not None:
            conditions.append(LeadModel.assigned_sales_id == assigned_sales_id)
        if unassigned:
            conditions.append(LeadModel.assigned_sales_id.is_(None))

        total = await self._s.scalar(
            select(func.count()).select_from(LeadModel).where(*conditions)
        )
        query = (
            select(LeadModel)
            .where(*conditions)
            .order_by(LeadModel.created_at.desc(), LeadModel.id.desc())
            .offset(offset)
        )
        if limit is not None:
            query = query.limit(limit)
        result = await self._s.execute(query)
        return [_lead_to_domain(m) for m in result.scalars()], total or 0

    async def get_unassigned(self) -> list[Lead]:
        result = await self._s.execute(
            select(LeadModel)
            .where(LeadModel.assigned_sales_id.is_(None))
            .order_by(LeadModel.created_at, LeadModel.id)
        )
        return [_lead_to_domain(m) for m in result.scalars()]

    async def claim(
        self,
        lead_id: int,
        employee_id: int,
        method: AssignmentMethod,
        assigned_at: datetime,
    ) -> bool:
        # The IS NULL guard makes the write a compare-and-set: under concurrent
        # claims the row lock serializes them and the loser matches zero rows.
        result = await self._s.execute(
            update(LeadModel)
            .where(LeadModel.id == lead_id, LeadModel.assigned_sales_id.is_(None))
            .values(
                assigned_sales_id=employee_id,
                assignment_method=method.value,
                assigned_at=assigned_at,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def assign_manually(
        self, lead_id: int, employee_id: int, assigned_at: datetime
    ) -> Lead | None:
        result = await self._s.execute(
            update(LeadModel)
            .where(LeadModel.id == lead_id)
            .values(
                assigned_sales_id=employee_id,
                assignment_method=AssignmentMethod.MANUAL.value,
                assigned_at=assigned_at,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            return None
        await self._s.flush()
        return await self.get_by_id(lead_id)


class SqlAssignmentLogRepository(AssignmentLogRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, log: AssignmentLog) -> AssignmentLog:
        m = AssignmentLogModel(
            lead_id=log.lead_id,
            sales_employee_id=log.sales_employee_id,
            method=log.method.value if log.method else None,
            reason=log.reason,
        )
        if log.created_at is not None:
            m.created_at = log.created_at
        self._s.add(m)
        await self._s.flush()
        log.id = m.id
        return log

    async def get_by_lead(self, lead_id: int) -> list[AssignmentLog]:
        result = await self._s.execute(
            select(AssignmentLogModel)
            .where(AssignmentLogModel.lead_id == lead_id)
            .order_by(AssignmentLogModel.id)
        )
        return [_log_to_domain(m) for m in result.scalars()]
