"""AssignLeadUseCase — match rules → fall back to round robin → balance load → write."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from leadflow.application.ports.assignment_log_repo import AssignmentLogRepository
from leadflow.application.ports.counter_store import CounterStore
from leadflow.application.ports.employee_repo import EmployeeRepository
from leadflow.application.ports.lead_repo import LeadRepository
from leadflow.application.ports.rule_repo import RuleRepository
from leadflow.application.ports.specialization_repo import ProductGroupRepository
from leadflow.application.ports.unit_of_work import UnitOfWork
from leadflow.domain.entities.assignment import Assignment, AssignmentLog
from leadflow.domain.entities.lead import Lead
from leadflow.domain.errors import (
    AssignmentError,
    AssignmentErrorCode,
    Err,
    NoEligibleAssignee,
    Ok,
    Result,
    TransientStorageError,
)
from leadflow.domain.policies.load_balancing import pick
from leadflow.domain.policies.rule_matcher import match
from leadflow.domain.value_objects.enums import AssignmentMethod

logger = logging.getLogger(__name__)

AssignmentResult = Result[Assignment, AssignmentError]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AssignLeadUseCase:
    """Assigns one unassigned lead to a sales employee.

    Never raises for expected failures: the outcome is an ``Ok(Assignment)``
    or an ``Err(AssignmentError)`` and the caller decides whether to log and
    continue (lead intake, bulk run) or to surface it.
    """

    def __init__(
        self,
        lead_repo: LeadRepository,
        employee_repo: EmployeeRepository,
        rule_repo: RuleRepository,
        product_group_repo: ProductGroupRepository,
        counter_store: CounterStore,
        log_repo: AssignmentLogRepository,
        uow: UnitOfWork,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._leads = lead_repo
        self._employees = employee_repo
        self._rules = rule_repo
        self._product_groups = product_group_repo
        self._counters = counter_store
        self._logs = log_repo
        self._uow = uow
        self._clock = clock

    async def execute(self, lead: Lead) -> AssignmentResult:
        """Assign *lead*.

        Pipeline:
        1. Already assigned → no-op success (idempotent).
        2. Rule matcher → candidates, method ``product_based``.
        3. No candidates → every active employee, method ``round_robin``.
        4. Load-balancing pick.
        5. Atomically claim the lead and bump the employee's counters.
        """
        if lead.is_assigned():
            return Ok(_existing(lead))

        try:
            async with self._uow.atomic():
                assignment = await self._assign(lead)
        except NoEligibleAssignee as e:
            logger.warning("Lead %s left unassigned: %s", lead.id, e)
            await self._record_failure(lead, AssignmentErrorCode.NO_ELIGIBLE_ASSIGNEE)
            return Err(AssignmentError(AssignmentErrorCode.NO_ELIGIBLE_ASSIGNEE, str(e)))
        except TransientStorageError as e:
            logger.error("Lead %s: storage failure during assignment: %s", lead.id, e)
            return Err(AssignmentError(AssignmentErrorCode.TRANSIENT_STORAGE, str(e)))

        if not assignment.already_assigned:
            lead.assigned_sales_id = assignment.sales_employee_id
            lead.assignment_method = assignment.method
            lead.assigned_at = assignment.assigned_at
        return Ok(assignment)

    async def _assign(self, lead: Lead) -> Assignment:
        employees = await self._employees.get_active()
        rules = await self._rules.get_all()
        known_groups = await self._product_groups.get_ids()

        by_id = {e.id: e for e in employees}
        candidate_ids = match(lead, rules, employees, known_groups)
        if candidate_ids:
            method = AssignmentMethod.PRODUCT_BASED
            candidates = [by_id[i] for i in candidate_ids]
        else:
            method = AssignmentMethod.ROUND_ROBIN
            candidates = list(employees)

        chosen = pick(candidates)
        now = self._clock()

        claimed = await self._leads.claim(lead.id, chosen.id, method, now)
        if not claimed:
            # Lost the race: someone assigned the lead after we read it
            current = await self._leads.get_by_id(lead.id)
            logger.info("Lead %s already assigned concurrently, skipping", lead.id)
            return _existing(current or lead)

        today = await self._counters.increment(chosen.id, now)
        await self._logs.save(
            AssignmentLog(
                id=None,
                lead_id=lead.id,
                sales_employee_id=chosen.id,
                method=method,
                reason=f"{method.value}: {len(candidates)} candidate(s)",
                created_at=now,
            )
        )

        logger.info(
            "Lead %s → %s (%s, today=%d)",
            lead.id, chosen.employee_code, method.value, today,
        )
        return Assignment(
            lead_id=lead.id,
            sales_employee_id=chosen.id,
            method=method,
            assigned_at=now,
        )

    async def _record_failure(self, lead: Lead, code: AssignmentErrorCode) -> None:
        try:
            async with self._uow.atomic():
                await self._logs.save(
                    AssignmentLog(
                        id=None,
                        lead_id=lead.id,
                        sales_employee_id=None,
                        method=None,
                        reason=code.value,
                        created_at=self._clock(),
                    )
                )
        except TransientStorageError:
            logger.exception("Lead %s: could not record assignment failure", lead.id)


def _existing(lead: Lead) -> Assignment:
    return Assignment(
        lead_id=lead.id,
        sales_employee_id=lead.assigned_sales_id,
        method=lead.assignment_method or AssignmentMethod.MANUAL,
        assigned_at=lead.assigned_at,
        already_assigned=True,
    )
