"""ManualAssignUseCase — operator assignment or reassignment of a lead."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from leadflow.application.ports.assignment_log_repo import AssignmentLogRepository
from leadflow.application.ports.employee_repo import EmployeeRepository
from leadflow.application.ports.lead_repo import LeadRepository
from leadflow.application.use_cases.assign_lead import utcnow
from leadflow.domain.entities.assignment import AssignmentLog
from leadflow.domain.entities.lead import Lead
from leadflow.domain.value_objects.enums import AssignmentMethod

logger = logging.getLogger(__name__)


class ManualAssignUseCase:
    """Explicit operator assignment. Load counters are not touched."""

    def __init__(
        self,
        lead_repo: LeadRepository,
        employee_repo: EmployeeRepository,
        log_repo: AssignmentLogRepository,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._leads = lead_repo
        self._employees = employee_repo
        self._logs = log_repo
        self._clock = clock

    async def execute(self, lead_id: int, employee_id: int) -> Lead:
        """Raises LookupError for an unknown lead, ValueError for an unusable employee."""
        employee = await self._employees.get_by_id(employee_id)
        if employee is None or not employee.is_active:
            raise ValueError(f"Sales employee {employee_id} is unknown or inactive")

        now = self._clock()
        lead = await self._leads.assign_manually(lead_id, employee_id, now)
        if lead is None:
            raise LookupError(f"Lead {lead_id} not found")

        await self._logs.save(
            AssignmentLog(
                id=None,
                lead_id=lead_id,
                sales_employee_id=employee_id,
                method=AssignmentMethod.MANUAL,
                reason="operator assignment",
                created_at=now,
            )
        )
        logger.info("Lead %s manually assigned to %s", lead_id, employee.employee_code)
        return lead
