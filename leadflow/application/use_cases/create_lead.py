"""CreateLeadUseCase — lead intake with best-effort auto-assignment."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from leadflow.application.ports.employee_repo import EmployeeRepository
from leadflow.application.ports.lead_repo import LeadRepository
from leadflow.application.use_cases.assign_lead import AssignLeadUseCase, utcnow
from leadflow.domain.entities.assignment import Assignment
from leadflow.domain.entities.lead import Lead
from leadflow.domain.errors import Err
from leadflow.domain.value_objects.enums import AssignmentMethod, LeadStatus

logger = logging.getLogger(__name__)


@dataclass
class LeadCreationResult:
    lead: Lead
    assignment: Assignment | None
    reason: str | None = None


class CreateLeadUseCase:
    def __init__(
        self,
        lead_repo: LeadRepository,
        employee_repo: EmployeeRepository,
        assign_lead: AssignLeadUseCase,
    ):
        self._leads = lead_repo
        self._employees = employee_repo
        self._assign = assign_lead

    async def execute(self, lead: Lead) -> LeadCreationResult:
        """Persist a new lead, then try to assign it.

        Assignment is optional: a failure is logged and reported in the
        result, the lead is still created (and stays unassigned).

        Raises:
            ValueError: if a preset ``assigned_sales_id`` is unknown or inactive.
        """
        lead.status = LeadStatus.NEW
        if lead.assigned_sales_id is not None:
            employee = await self._employees.get_by_id(lead.assigned_sales_id)
            if employee is None or not employee.is_active:
                raise ValueError(
                    f"Sales employee {lead.assigned_sales_id} is unknown or inactive"
                )
            lead.assignment_method = AssignmentMethod.MANUAL
            lead.assigned_at = lead.assigned_at or utcnow()
        lead = await self._leads.save(lead)
        logger.info("Lead %s created", lead.id)

        result = await self._assign.execute(lead)
        if isinstance(result, Err):
            logger.warning(
                "Lead %s created without assignment (%s): %s",
                lead.id, result.error.code.value, result.error.message,
            )
            return LeadCreationResult(lead=lead, assignment=None, reason=result.error.code.value)

        return LeadCreationResult(lead=lead, assignment=result.value)
