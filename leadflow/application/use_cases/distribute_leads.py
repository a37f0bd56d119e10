"""BulkDistributeUseCase — assign every currently unassigned lead in one run."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from leadflow.application.ports.lead_repo import LeadRepository
from leadflow.application.ports.unit_of_work import UnitOfWork
from leadflow.application.use_cases.assign_lead import AssignLeadUseCase
from leadflow.domain.errors import AssignmentErrorCode, Err
from leadflow.domain.value_objects.enums import AssignmentMethod

logger = logging.getLogger(__name__)


@dataclass
class DistributionReport:
    """Aggregate outcome of one bulk run."""

    total_leads: int = 0
    processed_count: int = 0
    assigned_count: int = 0
    assigned_by_rule: int = 0
    assigned_by_round_robin: int = 0
    failed_count: int = 0
    skipped_count: int = 0
    timed_out: bool = False

    def to_dict(self) -> dict:
        return {
            "totalLeads": self.total_leads,
            "processedCount": self.processed_count,
            "assignedCount": self.assigned_count,
            "assignedByRule": self.assigned_by_rule,
            "assignedByRoundRobin": self.assigned_by_round_robin,
            "failedCount": self.failed_count,
            "skippedCount": self.skipped_count,
            "timedOut": self.timed_out,
        }


class BulkDistributeUseCase:
    """Process a snapshot of unassigned leads sequentially.

    Leads created after the snapshot is taken belong to the next run. Each
    lead is committed on its own, so a run never holds employee or lead row
    locks longer than one assignment.
    """

    def __init__(
        self,
        assign_lead: AssignLeadUseCase,
        lead_repo: LeadRepository,
        uow: UnitOfWork,
        monotonic: Callable[[], float] = time.monotonic,
    ):
        self._assign = assign_lead
        self._leads = lead_repo
        self._uow = uow
        self._monotonic = monotonic

    async def execute(self, deadline_seconds: float | None = None) -> DistributionReport:
        """Distribute all unassigned leads.

        Outcomes per lead:
          - assigned → counted by method (rule vs round robin)
          - no eligible assignee → ``failed_count``, lead stays unassigned
          - storage or unexpected error → ``skipped_count``, run continues

        When *deadline_seconds* elapses the loop stops and the partial
        report is returned with ``timed_out = True``.

        Raises whatever the snapshot fetch raises: without a snapshot there
        is no run.
        """
        leads = await self._leads.get_unassigned()
        report = DistributionReport(total_leads=len(leads))
        logger.info("Bulk distribution: %d unassigned leads", len(leads))

        started = self._monotonic()
        for lead in leads:
            if deadline_seconds is not None and self._monotonic() - started >= deadline_seconds:
                report.timed_out = True
                logger.warning(
                    "Bulk distribution hit %.1fs deadline after %d/%d leads",
                    deadline_seconds, report.processed_count, report.total_leads,
                )
                break

            report.processed_count += 1
            try:
                result = await self._assign.execute(lead)
                await self._uow.commit()
            except Exception:
                logger.exception("Lead %s: unexpected error, skipping", lead.id)
                await self._uow.rollback()
                report.skipped_count += 1
                continue

            if isinstance(result, Err):
                if result.error.code == AssignmentErrorCode.NO_ELIGIBLE_ASSIGNEE:
                    report.failed_count += 1
                else:
                    report.skipped_count += 1
                continue

            assignment = result.value
            if assignment.already_assigned:
                report.skipped_count += 1
                continue

            report.assigned_count += 1
            if assignment.method == AssignmentMethod.PRODUCT_BASED:
                report.assigned_by_rule += 1
            else:
                report.assigned_by_round_robin += 1

        logger.info(
            "Bulk distribution complete: %d/%d assigned (rule=%d, rr=%d, failed=%d, skipped=%d)",
            report.assigned_count, report.total_leads, report.assigned_by_rule,
            report.assigned_by_round_robin, report.failed_count, report.skipped_count,
        )
        return report
