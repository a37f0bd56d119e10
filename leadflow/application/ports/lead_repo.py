"""Port interface for lead persistence."""

from abc import ABC, abstractmethod
from datetime import datetime

from leadflow.domain.entities.lead import Lead
from leadflow.domain.value_objects.enums import AssignmentMethod, LeadStatus


class LeadRepository(ABC):
    @abstractmethod
    async def save(self, lead: Lead) -> Lead:
        ...

    @abstractmethod
    async def get_by_id(self, lead_id: int) -> Lead | None:
        ...

    @abstractmethod
    async def search(
        self,
        status: LeadStatus | None = None,
        assigned_sales_id: int | None = None,
        unassigned: bool = False,
        limit: int | None = None,
        offset: int = 0,
    ) -> tuple[list[Lead], int]:
        """Filtered page of leads, newest first, plus the total matching count."""
        ...

    @abstractmethod
    async def get_unassigned(self) -> list[Lead]:
        """Return leads with no assigned employee, ordered by (created_at, id)."""
        ...

    @abstractmethod
    async def claim(
        self,
        lead_id: int,
        employee_id: int,
        method: AssignmentMethod,
        assigned_at: datetime,
    ) -> bool:
        """Compare-and-set assignment of an unassigned lead.

        Writes only if ``assigned_sales_id IS NULL``. Returns False when
        another writer got there first.
        """
        ...

    @abstractmethod
    async def assign_manually(
        self, lead_id: int, employee_id: int, assigned_at: datetime
    ) -> Lead | None:
        """Operator assignment; overwrites any previous assignment."""
        ...
