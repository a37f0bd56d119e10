"""Port interface for the assignment audit log."""

from abc import ABC, abstractmethod

from leadflow.domain.entities.assignment import AssignmentLog


class AssignmentLogRepository(ABC):
    @abstractmethod
    async def save(self, log: AssignmentLog) -> AssignmentLog:
        ...

    @abstractmethod
    async def get_by_lead(self, lead_id: int) -> list[AssignmentLog]:
        ...
