"""Port interface for allocation rule persistence."""

from abc import ABC, abstractmethod

from leadflow.domain.entities.allocation_rule import AllocationRule


class RuleRepository(ABC):
    @abstractmethod
    async def save(self, rule: AllocationRule) -> AllocationRule:
        ...

    @abstractmethod
    async def update(self, rule: AllocationRule) -> AllocationRule:
        ...

    @abstractmethod
    async def set_assigned_sales(self, rule_id: int, sales_ids: list[int]) -> None:
        """Replace only the assigned employee set of a rule."""
        ...

    @abstractmethod
    async def delete(self, rule_id: int) -> bool:
        ...

    @abstractmethod
    async def get_by_id(self, rule_id: int) -> AllocationRule | None:
        ...

    @abstractmethod
    async def get_all(self) -> list[AllocationRule]:
        """Return all rules in creation order."""
        ...
