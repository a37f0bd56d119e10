"""Port interface for the sales employee directory."""

from abc import ABC, abstractmethod

from leadflow.domain.entities.sales_employee import SalesEmployee


class EmployeeRepository(ABC):
    @abstractmethod
    async def save(self, employee: SalesEmployee) -> SalesEmployee:
        ...

    @abstractmethod
    async def update(self, employee: SalesEmployee) -> SalesEmployee:
        ...

    @abstractmethod
    async def get_by_id(self, employee_id: int) -> SalesEmployee | None:
        ...

    @abstractmethod
    async def get_all(self) -> list[SalesEmployee]:
        ...

    @abstractmethod
    async def get_active(self) -> list[SalesEmployee]:
        ...
