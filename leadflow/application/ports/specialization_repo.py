"""Port interface for the specialization index and product groups."""

from abc import ABC, abstractmethod

from leadflow.domain.entities.product_group import ProductGroup
from leadflow.domain.entities.specialization import Specialization


class SpecializationRepository(ABC):
    @abstractmethod
    async def add(self, specialization: Specialization) -> Specialization:
        ...

    @abstractmethod
    async def remove(self, employee_id: int, product_group_id: int) -> bool:
        ...

    @abstractmethod
    async def get_by_employee(self, employee_id: int) -> list[Specialization]:
        ...

    @abstractmethod
    async def get_by_product_groups(self, product_group_ids: list[int]) -> list[Specialization]:
        ...


class ProductGroupRepository(ABC):
    @abstractmethod
    async def save(self, group: ProductGroup) -> ProductGroup:
        ...

    @abstractmethod
    async def get_all(self) -> list[ProductGroup]:
        ...

    @abstractmethod
    async def get_ids(self) -> set[int]:
        """Return the ids of all existing product groups."""
        ...
