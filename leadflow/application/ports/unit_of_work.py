"""Port interface for transactional boundaries."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager


class UnitOfWork(ABC):
    @abstractmethod
    def atomic(self) -> AbstractAsyncContextManager[None]:
        """Scope in which all writes commit together or roll back together.

        Nested inside an outer transaction this behaves as a savepoint, so a
        failure only discards the writes made within the scope.
        """
        ...

    @abstractmethod
    async def commit(self) -> None:
        """Commit the outer transaction, releasing the row locks it holds."""
        ...

    @abstractmethod
    async def rollback(self) -> None:
        """Discard uncommitted writes of the outer transaction."""
        ...
