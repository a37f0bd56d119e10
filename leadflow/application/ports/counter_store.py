"""Port interface for per-employee load counters."""

from abc import ABC, abstractmethod
from datetime import datetime


class CounterStore(ABC):
    @abstractmethod
    async def increment(self, employee_id: int, assigned_at: datetime) -> int:
        """Atomically bump today_count and total_count, stamp last_assigned_at.

        Returns the NEW today_count. Must be a single atomic update
        (``SET today_count = today_count + 1``), never read-modify-write.
        """
        ...

    @abstractmethod
    async def reset_daily(self) -> int:
        """Zero today_count for every active employee. Returns the number of rows touched.

        total_count and last_assigned_at are left as they are.
        """
        ...
