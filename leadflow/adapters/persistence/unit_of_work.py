"""SQLAlchemy unit of work — savepoint-scoped atomic blocks."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from leadflow.application.ports.unit_of_work import UnitOfWork
from leadflow.domain.errors import TransientStorageError


class SqlUnitOfWork(UnitOfWork):
    def __init__(self, session: AsyncSession):
        self._s = session

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        """Run the block in a SAVEPOINT; database errors surface as TransientStorageError."""
        try:
            async with self._s.begin_nested():
                yield
        except SQLAlchemyError as e:
            raise TransientStorageError(str(e)) from e

    async def commit(self) -> None:
        try:
            await self._s.commit()
        except SQLAlchemyError as e:
            raise TransientStorageError(str(e)) from e

    async def rollback(self) -> None:
        await self._s.rollback()
