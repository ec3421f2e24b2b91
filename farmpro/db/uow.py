from contextlib import asynccontextmanager
from typing import AsyncIterator

from farmpro.core.config import settings
from farmpro.db.session import session_scope
from farmpro.interfaces.repository import IUnitOfWork
from farmpro.repositories.memory import MemoryStore, MemoryUnitOfWork
from farmpro.repositories.unit_of_work import SQLModelUnitOfWork

# committed rows of the "memory" storage backend, shared by the whole process
memory_store = MemoryStore()


@asynccontextmanager
async def unit_of_work() -> AsyncIterator[IUnitOfWork]:
    """Unit of work of the configured STORAGE_BACKEND ("memory" or "postgres")."""
    if settings.STORAGE_BACKEND == "memory":
        yield MemoryUnitOfWork(memory_store)
        return

    async with session_scope() as session:
        yield SQLModelUnitOfWork(session)
