from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from farmpro.core.config import settings

engine = create_async_engine(
    settings.POSTGRES_URL,
    echo=False,
    future=True,
    pool_size=settings.POOL_SIZE,
    max_overflow=settings.MAX_OVERFLOW,
    pool_pre_ping=True,
)

SessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    autoflush=False,
    expire_on_commit=False,
)


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """One session per unit of work: a request, a Celery task or a CLI command."""
    async with SessionLocal() as session:
        yield session


async def create_tables() -> None:
    import farmpro.models  # noqa: F401  register tables on the metadata

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
