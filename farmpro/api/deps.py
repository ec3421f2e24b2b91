from typing import AsyncIterator

from redis import asyncio as aioredis
from redis.asyncio import Redis

from farmpro.core.config import settings
from farmpro.db.uow import unit_of_work
from farmpro.interfaces.repository import IUnitOfWork


async def get_redis_client() -> Redis:
    redis = await aioredis.from_url(
        f"redis://{settings.REDIS_HOST}:{settings.REDIS_PORT}",
        password=settings.REDIS_PASSWORD or None,
        max_connections=10,
        encoding="utf8",
        decode_responses=True,
        db=0
    )
    return redis


async def get_uow() -> AsyncIterator[IUnitOfWork]:
    """One unit of work per request."""
    async with unit_of_work() as uow:
        yield uow
