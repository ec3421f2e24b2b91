"""
Celery task resetting boosts that ran out.
"""

import asyncio
from datetime import datetime
from typing import Dict

from farmpro.core.config import settings
from farmpro.db.session import engine
from farmpro.db.uow import unit_of_work
from farmpro.services.boosts import BoostService
from farmpro.utils.clock import utcnow
from farmpro.utils.logger import get_logger
from .celery_app import celery_app

logger = get_logger(__name__)


@celery_app.task(
    bind=True,
    name="farmpro.tasks.boost_expiry.expire_boosts_task",
    max_retries=3,
    default_retry_delay=60,
)
def expire_boosts_task(self) -> Dict:
    """
    Сбросить множитель и время окончания у аккаунтов с истёкшим бустом.

    Returns:
        Dict: количество обработанных аккаунтов и время запуска
    """
    task_id = self.request.id
    logger.info(f"Starting boost expiry task {task_id}")

    try:
        result = asyncio.run(_expire_boosts_async(utcnow()))
    except Exception as exc:
        logger.error(f"Boost expiry task {task_id} failed: {exc}")
        raise self.retry(exc=exc)

    logger.info(f"Boost expiry task {task_id} completed: {result}")
    return result


async def _expire_boosts_async(now: datetime) -> Dict:
    async with unit_of_work() as uow:
        expired = await BoostService(uow).expire_boosts(now)

    if settings.STORAGE_BACKEND != "memory":
        # every asyncio.run gets a fresh loop, pooled connections cannot be reused
        await engine.dispose()

    return {"run_at": now.isoformat(), "expired_count": expired}
