"""
Celery application configuration for background tasks.
"""

from celery import Celery
from celery.schedules import crontab

from farmpro.core.config import settings
from farmpro.utils.logger import get_logger

logger = get_logger(__name__)

# Создаем экземпляр Celery
celery_app = Celery(
    "farmpro_backend",
    broker=f"redis://:{settings.REDIS_PASSWORD}@{settings.REDIS_HOST or 'localhost'}:{settings.REDIS_PORT}/0",
    backend=f"redis://:{settings.REDIS_PASSWORD}@{settings.REDIS_HOST or 'localhost'}:{settings.REDIS_PORT}/1",
    include=["farmpro.tasks.boost_expiry"]
)

# Конфигурация Celery
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,

    # Настройки воркера
    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=1000,

    # Настройки планировщика (Beat)
    beat_schedule={
        "expire-boosts-hourly": {
            "task": "farmpro.tasks.boost_expiry.expire_boosts_task",
            "schedule": crontab(minute=0, hour="*"),  # Каждый час
            "options": {"queue": "maintenance"}
        },
    },

    task_routes={
        "farmpro.tasks.boost_expiry.expire_boosts_task": {"queue": "maintenance"},
    },

    task_acks_late=True,
    task_reject_on_worker_lost=True,

    worker_log_format="[%(asctime)s: %(levelname)s/%(processName)s] %(message)s",
    worker_task_log_format="[%(asctime)s: %(levelname)s/%(processName)s][%(task_name)s(%(task_id)s)] %(message)s",
)

logger.info("Celery application configured successfully")
