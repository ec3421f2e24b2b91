"""
Начальные данные: каталог заданий, бустов и настройки по умолчанию.

Повторный запуск ничего не дублирует: задания и бусты сравниваются по
названию, настройки по ключу.
"""

from decimal import Decimal
from typing import Dict

from farmpro.interfaces.repository import IUnitOfWork
from farmpro.models import Boost, Task
from farmpro.services.settings_store import SettingsService
from farmpro.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_TASKS = [
    {
        "title": "Follow our Telegram",
        "description": "Join our official Telegram channel for updates",
        "reward": Decimal("50.00"),
        "category": "telegram",
        "url": "https://t.me/farmingpro_official",
        "icon": "MessageCircle",
    },
    {
        "title": "Follow Instagram",
        "description": "Follow our Instagram page",
        "reward": Decimal("30.00"),
        "category": "instagram",
        "url": "https://instagram.com/farmingpro",
        "icon": "Instagram",
    },
    {
        "title": "Subscribe YouTube",
        "description": "Subscribe to our YouTube channel",
        "reward": Decimal("75.00"),
        "category": "youtube",
        "url": "https://youtube.com/@farmingpro",
        "icon": "Youtube",
    },
]

DEFAULT_BOOSTS = [
    {
        "name": "Speed Boost",
        "description": "Double your farming speed for 24 hours",
        "multiplier": Decimal("2.00"),
        "duration_hours": 24,
        "price": Decimal("100.00"),
    },
    {
        "name": "Mega Boost",
        "description": "Triple your farming speed for 12 hours",
        "multiplier": Decimal("3.00"),
        "duration_hours": 12,
        "price": Decimal("200.00"),
    },
    {
        "name": "Ultra Boost",
        "description": "5x farming speed for 6 hours",
        "multiplier": Decimal("5.00"),
        "duration_hours": 6,
        "price": Decimal("300.00"),
    },
]


async def seed_defaults(uow: IUnitOfWork) -> Dict[str, int]:
    """Вставить недостающие задания, бусты и настройки; вернуть количество созданных."""
    created = {"tasks": 0, "boosts": 0, "settings": 0}

    async with uow:
        for data in DEFAULT_TASKS:
            if await uow.tasks.first(title=data["title"]) is None:
                await uow.tasks.add(Task(**data))
                created["tasks"] += 1

        for data in DEFAULT_BOOSTS:
            if await uow.boosts.first(name=data["name"]) is None:
                await uow.boosts.add(Boost(**data))
                created["boosts"] += 1

        await uow.commit()

    created["settings"] = await SettingsService(uow).seed_defaults()
    logger.info(f"Seeded defaults: {created}")
    return created
