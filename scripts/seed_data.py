#!/usr/bin/env python3
"""
Скрипт для заполнения базы демонстрационными данными.
Запуск: python scripts/seed_data.py --accounts 30

Все изменения балансов идут через сервисы, поэтому журнал транзакций
остаётся согласованным с балансами.
"""

import argparse
import asyncio
import os
import random
import sys
from typing import List

# Добавляем корень проекта в PYTHONPATH
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from farmpro.core.config import settings
from farmpro.core.exceptions import BaseAppException
from farmpro.db.session import create_tables
from farmpro.db.uow import unit_of_work
from farmpro.models import Account
from farmpro.services.accounts import AccountService
from farmpro.services.boosts import BoostService
from farmpro.services.seed import seed_defaults
from farmpro.services.task_registry import TaskRegistryService
from farmpro.services.wallet import WalletService
from farmpro.utils.logger import get_logger, init_logger

logger = get_logger(__name__)

USERNAMES = [
    "alex_dev", "mike_coder", "anna_tech", "dmitry_ai", "maria_web", "sergey_data",
    "elena_cloud", "andrey_ml", "olga_qa", "vladimir_ops", "artem_frontend",
    "ilya_backend", "max_fullstack", "nikita_mobile", "daniel_devops", "egor_ui",
]


class DemoSeeder:
    def __init__(self, seed: int = 42):
        self.random = random.Random(seed)
        self.accounts: List[Account] = []

    async def seed_accounts(self, count: int):
        """Аккаунты с реферальными цепочками: каждый может быть приглашён одним из предыдущих."""
        logger.info(f"Создание {count} аккаунтов...")
        for i in range(count):
            referrer = self.random.choice(self.accounts) if self.accounts and self.random.random() < 0.7 else None
            async with unit_of_work() as uow:
                account, created = await AccountService(uow).get_or_create(
                    telegram_id=str(100000000 + i),
                    username=f"{self.random.choice(USERNAMES)}_{i}",
                    referrer_id=referrer.id if referrer else None,
                )
            if created:
                self.accounts.append(account)

    async def seed_activity(self):
        """Задания, депозиты, выводы и бусты для части аккаунтов."""
        for account in self.accounts:
            try:
                async with unit_of_work() as uow:
                    tasks = await TaskRegistryService(uow).list_active()
                    for task in self.random.sample(tasks, k=self.random.randint(0, len(tasks))):
                        await TaskRegistryService(uow).complete(account.id, task.id)

                    if self.random.random() < 0.5:
                        wallet = WalletService(uow)
                        await wallet.deposit(account.id, self.random.choice(["5", "10", "25", "50"]))
                        if self.random.random() < 0.5:
                            await wallet.withdraw(account.id, "12")

                    boosts = await BoostService(uow).list_active()
                    if boosts and self.random.random() < 0.3:
                        await BoostService(uow).purchase(account.id, self.random.choice(boosts).id)
            except BaseAppException as e:
                logger.warning(f"account={account.id}: {e.detail}")

    async def run(self, count: int):
        if settings.STORAGE_BACKEND != "memory":
            await create_tables()
        async with unit_of_work() as uow:
            await seed_defaults(uow)
        await self.seed_accounts(count)
        await self.seed_activity()
        logger.success(f"Готово: {len(self.accounts)} аккаунтов")


def main():
    parser = argparse.ArgumentParser(description="Seed demo data")
    parser.add_argument("--accounts", type=int, default=30)
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args()

    init_logger()
    asyncio.run(DemoSeeder(seed=args.seed).run(args.accounts))


if __name__ == "__main__":
    main()
