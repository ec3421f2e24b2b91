import os

# до импорта farmpro: без файловых логов, без Redis/Sentry, хранилище в памяти
os.environ["LOG_TO_FILE"] = "false"
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["REDIS_HOST"] = ""
os.environ["SENTRY_DSN"] = ""
os.environ["TELEGRAM_BOT_TOKEN"] = ""

from decimal import Decimal

import pytest

from farmpro.repositories.memory import MemoryStore, MemoryUnitOfWork
from farmpro.schemas.account import SAccountCreate
from farmpro.services.accounts import AccountService


@pytest.fixture
def store():
    """Чистое хранилище на каждый тест."""
    return MemoryStore()


@pytest.fixture
def uow(store):
    return MemoryUnitOfWork(store)


@pytest.fixture
def make_account(store):
    """Фабрика аккаунтов: каждый создаётся в своей единице работы, как при отдельном запросе."""

    async def _make(telegram_id: str = "1001", username: str = None, referrer_id: int = None, **fields):
        account = await AccountService(MemoryUnitOfWork(store)).create_account(
            SAccountCreate(telegram_id=telegram_id, username=username, referrer_id=referrer_id)
        )
        if fields:
            # прямое изменение полей только для подготовки состояния в тестах
            row = store.tables["accounts"][account.id]
            for name, value in fields.items():
                setattr(row, name, value)
        return account

    return _make


@pytest.fixture
def read_account(store):
    """Последнее закоммиченное состояние аккаунта."""

    async def _read(account_id: int):
        return await MemoryUnitOfWork(store).accounts.get(id=account_id)

    return _read


@pytest.fixture
def journal_total(store):
    async def _total(account_id: int) -> Decimal:
        return await MemoryUnitOfWork(store).transactions.sum_for_account(account_id)

    return _total
