"""
Те же сервисы поверх SQL-хранилища (SQLite через aiosqlite вместо PostgreSQL).
"""

from datetime import datetime, timedelta
from decimal import Decimal
from unittest.mock import patch

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

import farmpro.models  # noqa: F401
from farmpro.core.exceptions import DuplicateObjectException, InsufficientBalanceException
from farmpro.models import TransactionStatus
from farmpro.repositories.unit_of_work import SQLModelUnitOfWork
from farmpro.schemas.account import SAccountCreate
from farmpro.schemas.boost import SBoostCreate
from farmpro.services.accounts import AccountService
from farmpro.services.admin import AdminService
from farmpro.services.boosts import BoostService
from farmpro.services.farming import FarmingService
from farmpro.services.wallet import WalletService

T0 = datetime(2024, 1, 1, 12, 0, 0)


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'farmpro.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
def run(session_factory):
    """Выполнить операцию в отдельной сессии, как отдельный запрос."""

    async def _run(operation):
        async with session_factory() as session:
            return await operation(SQLModelUnitOfWork(session))

    return _run


def create(telegram_id, referrer_id=None):
    return lambda uow: AccountService(uow).create_account(
        SAccountCreate(telegram_id=telegram_id, referrer_id=referrer_id)
    )


class TestSqlStorage:
    @pytest.mark.asyncio
    async def test_account_with_referral_chain(self, run):
        a = await run(create("1"))
        b = await run(create("2", a.id))
        c = await run(create("3", b.id))

        edges = await run(lambda uow: uow.referrals.f(referred_id=c.id))
        assert {(e.referrer_id, e.level) for e in edges} == {(b.id, 1), (a.id, 2)}

        stats = await run(lambda uow: uow.referrals.count_by_level(a.id))
        assert stats == {1: 1, 2: 1}

        total = await run(lambda uow: uow.transactions.sum_for_account(c.id))
        assert total == Decimal("5000")

    @pytest.mark.asyncio
    async def test_duplicate_telegram_id(self, run):
        await run(create("1"))
        with pytest.raises(DuplicateObjectException):
            await run(create("1"))
        assert await run(lambda uow: uow.accounts.count()) == 1

    @pytest.mark.asyncio
    async def test_farming_claim(self, run):
        account = await run(create("1"))
        with patch("farmpro.services.farming.utcnow", return_value=T0):
            await run(lambda uow: FarmingService(uow).start(account.id))
            assert await run(lambda uow: uow.accounts.count_farming()) == 1

        with patch("farmpro.services.farming.utcnow", return_value=T0 + timedelta(hours=4)):
            transaction = await run(lambda uow: FarmingService(uow).claim(account.id))
        assert transaction.amount == Decimal("480.00")

        saved = await run(lambda uow: uow.accounts.get(id=account.id))
        assert saved.balance == Decimal("5480.00")
        assert saved.farming_start_time is None
        assert await run(lambda uow: AdminService(uow).reconcile_all()) == []

    @pytest.mark.asyncio
    async def test_failed_purchase_rolls_back(self, run):
        account = await run(create("1"))
        boost = await run(
            lambda uow: BoostService(uow).create_boost(
                SBoostCreate(name="Gold", multiplier=Decimal("5"), duration_hours=6, price=Decimal("9000"))
            )
        )
        with pytest.raises(InsufficientBalanceException):
            await run(lambda uow: BoostService(uow).purchase(account.id, boost.id))

        saved = await run(lambda uow: uow.accounts.get(id=account.id))
        assert saved.balance == Decimal("5000.00")
        assert await run(lambda uow: uow.boost_purchases.count()) == 0

    @pytest.mark.asyncio
    async def test_boost_expiry(self, run):
        account = await run(create("1"))
        boost = await run(
            lambda uow: BoostService(uow).create_boost(
                SBoostCreate(name="Speed", multiplier=Decimal("2"), duration_hours=1, price=Decimal("100"))
            )
        )
        with patch("farmpro.services.boosts.utcnow", return_value=T0):
            await run(lambda uow: BoostService(uow).purchase(account.id, boost.id))

        assert await run(lambda uow: uow.accounts.expired_boost_ids(T0)) == []
        assert await run(lambda uow: BoostService(uow).expire_boosts(T0 + timedelta(hours=2))) == 1

        saved = await run(lambda uow: uow.accounts.get(id=account.id))
        assert saved.boost_multiplier == Decimal("1.00")
        assert saved.boost_end_time is None

    @pytest.mark.asyncio
    async def test_withdrawal_rejection(self, run):
        account = await run(create("1"))
        await run(lambda uow: WalletService(uow).deposit(account.id, "5"))
        withdrawal = await run(lambda uow: WalletService(uow).withdraw(account.id, "100"))

        stats = await run(lambda uow: AdminService(uow).stats())
        assert stats.pending_withdrawals == 1

        await run(lambda uow: WalletService(uow).set_withdrawal_status(withdrawal.id, TransactionStatus.FAILED))

        saved = await run(lambda uow: uow.accounts.get(id=account.id))
        assert saved.balance == Decimal("4905.00")
        assert saved.total_withdrawn == Decimal("100.00")
        assert await run(lambda uow: WalletService(uow).list_pending_withdrawals()) == []
