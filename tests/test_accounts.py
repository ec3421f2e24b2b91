from datetime import datetime
from decimal import Decimal

import pytest

from farmpro.core.exceptions import DuplicateObjectException, ObjectNotFoundException
from farmpro.models import Transaction
from farmpro.repositories.memory import MemoryUnitOfWork
from farmpro.schemas.farming import FarmingState
from farmpro.services.accounts import AccountService
from farmpro.services.admin import AdminService
from farmpro.services.ledger import LedgerService
from farmpro.services.seed import DEFAULT_BOOSTS, DEFAULT_TASKS, seed_defaults
from farmpro.services.wallet import WalletService


class TestAccountService:
    """Регистрация аккаунта и сводка для главного экрана"""

    @pytest.mark.asyncio
    async def test_welcome_bonus_is_journaled(self, store, make_account, journal_total):
        account = await make_account("555", username="alice")
        assert account.balance == Decimal("5000.00")
        assert account.farming_rate == Decimal("120.00")
        assert account.boost_multiplier == Decimal("1.00")

        entries = await MemoryUnitOfWork(store).transactions.f(account_id=account.id)
        assert [(e.kind, e.amount, e.description) for e in entries] == [
            ("bonus", Decimal("5000.00"), "Welcome bonus")
        ]
        assert await journal_total(account.id) == Decimal("5000.00")

    @pytest.mark.asyncio
    async def test_duplicate_telegram_id(self, store, make_account):
        await make_account("555")
        with pytest.raises(DuplicateObjectException):
            await make_account("555")
        assert await MemoryUnitOfWork(store).accounts.count() == 1
        # у отклонённого аккаунта не осталось записей в журнале
        assert await MemoryUnitOfWork(store).transactions.count() == 1

    @pytest.mark.asyncio
    async def test_get_or_create(self, store):
        account, created = await AccountService(MemoryUnitOfWork(store)).get_or_create(777, username="bob")
        assert created
        assert account.telegram_id == "777"

        again, created = await AccountService(MemoryUnitOfWork(store)).get_or_create("777")
        assert not created
        assert again.id == account.id

    @pytest.mark.asyncio
    async def test_lookups(self, store, make_account):
        account = await make_account("42")
        service = AccountService(MemoryUnitOfWork(store))
        assert (await service.get_by_telegram_id(42)).id == account.id
        assert [a.id for a in await service.list_accounts()] == [account.id]
        with pytest.raises(ObjectNotFoundException):
            await service.get(404)

    @pytest.mark.asyncio
    async def test_summary(self, store, make_account):
        referrer = await make_account("1")
        await make_account("2", referrer_id=referrer.id)

        summary = await AccountService(MemoryUnitOfWork(store)).summary(referrer.id)
        assert summary.account.id == referrer.id
        assert summary.farming.state == FarmingState.IDLE
        assert summary.active_boost is None
        assert summary.referral_stats.level1 == 1
        assert summary.referral_link.endswith(f"?start=ref_{referrer.id}")


class TestAdminService:
    @pytest.mark.asyncio
    async def test_stats(self, store, make_account):
        first = await make_account("1")
        await make_account("2", farming_start_time=datetime(2024, 1, 1), farming_end_time=datetime(2024, 1, 1, 4))
        await WalletService(MemoryUnitOfWork(store)).deposit(first.id, "5")
        await WalletService(MemoryUnitOfWork(store)).withdraw(first.id, "20")

        stats = await AdminService(MemoryUnitOfWork(store)).stats()
        assert stats.total_users == 2
        assert stats.total_balance == Decimal("9985.00")
        assert stats.active_farmers == 1
        assert stats.pending_withdrawals == 1

    @pytest.mark.asyncio
    async def test_reconcile_all_reports_mismatches(self, store, make_account):
        await make_account("1")
        broken = await make_account("2", balance=Decimal("1.00"))

        assert await AdminService(MemoryUnitOfWork(store)).reconcile_all() == [
            await _report(store, broken.id)
        ]

        # запись в журнал, возвращающая согласованность
        uow = MemoryUnitOfWork(store)
        await uow.transactions.add(
            Transaction(account_id=broken.id, kind="bonus", amount=Decimal("-4999.00"), description="fix")
        )
        await uow.commit()
        assert await AdminService(MemoryUnitOfWork(store)).reconcile_all() == []


async def _report(store, account_id):
    return await LedgerService(MemoryUnitOfWork(store)).reconcile(account_id)


class TestSeed:
    @pytest.mark.asyncio
    async def test_seed_is_idempotent(self, store):
        created = await seed_defaults(MemoryUnitOfWork(store))
        assert created["tasks"] == len(DEFAULT_TASKS)
        assert created["boosts"] == len(DEFAULT_BOOSTS)
        assert created["settings"] > 0

        again = await seed_defaults(MemoryUnitOfWork(store))
        assert again == {"tasks": 0, "boosts": 0, "settings": 0}
