from decimal import Decimal

import pytest

from farmpro.core.exceptions import (
    InvalidStateException,
    ObjectNotFoundException,
    PolicyViolationException,
    ValidationException,
)
from farmpro.models import Account, TransactionStatus
from farmpro.repositories.memory import MemoryUnitOfWork
from farmpro.services.settings_store import SettingsService
from farmpro.services.wallet import WalletService, check_withdrawal


def make(balance="5000", deposited="0", withdrawn="0", first_deposit=False) -> Account:
    return Account(
        telegram_id="1",
        balance=Decimal(balance),
        total_deposited=Decimal(deposited),
        total_withdrawn=Decimal(withdrawn),
        has_first_deposit=first_deposit,
    )


class TestCheckWithdrawal:
    """Условия вывода проверяются по порядку, первое нарушенное возвращается"""

    def test_minimum_amount(self):
        check = check_withdrawal(make(deposited="100", first_deposit=True), Decimal("10"))
        assert not check.can_withdraw
        assert check.reason == "Minimum withdrawal is $12"

    def test_first_deposit_required(self):
        check = check_withdrawal(make(), Decimal("20"))
        assert check.reason == "You must make a first deposit of $5 before withdrawing"

    def test_surcharge_on_previous_withdrawals(self):
        account = make(deposited="5", withdrawn="12", first_deposit=True)
        check = check_withdrawal(account, Decimal("12"))
        assert not check.can_withdraw
        assert check.reason == "You need to deposit $36.00 more to withdraw"

    def test_insufficient_balance(self):
        check = check_withdrawal(make(balance="11", deposited="5", first_deposit=True), Decimal("12"))
        assert check.reason == "Insufficient balance"

    def test_all_checks_pass(self):
        check = check_withdrawal(make(deposited="5", first_deposit=True), Decimal("12"))
        assert check.can_withdraw
        assert check.reason is None


class TestWalletService:
    """Депозиты, выводы и решения администратора"""

    @pytest.mark.asyncio
    async def test_first_deposit_enables_withdrawal(self, store, make_account, read_account, journal_total):
        account = await make_account()
        small = await WalletService(MemoryUnitOfWork(store)).deposit(account.id, "4.99")
        assert small.description == "Deposit to wallet"
        assert not (await read_account(account.id)).has_first_deposit

        first = await WalletService(MemoryUnitOfWork(store)).deposit(account.id, "5")
        assert first.description == "First deposit - Withdrawal enabled"

        saved = await read_account(account.id)
        assert saved.has_first_deposit
        assert saved.total_deposited == Decimal("9.99")
        assert saved.balance == Decimal("5009.99")
        assert await journal_total(account.id) == saved.balance

    @pytest.mark.asyncio
    async def test_withdraw_creates_pending_debit(self, store, make_account, read_account, journal_total):
        account = await make_account()
        await WalletService(MemoryUnitOfWork(store)).deposit(account.id, "5")

        withdrawal = await WalletService(MemoryUnitOfWork(store)).withdraw(account.id, "12")
        assert withdrawal.status == TransactionStatus.PENDING.value
        assert withdrawal.amount == Decimal("-12.00")

        saved = await read_account(account.id)
        assert saved.balance == Decimal("4993.00")
        assert saved.total_withdrawn == Decimal("12.00")
        assert await journal_total(account.id) == saved.balance

        # 5 + 3 * 12 = 41 нужно задепозитить для следующего вывода
        with pytest.raises(PolicyViolationException) as exc_info:
            await WalletService(MemoryUnitOfWork(store)).withdraw(account.id, "12")
        assert exc_info.value.detail == "You need to deposit $36.00 more to withdraw"

    @pytest.mark.asyncio
    async def test_withdraw_refused_leaves_state(self, store, make_account, read_account):
        account = await make_account()
        with pytest.raises(PolicyViolationException):
            await WalletService(MemoryUnitOfWork(store)).withdraw(account.id, "10")

        saved = await read_account(account.id)
        assert saved.balance == Decimal("5000.00")
        assert await MemoryUnitOfWork(store).transactions.count(kind="withdrawal") == 0

    @pytest.mark.asyncio
    async def test_can_withdraw(self, store, make_account):
        account = await make_account()
        wallet = WalletService(MemoryUnitOfWork(store))
        assert not (await wallet.can_withdraw(account.id, "20")).can_withdraw

        await WalletService(MemoryUnitOfWork(store)).deposit(account.id, "5")
        assert (await WalletService(MemoryUnitOfWork(store)).can_withdraw(account.id, "20")).can_withdraw

        with pytest.raises(ObjectNotFoundException):
            await wallet.can_withdraw(404, "20")
        with pytest.raises(ValidationException):
            await wallet.can_withdraw(account.id, "twenty")

    @pytest.mark.asyncio
    async def test_disabled_by_settings(self, store, make_account):
        account = await make_account()
        await SettingsService(MemoryUnitOfWork(store)).set("deposit_enabled", "false")
        await SettingsService(MemoryUnitOfWork(store)).set("withdrawal_enabled", "0")

        with pytest.raises(PolicyViolationException):
            await WalletService(MemoryUnitOfWork(store)).deposit(account.id, "5")
        with pytest.raises(PolicyViolationException):
            await WalletService(MemoryUnitOfWork(store)).withdraw(account.id, "12")


class TestWithdrawalStatus:
    """Администратор подтверждает или отклоняет вывод"""

    @pytest.fixture
    def pending_withdrawal(self, store, make_account):
        async def _create():
            account = await make_account()
            await WalletService(MemoryUnitOfWork(store)).deposit(account.id, "5")
            withdrawal = await WalletService(MemoryUnitOfWork(store)).withdraw(account.id, "100")
            return account, withdrawal

        return _create

    @pytest.mark.asyncio
    async def test_complete(self, store, pending_withdrawal, read_account):
        account, withdrawal = await pending_withdrawal()
        updated = await WalletService(MemoryUnitOfWork(store)).set_withdrawal_status(
            withdrawal.id, TransactionStatus.COMPLETED
        )
        assert updated.status == "completed"
        assert (await read_account(account.id)).balance == Decimal("4905.00")
        assert await WalletService(MemoryUnitOfWork(store)).list_pending_withdrawals() == []

    @pytest.mark.asyncio
    async def test_reject_changes_status_only(self, store, pending_withdrawal, read_account, journal_total):
        account, withdrawal = await pending_withdrawal()
        rejected = await WalletService(MemoryUnitOfWork(store)).set_withdrawal_status(
            withdrawal.id, TransactionStatus.FAILED
        )
        assert rejected.status == "failed"

        saved = await read_account(account.id)
        assert saved.balance == Decimal("4905.00")
        assert saved.total_withdrawn == Decimal("100.00")
        assert await journal_total(account.id) == saved.balance

        withdrawals = await MemoryUnitOfWork(store).transactions.f(account_id=account.id, kind="withdrawal")
        assert [(w.id, w.amount, w.status) for w in withdrawals] == [(withdrawal.id, Decimal("-100.00"), "failed")]

    @pytest.mark.asyncio
    async def test_only_pending_can_change(self, store, pending_withdrawal):
        _, withdrawal = await pending_withdrawal()
        await WalletService(MemoryUnitOfWork(store)).set_withdrawal_status(withdrawal.id, TransactionStatus.COMPLETED)

        with pytest.raises(InvalidStateException):
            await WalletService(MemoryUnitOfWork(store)).set_withdrawal_status(withdrawal.id, TransactionStatus.FAILED)

    @pytest.mark.asyncio
    async def test_rejects_pending_target_and_non_withdrawals(self, store, pending_withdrawal):
        account, withdrawal = await pending_withdrawal()
        with pytest.raises(InvalidStateException):
            await WalletService(MemoryUnitOfWork(store)).set_withdrawal_status(withdrawal.id, TransactionStatus.PENDING)

        bonus = await MemoryUnitOfWork(store).transactions.first(account_id=account.id, kind="bonus")
        with pytest.raises(InvalidStateException):
            await WalletService(MemoryUnitOfWork(store)).set_withdrawal_status(bonus.id, TransactionStatus.COMPLETED)

        with pytest.raises(ObjectNotFoundException):
            await WalletService(MemoryUnitOfWork(store)).set_withdrawal_status(9999, TransactionStatus.COMPLETED)
