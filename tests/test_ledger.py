from decimal import Decimal

import pytest

from farmpro.core.exceptions import ObjectNotFoundException, ValidationException
from farmpro.models import Account, TransactionKind, TransactionStatus
from farmpro.repositories.memory import MemoryUnitOfWork
from farmpro.services.ledger import LedgerService, parse_amount


class TestParseAmount:
    """Разбор сумм, пришедших от клиента"""

    @pytest.mark.parametrize("raw, expected", [
        ("12", Decimal("12.00")),
        ("12.5", Decimal("12.50")),
        (" 7.005 ", Decimal("7.01")),
        (10, Decimal("10.00")),
        (0.1, Decimal("0.10")),
        (Decimal("3.3"), Decimal("3.30")),
        ("9999999999999999.99", Decimal("9999999999999999.99")),
    ])
    def test_valid_amounts(self, raw, expected):
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize("raw", [
        "", "abc", "1e", "NaN", "Infinity", "-5", "0", "0.001", None, True,
        "1e30", "10000000000000000", "9999999999999999.995",
    ])
    def test_invalid_amounts(self, raw):
        with pytest.raises(ValidationException):
            parse_amount(raw)


class TestLedgerService:
    """Баланс меняется только вместе с записью в журнале"""

    @pytest.mark.asyncio
    async def test_credit_and_debit_are_journaled(self, store, make_account, read_account, journal_total):
        account = await make_account()
        uow = MemoryUnitOfWork(store)
        ledger = LedgerService(uow)

        locked = await uow.accounts.get_for_update(account.id)
        await ledger.credit(locked, Decimal("100.00"), TransactionKind.DEPOSIT, "Deposit to wallet")
        await ledger.debit(locked, Decimal("40.50"), TransactionKind.BOOST, "Purchased Speed Boost")
        await uow.commit()

        saved = await read_account(account.id)
        assert saved.balance == Decimal("5059.50")
        assert await journal_total(account.id) == saved.balance

        transactions = await LedgerService(MemoryUnitOfWork(store)).list_transactions(account.id)
        assert [t.kind for t in transactions] == ["boost", "deposit", "bonus"]
        assert transactions[0].amount == Decimal("-40.50")

    @pytest.mark.asyncio
    async def test_withdrawal_defaults_to_pending(self, store, make_account):
        account = await make_account()
        uow = MemoryUnitOfWork(store)
        locked = await uow.accounts.get_for_update(account.id)

        withdrawal = await LedgerService(uow).debit(locked, Decimal("12"), TransactionKind.WITHDRAWAL, "Withdrawal request")
        farming = await LedgerService(uow).credit(locked, Decimal("1"), TransactionKind.FARMING, "Farming completed")

        assert withdrawal.status == TransactionStatus.PENDING.value
        assert farming.status == TransactionStatus.COMPLETED.value

    @pytest.mark.asyncio
    async def test_rollback_discards_balance_and_journal(self, store, make_account, read_account, journal_total):
        account = await make_account()
        uow = MemoryUnitOfWork(store)
        locked = await uow.accounts.get_for_update(account.id)
        await LedgerService(uow).credit(locked, Decimal("999"), TransactionKind.DEPOSIT, "Deposit to wallet")
        await uow.rollback()

        saved = await read_account(account.id)
        assert saved.balance == Decimal("5000.00")
        assert await journal_total(account.id) == Decimal("5000.00")

    @pytest.mark.asyncio
    async def test_non_positive_credit_is_rejected(self, uow, make_account):
        account = await make_account()
        locked = await uow.accounts.get_for_update(account.id)
        with pytest.raises(ValidationException):
            await LedgerService(uow).credit(locked, Decimal("0"), TransactionKind.DEPOSIT, "nothing")
        with pytest.raises(ValidationException):
            await LedgerService(uow).debit(locked, Decimal("-1"), TransactionKind.BOOST, "negative")

    @pytest.mark.asyncio
    async def test_unknown_account(self, uow):
        ledger = LedgerService(uow)
        with pytest.raises(ObjectNotFoundException):
            await ledger.apply(Account(telegram_id="ghost"), Decimal("1"), TransactionKind.DEPOSIT, "ghost")
        with pytest.raises(ObjectNotFoundException):
            await ledger.list_transactions(404)

    @pytest.mark.asyncio
    async def test_reconcile_detects_mismatch(self, store, make_account):
        account = await make_account()
        report = await LedgerService(MemoryUnitOfWork(store)).reconcile(account.id)
        assert report.consistent
        assert report.journal_total == Decimal("5000.00")

        store.tables["accounts"][account.id].balance = Decimal("1.00")
        report = await LedgerService(MemoryUnitOfWork(store)).reconcile(account.id)
        assert not report.consistent
        assert report.balance == Decimal("1.00")
