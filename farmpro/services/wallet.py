"""
Deposits, withdrawals and the withdrawal gatekeeper.

Withdrawal requirements, checked in this order:

1. amount >= MIN_WITHDRAWAL ($12)
2. a first deposit of at least FIRST_DEPOSIT_MIN ($5) was made
3. total_deposited >= 5 + 3 * total_withdrawn
4. balance >= amount
"""

from decimal import Decimal
from typing import Any, List

from farmpro.core.config import settings
from farmpro.core.exceptions import (
    InvalidStateException,
    PolicyViolationException,
)
from farmpro.interfaces.repository import IUnitOfWork
from farmpro.models import Account, Transaction, TransactionKind, TransactionStatus
from farmpro.schemas.wallet import SWithdrawalCheck
from farmpro.services.ledger import LedgerService, parse_amount, quantize
from farmpro.services.settings_store import SettingsService
from farmpro.utils.clock import utcnow
from farmpro.utils.locks import account_locks
from farmpro.utils.logger import get_logger

logger = get_logger(__name__)


def check_withdrawal(account: Account, amount: Decimal) -> SWithdrawalCheck:
    if amount < settings.MIN_WITHDRAWAL:
        return SWithdrawalCheck(can_withdraw=False, reason=f"Minimum withdrawal is ${settings.MIN_WITHDRAWAL}")

    if not account.has_first_deposit:
        return SWithdrawalCheck(
            can_withdraw=False,
            reason=f"You must make a first deposit of ${settings.FIRST_DEPOSIT_MIN} before withdrawing",
        )

    required = settings.FIRST_DEPOSIT_MIN + settings.WITHDRAWAL_DEPOSIT_SURCHARGE * account.total_withdrawn
    if account.total_deposited < required:
        needed = quantize(required - account.total_deposited)
        return SWithdrawalCheck(can_withdraw=False, reason=f"You need to deposit ${needed} more to withdraw")

    if account.balance < amount:
        return SWithdrawalCheck(can_withdraw=False, reason="Insufficient balance")

    return SWithdrawalCheck(can_withdraw=True)


class WalletService:
    def __init__(self, uow: IUnitOfWork):
        self.uow = uow
        self.ledger = LedgerService(uow)
        self.settings = SettingsService(uow)

    async def can_withdraw(self, account_id: int, amount: Any) -> SWithdrawalCheck:
        account = await self.uow.accounts.get(id=account_id)
        return check_withdrawal(account, parse_amount(amount))

    async def deposit(self, account_id: int, amount: Any) -> Transaction:
        amount = parse_amount(amount)
        if not await self.settings.get_bool("deposit_enabled"):
            raise PolicyViolationException("Deposits are disabled")

        async with account_locks.hold(account_id), self.uow:
            account = await self.uow.accounts.get_for_update(account_id)
            first_deposit = not account.has_first_deposit and amount >= settings.FIRST_DEPOSIT_MIN
            description = "First deposit - Withdrawal enabled" if first_deposit else "Deposit to wallet"

            transaction = await self.ledger.credit(account, amount, TransactionKind.DEPOSIT, description)
            account.total_deposited = quantize(account.total_deposited + amount)
            if first_deposit:
                account.has_first_deposit = True
            await self.uow.commit()

        return transaction

    async def withdraw(self, account_id: int, amount: Any) -> Transaction:
        """
        Request a withdrawal.

        The amount leaves the balance right away and is journaled as a
        pending withdrawal until an admin completes or rejects it.
        """
        amount = parse_amount(amount)
        if not await self.settings.get_bool("withdrawal_enabled"):
            raise PolicyViolationException("Withdrawals are disabled")

        async with account_locks.hold(account_id), self.uow:
            account = await self.uow.accounts.get_for_update(account_id)
            check = check_withdrawal(account, amount)
            if not check.can_withdraw:
                logger.info(f"account={account_id} withdrawal of {amount} refused: {check.reason}")
                raise PolicyViolationException(check.reason)

            transaction = await self.ledger.debit(account, amount, TransactionKind.WITHDRAWAL, "Withdrawal request")
            account.total_withdrawn = quantize(account.total_withdrawn + amount)
            await self.uow.commit()

        return transaction

    async def set_withdrawal_status(self, transaction_id: int, status: TransactionStatus) -> Transaction:
        """
        Admin decision on a pending withdrawal.

        Only pending -> completed and pending -> failed are allowed. Either
        way only the status changes; the debit of the request stays in the
        journal, so the balance still equals the journal sum.
        """
        status = TransactionStatus(status)
        transaction = await self.uow.transactions.get(id=transaction_id)
        if transaction.kind != TransactionKind.WITHDRAWAL.value:
            raise InvalidStateException("Only withdrawals can change status")
        if status is TransactionStatus.PENDING:
            raise InvalidStateException("Withdrawal can only be completed or failed")

        async with account_locks.hold(transaction.account_id), self.uow:
            # re-read under the lock, another admin may have decided already
            transaction = await self.uow.transactions.get_for_update(transaction_id)
            if transaction.status != TransactionStatus.PENDING.value:
                raise InvalidStateException(f"Withdrawal is already {transaction.status}")

            transaction.status = status.value
            transaction.updated_at = utcnow()
            await self.uow.commit()

        logger.info(f"Withdrawal #{transaction_id} of account={transaction.account_id} marked {status.value}")
        return transaction

    async def list_pending_withdrawals(self) -> List[Transaction]:
        return await self.uow.transactions.f(
            kind=TransactionKind.WITHDRAWAL.value, status=TransactionStatus.PENDING.value
        )
