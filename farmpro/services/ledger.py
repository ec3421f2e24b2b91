"""
Account ledger: the only place where `Account.balance` changes.

Every call stages the balance adjustment and its journal entry in the same
unit of work; the caller commits both at once.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, List, Optional, Union

from farmpro.core.exceptions import ObjectNotFoundException, ValidationException
from farmpro.interfaces.repository import IUnitOfWork
from farmpro.models import Account, Transaction, TransactionKind, TransactionStatus
from farmpro.schemas.transaction import SLedgerReconciliation
from farmpro.utils.logger import get_logger

logger = get_logger(__name__)

CENT = Decimal("0.01")
# NUMERIC(18, 2) upper bound
MAX_AMOUNT = Decimal("9999999999999999.99")


def quantize(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def parse_amount(raw: Any) -> Decimal:
    """
    Parse a client supplied amount ("12.5", 12, Decimal) into cents.

    Floats go through their shortest repr so 0.1 stays 0.1.

    Raises:
        ValidationException: malformed, non-finite, non-positive or
            out of range input.
    """
    if isinstance(raw, bool):
        raise ValidationException(f"Invalid amount: {raw!r}")
    try:
        value = Decimal(str(raw).strip())
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise ValidationException(f"Invalid amount: {raw!r}") from exc

    if not value.is_finite():
        raise ValidationException(f"Invalid amount: {raw!r}")
    # anything from here rounds past NUMERIC(18, 2)
    if abs(value) >= MAX_AMOUNT + CENT / 2:
        raise ValidationException(f"Amount must not exceed {MAX_AMOUNT}")
    value = quantize(value)
    if value <= 0:
        raise ValidationException("Amount must be greater than zero")
    return value


class LedgerService:
    def __init__(self, uow: IUnitOfWork):
        self.uow = uow

    async def apply(
        self,
        account: Optional[Account],
        amount: Union[Decimal, int, str],
        kind: TransactionKind,
        description: str,
        status: Optional[TransactionStatus] = None,
    ) -> Transaction:
        """
        `balance += amount` plus the matching journal entry.

        Withdrawals are journaled as pending, everything else as completed,
        unless `status` says otherwise.
        """
        if account is None or account.id is None:
            raise ObjectNotFoundException("Account not found.")

        kind = TransactionKind(kind)
        if status is None:
            status = TransactionStatus.PENDING if kind is TransactionKind.WITHDRAWAL else TransactionStatus.COMPLETED
        amount = quantize(Decimal(amount))

        account.balance = quantize(account.balance + amount)
        transaction = Transaction(
            account_id=account.id,
            kind=kind.value,
            amount=amount,
            description=description,
            status=TransactionStatus(status).value,
        )
        await self.uow.transactions.add(transaction)

        logger.info(
            f"account={account.id} {kind.value} {amount:+} -> balance={account.balance} ({description})"
        )
        return transaction

    async def credit(self, account: Account, amount: Decimal, kind: TransactionKind, description: str) -> Transaction:
        if Decimal(amount) <= 0:
            raise ValidationException("Credit amount must be greater than zero")
        return await self.apply(account, amount, kind, description)

    async def debit(self, account: Account, amount: Decimal, kind: TransactionKind, description: str) -> Transaction:
        if Decimal(amount) <= 0:
            raise ValidationException("Debit amount must be greater than zero")
        return await self.apply(account, -Decimal(amount), kind, description)

    async def list_transactions(self, account_id: int) -> List[Transaction]:
        """Journal of the account, newest first."""
        await self.uow.accounts.get(id=account_id)
        transactions = await self.uow.transactions.f(account_id=account_id)
        return sorted(transactions, key=lambda t: t.id, reverse=True)

    async def reconcile(self, account_id: int) -> SLedgerReconciliation:
        account = await self.uow.accounts.get(id=account_id)
        journal_total = quantize(await self.uow.transactions.sum_for_account(account_id))
        return SLedgerReconciliation(
            account_id=account.id,
            balance=account.balance,
            journal_total=journal_total,
            consistent=account.balance == journal_total,
        )
