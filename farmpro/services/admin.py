from typing import List

from farmpro.interfaces.repository import IUnitOfWork
from farmpro.models import TransactionKind, TransactionStatus
from farmpro.schemas.transaction import SLedgerReconciliation
from farmpro.schemas.wallet import SAdminStats
from farmpro.services.ledger import LedgerService, quantize
from farmpro.utils.logger import get_logger

logger = get_logger(__name__)


class AdminService:
    def __init__(self, uow: IUnitOfWork):
        self.uow = uow
        self.ledger = LedgerService(uow)

    async def stats(self) -> SAdminStats:
        return SAdminStats(
            total_users=await self.uow.accounts.count(),
            total_balance=quantize(await self.uow.accounts.total_balance()),
            active_farmers=await self.uow.accounts.count_farming(),
            pending_withdrawals=await self.uow.transactions.count(
                kind=TransactionKind.WITHDRAWAL.value, status=TransactionStatus.PENDING.value
            ),
        )

    async def reconcile_all(self) -> List[SLedgerReconciliation]:
        """Accounts whose balance differs from the sum of their journal."""
        mismatches = []
        for account in await self.uow.accounts.all():
            report = await self.ledger.reconcile(account.id)
            if not report.consistent:
                logger.error(
                    f"Ledger mismatch on account={account.id}: "
                    f"balance={report.balance} journal={report.journal_total}"
                )
                mismatches.append(report)
        return mismatches
