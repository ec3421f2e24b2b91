from typing import List

from fastapi import APIRouter, Depends

from farmpro.api.deps import get_uow
from farmpro.interfaces.repository import IUnitOfWork
from farmpro.schemas.common import IGetResponseBase
from farmpro.schemas.transaction import SLedgerReconciliation, STransactionRead, STransactionStatusUpdate
from farmpro.schemas.wallet import SAdminStats
from farmpro.services.admin import AdminService
from farmpro.services.wallet import WalletService
from farmpro.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


def get_admin_service(uow: IUnitOfWork = Depends(get_uow)) -> AdminService:
    return AdminService(uow)


def get_wallet_service(uow: IUnitOfWork = Depends(get_uow)) -> WalletService:
    return WalletService(uow)


@router.get(
    "/stats",
    response_description="Platform statistics",
    response_model=IGetResponseBase[SAdminStats],
    summary="Get admin stats"
)
async def get_stats(
        admin: AdminService = Depends(get_admin_service),
) -> IGetResponseBase[SAdminStats]:
    return IGetResponseBase(data=await admin.stats())


@router.get(
    "/withdrawals",
    response_description="Pending withdrawals",
    response_model=IGetResponseBase[List[STransactionRead]],
    summary="Get pending withdrawals"
)
async def get_pending_withdrawals(
        wallet: WalletService = Depends(get_wallet_service),
) -> IGetResponseBase[List[STransactionRead]]:
    transactions = await wallet.list_pending_withdrawals()
    return IGetResponseBase(data=[STransactionRead.model_validate(t) for t in transactions])


@router.put(
    "/transactions/{transaction_id}/status",
    response_description="Complete or reject a pending withdrawal",
    response_model=IGetResponseBase[STransactionRead],
    summary="Update withdrawal status"
)
async def update_transaction_status(
        transaction_id: int,
        obj_in: STransactionStatusUpdate,
        wallet: WalletService = Depends(get_wallet_service),
) -> IGetResponseBase[STransactionRead]:
    logger.info(f"Admin sets transaction {transaction_id} to {obj_in.status.value}")
    transaction = await wallet.set_withdrawal_status(transaction_id, obj_in.status)
    return IGetResponseBase(data=STransactionRead.model_validate(transaction))


@router.get(
    "/reconcile",
    response_description="Accounts whose balance differs from their journal",
    response_model=IGetResponseBase[List[SLedgerReconciliation]],
    summary="Reconcile ledger"
)
async def reconcile(
        admin: AdminService = Depends(get_admin_service),
) -> IGetResponseBase[List[SLedgerReconciliation]]:
    return IGetResponseBase(data=await admin.reconcile_all())
