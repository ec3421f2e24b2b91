from fastapi import APIRouter, Depends, Query

from farmpro.api.deps import get_uow
from farmpro.interfaces.repository import IUnitOfWork
from farmpro.schemas.common import IGetResponseBase, IPostResponseBase
from farmpro.schemas.transaction import SAmountRequest, STransactionRead
from farmpro.schemas.wallet import SWithdrawalCheck
from farmpro.services.wallet import WalletService

router = APIRouter()


def get_wallet_service(uow: IUnitOfWork = Depends(get_uow)) -> WalletService:
    return WalletService(uow)


@router.post(
    "/wallet/deposit",
    response_description="Deposit to wallet",
    response_model=IPostResponseBase[STransactionRead],
    summary="Deposit"
)
async def wallet_deposit(
        obj_in: SAmountRequest,
        wallet: WalletService = Depends(get_wallet_service),
) -> IPostResponseBase[STransactionRead]:
    transaction = await wallet.deposit(obj_in.account_id, obj_in.amount)
    return IPostResponseBase(message="Deposit successful", data=STransactionRead.model_validate(transaction))


@router.post(
    "/wallet/withdraw",
    response_description="Request withdrawal",
    response_model=IPostResponseBase[STransactionRead],
    summary="Withdraw"
)
async def wallet_withdraw(
        obj_in: SAmountRequest,
        wallet: WalletService = Depends(get_wallet_service),
) -> IPostResponseBase[STransactionRead]:
    transaction = await wallet.withdraw(obj_in.account_id, obj_in.amount)
    return IPostResponseBase(message="Withdrawal requested", data=STransactionRead.model_validate(transaction))


@router.get(
    "/accounts/{account_id}/withdrawal-check",
    response_description="Whether the account may withdraw the amount",
    response_model=IGetResponseBase[SWithdrawalCheck],
    summary="Check withdrawal"
)
async def withdrawal_check(
        account_id: int,
        amount: str = Query(..., description="Amount to withdraw, e.g. 12.50"),
        wallet: WalletService = Depends(get_wallet_service),
) -> IGetResponseBase[SWithdrawalCheck]:
    return IGetResponseBase(data=await wallet.can_withdraw(account_id, amount))
