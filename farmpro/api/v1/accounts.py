from typing import List

from fastapi import APIRouter, Depends, status

from farmpro.api.deps import get_uow
from farmpro.interfaces.repository import IUnitOfWork
from farmpro.schemas.account import SAccountCreate, SAccountRead, SAccountSummary
from farmpro.schemas.common import IGetResponseBase, IPostResponseBase
from farmpro.schemas.transaction import STransactionRead
from farmpro.services.accounts import AccountService
from farmpro.services.ledger import LedgerService
from farmpro.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


def get_account_service(uow: IUnitOfWork = Depends(get_uow)) -> AccountService:
    return AccountService(uow)


def get_ledger_service(uow: IUnitOfWork = Depends(get_uow)) -> LedgerService:
    return LedgerService(uow)


@router.post(
    "",
    response_description="Create new account",
    response_model=IPostResponseBase[SAccountRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create new account"
)
async def create_account(
        obj_in: SAccountCreate,
        account_service: AccountService = Depends(get_account_service),
) -> IPostResponseBase[SAccountRead]:
    logger.info(f"Creating account: {obj_in.model_dump()}")
    account = await account_service.create_account(obj_in)
    return IPostResponseBase(data=SAccountRead.model_validate(account))


@router.get(
    "",
    response_description="Get all accounts",
    response_model=IGetResponseBase[List[SAccountRead]],
    summary="Get all accounts"
)
async def get_accounts(
        account_service: AccountService = Depends(get_account_service),
) -> IGetResponseBase[List[SAccountRead]]:
    accounts = await account_service.list_accounts()
    return IGetResponseBase(data=[SAccountRead.model_validate(account) for account in accounts])


@router.get(
    "/telegram/{telegram_id}",
    response_description="Get account by telegram_id",
    response_model=IGetResponseBase[SAccountRead],
    summary="Get account by telegram_id"
)
async def get_account_by_telegram_id(
        telegram_id: str,
        account_service: AccountService = Depends(get_account_service),
) -> IGetResponseBase[SAccountRead]:
    account = await account_service.get_by_telegram_id(telegram_id)
    return IGetResponseBase(data=SAccountRead.model_validate(account))


@router.get(
    "/{account_id}",
    response_description="Get account by id",
    response_model=IGetResponseBase[SAccountRead],
    summary="Get account by id"
)
async def get_account(
        account_id: int,
        account_service: AccountService = Depends(get_account_service),
) -> IGetResponseBase[SAccountRead]:
    account = await account_service.get(account_id)
    return IGetResponseBase(data=SAccountRead.model_validate(account))


@router.get(
    "/{account_id}/summary",
    response_description="Account with farming, boost and referral information",
    response_model=IGetResponseBase[SAccountSummary],
    summary="Get account summary"
)
async def get_account_summary(
        account_id: int,
        account_service: AccountService = Depends(get_account_service),
) -> IGetResponseBase[SAccountSummary]:
    return IGetResponseBase(data=await account_service.summary(account_id))


@router.get(
    "/{account_id}/transactions",
    response_description="Transactions of the account, newest first",
    response_model=IGetResponseBase[List[STransactionRead]],
    summary="Get account transactions"
)
async def get_account_transactions(
        account_id: int,
        ledger: LedgerService = Depends(get_ledger_service),
) -> IGetResponseBase[List[STransactionRead]]:
    transactions = await ledger.list_transactions(account_id)
    return IGetResponseBase(data=[STransactionRead.model_validate(t) for t in transactions])
