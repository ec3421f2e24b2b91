from fastapi import APIRouter, Depends

from farmpro.api.deps import get_uow
from farmpro.interfaces.repository import IUnitOfWork
from farmpro.schemas.account import SAccountRead
from farmpro.schemas.common import IGetResponseBase, IPostResponseBase
from farmpro.schemas.farming import SFarmingRequest, SFarmingStatus
from farmpro.schemas.transaction import STransactionRead
from farmpro.services.farming import FarmingService

router = APIRouter()


def get_farming_service(uow: IUnitOfWork = Depends(get_uow)) -> FarmingService:
    return FarmingService(uow)


@router.get(
    "/accounts/{account_id}/farming",
    response_description="Farming state of the account",
    response_model=IGetResponseBase[SFarmingStatus],
    summary="Get farming status"
)
async def get_farming_status(
        account_id: int,
        farming: FarmingService = Depends(get_farming_service),
) -> IGetResponseBase[SFarmingStatus]:
    return IGetResponseBase(data=await farming.status(account_id))


@router.post(
    "/farming/start",
    response_description="Start a farming session",
    response_model=IPostResponseBase[SAccountRead],
    summary="Start farming"
)
async def start_farming(
        obj_in: SFarmingRequest,
        farming: FarmingService = Depends(get_farming_service),
) -> IPostResponseBase[SAccountRead]:
    account = await farming.start(obj_in.account_id)
    return IPostResponseBase(message="Farming started", data=SAccountRead.model_validate(account))


@router.post(
    "/farming/claim",
    response_description="Claim the reward of a finished session",
    response_model=IPostResponseBase[STransactionRead],
    summary="Claim farming reward"
)
async def claim_farming(
        obj_in: SFarmingRequest,
        farming: FarmingService = Depends(get_farming_service),
) -> IPostResponseBase[STransactionRead]:
    transaction = await farming.claim(obj_in.account_id)
    return IPostResponseBase(message="Farming reward claimed", data=STransactionRead.model_validate(transaction))
