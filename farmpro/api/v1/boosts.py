from typing import List, Optional

from fastapi import APIRouter, Depends, status
from fastapi_cache.decorator import cache

from farmpro.api.deps import get_uow
from farmpro.core.config import settings
from farmpro.interfaces.repository import IUnitOfWork
from farmpro.schemas.boost import SBoostCreate, SBoostPurchaseRead, SBoostRead, SBoostUpdate
from farmpro.schemas.common import IGetResponseBase, IPostResponseBase
from farmpro.services.boosts import BoostService
from farmpro.utils.cache import CATALOG_NAMESPACE, catalog_key_builder, clear_catalog_cache

router = APIRouter()


def get_boost_service(uow: IUnitOfWork = Depends(get_uow)) -> BoostService:
    return BoostService(uow)


@router.get(
    "/boosts",
    response_description="Active boosts",
    response_model=IGetResponseBase[List[SBoostRead]],
    summary="Get active boosts"
)
@cache(
    expire=settings.CATALOG_CACHE_SECONDS,
    namespace=CATALOG_NAMESPACE,
    key_builder=catalog_key_builder
)
async def get_boosts(
        boost_service: BoostService = Depends(get_boost_service),
) -> IGetResponseBase[List[SBoostRead]]:
    boosts = await boost_service.list_active()
    return IGetResponseBase(data=[SBoostRead.model_validate(boost) for boost in boosts])


@router.post(
    "/boosts",
    response_description="Create new boost",
    response_model=IPostResponseBase[SBoostRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create new boost"
)
async def create_boost(
        obj_in: SBoostCreate,
        boost_service: BoostService = Depends(get_boost_service),
) -> IPostResponseBase[SBoostRead]:
    boost = await boost_service.create_boost(obj_in)
    await clear_catalog_cache()
    return IPostResponseBase(data=SBoostRead.model_validate(boost))


@router.patch(
    "/boosts/{boost_id}",
    response_description="Enable or disable boost",
    response_model=IGetResponseBase[SBoostRead],
    summary="Update boost"
)
async def update_boost(
        boost_id: int,
        obj_in: SBoostUpdate,
        boost_service: BoostService = Depends(get_boost_service),
) -> IGetResponseBase[SBoostRead]:
    boost = await boost_service.set_active(boost_id, obj_in.is_active)
    await clear_catalog_cache()
    return IGetResponseBase(data=SBoostRead.model_validate(boost))


@router.post(
    "/accounts/{account_id}/boosts/{boost_id}/purchase",
    response_description="Buy boost",
    response_model=IPostResponseBase[SBoostPurchaseRead],
    summary="Purchase boost"
)
async def purchase_boost(
        account_id: int,
        boost_id: int,
        boost_service: BoostService = Depends(get_boost_service),
) -> IPostResponseBase[SBoostPurchaseRead]:
    purchase = await boost_service.purchase(account_id, boost_id)
    return IPostResponseBase(message="Boost purchased", data=SBoostPurchaseRead.model_validate(purchase))


@router.get(
    "/accounts/{account_id}/active-boost",
    response_description="Boost currently running for the account",
    response_model=IGetResponseBase[Optional[SBoostPurchaseRead]],
    summary="Get active boost"
)
async def get_active_boost(
        account_id: int,
        boost_service: BoostService = Depends(get_boost_service),
) -> IGetResponseBase[Optional[SBoostPurchaseRead]]:
    purchase = await boost_service.get_active_boost(account_id)
    return IGetResponseBase(data=SBoostPurchaseRead.model_validate(purchase) if purchase else None)
