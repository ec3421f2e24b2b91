from typing import List

from fastapi import APIRouter, Depends

from farmpro.api.deps import get_uow
from farmpro.interfaces.repository import IUnitOfWork
from farmpro.schemas.common import IGetResponseBase
from farmpro.schemas.referral import SReferralRead, SReferralStats
from farmpro.services.referrals import ReferralService

router = APIRouter()


def get_referral_service(uow: IUnitOfWork = Depends(get_uow)) -> ReferralService:
    return ReferralService(uow)


@router.get(
    "/{account_id}/referrals",
    response_description="Referral edges where the account is the referrer",
    response_model=IGetResponseBase[List[SReferralRead]],
    summary="Get referrals"
)
async def get_referrals(
        account_id: int,
        referral_service: ReferralService = Depends(get_referral_service),
) -> IGetResponseBase[List[SReferralRead]]:
    referrals = await referral_service.list_referrals(account_id)
    return IGetResponseBase(data=[SReferralRead.model_validate(r) for r in referrals])


@router.get(
    "/{account_id}/referral-stats",
    response_description="Referral counts per level",
    response_model=IGetResponseBase[SReferralStats],
    summary="Get referral stats"
)
async def get_referral_stats(
        account_id: int,
        referral_service: ReferralService = Depends(get_referral_service),
) -> IGetResponseBase[SReferralStats]:
    return IGetResponseBase(data=await referral_service.get_stats(account_id))
