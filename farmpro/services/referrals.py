from typing import List

from farmpro.core.config import settings
from farmpro.interfaces.repository import IUnitOfWork
from farmpro.models import Account, Referral
from farmpro.schemas.referral import SReferralStats
from farmpro.services.settings_store import SettingsService
from farmpro.utils.logger import get_logger

logger = get_logger(__name__)


def referral_link(account_id: int) -> str:
    return f"https://t.me/{settings.TELEGRAM_BOT_USERNAME}?start=ref_{account_id}"


class ReferralService:
    def __init__(self, uow: IUnitOfWork):
        self.uow = uow
        self.settings = SettingsService(uow)

    async def propagate(self, new_account: Account) -> List[Referral]:
        """
        Create the referral edges of a freshly created account.

        The direct referrer gets a level 1 edge, its own referrer level 2 and
        so on up to REFERRAL_MAX_DEPTH. Commission percents are read from
        the settings store at creation time and only recorded on the edge.
        Edges are staged in the caller's unit of work.
        """
        edges: List[Referral] = []
        visited = {new_account.id}
        ancestor_id = new_account.referrer_id
        level = 1

        while ancestor_id is not None and level <= settings.REFERRAL_MAX_DEPTH:
            if ancestor_id in visited:
                logger.warning(f"Referral cycle at account {ancestor_id}, stopping at level {level}")
                break
            ancestor = await self.uow.accounts.first(id=ancestor_id)
            if ancestor is None:
                break

            commission = await self.settings.get_decimal(f"referral_level{level}_commission")
            edge = await self.uow.referrals.add(
                Referral(referrer_id=ancestor.id, referred_id=new_account.id, level=level, commission=commission)
            )
            edges.append(edge)

            visited.add(ancestor.id)
            ancestor_id = ancestor.referrer_id
            level += 1

        logger.info(f"account={new_account.id} got {len(edges)} referral edge(s)")
        return edges

    async def list_referrals(self, account_id: int) -> List[Referral]:
        await self.uow.accounts.get(id=account_id)
        return await self.uow.referrals.f(referrer_id=account_id)

    async def get_stats(self, account_id: int) -> SReferralStats:
        await self.uow.accounts.get(id=account_id)
        counts = await self.uow.referrals.count_by_level(account_id)
        return SReferralStats(level1=counts.get(1, 0), level2=counts.get(2, 0), level3=counts.get(3, 0))
