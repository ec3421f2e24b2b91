from datetime import datetime, timedelta
from typing import List, Optional

from farmpro.core.exceptions import InsufficientBalanceException, ObjectNotFoundException
from farmpro.interfaces.repository import IUnitOfWork
from farmpro.models import Boost, BoostPurchase, TransactionKind
from farmpro.schemas.boost import SBoostCreate
from farmpro.services.farming import NO_BOOST
from farmpro.services.ledger import LedgerService
from farmpro.utils.clock import utcnow
from farmpro.utils.locks import account_locks
from farmpro.utils.logger import get_logger

logger = get_logger(__name__)


class BoostService:
    def __init__(self, uow: IUnitOfWork):
        self.uow = uow
        self.ledger = LedgerService(uow)

    async def create_boost(self, obj_in: SBoostCreate) -> Boost:
        boost = await self.uow.boosts.add(Boost(**obj_in.model_dump()))
        await self.uow.commit()
        logger.info(f"Boost created: {boost!r}")
        return boost

    async def set_active(self, boost_id: int, is_active: bool) -> Boost:
        boost = await self.uow.boosts.get(id=boost_id)
        boost.is_active = is_active
        boost.updated_at = utcnow()
        await self.uow.commit()
        return boost

    async def list_active(self) -> List[Boost]:
        return await self.uow.boosts.f(is_active=True)

    async def purchase(self, account_id: int, boost_id: int) -> BoostPurchase:
        """
        Купить буст: списать цену и заменить текущий множитель аккаунта.

        Последняя покупка всегда побеждает: множитель и время окончания
        перезаписываются, сроки не суммируются.
        """
        async with account_locks.hold(account_id), self.uow:
            account = await self.uow.accounts.get_for_update(account_id)
            boost = await self.uow.boosts.first(id=boost_id)
            if boost is None or not boost.is_active:
                raise ObjectNotFoundException("Boost not found.")
            if account.balance < boost.price:
                raise InsufficientBalanceException()

            now = utcnow()
            expires_at = now + timedelta(hours=boost.duration_hours)
            await self.ledger.apply(account, -boost.price, TransactionKind.BOOST, f"Purchased {boost.name}")
            purchase = await self.uow.boost_purchases.add(
                BoostPurchase(account_id=account_id, boost_id=boost_id, purchased_at=now, expires_at=expires_at)
            )
            account.boost_multiplier = boost.multiplier
            account.boost_end_time = expires_at
            await self.uow.commit()

        logger.info(f"account={account_id} bought {boost.name} x{boost.multiplier} until {expires_at}")
        return purchase

    async def get_active_boost(self, account_id: int, now: Optional[datetime] = None) -> Optional[BoostPurchase]:
        now = now or utcnow()
        await self.uow.accounts.get(id=account_id)
        purchases = [p for p in await self.uow.boost_purchases.f(account_id=account_id) if p.expires_at > now]
        if not purchases:
            return None
        return max(purchases, key=lambda p: (p.purchased_at, p.id))

    async def expire_boosts(self, now: Optional[datetime] = None) -> int:
        """Reset multiplier and end time on every account whose boost has ended."""
        now = now or utcnow()
        expired = 0
        for account_id in await self.uow.accounts.expired_boost_ids(now):
            async with account_locks.hold(account_id), self.uow:
                account = await self.uow.accounts.get_for_update(account_id)
                # a purchase may have landed since the scan
                if account.boost_end_time is None or account.boost_end_time > now:
                    await self.uow.rollback()
                    continue
                account.boost_multiplier = NO_BOOST
                account.boost_end_time = None
                await self.uow.commit()
                expired += 1

        if expired:
            logger.info(f"Expired boosts on {expired} account(s)")
        return expired
