from typing import List, Optional, Tuple

from farmpro.core.config import settings
from farmpro.core.exceptions import DuplicateObjectException
from farmpro.interfaces.repository import IUnitOfWork
from farmpro.models import Account, TransactionKind
from farmpro.schemas.account import SAccountCreate, SAccountRead, SAccountSummary
from farmpro.schemas.boost import SBoostPurchaseRead
from farmpro.services.boosts import BoostService
from farmpro.services.farming import FarmingService
from farmpro.services.ledger import LedgerService
from farmpro.services.referrals import ReferralService, referral_link
from farmpro.utils.clock import utcnow
from farmpro.utils.logger import get_logger

logger = get_logger(__name__)


class AccountService:
    def __init__(self, uow: IUnitOfWork):
        self.uow = uow
        self.ledger = LedgerService(uow)
        self.referrals = ReferralService(uow)

    async def create_account(self, obj_in: SAccountCreate) -> Account:
        """
        Создать аккаунт: приветственный бонус и реферальные связи в одной единице работы.

        Реферер сохраняется только если такой аккаунт существует.
        """
        async with self.uow:
            if await self.uow.accounts.first(telegram_id=obj_in.telegram_id) is not None:
                raise DuplicateObjectException("Account already exists.")

            referrer_id = None
            if obj_in.referrer_id is not None:
                if await self.uow.accounts.first(id=obj_in.referrer_id) is not None:
                    referrer_id = obj_in.referrer_id
                else:
                    logger.warning(f"Referrer {obj_in.referrer_id} not found, account created without one")

            account = await self.uow.accounts.add(
                Account(
                    telegram_id=obj_in.telegram_id,
                    username=obj_in.username,
                    referrer_id=referrer_id,
                    farming_rate=settings.DEFAULT_FARMING_RATE,
                )
            )
            if settings.WELCOME_BONUS > 0:
                await self.ledger.credit(account, settings.WELCOME_BONUS, TransactionKind.BONUS, "Welcome bonus")
            if referrer_id is not None:
                await self.referrals.propagate(account)
            await self.uow.commit()

        logger.info(f"Account created: {account!r} referrer_id={referrer_id}")
        return account

    async def get_or_create(
        self, telegram_id: str, username: Optional[str] = None, referrer_id: Optional[int] = None
    ) -> Tuple[Account, bool]:
        account = await self.uow.accounts.first(telegram_id=str(telegram_id))
        if account is not None:
            return account, False
        obj_in = SAccountCreate(telegram_id=str(telegram_id), username=username, referrer_id=referrer_id)
        return await self.create_account(obj_in), True

    async def get(self, account_id: int) -> Account:
        return await self.uow.accounts.get(id=account_id)

    async def get_by_telegram_id(self, telegram_id: str) -> Account:
        return await self.uow.accounts.get(telegram_id=str(telegram_id))

    async def list_accounts(self) -> List[Account]:
        return await self.uow.accounts.all()

    async def summary(self, account_id: int) -> SAccountSummary:
        account = await self.uow.accounts.get(id=account_id)
        now = utcnow()
        active_boost = await BoostService(self.uow).get_active_boost(account_id, now=now)
        return SAccountSummary(
            account=SAccountRead.model_validate(account),
            farming=FarmingService.describe(account, now),
            active_boost=SBoostPurchaseRead.model_validate(active_boost) if active_boost else None,
            referral_stats=await self.referrals.get_stats(account_id),
            referral_link=referral_link(account.id),
        )
