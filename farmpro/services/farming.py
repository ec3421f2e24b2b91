"""
Farming sessions.

An account is Idle (no window), Running (now < end) or Claimable
(now >= end). The state is derived from the stored window every time it is
needed, nothing is scheduled.
"""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from farmpro.core.config import settings
from farmpro.core.exceptions import (
    AlreadyRunningException,
    NoActiveSessionException,
    NotYetCompleteException,
)
from farmpro.interfaces.repository import IUnitOfWork
from farmpro.models import Account, Transaction, TransactionKind
from farmpro.schemas.farming import FarmingState, SFarmingStatus
from farmpro.services.ledger import LedgerService, quantize
from farmpro.utils.clock import utcnow
from farmpro.utils.locks import account_locks
from farmpro.utils.logger import get_logger

logger = get_logger(__name__)

NO_BOOST = Decimal("1.00")
SECONDS_PER_HOUR = Decimal(3600)


def farming_state(account: Account, now: datetime) -> FarmingState:
    if account.farming_start_time is None or account.farming_end_time is None:
        return FarmingState.IDLE
    if now < account.farming_end_time:
        return FarmingState.RUNNING
    return FarmingState.CLAIMABLE


def effective_multiplier(account: Account, now: datetime) -> Decimal:
    """Stored boost multiplier while the boost is still running, 1.00 after it ended."""
    if account.boost_end_time is None or account.boost_end_time > now:
        return account.boost_multiplier
    return NO_BOOST


def session_hours(start: datetime, end: datetime) -> Decimal:
    seconds = max(int((end - start).total_seconds()), 0)
    return Decimal(seconds) / SECONDS_PER_HOUR


def compute_farming_reward(start: datetime, end: datetime, rate: Decimal, multiplier: Decimal) -> Decimal:
    """
    hours(start, end) * rate * multiplier, rounded to cents.

    The stored span is used as is, so a window that is not exactly
    FARMING_SESSION_HOURS long pays for its real length. An inverted window
    pays nothing.
    """
    return quantize(session_hours(start, end) * Decimal(rate) * Decimal(multiplier))


def _format_hours(hours: Decimal) -> str:
    return format(hours.normalize(), "f")


class FarmingService:
    def __init__(self, uow: IUnitOfWork):
        self.uow = uow
        self.ledger = LedgerService(uow)

    async def start(self, account_id: int) -> Account:
        async with account_locks.hold(account_id), self.uow:
            account = await self.uow.accounts.get_for_update(account_id)
            now = utcnow()
            if farming_state(account, now) is not FarmingState.IDLE:
                # an expired but unclaimed window has to be claimed first
                raise AlreadyRunningException()

            account.farming_start_time = now
            account.farming_end_time = now + timedelta(hours=settings.FARMING_SESSION_HOURS)
            await self.uow.commit()

        logger.info(f"account={account_id} started farming until {account.farming_end_time}")
        return account

    async def claim(self, account_id: int) -> Transaction:
        async with account_locks.hold(account_id), self.uow:
            account = await self.uow.accounts.get_for_update(account_id)
            now = utcnow()
            state = farming_state(account, now)
            if state is FarmingState.IDLE:
                raise NoActiveSessionException()
            if state is FarmingState.RUNNING:
                raise NotYetCompleteException()

            hours = session_hours(account.farming_start_time, account.farming_end_time)
            multiplier = effective_multiplier(account, now)
            reward = compute_farming_reward(
                account.farming_start_time, account.farming_end_time, account.farming_rate, multiplier
            )
            description = (
                f"Farming completed: {_format_hours(hours)}h × {account.farming_rate} USDT/h × {multiplier}x"
            )
            transaction = await self.ledger.apply(account, reward, TransactionKind.FARMING, description)
            account.total_earned = quantize(account.total_earned + reward)
            account.farming_start_time = None
            account.farming_end_time = None
            await self.uow.commit()

        logger.info(f"account={account_id} claimed {reward} from farming")
        return transaction

    async def status(self, account_id: int, now: Optional[datetime] = None) -> SFarmingStatus:
        account = await self.uow.accounts.get(id=account_id)
        return self.describe(account, now or utcnow())

    @staticmethod
    def describe(account: Account, now: datetime) -> SFarmingStatus:
        state = farming_state(account, now)
        multiplier = effective_multiplier(account, now)
        seconds_remaining = 0
        projected_reward = None
        if state is not FarmingState.IDLE:
            projected_reward = compute_farming_reward(
                account.farming_start_time, account.farming_end_time, account.farming_rate, multiplier
            )
        if state is FarmingState.RUNNING:
            seconds_remaining = int((account.farming_end_time - now).total_seconds())

        return SFarmingStatus(
            state=state,
            start_time=account.farming_start_time,
            end_time=account.farming_end_time,
            seconds_remaining=seconds_remaining,
            farming_rate=account.farming_rate,
            multiplier=multiplier,
            projected_reward=projected_reward,
        )
