from datetime import datetime
from decimal import Decimal
from typing import Dict, List

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from farmpro.core.exceptions import DatabaseException
from farmpro.models import (
    Account,
    Boost,
    BoostPurchase,
    Referral,
    Setting,
    Task,
    TaskCompletion,
    Transaction,
)
from farmpro.repositories.sqlalchemy import BaseSQLAlchemyRepository
from farmpro.utils.logger import get_logger

logger = get_logger(__name__)


class AccountRepository(BaseSQLAlchemyRepository[Account]):
    _model = Account

    async def expired_boost_ids(self, now: datetime) -> List[int]:
        query = select(Account.id).where(Account.boost_end_time.is_not(None), Account.boost_end_time <= now)
        try:
            result = await self.db.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as exc:
            logger.error(f"Error fetching expired boosts: {exc}")
            raise DatabaseException("An error occurred while fetching expired boosts.") from exc

    async def total_balance(self) -> Decimal:
        query = select(func.coalesce(func.sum(Account.balance), 0))
        try:
            result = await self.db.execute(query)
            return Decimal(result.scalar_one())
        except SQLAlchemyError as exc:
            logger.error(f"Error summing balances: {exc}")
            raise DatabaseException("An error occurred while summing balances.") from exc

    async def count_farming(self) -> int:
        query = select(func.count(Account.id)).where(Account.farming_start_time.is_not(None))
        try:
            result = await self.db.execute(query)
            return result.scalar_one()
        except SQLAlchemyError as exc:
            logger.error(f"Error counting farming accounts: {exc}")
            raise DatabaseException("An error occurred while counting farming accounts.") from exc


class TransactionRepository(BaseSQLAlchemyRepository[Transaction]):
    _model = Transaction

    async def sum_for_account(self, account_id: int) -> Decimal:
        query = select(func.coalesce(func.sum(Transaction.amount), 0)).where(Transaction.account_id == account_id)
        try:
            result = await self.db.execute(query)
            return Decimal(result.scalar_one())
        except SQLAlchemyError as exc:
            logger.error(f"Error summing transactions of account {account_id}: {exc}")
            raise DatabaseException("An error occurred while summing transactions.") from exc


class ReferralRepository(BaseSQLAlchemyRepository[Referral]):
    _model = Referral

    async def count_by_level(self, referrer_id: int) -> Dict[int, int]:
        query = (
            select(Referral.level, func.count(Referral.id))
            .where(Referral.referrer_id == referrer_id)
            .group_by(Referral.level)
        )
        try:
            result = await self.db.execute(query)
            return {level: count for level, count in result.all()}
        except SQLAlchemyError as exc:
            logger.error(f"Error fetching referral stats: {exc}")
            raise DatabaseException("An error occurred while fetching referral stats.") from exc


class TaskRepository(BaseSQLAlchemyRepository[Task]):
    _model = Task


class TaskCompletionRepository(BaseSQLAlchemyRepository[TaskCompletion]):
    _model = TaskCompletion


class BoostRepository(BaseSQLAlchemyRepository[Boost]):
    _model = Boost


class BoostPurchaseRepository(BaseSQLAlchemyRepository[BoostPurchase]):
    _model = BoostPurchase


class SettingRepository(BaseSQLAlchemyRepository[Setting]):
    _model = Setting
