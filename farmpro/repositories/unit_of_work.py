from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from farmpro.core.exceptions import DatabaseException, DuplicateObjectException
from farmpro.repositories.entities import (
    AccountRepository,
    BoostPurchaseRepository,
    BoostRepository,
    ReferralRepository,
    SettingRepository,
    TaskCompletionRepository,
    TaskRepository,
    TransactionRepository,
)
from farmpro.utils.logger import get_logger

logger = get_logger(__name__)


class SQLModelUnitOfWork:
    """
    Repository bundle over one AsyncSession.

    Everything staged through the repositories is written by a single
    `commit`, or discarded together by `rollback`.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.accounts = AccountRepository(db=session)
        self.transactions = TransactionRepository(db=session)
        self.tasks = TaskRepository(db=session)
        self.task_completions = TaskCompletionRepository(db=session)
        self.referrals = ReferralRepository(db=session)
        self.boosts = BoostRepository(db=session)
        self.boost_purchases = BoostPurchaseRepository(db=session)
        self.settings = SettingRepository(db=session)

    async def commit(self) -> None:
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            logger.error(f"Integrity error on commit: {exc}")
            raise DuplicateObjectException("Object already exists.") from exc
        except SQLAlchemyError as exc:
            await self.session.rollback()  # <-- rollback transaction if error occurs
            logger.error(f"Error on commit: {exc}")
            raise DatabaseException("An error occurred while saving changes.") from exc

    async def rollback(self) -> None:
        await self.session.rollback()

    async def __aenter__(self) -> "SQLModelUnitOfWork":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            await self.rollback()
