from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Protocol, TypeVar

from sqlmodel import SQLModel

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

ModelType = TypeVar("ModelType", bound=SQLModel)


class IRepository(Protocol[ModelType]):
    """
    Storage capability for one entity.

    Implemented by the SQLAlchemy repositories (production) and the
    in-memory repositories (tests, local runs). Objects passed to `add`
    become visible to other units of work only after `commit`.
    """

    async def get(self, **kwargs: Any) -> ModelType:
        """Single object matching the filters, ObjectNotFoundException otherwise."""

    async def first(self, **kwargs: Any) -> Optional[ModelType]:
        ...

    async def f(self, **kwargs: Any) -> List[ModelType]:
        """All objects matching the filters, ordered by id."""

    async def all(self) -> List[ModelType]:
        ...

    async def count(self, **kwargs: Any) -> int:
        ...

    async def add(self, obj: ModelType) -> ModelType:
        """Stage a new object; its id is assigned on return."""

    async def get_for_update(self, pk: int) -> ModelType:
        """Freshly read row, locked for the rest of the unit of work."""


class IAccountRepository(IRepository[Account], Protocol):
    async def expired_boost_ids(self, now: datetime) -> List[int]:
        """Ids of accounts whose boost ended at or before `now`."""

    async def total_balance(self) -> Decimal:
        ...

    async def count_farming(self) -> int:
        """Accounts with an open farming window."""


class ITransactionRepository(IRepository[Transaction], Protocol):
    async def sum_for_account(self, account_id: int) -> Any:
        """Sum of signed amounts journaled against the account."""


class IReferralRepository(IRepository[Referral], Protocol):
    async def count_by_level(self, referrer_id: int) -> Dict[int, int]:
        ...


class IUnitOfWork(Protocol):
    accounts: IAccountRepository
    transactions: ITransactionRepository
    tasks: IRepository[Task]
    task_completions: IRepository[TaskCompletion]
    referrals: IReferralRepository
    boosts: IRepository[Boost]
    boost_purchases: IRepository[BoostPurchase]
    settings: IRepository[Setting]

    async def commit(self) -> None:
        ...

    async def rollback(self) -> None:
        ...

    async def __aenter__(self) -> "IUnitOfWork":
        ...

    async def __aexit__(self, exc_type, exc, tb) -> None:
        ...
