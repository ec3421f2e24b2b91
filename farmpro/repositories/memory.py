"""
In-memory storage variant.

`MemoryStore` holds committed rows; every `MemoryUnitOfWork` works on
private copies (identity map) and publishes them to the store on commit,
so a failed operation leaves no half-applied balance change behind. Only
new rows and rows changed since they were loaded are published; a copy
that was merely read never overwrites a newer commit.
"""

from collections import defaultdict
from datetime import datetime
from decimal import Decimal
from itertools import count as counter
from typing import Any, Dict, Generic, Iterator, List, Optional, Tuple, Type, TypeVar

from sqlmodel import SQLModel

from farmpro.core.exceptions import DuplicateObjectException, ObjectNotFoundException
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
from farmpro.utils.logger import get_logger

ModelType = TypeVar("ModelType", bound=SQLModel)

logger = get_logger(__name__)

# unique column groups checked on commit, the same ones the database enforces
UNIQUE_FIELDS: Dict[str, Tuple[Tuple[str, ...], ...]] = {
    Account.__tablename__: (("telegram_id",),),
    Setting.__tablename__: (("key",),),
    TaskCompletion.__tablename__: (("account_id", "task_id"),),
    Referral.__tablename__: (("referrer_id", "referred_id", "level"),),
}


def _clone(obj: ModelType) -> ModelType:
    return type(obj)(**obj.model_dump())


class MemoryStore:
    """Committed rows per table plus id sequences."""

    def __init__(self) -> None:
        self.tables: Dict[str, Dict[int, SQLModel]] = defaultdict(dict)
        self._sequences: Dict[str, Iterator[int]] = defaultdict(lambda: counter(1))

    def next_id(self, table: str) -> int:
        return next(self._sequences[table])

    def reset(self) -> None:
        self.tables.clear()
        self._sequences.clear()


class BaseMemoryRepository(Generic[ModelType]):
    _model: Type[ModelType]

    def __init__(self, uow: "MemoryUnitOfWork") -> None:
        self.uow = uow

    @property
    def _table(self) -> str:
        return self._model.__tablename__

    def _rows(self) -> List[ModelType]:
        ids = set(self.uow.store.tables[self._table]) | self.uow.tracked_ids(self._table)
        return [self.uow.load(self._table, pk) for pk in sorted(ids)]

    @staticmethod
    def _matches(obj: ModelType, filters: Dict[str, Any]) -> bool:
        return all(getattr(obj, field) == value for field, value in filters.items())

    async def add(self, obj: ModelType) -> ModelType:
        if obj.id is None:
            obj.id = self.uow.store.next_id(self._table)
        self.uow.track(self._table, obj)
        return obj

    async def first(self, **kwargs: Any) -> Optional[ModelType]:
        for obj in self._rows():
            if self._matches(obj, kwargs):
                return obj
        return None

    async def get(self, **kwargs: Any) -> ModelType:
        obj = await self.first(**kwargs)
        if obj is None:
            logger.warning(f"{self._model.__name__} not found with filters {kwargs}.")
            raise ObjectNotFoundException(f"{self._model.__name__} not found.")
        return obj

    async def f(self, **kwargs: Any) -> List[ModelType]:
        return [obj for obj in self._rows() if self._matches(obj, kwargs)]

    async def all(self) -> List[ModelType]:
        return self._rows()

    async def count(self, **kwargs: Any) -> int:
        return len(await self.f(**kwargs))

    async def get_for_update(self, pk: int) -> ModelType:
        # drop the private copy so the caller sees the latest committed row
        return self.uow.reload(self._model, pk)


class MemoryAccountRepository(BaseMemoryRepository[Account]):
    _model = Account

    async def expired_boost_ids(self, now: datetime) -> List[int]:
        return [a.id for a in self._rows() if a.boost_end_time is not None and a.boost_end_time <= now]

    async def total_balance(self) -> Decimal:
        return sum((a.balance for a in self._rows()), Decimal("0"))

    async def count_farming(self) -> int:
        return len([a for a in self._rows() if a.farming_start_time is not None])


class MemoryTransactionRepository(BaseMemoryRepository[Transaction]):
    _model = Transaction

    async def sum_for_account(self, account_id: int) -> Decimal:
        return sum((t.amount for t in await self.f(account_id=account_id)), Decimal("0"))


class MemoryReferralRepository(BaseMemoryRepository[Referral]):
    _model = Referral

    async def count_by_level(self, referrer_id: int) -> Dict[int, int]:
        stats: Dict[int, int] = defaultdict(int)
        for referral in await self.f(referrer_id=referrer_id):
            stats[referral.level] += 1
        return dict(stats)


class MemoryTaskRepository(BaseMemoryRepository[Task]):
    _model = Task


class MemoryTaskCompletionRepository(BaseMemoryRepository[TaskCompletion]):
    _model = TaskCompletion


class MemoryBoostRepository(BaseMemoryRepository[Boost]):
    _model = Boost


class MemoryBoostPurchaseRepository(BaseMemoryRepository[BoostPurchase]):
    _model = BoostPurchase


class MemorySettingRepository(BaseMemoryRepository[Setting]):
    _model = Setting


class MemoryUnitOfWork:
    def __init__(self, store: MemoryStore) -> None:
        self.store = store
        self._identity: Dict[Tuple[str, int], SQLModel] = {}
        # column values at load time, absent for rows added in this unit of work
        self._snapshots: Dict[Tuple[str, int], Dict[str, Any]] = {}

        self.accounts = MemoryAccountRepository(self)
        self.transactions = MemoryTransactionRepository(self)
        self.tasks = MemoryTaskRepository(self)
        self.task_completions = MemoryTaskCompletionRepository(self)
        self.referrals = MemoryReferralRepository(self)
        self.boosts = MemoryBoostRepository(self)
        self.boost_purchases = MemoryBoostPurchaseRepository(self)
        self.settings = MemorySettingRepository(self)

    def tracked_ids(self, table: str) -> set:
        return {pk for (name, pk) in self._identity if name == table}

    def track(self, table: str, obj: SQLModel) -> None:
        self._identity[(table, obj.id)] = obj

    def _load_committed(self, table: str, pk: int) -> SQLModel:
        obj = _clone(self.store.tables[table][pk])
        self._identity[(table, pk)] = obj
        self._snapshots[(table, pk)] = obj.model_dump()
        return obj

    def load(self, table: str, pk: int) -> SQLModel:
        key = (table, pk)
        if key not in self._identity:
            return self._load_committed(table, pk)
        return self._identity[key]

    def reload(self, model: Type[SQLModel], pk: int) -> SQLModel:
        table = model.__tablename__
        if pk not in self.store.tables[table]:
            raise ObjectNotFoundException(f"{model.__name__} not found.")
        return self._load_committed(table, pk)

    def _dirty(self) -> List[Tuple[Tuple[str, int], SQLModel]]:
        return [
            (key, obj)
            for key, obj in self._identity.items()
            if key not in self._snapshots or obj.model_dump() != self._snapshots[key]
        ]

    def _check_unique(self, dirty: List[Tuple[Tuple[str, int], SQLModel]]) -> None:
        for (table, pk), obj in dirty:
            for fields in UNIQUE_FIELDS.get(table, ()):
                value = tuple(getattr(obj, field) for field in fields)
                for other_pk, other in self.store.tables[table].items():
                    if other_pk != pk and tuple(getattr(other, field) for field in fields) == value:
                        raise DuplicateObjectException(f"{type(obj).__name__} already exists.")

    async def commit(self) -> None:
        dirty = self._dirty()
        try:
            self._check_unique(dirty)
        except DuplicateObjectException:
            await self.rollback()
            raise
        for (table, pk), obj in dirty:
            self.store.tables[table][pk] = _clone(obj)
        # the next read in this unit of work sees the store as it is now
        self._identity.clear()
        self._snapshots.clear()

    async def rollback(self) -> None:
        self._identity.clear()
        self._snapshots.clear()

    async def __aenter__(self) -> "MemoryUnitOfWork":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            await self.rollback()
