from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from farmpro.core.exceptions import DatabaseException, DuplicateObjectException, ObjectNotFoundException
from farmpro.utils.logger import get_logger

# Define type variable for the model
ModelType = TypeVar("ModelType", bound=SQLModel)

logger = get_logger(__name__)


class BaseSQLAlchemyRepository(Generic[ModelType]):
    """
    Base repository class for SQLAlchemy operations.

    Repositories never commit: the unit of work owning the session does,
    so a balance change and its journal entry land in one transaction.

    Attributes:
        _model (Type[ModelType]): The model class associated with the repository.
        db (AsyncSession): The asynchronous database session.
    """

    _model: Type[ModelType]

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize the repository with a database session.

        Args:
            db (AsyncSession): The asynchronous database session.
        """
        self.db = db

    async def add(self, obj: ModelType) -> ModelType:
        """
        Stage a new object and flush it so the database assigns its id.

        Args:
            obj (ModelType): The object to insert.

        Returns:
            ModelType: The same object with its primary key populated.
        """
        logger.debug(f"Staging a new {self._model.__name__} object.")
        self.db.add(obj)
        try:
            await self.db.flush()
            return obj
        except IntegrityError as exc:
            logger.error(f"Integrity error creating {self._model.__name__}: {exc}")
            raise DuplicateObjectException(f"{self._model.__name__} already exists.") from exc
        except SQLAlchemyError as exc:
            logger.error(f"Error staging {self._model.__name__}: {exc}")
            raise DatabaseException("An error occurred while creating the object.") from exc

    async def first(self, **kwargs: Any) -> Optional[ModelType]:
        """
        Retrieve the first object matching the filters.

        Args:
            **kwargs: Filter criteria for querying the object.

        Returns:
            Optional[ModelType]: The retrieved object or None if not found.
        """
        query = select(self._model).filter_by(**kwargs).order_by(self._model.id).limit(1)
        try:
            result = await self.db.execute(query)
            return result.scalars().first()
        except SQLAlchemyError as exc:
            logger.error(f"Error fetching {self._model.__name__}: {exc}")
            raise DatabaseException("An error occurred while fetching the object.") from exc

    async def get(self, **kwargs: Any) -> ModelType:
        """
        Retrieve an object from the database based on provided filters.

        Args:
            **kwargs: Filter criteria for querying the object.

        Returns:
            ModelType: The retrieved object.

        Raises:
            ObjectNotFoundException: nothing matches the filters.
        """
        logger.debug(f"Fetching {self._model.__name__} object with filters {kwargs}.")
        obj = await self.first(**kwargs)
        if obj is None:
            logger.warning(f"{self._model.__name__} not found with filters {kwargs}.")
            raise ObjectNotFoundException(f"{self._model.__name__} not found.")
        return obj

    async def f(self, **kwargs: Any) -> List[ModelType]:
        """
        Retrieve objects from the database based on provided filters.

        Args:
            **kwargs: Filter criteria for querying the objects.

        Returns:
            List[ModelType]: List of retrieved objects ordered by id.
        """
        logger.debug(f"Fetching {self._model.__name__} objects by {kwargs}.")

        query = select(self._model).filter_by(**kwargs).order_by(self._model.id)
        try:
            result = await self.db.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as exc:
            logger.error(f"Error fetching {self._model.__name__} objects: {exc}")
            raise DatabaseException("An error occurred while fetching objects.") from exc

    async def all(self) -> List[ModelType]:
        return await self.f()

    async def count(self, **kwargs: Any) -> int:
        query = select(func.count(self._model.id)).select_from(self._model).filter_by(**kwargs)
        try:
            result = await self.db.execute(query)
            return result.scalar_one_or_none() or 0
        except SQLAlchemyError as exc:
            logger.error(f"Error counting {self._model.__name__} objects: {exc}")
            raise DatabaseException("An error occurred while counting objects.") from exc

    async def get_for_update(self, pk: int) -> ModelType:
        """
        Fetch the row with `SELECT ... FOR UPDATE`.

        The lock is held until the unit of work commits or rolls back, which
        serializes read-modify-write across workers. `populate_existing`
        refreshes an object already loaded into the session.
        """
        query = (
            select(self._model)
            .where(self._model.id == pk)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.db.execute(query)
            obj = result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            logger.error(f"Error locking {self._model.__name__} {pk}: {exc}")
            raise DatabaseException("An error occurred while fetching the object.") from exc

        if obj is None:
            raise ObjectNotFoundException(f"{self._model.__name__} not found.")
        return obj
