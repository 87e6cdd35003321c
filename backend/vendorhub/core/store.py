"""Entity Store - generic keyed-record repository"""
import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Type, TypeVar

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from vendorhub.core.database import Base

ModelT = TypeVar("ModelT", bound=Base)


class EntityStore(ABC):
    """
    Keyed-record repository used by every service.

    Guarantees:
    - create() assigns a fresh unique id
    - update() is a partial merge, fields not named are left untouched
    - get() returns None for a missing id, it never raises
    - increment() and compare_and_set() are single atomic conditional writes

    Nothing is committed until the caller invokes commit(). The store makes no
    promise about invariants that span entity types, services enforce those.
    """

    @abstractmethod
    async def create(self, model: Type[ModelT], **fields: Any) -> ModelT: ...

    @abstractmethod
    async def get(self, model: Type[ModelT], record_id: str) -> Optional[ModelT]: ...

    @abstractmethod
    async def update(self, model: Type[ModelT], record_id: str, **changes: Any) -> Optional[ModelT]: ...

    @abstractmethod
    async def scan(
        self,
        model: Type[ModelT],
        order_by: Any = None,
        limit: Optional[int] = None,
        **equals: Any,
    ) -> List[ModelT]: ...

    @abstractmethod
    async def increment(
        self,
        model: Type[ModelT],
        record_id: str,
        deltas: Dict[str, Any],
        when: Optional[list] = None,
        **changes: Any,
    ) -> Optional[ModelT]: ...

    @abstractmethod
    async def compare_and_set(
        self,
        model: Type[ModelT],
        record_id: str,
        expected: Dict[str, Any],
        changes: Dict[str, Any],
    ) -> Optional[ModelT]: ...

    @abstractmethod
    async def commit(self) -> None: ...

    @abstractmethod
    async def rollback(self) -> None: ...


class SqlEntityStore(EntityStore):
    """EntityStore backed by a SQLAlchemy AsyncSession (one per request)."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, model: Type[ModelT], **fields: Any) -> ModelT:
        fields.setdefault("id", str(uuid.uuid4()))
        record = model(**fields)
        self.db.add(record)
        await self.db.flush()
        await self.db.refresh(record)
        return record

    async def get(self, model: Type[ModelT], record_id: str) -> Optional[ModelT]:
        result = await self.db.execute(
            select(model)
            .where(model.id == record_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def update(self, model: Type[ModelT], record_id: str, **changes: Any) -> Optional[ModelT]:
        if changes:
            await self.db.execute(
                update(model)
                .where(model.id == record_id)
                .values(**changes)
                .execution_options(synchronize_session=False)
            )
        return await self.get(model, record_id)

    async def scan(
        self,
        model: Type[ModelT],
        order_by: Any = None,
        limit: Optional[int] = None,
        **equals: Any,
    ) -> List[ModelT]:
        query = select(model)
        for column, value in equals.items():
            query = query.where(getattr(model, column) == value)
        if order_by is not None:
            query = query.order_by(order_by)
        if limit:
            query = query.limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def increment(
        self,
        model: Type[ModelT],
        record_id: str,
        deltas: Dict[str, Any],
        when: Optional[list] = None,
        **changes: Any,
    ) -> Optional[ModelT]:
        """
        Add each delta to its column in one UPDATE statement.

        `when` holds extra SQL guards; if any fails no row is touched and None
        is returned.
        """
        values = {column: getattr(model, column) + delta for column, delta in deltas.items()}
        values.update(changes)

        statement = update(model).where(model.id == record_id)
        for guard in when or []:
            statement = statement.where(guard)

        result = await self.db.execute(
            statement.values(**values).execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return None
        return await self.get(model, record_id)

    async def compare_and_set(
        self,
        model: Type[ModelT],
        record_id: str,
        expected: Dict[str, Any],
        changes: Dict[str, Any],
    ) -> Optional[ModelT]:
        """Apply `changes` only if every column still holds its `expected` value."""
        statement = update(model).where(model.id == record_id)
        for column, value in expected.items():
            statement = statement.where(getattr(model, column) == value)

        result = await self.db.execute(
            statement.values(**changes).execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return None
        return await self.get(model, record_id)

    async def commit(self) -> None:
        await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()
