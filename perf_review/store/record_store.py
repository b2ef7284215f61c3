"""
Generic record store.

The review core talks to persistence only through this interface:
list / find / create / update / upsert_many / delete, all asynchronous.
Any failure coming out of SQLAlchemy is wrapped in StoreIOError and surfaced
to the caller; the store never retries on its own.
"""
import logging
from contextlib import contextmanager
from typing import Any, Dict, Generic, Iterable, List, Mapping, Optional, Sequence, Type, TypeVar

from sqlalchemy import select, delete as sa_delete, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from perf_review.core.exceptions import StoreIOError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


class RecordStore(Generic[ModelT]):
    """Interface the review core consumes, one instance per entity type."""

    entity: str = "record"

    async def list(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Optional[Sequence[str]] = None,
        limit: Optional[int] = None,
    ) -> List[ModelT]:
        raise NotImplementedError

    async def find(self, record_id: Any) -> Optional[ModelT]:
        raise NotImplementedError

    async def create(self, record: Mapping[str, Any]) -> ModelT:
        raise NotImplementedError

    async def update(self, record_id: Any, changes: Mapping[str, Any]) -> Optional[ModelT]:
        raise NotImplementedError

    async def upsert_many(self, records: Iterable[Mapping[str, Any]], conflict_keys: Sequence[str]) -> int:
        raise NotImplementedError

    async def delete(self, record_id: Any) -> bool:
        raise NotImplementedError


class SqlAlchemyRecordStore(RecordStore[ModelT]):
    """
    RecordStore backed by a declarative model and an async session factory.

    filters: field -> value. A list/tuple/set value means IN, None means IS NULL.
    order_by: field names, "-" prefix for descending.
    """

    def __init__(self, model: Type[ModelT], session_factory: async_sessionmaker):
        self.model = model
        self.entity = model.__tablename__
        self._session_factory = session_factory

    @contextmanager
    def _io(self, operation: str):
        try:
            yield
        except SQLAlchemyError as exc:
            logger.error(f"Store {operation} on {self.entity} failed: {exc}", exc_info=True)
            raise StoreIOError(operation, self.entity, exc) from exc

    def _column(self, field: str):
        column = getattr(self.model, field, None)
        if column is None:
            raise ValueError(f"{self.entity} has no field '{field}'")
        return column

    def _build_select(self, filters, order_by, limit):
        stmt = select(self.model)
        for field, value in (filters or {}).items():
            column = self._column(field)
            if value is None:
                stmt = stmt.where(column.is_(None))
            elif isinstance(value, (list, tuple, set, frozenset)):
                stmt = stmt.where(column.in_(list(value)))
            else:
                stmt = stmt.where(column == value)
        for field in order_by or ():
            if field.startswith("-"):
                stmt = stmt.order_by(self._column(field[1:]).desc())
            else:
                stmt = stmt.order_by(self._column(field).asc())
        if limit is not None:
            stmt = stmt.limit(limit)
        return stmt

    async def list(self, filters=None, order_by=None, limit=None) -> List[ModelT]:
        stmt = self._build_select(filters, order_by, limit)
        with self._io("list"):
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return list(result.scalars().all())

    async def find(self, record_id) -> Optional[ModelT]:
        with self._io("find"):
            async with self._session_factory() as session:
                return await session.get(self.model, record_id)

    async def create(self, record) -> ModelT:
        obj = self.model(**dict(record))
        with self._io("create"):
            async with self._session_factory() as session:
                session.add(obj)
                try:
                    await session.commit()
                except SQLAlchemyError:
                    await session.rollback()
                    raise
                await session.refresh(obj)
                return obj

    async def update(self, record_id, changes) -> Optional[ModelT]:
        with self._io("update"):
            async with self._session_factory() as session:
                obj = await session.get(self.model, record_id)
                if obj is None:
                    return None
                for field, value in dict(changes).items():
                    self._column(field)
                    setattr(obj, field, value)
                try:
                    await session.commit()
                except SQLAlchemyError:
                    await session.rollback()
                    raise
                await session.refresh(obj)
                return obj

    async def upsert_many(self, records, conflict_keys) -> int:
        """
        Insert-or-replace keyed by conflict_keys, in one statement.
        The last record for a given key wins, both within the batch and against stored rows.
        """
        conflict_keys = tuple(conflict_keys)
        deduped: Dict[tuple, Dict[str, Any]] = {}
        for record in records:
            row = dict(record)
            deduped[tuple(row[k] for k in conflict_keys)] = row
        if not deduped:
            return 0

        fields = sorted({field for row in deduped.values() for field in row})
        for field in fields:
            self._column(field)
        rows = [{field: row.get(field) for field in fields} for row in deduped.values()]

        with self._io("upsert_many"):
            async with self._session_factory() as session:
                insert = self._dialect_insert(session)
                stmt = insert(self.model.__table__).values(rows)
                replace = {
                    field: stmt.excluded[field]
                    for field in fields
                    if field not in conflict_keys and field != "id"
                }
                if "updated_at" in self.model.__table__.c:
                    replace["updated_at"] = func.now()
                if replace:
                    stmt = stmt.on_conflict_do_update(index_elements=list(conflict_keys), set_=replace)
                else:
                    stmt = stmt.on_conflict_do_nothing(index_elements=list(conflict_keys))
                try:
                    await session.execute(stmt)
                    await session.commit()
                except SQLAlchemyError:
                    await session.rollback()
                    raise
        return len(rows)

    async def delete(self, record_id) -> bool:
        stmt = sa_delete(self.model).where(self._column("id") == record_id)
        with self._io("delete"):
            async with self._session_factory() as session:
                try:
                    result = await session.execute(stmt)
                    await session.commit()
                except SQLAlchemyError:
                    await session.rollback()
                    raise
                return result.rowcount > 0

    @staticmethod
    def _dialect_insert(session: AsyncSession):
        dialect = session.bind.dialect.name
        if dialect == "postgresql":
            from sqlalchemy.dialects.postgresql import insert
        elif dialect == "sqlite":
            from sqlalchemy.dialects.sqlite import insert
        else:
            raise NotImplementedError(f"upsert is not supported on {dialect}")
        return insert
