"""
Data Access Façade

Uniform fetch/insert/update operations against named record collections
(products, sales, categories, stores). Filters are exact-match equality;
filter values that are None or empty are not applied. Every failure is
raised as DataAccessError.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Type

import structlog
from pydantic import ValidationError
from sqlalchemy import Date, inspect as sa_inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from inventory_analytics.exceptions import DataAccessError, RecordValidationError
from .connection import get_session_factory, session_scope
from .models import Base, MODELS_BY_COLLECTION
from .records import RECORD_TYPES, InventoryRecord

logger = structlog.get_logger(__name__)

Record = Dict[str, Any]


def active_filters(filters: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Drop filters whose value is None or an empty string"""
    return {
        key: value
        for key, value in (filters or {}).items()
        if value is not None and value != ""
    }


class DataAccess(ABC):
    """Backend-agnostic record store"""

    @abstractmethod
    async def fetch(
        self,
        collection: str,
        filters: Optional[Mapping[str, Any]] = None,
    ) -> List[Record]:
        """Return all records of ``collection`` matching every filter"""

    @abstractmethod
    async def insert(self, collection: str, record: Mapping[str, Any]) -> Record:
        """Insert one record and return it as stored"""

    @abstractmethod
    async def update(
        self,
        collection: str,
        record_id: Any,
        changes: Mapping[str, Any],
    ) -> Record:
        """Apply a partial update to one record and return it as stored"""


async def fetch_records(
    data_access: DataAccess,
    collection: str,
    filters: Optional[Mapping[str, Any]] = None,
) -> List[InventoryRecord]:
    """
    Fetch a collection and validate every row into its typed record.

    Raises:
        DataAccessError: The backend read failed
        RecordValidationError: A row is missing a required field (its id)
    """
    record_type = RECORD_TYPES[collection]
    rows = await data_access.fetch(collection, filters)
    try:
        return [record_type.model_validate(row) for row in rows]
    except ValidationError as e:
        logger.error("Invalid record from backend", collection=collection, error=str(e))
        raise RecordValidationError(str(e), collection) from e


class SqlAlchemyDataAccess(DataAccess):
    """
    Façade over the SQLAlchemy async session.

    Example:
        data_access = SqlAlchemyDataAccess()
        products = await data_access.fetch("products", {"store_id": store_id})
    """

    def __init__(
        self,
        session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
    ):
        self._session_factory = session_factory

    def _factory(self) -> async_sessionmaker[AsyncSession]:
        return self._session_factory or get_session_factory()

    def _model(self, collection: str) -> Type[Base]:
        model = MODELS_BY_COLLECTION.get(collection)
        if model is None:
            raise DataAccessError(f"Unknown collection: {collection}", collection)
        return model

    @staticmethod
    def _to_record(obj: Base) -> Record:
        return {
            attr.key: getattr(obj, attr.key)
            for attr in sa_inspect(obj).mapper.column_attrs
        }

    @staticmethod
    def _coerce_values(model: Type[Base], collection: str, record: Mapping[str, Any]) -> Record:
        """Match incoming values to column types, rejecting unknown fields"""
        columns = sa_inspect(model).columns
        values = {}
        for key, value in record.items():
            if key not in columns:
                raise DataAccessError(f"Unknown field '{key}' for {collection}", collection)
            if isinstance(columns[key].type, Date) and isinstance(value, str):
                try:
                    value = date.fromisoformat(value[:10])
                except ValueError as e:
                    raise DataAccessError(f"Invalid date for '{key}': {value}", collection) from e
            values[key] = value
        return values

    async def fetch(
        self,
        collection: str,
        filters: Optional[Mapping[str, Any]] = None,
    ) -> List[Record]:
        model = self._model(collection)
        stmt = select(model)
        for key, value in active_filters(filters).items():
            column = getattr(model, key, None)
            if column is None:
                raise DataAccessError(f"Unknown filter field '{key}' for {collection}", collection)
            stmt = stmt.where(column == value)
        stmt = stmt.order_by(model.created_at)

        try:
            async with session_scope(self._factory()) as db:
                result = await db.execute(stmt)
                rows = [self._to_record(obj) for obj in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Fetch failed", collection=collection, error=str(e))
            raise DataAccessError(str(e), collection) from e

        logger.debug("Fetched records", collection=collection, count=len(rows))
        return rows

    async def insert(self, collection: str, record: Mapping[str, Any]) -> Record:
        model = self._model(collection)
        values = self._coerce_values(model, collection, record)

        try:
            async with session_scope(self._factory()) as db:
                obj = model(**values)
                db.add(obj)
                await db.flush()
                await db.refresh(obj)
                stored = self._to_record(obj)
        except SQLAlchemyError as e:
            logger.error("Insert failed", collection=collection, error=str(e))
            raise DataAccessError(str(e), collection) from e

        return stored

    async def update(
        self,
        collection: str,
        record_id: Any,
        changes: Mapping[str, Any],
    ) -> Record:
        model = self._model(collection)
        values = self._coerce_values(model, collection, changes)

        try:
            async with session_scope(self._factory()) as db:
                obj = await db.get(model, str(record_id))
                if obj is None:
                    raise DataAccessError(f"{collection} record {record_id} not found", collection)
                for key, value in values.items():
                    setattr(obj, key, value)
                await db.flush()
                await db.refresh(obj)
                stored = self._to_record(obj)
        except SQLAlchemyError as e:
            logger.error("Update failed", collection=collection, record_id=str(record_id), error=str(e))
            raise DataAccessError(str(e), collection) from e

        return stored
