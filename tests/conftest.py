"""
Test Suite Configuration
"""
from datetime import date, timedelta
from typing import Any, Dict, List, Mapping, Optional
import copy
import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from inventory_analytics.config import Settings
from inventory_analytics.database.facade import DataAccess, active_filters
from inventory_analytics.database.models import Base
from inventory_analytics.database.records import Category, Product, Sale, Store
from inventory_analytics.exceptions import DataAccessError
from inventory_analytics.main import create_app
from inventory_analytics.serving.api.dependencies import get_data_access

TODAY = date(2025, 3, 10)


def _day(offset: int) -> str:
    return (TODAY - timedelta(days=offset)).isoformat()


class FakeDataAccess(DataAccess):
    """
    In-memory façade for tests.

    ``fail_on`` maps an operation ("fetch", "insert", "update") to a
    collection name whose calls raise DataAccessError; ``fail_after``
    lets that many inserts succeed before failing.
    """

    def __init__(self, collections: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        self.collections: Dict[str, List[Dict[str, Any]]] = {
            "stores": [],
            "categories": [],
            "products": [],
            "sales": [],
        }
        for name, rows in (collections or {}).items():
            self.collections[name] = [dict(row) for row in rows]
        self.fail_on: Dict[str, str] = {}
        self.fail_after: Optional[int] = None
        self.fetch_calls: List[tuple] = []
        self.inserted: List[tuple] = []

    def _maybe_fail(self, operation: str, collection: str) -> None:
        if self.fail_on.get(operation) == collection:
            raise DataAccessError(f"{operation} on {collection} rejected", collection)

    async def fetch(self, collection, filters=None):
        self._maybe_fail("fetch", collection)
        applied = active_filters(filters)
        self.fetch_calls.append((collection, applied))
        return [
            copy.deepcopy(row)
            for row in self.collections[collection]
            if all(row.get(key) == value for key, value in applied.items())
        ]

    async def insert(self, collection, record: Mapping[str, Any]):
        if self.fail_after is not None and len(self.inserted) >= self.fail_after:
            raise DataAccessError(f"duplicate key value violates unique constraint on {collection}", collection)
        self._maybe_fail("insert", collection)
        stored = {"id": str(uuid.uuid4()), **record}
        self.collections[collection].append(stored)
        self.inserted.append((collection, stored))
        return dict(stored)

    async def update(self, collection, record_id, changes):
        self._maybe_fail("update", collection)
        for row in self.collections[collection]:
            if row["id"] == record_id:
                row.update(changes)
                return dict(row)
        raise DataAccessError(f"{collection} record {record_id} not found", collection)


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(
        APP_ENV="testing",
        DEBUG=True,
    )


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def store_rows() -> List[Dict[str, Any]]:
    return [
        {"id": "store-1", "name": "Downtown"},
        {"id": "store-2", "name": "Mall"},
    ]


@pytest.fixture
def category_rows() -> List[Dict[str, Any]]:
    return [
        {"id": "cat-1", "name": "Electronics", "color": "#0088FE"},
        {"id": "cat-2", "name": "Accessories", "color": None},
        {"id": "cat-3", "name": "Furniture", "color": "#FF8042"},
    ]


@pytest.fixture
def product_rows() -> List[Dict[str, Any]]:
    return [
        {
            "id": "prod-1", "name": "Laptop Computer", "sku": "LAP001",
            "category_id": "cat-1", "store_id": "store-1",
            "cost_price": 800.0, "selling_price": 1200.0,
            "quantity": 15, "reorder_level": 5, "description": "High-performance laptop",
        },
        {
            "id": "prod-2", "name": "Wireless Mouse", "sku": "MOU001",
            "category_id": "cat-2", "store_id": "store-1",
            "cost_price": 15.0, "selling_price": 25.0,
            "quantity": 8, "reorder_level": 10, "description": None,
        },
        {
            "id": "prod-3", "name": "Office Chair", "sku": "CHA001",
            "category_id": "cat-3", "store_id": "store-2",
            "cost_price": 120.0, "selling_price": 200.0,
            "quantity": 0, "reorder_level": 2, "description": None,
        },
        {
            "id": "prod-4", "name": "USB Cable", "sku": "USB001",
            "category_id": None, "store_id": "store-2",
            "cost_price": 5.0, "selling_price": 12.0,
            "quantity": 100, "reorder_level": 25, "description": None,
        },
    ]


@pytest.fixture
def sale_rows() -> List[Dict[str, Any]]:
    """Sales over the ten days before TODAY, plus one well outside the dashboard window"""
    return [
        {"id": "sale-1", "product_id": "prod-1", "store_id": "store-1", "quantity": 2,
         "total_amount": 2400.0, "profit": 800.0, "sale_date": _day(0)},
        {"id": "sale-2", "product_id": "prod-2", "store_id": "store-1", "quantity": 4,
         "total_amount": 100.0, "profit": 40.0, "sale_date": _day(1) + "T14:30:00"},
        {"id": "sale-3", "product_id": "prod-2", "store_id": "store-1", "quantity": 1,
         "total_amount": 25.0, "profit": 10.0, "sale_date": _day(3)},
        {"id": "sale-4", "product_id": "prod-3", "store_id": "store-2", "quantity": 1,
         "total_amount": 200.0, "profit": 75.0, "sale_date": _day(9)},
        {"id": "sale-5", "product_id": "prod-missing", "store_id": "store-2", "quantity": 3,
         "total_amount": 30.0, "profit": 12.0, "sale_date": _day(1)},
        {"id": "sale-6", "product_id": "prod-1", "store_id": "store-1", "quantity": 1,
         "total_amount": 1150.0, "profit": 350.0, "sale_date": _day(45)},
    ]


@pytest.fixture
def stores(store_rows) -> List[Store]:
    return [Store.model_validate(row) for row in store_rows]


@pytest.fixture
def categories(category_rows) -> List[Category]:
    return [Category.model_validate(row) for row in category_rows]


@pytest.fixture
def products(product_rows) -> List[Product]:
    return [Product.model_validate(row) for row in product_rows]


@pytest.fixture
def sales(sale_rows) -> List[Sale]:
    return [Sale.model_validate(row) for row in sale_rows]


@pytest.fixture
def fake_data_access(store_rows, category_rows, product_rows, sale_rows) -> FakeDataAccess:
    return FakeDataAccess({
        "stores": store_rows,
        "categories": category_rows,
        "products": product_rows,
        "sales": sale_rows,
    })


@pytest.fixture
def app(fake_data_access):
    """Fresh application wired to the in-memory façade; lifespan is not run"""
    application = create_app()
    application.dependency_overrides[get_data_access] = lambda: fake_data_access
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
async def session_factory():
    """In-memory SQLite schema shared by every session of one test"""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
def make_data_access():
    """Build an in-memory façade from collection rows"""
    return FakeDataAccess
