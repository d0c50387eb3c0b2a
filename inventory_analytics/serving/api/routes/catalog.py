"""
Catalog API Endpoints

Stores, categories and products. Product rows carry their stock status
and margin as shown on the inventory page.
"""

from typing import List, Optional, Union

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from inventory_analytics.database.facade import DataAccess, fetch_records
from inventory_analytics.database.records import Category, Product, Store
from inventory_analytics.reporting.formatting import (
    StockStatus,
    calculate_profit_margin,
    classify_stock_status,
)
from inventory_analytics.reporting.reports import filter_products
from inventory_analytics.serving.session import DashboardSession
from ..dependencies import get_data_access, get_session

router = APIRouter()


class ProductCreate(BaseModel):
    """New product"""
    name: str = Field(min_length=1)
    sku: str = Field(min_length=1)
    category_id: Optional[str] = None
    store_id: Optional[str] = None
    cost_price: float = Field(default=0.0, ge=0)
    selling_price: float = Field(default=0.0, ge=0)
    quantity: int = Field(default=0, ge=0)
    reorder_level: int = Field(default=10, ge=0)
    description: Optional[str] = None


class ProductUpdate(BaseModel):
    """Partial product update; only fields sent are changed"""
    name: Optional[str] = Field(default=None, min_length=1)
    sku: Optional[str] = Field(default=None, min_length=1)
    category_id: Optional[str] = None
    store_id: Optional[str] = None
    cost_price: Optional[float] = Field(default=None, ge=0)
    selling_price: Optional[float] = Field(default=None, ge=0)
    quantity: Optional[int] = Field(default=None, ge=0)
    reorder_level: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = None


class ProductRow(Product):
    """Product as listed on the inventory page"""
    stock_status: StockStatus
    margin: Union[str, int]


class ProductListResponse(BaseModel):
    items: List[ProductRow]
    total: int


def _product_row(product: Product) -> ProductRow:
    return ProductRow(
        **product.model_dump(),
        stock_status=classify_stock_status(product.quantity, product.reorder_level),
        margin=calculate_profit_margin(product.selling_price, product.cost_price),
    )


@router.get("/stores", response_model=List[Store])
async def list_stores(
    refresh: bool = False,
    data_access: DataAccess = Depends(get_data_access),
    session: DashboardSession = Depends(get_session),
) -> List[Store]:
    """Stores available for selection, cached per session unless ``refresh`` is set"""
    if refresh:
        return await session.refresh_stores(data_access)
    return await session.get_stores(data_access)


@router.get("/categories", response_model=List[Category])
async def list_categories(
    data_access: DataAccess = Depends(get_data_access),
) -> List[Category]:
    return await fetch_records(data_access, "categories")


@router.get("/products", response_model=ProductListResponse)
async def list_products(
    store_id: Optional[str] = None,
    search: Optional[str] = None,
    category_id: Optional[str] = None,
    data_access: DataAccess = Depends(get_data_access),
) -> ProductListResponse:
    """
    List products of a store (all stores by default).

    ``search`` matches name or SKU case-insensitively; ``category_id``
    restricts to one category.
    """
    products = await fetch_records(data_access, "products", {"store_id": store_id})
    items = [_product_row(p) for p in filter_products(products, search, category_id)]
    return ProductListResponse(items=items, total=len(items))


@router.post("/products", response_model=Product, status_code=201)
async def create_product(
    product: ProductCreate,
    data_access: DataAccess = Depends(get_data_access),
) -> Product:
    stored = await data_access.insert("products", product.model_dump(exclude_none=True))
    return Product.model_validate(stored)


@router.patch("/products/{product_id}", response_model=Product)
async def update_product(
    product_id: str,
    changes: ProductUpdate,
    data_access: DataAccess = Depends(get_data_access),
) -> Product:
    stored = await data_access.update("products", product_id, changes.model_dump(exclude_unset=True))
    return Product.model_validate(stored)
