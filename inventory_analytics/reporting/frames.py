"""
Record Frames

Builds Polars DataFrames from typed records with a fixed schema, so empty
inputs still produce correctly typed (empty) frames. Every frame carries
an ``_order`` column holding the input position; aggregations sort on it
to keep results in input order.
"""

from typing import Dict, Sequence

import polars as pl

from inventory_analytics.database.records import Category, Product, Sale, Store

ORDER = "_order"

PRODUCT_SCHEMA: Dict[str, pl.DataType] = {
    "id": pl.Utf8,
    "name": pl.Utf8,
    "sku": pl.Utf8,
    "category_id": pl.Utf8,
    "store_id": pl.Utf8,
    "cost_price": pl.Float64,
    "selling_price": pl.Float64,
    "quantity": pl.Int64,
    "reorder_level": pl.Int64,
    "description": pl.Utf8,
}

SALE_SCHEMA: Dict[str, pl.DataType] = {
    "id": pl.Utf8,
    "product_id": pl.Utf8,
    "store_id": pl.Utf8,
    "quantity": pl.Int64,
    "total_amount": pl.Float64,
    "profit": pl.Float64,
    "sale_date": pl.Utf8,
}

CATEGORY_SCHEMA: Dict[str, pl.DataType] = {
    "id": pl.Utf8,
    "name": pl.Utf8,
    "color": pl.Utf8,
}

STORE_SCHEMA: Dict[str, pl.DataType] = {
    "id": pl.Utf8,
    "name": pl.Utf8,
}


def _frame(records: Sequence, schema: Dict[str, pl.DataType]) -> pl.DataFrame:
    columns = {name: [getattr(record, name) for record in records] for name in schema}
    return pl.DataFrame(columns, schema=schema).with_row_index(ORDER)


def products_frame(products: Sequence[Product]) -> pl.DataFrame:
    return _frame(products, PRODUCT_SCHEMA)


def sales_frame(sales: Sequence[Sale]) -> pl.DataFrame:
    return _frame(sales, SALE_SCHEMA)


def categories_frame(categories: Sequence[Category]) -> pl.DataFrame:
    """Categories keyed by id; the first occurrence of a duplicate id wins"""
    return _frame(categories, CATEGORY_SCHEMA).unique(subset="id", keep="first", maintain_order=True)


def stores_frame(stores: Sequence[Store]) -> pl.DataFrame:
    """Stores keyed by id; the first occurrence of a duplicate id wins"""
    return _frame(stores, STORE_SCHEMA).unique(subset="id", keep="first", maintain_order=True)
