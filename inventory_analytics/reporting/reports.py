"""
Report Builders

Sale windows and the flat report tables shown on the reports page and
offered for export: sales by day, inventory by product, profitability by
product, and the financial summary.
"""

from datetime import date
from typing import List, Optional, Sequence

import polars as pl
import structlog

from inventory_analytics.database.records import Category, Product, Sale, Store
from .aggregations import product_profitability, profitability_summary
from .formatting import classify_stock_status
from .frames import ORDER, categories_frame, products_frame, sales_frame, stores_frame
from .metrics import (
    FinancialSummary,
    InventoryReportRow,
    ProductProfitability,
    SalesReportRow,
)

logger = structlog.get_logger(__name__)


def filter_sales_by_date_range(sales: Sequence[Sale], start: date, end: date) -> List[Sale]:
    """Sales dated within [start, end]; undated sales are excluded"""
    lower, upper = start.isoformat(), end.isoformat()
    return [sale for sale in sales if sale.day and lower <= sale.day <= upper]


def filter_sales_since(sales: Sequence[Sale], start: date) -> List[Sale]:
    """Sales dated on or after ``start``"""
    lower = start.isoformat()
    return [sale for sale in sales if sale.day and sale.day >= lower]


def filter_products(
    products: Sequence[Product],
    search: Optional[str] = None,
    category_id: Optional[str] = None,
) -> List[Product]:
    """
    Products whose name or SKU contains ``search`` (case-insensitive) and,
    when given, whose category is ``category_id``.
    """
    needle = (search or "").lower()
    return [
        product
        for product in products
        if (needle in product.name.lower() or needle in product.sku.lower())
        and (not category_id or product.category_id == category_id)
    ]


def sales_report(sales: Sequence[Sale], today: Optional[date] = None) -> List[SalesReportRow]:
    """
    Sales aggregated per day, oldest first.

    Sales without a date are counted on ``today``.
    """
    fallback = (today or date.today()).isoformat()
    df = (
        sales_frame(sales)
        .with_columns(
            pl.col("sale_date").str.slice(0, 10).fill_null(fallback).alias("date"),
        )
        .group_by("date")
        .agg(
            pl.col("total_amount").sum().alias("total_sales"),
            pl.col("profit").sum().alias("total_profit"),
            pl.col("quantity").sum().alias("items_sold"),
            pl.len().alias("transactions"),
        )
        .sort("date")
    )
    return [SalesReportRow.model_validate(row) for row in df.iter_rows(named=True)]


def inventory_report(
    products: Sequence[Product],
    categories: Sequence[Category],
    stores: Sequence[Store],
) -> List[InventoryReportRow]:
    """Every product with its category and store names and stock valuation"""
    category_names = categories_frame(categories).select(
        pl.col("id"), pl.col("name").alias("category_name")
    )
    store_names = stores_frame(stores).select(
        pl.col("id"), pl.col("name").alias("store_name")
    )
    df = (
        products_frame(products)
        .join(category_names, left_on="category_id", right_on="id", how="left")
        .join(store_names, left_on="store_id", right_on="id", how="left")
        .sort(ORDER)
        .with_columns(
            pl.col("category_name").fill_null("Unknown"),
            pl.col("store_name").fill_null("Unknown"),
            (pl.col("quantity") * pl.col("cost_price")).alias("inventory_value"),
            (pl.col("quantity") * pl.col("selling_price")).alias("potential_revenue"),
            (pl.col("quantity") * (pl.col("selling_price") - pl.col("cost_price"))).alias("potential_profit"),
        )
    )
    return [
        InventoryReportRow.model_validate(
            {**row, "stock_status": classify_stock_status(row["quantity"], row["reorder_level"])}
        )
        for row in df.iter_rows(named=True)
    ]


def profitability_report(
    products: Sequence[Product],
    sales: Sequence[Sale],
) -> List[ProductProfitability]:
    """Products that sold in the window, most profitable first"""
    rows = [row for row in product_profitability(products, sales) if row.quantity_sold > 0]
    return sorted(rows, key=lambda row: row.profit, reverse=True)


def financial_summary(
    products: Sequence[Product],
    sales: Sequence[Sale],
) -> FinancialSummary:
    """
    Revenue, cost and gross profit of the sales in the window.

    Cost is the matched product's cost price times units sold; sales of
    products outside ``products`` contribute no cost. Net profit equals
    gross profit as no expenses are tracked.
    """
    totals = profitability_summary(products, sales)

    logger.debug("Built financial summary", sales=len(sales), total_sales=totals.total_revenue)
    return FinancialSummary(
        total_sales=totals.total_revenue,
        total_cost=totals.total_cost,
        gross_profit=totals.total_profit,
        net_profit=totals.total_profit,
        profit_margin=totals.average_margin,
    )
