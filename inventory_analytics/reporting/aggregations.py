"""
Aggregation Engine

Pure transformations from product, sale and category records into
dashboard metrics, trend series, and profitability rankings.

Every function takes already-filtered snapshots (store and/or date window
applied by the caller), never mutates them, and returns zero-valued or
empty aggregates for empty input. Sales whose product is not in the given
product set contribute no cost.

Two profit figures exist on purpose:
- dashboard_summary().total_profit sums the profit stored on each sale
- profitability_summary().total_profit is revenue minus cost_price x quantity
"""

from datetime import date, timedelta
from enum import Enum
from operator import attrgetter
from typing import List, Optional, Sequence

import polars as pl
import structlog

from inventory_analytics.database.records import Category, Product, Sale
from .frames import ORDER, categories_frame, products_frame, sales_frame
from .metrics import (
    CategoryProfitability,
    CategorySlice,
    DashboardSummary,
    ProductProfitability,
    ProductRevenue,
    ProfitabilitySummary,
    TrendBucket,
)

logger = structlog.get_logger(__name__)

DEFAULT_CATEGORY_COLOR = "#8884d8"


class SortKey(str, Enum):
    """Ranking keys for per-product profitability (always descending)"""
    PROFIT = "profit"
    MARGIN = "margin"
    REVENUE = "revenue"
    QUANTITY_SOLD = "quantity_sold"

    @classmethod
    def _missing_(cls, value):
        if value == "quantity":
            return cls.QUANTITY_SOLD
        return cls.PROFIT


def _margin(profit: pl.Expr, revenue: pl.Expr) -> pl.Expr:
    return pl.when(revenue > 0).then(profit / revenue * 100).otherwise(0.0)


def _sales_by_product(sales_df: pl.DataFrame) -> pl.DataFrame:
    return sales_df.group_by("product_id").agg(
        pl.col("quantity").sum().alias("quantity_sold"),
        pl.col("total_amount").sum().alias("revenue"),
    )


def _product_metrics(products_df: pl.DataFrame, sales_df: pl.DataFrame) -> pl.DataFrame:
    """Every product with its sales, cost, profit and stock valuation, in input order"""
    df = products_df.join(
        _sales_by_product(sales_df),
        left_on="id",
        right_on="product_id",
        how="left",
    )
    df = df.with_columns(
        pl.col("quantity_sold").fill_null(0),
        pl.col("revenue").fill_null(0.0),
    )
    df = df.with_columns(
        (pl.col("quantity_sold") * pl.col("cost_price")).alias("cost"),
    )
    df = df.with_columns(
        (pl.col("revenue") - pl.col("cost")).alias("profit"),
    )
    df = df.with_columns(
        _margin(pl.col("profit"), pl.col("revenue")).alias("margin"),
        pl.when(pl.col("quantity_sold") > 0)
        .then(pl.col("profit") / pl.col("quantity_sold"))
        .otherwise(0.0)
        .alias("profit_per_unit"),
        (pl.col("quantity") * pl.col("cost_price")).alias("inventory_value"),
        (pl.col("quantity") * (pl.col("selling_price") - pl.col("cost_price"))).alias("potential_profit"),
    )
    return df.sort(ORDER)


def _rows(df: pl.DataFrame, model):
    return [model.model_validate(row) for row in df.iter_rows(named=True)]


def dashboard_summary(
    products: Sequence[Product],
    sales: Sequence[Sale],
) -> DashboardSummary:
    """
    Headline metrics: product count, inventory value at cost, low-stock
    count (quantity at or below reorder level), and the total of the
    profit stored on each sale.
    """
    products_df = products_frame(products)
    sales_df = sales_frame(sales)

    stock = products_df.select(
        (pl.col("cost_price") * pl.col("quantity")).sum().alias("value"),
        (pl.col("quantity") <= pl.col("reorder_level")).sum().alias("low_stock"),
    ).row(0, named=True)

    return DashboardSummary(
        total_products=products_df.height,
        total_inventory_value=float(stock["value"] or 0.0),
        low_stock_count=int(stock["low_stock"] or 0),
        total_profit=float(sales_df["profit"].sum() or 0.0),
    )


def daily_trend(
    sales: Sequence[Sale],
    days: int = 7,
    today: Optional[date] = None,
) -> List[TrendBucket]:
    """
    Revenue and stored profit per calendar day.

    Produces exactly ``days`` buckets for the days ending ``today``
    (inclusive), oldest first. A sale lands in a day when its ``sale_date``
    starts with that day's ISO date; days without sales get zero buckets.
    """
    if days < 1:
        raise ValueError(f"days must be positive, got {days}")

    today = today or date.today()
    window = [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]

    per_day = (
        sales_frame(sales)
        .with_columns(pl.col("sale_date").str.slice(0, 10).alias("day"))
        .group_by("day")
        .agg(
            pl.col("total_amount").sum().alias("revenue"),
            pl.col("profit").sum().alias("profit"),
        )
    )

    buckets = (
        pl.DataFrame({"day": [d.isoformat() for d in window]}, schema={"day": pl.Utf8})
        .with_row_index(ORDER)
        .join(per_day, on="day", how="left")
        .sort(ORDER)
        .with_columns(
            pl.col("revenue").fill_null(0.0),
            pl.col("profit").fill_null(0.0),
        )
        .with_columns(_margin(pl.col("profit"), pl.col("revenue")).alias("margin"))
    )

    label_format = "%a" if days <= 7 else "%b {day}"
    return [
        TrendBucket(
            date=row["day"],
            label=day.strftime(label_format).format(day=day.day),
            revenue=row["revenue"],
            profit=row["profit"],
            margin=row["margin"],
        )
        for day, row in zip(window, buckets.iter_rows(named=True))
    ]


def category_distribution(
    products: Sequence[Product],
    categories: Sequence[Category],
    default_color: str = DEFAULT_CATEGORY_COLOR,
) -> List[CategorySlice]:
    """
    Stock quantity per category, in category order.

    Categories holding no stock are dropped, as are products whose
    category is missing or unknown.
    """
    quantities = products_frame(products).group_by("category_id").agg(
        pl.col("quantity").sum().alias("value"),
    )
    df = (
        categories_frame(categories)
        .join(quantities, left_on="id", right_on="category_id", how="left")
        .sort(ORDER)
        .with_columns(
            pl.col("value").fill_null(0),
            pl.col("color").fill_null(default_color),
        )
        .filter(pl.col("value") > 0)
    )
    return _rows(df, CategorySlice)


def top_products_by_revenue(
    products: Sequence[Product],
    sales: Sequence[Sale],
    limit: int = 5,
) -> List[ProductRevenue]:
    """Products ranked by sales revenue, ties kept in input order"""
    df = (
        _product_metrics(products_frame(products), sales_frame(sales))
        .rename({"quantity_sold": "sold_quantity"})
        .sort("revenue", descending=True, maintain_order=True)
        .head(limit)
    )
    return _rows(df, ProductRevenue)


def product_profitability(
    products: Sequence[Product],
    sales: Sequence[Sale],
) -> List[ProductProfitability]:
    """
    Per-product profitability with profit recomputed from cost price.

    A product is included when it has revenue or stock on hand.
    """
    df = _product_metrics(products_frame(products), sales_frame(sales)).filter(
        (pl.col("revenue") > 0) | (pl.col("quantity") > 0)
    )
    return _rows(df, ProductProfitability)


def profitability_summary(
    products: Sequence[Product],
    sales: Sequence[Sale],
) -> ProfitabilitySummary:
    """
    Revenue, cost, recomputed profit and average margin over a sale window,
    plus the best and worst product by profit among products with revenue.
    """
    products_df = products_frame(products)
    sales_df = sales_frame(sales)

    unit_costs = products_df.unique(subset="id", keep="first", maintain_order=True).select(
        "id", "cost_price"
    )
    totals = (
        sales_df.join(unit_costs, left_on="product_id", right_on="id", how="left")
        .select(
            pl.col("total_amount").sum().alias("revenue"),
            (pl.col("cost_price").fill_null(0.0) * pl.col("quantity")).sum().alias("cost"),
        )
        .row(0, named=True)
    )
    total_revenue = float(totals["revenue"] or 0.0)
    total_cost = float(totals["cost"] or 0.0)
    total_profit = total_revenue - total_cost
    logger.debug(
        "Computed profitability totals",
        sales=sales_df.height,
        revenue=total_revenue,
        cost=total_cost,
    )

    earning = _product_metrics(products_df, sales_df).filter(pl.col("revenue") > 0)
    top = _rows(earning.sort("profit", descending=True, maintain_order=True).head(1), ProductProfitability)
    worst = _rows(earning.sort("profit", maintain_order=True).head(1), ProductProfitability)

    return ProfitabilitySummary(
        total_revenue=total_revenue,
        total_cost=total_cost,
        total_profit=total_profit,
        average_margin=total_profit / total_revenue * 100 if total_revenue > 0 else 0.0,
        top_performer=top[0] if top else None,
        worst_performer=worst[0] if worst else None,
    )


def category_profitability(
    products: Sequence[Product],
    sales: Sequence[Sale],
    categories: Sequence[Category],
) -> List[CategoryProfitability]:
    """Per-product profitability rolled up by category; categories without revenue are dropped"""
    per_category = _product_metrics(products_frame(products), sales_frame(sales)).group_by(
        "category_id"
    ).agg(
        pl.col("revenue").sum(),
        pl.col("cost").sum(),
        pl.col("profit").sum(),
        pl.len().alias("products"),
    )
    df = (
        categories_frame(categories)
        .join(per_category, left_on="id", right_on="category_id", how="left")
        .sort(ORDER)
        .with_columns(
            pl.col("revenue").fill_null(0.0),
            pl.col("cost").fill_null(0.0),
            pl.col("profit").fill_null(0.0),
            pl.col("products").fill_null(0),
        )
        .filter(pl.col("revenue") > 0)
        .with_columns(_margin(pl.col("profit"), pl.col("revenue")).alias("margin"))
    )
    return _rows(df, CategoryProfitability)


def sort_profitability(
    rows: Sequence[ProductProfitability],
    sort_by: SortKey = SortKey.PROFIT,
) -> List[ProductProfitability]:
    """Order per-product rows by ``sort_by``, highest first, ties in input order"""
    key = SortKey(sort_by)
    return sorted(rows, key=attrgetter(key.value), reverse=True)
