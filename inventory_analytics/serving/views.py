"""
View Loaders

One coroutine per page: fetch the collections it needs in parallel through
the data access façade, then run the reporting engine over them. Nothing
is aggregated until every fetch has completed.
"""

import asyncio
from datetime import date, timedelta
from typing import List, Optional, Tuple

import structlog

from inventory_analytics.config.settings import ReportSettings
from inventory_analytics.database.facade import DataAccess, fetch_records
from inventory_analytics.database.records import Category, Product, Sale, Store
from inventory_analytics.reporting import aggregations, reports
from inventory_analytics.reporting.aggregations import SortKey
from inventory_analytics.reporting.metrics import DashboardData, ProfitabilityData, ReportData

logger = structlog.get_logger(__name__)


def _store_filter(store_id: Optional[str]) -> dict:
    return {"store_id": store_id}


async def fetch_inventory(
    data_access: DataAccess,
    store_id: Optional[str] = None,
) -> Tuple[List[Product], List[Sale], List[Category]]:
    """Products and sales of a store (all stores when None) plus every category"""
    filters = _store_filter(store_id)
    return await asyncio.gather(
        fetch_records(data_access, "products", filters),
        fetch_records(data_access, "sales", filters),
        fetch_records(data_access, "categories"),
    )


async def load_dashboard(
    data_access: DataAccess,
    store_id: Optional[str] = None,
    settings: Optional[ReportSettings] = None,
    today: Optional[date] = None,
) -> DashboardData:
    settings = settings or ReportSettings()
    products, sales, categories = await fetch_inventory(data_access, store_id)

    logger.debug("Building dashboard", store_id=store_id, products=len(products), sales=len(sales))
    return DashboardData(
        summary=aggregations.dashboard_summary(products, sales),
        sales_trend=aggregations.daily_trend(sales, days=settings.dashboard_trend_days, today=today),
        category_data=aggregations.category_distribution(
            products, categories, default_color=settings.default_category_color
        ),
        top_products=aggregations.top_products_by_revenue(
            products, sales, limit=settings.top_products_limit
        ),
    )


async def load_profitability(
    data_access: DataAccess,
    store_id: Optional[str] = None,
    days: Optional[int] = None,
    sort_by: SortKey = SortKey.PROFIT,
    settings: Optional[ReportSettings] = None,
    today: Optional[date] = None,
) -> ProfitabilityData:
    """
    Profitability over the last ``days`` days (sales dated on or after
    today minus ``days``), products ordered by ``sort_by``.
    """
    settings = settings or ReportSettings()
    today = today or date.today()
    days = days or settings.profitability_window_days

    products, all_sales, categories = await fetch_inventory(data_access, store_id)
    sales = reports.filter_sales_since(all_sales, today - timedelta(days=days))

    logger.debug("Building profitability", store_id=store_id, days=days, sales=len(sales))
    return ProfitabilityData(
        summary=aggregations.profitability_summary(products, sales),
        products=aggregations.sort_profitability(
            aggregations.product_profitability(products, sales), sort_by
        ),
        categories=aggregations.category_profitability(products, sales, categories),
        trends=aggregations.daily_trend(sales, days=settings.profitability_trend_days, today=today),
    )


async def load_reports(
    data_access: DataAccess,
    start: date,
    end: date,
    store_id: Optional[str] = None,
    today: Optional[date] = None,
) -> ReportData:
    """Report tables for sales dated within [start, end]"""
    filters = _store_filter(store_id)
    products, all_sales, categories, stores = await asyncio.gather(
        fetch_records(data_access, "products", filters),
        fetch_records(data_access, "sales", filters),
        fetch_records(data_access, "categories"),
        fetch_records(data_access, "stores"),
    )
    sales = reports.filter_sales_by_date_range(all_sales, start, end)

    logger.debug("Building reports", store_id=store_id, start=str(start), end=str(end), sales=len(sales))
    return ReportData(
        sales_report=reports.sales_report(sales, today=today),
        inventory_report=reports.inventory_report(products, categories, stores),
        profitability_report=reports.profitability_report(products, sales),
        financial_summary=reports.financial_summary(products, sales),
    )


async def load_stores(data_access: DataAccess) -> List[Store]:
    return await fetch_records(data_access, "stores")
