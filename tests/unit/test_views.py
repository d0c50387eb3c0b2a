"""
Unit Tests - View Loaders
"""
from datetime import date

import pytest

from inventory_analytics.config.settings import ReportSettings
from inventory_analytics.exceptions import DataAccessError
from inventory_analytics.reporting.aggregations import SortKey
from inventory_analytics.serving.views import (
    fetch_inventory,
    load_dashboard,
    load_profitability,
    load_reports,
)


class TestFetchInventory:
    """Tests for fetch_inventory"""

    async def test_store_filter_applied(self, fake_data_access):
        products, sales, categories = await fetch_inventory(fake_data_access, "store-2")

        assert [p.id for p in products] == ["prod-3", "prod-4"]
        assert {s.id for s in sales} == {"sale-4", "sale-5"}
        assert len(categories) == 3

    async def test_all_stores(self, fake_data_access):
        products, sales, _ = await fetch_inventory(fake_data_access, None)

        assert len(products) == 4
        assert len(sales) == 6
        assert ("products", {}) in fake_data_access.fetch_calls


class TestLoadDashboard:
    """Tests for load_dashboard"""

    async def test_all_parts(self, fake_data_access, today):
        data = await load_dashboard(fake_data_access, today=today)

        assert data.summary.total_products == 4
        assert data.summary.total_profit == pytest.approx(1287.0)
        assert len(data.sales_trend) == 7
        assert data.sales_trend[-1].revenue == pytest.approx(2400.0)
        assert [c.name for c in data.category_data] == ["Electronics", "Accessories"]
        assert data.top_products[0].id == "prod-1"

    async def test_settings_respected(self, fake_data_access, today):
        settings = ReportSettings(dashboard_trend_days=3, top_products_limit=2, default_category_color="#000000")

        data = await load_dashboard(fake_data_access, settings=settings, today=today)

        assert len(data.sales_trend) == 3
        assert len(data.top_products) == 2
        assert data.category_data[1].color == "#000000"

    async def test_single_store(self, fake_data_access, today):
        data = await load_dashboard(fake_data_access, "store-1", today=today)

        assert data.summary.total_products == 2
        assert data.summary.total_profit == pytest.approx(1200.0)

    async def test_fetch_failure_propagates(self, fake_data_access, today):
        fake_data_access.fail_on["fetch"] = "sales"

        with pytest.raises(DataAccessError):
            await load_dashboard(fake_data_access, today=today)


class TestLoadProfitability:
    """Tests for load_profitability"""

    async def test_window_applied(self, fake_data_access, today):
        data = await load_profitability(fake_data_access, days=30, today=today)

        assert data.summary.total_revenue == pytest.approx(2755.0)
        assert data.summary.total_cost == pytest.approx(1795.0)
        assert len(data.trends) == 30

    async def test_short_window(self, fake_data_access, today):
        data = await load_profitability(fake_data_access, days=7, today=today)

        # sale-4 falls nine days back
        assert data.summary.total_revenue == pytest.approx(2555.0)

    async def test_sorted(self, fake_data_access, today):
        data = await load_profitability(fake_data_access, days=30, sort_by=SortKey.QUANTITY_SOLD, today=today)

        assert [p.id for p in data.products][:2] == ["prod-2", "prod-1"]

    async def test_default_window(self, fake_data_access, today):
        data = await load_profitability(fake_data_access, today=today)

        assert data.summary.total_revenue == pytest.approx(2755.0)


class TestLoadReports:
    """Tests for load_reports"""

    async def test_report_tables(self, fake_data_access, today):
        data = await load_reports(fake_data_access, date(2025, 2, 8), today, today=today)

        assert [r.date for r in data.sales_report] == ["2025-03-01", "2025-03-07", "2025-03-09", "2025-03-10"]
        assert len(data.inventory_report) == 4
        assert [r.id for r in data.profitability_report] == ["prod-1", "prod-3", "prod-2"]
        assert data.financial_summary.gross_profit == pytest.approx(960.0)

    async def test_store_scoped(self, fake_data_access, today):
        data = await load_reports(fake_data_access, date(2025, 2, 8), today, store_id="store-1", today=today)

        assert {r.store_name for r in data.inventory_report} == {"Downtown"}
        assert data.financial_summary.total_sales == pytest.approx(2525.0)

    async def test_empty_range(self, fake_data_access, today):
        data = await load_reports(fake_data_access, date(2024, 1, 1), date(2024, 1, 31), today=today)

        assert data.sales_report == []
        assert data.profitability_report == []
        assert data.financial_summary.total_sales == 0
        assert len(data.inventory_report) == 4
