"""
Unit Tests - Report Builders and CSV Export
"""
from datetime import date
from io import StringIO

import polars as pl
import pytest

from inventory_analytics.database.records import Sale
from inventory_analytics.reporting.exporter import (
    CSV_MEDIA_TYPE,
    ReportType,
    export_report,
    report_filename,
    to_csv,
)
from inventory_analytics.reporting.formatting import StockStatus
from inventory_analytics.reporting.metrics import SalesReportRow
from inventory_analytics.reporting.reports import (
    filter_products,
    filter_sales_by_date_range,
    filter_sales_since,
    financial_summary,
    inventory_report,
    profitability_report,
    sales_report,
)

WINDOW_START = date(2025, 2, 8)
WINDOW_END = date(2025, 3, 10)


@pytest.fixture
def window_sales(sales):
    return filter_sales_by_date_range(sales, WINDOW_START, WINDOW_END)


class TestSaleFilters:
    """Tests for date window filtering"""

    def test_range_is_inclusive(self, sales):
        result = filter_sales_by_date_range(sales, date(2025, 3, 1), date(2025, 3, 9))

        assert {s.id for s in result} == {"sale-2", "sale-3", "sale-4", "sale-5"}

    def test_range_uses_date_part_of_timestamps(self, sales):
        result = filter_sales_by_date_range(sales, date(2025, 3, 9), date(2025, 3, 9))

        assert {s.id for s in result} == {"sale-2", "sale-5"}

    def test_range_excludes_undated(self):
        sales = [Sale(id="s1", total_amount=5.0)]

        assert filter_sales_by_date_range(sales, date(2025, 1, 1), date(2025, 12, 31)) == []

    def test_since(self, sales):
        result = filter_sales_since(sales, date(2025, 3, 7))

        assert [s.id for s in result] == ["sale-1", "sale-2", "sale-3", "sale-5"]


class TestFilterProducts:
    """Tests for filter_products"""

    def test_search_by_name(self, products):
        assert [p.id for p in filter_products(products, search="mouse")] == ["prod-2"]

    def test_search_by_sku(self, products):
        assert [p.id for p in filter_products(products, search="cha001")] == ["prod-3"]

    def test_category_filter(self, products):
        assert [p.id for p in filter_products(products, category_id="cat-1")] == ["prod-1"]

    def test_no_filters_keeps_everything(self, products):
        assert len(filter_products(products)) == len(products)

    def test_combined_filters(self, products):
        assert filter_products(products, search="laptop", category_id="cat-2") == []


class TestSalesReport:
    """Tests for sales_report"""

    def test_rows_per_day(self, window_sales, today):
        rows = sales_report(window_sales, today=today)

        assert [r.model_dump() for r in rows] == [
            {"date": "2025-03-01", "total_sales": 200.0, "total_profit": 75.0, "items_sold": 1, "transactions": 1},
            {"date": "2025-03-07", "total_sales": 25.0, "total_profit": 10.0, "items_sold": 1, "transactions": 1},
            {"date": "2025-03-09", "total_sales": 130.0, "total_profit": 52.0, "items_sold": 7, "transactions": 2},
            {"date": "2025-03-10", "total_sales": 2400.0, "total_profit": 800.0, "items_sold": 2, "transactions": 1},
        ]

    def test_undated_sales_counted_today(self, today):
        rows = sales_report([Sale(id="s1", quantity=2, total_amount=20.0, profit=4.0)], today=today)

        assert len(rows) == 1
        assert rows[0].date == today.isoformat()
        assert rows[0].items_sold == 2

    def test_empty(self, today):
        assert sales_report([], today=today) == []


class TestInventoryReport:
    """Tests for inventory_report"""

    def test_names_resolved(self, products, categories, stores):
        rows = {r.id: r for r in inventory_report(products, categories, stores)}

        assert rows["prod-1"].category_name == "Electronics"
        assert rows["prod-1"].store_name == "Downtown"
        assert rows["prod-4"].category_name == "Unknown"
        assert rows["prod-4"].store_name == "Mall"

    def test_valuation(self, products, categories, stores):
        laptop = inventory_report(products, categories, stores)[0]

        assert laptop.inventory_value == pytest.approx(12000.0)
        assert laptop.potential_revenue == pytest.approx(18000.0)
        assert laptop.potential_profit == pytest.approx(6000.0)

    def test_stock_status(self, products, categories, stores):
        statuses = [r.stock_status for r in inventory_report(products, categories, stores)]

        assert statuses == [
            StockStatus.IN_STOCK,
            StockStatus.LOW_STOCK,
            StockStatus.OUT_OF_STOCK,
            StockStatus.IN_STOCK,
        ]

    def test_unknown_store(self, products, categories):
        rows = inventory_report(products, categories, [])

        assert all(r.store_name == "Unknown" for r in rows)


class TestProfitabilityReport:
    """Tests for profitability_report"""

    def test_only_sold_products_by_profit(self, products, window_sales):
        rows = profitability_report(products, window_sales)

        assert [r.id for r in rows] == ["prod-1", "prod-3", "prod-2"]
        assert rows[0].profit == pytest.approx(800.0)
        assert rows[1].profit == pytest.approx(80.0)
        assert rows[2].profit == pytest.approx(50.0)


class TestFinancialSummary:
    """Tests for financial_summary"""

    def test_window_totals(self, products, window_sales):
        summary = financial_summary(products, window_sales)

        assert summary.total_sales == pytest.approx(2755.0)
        assert summary.total_cost == pytest.approx(1795.0)
        assert summary.gross_profit == pytest.approx(960.0)
        assert summary.net_profit == summary.gross_profit
        assert summary.profit_margin == pytest.approx(960.0 / 2755.0 * 100)

    def test_empty_window(self, products):
        summary = financial_summary(products, [])

        assert summary.total_sales == 0
        assert summary.profit_margin == 0


class TestCsvExport:
    """Tests for the CSV exporter"""

    def test_header_from_first_record(self):
        rows = [SalesReportRow(date="2025-03-10", total_sales=10.5, items_sold=2, transactions=1)]

        header = to_csv(rows).splitlines()[0]

        assert header == "date,total_sales,total_profit,items_sold,transactions"

    def test_one_line_per_record(self, window_sales, today):
        rows = sales_report(window_sales, today=today)

        assert len(to_csv(rows).splitlines()) == len(rows) + 1

    def test_empty_records(self):
        assert to_csv([]) == ""

    def test_values_with_delimiters_parse_back(self):
        """Commas, quotes and newlines survive a read back"""
        records = [
            {"name": 'Chair, "Deluxe"', "notes": "line one\nline two", "qty": 3},
            {"name": "Desk", "notes": "plain", "qty": 1},
        ]

        parsed = pl.read_csv(StringIO(to_csv(records)), infer_schema_length=0)

        assert parsed.columns == ["name", "notes", "qty"]
        assert parsed["name"].to_list() == ['Chair, "Deluxe"', "Desk"]
        assert parsed["notes"].to_list() == ["line one\nline two", "plain"]
        assert parsed["qty"].to_list() == ["3", "1"]

    def test_empty_values_written_as_empty_fields(self):
        content = to_csv([{"a": "", "b": None, "c": 1.0}, {"a": "x", "b": "y", "c": 2.0}])

        assert content == "a,b,c\n,,1.0\nx,y,2.0\n"

    def test_inventory_export_splits_back_by_hand(self, products, categories, stores):
        """Without embedded delimiters, splitting on newlines and commas recovers every cell"""
        rows = inventory_report(products, categories, stores)

        lines = to_csv(rows).splitlines()
        header = lines[0].split(",")
        cells = [dict(zip(header, line.split(","))) for line in lines[1:]]

        assert all(len(line.split(",")) == len(header) for line in lines)
        assert [c["name"] for c in cells] == [r.name for r in rows]
        assert all('""' not in line for line in lines)

    def test_enums_written_as_values(self, products, categories, stores):
        content = to_csv(inventory_report(products, categories, stores))

        assert StockStatus.OUT_OF_STOCK.value in content
        assert "StockStatus" not in content

    def test_filename(self):
        name = report_filename(ReportType.INVENTORY, date(2025, 1, 1), date(2025, 1, 31))

        assert name == "inventory_report_2025-01-01_to_2025-01-31.csv"

    def test_unknown_report_type_falls_back_to_sales(self):
        assert ReportType("bogus") == ReportType.SALES

    def test_export_report(self, window_sales, today):
        report = export_report(sales_report(window_sales, today=today), "sales", WINDOW_START, WINDOW_END)

        assert report.filename == "sales_report_2025-02-08_to_2025-03-10.csv"
        assert report.media_type == CSV_MEDIA_TYPE
        assert report.content.startswith("date,")
