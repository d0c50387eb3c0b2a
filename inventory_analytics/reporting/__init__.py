"""
Reporting Module
"""
from .aggregations import (
    SortKey,
    category_distribution,
    category_profitability,
    daily_trend,
    dashboard_summary,
    product_profitability,
    profitability_summary,
    sort_profitability,
    top_products_by_revenue,
)
from .exporter import ExportedReport, ReportType, export_report, report_filename, to_csv
from .formatting import (
    StockStatus,
    calculate_profit,
    calculate_profit_margin,
    classify_stock_status,
    format_currency,
    format_date,
    format_number,
)
from .reports import (
    filter_products,
    filter_sales_by_date_range,
    filter_sales_since,
    financial_summary,
    inventory_report,
    profitability_report,
    sales_report,
)

__all__ = [
    "SortKey",
    "category_distribution",
    "category_profitability",
    "daily_trend",
    "dashboard_summary",
    "product_profitability",
    "profitability_summary",
    "sort_profitability",
    "top_products_by_revenue",
    "ExportedReport",
    "ReportType",
    "export_report",
    "report_filename",
    "to_csv",
    "StockStatus",
    "calculate_profit",
    "calculate_profit_margin",
    "classify_stock_status",
    "format_currency",
    "format_date",
    "format_number",
    "filter_products",
    "filter_sales_by_date_range",
    "filter_sales_since",
    "financial_summary",
    "inventory_report",
    "profitability_report",
    "sales_report",
]
