"""
Aggregate Shapes

Flat result records produced by the reporting engine. Field order is the
column order used when a collection of these is exported.
"""

from typing import List, Optional

from pydantic import BaseModel

from .formatting import StockStatus


class DashboardSummary(BaseModel):
    """Headline dashboard metrics"""
    total_products: int = 0
    total_inventory_value: float = 0.0
    low_stock_count: int = 0
    total_profit: float = 0.0  # sum of the profit stored on each sale


class TrendBucket(BaseModel):
    """One calendar day of a trend series"""
    date: str
    label: str
    revenue: float = 0.0
    profit: float = 0.0
    margin: float = 0.0


class CategorySlice(BaseModel):
    """Stock quantity held in one category"""
    name: str
    value: int
    color: Optional[str] = None


class ProductFields(BaseModel):
    """Product columns carried into per-product aggregates"""
    id: str
    name: str = ""
    sku: str = ""
    category_id: Optional[str] = None
    store_id: Optional[str] = None
    cost_price: float = 0.0
    selling_price: float = 0.0
    quantity: int = 0
    reorder_level: int = 0
    description: Optional[str] = None


class ProductRevenue(ProductFields):
    """Product with its units sold and revenue"""
    sold_quantity: int = 0
    revenue: float = 0.0


class ProductProfitability(ProductFields):
    """Per-product profitability, profit recomputed from cost price"""
    quantity_sold: int = 0
    revenue: float = 0.0
    cost: float = 0.0
    profit: float = 0.0
    margin: float = 0.0
    profit_per_unit: float = 0.0
    inventory_value: float = 0.0
    potential_profit: float = 0.0


class ProfitabilitySummary(BaseModel):
    """Totals over a sale window with profit recomputed from cost price"""
    total_revenue: float = 0.0
    total_cost: float = 0.0
    total_profit: float = 0.0
    average_margin: float = 0.0
    top_performer: Optional[ProductProfitability] = None
    worst_performer: Optional[ProductProfitability] = None


class CategoryProfitability(BaseModel):
    """Per-product profitability rolled up to a category"""
    id: str
    name: str = ""
    color: Optional[str] = None
    revenue: float = 0.0
    cost: float = 0.0
    profit: float = 0.0
    products: int = 0
    margin: float = 0.0


class SalesReportRow(BaseModel):
    """Sales of one day in the reporting window"""
    date: str
    total_sales: float = 0.0
    total_profit: float = 0.0
    items_sold: int = 0
    transactions: int = 0


class InventoryReportRow(ProductFields):
    """Product with its category/store names and stock valuation"""
    category_name: str = "Unknown"
    store_name: str = "Unknown"
    inventory_value: float = 0.0
    potential_revenue: float = 0.0
    potential_profit: float = 0.0
    stock_status: StockStatus = StockStatus.IN_STOCK


class FinancialSummary(BaseModel):
    """Revenue, cost and gross profit over the reporting window"""
    total_sales: float = 0.0
    total_cost: float = 0.0
    gross_profit: float = 0.0
    net_profit: float = 0.0
    profit_margin: float = 0.0


class DashboardData(BaseModel):
    """Everything the dashboard view renders"""
    summary: DashboardSummary = DashboardSummary()
    sales_trend: List[TrendBucket] = []
    category_data: List[CategorySlice] = []
    top_products: List[ProductRevenue] = []


class ProfitabilityData(BaseModel):
    """Everything the profitability view renders"""
    summary: ProfitabilitySummary = ProfitabilitySummary()
    products: List[ProductProfitability] = []
    categories: List[CategoryProfitability] = []
    trends: List[TrendBucket] = []


class ReportData(BaseModel):
    """Everything the reports view renders and exports"""
    sales_report: List[SalesReportRow] = []
    inventory_report: List[InventoryReportRow] = []
    profitability_report: List[ProductProfitability] = []
    financial_summary: FinancialSummary = FinancialSummary()
