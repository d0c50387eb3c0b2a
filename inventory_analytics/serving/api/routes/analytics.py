"""
Analytics API Endpoints

Dashboard, profitability and reports views, plus CSV export of the report
tables. View endpoints answer with the view's state: when the latest load
failed, ``error`` is set and ``data`` is the last good result.
"""

from datetime import date, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from inventory_analytics.config.settings import ReportSettings
from inventory_analytics.database.facade import DataAccess
from inventory_analytics.reporting.aggregations import SortKey
from inventory_analytics.reporting.exporter import ReportType, export_report
from inventory_analytics.reporting.metrics import DashboardData, ProfitabilityData, ReportData
from inventory_analytics.serving.loaders import ViewState
from inventory_analytics.serving.session import DashboardSession
from inventory_analytics.serving.views import load_dashboard, load_profitability, load_reports
from ..dependencies import get_data_access, get_report_settings, get_session

router = APIRouter()

PROFITABILITY_WINDOWS = (7, 30, 90)


def _date_range(
    start: Optional[date],
    end: Optional[date],
    settings: ReportSettings,
) -> tuple:
    end = end or date.today()
    start = start or end - timedelta(days=settings.report_window_days)
    if start > end:
        raise HTTPException(status_code=422, detail="start_date must not be after end_date")
    return start, end


@router.get("/dashboard", response_model=ViewState[DashboardData])
async def dashboard(
    store_id: Optional[str] = None,
    data_access: DataAccess = Depends(get_data_access),
    session: DashboardSession = Depends(get_session),
    settings: ReportSettings = Depends(get_report_settings),
):
    """Summary metrics, trend, category distribution and top products"""
    return await session.dashboard.load(
        lambda: load_dashboard(data_access, store_id, settings)
    )


@router.get("/profitability", response_model=ViewState[ProfitabilityData])
async def profitability(
    store_id: Optional[str] = None,
    days: int = Query(30, description="Window length: 7, 30 or 90 days"),
    sort_by: str = Query("profit", description="profit, margin, revenue or quantity"),
    data_access: DataAccess = Depends(get_data_access),
    session: DashboardSession = Depends(get_session),
    settings: ReportSettings = Depends(get_report_settings),
):
    """Per-product and per-category profitability over the last ``days`` days"""
    if days not in PROFITABILITY_WINDOWS:
        raise HTTPException(status_code=422, detail=f"days must be one of {list(PROFITABILITY_WINDOWS)}")

    return await session.profitability.load(
        lambda: load_profitability(data_access, store_id, days, SortKey(sort_by), settings)
    )


@router.get("/reports", response_model=ViewState[ReportData])
async def report_tables(
    store_id: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    data_access: DataAccess = Depends(get_data_access),
    session: DashboardSession = Depends(get_session),
    settings: ReportSettings = Depends(get_report_settings),
):
    """Sales, inventory and profitability tables with the financial summary"""
    start, end = _date_range(start_date, end_date, settings)
    return await session.reports.load(
        lambda: load_reports(data_access, start, end, store_id)
    )


@router.get("/reports/{report_type}/export")
async def export_report_csv(
    report_type: str,
    store_id: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    data_access: DataAccess = Depends(get_data_access),
    settings: ReportSettings = Depends(get_report_settings),
) -> Response:
    """
    Download one report table as CSV.

    Unknown report types export the sales report.
    """
    start, end = _date_range(start_date, end_date, settings)
    kind = ReportType(report_type)
    data = await load_reports(data_access, start, end, store_id)

    tables = {
        ReportType.SALES: data.sales_report,
        ReportType.INVENTORY: data.inventory_report,
        ReportType.PROFITABILITY: data.profitability_report,
    }
    exported = export_report(tables[kind], kind, start, end)
    return Response(
        content=exported.content,
        media_type=exported.media_type,
        headers={"Content-Disposition": f'attachment; filename="{exported.filename}"'},
    )
