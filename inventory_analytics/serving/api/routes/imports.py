"""
Import API Endpoints

CSV and SQL Server product imports, the caller's import history, and the
sample CSV file.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel

from inventory_analytics.config.settings import ImportSettings
from inventory_analytics.database.facade import DataAccess
from inventory_analytics.database.records import ImportHistoryEntry, Store
from inventory_analytics.ingestion.csv_mapper import sample_csv
from inventory_analytics.ingestion.importer import ProductImporter
from inventory_analytics.ingestion.sql_import import SqlImportClient, SqlImportConfig
from inventory_analytics.reporting.exporter import CSV_MEDIA_TYPE
from inventory_analytics.serving.session import DashboardSession
from ..dependencies import get_data_access, get_import_settings, get_session

router = APIRouter()


class CsvImportRequest(BaseModel):
    """CSV text to import, optionally into a selected store"""
    csv: str
    store_id: Optional[str] = None


class SqlImportRequest(BaseModel):
    """SQL Server connection settings and the store to import into"""
    config: SqlImportConfig
    store_id: Optional[str] = None


class ImportResponse(BaseModel):
    message: str
    entry: ImportHistoryEntry


async def _current_store(
    session: DashboardSession,
    data_access: DataAccess,
    store_id: Optional[str],
) -> Optional[Store]:
    try:
        return await session.resolve_store(data_access, store_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Store {store_id} not found")


def _importer(
    session: DashboardSession,
    data_access: DataAccess,
    settings: ImportSettings,
) -> ProductImporter:
    return ProductImporter(
        data_access,
        session.history,
        category_id=settings.placeholder_category_id,
        sql_client=SqlImportClient(settings.sql_import_url, timeout=settings.request_timeout)
        if settings.sql_import_url
        else None,
    )


@router.post("/imports/csv", response_model=ImportResponse)
async def import_csv(
    request: CsvImportRequest,
    data_access: DataAccess = Depends(get_data_access),
    session: DashboardSession = Depends(get_session),
    settings: ImportSettings = Depends(get_import_settings),
) -> ImportResponse:
    """
    Import products from CSV text.

    Rows without a name or SKU are skipped. The first failed insert aborts
    the import (422); products inserted before it are kept.
    """
    current_store = await _current_store(session, data_access, request.store_id)
    stores = await session.get_stores(data_access)

    entry = await _importer(session, data_access, settings).import_csv(
        request.csv, current_store, stores
    )
    return ImportResponse(message=entry.message, entry=entry)


@router.post("/imports/sql", response_model=ImportResponse)
async def import_sql(
    request: SqlImportRequest,
    data_access: DataAccess = Depends(get_data_access),
    session: DashboardSession = Depends(get_session),
    settings: ImportSettings = Depends(get_import_settings),
) -> ImportResponse:
    """Run an import through the external SQL Server import service"""
    current_store = await _current_store(session, data_access, request.store_id)

    entry = await _importer(session, data_access, settings).import_sql(request.config, current_store)
    return ImportResponse(message=entry.message, entry=entry)


@router.get("/imports/history", response_model=List[ImportHistoryEntry])
async def import_history(
    session: DashboardSession = Depends(get_session),
) -> List[ImportHistoryEntry]:
    """Import runs of the calling session, newest first"""
    return session.history.entries


@router.get("/imports/sample.csv")
async def sample_inventory_csv() -> Response:
    return Response(
        content=sample_csv(),
        media_type=CSV_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="sample_inventory.csv"'},
    )
