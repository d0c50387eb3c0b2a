"""
Exception Handlers

Maps application errors to HTTP responses carrying the underlying message.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import structlog

from inventory_analytics.exceptions import (
    CsvFormatError,
    DataAccessError,
    ImportAbortError,
    RecordValidationError,
    SqlImportError,
)

logger = structlog.get_logger(__name__)


async def data_access_error_handler(request: Request, exc: DataAccessError) -> JSONResponse:
    logger.error("Backend request failed", path=request.url.path, collection=exc.collection, error=exc.message)
    return JSONResponse(
        status_code=502,
        content={"error": "data_access_error", "detail": exc.message, "collection": exc.collection},
    )


async def record_validation_error_handler(request: Request, exc: RecordValidationError) -> JSONResponse:
    logger.error("Backend returned invalid records", path=request.url.path, collection=exc.collection)
    return JSONResponse(
        status_code=502,
        content={"error": "invalid_record", "detail": exc.message, "collection": exc.collection},
    )


async def import_abort_handler(request: Request, exc: ImportAbortError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={
            "error": "import_aborted",
            "detail": f"Import failed: {exc.message}",
            "records_imported": exc.records_imported,
        },
    )


async def csv_format_error_handler(request: Request, exc: CsvFormatError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"error": "invalid_csv", "detail": f"Import failed: {exc}", "records_imported": 0},
    )


async def sql_import_error_handler(request: Request, exc: SqlImportError) -> JSONResponse:
    return JSONResponse(
        status_code=502,
        content={"error": "sql_import_failed", "detail": f"SQL Import failed: {exc}"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DataAccessError, data_access_error_handler)
    app.add_exception_handler(RecordValidationError, record_validation_error_handler)
    app.add_exception_handler(ImportAbortError, import_abort_handler)
    app.add_exception_handler(CsvFormatError, csv_format_error_handler)
    app.add_exception_handler(SqlImportError, sql_import_error_handler)
