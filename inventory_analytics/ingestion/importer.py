"""
Product Importer

Persists mapped product drafts through the data access façade, one insert
per draft, and records every run in the caller's import history.

A failed insert aborts the rest of the batch. Rows inserted before the
failure are not rolled back.
"""

from datetime import datetime
from enum import Enum
from itertools import count
from typing import Iterator, List, Optional, Sequence

import structlog

from inventory_analytics.database.facade import DataAccess
from inventory_analytics.database.records import ImportHistoryEntry, ProductDraft, Store
from inventory_analytics.exceptions import CsvFormatError, DataAccessError, ImportAbortError, SqlImportError
from .csv_mapper import CsvProductMapper, default_store_id
from .sql_import import SqlImportClient, SqlImportConfig

logger = structlog.get_logger(__name__)

ALL_STORES = "All Stores"


class ImportType(str, Enum):
    CSV = "CSV Import"
    SQL = "SQL Server Import"


class ImportStatus(str, Enum):
    SUCCESS = "Success"
    FAILED = "Failed"


class ImportHistory:
    """
    Import runs of one session, newest first.

    Owned by the caller's session; nothing here is shared between sessions.
    """

    def __init__(self):
        self._entries: List[ImportHistoryEntry] = []
        self._ids: Iterator[int] = count(1)

    def record(
        self,
        import_type: ImportType,
        status: ImportStatus,
        records: int,
        store: Optional[Store] = None,
        message: Optional[str] = None,
    ) -> ImportHistoryEntry:
        entry = ImportHistoryEntry(
            id=next(self._ids),
            date=datetime.now(),
            type=import_type.value,
            status=status.value,
            records=records,
            store=store.name if store is not None else ALL_STORES,
            message=message,
        )
        self._entries.insert(0, entry)
        return entry

    @property
    def entries(self) -> List[ImportHistoryEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


class ProductImporter:
    """
    Runs CSV and SQL imports for one session.

    Example:
        importer = ProductImporter(data_access, history)
        entry = await importer.import_csv(text, current_store, stores)
    """

    def __init__(
        self,
        data_access: DataAccess,
        history: ImportHistory,
        category_id: Optional[str] = None,
        sql_client: Optional[SqlImportClient] = None,
    ):
        self.data_access = data_access
        self.history = history
        self.category_id = category_id
        self.sql_client = sql_client

    async def insert_drafts(self, drafts: Sequence[ProductDraft]) -> int:
        """
        Insert importable drafts in order, skipping the rest.

        Raises:
            ImportAbortError: An insert failed; carries the number inserted before it
        """
        inserted = 0
        for draft in drafts:
            if not draft.is_importable:
                continue
            try:
                await self.data_access.insert("products", draft.to_record())
            except DataAccessError as e:
                logger.error(
                    "Product insert failed, aborting import",
                    sku=draft.sku,
                    inserted=inserted,
                    error=e.message,
                )
                raise ImportAbortError(e.message, records_imported=inserted) from e
            inserted += 1
        return inserted

    async def import_csv(
        self,
        text: str,
        current_store: Optional[Store] = None,
        stores: Sequence[Store] = (),
    ) -> ImportHistoryEntry:
        """
        Map ``text`` to drafts and insert the accepted ones.

        Drafts without a name or SKU are skipped silently. The history entry
        counts the records inserted.

        Raises:
            CsvFormatError: The text could not be parsed; a failed entry is recorded first
            ImportAbortError: An insert failed; a failed entry is recorded first
        """
        mapper_args = {"store_id": default_store_id(current_store, stores)}
        if self.category_id:
            mapper_args["category_id"] = self.category_id
        try:
            result = CsvProductMapper(**mapper_args).map_text(text)
        except CsvFormatError as e:
            self.history.record(ImportType.CSV, ImportStatus.FAILED, 0, current_store, str(e))
            raise

        try:
            inserted = await self.insert_drafts(result.drafts)
        except ImportAbortError as e:
            self.history.record(
                ImportType.CSV, ImportStatus.FAILED, e.records_imported, current_store, e.message
            )
            raise

        logger.info("CSV import complete", inserted=inserted, skipped=result.skipped)
        return self.history.record(
            ImportType.CSV,
            ImportStatus.SUCCESS,
            inserted,
            current_store,
            f"Successfully imported {inserted} products",
        )

    async def import_sql(
        self,
        config: SqlImportConfig,
        current_store: Optional[Store] = None,
    ) -> ImportHistoryEntry:
        """
        Delegate an import to the external SQL import service.

        Raises:
            SqlImportError: The service is not configured or the call failed
        """
        if self.sql_client is None:
            raise SqlImportError("SQL import endpoint is not configured")

        target_store = current_store.id if current_store is not None else None
        try:
            imported = await self.sql_client.run(config, target_store)
        except SqlImportError as e:
            self.history.record(ImportType.SQL, ImportStatus.FAILED, 0, current_store, str(e))
            raise

        return self.history.record(
            ImportType.SQL,
            ImportStatus.SUCCESS,
            imported,
            current_store,
            f"Successfully imported {imported} records from SQL Server",
        )
