"""
Error Taxonomy

Exceptions raised at the data access, import, and SQL import boundaries.
Aggregations never raise on missing or malformed numeric fields; those
are defaulted when records are validated.
"""

from typing import Optional


class InventoryAnalyticsError(Exception):
    """Base class for all application errors"""


class DataAccessError(InventoryAnalyticsError):
    """A read or write against the backend failed (transport or rejection)"""

    def __init__(self, message: str, collection: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.collection = collection


class RecordValidationError(InventoryAnalyticsError):
    """A backend row could not be coerced into a typed record"""

    def __init__(self, message: str, collection: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.collection = collection


class ImportAbortError(InventoryAnalyticsError):
    """
    A single insert failed during a multi-record import.

    Rows inserted before the failure stay in place; ``records_imported``
    tells how many that was.
    """

    def __init__(self, message: str, records_imported: int = 0):
        super().__init__(message)
        self.message = message
        self.records_imported = records_imported


class SqlImportError(InventoryAnalyticsError):
    """The external SQL import endpoint failed or returned an invalid body"""


class CsvFormatError(InventoryAnalyticsError):
    """CSV text could not be parsed, e.g. an unterminated quoted field"""
