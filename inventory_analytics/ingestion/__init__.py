"""
Data Ingestion Module
"""
from .csv_mapper import CsvMappingResult, CsvProductMapper, FIELD_MAPPINGS, FieldMapping, sample_csv
from .importer import ImportHistory, ImportStatus, ImportType, ProductImporter
from .sql_import import SqlImportClient, SqlImportConfig

__all__ = [
    "CsvMappingResult",
    "CsvProductMapper",
    "FIELD_MAPPINGS",
    "FieldMapping",
    "sample_csv",
    "ImportHistory",
    "ImportStatus",
    "ImportType",
    "ProductImporter",
    "SqlImportClient",
    "SqlImportConfig",
]
