"""
Report Exporter

Serialises a homogeneous sequence of flat aggregate records to CSV. The
header is the first record's field names in order; values containing the
delimiter, quotes or newlines are quoted, so the output always parses back.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import polars as pl
import structlog
from pydantic import BaseModel

logger = structlog.get_logger(__name__)

CSV_MEDIA_TYPE = "text/csv"

ExportRecord = Union[BaseModel, Mapping[str, Any]]


class ReportType(str, Enum):
    """Exportable report tables"""
    SALES = "sales"
    INVENTORY = "inventory"
    PROFITABILITY = "profitability"

    @classmethod
    def _missing_(cls, value):
        return cls.SALES


@dataclass
class ExportedReport:
    """A rendered CSV file ready for download"""
    filename: str
    content: str
    media_type: str = CSV_MEDIA_TYPE


def report_filename(report_type: Union[ReportType, str], start: date, end: date) -> str:
    """``{type}_report_{start}_to_{end}.csv``"""
    kind = report_type.value if isinstance(report_type, ReportType) else report_type
    return f"{kind}_report_{start.isoformat()}_to_{end.isoformat()}.csv"


def _cell(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _as_dict(record: ExportRecord) -> Dict[str, Any]:
    if isinstance(record, BaseModel):
        return record.model_dump()
    return dict(record)


def to_csv(records: Sequence[ExportRecord]) -> str:
    """
    Render records as CSV text.

    Columns come from the first record; later records contribute values for
    those columns only. Missing, null and empty values are written as
    empty fields. An empty sequence renders as an empty string.
    """
    if not records:
        return ""

    rows: List[Dict[str, Any]] = [_as_dict(record) for record in records]
    columns = list(rows[0].keys())
    data = {column: [_cell(row.get(column)) for row in rows] for column in columns}
    df = pl.DataFrame(data, schema={column: pl.Utf8 for column in columns})
    return df.write_csv(quote_style="necessary")


def export_report(
    records: Sequence[ExportRecord],
    report_type: Union[ReportType, str],
    start: date,
    end: date,
) -> ExportedReport:
    """Render ``records`` and name the file after the report type and window"""
    filename = report_filename(report_type, start, end)
    content = to_csv(records)
    logger.info("Exported report", filename=filename, rows=len(records))
    return ExportedReport(filename=filename, content=content)
