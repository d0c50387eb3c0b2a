"""
CSV Import Mapper

Maps delimited product listings with loosely named headers onto product
drafts. Headers are matched case-insensitively against a static synonym
table; each synonym names the draft field it fills and how its text is
parsed. Columns outside the table are folded into the description.

Parsing goes through Polars' CSV reader, so quoted fields may contain
commas, quotes and line breaks.

Example:
    mapper = CsvProductMapper(store_id="store-1")
    result = mapper.map_text("name,sku,cost,price,quantity\\nWidget,W1,5,10,20\\n")
    result.accepted[0].selling_price  # 10.0
"""

from dataclasses import dataclass, field
from functools import partial
import io
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import polars as pl
import structlog

from inventory_analytics.database.records import ProductDraft, Store
from inventory_analytics.exceptions import CsvFormatError
from inventory_analytics.reporting.formatting import parse_float, parse_int

logger = structlog.get_logger(__name__)

Row = List[Tuple[str, str]]

PLACEHOLDER_CATEGORY_ID = "default-category-id"
DEFAULT_REORDER_LEVEL = 10


def _text(value: str) -> str:
    return value


@dataclass(frozen=True)
class FieldMapping:
    """Draft field a header fills, and the parser for its cell text"""
    field: str
    parse: Callable[[str], object] = _text


FIELD_MAPPINGS: Dict[str, FieldMapping] = {
    "name": FieldMapping("name"),
    "product_name": FieldMapping("name"),
    "sku": FieldMapping("sku"),
    "product_code": FieldMapping("sku"),
    "cost": FieldMapping("cost_price", parse_float),
    "cost_price": FieldMapping("cost_price", parse_float),
    "price": FieldMapping("selling_price", parse_float),
    "selling_price": FieldMapping("selling_price", parse_float),
    "quantity": FieldMapping("quantity", parse_int),
    "stock": FieldMapping("quantity", parse_int),
    "reorder_level": FieldMapping("reorder_level", partial(parse_int, default=DEFAULT_REORDER_LEVEL)),
    "min_stock": FieldMapping("reorder_level", partial(parse_int, default=DEFAULT_REORDER_LEVEL)),
    "description": FieldMapping("description"),
}

SAMPLE_PRODUCTS = [
    ("Laptop Computer", "LAP001", "800.00", "1200.00", "15", "5", "High-performance laptop"),
    ("Wireless Mouse", "MOU001", "15.00", "25.00", "50", "10", "Ergonomic wireless mouse"),
    ("Keyboard", "KEY001", "45.00", "75.00", "30", "8", "Mechanical keyboard"),
    ("Monitor", "MON001", "200.00", "350.00", "20", "5", "24-inch LED monitor"),
    ("USB Cable", "USB001", "5.00", "12.00", "100", "25", "USB-C cable 6ft"),
]
SAMPLE_COLUMNS = ["name", "sku", "cost_price", "selling_price", "quantity", "reorder_level", "description"]


@dataclass
class CsvMappingResult:
    """All drafts built from a CSV text, and the ones fit for import"""
    drafts: List[ProductDraft] = field(default_factory=list)

    @property
    def accepted(self) -> List[ProductDraft]:
        return [draft for draft in self.drafts if draft.is_importable]

    @property
    def skipped(self) -> int:
        return len(self.drafts) - len(self.accepted)


def default_store_id(current_store: Optional[Store], stores: Sequence[Store]) -> Optional[str]:
    """The selected store, else the first known store"""
    if current_store is not None:
        return current_store.id
    return stores[0].id if stores else None


def read_rows(text: str) -> List[Row]:
    """
    Parse CSV text into rows of ``(header, cell)`` pairs, trimmed.

    Blank lines are ignored; short rows read missing cells as empty and
    cells beyond the header are dropped. Repeated headers each keep their
    own cell.

    Raises:
        CsvFormatError: The text is not valid CSV (e.g. an unterminated quote)
    """
    lines = [line for line in (text or "").splitlines() if line.strip()]
    if not lines:
        return []

    try:
        df = pl.read_csv(
            io.BytesIO("\n".join(lines).encode("utf-8")),
            has_header=False,
            infer_schema_length=0,
            truncate_ragged_lines=True,
        )
    except pl.exceptions.PolarsError as e:
        logger.warning("Unreadable CSV text", lines=len(lines), error=str(e))
        raise CsvFormatError(f"Could not parse CSV: {e}") from e

    records = [[(cell or "").strip() for cell in row] for row in df.iter_rows()]
    headers, body = records[0], records[1:]
    return [list(zip(headers, row)) for row in body]


class CsvProductMapper:
    """
    Builds product drafts from CSV rows using a synonym table.

    The table is validated against ProductDraft's fields on construction.
    """

    def __init__(
        self,
        store_id: Optional[str] = None,
        category_id: str = PLACEHOLDER_CATEGORY_ID,
        mappings: Optional[Mapping[str, FieldMapping]] = None,
    ):
        self.store_id = store_id
        self.category_id = category_id
        self.mappings = {
            synonym.lower(): mapping
            for synonym, mapping in (mappings or FIELD_MAPPINGS).items()
        }
        unknown = {m.field for m in self.mappings.values()} - set(ProductDraft.model_fields)
        if unknown:
            raise ValueError(f"Field mappings target unknown product fields: {sorted(unknown)}")

    def map_row(self, row: Union[Mapping[str, str], Iterable[Tuple[str, str]]]) -> ProductDraft:
        """One row of ``(header, cell)`` pairs to one draft, in header order"""
        pairs = row.items() if isinstance(row, Mapping) else row
        values: Dict[str, object] = {}
        for header, value in pairs:
            mapping = self.mappings.get(header.lower())
            if mapping is not None:
                values[mapping.field] = mapping.parse(value)
            elif value:
                values["description"] = f"{values.get('description') or ''} {header}: {value}"

        values["store_id"] = self.store_id
        values["category_id"] = self.category_id
        return ProductDraft(**values)

    def map_text(self, text: str) -> CsvMappingResult:
        """Parse CSV text and map every data row"""
        result = CsvMappingResult(drafts=[self.map_row(row) for row in read_rows(text)])
        logger.info(
            "Mapped CSV rows",
            rows=len(result.drafts),
            accepted=len(result.accepted),
            skipped=result.skipped,
        )
        return result


def sample_csv() -> str:
    """Sample inventory file showing the expected columns"""
    df = pl.DataFrame(
        [list(row) for row in SAMPLE_PRODUCTS],
        schema={column: pl.Utf8 for column in SAMPLE_COLUMNS},
        orient="row",
    )
    return df.write_csv()
