"""
Typed Records

Explicit record types for rows coming out of the backend. Loosely typed
rows are coerced here once, so the reporting engine only ever sees
well-formed values: absent or unparseable numbers become 0, identifiers
become strings, and sale dates become ISO-8601 strings.
"""

from datetime import date, datetime
from typing import Annotated, Any, Dict, Optional, Type

from pydantic import BaseModel, BeforeValidator, ConfigDict, field_validator


def _to_float(value: Any) -> float:
    if value is None or value == "":
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _to_int(value: Any) -> int:
    if value is None or value == "":
        return 0
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return 0


def _to_id(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _to_text(value: Any) -> str:
    return "" if value is None else str(value)


RecordId = Annotated[str, BeforeValidator(_to_id)]
Reference = Annotated[Optional[str], BeforeValidator(_to_id)]
Amount = Annotated[float, BeforeValidator(_to_float)]
Count = Annotated[int, BeforeValidator(_to_int)]
Text = Annotated[str, BeforeValidator(_to_text)]


class InventoryRecord(BaseModel):
    """Base for all backend records"""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class Store(InventoryRecord):
    """A physical or online store"""
    id: RecordId
    name: Text = ""


class Category(InventoryRecord):
    """Product category, optionally with a chart colour"""
    id: RecordId
    name: Text = ""
    color: Optional[str] = None


class Product(InventoryRecord):
    """Inventory item held by a store"""
    id: RecordId
    name: Text = ""
    sku: Text = ""
    category_id: Reference = None
    store_id: Reference = None
    cost_price: Amount = 0.0
    selling_price: Amount = 0.0
    quantity: Count = 0
    reorder_level: Count = 0
    description: Optional[str] = None


class Sale(InventoryRecord):
    """
    A single sale transaction.

    ``profit`` is computed upstream and stored with the sale; it is not
    derived from the product's cost price.
    """
    id: Reference = None
    product_id: Reference = None
    store_id: Reference = None
    quantity: Count = 0
    total_amount: Amount = 0.0
    profit: Amount = 0.0
    sale_date: Optional[str] = None

    @field_validator("sale_date", mode="before")
    @classmethod
    def _iso_date(cls, value: Any) -> Optional[str]:
        if value is None or value == "":
            return None
        if isinstance(value, (date, datetime)):
            return value.isoformat()
        return str(value)

    @property
    def day(self) -> Optional[str]:
        """Date portion of ``sale_date`` (YYYY-MM-DD)"""
        if not self.sale_date:
            return None
        return self.sale_date.split("T")[0]


class ProductDraft(BaseModel):
    """Candidate product built from one imported row, not yet persisted"""
    name: str = ""
    sku: str = ""
    cost_price: float = 0.0
    selling_price: float = 0.0
    quantity: int = 0
    reorder_level: int = 10
    description: Optional[str] = None
    store_id: Optional[str] = None
    category_id: Optional[str] = None

    @property
    def is_importable(self) -> bool:
        """Drafts need both a name and a SKU"""
        return bool(self.name) and bool(self.sku)

    def to_record(self) -> Dict[str, Any]:
        """Insert payload for the products collection"""
        return self.model_dump(exclude_none=True)


class ImportHistoryEntry(BaseModel):
    """One completed (or failed) import run"""
    id: int
    date: datetime
    type: str
    status: str
    records: int = 0
    store: str = "All Stores"
    message: Optional[str] = None


RECORD_TYPES: Dict[str, Type[InventoryRecord]] = {
    "products": Product,
    "sales": Sale,
    "categories": Category,
    "stores": Store,
}
