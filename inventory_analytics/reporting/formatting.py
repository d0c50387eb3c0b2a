"""
Formatting and Math Utilities

Currency/number/date formatting, profit arithmetic, and the lenient
numeric parsing used when mapping imported text into product fields.
"""

from datetime import date, datetime
from enum import Enum
import re
from typing import Optional, Union

Number = Union[int, float]

_CURRENCY_SYMBOLS = {"USD": "$", "EUR": "€", "GBP": "£", "JPY": "¥"}

_FLOAT_PREFIX = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")
_INT_PREFIX = re.compile(r"^[+-]?\d+")


class StockStatus(str, Enum):
    """Stock level relative to the reorder level"""
    OUT_OF_STOCK = "Out of Stock"
    LOW_STOCK = "Low Stock"
    IN_STOCK = "In Stock"


def classify_stock_status(quantity: int, reorder_level: int) -> StockStatus:
    """Out of stock at zero, low at or below the reorder level, else in stock"""
    if quantity == 0:
        return StockStatus.OUT_OF_STOCK
    if quantity <= reorder_level:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


def calculate_profit_margin(
    selling_price: Optional[Number],
    cost_price: Optional[Number],
) -> Union[str, int]:
    """
    Margin on selling price as a two-decimal string.

    Returns 0 when either price is zero or missing, which also reports a
    zero-cost product as 0 rather than 100.

    Example:
        >>> calculate_profit_margin(200, 100)
        '50.00'
    """
    if not selling_price or not cost_price:
        return 0
    return f"{(selling_price - cost_price) / selling_price * 100:.2f}"


def calculate_profit(
    selling_price: Optional[Number],
    cost_price: Optional[Number],
    quantity: int = 1,
) -> Number:
    """Unit profit times quantity; 0 when either price is zero or missing"""
    if not selling_price or not cost_price:
        return 0
    return (selling_price - cost_price) * quantity


def format_currency(amount: Optional[Number], currency: str = "USD") -> str:
    """
    Format an amount with a currency symbol and two decimals.

    Example:
        >>> format_currency(-1234.5)
        '-$1,234.50'
    """
    value = float(amount or 0)
    symbol = _CURRENCY_SYMBOLS.get(currency, f"{currency} ")
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


def format_number(number: Optional[Number]) -> str:
    """Thousands separators with at most three fraction digits"""
    value = number or 0
    if isinstance(value, int):
        return f"{value:,}"
    text = f"{value:,.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def format_date(value: Union[str, date, datetime]) -> str:
    """Short month-day-year label, e.g. 'Jan 5, 2025'"""
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    return f"{value:%b} {value.day}, {value.year}"


def parse_float(text: Optional[str], default: float = 0.0) -> float:
    """
    Read the leading decimal number of ``text``.

    "12.5kg" reads as 12.5; text without a leading number gives ``default``.
    """
    match = _FLOAT_PREFIX.match((text or "").strip())
    if not match:
        return default
    value = float(match.group(0))
    return value or default


def parse_int(text: Optional[str], default: int = 0) -> int:
    """
    Read the leading integer of ``text``.

    "12.7" reads as 12; text without a leading integer gives ``default``.
    A parsed zero also gives ``default``.
    """
    match = _INT_PREFIX.match((text or "").strip())
    if not match:
        return default
    return int(match.group(0)) or default
