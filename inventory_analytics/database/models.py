"""
Database Models - Inventory Schema

This module defines the backend tables read and written through the data
access façade:

- Store: physical or online store
- Category: product category with an optional chart colour
- Product: inventory item (cost, selling price, stock, reorder level)
- Sale: sale transaction with revenue and upstream-computed profit
"""

from datetime import datetime, date
from decimal import Decimal
from typing import Optional, List
import uuid

from sqlalchemy import (
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _new_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Base class for all database models"""
    pass


class Store(Base):
    """Store Table"""
    __tablename__ = "stores"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    products: Mapped[List["Product"]] = relationship(back_populates="store")

    def __repr__(self) -> str:
        return f"<Store {self.name}>"


class Category(Base):
    """Category Table"""
    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    color: Mapped[Optional[str]] = mapped_column(String(20))  # e.g. "#0088FE"
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    products: Mapped[List["Product"]] = relationship(back_populates="category")

    def __repr__(self) -> str:
        return f"<Category {self.name}>"


class Product(Base):
    """
    Product Table

    Selling price and cost price are set independently; nothing enforces
    selling >= cost, so margins may be negative.
    """
    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    sku: Mapped[str] = mapped_column(String(50), nullable=False)
    category_id: Mapped[Optional[str]] = mapped_column(ForeignKey("categories.id"))
    store_id: Mapped[Optional[str]] = mapped_column(ForeignKey("stores.id"))

    cost_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=0)
    selling_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=0)
    quantity: Mapped[int] = mapped_column(Integer, default=0)
    reorder_level: Mapped[int] = mapped_column(Integer, default=10)
    description: Mapped[Optional[str]] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )

    store: Mapped[Optional["Store"]] = relationship(back_populates="products")
    category: Mapped[Optional["Category"]] = relationship(back_populates="products")
    sales: Mapped[List["Sale"]] = relationship(back_populates="product")

    __table_args__ = (
        UniqueConstraint("store_id", "sku", name="uq_products_store_sku"),
        Index("idx_products_category", "category_id"),
    )

    def __repr__(self) -> str:
        return f"<Product {self.sku}: {self.name}>"


class Sale(Base):
    """
    Sale Table

    ``profit`` is written by the point of sale, not derived here.
    """
    __tablename__ = "sales"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    product_id: Mapped[Optional[str]] = mapped_column(ForeignKey("products.id"))
    store_id: Mapped[Optional[str]] = mapped_column(ForeignKey("stores.id"))

    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    profit: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)
    sale_date: Mapped[date] = mapped_column(Date, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    product: Mapped[Optional["Product"]] = relationship(back_populates="sales")

    __table_args__ = (
        Index("idx_sales_store_date", "store_id", "sale_date"),
        Index("idx_sales_product", "product_id"),
    )

    def __repr__(self) -> str:
        return f"<Sale {self.id}: {self.total_amount}>"


MODELS_BY_COLLECTION = {
    "stores": Store,
    "categories": Category,
    "products": Product,
    "sales": Sale,
}
