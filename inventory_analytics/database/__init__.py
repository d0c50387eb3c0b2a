"""
Database Module
"""
from .connection import init_database, close_database, get_db, get_session_factory
from .facade import DataAccess, SqlAlchemyDataAccess, fetch_records
from .models import Base
from .records import Category, Product, ProductDraft, Sale, Store

__all__ = [
    "init_database",
    "close_database",
    "get_db",
    "get_session_factory",
    "DataAccess",
    "SqlAlchemyDataAccess",
    "fetch_records",
    "Base",
    "Category",
    "Product",
    "ProductDraft",
    "Sale",
    "Store",
]
