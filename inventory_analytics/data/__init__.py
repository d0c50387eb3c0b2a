"""
Data Generation Module
"""
from .generators import (
    DataGenerator,
    StoreGenerator,
    CategoryGenerator,
    ProductGenerator,
    SaleGenerator,
)

__all__ = [
    "DataGenerator",
    "StoreGenerator",
    "CategoryGenerator",
    "ProductGenerator",
    "SaleGenerator",
]
