"""
Synthetic Data Generator

Generates realistic small-business inventory data for development and demos.
Includes:
- Stores
- Product categories with chart colours
- Products with cost/selling prices and stock levels
- Sales with stored profit spread over recent days
"""

import random
import uuid
from datetime import date, timedelta
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np
import polars as pl
from faker import Faker


# =============================================================================
# CONFIGURATION
# =============================================================================

CATEGORIES = [
    ("Electronics", "#8884d8", (50, 1500)),
    ("Accessories", "#82ca9d", (5, 120)),
    ("Office Supplies", "#ffc658", (2, 60)),
    ("Furniture", "#ff7c7c", (80, 900)),
    ("Networking", "#8dd1e1", (20, 400)),
]

STORE_SUFFIXES = ["Downtown", "Mall", "Outlet", "Online", "Airport"]


# =============================================================================
# GENERATORS
# =============================================================================

class StoreGenerator:
    """Generate store records"""

    def __init__(self, fake: Faker):
        self.fake = fake

    def generate(self, n: int = 2) -> pl.DataFrame:
        suffixes = random.sample(STORE_SUFFIXES, k=min(n, len(STORE_SUFFIXES)))
        stores = [
            {
                "id": str(uuid.uuid4()),
                "name": f"{self.fake.city()} {suffixes[i % len(suffixes)]}",
            }
            for i in range(n)
        ]
        return pl.DataFrame(stores, schema={"id": pl.Utf8, "name": pl.Utf8})


class CategoryGenerator:
    """Generate the fixed category set"""

    def generate(self) -> pl.DataFrame:
        return pl.DataFrame(
            {
                "id": [str(uuid.uuid4()) for _ in CATEGORIES],
                "name": [name for name, _, _ in CATEGORIES],
                "color": [color for _, color, _ in CATEGORIES],
            }
        )


class ProductGenerator:
    """Generate a product catalog spread over stores and categories"""

    def __init__(self, fake: Faker, stores_df: pl.DataFrame, categories_df: pl.DataFrame):
        self.fake = fake
        self.store_ids = stores_df["id"].to_list()
        self.categories = categories_df.to_dicts()

    def generate(self, n: int = 40) -> pl.DataFrame:
        products = []
        price_ranges = {name: bounds for name, _, bounds in CATEGORIES}

        for i in range(n):
            category = random.choice(self.categories)
            low, high = price_ranges.get(category["name"], (5, 500))

            selling_price = round(random.uniform(low, high), 2)
            cost_price = round(selling_price * random.uniform(0.45, 0.85), 2)
            reorder_level = random.choice([5, 8, 10, 15, 25])

            products.append({
                "id": str(uuid.uuid4()),
                "name": f"{self.fake.word().title()} {category['name'].rstrip('s')}",
                "sku": f"{category['name'][:3].upper()}{i + 1:04d}",
                "category_id": category["id"],
                "store_id": random.choice(self.store_ids),
                "cost_price": cost_price,
                "selling_price": selling_price,
                # Roughly one in ten products at or below its reorder level
                "quantity": int(np.random.choice(
                    [0, reorder_level, random.randint(reorder_level + 1, 200)],
                    p=[0.04, 0.06, 0.90],
                )),
                "reorder_level": reorder_level,
                "description": self.fake.sentence(nb_words=8),
            })

        return pl.DataFrame(products)


class SaleGenerator:
    """Generate sales of existing products over the last ``days`` days"""

    def __init__(self, products_df: pl.DataFrame):
        self.products = products_df.select(
            ["id", "store_id", "cost_price", "selling_price"]
        ).to_dicts()

    def generate(self, n: int = 400, days: int = 90, today: Optional[date] = None) -> pl.DataFrame:
        today = today or date.today()
        quantities = np.random.choice([1, 2, 3, 4, 5], size=n, p=[0.55, 0.25, 0.10, 0.06, 0.04])
        offsets = np.random.randint(0, days, size=n)

        sales = []
        for quantity, offset in zip(quantities, offsets):
            product = random.choice(self.products)
            quantity = int(quantity)
            discount = random.choice([0, 0, 0, 0.05, 0.10])
            total_amount = round(product["selling_price"] * quantity * (1 - discount), 2)

            sales.append({
                "id": str(uuid.uuid4()),
                "product_id": product["id"],
                "store_id": product["store_id"],
                "quantity": quantity,
                "total_amount": total_amount,
                "profit": round(total_amount - product["cost_price"] * quantity, 2),
                "sale_date": today - timedelta(days=int(offset)),
            })

        return pl.DataFrame(sales)


# =============================================================================
# MAIN GENERATOR
# =============================================================================

class DataGenerator:
    """
    Main data generator orchestrator.

    Example:
        data = DataGenerator(seed=7).generate_all(n_products=20)
        data["products"].height  # 20
    """

    def __init__(self, seed: Optional[int] = 42):
        self.fake = Faker()
        if seed is not None:
            random.seed(seed)
            np.random.seed(seed)
            Faker.seed(seed)

    def generate_all(
        self,
        n_stores: int = 2,
        n_products: int = 40,
        n_sales: int = 400,
        days: int = 90,
        today: Optional[date] = None,
    ) -> Dict[str, pl.DataFrame]:
        """Generate a complete, referentially consistent dataset"""
        stores_df = StoreGenerator(self.fake).generate(n_stores)
        categories_df = CategoryGenerator().generate()
        products_df = ProductGenerator(self.fake, stores_df, categories_df).generate(n_products)
        sales_df = SaleGenerator(products_df).generate(n_sales, days=days, today=today)

        return {
            "stores": stores_df,
            "categories": categories_df,
            "products": products_df,
            "sales": sales_df,
        }

    @staticmethod
    def save_csv(data: Dict[str, pl.DataFrame], output_dir: str) -> List[Path]:
        """Write each collection to ``<output_dir>/<collection>.csv``"""
        directory = Path(output_dir)
        directory.mkdir(parents=True, exist_ok=True)

        paths = []
        for name, df in data.items():
            path = directory / f"{name}.csv"
            df.write_csv(path)
            paths.append(path)
        return paths
