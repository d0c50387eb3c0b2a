"""
Database Seeding

Creates the tables and fills them with synthetic stores, categories,
products and sales, written through the data access façade.

Usage:
    python -m inventory_analytics.ingestion.seed_db --products 60 --sales 800
"""

import argparse
import asyncio
from typing import Any, Dict, List

from inventory_analytics.config.logging import configure_logging, get_logger
from inventory_analytics.data.generators import DataGenerator
from inventory_analytics.database.connection import close_database, init_database
from inventory_analytics.database.facade import DataAccess, SqlAlchemyDataAccess

logger = get_logger(__name__)

# Parents first so references resolve
SEED_ORDER = ["stores", "categories", "products", "sales"]


async def seed_collection(
    data_access: DataAccess,
    collection: str,
    records: List[Dict[str, Any]],
) -> int:
    """Insert records one by one; returns the number inserted"""
    logger.info("Seeding collection", collection=collection, records=len(records))
    for record in records:
        await data_access.insert(collection, record)
    return len(records)


async def seed(
    data_access: DataAccess,
    n_stores: int = 2,
    n_products: int = 40,
    n_sales: int = 400,
    days: int = 90,
    seed_value: int = 42,
) -> Dict[str, int]:
    """Generate a dataset and write every collection; returns counts per collection"""
    data = DataGenerator(seed=seed_value).generate_all(
        n_stores=n_stores,
        n_products=n_products,
        n_sales=n_sales,
        days=days,
    )
    counts = {}
    for collection in SEED_ORDER:
        counts[collection] = await seed_collection(
            data_access, collection, data[collection].to_dicts()
        )
    return counts


async def main(args: argparse.Namespace) -> None:
    configure_logging()
    logger.info("Starting database seeding...")
    await init_database(create_tables=True)

    try:
        counts = await seed(
            SqlAlchemyDataAccess(),
            n_stores=args.stores,
            n_products=args.products,
            n_sales=args.sales,
            days=args.days,
            seed_value=args.seed,
        )
        logger.info("Database seeding completed successfully", **counts)
    except Exception as e:
        logger.error("Seeding failed", error=str(e))
        raise
    finally:
        await close_database()


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed the inventory database with synthetic data")
    parser.add_argument("--stores", type=int, default=2)
    parser.add_argument("--products", type=int, default=40)
    parser.add_argument("--sales", type=int, default=400)
    parser.add_argument("--days", type=int, default=90, help="Spread sales over this many past days")
    parser.add_argument("--seed", type=int, default=42)
    return parser.parse_args()


def cli() -> None:
    asyncio.run(main(parse_args()))


if __name__ == "__main__":
    cli()
