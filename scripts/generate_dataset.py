"""
Inventory Dataset Generator
Writes a synthetic dataset as CSV files, plus a product listing in the
import format accepted by POST /api/v1/imports/csv
"""

import argparse
from pathlib import Path

import polars as pl

from inventory_analytics.data.generators import DataGenerator
from inventory_analytics.ingestion.csv_mapper import SAMPLE_COLUMNS

OUTPUT_DIR = Path(__file__).parent.parent / "data" / "generated"


def write_import_file(products: pl.DataFrame, output_dir: Path) -> Path:
    """Products in the column layout of the sample import file"""
    path = output_dir / "products_import.csv"
    products.select(SAMPLE_COLUMNS).write_csv(path)
    return path


def main():
    parser = argparse.ArgumentParser(description="Generate a synthetic inventory dataset")
    parser.add_argument("--stores", type=int, default=3)
    parser.add_argument("--products", type=int, default=200)
    parser.add_argument("--sales", type=int, default=5000)
    parser.add_argument("--days", type=int, default=180)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--output", type=Path, default=OUTPUT_DIR)
    args = parser.parse_args()

    print(f"📊 Generating {args.products:,} products and {args.sales:,} sales...")
    data = DataGenerator(seed=args.seed).generate_all(
        n_stores=args.stores,
        n_products=args.products,
        n_sales=args.sales,
        days=args.days,
    )

    for path in DataGenerator.save_csv(data, str(args.output)):
        print(f"   ✅ {path.name}")
    print(f"   ✅ {write_import_file(data['products'], args.output).name}")

    print(f"\n📁 Files saved to: {args.output}")


if __name__ == "__main__":
    main()
