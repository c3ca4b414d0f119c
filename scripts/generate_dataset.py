"""
GO Sales Dataset Generator
Writes monthly transaction files plus the product and retailer catalogs
"""

import argparse
from datetime import date
from pathlib import Path

from gosales_etl.data import GOSalesGenerator

DEFAULT_OUTPUT_DIR = Path(__file__).parent.parent / "data" / "raw"


def main():
    parser = argparse.ArgumentParser(description="GO Sales Dataset Generator")
    parser.add_argument("--output-dir", type=Path, default=DEFAULT_OUTPUT_DIR, help="Where to write the files")
    parser.add_argument("--periods", type=int, default=49, help="Number of monthly files")
    parser.add_argument("--rows", type=int, default=2000, help="Transactions per month")
    parser.add_argument("--products", type=int, default=120, help="Catalog size")
    parser.add_argument("--retailers", type=int, default=80, help="Retailer sites")
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--start", type=date.fromisoformat, default=date(2004, 1, 1), help="First month (YYYY-MM-DD)")
    args = parser.parse_args()

    print("=" * 60)
    print("GO Sales Dataset Generator")
    print("=" * 60 + "\n")

    generator = GOSalesGenerator(seed=args.seed, n_products=args.products, n_retailers=args.retailers)
    dataset = generator.write_dataset(
        args.output_dir,
        n_periods=args.periods,
        rows_per_period=args.rows,
        start=args.start,
    )

    print(f"\nOutput: {args.output_dir}\n")
    for f in [dataset.products_path, dataset.retailers_path] + dataset.sales_files[:3]:
        size = f.stat().st_size / 1024
        print(f"   {f.relative_to(args.output_dir)} ({size:.1f} KB)")
    if len(dataset.sales_files) > 3:
        print(f"   ... {len(dataset.sales_files) - 3} more period files")

    print(f"\nTotal: {dataset.total_rows:,} transactions in {len(dataset.sales_files)} files")


if __name__ == "__main__":
    main()
