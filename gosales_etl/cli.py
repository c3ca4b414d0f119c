"""
Command Line Entry Point

Runs the GO sales ETL once.
Usage:
    gosales-etl --input-dir data/raw/sales --products data/raw/products.csv \\
        --retailers data/raw/retailers.csv --output data/curated/gosales.parquet

Flags override GOSALES_* environment variables and .env values.
"""

import argparse
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from gosales_etl.config.logging import configure_logging, get_logger
from gosales_etl.config.settings import get_settings
from gosales_etl.exceptions import PipelineError
from gosales_etl.transformation.transformers import SalesETLPipeline


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="GO Sales ETL")
    parser.add_argument("--input-dir", type=Path, help="Directory of transaction files")
    parser.add_argument("--glob", dest="input_glob", help="Glob selecting transaction files (default: *.csv)")
    parser.add_argument("--products", dest="products_path", type=Path, help="Product catalog file")
    parser.add_argument("--retailers", dest="retailers_path", type=Path, help="Retailer catalog file")
    parser.add_argument("--output", dest="output_path", type=Path, help="Parquet artifact path")
    parser.add_argument("--workers", dest="max_workers", type=int, help="Threads used to read transaction files")
    parser.add_argument("--compression", help="Parquet compression codec")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR")
    parser.add_argument("--log-format", choices=["json", "text"], help="Log renderer")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, args.log_format)
    log = get_logger(__name__)

    try:
        config = get_settings().pipeline_config(
            input_dir=args.input_dir,
            input_glob=args.input_glob,
            products_path=args.products_path,
            retailers_path=args.retailers_path,
            output_path=args.output_path,
            max_workers=args.max_workers,
            compression=args.compression,
        )
    except ValidationError as e:
        log.error("Invalid configuration", error=str(e))
        return 2

    try:
        result = SalesETLPipeline(config).run()
    except PipelineError:
        # Already logged with its stage and context
        return 1

    log.info(
        "Artifact written",
        path=result.output_path,
        rows=result.output_rows,
        files=result.files_read,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
