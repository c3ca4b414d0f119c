"""
Prefect Workflow Orchestration - GO Sales Batch ETL

Runs the pipeline stages as Prefect tasks. Failures are structural
(missing files, schema drift) so nothing is retried.
"""

from pathlib import Path
from typing import Optional

import polars as pl
import structlog
from prefect import flow, task
from prefect.cache_policies import NO_CACHE

from gosales_etl.config import PipelineConfig, get_settings
from gosales_etl.transformation.transformers import SalesETLPipeline, SourceTables

logger = structlog.get_logger(__name__)


# =============================================================================
# TASKS
# =============================================================================

@task(name="load_sources", description="Load transaction files and catalogs", cache_policy=NO_CACHE)
def load_sources(pipeline: SalesETLPipeline) -> SourceTables:
    """Load transaction files and reference catalogs"""
    sources = pipeline.load_sources()
    logger.info(
        f"Loaded {sources.transactions.height} transactions, "
        f"{sources.products.height} products, {sources.retailers.height} retailer sites"
    )
    return sources


@task(name="transform_sales", description="Normalize, join, derive and finalize", cache_policy=NO_CACHE)
def transform_sales(pipeline: SalesETLPipeline, sources: SourceTables) -> pl.DataFrame:
    """Build the curated sales table in memory"""
    final = pipeline.transform(sources)
    logger.info(f"Transformation complete: {final.height} rows, {final.width} columns")
    return final


@task(name="check_quality", description="Run warning-level output checks", cache_policy=NO_CACHE)
def check_quality(pipeline: SalesETLPipeline, df: pl.DataFrame) -> list:
    """Run output quality checks"""
    warnings = pipeline.check_output(df)
    for message in warnings:
        logger.warning(message)
    return warnings


@task(name="persist_sales", description="Write the parquet artifact", cache_policy=NO_CACHE)
def persist_sales(pipeline: SalesETLPipeline, df: pl.DataFrame) -> str:
    """Atomically write the artifact"""
    path = pipeline.persist(df)
    logger.info(f"Written {df.height} rows to {path}")
    return str(path)


# =============================================================================
# FLOWS
# =============================================================================

@flow(
    name="gosales_batch_etl",
    description="One-shot GO sales ETL: load, transform, persist",
)
def gosales_batch_etl(
    input_dir: Optional[str] = None,
    products_path: Optional[str] = None,
    retailers_path: Optional[str] = None,
    output_path: Optional[str] = None,
) -> dict:
    """
    GO sales batch ETL flow.

    Steps:
    1. Load transaction files and catalogs
    2. Normalize, join, derive and finalize
    3. Check output quality
    4. Persist the artifact
    """
    config: PipelineConfig = get_settings().pipeline_config(
        input_dir=Path(input_dir) if input_dir else None,
        products_path=Path(products_path) if products_path else None,
        retailers_path=Path(retailers_path) if retailers_path else None,
        output_path=Path(output_path) if output_path else None,
    )
    pipeline = SalesETLPipeline(config)

    sources = load_sources(pipeline)
    final = transform_sales(pipeline, sources)
    warnings = check_quality(pipeline, final)
    written = persist_sales(pipeline, final)

    return {
        "input_rows": sources.transactions.height,
        "output_rows": final.height,
        "output_path": written,
        "warnings": warnings,
    }


if __name__ == "__main__":
    gosales_batch_etl()
