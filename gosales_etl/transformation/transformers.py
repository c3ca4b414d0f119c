"""
ETL Transformer

Main pipeline orchestrator: load, normalize, join, derive, finalize and
persist the GO sales table.
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Iterator, List, Optional

import polars as pl
import structlog

from gosales_etl import schema
from gosales_etl.config.settings import PipelineConfig
from gosales_etl.exceptions import PipelineError
from gosales_etl.ingestion.batch_loader import BatchLoader, create_batch_loader
from gosales_etl.quality.validators import create_output_validator
from gosales_etl.storage.sink import ParquetSink
from .cleaners import ColumnNormalizer
from .enrichers import FeatureDeriver
from .finalizer import SchemaFinalizer
from .joiners import JoinEngine

logger = structlog.get_logger(__name__)


@dataclass
class SourceTables:
    """Raw inputs of one run"""
    transactions: pl.DataFrame
    products: pl.DataFrame
    retailers: pl.DataFrame


@dataclass
class PipelineResult:
    """Result of a pipeline run"""
    input_rows: int
    output_rows: int
    output_columns: int
    started_at: datetime
    completed_at: datetime
    duration_seconds: float
    output_path: str
    files_read: int = 0
    warnings: List[str] = field(default_factory=list)


class SalesETLPipeline:
    """
    GO sales ETL pipeline.

    Each stage is a public method so it can also be driven step by step
    (see workflows/batch_etl.py); run() chains them.

    Example:
        pipeline = SalesETLPipeline(config)
        result = pipeline.run()
    """

    def __init__(
        self,
        config: PipelineConfig,
        loader: Optional[BatchLoader] = None,
    ):
        self.config = config
        self.loader = loader or create_batch_loader(config)
        self.normalizer = ColumnNormalizer()
        self.join_engine = JoinEngine()
        self.deriver = FeatureDeriver()
        self.finalizer = SchemaFinalizer()
        self.sink = ParquetSink(compression=config.compression)

    @contextmanager
    def _stage(self, name: str) -> Iterator[None]:
        with structlog.contextvars.bound_contextvars(stage=name):
            try:
                yield
            except PipelineError as e:
                logger.error("Pipeline stage failed", **e.to_log())
                raise
            except Exception as e:
                logger.error("Pipeline stage failed", error=str(e), error_type=type(e).__name__)
                raise

    def load_sources(self) -> SourceTables:
        """Read the transaction directory and both catalogs"""
        with self._stage("load"):
            return SourceTables(
                transactions=self.loader.load_directory(self.config.input_dir, self.config.input_glob),
                products=self.loader.load_file(self.config.products_path),
                retailers=self.loader.load_file(self.config.retailers_path),
            )

    def normalize(self, sources: SourceTables) -> SourceTables:
        """Rename/drop transaction columns, lower-case retailer headers, trim text keys"""
        with self._stage("normalize"):
            transactions = self.normalizer.normalize_transactions(sources.transactions)
            retailers = self.normalizer.normalize_retailers(sources.retailers)
            keys = [schema.PRODUCT_KEY, schema.RETAILER_KEY]
            return SourceTables(
                transactions=self.normalizer.trim_strings(transactions, keys),
                products=self.normalizer.trim_strings(sources.products, keys),
                retailers=self.normalizer.trim_strings(retailers, keys),
            )

    def join(self, sources: SourceTables) -> pl.DataFrame:
        """Left-join the catalogs onto the transactions"""
        with self._stage("join"):
            return self.join_engine.join(sources.transactions, sources.products, sources.retailers)

    def derive(self, df: pl.DataFrame) -> pl.DataFrame:
        """Add financial, categorical and date-bucket columns"""
        with self._stage("derive"):
            return self.deriver.derive(df)

    def finalize(self, df: pl.DataFrame) -> pl.DataFrame:
        """Project onto the curated output schema"""
        with self._stage("finalize"):
            return self.finalizer.finalize(df)

    def check_output(self, df: pl.DataFrame) -> List[str]:
        """Run warning-level quality checks; returns failed check messages"""
        with self._stage("quality"):
            result = create_output_validator().validate(df)
            return [c.message for c in result.failures]

    def persist(self, df: pl.DataFrame, output_path: Optional[Path] = None) -> Path:
        """Atomically write the artifact"""
        with self._stage("persist"):
            return self.sink.write(df, output_path or self.config.output_path)

    def transform(self, sources: SourceTables) -> pl.DataFrame:
        """Normalize, join, derive and finalize in memory"""
        normalized = self.normalize(sources)
        joined = self.join(normalized)
        derived = self.derive(joined)
        return self.finalize(derived)

    def run(self) -> PipelineResult:
        """
        Run the full pipeline.

        Nothing is written unless every stage before persist succeeds.

        Raises:
            PipelineError: Any structural failure, after logging it
        """
        started_at = datetime.now()
        logger.info(
            "Starting GO sales ETL",
            input_dir=str(self.config.input_dir),
            pattern=self.config.input_glob,
            output=str(self.config.output_path),
        )

        sources = self.load_sources()
        input_rows = sources.transactions.height

        final = self.transform(sources)
        warnings = self.check_output(final)
        output_file = self.persist(final)

        completed_at = datetime.now()
        directory_loads = [r for r in self.loader.results if r.source == str(self.config.input_dir)]

        result = PipelineResult(
            input_rows=input_rows,
            output_rows=final.height,
            output_columns=final.width,
            started_at=started_at,
            completed_at=completed_at,
            duration_seconds=(completed_at - started_at).total_seconds(),
            output_path=str(output_file),
            files_read=directory_loads[-1].files_read if directory_loads else 0,
            warnings=warnings,
        )

        logger.info(
            f"GO sales ETL complete: {result.input_rows} input → {result.output_rows} output, "
            f"duration: {result.duration_seconds:.2f}s",
            output=result.output_path,
        )
        return result


def run_pipeline(config: PipelineConfig) -> PipelineResult:
    """Convenience function to run the pipeline for a configuration"""
    return SalesETLPipeline(config).run()
