"""
Batch Data Loader

Reads delimited transaction and reference files into polars DataFrames.
Supports:
- Single-file loads for the reference catalogs
- Glob-driven directory loads stacked into one table
- Column-set validation across files
- Optional threaded reads with deterministic row order
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Union

import polars as pl
import structlog
from pydantic import BaseModel

from gosales_etl.config.settings import PipelineConfig
from gosales_etl.exceptions import SchemaMismatchError, SourceNotFoundError

logger = structlog.get_logger(__name__)


@dataclass
class BatchFileConfig:
    """Configuration for delimited file parsing"""
    delimiter: str = ","
    encoding: str = "utf8"
    schema: Optional[Dict[str, pl.DataType]] = None
    null_values: List[str] = field(default_factory=lambda: ["", "NULL", "null", "None", "NA", "N/A"])
    infer_schema_length: int = 10000


class LoadResult(BaseModel):
    """Result of a load operation"""
    source: str
    files_read: int
    rows_loaded: int
    columns: int
    started_at: datetime
    completed_at: datetime
    load_duration_seconds: float = 0


class BatchLoader:
    """
    Loader for the raw sales sources.

    Dates are kept as text; the feature deriver parses the one it needs.

    Example:
        loader = BatchLoader()
        sales = loader.load_directory("data/raw/sales", "*.csv")
        products = loader.load_file("data/raw/products.csv")
    """

    def __init__(
        self,
        file_config: Optional[BatchFileConfig] = None,
        max_workers: int = 1,
    ):
        self.file_config = file_config or BatchFileConfig()
        self.max_workers = max(1, max_workers)
        self.results: List[LoadResult] = []

    def _read_csv(self, file_path: Path) -> pl.DataFrame:
        """Read CSV file with Polars"""
        config = self.file_config
        try:
            return pl.read_csv(
                file_path,
                separator=config.delimiter,
                encoding=config.encoding,
                null_values=config.null_values,
                try_parse_dates=False,
                infer_schema_length=config.infer_schema_length,
                schema_overrides=config.schema,
            )
        except pl.exceptions.PolarsError as e:
            logger.error("Failed to parse file", file=str(file_path), error=str(e))
            raise

    def _record(self, source: Path, files_read: int, df: pl.DataFrame, started_at: datetime) -> None:
        completed_at = datetime.now()
        result = LoadResult(
            source=str(source),
            files_read=files_read,
            rows_loaded=df.height,
            columns=df.width,
            started_at=started_at,
            completed_at=completed_at,
            load_duration_seconds=(completed_at - started_at).total_seconds(),
        )
        self.results.append(result)
        logger.info(
            "Load completed",
            source=result.source,
            files=result.files_read,
            rows=result.rows_loaded,
            duration_seconds=result.load_duration_seconds,
        )

    def load_file(self, file_path: Union[str, Path]) -> pl.DataFrame:
        """
        Load a single delimited file.

        Raises:
            SourceNotFoundError: If the path is missing or not a file
        """
        file_path = Path(file_path)
        started_at = datetime.now()

        if not file_path.is_file():
            raise SourceNotFoundError(f"File not found: {file_path}", path=str(file_path))

        df = self._read_csv(file_path)
        self._record(file_path, 1, df, started_at)
        return df

    def _check_columns(self, reference: Path, expected: List[str], file_path: Path, df: pl.DataFrame) -> None:
        missing = sorted(set(expected) - set(df.columns))
        extra = sorted(set(df.columns) - set(expected))
        if missing or extra:
            raise SchemaMismatchError(
                f"Columns of {file_path.name} do not match {reference.name}",
                path=str(file_path),
                reference=str(reference),
                missing_columns=missing,
                extra_columns=extra,
            )

    def load_directory(
        self,
        directory: Union[str, Path],
        pattern: str = "*.csv",
    ) -> pl.DataFrame:
        """
        Load all matching files from a directory and stack their rows.

        Files are read in sorted name order; every file must carry the same
        column set as the first one.

        Args:
            directory: Directory containing files
            pattern: Glob pattern for file matching

        Returns:
            One DataFrame holding the rows of every file

        Raises:
            SourceNotFoundError: If the directory is missing or nothing matches
            SchemaMismatchError: If a file's columns differ from the first file's
        """
        directory = Path(directory)
        started_at = datetime.now()

        if not directory.is_dir():
            raise SourceNotFoundError(f"Directory not found: {directory}", path=str(directory))

        files = sorted(p for p in directory.glob(pattern) if p.is_file())
        if not files:
            raise SourceNotFoundError(
                f"No files matching '{pattern}' in {directory}",
                path=str(directory),
                pattern=pattern,
            )

        logger.info(
            f"Found {len(files)} files to load",
            directory=str(directory),
            pattern=pattern,
            workers=self.max_workers,
        )

        if self.max_workers > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                frames = list(pool.map(self._read_csv, files))
        else:
            frames = [self._read_csv(f) for f in files]

        expected = frames[0].columns
        for file_path, df in zip(files[1:], frames[1:]):
            self._check_columns(files[0], expected, file_path, df)

        frames = self._reconcile_dtypes(files, [df.select(expected) for df in frames])
        combined = pl.concat(frames, how="vertical_relaxed")
        self._record(directory, len(files), combined, started_at)
        return combined

    def _reconcile_dtypes(self, files: List[Path], frames: List[pl.DataFrame]) -> List[pl.DataFrame]:
        """
        Give all-null columns the dtype the column has in the files that hold values.

        A header-only file, or a period with no returns, reads as text. Numeric
        widening (Int64 against Float64) is left to the relaxed concat; text in
        one file against numbers in another is drift and is rejected.

        Raises:
            SchemaMismatchError: If a column holds text in one file and numbers in another
        """
        targets: Dict[str, pl.DataType] = {}
        for column in frames[0].columns:
            seen = {
                file_path.name: df.schema[column]
                for file_path, df in zip(files, frames)
                if df[column].null_count() < df.height
            }
            if not seen:
                continue
            dtypes = list(seen.values())
            if any(d != dtypes[0] for d in dtypes) and not all(d.is_numeric() for d in dtypes):
                raise SchemaMismatchError(
                    f"Column '{column}' changes type across files",
                    column=column,
                    dtypes={name: str(d) for name, d in seen.items()},
                )
            targets[column] = dtypes[0]

        return [
            df.with_columns([
                pl.col(column).cast(dtype)
                for column, dtype in targets.items()
                if df.schema[column] != dtype and df[column].null_count() == df.height
            ])
            for df in frames
        ]


def create_batch_loader(config: PipelineConfig) -> BatchLoader:
    """Create a BatchLoader from the pipeline configuration"""
    return BatchLoader(
        file_config=BatchFileConfig(delimiter=config.delimiter, encoding=config.encoding),
        max_workers=config.max_workers,
    )
