"""
Schema Finalizer

Selects, orders and renames the curated output columns.
"""

from typing import List, Optional, Tuple

import polars as pl
import structlog

from gosales_etl import schema
from gosales_etl.exceptions import ColumnNotFoundError

logger = structlog.get_logger(__name__)


class SchemaFinalizer:
    """
    Projects the derived table onto the curated schema.

    Columns outside the selection list are dropped.
    """

    def __init__(self, columns: Optional[List[Tuple[str, str]]] = None):
        self.columns = columns or schema.OUTPUT_COLUMNS

    @property
    def output_names(self) -> List[str]:
        return [target for _, target in self.columns]

    def finalize(self, df: pl.DataFrame) -> pl.DataFrame:
        """
        Raises:
            ColumnNotFoundError: If any selected source column is absent
        """
        missing = [source for source, _ in self.columns if source not in df.columns]
        if missing:
            raise ColumnNotFoundError(
                f"Columns not found for output schema: {missing}",
                stage="finalize",
                columns=missing,
            )

        dropped = sorted(set(df.columns) - {source for source, _ in self.columns})
        logger.debug("Finalizing schema", columns=len(self.columns), dropped=dropped)

        return df.select([pl.col(source).alias(target) for source, target in self.columns])
