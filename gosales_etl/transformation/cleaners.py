"""
Column Normalization Module

Brings the raw sources onto one column vocabulary before joining.
Handles:
- Canonical renames on the transaction feed
- Dropping localized duplicates of the order method
- Lower-casing retailer catalog headers
- Whitespace trimming of string columns
"""

from typing import Dict, List, Optional

import polars as pl
import structlog

from gosales_etl import schema
from gosales_etl.exceptions import ColumnNotFoundError, SchemaMismatchError

logger = structlog.get_logger(__name__)


class ColumnNormalizer:
    """
    Column normalizer for the GO sales sources.

    Example:
        normalizer = ColumnNormalizer()
        sales = normalizer.normalize_transactions(sales)
        retailers = normalizer.normalize_retailers(retailers)
    """

    def __init__(self, transaction_renames: Optional[Dict[str, str]] = None):
        self.transaction_renames = transaction_renames or {
            schema.ORDER_METHOD_SOURCE: schema.ORDER_METHOD,
            schema.RETAILER_NAME_SOURCE: schema.RETAILER_NAME,
        }

    def _rename(self, df: pl.DataFrame, mapping: Dict[str, str], stage: str) -> pl.DataFrame:
        """Rename columns by name, failing on any absent source column"""
        for source in mapping:
            if source not in df.columns:
                raise ColumnNotFoundError(
                    f"Column '{source}' not found",
                    stage=stage,
                    column=source,
                )
        return df.rename(mapping)

    def localized_columns(self, df: pl.DataFrame) -> List[str]:
        """Order-method columns in languages other than English"""
        return [c for c in df.columns if schema.LOCALIZED_ORDER_METHOD.match(c)]

    def normalize_transactions(self, df: pl.DataFrame) -> pl.DataFrame:
        """
        Rename the English order method and the retailer display name to their
        canonical names and drop every other-language order method column.

        Raises:
            ColumnNotFoundError: If a column to rename is absent
        """
        dropped = self.localized_columns(df)
        df = self._rename(df, self.transaction_renames, stage="normalize_transactions")
        df = df.drop(dropped)

        logger.debug(
            "Normalized transaction columns",
            renamed=list(self.transaction_renames),
            dropped=dropped,
        )
        return df

    def normalize_retailers(self, df: pl.DataFrame) -> pl.DataFrame:
        """
        Lower-case every retailer catalog column name.

        Raises:
            SchemaMismatchError: If two names collide once lower-cased
        """
        lowered = [c.lower() for c in df.columns]
        if len(set(lowered)) != len(lowered):
            collisions = sorted({c for c in lowered if lowered.count(c) > 1})
            raise SchemaMismatchError(
                "Retailer columns collide after lower-casing",
                stage="normalize_retailers",
                columns=collisions,
            )
        return df.rename(dict(zip(df.columns, lowered)))

    def trim_strings(self, df: pl.DataFrame, columns: Optional[List[str]] = None) -> pl.DataFrame:
        """Trim whitespace from string columns"""
        string_cols = columns or [
            col for col, dtype in zip(df.columns, df.dtypes)
            if dtype == pl.Utf8
        ]

        return df.with_columns([
            pl.col(col).str.strip_chars().alias(col)
            for col in string_cols
            if col in df.columns and df.schema[col] == pl.Utf8
        ])
