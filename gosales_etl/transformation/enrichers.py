"""
Feature Derivation Module

Adds the derived analytics columns to the joined sales table.
Includes:
- Line financials (revenue, production cost, gross profit)
- Missing return counts filled with zero
- Shortened and regrouped product lines
- European region regrouping
- Order date parsing with fiscal year and quarter buckets

Every derived column is a row-wise function of columns already present.
"""

from typing import List

import polars as pl
import structlog

from gosales_etl import schema
from gosales_etl.exceptions import ColumnNotFoundError
from gosales_etl.transformation import rules

logger = structlog.get_logger(__name__)


REQUIRED_COLUMNS: List[str] = [
    schema.QUANTITY,
    schema.UNIT_PRICE,
    schema.UNIT_COST,
    schema.RETURN_COUNT,
    schema.PRODUCT_LINE,
    schema.COUNTRY,
    schema.REGION,
    schema.ORDER_DATE,
]


class FeatureDeriver:
    """
    Derives the financial and categorical features of each sales line.

    Example:
        deriver = FeatureDeriver()
        df = deriver.derive(joined_df)
    """

    def __init__(self, date_format: str = schema.ORDER_DATE_FORMAT):
        self.date_format = date_format

    def _require(self, df: pl.DataFrame, columns: List[str], stage: str) -> None:
        missing = [c for c in columns if c not in df.columns]
        if missing:
            raise ColumnNotFoundError(
                f"Columns not found: {missing}",
                stage=stage,
                columns=missing,
            )

    def add_financials(self, df: pl.DataFrame) -> pl.DataFrame:
        """
        Add revenue, tot_prod_cost and gross_profit.

        Computed in Float64 regardless of the source unit dtypes.
        """
        self._require(df, [schema.QUANTITY, schema.UNIT_PRICE, schema.UNIT_COST], "derive_financials")

        quantity = pl.col(schema.QUANTITY).cast(pl.Float64)
        df = df.with_columns([
            (quantity * pl.col(schema.UNIT_PRICE).cast(pl.Float64)).alias(schema.REVENUE),
            (quantity * pl.col(schema.UNIT_COST).cast(pl.Float64)).alias(schema.TOTAL_PRODUCTION_COST),
        ])
        return df.with_columns(
            (pl.col(schema.REVENUE) - pl.col(schema.TOTAL_PRODUCTION_COST)).alias(schema.GROSS_PROFIT)
        )

    def fill_missing_returns(self, df: pl.DataFrame) -> pl.DataFrame:
        """Replace missing return counts with 0"""
        self._require(df, [schema.RETURN_COUNT], "derive_returns")

        missing = df[schema.RETURN_COUNT].null_count()
        if missing:
            logger.debug("Filling missing return counts", rows=missing)

        return df.with_columns(
            pl.col(schema.RETURN_COUNT).cast(pl.Int64, strict=False).fill_null(0).alias(schema.RETURN_COUNT)
        )

    def add_product_line_groups(self, df: pl.DataFrame) -> pl.DataFrame:
        """Add prod_line (short names) and prod_line_2 (alternate grouping)"""
        self._require(df, [schema.PRODUCT_LINE], "derive_product_lines")

        return df.with_columns([
            rules.PRODUCT_LINE_SHORT.to_expr(schema.PRODUCT_LINE).alias(schema.PROD_LINE),
            rules.PRODUCT_LINE_GROUPED.to_expr(schema.PRODUCT_LINE).alias(schema.PROD_LINE_2),
        ])

    def add_region_groups(self, df: pl.DataFrame) -> pl.DataFrame:
        """Add region2: West/East Europe by country, otherwise the region"""
        self._require(df, [schema.COUNTRY, schema.REGION], "derive_regions")

        return df.with_columns(
            rules.REGION_GROUPS.to_expr(schema.COUNTRY, fallback_column=schema.REGION).alias(schema.REGION_2)
        )

    def parse_order_date(self, df: pl.DataFrame) -> pl.DataFrame:
        """Add ord_date parsed from the order date text"""
        self._require(df, [schema.ORDER_DATE], "derive_dates")

        source = df.schema[schema.ORDER_DATE]
        if source == pl.Date:
            return df.with_columns(pl.col(schema.ORDER_DATE).alias(schema.ORD_DATE))

        df = df.with_columns(
            pl.col(schema.ORDER_DATE)
            .cast(pl.Utf8)
            .str.strptime(pl.Date, self.date_format, strict=False)
            .alias(schema.ORD_DATE)
        )

        unparsed = df.filter(
            pl.col(schema.ORD_DATE).is_null() & pl.col(schema.ORDER_DATE).is_not_null()
        ).height
        if unparsed:
            logger.warning(
                "Order dates could not be parsed",
                rows=unparsed,
                format=self.date_format,
            )
        return df

    def add_date_buckets(self, df: pl.DataFrame) -> pl.DataFrame:
        """Add ord_date, fin_year, quarter_all and quarter_sel"""
        df = self.parse_order_date(df)

        return df.with_columns([
            rules.FISCAL_YEARS.to_expr(schema.ORD_DATE).alias(schema.FIN_YEAR),
            rules.QUARTERS_ALL.to_expr(schema.ORD_DATE).alias(schema.QUARTER_ALL),
            rules.QUARTERS_SELECTED.to_expr(schema.ORD_DATE).alias(schema.QUARTER_SEL),
        ])

    def derive(self, df: pl.DataFrame) -> pl.DataFrame:
        """
        Apply every derivation step.

        Raises:
            ColumnNotFoundError: If an input column of any step is absent
        """
        self._require(df, REQUIRED_COLUMNS, "derive")

        df = self.add_financials(df)
        df = self.fill_missing_returns(df)
        df = self.add_product_line_groups(df)
        df = self.add_region_groups(df)
        df = self.add_date_buckets(df)

        logger.info("Derived features", rows=df.height, columns=df.width)
        return df
