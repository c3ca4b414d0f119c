"""
Join Engine

Left-joins the transaction table to the product and retailer catalogs.

Every transaction row survives exactly once and in its original position;
rows without a catalog match carry nulls for the catalog columns.
"""

from dataclasses import dataclass
from typing import List, Tuple

import polars as pl
import structlog

from gosales_etl import schema
from gosales_etl.exceptions import (
    ColumnNotFoundError,
    DuplicateKeyError,
    JoinKeyTypeError,
    SchemaMismatchError,
)
from gosales_etl.quality.validators import (
    DataValidator,
    ValidationSeverity,
    create_reference_validator,
)

logger = structlog.get_logger(__name__)

ROW_INDEX = "__row_nr"
REFERENCE_SUFFIX = "__ref"


@dataclass(frozen=True)
class JoinSpec:
    """One left-join step"""
    name: str
    key: str
    # Columns both sides may carry; the transaction value wins, the reference fills its nulls
    coalesce: Tuple[str, ...] = ()


PRODUCT_JOIN = JoinSpec(name="products", key=schema.PRODUCT_KEY)
RETAILER_JOIN = JoinSpec(name="retailers", key=schema.RETAILER_KEY, coalesce=(schema.RETAILER_NAME,))


def _is_same_family(left: pl.DataType, right: pl.DataType) -> bool:
    return (left.is_integer() and right.is_integer()) or (left.is_float() and right.is_float())


class JoinEngine:
    """
    Order-preserving left joins against key-unique reference tables.

    Example:
        engine = JoinEngine()
        joined = engine.join(sales, products, retailers)
    """

    def _require_key(self, df: pl.DataFrame, spec: JoinSpec, side: str) -> None:
        if spec.key not in df.columns:
            raise ColumnNotFoundError(
                f"Join key '{spec.key}' not found in {side} table",
                stage=f"join_{spec.name}",
                column=spec.key,
                side=side,
            )

    def align_key_types(self, left: pl.DataFrame, right: pl.DataFrame, spec: JoinSpec) -> pl.DataFrame:
        """
        Return the right table with its key cast to the left key's dtype.

        Widening within integers or within floats is allowed; anything else
        (e.g. integer against text) is rejected.

        Raises:
            JoinKeyTypeError: If the key dtypes are incompatible
        """
        left_dtype = left.schema[spec.key]
        right_dtype = right.schema[spec.key]

        if left_dtype == right_dtype:
            return right
        if _is_same_family(left_dtype, right_dtype):
            logger.debug(
                "Casting reference key",
                table=spec.name,
                key=spec.key,
                from_dtype=str(right_dtype),
                to_dtype=str(left_dtype),
            )
            return right.with_columns(pl.col(spec.key).cast(left_dtype))

        raise JoinKeyTypeError(
            f"Join key '{spec.key}' has incompatible types: {left_dtype} vs {right_dtype}",
            stage=f"join_{spec.name}",
            column=spec.key,
            left_dtype=str(left_dtype),
            right_dtype=str(right_dtype),
        )

    def check_reference_keys(self, right: pl.DataFrame, spec: JoinSpec) -> None:
        """
        Raises:
            DuplicateKeyError: If the reference key is not unique
        """
        result = create_reference_validator(spec.key).validate(right)
        for check in result.errors:
            raise DuplicateKeyError(
                f"Reference table '{spec.name}' has duplicate keys in '{spec.key}'",
                stage=f"join_{spec.name}",
                column=spec.key,
                duplicate_count=check.failed_rows,
                sample_duplicates=(check.details or {}).get("sample_duplicates", []),
            )

    def _check_overlap(self, left: pl.DataFrame, right: pl.DataFrame, spec: JoinSpec) -> List[str]:
        """
        Return the shared columns listed in spec.coalesce.

        Raises:
            SchemaMismatchError: If any other non-key column is on both sides
        """
        shared = (set(left.columns) & set(right.columns)) - {spec.key}
        overlap: List[str] = sorted(shared - set(spec.coalesce))
        if overlap:
            raise SchemaMismatchError(
                f"Columns present on both sides of the {spec.name} join",
                stage=f"join_{spec.name}",
                columns=overlap,
            )
        return [c for c in spec.coalesce if c in shared]

    def left_join(self, left: pl.DataFrame, right: pl.DataFrame, spec: JoinSpec) -> pl.DataFrame:
        """Left-join one reference table after validating it"""
        self._require_key(left, spec, "left")
        self._require_key(right, spec, spec.name)
        shared = self._check_overlap(left, right, spec)
        right = self.align_key_types(left, right, spec)
        self.check_reference_keys(right, spec)

        unmatched = (
            DataValidator()
            .add_referential_integrity_check(spec.key, right, spec.key, severity=ValidationSeverity.WARNING)
            .validate(left)
        )
        orphans = unmatched.checks[0].failed_rows if unmatched.checks else 0

        right = right.rename({c: f"{c}{REFERENCE_SUFFIX}" for c in shared})
        joined = left.join(right, on=spec.key, how="left")
        if shared:
            joined = joined.with_columns([
                pl.coalesce([pl.col(c), pl.col(f"{c}{REFERENCE_SUFFIX}")]).alias(c)
                for c in shared
            ]).drop([f"{c}{REFERENCE_SUFFIX}" for c in shared])

        if joined.height != left.height:
            raise DuplicateKeyError(
                f"Join with '{spec.name}' changed the row count",
                stage=f"join_{spec.name}",
                rows_before=left.height,
                rows_after=joined.height,
            )

        logger.info(
            "Joined reference table",
            table=spec.name,
            key=spec.key,
            rows=joined.height,
            unmatched_rows=orphans,
        )
        return joined

    def join(
        self,
        transactions: pl.DataFrame,
        products: pl.DataFrame,
        retailers: pl.DataFrame,
    ) -> pl.DataFrame:
        """
        Left-join transactions to products, then to retailers.

        Returns:
            Joined DataFrame in the original transaction row order
        """
        df = transactions.with_row_index(ROW_INDEX)
        df = self.left_join(df, products, PRODUCT_JOIN)
        df = self.left_join(df, retailers, RETAILER_JOIN)
        return df.sort(ROW_INDEX).drop(ROW_INDEX)
