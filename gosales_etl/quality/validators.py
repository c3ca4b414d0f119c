"""
Data Validation Module

Column-level quality checks on polars DataFrames.

Each check counts the rows violating one rule on one column:
- nulls (order numbers, join keys, catalog attributes after the join)
- repeated join keys in a reference table
- values below or above a bound
- keys missing from a reference table
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

import polars as pl
import structlog

logger = structlog.get_logger(__name__)


class ValidationSeverity(str, Enum):
    """Severity levels for validation failures"""
    ERROR = "error"  # Caller aborts
    WARNING = "warning"  # Logged and reported only


class ValidationStatus(str, Enum):
    """Overall validation status"""
    PASSED = "passed"
    FAILED = "failed"
    PARTIAL = "partial"


@dataclass
class ValidationCheck:
    """Single validation check result"""
    name: str
    passed: bool
    severity: ValidationSeverity
    message: str
    details: Optional[Dict[str, Any]] = None
    failed_rows: int = 0
    total_rows: int = 0


@dataclass
class ValidationResult:
    """Outcome of one validate() call"""
    status: ValidationStatus
    checks: List[ValidationCheck] = field(default_factory=list)
    started_at: datetime = field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None

    @property
    def failures(self) -> List[ValidationCheck]:
        return [c for c in self.checks if not c.passed]

    @property
    def errors(self) -> List[ValidationCheck]:
        """Failed checks with ERROR severity"""
        return [c for c in self.failures if c.severity == ValidationSeverity.ERROR]

    @property
    def warnings(self) -> List[ValidationCheck]:
        return [c for c in self.failures if c.severity == ValidationSeverity.WARNING]

    @property
    def passed_checks(self) -> int:
        return len(self.checks) - len(self.failures)

    @property
    def failed_checks(self) -> int:
        return len(self.failures)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)


# Counts violating rows; may add entries to the details dict it is given
FailureCounter = Callable[[pl.DataFrame, Dict[str, Any]], int]


class DataValidator:
    """
    Chainable suite of column checks.

    Example:
        result = DataValidator().add_unique_check("product_number").validate(products_df)
        if result.errors:
            ...
    """

    def __init__(self, strict_mode: bool = False):
        self.strict_mode = strict_mode  # Warnings also fail the suite
        self._checks: List[Callable[[pl.DataFrame], ValidationCheck]] = []

    def _add_column_check(
        self,
        name: str,
        column: str,
        severity: ValidationSeverity,
        violation: str,
        count_failures: FailureCounter,
    ) -> "DataValidator":
        def check(df: pl.DataFrame) -> ValidationCheck:
            if column not in df.columns:
                return ValidationCheck(
                    name=name,
                    passed=False,
                    severity=severity,
                    message=f"Column '{column}' not found",
                )

            details: Dict[str, Any] = {}
            failed = count_failures(df, details)
            return ValidationCheck(
                name=name,
                passed=failed == 0,
                severity=severity,
                message=f"Column '{column}' has {failed} {violation}",
                details=details,
                failed_rows=failed,
                total_rows=df.height,
            )

        self._checks.append(check)
        return self

    def add_not_null_check(
        self,
        column: str,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Fail on null values in column"""
        return self._add_column_check(
            f"not_null_{column}", column, severity, "null values",
            lambda df, details: df[column].null_count(),
        )

    def add_unique_check(
        self,
        column: str,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
        sample_size: int = 5,
    ) -> "DataValidator":
        """
        Fail on repeated non-null values in column.

        Nulls never match in a join, so they are left to the not-null check.
        """
        def count(df: pl.DataFrame, details: Dict[str, Any]) -> int:
            values = df[column].drop_nulls()
            duplicates = values.len() - values.n_unique()
            if duplicates:
                details["sample_duplicates"] = (
                    values.filter(values.is_duplicated()).unique(maintain_order=True).head(sample_size).to_list()
                )
            return duplicates

        return self._add_column_check(f"unique_{column}", column, severity, "duplicate values", count)

    def add_range_check(
        self,
        column: str,
        min_value: Optional[float] = None,
        max_value: Optional[float] = None,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Fail on values outside [min_value, max_value]; an open bound is unchecked"""
        outside = pl.lit(False)
        if min_value is not None:
            outside = outside | (pl.col(column) < min_value)
        if max_value is not None:
            outside = outside | (pl.col(column) > max_value)

        return self._add_column_check(
            f"range_{column}", column, severity, f"values outside [{min_value}, {max_value}]",
            lambda df, details: df.filter(outside).height,
        )

    def add_referential_integrity_check(
        self,
        column: str,
        reference_df: pl.DataFrame,
        reference_column: str,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Fail on non-null values absent from reference_df[reference_column]"""
        known = reference_df[reference_column].drop_nulls().unique()

        return self._add_column_check(
            f"ref_integrity_{column}", column, severity, "values missing from the reference",
            lambda df, details: df.filter(pl.col(column).is_not_null() & ~pl.col(column).is_in(known.implode())).height,
        )

    def validate(self, df: pl.DataFrame) -> ValidationResult:
        """Run every registered check against df"""
        result = ValidationResult(status=ValidationStatus.PASSED)
        result.checks = [check(df) for check in self._checks]
        result.completed_at = datetime.now()

        for check in result.failures:
            logger.warning(
                f"Validation failed: {check.name}",
                message=check.message,
                severity=check.severity.value,
            )

        if result.errors or (self.strict_mode and result.warnings):
            result.status = ValidationStatus.FAILED
        elif result.warnings:
            result.status = ValidationStatus.PARTIAL
        return result


def create_reference_validator(key_column: str) -> DataValidator:
    """Validator for a reference catalog keyed by key_column"""
    return (
        DataValidator()
        .add_not_null_check(key_column, severity=ValidationSeverity.WARNING)
        .add_unique_check(key_column)
    )


def create_output_validator() -> DataValidator:
    """Warning-only validator for the finalized sales table"""
    return (
        DataValidator()
        .add_not_null_check("order_number", severity=ValidationSeverity.WARNING)
        .add_not_null_check("prod_name", severity=ValidationSeverity.WARNING)
        .add_not_null_check("retailer_type", severity=ValidationSeverity.WARNING)
        .add_range_check("quantity", min_value=0, severity=ValidationSeverity.WARNING)
        .add_range_check("return", min_value=0, severity=ValidationSeverity.WARNING)
    )
