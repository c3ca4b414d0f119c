"""
Bucketing Rule Tables

Each derived category is an ordered table of rules evaluated first match
wins, with a fallback when nothing matches. A table can be evaluated on a
single Python value (lookup) or compiled to one polars when/then chain
(to_expr); both read the same rows.

Date windows are inclusive on both ends.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, FrozenSet, Optional, Tuple, Union

import polars as pl


@dataclass(frozen=True)
class ValueRule:
    """Matches when the value is one of a fixed set"""
    values: FrozenSet[str]
    label: str

    def matches(self, value: Any) -> bool:
        return value in self.values

    def predicate(self, expr: pl.Expr) -> pl.Expr:
        return expr.is_in(sorted(self.values))


@dataclass(frozen=True)
class DateWindow:
    """Matches dates between start and end, both inclusive"""
    start: date
    end: date
    label: str

    def matches(self, value: Optional[date]) -> bool:
        return value is not None and self.start <= value <= self.end

    def predicate(self, expr: pl.Expr) -> pl.Expr:
        return expr.is_between(self.start, self.end, closed="both")


Rule = Union[ValueRule, DateWindow]

_SAME = object()


@dataclass(frozen=True)
class RuleTable:
    """
    Ordered rules plus a fallback.

    With a literal fallback every unmatched value (nulls included) maps to
    it. Without one, unmatched rows keep the value of a fallback column,
    which defaults to the input column itself.
    """
    name: str
    rules: Tuple[Rule, ...]
    fallback: Optional[str] = None

    def lookup(self, value: Any, fallback_value: Any = _SAME) -> Any:
        for rule in self.rules:
            if rule.matches(value):
                return rule.label
        if self.fallback is not None:
            return self.fallback
        return value if fallback_value is _SAME else fallback_value

    def to_expr(self, column: str, fallback_column: Optional[str] = None) -> pl.Expr:
        source = pl.col(column)
        if self.fallback is not None:
            otherwise = pl.lit(self.fallback, dtype=pl.Utf8)
        else:
            otherwise = pl.col(fallback_column or column)

        if not self.rules:
            return otherwise

        first, *rest = self.rules
        chain = pl.when(first.predicate(source)).then(pl.lit(first.label, dtype=pl.Utf8))
        for rule in rest:
            chain = chain.when(rule.predicate(source)).then(pl.lit(rule.label, dtype=pl.Utf8))
        return chain.otherwise(otherwise)

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(rule.label for rule in self.rules)


def _single(value: str, label: str) -> ValueRule:
    return ValueRule(frozenset({value}), label)


OTHER = "other"

# =============================================================================
# PRODUCT LINES
# =============================================================================

PRODUCT_LINE_SHORT = RuleTable(
    name="prod_line",
    rules=(
        _single("Camping Equipment", "Camping Eqpt"),
        _single("Golf Equipment", "Golf Eqpt"),
        _single("Mountaineering Equipment", "Mountain Eqpt"),
        _single("Personal Accessories", "Personal Acces"),
        _single("Outdoor Protection", "Outdoor Prot"),
    ),
)

# Outdoor Protection is folded into Personal Accessories
PRODUCT_LINE_GROUPED = RuleTable(
    name="prod_line_2",
    rules=(
        _single("Camping Equipment", "Camping Eqpt"),
        _single("Golf Equipment", "Golf Eqpt"),
        _single("Mountaineering Equipment", "Mountain Eqpt"),
        _single("Personal Accessories", "Personal Acces"),
        _single("Outdoor Protection", "Personal Acces"),
    ),
)

# =============================================================================
# REGIONS
# =============================================================================

REGION_GROUPS = RuleTable(
    name="region2",
    rules=(
        ValueRule(
            frozenset({"United Kingdom", "France", "Spain", "Netherlands", "Belgium", "Switzerland"}),
            "West Europe",
        ),
        ValueRule(
            frozenset({"Germany", "Italy", "Finland", "Austria", "Sweden", "Denmark"}),
            "East Europe",
        ),
    ),
)

# =============================================================================
# FISCAL YEARS (July 1 - June 30)
# =============================================================================

FISCAL_YEARS = RuleTable(
    name="fin_year",
    rules=(
        DateWindow(date(2004, 7, 1), date(2005, 6, 30), "FY_04_05"),
        DateWindow(date(2005, 7, 1), date(2006, 6, 30), "FY_05_06"),
        DateWindow(date(2006, 7, 1), date(2007, 6, 30), "FY_06_07"),
    ),
    fallback=OTHER,
)

# =============================================================================
# QUARTERS
# =============================================================================

QUARTER_WINDOWS: Tuple[DateWindow, ...] = (
    DateWindow(date(2004, 1, 1), date(2004, 3, 31), "04_Q1"),
    DateWindow(date(2004, 4, 1), date(2004, 6, 30), "04_Q2"),
    DateWindow(date(2004, 7, 1), date(2004, 9, 30), "04_Q3"),
    DateWindow(date(2004, 10, 1), date(2004, 12, 31), "04_Q4"),
    DateWindow(date(2005, 1, 1), date(2005, 3, 31), "05_Q1"),
    DateWindow(date(2005, 4, 1), date(2005, 6, 30), "05_Q2"),
    DateWindow(date(2005, 7, 1), date(2005, 9, 30), "05_Q3"),
    DateWindow(date(2005, 10, 1), date(2005, 12, 31), "05_Q4"),
    DateWindow(date(2006, 1, 1), date(2006, 3, 31), "06_Q1"),
    DateWindow(date(2006, 4, 1), date(2006, 6, 30), "06_Q2"),
    DateWindow(date(2006, 7, 1), date(2006, 9, 30), "06_Q3"),
    DateWindow(date(2006, 10, 1), date(2006, 12, 31), "06_Q4"),
    DateWindow(date(2007, 1, 1), date(2007, 3, 31), "07_Q1"),
    DateWindow(date(2007, 4, 1), date(2007, 6, 30), "07_Q2"),
    DateWindow(date(2007, 7, 1), date(2007, 9, 30), "07_Q3"),
)

QUARTERS_ALL = RuleTable(name="quarter_all", rules=QUARTER_WINDOWS, fallback=OTHER)

# The three fiscal years only: 04_Q3 through 07_Q2
QUARTERS_SELECTED = RuleTable(
    name="quarter_sel",
    rules=tuple(
        w for w in QUARTER_WINDOWS
        if w.start >= date(2004, 7, 1) and w.end <= date(2007, 6, 30)
    ),
    fallback=OTHER,
)
