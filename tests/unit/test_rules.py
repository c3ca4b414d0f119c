"""
Unit Tests - Bucketing Rule Tables
"""
from datetime import date

import pytest
import polars as pl

from gosales_etl.transformation import rules
from gosales_etl.transformation.rules import DateWindow, RuleTable, ValueRule


class TestRuleTable:
    """Tests for RuleTable evaluation"""

    def test_first_match_wins(self):
        """Earlier rules shadow later overlapping ones"""
        table = RuleTable(
            name="t",
            rules=(ValueRule(frozenset({"a"}), "first"), ValueRule(frozenset({"a", "b"}), "second")),
            fallback="none",
        )

        assert table.lookup("a") == "first"
        assert table.lookup("b") == "second"
        assert table.lookup("c") == "none"

    def test_passthrough_without_fallback(self):
        """Without a fallback label unmatched values pass through"""
        table = RuleTable(name="t", rules=(ValueRule(frozenset({"a"}), "A"),))

        assert table.lookup("z") == "z"
        assert table.lookup("z", fallback_value="other column") == "other column"
        assert table.lookup("z", fallback_value=None) is None

    def test_expression_matches_lookup(self):
        """to_expr and lookup agree row by row"""
        values = ["Camping Equipment", "Outdoor Protection", "Unknown Line", None]
        df = pl.DataFrame({"line": values})

        result = df.select(rules.PRODUCT_LINE_GROUPED.to_expr("line").alias("out"))

        assert result["out"].to_list() == [rules.PRODUCT_LINE_GROUPED.lookup(v) for v in values]

    def test_expression_fallback_column(self):
        """Unmatched rows take the fallback column's value"""
        df = pl.DataFrame({
            "country": ["Germany", "Japan", None],
            "region": ["Central Europe", "Asia Pacific", "Americas"],
        })

        result = df.select(rules.REGION_GROUPS.to_expr("country", fallback_column="region"))

        assert result.to_series().to_list() == ["East Europe", "Asia Pacific", "Americas"]


class TestDateWindows:
    """Tests for fiscal year and quarter windows"""

    @pytest.mark.parametrize("value,expected", [
        (date(2004, 6, 30), "other"),
        (date(2004, 7, 1), "FY_04_05"),
        (date(2005, 6, 30), "FY_04_05"),
        (date(2005, 7, 1), "FY_05_06"),
        (date(2007, 6, 30), "FY_06_07"),
        (date(2007, 7, 1), "other"),
        (None, "other"),
    ])
    def test_fiscal_year_edges(self, value, expected):
        """Both window ends are inclusive"""
        assert rules.FISCAL_YEARS.lookup(value) == expected

    def test_quarter_windows_are_contiguous(self):
        """Each quarter starts the day after the previous one ends"""
        windows = rules.QUARTER_WINDOWS
        for previous, current in zip(windows, windows[1:]):
            assert (current.start - previous.end).days == 1

    def test_quarter_labels(self):
        """Quarter labels cover 2004 Q1 through 2007 Q3"""
        assert rules.QUARTERS_ALL.labels[0] == "04_Q1"
        assert rules.QUARTERS_ALL.labels[-1] == "07_Q3"
        assert len(rules.QUARTERS_ALL.labels) == 15

    def test_selected_quarters_cover_fiscal_years(self):
        """Selected quarters span exactly the three fiscal years"""
        selected = rules.QUARTERS_SELECTED.rules

        assert len(selected) == 12
        assert selected[0].start == date(2004, 7, 1)
        assert selected[-1].end == date(2007, 6, 30)

    @pytest.mark.parametrize("value,all_label,sel_label", [
        (date(2004, 2, 10), "04_Q1", "other"),
        (date(2005, 8, 15), "05_Q3", "05_Q3"),
        (date(2007, 8, 1), "07_Q3", "other"),
        (date(2007, 10, 1), "other", "other"),
    ])
    def test_quarter_lookup(self, value, all_label, sel_label):
        """Quarter buckets for dates inside and outside the selected span"""
        assert rules.QUARTERS_ALL.lookup(value) == all_label
        assert rules.QUARTERS_SELECTED.lookup(value) == sel_label

    def test_window_expression(self):
        """DateWindow predicates are inclusive in polars as well"""
        window = DateWindow(date(2005, 1, 1), date(2005, 3, 31), "Q")
        df = pl.DataFrame({"d": [date(2004, 12, 31), date(2005, 1, 1), date(2005, 3, 31), date(2005, 4, 1)]})

        result = df.select(window.predicate(pl.col("d")))

        assert result.to_series().to_list() == [False, True, True, False]
