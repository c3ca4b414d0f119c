"""
Unit Tests - Feature Derivation
"""
from datetime import date

import pytest
import polars as pl

from gosales_etl.exceptions import ColumnNotFoundError
from gosales_etl.transformation import FeatureDeriver, JoinEngine


@pytest.fixture
def joined_df(sales_df, products_df, retailers_df) -> pl.DataFrame:
    return JoinEngine().join(sales_df, products_df, retailers_df)


class TestFinancials:
    """Tests for FeatureDeriver.add_financials"""

    def test_revenue_and_costs(self, joined_df):
        """revenue, tot_prod_cost and gross_profit per line"""
        result = FeatureDeriver().add_financials(joined_df)
        first = result.row(0, named=True)

        assert first["revenue"] == pytest.approx(25.0)
        assert first["tot_prod_cost"] == pytest.approx(10.0)
        assert first["gross_profit"] == pytest.approx(15.0)

    def test_gross_profit_identity(self, joined_df):
        """gross_profit is revenue minus production cost on every row"""
        result = FeatureDeriver().add_financials(joined_df)

        diff = result.select(
            (pl.col("revenue") - pl.col("tot_prod_cost") - pl.col("gross_profit")).abs().max()
        ).item()
        assert diff == pytest.approx(0.0)
        assert result.schema["revenue"] == pl.Float64

    def test_missing_quantity(self, joined_df):
        """Absent input column raises ColumnNotFoundError"""
        with pytest.raises(ColumnNotFoundError):
            FeatureDeriver().add_financials(joined_df.drop("quantity"))


class TestReturns:
    """Tests for FeatureDeriver.fill_missing_returns"""

    def test_fill_missing_returns(self, joined_df):
        """Missing return counts become 0, present ones are kept"""
        result = FeatureDeriver().fill_missing_returns(joined_df)

        assert result["return_count"].to_list() == [0, 2, 0, 0]

    def test_text_return_counts(self):
        """A text column from an all-empty file still becomes integers"""
        df = pl.DataFrame({"return_count": ["3", None]})

        result = FeatureDeriver().fill_missing_returns(df)

        assert result["return_count"].to_list() == [3, 0]
        assert result.schema["return_count"] == pl.Int64


class TestCategories:
    """Tests for product line and region groups"""

    def test_product_lines(self, joined_df):
        """Outdoor Protection is shortened and regrouped"""
        result = FeatureDeriver().add_product_line_groups(joined_df)

        assert result["prod_line"].to_list() == ["Camping Eqpt", "Outdoor Prot", "Golf Eqpt", None]
        assert result["prod_line_2"].to_list() == ["Camping Eqpt", "Personal Acces", "Golf Eqpt", None]

    def test_regions(self, joined_df):
        """European countries are regrouped, others keep their region"""
        result = FeatureDeriver().add_region_groups(joined_df)

        assert result["region2"].to_list() == ["East Europe", "Americas", "West Europe", "East Europe"]


class TestDateBuckets:
    """Tests for order date parsing and bucketing"""

    def test_concrete_dates(self, joined_df):
        """Fiscal year and quarters for in- and out-of-window dates"""
        result = FeatureDeriver().add_date_buckets(joined_df)

        assert result["ord_date"].to_list() == [
            date(2005, 8, 15), date(2004, 7, 1), date(2008, 1, 1), date(2007, 6, 30),
        ]
        assert result["fin_year"].to_list() == ["FY_05_06", "FY_04_05", "other", "FY_06_07"]
        assert result["quarter_all"].to_list() == ["05_Q3", "04_Q3", "other", "07_Q2"]
        assert result["quarter_sel"].to_list() == ["05_Q3", "04_Q3", "other", "07_Q2"]

    def test_unparseable_date_is_other(self):
        """Dates that do not parse become null and fall into 'other'"""
        df = pl.DataFrame({"order_date": ["15/08/2005", "2005-08-15"]})

        result = FeatureDeriver().add_date_buckets(df)

        assert result["ord_date"].to_list() == [None, date(2005, 8, 15)]
        assert result["fin_year"].to_list() == ["other", "FY_05_06"]

    def test_already_parsed_dates(self):
        """A Date-typed order date is used as-is"""
        df = pl.DataFrame({"order_date": [date(2006, 12, 31)]})

        result = FeatureDeriver().add_date_buckets(df)

        assert result["quarter_all"].to_list() == ["06_Q4"]


class TestDerive:
    """Tests for FeatureDeriver.derive"""

    def test_adds_every_column(self, joined_df):
        """All derived columns are added and no row is lost"""
        result = FeatureDeriver().derive(joined_df)

        for column in [
            "revenue", "tot_prod_cost", "gross_profit", "prod_line", "prod_line_2",
            "region2", "ord_date", "fin_year", "quarter_all", "quarter_sel",
        ]:
            assert column in result.columns
        assert result.height == joined_df.height

    def test_deterministic(self, joined_df):
        """The same input yields the same output"""
        deriver = FeatureDeriver()

        assert deriver.derive(joined_df).equals(deriver.derive(joined_df))

    def test_missing_columns_listed(self, joined_df):
        """All absent inputs are reported together"""
        with pytest.raises(ColumnNotFoundError) as exc_info:
            FeatureDeriver().derive(joined_df.drop(["region_en", "order_date"]))

        assert exc_info.value.context["columns"] == ["region_en", "order_date"]
