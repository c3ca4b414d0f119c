"""
Unit Tests - Schema Finalizer
"""
import pytest
import polars as pl

from gosales_etl import schema
from gosales_etl.exceptions import ColumnNotFoundError
from gosales_etl.transformation import FeatureDeriver, JoinEngine, SchemaFinalizer


@pytest.fixture
def derived_df(sales_df, products_df, retailers_df) -> pl.DataFrame:
    joined = JoinEngine().join(sales_df, products_df, retailers_df)
    return FeatureDeriver().derive(joined)


class TestSchemaFinalizer:
    """Tests for SchemaFinalizer"""

    def test_output_columns_in_order(self, derived_df):
        """Output columns are exactly the curated list, in order"""
        finalizer = SchemaFinalizer()

        result = finalizer.finalize(derived_df)

        assert result.columns == finalizer.output_names
        assert result.columns[:3] == ["order_number", "order_date", "ord_date"]
        assert result.columns[-2:] == ["intro_date", "halt_date"]
        assert len(result.columns) == len(schema.OUTPUT_COLUMNS)

    def test_renamed_values_carried(self, derived_df):
        """Renamed columns keep their source values"""
        result = SchemaFinalizer().finalize(derived_df)

        assert result["prod_numb"].to_list() == derived_df["product_number"].to_list()
        assert result["return"].to_list() == [0, 2, 0, 0]
        assert result["country"].to_list() == ["Germany", "United States", "France", "Germany"]

    def test_unselected_columns_dropped(self, derived_df):
        """Columns outside the list do not reach the output"""
        result = SchemaFinalizer().finalize(derived_df)

        assert "product_line" not in result.columns
        assert "gross_margin" not in result.columns
        assert "gross_profit" in result.columns

    def test_missing_source_columns(self, derived_df):
        """Every absent source column is reported"""
        with pytest.raises(ColumnNotFoundError) as exc_info:
            SchemaFinalizer().finalize(derived_df.drop(["brand", "rtl_city"]))

        assert exc_info.value.context["columns"] == ["rtl_city", "brand"]
        assert exc_info.value.stage == "finalize"

    def test_custom_selection(self):
        """A custom selection list is honoured"""
        df = pl.DataFrame({"a": [1], "b": [2]})

        result = SchemaFinalizer([("b", "second"), ("a", "first")]).finalize(df)

        assert result.columns == ["second", "first"]
        assert result.row(0) == (2, 1)
