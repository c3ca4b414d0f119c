"""
Test Suite Configuration
"""
from pathlib import Path

import pytest
import polars as pl

from gosales_etl.config import PipelineConfig
from gosales_etl.data import GOSalesGenerator


SALES_HEADER = (
    "order_number,order_date,close_date,ship_date,product_number,retailer_site_code,"
    "retailer_display_name,quantity,unit_price,unit_cost,return_count,promotion_code,"
    "order_method_en,order_method_de,order_method_fr"
)


def _write_lines(path: Path, lines) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def write_lines():
    """Helper writing text lines to a file, creating parent directories"""
    return _write_lines


@pytest.fixture
def products_df() -> pl.DataFrame:
    """Product catalog"""
    return pl.DataFrame({
        "product_number": [1110, 1120, 1130],
        "product_line": ["Camping Equipment", "Outdoor Protection", "Golf Equipment"],
        "product_type": ["Tents", "Sunscreen", "Irons"],
        "product_name": ["Star Dome", "Bugshield", "Hailstorm Iron"],
        "brand": ["Star", "Relax", "Hailstorm"],
        "color": ["Green", "Unspecified", "Silver"],
        "product_size": ["Large", "Small", "Medium"],
        "production_cost": [120.0, 3.5, 80.0],
        "gross_margin": [0.4, 0.5, 0.35],
        "introduction_date": ["2003-02-01", "2003-05-10", "2004-01-15"],
        "discontinued_date": [None, None, "2007-01-01"],
    })


@pytest.fixture
def retailers_df() -> pl.DataFrame:
    """Retailer catalog, already lower-cased"""
    return pl.DataFrame({
        "retailer_site_code": [5000, 5001, 5002],
        "retailer_code": [100, 100, 101],
        "retailer_type_en": ["Outdoors Shop", "Golf Shop", "Sports Store"],
        "region_en": ["Central Europe", "Americas", "Central Europe"],
        "country_en": ["Germany", "United States", "France"],
        "rtl_city": ["Hamburg", "Boston", "Lyon"],
    })


@pytest.fixture
def sales_df() -> pl.DataFrame:
    """Normalized transactions; the last row references a missing product"""
    return pl.DataFrame({
        "order_number": [100001, 100002, 100003, 100004],
        "order_date": ["2005-08-15", "2004-07-01", "2008-01-01", "2007-06-30"],
        "close_date": ["2005-08-16", "2004-07-02", "2008-01-03", "2007-07-01"],
        "ship_date": ["2005-08-20", "2004-07-05", "2008-01-04", "2007-07-02"],
        "product_number": [1110, 1120, 1130, 999999],
        "retailer_site_code": [5000, 5001, 5002, 5000],
        "retailer_name": ["Alpine Co", "Fairway Ltd", "Sportif SA", "Alpine Co"],
        "quantity": [10, 3, 7, 1],
        "unit_price": [2.5, 10.0, 4.0, 9.99],
        "unit_cost": [1.0, 6.0, 3.0, 5.0],
        "return_count": [None, 2, None, 0],
        "promotion_code": [0, 10206, 0, 0],
        "order_method": ["Web", "Fax", "Telephone", "Mail"],
    }, schema_overrides={"return_count": pl.Int64})


@pytest.fixture
def source_tree(tmp_path) -> Path:
    """Two period files plus both catalogs as raw CSV"""
    _write_lines(tmp_path / "sales" / "sales_2005_08.csv", [
        SALES_HEADER,
        "100001,2005-08-15,2005-08-16,2005-08-20,1110,5000,Alpine Co,10,2.5,1.0,,0,Web,Web,Web",
        "100002,2005-08-20,2005-08-21,2005-08-25,1120,5001,Fairway Ltd,3,10.0,6.0,2,10206,Fax,Fax,Télécopie",
    ])
    _write_lines(tmp_path / "sales" / "sales_2008_01.csv", [
        SALES_HEADER,
        "100003,2008-01-01,2008-01-03,2008-01-04,999999,5002,Sportif SA,7,4.0,3.0,,0,Mail,Post,Courrier",
    ])
    _write_lines(tmp_path / "products.csv", [
        "product_number,product_line,product_type,product_name,brand,color,product_size,"
        "production_cost,gross_margin,introduction_date,discontinued_date",
        "1110,Camping Equipment,Tents,Star Dome,Star,Green,Large,120.0,0.4,2003-02-01,",
        "1120,Outdoor Protection,Sunscreen,Bugshield,Relax,Unspecified,Small,3.5,0.5,2003-05-10,",
    ])
    _write_lines(tmp_path / "retailers.csv", [
        "Retailer_Site_Code,Retailer_Code,Retailer_Type_EN,Region_EN,Country_EN,RTL_City",
        "5000,100,Outdoors Shop,Central Europe,Germany,Hamburg",
        "5001,100,Golf Shop,Americas,United States,Boston",
        "5002,101,Sports Store,Central Europe,France,Lyon",
    ])
    (tmp_path / "out").mkdir()
    return tmp_path


@pytest.fixture
def source_config(source_tree) -> PipelineConfig:
    """Pipeline configuration pointing at source_tree"""
    return PipelineConfig(
        input_dir=source_tree / "sales",
        products_path=source_tree / "products.csv",
        retailers_path=source_tree / "retailers.csv",
        output_path=source_tree / "out" / "gosales.parquet",
    )


@pytest.fixture(scope="session")
def generated_dataset(tmp_path_factory):
    """A seeded synthetic dataset spanning every fiscal window"""
    root = tmp_path_factory.mktemp("generated")
    return GOSalesGenerator(seed=7, n_products=25, n_retailers=12).write_dataset(
        root, n_periods=49, rows_per_period=40
    )
