"""
Column Vocabulary

Names of the source columns the pipeline relies on and the curated output
schema. All table operations go through these names, never positions.
"""

import re
from typing import List, Tuple

# =============================================================================
# TRANSACTIONS
# =============================================================================

ORDER_NUMBER = "order_number"
ORDER_DATE = "order_date"
CLOSE_DATE = "close_date"
SHIP_DATE = "ship_date"
QUANTITY = "quantity"
UNIT_PRICE = "unit_price"
UNIT_COST = "unit_cost"
RETURN_COUNT = "return_count"
PROMOTION_CODE = "promotion_code"

# Order method arrives once per language; only English survives
ORDER_METHOD_SOURCE = "order_method_en"
ORDER_METHOD = "order_method"
LOCALIZED_ORDER_METHOD = re.compile(r"^order_method_(?!en$)[a-z]+$")

RETAILER_NAME_SOURCE = "retailer_display_name"
RETAILER_NAME = "retailer_name"

# =============================================================================
# JOIN KEYS
# =============================================================================

PRODUCT_KEY = "product_number"
RETAILER_KEY = "retailer_site_code"

# =============================================================================
# REFERENCE ATTRIBUTES
# =============================================================================

PRODUCT_LINE = "product_line"
REGION = "region_en"
COUNTRY = "country_en"

# =============================================================================
# DERIVED
# =============================================================================

REVENUE = "revenue"
TOTAL_PRODUCTION_COST = "tot_prod_cost"
GROSS_PROFIT = "gross_profit"
PROD_LINE = "prod_line"
PROD_LINE_2 = "prod_line_2"
REGION_2 = "region2"
ORD_DATE = "ord_date"
FIN_YEAR = "fin_year"
QUARTER_ALL = "quarter_all"
QUARTER_SEL = "quarter_sel"

ORDER_DATE_FORMAT = "%Y-%m-%d"

# =============================================================================
# OUTPUT
# =============================================================================

# (source column, output column), in output order
OUTPUT_COLUMNS: List[Tuple[str, str]] = [
    (ORDER_NUMBER, "order_number"),
    (ORDER_DATE, "order_date"),
    (ORD_DATE, "ord_date"),
    (FIN_YEAR, "fin_year"),
    (QUARTER_ALL, "quarter_all"),
    (QUARTER_SEL, "quarter_sel"),
    (CLOSE_DATE, "close_date"),
    (SHIP_DATE, "order_ship_date"),
    (ORDER_METHOD, "order_method"),
    (RETAILER_NAME, "retailer_name"),
    ("retailer_code", "retailer_code"),
    ("retailer_type_en", "retailer_type"),
    (REGION, "region"),
    (REGION_2, "region2"),
    (COUNTRY, "country"),
    ("rtl_city", "city"),
    (RETAILER_KEY, "retailer_site_code"),
    (PROMOTION_CODE, "promotion_code"),
    (RETURN_COUNT, "return"),
    (QUANTITY, "quantity"),
    (UNIT_PRICE, "unit_price"),
    (UNIT_COST, "unit_cost"),
    (REVENUE, "revenue"),
    (TOTAL_PRODUCTION_COST, "tot_prod_cost"),
    (GROSS_PROFIT, "gross_profit"),
    (PRODUCT_KEY, "prod_numb"),
    (PROD_LINE, "prod_line"),
    (PROD_LINE_2, "prod_line_2"),
    ("product_type", "prod_type"),
    ("product_name", "prod_name"),
    ("brand", "brand"),
    ("color", "color"),
    ("product_size", "size"),
    ("production_cost", "unit_prod_cost"),
    ("gross_margin", "unit_gross_marg"),
    ("introduction_date", "intro_date"),
    ("discontinued_date", "halt_date"),
]
