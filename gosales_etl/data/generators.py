"""
Synthetic Data Generator

Generates GO-sales-shaped source files for testing and development.
Includes:
- A product catalog across the five product lines
- A retailer catalog with mixed-case headers
- Monthly transaction files with localized order methods
- Orphan product numbers, missing return counts and out-of-window dates
"""

import calendar
from dataclasses import dataclass, field
from datetime import date, timedelta
from pathlib import Path
from typing import Dict, List, Union

import numpy as np
import polars as pl
import structlog
from faker import Faker

logger = structlog.get_logger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

PRODUCT_LINES = [
    ("Camping Equipment", ["Cooking Gear", "Tents", "Sleeping Bags", "Lanterns"]),
    ("Golf Equipment", ["Irons", "Woods", "Putters", "Golf Accessories"]),
    ("Mountaineering Equipment", ["Rope", "Safety", "Climbing Accessories", "Tools"]),
    ("Personal Accessories", ["Watches", "Eyewear", "Knives", "Binoculars"]),
    ("Outdoor Protection", ["Sunscreen", "Insect Repellents", "First Aid"]),
]

BRANDS = ["TrailChef", "Star", "Hibernator", "Firefly", "Hailstorm", "Blue Steel", "Granite", "Xray", "Relax", "Course Pro"]
COLORS = ["Red", "Blue", "Green", "Black", "Silver", "Unspecified"]
SIZES = ["Small", "Medium", "Large", "Unspecified"]

# country -> region
COUNTRIES = [
    ("United Kingdom", "Northern Europe"),
    ("France", "Central Europe"),
    ("Spain", "Southern Europe"),
    ("Netherlands", "Central Europe"),
    ("Belgium", "Central Europe"),
    ("Switzerland", "Central Europe"),
    ("Germany", "Central Europe"),
    ("Italy", "Southern Europe"),
    ("Finland", "Northern Europe"),
    ("Austria", "Central Europe"),
    ("Sweden", "Northern Europe"),
    ("Denmark", "Northern Europe"),
    ("United States", "Americas"),
    ("Canada", "Americas"),
    ("Mexico", "Americas"),
    ("Brazil", "Americas"),
    ("Japan", "Asia Pacific"),
    ("China", "Asia Pacific"),
    ("Australia", "Asia Pacific"),
    ("Korea", "Asia Pacific"),
]

RETAILER_TYPES = [
    "Outdoors Shop",
    "Sports Store",
    "Golf Shop",
    "Department Store",
    "Eyewear Store",
    "Direct Marketing",
    "Warehouse Store",
    "Equipment Rental Store",
]

# English label plus its translations, in output column order
ORDER_METHODS = {
    "en": ["Fax", "Telephone", "Mail", "E-mail", "Web", "Sales visit", "Special"],
    "de": ["Fax", "Telefon", "Post", "E-Mail", "Web", "Vertreterbesuch", "Sonstige"],
    "fr": ["Télécopie", "Téléphone", "Courrier", "Courriel", "Web", "Visite", "Spécial"],
    "es": ["Fax", "Teléfono", "Correo", "Correo electrónico", "Web", "Visita", "Especial"],
    "ja": ["ファックス", "電話", "郵便", "電子メール", "Web", "営業訪問", "特別"],
}

PROMOTION_CODES = ["0", "10206", "10208", "10210", "10212"]

ORPHAN_PRODUCT_NUMBER = 999999


@dataclass
class GeneratedDataset:
    """Paths of a generated source set"""
    sales_dir: Path
    products_path: Path
    retailers_path: Path
    sales_files: List[Path] = field(default_factory=list)
    total_rows: int = 0


def _month_starts(start: date, n: int) -> List[date]:
    months = []
    year, month = start.year, start.month
    for _ in range(n):
        months.append(date(year, month, 1))
        month += 1
        if month > 12:
            year, month = year + 1, 1
    return months


class GOSalesGenerator:
    """
    Seeded generator for the three GO sales sources.

    Example:
        generator = GOSalesGenerator(seed=42)
        dataset = generator.write_dataset("data/raw", n_periods=49)
    """

    def __init__(self, seed: int = 42, n_products: int = 60, n_retailers: int = 40):
        self.rng = np.random.default_rng(seed)
        self.fake = Faker()
        self.fake.seed_instance(seed)
        self.n_products = n_products
        self.n_retailers = n_retailers
        self._company_names: Dict[int, str] = {}

    def _company_name(self, retailer_code: int) -> str:
        if retailer_code not in self._company_names:
            self._company_names[retailer_code] = self.fake.company()
        return self._company_names[retailer_code]

    def generate_products(self) -> pl.DataFrame:
        """Generate the product catalog"""
        rows = []
        for i in range(self.n_products):
            line, types = PRODUCT_LINES[i % len(PRODUCT_LINES)]
            cost = round(float(self.rng.uniform(2, 400)), 2)
            intro = date(2003, 1, 1) + timedelta(days=int(self.rng.integers(0, 700)))
            discontinued = ""
            if self.rng.random() < 0.15:
                discontinued = (intro + timedelta(days=int(self.rng.integers(400, 1500)))).isoformat()
            rows.append({
                "product_number": 1110 + i * 10,
                "product_line": line,
                "product_type": types[int(self.rng.integers(0, len(types)))],
                "product_name": f"{self.fake.word().title()} {self.fake.word().title()}",
                "brand": BRANDS[int(self.rng.integers(0, len(BRANDS)))],
                "color": COLORS[int(self.rng.integers(0, len(COLORS)))],
                "product_size": SIZES[int(self.rng.integers(0, len(SIZES)))],
                "production_cost": cost,
                "gross_margin": round(float(self.rng.uniform(0.2, 0.6)), 2),
                "introduction_date": intro.isoformat(),
                "discontinued_date": discontinued,
            })
        return pl.DataFrame(rows)

    def generate_retailers(self) -> pl.DataFrame:
        """Generate the retailer catalog with the source's mixed-case headers"""
        rows = []
        for i in range(self.n_retailers):
            country, region = COUNTRIES[i % len(COUNTRIES)]
            rows.append({
                "Retailer_Site_Code": 5000 + i,
                "Retailer_Code": 100 + i // 2,
                "Retailer_Name": self._company_name(100 + i // 2),
                "Retailer_Type_EN": RETAILER_TYPES[int(self.rng.integers(0, len(RETAILER_TYPES)))],
                "Region_EN": region,
                "Country_EN": country,
                "RTL_City": self.fake.city(),
            })
        return pl.DataFrame(rows)

    def generate_sales_period(
        self,
        period_start: date,
        n_rows: int,
        products: pl.DataFrame,
        retailers: pl.DataFrame,
        first_order_number: int,
    ) -> pl.DataFrame:
        """Generate the transactions of one calendar month"""
        days_in_month = calendar.monthrange(period_start.year, period_start.month)[1]
        product_numbers = products["product_number"].to_list()
        site_codes = retailers["Retailer_Site_Code"].to_list()
        site_company = dict(zip(site_codes, retailers["Retailer_Code"].to_list()))
        unit_costs = dict(zip(product_numbers, products["production_cost"].to_list()))

        rows = []
        for n in range(n_rows):
            order_date = period_start + timedelta(days=int(self.rng.integers(0, days_in_month)))
            product = int(product_numbers[int(self.rng.integers(0, len(product_numbers)))])
            if self.rng.random() < 0.02:
                product = ORPHAN_PRODUCT_NUMBER
            site = int(site_codes[int(self.rng.integers(0, len(site_codes)))])
            method = int(self.rng.integers(0, len(ORDER_METHODS["en"])))
            unit_cost = unit_costs.get(product, round(float(self.rng.uniform(2, 400)), 2))
            unit_price = round(unit_cost * float(self.rng.uniform(1.2, 2.5)), 2)
            returned = None if self.rng.random() < 0.7 else int(self.rng.integers(1, 20))

            row = {
                "order_number": first_order_number + n,
                "order_date": order_date.isoformat(),
                "close_date": (order_date + timedelta(days=int(self.rng.integers(0, 10)))).isoformat(),
                "ship_date": (order_date + timedelta(days=int(self.rng.integers(1, 15)))).isoformat(),
                "product_number": product,
                "retailer_site_code": site,
                "retailer_display_name": self._company_name(site_company[site]),
                "quantity": int(self.rng.integers(1, 500)),
                "unit_price": unit_price,
                "unit_cost": unit_cost,
                "return_count": returned,
                "promotion_code": PROMOTION_CODES[int(self.rng.integers(0, len(PROMOTION_CODES)))],
            }
            for lang, labels in ORDER_METHODS.items():
                row[f"order_method_{lang}"] = labels[method]
            rows.append(row)

        return pl.DataFrame(rows, schema_overrides={"return_count": pl.Int64})

    def write_dataset(
        self,
        output_dir: Union[str, Path],
        n_periods: int = 49,
        rows_per_period: int = 200,
        start: date = date(2004, 1, 1),
    ) -> GeneratedDataset:
        """
        Write products.csv, retailers.csv and one sales_YYYY_MM.csv per month.

        The default 49 months run from January 2004 through January 2008, so
        the last month falls outside every fiscal and quarter window.
        """
        output_dir = Path(output_dir)
        sales_dir = output_dir / "sales"
        sales_dir.mkdir(parents=True, exist_ok=True)

        products = self.generate_products()
        retailers = self.generate_retailers()

        dataset = GeneratedDataset(
            sales_dir=sales_dir,
            products_path=output_dir / "products.csv",
            retailers_path=output_dir / "retailers.csv",
        )
        products.write_csv(dataset.products_path)
        retailers.write_csv(dataset.retailers_path)

        order_number = 100000
        for period in _month_starts(start, n_periods):
            df = self.generate_sales_period(period, rows_per_period, products, retailers, order_number)
            order_number += rows_per_period
            path = sales_dir / f"sales_{period.year}_{period.month:02d}.csv"
            df.write_csv(path)
            dataset.sales_files.append(path)
            dataset.total_rows += df.height

        logger.info(
            "Generated GO sales dataset",
            output_dir=str(output_dir),
            files=len(dataset.sales_files),
            rows=dataset.total_rows,
        )
        return dataset

