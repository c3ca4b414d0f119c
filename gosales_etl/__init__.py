"""
GO Sales ETL

Batch pipeline that merges per-period sales transaction files with the
product and retailer catalogs and persists one denormalized analytics table.
"""

__version__ = "1.0.0"
