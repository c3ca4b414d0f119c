"""
Synthetic Data Module
"""
from .generators import GeneratedDataset, GOSalesGenerator

__all__ = [
    "GeneratedDataset",
    "GOSalesGenerator",
]
