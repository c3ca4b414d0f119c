"""
Data Ingestion Module
"""
from .batch_loader import BatchLoader, BatchFileConfig, LoadResult, create_batch_loader

__all__ = [
    "BatchLoader",
    "BatchFileConfig",
    "LoadResult",
    "create_batch_loader",
]
