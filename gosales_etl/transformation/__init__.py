"""
Data Transformation Module
"""
from .cleaners import ColumnNormalizer
from .enrichers import FeatureDeriver
from .finalizer import SchemaFinalizer
from .joiners import JoinEngine
from .transformers import PipelineResult, SalesETLPipeline, SourceTables, run_pipeline

__all__ = [
    "ColumnNormalizer",
    "FeatureDeriver",
    "SchemaFinalizer",
    "JoinEngine",
    "PipelineResult",
    "SalesETLPipeline",
    "SourceTables",
    "run_pipeline",
]
