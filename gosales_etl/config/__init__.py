"""
GO Sales ETL
Configuration Module
"""
from .settings import PipelineConfig, Settings, get_settings

__all__ = ["PipelineConfig", "Settings", "get_settings"]
