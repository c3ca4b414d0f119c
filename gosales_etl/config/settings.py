"""
GO Sales ETL
Centralized Configuration Management

Pydantic settings with environment variable support. Entry points resolve a
Settings instance once and hand the pipeline an explicit PipelineConfig.
"""

from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


SUPPORTED_COMPRESSION: List[str] = ["zstd", "snappy", "gzip", "lz4", "uncompressed"]


class SourceSettings(BaseSettings):
    """Input Files Configuration"""

    model_config = SettingsConfigDict(env_prefix="GOSALES_")

    input_dir: Path = Field(default=Path("./data/raw/sales"), description="Directory of per-period transaction files")
    input_glob: str = Field(default="*.csv", description="Glob selecting transaction files")
    products_path: Path = Field(default=Path("./data/raw/products.csv"), description="Product catalog file")
    retailers_path: Path = Field(default=Path("./data/raw/retailers.csv"), description="Retailer catalog file")
    delimiter: str = Field(default=",", description="Field delimiter")
    encoding: str = Field(default="utf8", description="File encoding")
    max_workers: int = Field(default=1, ge=1, description="Threads used to read transaction files")


class OutputSettings(BaseSettings):
    """Output Artifact Configuration"""

    model_config = SettingsConfigDict(env_prefix="GOSALES_")

    output_path: Path = Field(default=Path("./data/curated/gosales.parquet"), description="Parquet artifact path")
    compression: str = Field(default="zstd", description="Parquet compression codec")

    @field_validator("compression")
    @classmethod
    def validate_compression(cls, v: str) -> str:
        """Validate compression codec"""
        if v.lower() not in SUPPORTED_COMPRESSION:
            raise ValueError(f"Compression must be one of: {SUPPORTED_COMPRESSION}")
        return v.lower()


class MonitoringSettings(BaseSettings):
    """Logging Configuration"""

    model_config = SettingsConfigDict(env_prefix="")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL", description="Logging level")
    log_format: str = Field(default="text", alias="LOG_FORMAT", description="Log format: json or text")


class PipelineConfig(BaseModel):
    """
    Explicit configuration handed to the pipeline entry point.

    Nothing in the pipeline reads the environment or the working directory;
    everything it needs is on this object.
    """

    model_config = ConfigDict(frozen=True)

    input_dir: Path
    input_glob: str = "*.csv"
    products_path: Path
    retailers_path: Path
    output_path: Path
    delimiter: str = ","
    encoding: str = "utf8"
    max_workers: int = Field(default=1, ge=1)
    compression: str = "zstd"

    @field_validator("compression")
    @classmethod
    def validate_compression(cls, v: str) -> str:
        """Validate compression codec"""
        if v.lower() not in SUPPORTED_COMPRESSION:
            raise ValueError(f"Compression must be one of: {SUPPORTED_COMPRESSION}")
        return v.lower()


class Settings(BaseSettings):
    """
    Main Application Settings

    Aggregates all configuration sections and provides a single entry point
    for accessing application configuration.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="gosales-etl", alias="APP_NAME", description="Application name")
    app_env: str = Field(default="development", alias="APP_ENV", description="Environment")

    source: SourceSettings = Field(default_factory=SourceSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment value"""
        allowed = ["development", "staging", "production", "testing"]
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v.lower()

    def pipeline_config(self, **overrides: Optional[object]) -> PipelineConfig:
        """
        Build the pipeline configuration, applying non-None overrides.

        Args:
            **overrides: PipelineConfig field values (e.g. from CLI flags)
        """
        values = {
            "input_dir": self.source.input_dir,
            "input_glob": self.source.input_glob,
            "products_path": self.source.products_path,
            "retailers_path": self.source.retailers_path,
            "output_path": self.output.output_path,
            "delimiter": self.source.delimiter,
            "encoding": self.source.encoding,
            "max_workers": self.source.max_workers,
            "compression": self.output.compression,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return PipelineConfig(**values)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
