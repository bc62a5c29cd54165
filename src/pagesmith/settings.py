"""Runtime settings loaded from `.env` and environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pagesmith.exceptions import SettingsError
from pagesmith.typing.models import QualitySearchConfig


class Settings(BaseSettings):
    """Package settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    project_name: str = "pagesmith"
    app_env: str = Field(
        default="dev",
        validation_alias="APP_ENV",
        description="Application environment, e.g. 'dev', 'prod'.",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level, e.g. 'INFO', 'DEBUG'.",
    )
    log_json: bool = Field(
        default=True,
        validation_alias="LOG_JSON",
        description="Enable JSON formatted logs.",
    )
    log_file: str | None = Field(
        default=None,
        validation_alias="LOG_FILE",
        description="File path for log output.",
    )

    quality_start: int = Field(
        default=100,
        ge=1,
        le=100,
        validation_alias="QUALITY_START",
        description="First quality tried by the size-constrained search.",
    )
    quality_floor: int = Field(
        default=10,
        ge=1,
        le=100,
        validation_alias="QUALITY_FLOOR",
        description="Lowest quality tried before giving up.",
    )
    quality_step: int = Field(
        default=5,
        ge=1,
        validation_alias="QUALITY_STEP",
        description="Quality decrement between attempts.",
    )
    pdf_raster_dpi: int = Field(
        default=150,
        ge=36,
        le=600,
        validation_alias="PDF_RASTER_DPI",
        description="Resolution used when rasterizing PDF pages for lossy compression.",
    )
    compression_concurrency: int = Field(
        default=4,
        ge=1,
        validation_alias="COMPRESSION_CONCURRENCY",
        description="Maximum number of compression searches run at once in a batch.",
    )
    allow_oversize_result: bool = Field(
        default=False,
        validation_alias="ALLOW_OVERSIZE_RESULT",
        description="Return the minimum-quality artifact when a size target cannot be met.",
    )

    @model_validator(mode="after")
    def _check_quality_bounds(self) -> Settings:
        if self.quality_floor > self.quality_start:
            raise ValueError("QUALITY_FLOOR must not exceed QUALITY_START")
        return self

    def quality_search_config(self) -> QualitySearchConfig:
        """Return the quality search bounds configured for this runtime.

        Returns:
            QualitySearchConfig: Search bounds.
        """
        return QualitySearchConfig(
            start=self.quality_start,
            floor=self.quality_floor,
            step=self.quality_step,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance.

    Raises:
        SettingsError: If settings cannot be loaded or validated.

    Returns:
        Settings: The loaded settings instance.
    """
    try:
        return Settings()
    except Exception as exc:
        raise SettingsError(exc=exc) from exc
