"""Quality search and compression models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class QualitySearchConfig(BaseModel):
    """Bounds of the linear quality descent."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    start: int = Field(default=100, ge=1, le=100)
    floor: int = Field(default=10, ge=1, le=100)
    step: int = Field(default=5, ge=1)

    @model_validator(mode="after")
    def _check_order(self) -> QualitySearchConfig:
        if self.floor > self.start:
            raise ValueError("quality floor must not exceed the start quality")
        return self

    @property
    def max_attempts(self) -> int:
        """Return the largest number of encode calls a search can make."""
        return -(-(self.start - self.floor) // self.step) + 1


class QualityAttempt(BaseModel):
    """One encode call made during a search."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    quality: int
    size_bytes: int


class QualitySearchResult(BaseModel):
    """Artifact that met the byte budget and the quality used."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    data: bytes = Field(repr=False)
    quality: int
    attempts: tuple[QualityAttempt, ...] = ()

    @property
    def size_bytes(self) -> int:
        """Return the artifact size in bytes."""
        return len(self.data)


class CompressionResult(BaseModel):
    """Outcome of an image or PDF compression request."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    data: bytes = Field(repr=False)
    media_type: str
    quality: int | None = None
    original_size: int
    target_bytes: int | None = None
    target_met: bool = True
    attempts: tuple[QualityAttempt, ...] = ()

    @property
    def size_bytes(self) -> int:
        """Return the compressed size in bytes."""
        return len(self.data)
