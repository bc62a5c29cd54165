"""Source and output document models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SourceDocument(BaseModel):
    """Immutable input document with its page count."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = "document.pdf"
    data: bytes = Field(repr=False)
    page_count: int = Field(ge=1)

    @property
    def size_bytes(self) -> int:
        """Return the document size in bytes."""
        return len(self.data)


class OutputDocument(BaseModel):
    """Serialized document produced by a transformation."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    data: bytes = Field(repr=False)
    page_count: int = Field(ge=0)
    media_type: str = "application/pdf"

    @property
    def size_bytes(self) -> int:
        """Return the document size in bytes."""
        return len(self.data)
