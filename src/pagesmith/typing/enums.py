"""Project enums."""

from __future__ import annotations

from enum import StrEnum


class _EnumMixin(StrEnum):
    """Shared conversion helpers for user-facing enums."""

    @classmethod
    def from_str(cls, value: str) -> _EnumMixin:
        """Parse enum from string.

        Args:
            value: Raw string value.

        Raises:
            ValueError: If the value is not supported.

        Returns:
            _EnumMixin: Parsed enum value.
        """
        try:
            return cls(value)
        except ValueError as exc:
            supported = ", ".join(member.value for member in cls)
            message = f"Unsupported {cls.__name__} value '{value}'. Expected one of: {supported}"
            raise ValueError(message) from exc

    def to_str(self) -> str:
        """Return string representation.

        Returns:
            str: Enum string value.
        """
        return self.value


class TransformKind(_EnumMixin):
    """Page-set transformations."""

    MERGE = "merge"
    SPLIT = "split"
    EXTRACT = "extract"
    REMOVE = "remove"
    REORDER = "reorder"


class PagePolicy(_EnumMixin):
    """Canonicalization applied when binding page ranges to a document."""

    SET = "set"
    SEQUENCE = "sequence"
    PERMUTATION = "permutation"


class ImageFormat(_EnumMixin):
    """Image formats supported by compression."""

    JPEG = "jpeg"
    PNG = "png"
    WEBP = "webp"

    @property
    def media_type(self) -> str:
        """Return the MIME type for the format."""
        return f"image/{self.value}"

    @property
    def pillow_name(self) -> str:
        """Return the Pillow format identifier."""
        return self.value.upper()


class CompressionMode(_EnumMixin):
    """How a compression request picks its quality."""

    LOSSLESS = "lossless"
    QUALITY = "quality"
    TARGET = "target"


class PdfPreset(_EnumMixin):
    """Lossless PDF rewrite levels, from cheapest to smallest output."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    MAXIMUM = "maximum"
