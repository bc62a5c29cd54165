"""Typing-centric domain modules."""

from pagesmith.typing.enums import CompressionMode, ImageFormat, PagePolicy, PdfPreset, TransformKind
from pagesmith.typing.models import (
    CompressionResult,
    ExtractSpec,
    MergeSpec,
    OutputDocument,
    PageIndex,
    PageRangeExpression,
    PageSet,
    PageSpan,
    QualityAttempt,
    QualitySearchConfig,
    QualitySearchResult,
    RemoveSpec,
    ReorderSpec,
    SinglePage,
    SourceDocument,
    SplitSpec,
    TransformResult,
    TransformSpec,
)
from pagesmith.typing.protocol import QualityEncoder, Recomposer

__all__ = [
    "CompressionMode",
    "CompressionResult",
    "ExtractSpec",
    "ImageFormat",
    "MergeSpec",
    "OutputDocument",
    "PageIndex",
    "PagePolicy",
    "PdfPreset",
    "PageRangeExpression",
    "PageSet",
    "PageSpan",
    "QualityAttempt",
    "QualityEncoder",
    "QualitySearchConfig",
    "QualitySearchResult",
    "Recomposer",
    "RemoveSpec",
    "ReorderSpec",
    "SinglePage",
    "SourceDocument",
    "SplitSpec",
    "TransformKind",
    "TransformResult",
    "TransformSpec",
]
