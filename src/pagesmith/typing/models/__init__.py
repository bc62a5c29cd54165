"""Core domain model exports."""

from pagesmith.typing.models.compression import (
    CompressionResult,
    QualityAttempt,
    QualitySearchConfig,
    QualitySearchResult,
)
from pagesmith.typing.models.documents import OutputDocument, SourceDocument
from pagesmith.typing.models.ranges import PageIndex, PageRangeExpression, PageSet, PageSpan, RangeToken, SinglePage
from pagesmith.typing.models.transforms import (
    ExtractSpec,
    MergeSpec,
    RemoveSpec,
    ReorderSpec,
    SplitSpec,
    TransformResult,
    TransformSpec,
)

__all__ = [
    "CompressionResult",
    "ExtractSpec",
    "MergeSpec",
    "OutputDocument",
    "PageIndex",
    "PageRangeExpression",
    "PageSet",
    "PageSpan",
    "QualityAttempt",
    "QualitySearchConfig",
    "QualitySearchResult",
    "RangeToken",
    "RemoveSpec",
    "ReorderSpec",
    "SinglePage",
    "SourceDocument",
    "SplitSpec",
    "TransformResult",
    "TransformSpec",
]
