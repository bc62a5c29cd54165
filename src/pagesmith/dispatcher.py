"""Page-set transformations: merge, split, extract, remove and reorder.

Every operation runs the same pipeline: parse the page ranges, bind them to
the document with the operation's policy, then hand validated page sets to the
recomposer. All validation happens before the first output is built.
"""

from __future__ import annotations

from functools import singledispatch
from typing import TYPE_CHECKING, Any

from pydantic import TypeAdapter

from pagesmith.documents import recompose
from pagesmith.exceptions import ConfigurationError
from pagesmith.logging import bind_operation, get_logger
from pagesmith.ranges import parse_page_ranges
from pagesmith.typing.enums import PagePolicy, TransformKind
from pagesmith.typing.models import (
    ExtractSpec,
    MergeSpec,
    PageSet,
    RemoveSpec,
    ReorderSpec,
    SourceDocument,
    SplitSpec,
    TransformResult,
    TransformSpec,
)
from pagesmith.validation import complement_page_set, validate_page_set

if TYPE_CHECKING:
    from pagesmith.typing.protocol import Recomposer

logger = get_logger(__name__)

_TRANSFORM_SPEC_ADAPTER: TypeAdapter[TransformSpec] = TypeAdapter(TransformSpec)


def parse_transform_spec(payload: dict[str, Any]) -> TransformSpec:
    """Validate a caller payload into the matching transform spec.

    Args:
        payload (dict[str, Any]): Mapping with a `kind` key and the operation inputs.

    Raises:
        ConfigurationError: If the payload does not describe a known operation.

    Returns:
        TransformSpec: Typed transform spec.
    """
    try:
        return _TRANSFORM_SPEC_ADAPTER.validate_python(payload)
    except ValueError as exc:
        raise ConfigurationError(message=f"Invalid transform request: {exc}") from exc


def bind_pages(spec: str, document: SourceDocument, policy: PagePolicy, *, operation: str) -> PageSet:
    """Parse `spec` and validate it against `document`.

    Args:
        spec (str): User-typed page ranges.
        document (SourceDocument): Document the ranges refer to.
        policy (PagePolicy): Canonicalization policy.
        operation (str): Operation name used in errors.

    Returns:
        PageSet: Validated pages.
    """
    return validate_page_set(parse_page_ranges(spec), document.page_count, policy, operation=operation)


def run_transform(spec: TransformSpec, *, recomposer: Recomposer | None = None) -> TransformResult:
    """Run one transformation end to end.

    Args:
        spec (TransformSpec): Operation and its inputs.
        recomposer (Recomposer | None): Page copier; defaults to the PyMuPDF one.

    Returns:
        TransformResult: Produced documents, one per split range otherwise one.
    """
    bind_operation(str(spec.kind))
    result = _dispatch(spec, recomposer or recompose)
    logger.info(
        "Transform completed",
        extra={
            "kind": str(result.kind),
            "outputs": len(result.outputs),
            "pages": [output.page_count for output in result.outputs],
        },
    )
    return result


@singledispatch
def _dispatch(spec: object, recomposer: Recomposer) -> TransformResult:  # noqa: ARG001
    raise ConfigurationError(message=f"Unsupported transform: {type(spec).__name__}")


@_dispatch.register(MergeSpec)
def _merge(spec: MergeSpec, recomposer: Recomposer) -> TransformResult:
    if len(spec.documents) < 2:  # noqa: PLR2004
        raise ConfigurationError(message="Merging needs at least 2 documents")

    sources = [(document, PageSet.full(document.page_count)) for document in spec.documents]
    output = recomposer(sources, name=spec.output_name)
    return TransformResult(kind=TransformKind.MERGE, outputs=(output,))


@_dispatch.register(SplitSpec)
def _split(spec: SplitSpec, recomposer: Recomposer) -> TransformResult:
    ranges = [value for value in spec.ranges if value.strip()]
    if not ranges:
        raise ConfigurationError(message="Splitting needs at least one page range")

    page_sets = [
        bind_pages(value, spec.document, PagePolicy.SEQUENCE, operation=TransformKind.SPLIT) for value in ranges
    ]
    outputs = tuple(
        recomposer([(spec.document, page_set)], name=spec.output_template.format(index=index))
        for index, page_set in enumerate(page_sets, start=1)
    )
    return TransformResult(kind=TransformKind.SPLIT, outputs=outputs, archive_name=spec.archive_name)


@_dispatch.register(ExtractSpec)
def _extract(spec: ExtractSpec, recomposer: Recomposer) -> TransformResult:
    kept = bind_pages(spec.keep, spec.document, PagePolicy.SET, operation=TransformKind.EXTRACT)
    output = recomposer([(spec.document, kept)], name=spec.output_name)
    return TransformResult(kind=TransformKind.EXTRACT, outputs=(output,))


@_dispatch.register(RemoveSpec)
def _remove(spec: RemoveSpec, recomposer: Recomposer) -> TransformResult:
    dropped = bind_pages(spec.drop, spec.document, PagePolicy.SET, operation=TransformKind.REMOVE)
    kept = complement_page_set(dropped, operation=TransformKind.REMOVE)
    output = recomposer([(spec.document, kept)], name=spec.output_name)
    return TransformResult(kind=TransformKind.REMOVE, outputs=(output,))


@_dispatch.register(ReorderSpec)
def _reorder(spec: ReorderSpec, recomposer: Recomposer) -> TransformResult:
    order = bind_pages(spec.order, spec.document, PagePolicy.PERMUTATION, operation=TransformKind.REORDER)
    output = recomposer([(spec.document, order)], name=spec.output_name)
    return TransformResult(kind=TransformKind.REORDER, outputs=(output,))


def merge_documents(documents: list[SourceDocument], *, output_name: str = "merged-document.pdf") -> TransformResult:
    """Concatenate every page of `documents`, in order."""
    return run_transform(MergeSpec(documents=tuple(documents), output_name=output_name))


def split_document(document: SourceDocument, ranges: list[str]) -> TransformResult:
    """Build one document per page range; all ranges must be valid."""
    return run_transform(SplitSpec(document=document, ranges=tuple(ranges)))


def extract_pages(document: SourceDocument, keep: str) -> TransformResult:
    """Keep the listed pages in document order."""
    return run_transform(ExtractSpec(document=document, keep=keep))


def remove_pages(document: SourceDocument, drop: str) -> TransformResult:
    """Drop the listed pages and keep the rest in document order."""
    return run_transform(RemoveSpec(document=document, drop=drop))


def reorder_pages(document: SourceDocument, order: str) -> TransformResult:
    """Rewrite the document following a full page permutation."""
    return run_transform(ReorderSpec(document=document, order=order))
