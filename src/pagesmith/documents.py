"""PDF loading, page recomposition and serialization (PyMuPDF)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

try:
    import fitz
except Exception:  # pragma: no cover - optional dependency at runtime
    fitz: Any
    fitz = None

from pagesmith.exceptions import CorruptSourceError, DependencyError
from pagesmith.logging import get_logger
from pagesmith.typing.models import OutputDocument, PageSet, SourceDocument

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from pathlib import Path

logger = get_logger(__name__)

# Same pages in, same bytes out: no random trailer /ID.
SAVE_OPTIONS = {"garbage": 3, "deflate": True, "no_new_id": True}


def _require_fitz() -> None:
    if fitz is None:
        raise DependencyError(missing_package=["pymupdf"], message="document transforms")


def open_pdf(data: bytes, *, name: str) -> fitz.Document:
    """Open PDF bytes with PyMuPDF.

    Args:
        data (bytes): Raw PDF bytes.
        name (str): Display name used in errors.

    Raises:
        DependencyError: If PyMuPDF is not installed.
        CorruptSourceError: If the bytes are not a readable, unencrypted PDF.

    Returns:
        fitz.Document: Open document; the caller closes it.
    """
    _require_fitz()
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except Exception as exc:
        raise CorruptSourceError(name=name, message="Not a readable PDF document") from exc
    if doc.needs_pass:
        doc.close()
        raise CorruptSourceError(name=name, message="Document is password protected")
    return doc


def load_document(data: bytes, *, name: str = "document.pdf") -> SourceDocument:
    """Load raw bytes into a source document.

    Args:
        data (bytes): Raw PDF bytes.
        name (str): Display name used in errors and outputs.

    Raises:
        CorruptSourceError: If the document cannot be read or has no pages.

    Returns:
        SourceDocument: Document with its page count.
    """
    with open_pdf(data, name=name) as doc:
        page_count = doc.page_count
    if page_count < 1:
        raise CorruptSourceError(name=name, message="Document has no pages")
    return SourceDocument(name=name, data=data, page_count=page_count)


def load_document_file(path: Path) -> SourceDocument:
    """Load a PDF from disk, named after the file."""
    return load_document(path.read_bytes(), name=path.name)


def _page_runs(page_set: PageSet) -> Iterable[tuple[int, int]]:
    """Group indices into ascending consecutive runs of 0-based pages.

    Args:
        page_set (PageSet): Validated 1-based pages.

    Yields:
        tuple[int, int]: Inclusive `(from_page, to_page)` runs.
    """
    run_start: int | None = None
    previous = -1
    for index in page_set.indices:
        zero_based = index - 1
        if run_start is not None and zero_based == previous + 1:
            previous = zero_based
            continue
        if run_start is not None:
            yield run_start, previous
        run_start = previous = zero_based
    if run_start is not None:
        yield run_start, previous


def serialize_document(doc: fitz.Document, *, name: str) -> OutputDocument:
    """Serialize an open document into an output document.

    Args:
        doc (fitz.Document): Document to write.
        name (str): Output name.

    Returns:
        OutputDocument: Serialized bytes with page count.
    """
    return OutputDocument(name=name, data=doc.tobytes(**SAVE_OPTIONS), page_count=doc.page_count)


def recompose(sources: Sequence[tuple[SourceDocument, PageSet]], *, name: str) -> OutputDocument:
    """Copy pages, in the listed order, from their sources into a new PDF.

    Page content and resources are copied as-is. No validation happens here:
    every `PageSet` was already bound to its document by the validator.

    Args:
        sources (Sequence[tuple[SourceDocument, PageSet]]): Ordered
            `(document, pages)` pairs; a document may appear several times.
        name (str): Output document name.

    Raises:
        DependencyError: If PyMuPDF is not installed.
        CorruptSourceError: If a source cannot be opened or copied from.

    Returns:
        OutputDocument: Newly built document.
    """
    _require_fitz()
    with fitz.open() as output:
        for source, page_set in sources:
            with open_pdf(source.data, name=source.name) as doc:
                try:
                    for from_page, to_page in _page_runs(page_set):
                        output.insert_pdf(doc, from_page=from_page, to_page=to_page)
                except Exception as exc:
                    raise CorruptSourceError(name=source.name, message="Unable to copy pages") from exc
        try:
            result = serialize_document(output, name=name)
        except Exception as exc:
            raise CorruptSourceError(name=name, message="Unable to write document") from exc

    logger.debug(
        "Document recomposed",
        extra={"output": name, "pages": result.page_count, "sources": len(sources)},
    )
    return result
