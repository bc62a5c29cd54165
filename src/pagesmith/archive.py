"""Package several output documents into one zip archive."""

from __future__ import annotations

import zipfile
from io import BytesIO
from typing import TYPE_CHECKING

from pagesmith.exceptions import ConfigurationError
from pagesmith.typing.enums import TransformKind
from pagesmith.typing.models import OutputDocument

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pagesmith.typing.models import TransformResult


def package_outputs(outputs: Sequence[OutputDocument], *, name: str = "split-documents.zip") -> OutputDocument:
    """Zip output documents, keeping their order and names.

    Args:
        outputs (Sequence[OutputDocument]): Documents to package.
        name (str): Archive name.

    Raises:
        ConfigurationError: If two outputs share a name.

    Returns:
        OutputDocument: The archive, with `page_count` summed over members.
    """
    seen: set[str] = set()
    buffer = BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for output in outputs:
            key = output.name.lower()
            if key in seen:
                raise ConfigurationError(message=f"Duplicate output name in archive: {output.name}")
            seen.add(key)
            archive.writestr(output.name, output.data)
    return OutputDocument(
        name=name,
        data=buffer.getvalue(),
        page_count=sum(output.page_count for output in outputs),
        media_type="application/zip",
    )


def deliverable(result: TransformResult) -> OutputDocument:
    """Return what a caller should receive: the document, or the split archive.

    Args:
        result (TransformResult): Transformation outcome.

    Returns:
        OutputDocument: Single document, or a zip for split results.
    """
    if result.kind != TransformKind.SPLIT:
        return result.single()
    return package_outputs(result.outputs, name=result.archive_name or "split-documents.zip")
