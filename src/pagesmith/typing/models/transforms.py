"""Transformation request and result models."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from pagesmith.exceptions import ConfigurationError
from pagesmith.typing.enums import TransformKind
from pagesmith.typing.models.documents import OutputDocument, SourceDocument


class MergeSpec(BaseModel):
    """Concatenate every page of each document, in the given order."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["merge"] = "merge"
    documents: tuple[SourceDocument, ...]
    output_name: str = "merged-document.pdf"


class SplitSpec(BaseModel):
    """Build one output per page range of a single document."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["split"] = "split"
    document: SourceDocument
    ranges: tuple[str, ...]
    output_template: str = "document-part-{index}.pdf"
    archive_name: str = "split-documents.zip"


class ExtractSpec(BaseModel):
    """Keep only the listed pages, in document order."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["extract"] = "extract"
    document: SourceDocument
    keep: str
    output_name: str = "extracted.pdf"


class RemoveSpec(BaseModel):
    """Drop the listed pages and keep the rest in document order."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["remove"] = "remove"
    document: SourceDocument
    drop: str
    output_name: str = "modified.pdf"


class ReorderSpec(BaseModel):
    """Rewrite the document with its pages in a new order."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["reorder"] = "reorder"
    document: SourceDocument
    order: str
    output_name: str = "organized.pdf"


TransformSpec = Annotated[
    MergeSpec | SplitSpec | ExtractSpec | RemoveSpec | ReorderSpec,
    Field(discriminator="kind"),
]


class TransformResult(BaseModel):
    """Documents produced by one transformation."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: TransformKind
    outputs: tuple[OutputDocument, ...]
    archive_name: str | None = None

    def single(self) -> OutputDocument:
        """Return the only output of a non-split transformation.

        Raises:
            ConfigurationError: If the result holds several outputs.

        Returns:
            OutputDocument: The produced document.
        """
        if len(self.outputs) != 1:
            raise ConfigurationError(message=f"'{self.kind}' produced {len(self.outputs)} documents")
        return self.outputs[0]
