"""Collaborator interfaces consumed by the engine."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pagesmith.typing.models import OutputDocument, PageSet, SourceDocument


class QualityEncoder(Protocol):
    """Encode an artifact at a quality level (1-100) and return its bytes."""

    def __call__(self, quality: int) -> bytes:
        """Encode at `quality`.

        Args:
            quality: Quality level, higher is larger and better.

        Returns:
            bytes: Encoded artifact.
        """


class Recomposer(Protocol):
    """Copy validated pages from source documents into a new document."""

    def __call__(self, sources: Sequence[tuple[SourceDocument, PageSet]], *, name: str) -> OutputDocument:
        """Build an output document.

        Args:
            sources: Ordered `(document, pages)` pairs.
            name: Output document name.

        Returns:
            OutputDocument: Serialized output document.
        """
