"""Pytest marker auto-assignment by folder and shared document factories."""

from __future__ import annotations
from pagesmith import logger

from io import BytesIO
from pathlib import Path
from typing import TYPE_CHECKING

import fitz
import pytest
from PIL import Image

from pagesmith.typing.models import SourceDocument

if TYPE_CHECKING:
    from collections.abc import Callable


def _mark_tests_by_directory(
    config: pytest.Config,
    items: list[pytest.Item],
    marker: str,
) -> None:
    """Mark collected tests located under tests/<marker>/."""
    target_dir = Path(config.rootpath) / "tests" / marker
    target_dir = target_dir.resolve()

    for item in items:
        try:
            path = Path(str(item.fspath)).resolve()
        except Exception:
            logger.warning(
                f"Could not resolve path for test item {item.name!s}; skipping {marker!s} marker assignment",
            )
            continue

        if path == target_dir or target_dir in path.parents:
            item.add_marker(getattr(pytest.mark, marker))


def pytest_collection_modifyitems(
    config: pytest.Config,
    items: list[pytest.Item],
) -> None:
    """Apply directory-based markers to test items."""
    _mark_tests_by_directory(config, items, "unit")
    _mark_tests_by_directory(config, items, "integration")
    _mark_tests_by_directory(config, items, "end2end")


def build_pdf(page_count: int, *, label: str = "Page") -> bytes:
    """Build a PDF whose pages carry `"<label> <number>"` as text."""
    with fitz.open() as doc:
        for number in range(1, page_count + 1):
            page = doc.new_page(width=200, height=200)
            page.insert_text((20, 40), f"{label} {number}", fontsize=14)
        return doc.tobytes()


def read_page_texts(data: bytes) -> list[str]:
    """Return the stripped text of every page, in order."""
    with fitz.open(stream=data, filetype="pdf") as doc:
        return [page.get_text().strip() for page in doc]


@pytest.fixture
def make_pdf() -> Callable[..., bytes]:
    return build_pdf


@pytest.fixture
def page_texts() -> Callable[[bytes], list[str]]:
    return read_page_texts


@pytest.fixture
def make_document() -> Callable[..., SourceDocument]:
    def _make(page_count: int, *, name: str = "document.pdf", label: str = "Page") -> SourceDocument:
        return SourceDocument(name=name, data=build_pdf(page_count, label=label), page_count=page_count)

    return _make


@pytest.fixture
def make_image() -> Callable[..., bytes]:
    def _make(image_format: str = "JPEG", *, size: tuple[int, int] = (96, 96)) -> bytes:
        image = Image.effect_noise(size, 64).convert("RGB")
        buffer = BytesIO()
        if image_format == "JPEG":
            image.save(buffer, format="JPEG", quality=95)
        else:
            image.save(buffer, format=image_format)
        return buffer.getvalue()

    return _make
