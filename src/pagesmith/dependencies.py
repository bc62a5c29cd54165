"""Runtime dependency checks for the document and image codecs."""

from __future__ import annotations

import importlib.util

from pagesmith.exceptions import DependencyError


def _is_module_available(module_name: str) -> bool:
    """Check whether a module can be imported.

    Args:
        module_name (str): Python module name.

    Returns:
        bool: True if import spec exists.
    """
    return importlib.util.find_spec(module_name) is not None


def _collect_missing_dependencies(modules_by_package: dict[str, str]) -> list[str]:
    """Collect missing packages for a module mapping.

    Args:
        modules_by_package (Mapping[str, str]): Mapping of package name -> import module.

    Returns:
        list[str]: Missing package names.
    """
    return [package for package, module in modules_by_package.items() if not _is_module_available(module)]


def ensure_document_dependencies() -> None:
    """Validate the dependencies needed to read and write PDF documents.

    Raises:
        DependencyError: If PyMuPDF is missing.
    """
    missing = _collect_missing_dependencies({"pymupdf": "fitz"})
    if missing:
        raise DependencyError(missing_package=missing, message="document transforms")


def ensure_image_dependencies() -> None:
    """Validate the dependencies needed by image compression.

    Raises:
        DependencyError: If Pillow is missing.
    """
    missing = _collect_missing_dependencies({"pillow": "PIL"})
    if missing:
        raise DependencyError(missing_package=missing, message="image compression")
