"""Pagesmith: page-set transformations and size-constrained compression for PDFs and images."""

from pagesmith.exceptions import (
    AsyncExecutionError,
    ConfigurationError,
    CorruptSourceError,
    DependencyError,
    EmptyResultSetError,
    OutOfBoundsPageIndexError,
    PackageError,
    PageRangeSyntaxError,
    PageValidationError,
    PermutationMismatchError,
    SettingsError,
    SizeTargetUnreachableError,
    UnsupportedFormatError,
)
from pagesmith.logging import configure_logging, get_logger
from pagesmith.settings import Settings, get_settings

__version__ = "0.1.0"

# Initialize package logger at import time via `get_logger`.
logger = get_logger("pagesmith")

__all__ = [
    "AsyncExecutionError",
    "ConfigurationError",
    "CorruptSourceError",
    "DependencyError",
    "EmptyResultSetError",
    "OutOfBoundsPageIndexError",
    "PackageError",
    "PageRangeSyntaxError",
    "PageValidationError",
    "PermutationMismatchError",
    "Settings",
    "SettingsError",
    "SizeTargetUnreachableError",
    "UnsupportedFormatError",
    "__version__",
    "configure_logging",
    "get_logger",
    "get_settings",
    "logger",
]
