"""Package exceptions."""

from __future__ import annotations

from dataclasses import dataclass, field


class PackageError(Exception):
    """Root exception for the package."""


@dataclass(frozen=True)
class SettingsError(PackageError):
    """Raised when settings cannot be loaded or validated."""

    message: str = "Failed to load settings"
    exc: BaseException | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.exc}" if self.exc else self.message


@dataclass(frozen=True)
class AsyncExecutionError(PackageError):
    """Raised when an async operation fails in compatibility runner."""

    result: BaseException
    message: str = "Async operation failed"

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.result}"


@dataclass(frozen=True)
class DependencyError(PackageError):
    """Raised when runtime dependencies are missing."""

    missing_package: list[str]
    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return f"Missing runtime dependencies for '{self.message}': {', '.join(self.missing_package)}"


@dataclass(frozen=True)
class PageRangeSyntaxError(PackageError):
    """Raised when a page range string cannot be parsed."""

    token: str
    position: int
    reason: str

    def __str__(self) -> str:
        """Return error message payload."""
        return f"Invalid page range token '{self.token}' at position {self.position}: {self.reason}"


class PageValidationError(PackageError):
    """Base class for errors raised while binding page ranges to a document."""


@dataclass(frozen=True)
class OutOfBoundsPageIndexError(PageValidationError):
    """Raised when a page reference exceeds the document page count."""

    index: int
    page_count: int

    def __str__(self) -> str:
        """Return error message payload."""
        return f"Page {self.index} is out of bounds for a document with {self.page_count} page(s)"


@dataclass(frozen=True)
class EmptyResultSetError(PageValidationError):
    """Raised when an operation would produce a document without pages."""

    operation: str

    def __str__(self) -> str:
        """Return error message payload."""
        return f"No pages left to write for '{self.operation}'"


@dataclass(frozen=True)
class PermutationMismatchError(PageValidationError):
    """Raised when a page order is not a permutation of every page."""

    page_count: int
    missing: tuple[int, ...] = ()
    duplicated: tuple[int, ...] = ()

    def __str__(self) -> str:
        """Return error message payload."""
        details: list[str] = []
        if self.missing:
            details.append(f"missing {', '.join(str(page) for page in self.missing)}")
        if self.duplicated:
            details.append(f"duplicated {', '.join(str(page) for page in self.duplicated)}")
        summary = "; ".join(details) or "wrong number of pages"
        return f"Page order must list each of the {self.page_count} page(s) exactly once ({summary})"


@dataclass(frozen=True)
class ConfigurationError(PackageError):
    """Raised when an operation precondition is violated."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(frozen=True)
class UnsupportedFormatError(ConfigurationError):
    """Raised when a compression input uses an unsupported format."""


@dataclass(frozen=True)
class CorruptSourceError(PackageError):
    """Raised when a source document cannot be read or copied."""

    name: str
    message: str = "Unable to read document"

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.name}"


@dataclass(frozen=True)
class SizeTargetUnreachableError(PackageError):
    """Raised when the quality floor is reached without meeting the byte budget.

    The smallest-quality artifact is kept on the error so callers may accept
    an oversized result instead of failing.
    """

    target_bytes: int
    quality: int
    data: bytes = field(repr=False)
    attempts: tuple[tuple[int, int], ...] = ()

    @property
    def size_bytes(self) -> int:
        """Return the size of the floor-quality artifact."""
        return len(self.data)

    def __str__(self) -> str:
        """Return error message payload."""
        return (
            f"Could not reach {self.target_bytes} bytes: "
            f"{self.size_bytes} bytes at the minimum quality {self.quality}"
        )
