"""Bind parsed page ranges to a document page count."""

from __future__ import annotations

from collections import Counter

from pagesmith.exceptions import EmptyResultSetError, OutOfBoundsPageIndexError, PermutationMismatchError
from pagesmith.typing.enums import PagePolicy
from pagesmith.typing.models import PageIndex, PageRangeExpression, PageSet, RangeToken, SinglePage


def validate_page_set(
    expression: PageRangeExpression,
    page_count: int,
    policy: PagePolicy,
    *,
    operation: str = "pages",
) -> PageSet:
    """Expand and validate an expression against a document.

    Every token is checked against `page_count` before any span is expanded,
    so huge spans fail fast. What happens next depends on `policy`:

    - ``SET``: duplicates collapsed, indices sorted ascending, must be non-empty.
    - ``SEQUENCE``: order and duplicates kept exactly as written.
    - ``PERMUTATION``: like ``SEQUENCE``, but every page must appear exactly once.

    Args:
        expression (PageRangeExpression): Parsed page ranges.
        page_count (int): Number of pages in the bound document.
        policy (PagePolicy): Canonicalization policy.
        operation (str): Operation name used in empty-result errors.

    Raises:
        OutOfBoundsPageIndexError: If an index exceeds `page_count`.
        EmptyResultSetError: If a set-policy result is empty.
        PermutationMismatchError: If a permutation misses or repeats pages.

    Returns:
        PageSet: Validated page set.
    """
    for token in expression.tokens:
        out_of_bounds = _first_out_of_bounds(token, page_count)
        if out_of_bounds is not None:
            raise OutOfBoundsPageIndexError(index=out_of_bounds, page_count=page_count)

    expanded = expression.expand()

    if policy == PagePolicy.SET:
        indices = sorted(set(expanded))
        if not indices:
            raise EmptyResultSetError(operation=operation)
    elif policy == PagePolicy.PERMUTATION:
        _check_permutation(expanded, page_count)
        indices = expanded
    else:
        indices = expanded

    return PageSet(
        indices=tuple(PageIndex(index) for index in indices),
        page_count=page_count,
        policy=policy,
    )


def _first_out_of_bounds(token: RangeToken, page_count: int) -> int | None:
    """Return the first page of `token` outside `1..page_count`, without expanding spans."""
    first, last = (token.page, token.page) if isinstance(token, SinglePage) else (token.start, token.end)
    if first < 1:
        return first
    if last > page_count:
        return max(first, page_count + 1)
    return None


def _check_permutation(sequence: list[int], page_count: int) -> None:
    """Ensure `sequence` lists each page of `1..page_count` exactly once.

    Args:
        sequence (list[int]): Expanded, in-bounds page order.
        page_count (int): Document page count.

    Raises:
        PermutationMismatchError: If pages are missing or repeated.
    """
    counts = Counter(sequence)
    missing = tuple(page for page in range(1, page_count + 1) if page not in counts)
    duplicated = tuple(sorted(page for page, seen in counts.items() if seen > 1))
    if missing or duplicated or len(sequence) != page_count:
        raise PermutationMismatchError(page_count=page_count, missing=missing, duplicated=duplicated)


def complement_page_set(dropped: PageSet, *, operation: str = "remove") -> PageSet:
    """Return every page not in `dropped`, in ascending order.

    Args:
        dropped (PageSet): Pages to leave out.
        operation (str): Operation name used in empty-result errors.

    Raises:
        EmptyResultSetError: If every page was dropped.

    Returns:
        PageSet: Remaining pages under set policy.
    """
    removed = set(dropped.indices)
    kept = [PageIndex(index) for index in range(1, dropped.page_count + 1) if index not in removed]
    if not kept:
        raise EmptyResultSetError(operation=operation)
    return PageSet(indices=tuple(kept), page_count=dropped.page_count, policy=PagePolicy.SET)
