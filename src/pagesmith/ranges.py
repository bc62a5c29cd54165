"""Page range grammar: comma-separated page numbers and inclusive spans.

The parser is pure text-to-structure. It knows nothing about documents, so
`"9-12"` parses fine even for a three-page file; binding to a page count is
the job of `pagesmith.validation`.

Grammar::

    expression := token ("," token)*
    token      := number | number "-" number
    number     := [0-9]+   (value >= 1)
"""

from __future__ import annotations

import re

from pagesmith.exceptions import PageRangeSyntaxError
from pagesmith.typing.models import PageRangeExpression, PageSpan, RangeToken, SinglePage

_SINGLE_RE = re.compile(r"^\d+$", re.ASCII)
_SPAN_RE = re.compile(r"^(\d+)\s*-\s*(\d+)$", re.ASCII)


def parse_page_ranges(spec: str) -> PageRangeExpression:
    """Parse a page specification such as ``"1,3-5,8"``.

    Args:
        spec (str): User-typed specification.

    Raises:
        PageRangeSyntaxError: If the string is empty or any token is malformed,
            zero, or an inverted span.

    Returns:
        PageRangeExpression: Tokens in input order.
    """
    if not spec or not spec.strip():
        raise PageRangeSyntaxError(token=spec or "", position=1, reason="page range cannot be empty")

    tokens = [_parse_token(part.strip(), position) for position, part in enumerate(spec.split(","), start=1)]
    return PageRangeExpression(tokens=tuple(tokens), raw=spec)


def _parse_token(token: str, position: int) -> RangeToken:
    """Parse a single comma-separated token.

    Args:
        token (str): Stripped token text.
        position (int): 1-based token position, for error reporting.

    Raises:
        PageRangeSyntaxError: If the token is not a page number or span.

    Returns:
        RangeToken: Parsed token.
    """
    if not token:
        raise PageRangeSyntaxError(token=token, position=position, reason="empty entry")

    if _SINGLE_RE.match(token):
        page = int(token)
        _require_positive(page, token, position)
        return SinglePage(page=page)

    match = _SPAN_RE.match(token)
    if match is None:
        raise PageRangeSyntaxError(
            token=token,
            position=position,
            reason="expected a page number like '4' or a span like '2-7'",
        )

    start, end = int(match.group(1)), int(match.group(2))
    _require_positive(start, token, position)
    _require_positive(end, token, position)
    if start > end:
        raise PageRangeSyntaxError(token=token, position=position, reason="span start is after its end")
    return PageSpan(start=start, end=end)


def _require_positive(value: int, token: str, position: int) -> None:
    if value <= 0:
        raise PageRangeSyntaxError(token=token, position=position, reason="page numbers start at 1")


def render_page_ranges(expression: PageRangeExpression) -> str:
    """Return the canonical string for an expression (no spaces)."""
    return expression.render()
