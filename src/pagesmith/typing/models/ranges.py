"""Page range expression models."""

from __future__ import annotations

from typing import Annotated, Literal, NewType

from pydantic import BaseModel, ConfigDict, Field, model_validator

from pagesmith.typing.enums import PagePolicy

PageIndex = NewType("PageIndex", int)


class SinglePage(BaseModel):
    """One page number exactly as written by the user."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["single"] = "single"
    page: int

    def render(self) -> str:
        """Return the token as range syntax."""
        return str(self.page)

    def expand(self) -> list[int]:
        """Return the page numbers covered by the token."""
        return [self.page]


class PageSpan(BaseModel):
    """Inclusive page span exactly as written by the user."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["span"] = "span"
    start: int
    end: int

    def render(self) -> str:
        """Return the token as range syntax."""
        return f"{self.start}-{self.end}"

    def expand(self) -> list[int]:
        """Return the page numbers covered by the token."""
        return list(range(self.start, self.end + 1))


RangeToken = Annotated[SinglePage | PageSpan, Field(discriminator="kind")]


class PageRangeExpression(BaseModel):
    """Parsed, unvalidated page specification in input order."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    tokens: tuple[RangeToken, ...]
    raw: str = ""

    def render(self) -> str:
        """Return the canonical comma-separated form of the expression."""
        return ",".join(token.render() for token in self.tokens)

    def expand(self) -> list[int]:
        """Return every referenced page number, in order, duplicates kept."""
        pages: list[int] = []
        for token in self.tokens:
            pages.extend(token.expand())
        return pages


class PageSet(BaseModel):
    """Validated page indices bound to a document page count."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    indices: tuple[PageIndex, ...]
    page_count: int = Field(ge=1)
    policy: PagePolicy

    @model_validator(mode="after")
    def _check_bounds(self) -> PageSet:
        if any(index < 1 or index > self.page_count for index in self.indices):
            raise ValueError("page indices must lie within 1..page_count")
        return self

    @classmethod
    def full(cls, page_count: int) -> PageSet:
        """Return every page of a document in its original order."""
        indices = tuple(PageIndex(index) for index in range(1, page_count + 1))
        return cls(indices=indices, page_count=page_count, policy=PagePolicy.PERMUTATION)
