from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Tuple


class SpanKind(str, Enum):
    BOLD = "bold"
    ITALIC = "italic"
    CODE = "code"
    LINK = "link"
    STRIKETHROUGH = "strikethrough"
    UNDERLINE = "underline"


@dataclass(frozen=True)
class Span:
    """Inline style over ``[start, end)`` of the resolved text."""

    kind: SpanKind
    start: int
    end: int
    url: Optional[str] = None


@dataclass(frozen=True)
class InlineRun:
    text: str
    spans: Tuple[Span, ...] = ()

    @classmethod
    def plain(cls, text: str) -> "InlineRun":
        return cls(text=text)


@dataclass(frozen=True)
class Block:
    """Base class for block-level nodes."""


@dataclass(frozen=True)
class Document:
    blocks: Tuple[Block, ...] = ()

    def __iter__(self) -> Iterator[Block]:
        return iter(self.blocks)

    def __len__(self) -> int:
        return len(self.blocks)


@dataclass(frozen=True)
class Paragraph(Block):
    run: InlineRun


@dataclass(frozen=True)
class Heading(Block):
    level: int
    run: InlineRun
    setext: bool = False


@dataclass(frozen=True)
class ListBlock(Block):
    items: Tuple[InlineRun, ...]
    ordered: bool

    def numbered(self) -> list[tuple[int, InlineRun]]:
        """Items paired with their display number, counting from 1."""
        return list(enumerate(self.items, start=1))


@dataclass(frozen=True)
class BlockQuote(Block):
    lines: Tuple[InlineRun, ...]


@dataclass(frozen=True)
class CodeBlock(Block):
    text: str
    fenced: bool
    language: str | None = None


@dataclass(frozen=True)
class HorizontalRule(Block):
    """Horizontal rule / thematic break."""


@dataclass(frozen=True)
class ImageBlock(Block):
    alt: str
    url: str
    title: str | None = None


@dataclass(frozen=True)
class Formula(Block):
    raw: str


@dataclass(frozen=True)
class LineBlock(Block):
    lines: Tuple[InlineRun, ...]


@dataclass(frozen=True)
class TableBlock(Block):
    header: Tuple[str, ...]
    rows: Tuple[Tuple[str, ...], ...]
    column_count: int


@dataclass(frozen=True)
class EmptyLine(Block):
    """Blank source line."""
