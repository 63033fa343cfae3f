from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Sequence

from .inline_parser import resolve
from .model import (
    Block,
    BlockQuote,
    CodeBlock,
    Document,
    EmptyLine,
    Formula,
    Heading,
    HorizontalRule,
    ImageBlock,
    InlineRun,
    LineBlock,
    ListBlock,
    Paragraph,
)
from .tables import is_pipe_table_start, looks_like_table, parse_table

logger = logging.getLogger(__name__)

_SETEXT_UNDERLINE = re.compile(r"=+|-+")
_ORDERED_ITEM = re.compile(r"\d+\. .+")
_ORDERED_PREFIX = re.compile(r"^\d+\. ")
_RULE_LINE = re.compile(r"-{3,}|\*{3,}")
_IMAGE = re.compile(r'!\[(.*?)\]\((.*?)(?:\s+"(.*?)")?\)')
_IMAGE_ALT = re.compile(r"!\[(.*?)\]")
_FENCE = "~~~"
_INDENT = "    "


@dataclass(frozen=True)
class _Context:
    lines: Sequence[str]
    autolinks: bool = False


@dataclass(frozen=True)
class Rule:
    name: str
    matches: Callable[[_Context, int], bool]
    consume: Callable[[_Context, int], tuple[Block, int]]


def segment(source: str, *, autolinks: bool = False) -> Document:
    """Split ``source`` into block nodes, top to bottom.

    Every input yields a document; the empty string yields no blocks.
    Only paragraph lines go through inline resolution.
    """
    ctx = _Context(lines=_split_lines(source), autolinks=autolinks)
    blocks: List[Block] = []
    i = 0
    while i < len(ctx.lines):
        rule = _select_rule(ctx, i)
        block, consumed = rule.consume(ctx, i)
        blocks.append(block)
        i += consumed
    logger.debug("Segmented %d lines into %d blocks", len(ctx.lines), len(blocks))
    return Document(blocks=tuple(blocks))


def _split_lines(source: str) -> tuple[str, ...]:
    """Split on newlines only; a trailing newline does not open an extra line."""
    if not source:
        return ()
    lines = [line[:-1] if line.endswith("\r") else line for line in source.split("\n")]
    if source.endswith("\n"):
        lines.pop()
    return tuple(lines)


def classify(lines: Sequence[str], index: int) -> str:
    """Name of the rule that would consume ``lines[index]``."""
    return _select_rule(_Context(lines=lines), index).name


def _select_rule(ctx: _Context, index: int) -> Rule:
    for rule in RULES:
        if rule.matches(ctx, index):
            return rule
    return PARAGRAPH_RULE


def _stripped(ctx: _Context, index: int) -> str:
    return ctx.lines[index].strip()


def _is_empty(ctx: _Context, index: int) -> bool:
    return not _stripped(ctx, index)


def _consume_empty(ctx: _Context, index: int) -> tuple[Block, int]:
    return EmptyLine(), 1


def _is_indented_code(ctx: _Context, index: int) -> bool:
    return ctx.lines[index].startswith(_INDENT)


def _consume_indented_code(ctx: _Context, index: int) -> tuple[Block, int]:
    code_lines: list[str] = []
    i = index
    while i < len(ctx.lines) and ctx.lines[i].startswith(_INDENT):
        code_lines.append(ctx.lines[i][len(_INDENT) :])
        i += 1
    return CodeBlock(text="\n".join(code_lines), fenced=False), i - index


def _is_heading(ctx: _Context, index: int) -> bool:
    if _stripped(ctx, index).startswith("#"):
        return True
    return index + 1 < len(ctx.lines) and _SETEXT_UNDERLINE.fullmatch(_stripped(ctx, index + 1)) is not None


def _consume_heading(ctx: _Context, index: int) -> tuple[Block, int]:
    text = _stripped(ctx, index)
    if text.startswith("#"):
        hashes = len(text) - len(text.lstrip("#"))
        return Heading(level=min(hashes, 6), run=InlineRun.plain(text[hashes:].strip())), 1
    level = 1 if _stripped(ctx, index + 1).startswith("=") else 2
    return Heading(level=level, run=InlineRun.plain(text), setext=True), 2


def _is_bullet(ctx: _Context, index: int) -> bool:
    return _stripped(ctx, index).startswith(("* ", "- "))


def _consume_bullet_list(ctx: _Context, index: int) -> tuple[Block, int]:
    items: list[InlineRun] = []
    i = index
    while i < len(ctx.lines) and _is_bullet(ctx, i):
        items.append(InlineRun.plain(_stripped(ctx, i)[2:]))
        i += 1
    return ListBlock(items=tuple(items), ordered=False), i - index


def _is_ordered_item(ctx: _Context, index: int) -> bool:
    return _ORDERED_ITEM.fullmatch(_stripped(ctx, index)) is not None


def _consume_ordered_list(ctx: _Context, index: int) -> tuple[Block, int]:
    items: list[InlineRun] = []
    i = index
    while i < len(ctx.lines) and _is_ordered_item(ctx, i):
        items.append(InlineRun.plain(_ORDERED_PREFIX.sub("", _stripped(ctx, i), count=1)))
        i += 1
    return ListBlock(items=tuple(items), ordered=True), i - index


def _is_quote(ctx: _Context, index: int) -> bool:
    return _stripped(ctx, index).startswith("> ")


def _consume_quote(ctx: _Context, index: int) -> tuple[Block, int]:
    lines: list[InlineRun] = []
    i = index
    while i < len(ctx.lines) and _stripped(ctx, i).startswith(">"):
        lines.append(InlineRun.plain(_stripped(ctx, i)[1:].strip()))
        i += 1
    return BlockQuote(lines=tuple(lines)), i - index


def _is_rule(ctx: _Context, index: int) -> bool:
    return _RULE_LINE.fullmatch(_stripped(ctx, index)) is not None


def _consume_rule(ctx: _Context, index: int) -> tuple[Block, int]:
    return HorizontalRule(), 1


def _is_fence(ctx: _Context, index: int) -> bool:
    return _stripped(ctx, index).startswith(_FENCE)


def _consume_fenced_code(ctx: _Context, index: int) -> tuple[Block, int]:
    opening = _stripped(ctx, index)
    language = opening.lstrip("~").strip() or None
    code_lines: list[str] = []
    i = index + 1
    while i < len(ctx.lines) and not _stripped(ctx, i).startswith(_FENCE):
        code_lines.append(ctx.lines[i])
        i += 1
    # Closing fence is consumed too, unless the input ended first.
    consumed = i - index + 1 if i < len(ctx.lines) else i - index
    return CodeBlock(text="\n".join(code_lines), fenced=True, language=language), consumed


def _is_line_block(ctx: _Context, index: int) -> bool:
    return _stripped(ctx, index).startswith("| ") and not is_pipe_table_start(ctx.lines, index)


def _consume_line_block(ctx: _Context, index: int) -> tuple[Block, int]:
    lines: list[InlineRun] = []
    i = index
    while i < len(ctx.lines) and _is_line_block(ctx, i):
        lines.append(InlineRun.plain(_stripped(ctx, i)[2:]))
        i += 1
    return LineBlock(lines=tuple(lines)), i - index


def _is_image(ctx: _Context, index: int) -> bool:
    return _stripped(ctx, index).startswith("!")


def _consume_image(ctx: _Context, index: int) -> tuple[Block, int]:
    text = _stripped(ctx, index)
    match = _IMAGE.search(text)
    if match:
        return ImageBlock(alt=match.group(1), url=match.group(2).strip(), title=match.group(3)), 1
    alt_match = _IMAGE_ALT.search(text)
    alt = alt_match.group(1) if alt_match else text[1:].strip()
    return ImageBlock(alt=alt, url=""), 1


def _is_formula(ctx: _Context, index: int) -> bool:
    return _stripped(ctx, index).startswith("$")


def _consume_formula(ctx: _Context, index: int) -> tuple[Block, int]:
    return Formula(raw=_stripped(ctx, index)), 1


def _is_table(ctx: _Context, index: int) -> bool:
    return looks_like_table(ctx.lines, index)


def _consume_table(ctx: _Context, index: int) -> tuple[Block, int]:
    table, consumed = parse_table(ctx.lines, index)
    if table is None:
        logger.debug("Line %d looked like a table but had no rows", index)
        return _consume_paragraph(ctx, index)
    return table, consumed


def _consume_paragraph(ctx: _Context, index: int) -> tuple[Block, int]:
    return Paragraph(run=resolve(_stripped(ctx, index), autolinks=ctx.autolinks)), 1


PARAGRAPH_RULE = Rule("paragraph", lambda ctx, index: True, _consume_paragraph)

# Evaluated in order at every cursor position; the first matching rule wins.
RULES: tuple[Rule, ...] = (
    Rule("empty", _is_empty, _consume_empty),
    Rule("indented_code", _is_indented_code, _consume_indented_code),
    Rule("heading", _is_heading, _consume_heading),
    Rule("bullet_list", _is_bullet, _consume_bullet_list),
    Rule("ordered_list", _is_ordered_item, _consume_ordered_list),
    Rule("quote", _is_quote, _consume_quote),
    Rule("horizontal_rule", _is_rule, _consume_rule),
    Rule("fenced_code", _is_fence, _consume_fenced_code),
    Rule("line_block", _is_line_block, _consume_line_block),
    Rule("image", _is_image, _consume_image),
    Rule("formula", _is_formula, _consume_formula),
    Rule("table", _is_table, _consume_table),
    PARAGRAPH_RULE,
)
