from __future__ import annotations

from dataclasses import fields
from typing import Any

import yaml

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
    Span,
    SpanKind,
    TableBlock,
)

_TYPE_NAMES: dict[type, str] = {
    Paragraph: "paragraph",
    Heading: "heading",
    ListBlock: "list",
    BlockQuote: "quote",
    CodeBlock: "code",
    HorizontalRule: "rule",
    ImageBlock: "image",
    Formula: "formula",
    LineBlock: "line_block",
    TableBlock: "table",
    EmptyLine: "empty",
}


def dump_document(document: Document) -> str:
    """Serialize a Document snapshot to YAML text."""
    return yaml.safe_dump(document_to_dict(document), allow_unicode=True, sort_keys=False)


def document_to_dict(document: Document) -> dict[str, Any]:
    return {"blocks": [_block_to_dict(block) for block in document.blocks]}


def parse_yaml_document(text: str) -> Document:
    """Load a snapshot written by :func:`dump_document` back into a Document."""
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError("YAML root must be a mapping with a 'blocks' list.")
    entries = data.get("blocks") or []
    if not isinstance(entries, list):
        raise ValueError("'blocks' must be a list.")
    return Document(blocks=tuple(_block_from_dict(entry) for entry in entries))


def _block_to_dict(block: Block) -> dict[str, Any]:
    data: dict[str, Any] = {"type": _TYPE_NAMES[type(block)]}
    for item in fields(block):
        data[item.name] = _to_plain(getattr(block, item.name))
    return data


def _to_plain(value):
    if isinstance(value, InlineRun):
        return _run_to_dict(value)
    if isinstance(value, tuple):
        return [_to_plain(v) for v in value]
    return value


def _run_to_dict(run: InlineRun) -> dict[str, Any]:
    data: dict[str, Any] = {"text": run.text}
    if run.spans:
        data["spans"] = [_span_to_dict(span) for span in run.spans]
    return data


def _span_to_dict(span: Span) -> dict[str, Any]:
    data: dict[str, Any] = {"kind": span.kind.value, "start": span.start, "end": span.end}
    if span.url is not None:
        data["url"] = span.url
    return data


def _block_from_dict(entry) -> Block:
    if not isinstance(entry, dict):
        raise ValueError(f"Block entry must be a mapping, got {type(entry).__name__}.")
    kind = entry.get("type")
    if kind == "paragraph":
        return Paragraph(run=_run_from_dict(entry["run"]))
    elif kind == "heading":
        return Heading(
            level=int(entry["level"]),
            run=_run_from_dict(entry["run"]),
            setext=bool(entry.get("setext", False)),
        )
    elif kind == "list":
        return ListBlock(items=_runs(entry.get("items")), ordered=bool(entry.get("ordered", False)))
    elif kind == "quote":
        return BlockQuote(lines=_runs(entry.get("lines")))
    elif kind == "code":
        return CodeBlock(
            text=str(entry.get("text", "")),
            fenced=bool(entry.get("fenced", False)),
            language=entry.get("language"),
        )
    elif kind == "rule":
        return HorizontalRule()
    elif kind == "image":
        return ImageBlock(alt=str(entry.get("alt", "")), url=str(entry.get("url", "")), title=entry.get("title"))
    elif kind == "formula":
        return Formula(raw=str(entry.get("raw", "")))
    elif kind == "line_block":
        return LineBlock(lines=_runs(entry.get("lines")))
    elif kind == "table":
        header = tuple(str(cell) for cell in entry.get("header") or [])
        rows = tuple(tuple(str(cell) for cell in row) for row in entry.get("rows") or [])
        return TableBlock(header=header, rows=rows, column_count=int(entry.get("column_count", len(header))))
    elif kind == "empty":
        return EmptyLine()
    raise ValueError(f"Unknown block type: {kind!r}")


def _runs(value) -> tuple[InlineRun, ...]:
    return tuple(_run_from_dict(item) for item in value or [])


def _run_from_dict(value) -> InlineRun:
    if isinstance(value, str):
        return InlineRun.plain(value)
    spans = tuple(
        Span(
            kind=SpanKind(span["kind"]),
            start=int(span["start"]),
            end=int(span["end"]),
            url=span.get("url"),
        )
        for span in value.get("spans") or []
    )
    return InlineRun(text=str(value.get("text", "")), spans=spans)
