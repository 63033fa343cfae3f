from __future__ import annotations

import re
from typing import Sequence

from .model import TableBlock

_GAP = "  "
_SEPARATOR_CHARS = re.compile(r"[|\-: ]")
_SEPARATOR_ROW = re.compile(r"^[-| ]+$")
# Every word on the first aligned row starts a column.
_WORD = re.compile(r"\S+")


def is_pipe_table_start(lines: Sequence[str], index: int) -> bool:
    """Header row ``| a | b |`` immediately followed by ``| - | - |``."""
    if index + 1 >= len(lines):
        return False
    header = lines[index]
    return _is_pipe_row(header) and not _is_pipe_separator(header) and _is_pipe_separator(lines[index + 1])


def looks_like_table(lines: Sequence[str], index: int) -> bool:
    if is_pipe_table_start(lines, index):
        return True
    line = lines[index]
    if "|" in line:
        return True
    if _GAP not in line.strip():
        return False
    return any("---" in neighbour for neighbour in lines[index : index + 2])


def parse_table(lines: Sequence[str], index: int) -> tuple[TableBlock | None, int]:
    """Parse the table starting at ``index``.

    Returns the block and the number of lines consumed, or ``(None, 0)``
    when no row could be read.
    """
    if is_pipe_table_start(lines, index):
        return _parse_pipe_table(lines, index)
    return _parse_aligned_table(lines, index)


def _parse_pipe_table(lines: Sequence[str], index: int) -> tuple[TableBlock, int]:
    header = _split_pipe_row(lines[index])
    column_count = len(header)
    rows: list[tuple[str, ...]] = []
    i = index + 2
    while i < len(lines) and _is_pipe_row(lines[i]):
        cells = _split_pipe_row(lines[i])
        if len(cells) != column_count:
            break
        rows.append(tuple(cells))
        i += 1
    return TableBlock(header=tuple(header), rows=tuple(rows), column_count=column_count), i - index


def _parse_aligned_table(lines: Sequence[str], index: int) -> tuple[TableBlock | None, int]:
    rows: list[list[str]] = []
    col_starts: list[int] | None = None
    i = index
    while i < len(lines) and ("|" in lines[i] or _GAP in lines[i].strip()):
        line = lines[i].rstrip()
        if _SEPARATOR_ROW.match(line):
            i += 1
            continue
        if "|" in line:
            cells = _split_loose_pipe_row(line)
        else:
            if col_starts is None:
                col_starts = [match.start() for match in _WORD.finditer(line)]
            cells = _slice_cells(line, col_starts)
        rows.append(cells)
        i += 1
        while i < len(lines) and _is_continuation(lines[i], col_starts):
            rows[-1][-1] += "\n" + lines[i].strip()
            i += 1

    if not rows:
        return None, 0
    column_count = max(len(row) for row in rows)
    padded = [tuple(row + [""] * (column_count - len(row))) for row in rows]
    return TableBlock(header=padded[0], rows=tuple(padded[1:]), column_count=column_count), i - index


def _is_pipe_row(line: str) -> bool:
    stripped = line.strip()
    return len(stripped) >= 2 and stripped.startswith("|") and stripped.endswith("|")


def _is_pipe_separator(line: str) -> bool:
    stripped = line.strip()
    return _is_pipe_row(line) and "-" in stripped and not _SEPARATOR_CHARS.sub("", stripped)


def _split_pipe_row(line: str) -> list[str]:
    return [cell.strip() for cell in line.strip()[1:-1].split("|")]


def _split_loose_pipe_row(line: str) -> list[str]:
    stripped = line.strip()
    if stripped.startswith("|"):
        stripped = stripped[1:]
    if stripped.endswith("|"):
        stripped = stripped[:-1]
    return [cell.strip() for cell in stripped.split("|")]


def _slice_cells(line: str, col_starts: Sequence[int]) -> list[str]:
    cells: list[str] = []
    for idx, start in enumerate(col_starts):
        end = col_starts[idx + 1] if idx + 1 < len(col_starts) else len(line)
        cells.append(line[start:end].strip() if start < len(line) else "")
    return cells


def _is_continuation(line: str, col_starts: Sequence[int] | None) -> bool:
    if not line[:1].isspace() or not line.strip() or "|" in line:
        return False
    if _SEPARATOR_ROW.match(line.rstrip()):
        return False
    indent = len(line) - len(line.lstrip())
    return col_starts is None or indent > col_starts[0]
