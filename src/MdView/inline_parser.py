from __future__ import annotations

import re
from dataclasses import dataclass
from operator import attrgetter
from typing import Sequence

from .model import InlineRun, Span, SpanKind


@dataclass(frozen=True)
class _Marker:
    pattern: re.Pattern[str]
    kinds: tuple[SpanKind, ...]
    url_group: int | None = None
    verbatim: bool = False


# Order is priority: on a tie for the leftmost match the earlier marker wins.
MARKERS: tuple[_Marker, ...] = (
    _Marker(re.compile(r"\*\*\*(.+?)\*\*\*"), (SpanKind.BOLD, SpanKind.ITALIC)),
    _Marker(re.compile(r"\[(.+?)\]\((.+?)\)"), (SpanKind.LINK,), url_group=2),
    _Marker(re.compile(r"~~(.+?)~~"), (SpanKind.STRIKETHROUGH,)),
    _Marker(re.compile(r"__([^_]+?)__"), (SpanKind.UNDERLINE,)),
    _Marker(re.compile(r"\*\*(.+?)\*\*"), (SpanKind.BOLD,)),
    _Marker(re.compile(r"(?<!\*)\*(?!\*)(.+?)(?<!\*)\*(?!\*)"), (SpanKind.ITALIC,)),
    _Marker(re.compile(r"`(.+?)`"), (SpanKind.CODE,)),
)

AUTOLINK_MARKERS: tuple[_Marker, ...] = (
    _Marker(re.compile(r"<((?:https?|ftp)://[^>\s]+)>"), (SpanKind.LINK,), url_group=1, verbatim=True),
    _Marker(
        re.compile(r"(?<![\w/])((?:https?|ftp)://[\w\-.~:/?#\[\]@!$&'()*+,;=%]+)"),
        (SpanKind.LINK,),
        url_group=1,
        verbatim=True,
    ),
)


def resolve(text: str, base_offset: int = 0, *, autolinks: bool = False) -> InlineRun:
    """Strip inline markup from ``text`` and return it with its style spans.

    Span offsets are relative to the resolved text shifted by ``base_offset``.
    Markers without a closing counterpart are left in the text as-is.
    With ``autolinks`` enabled, ``<scheme://...>`` and bare URLs also become
    link spans.
    """
    markers = MARKERS + AUTOLINK_MARKERS if autolinks else MARKERS
    return _resolve(text, base_offset, markers)


def _resolve(text: str, base_offset: int, markers: Sequence[_Marker]) -> InlineRun:
    pieces: list[str] = []
    spans: list[Span] = []
    offset = base_offset
    # Only nested markup recurses; the text after each match is walked here.
    while True:
        found = _first_match(text, markers)
        if found is None:
            pieces.append(text)
            break
        marker, match = found
        before = text[: match.start()]
        start = offset + len(before)
        if marker.verbatim:
            inner = InlineRun.plain(match.group(1))
        else:
            inner = _resolve(match.group(1), start, markers)
        end = start + len(inner.text)
        url = match.group(marker.url_group) if marker.url_group is not None else None
        spans.extend(
            Span(kind, start, end, url if kind is SpanKind.LINK else None) for kind in marker.kinds
        )
        spans.extend(inner.spans)
        pieces.append(before)
        pieces.append(inner.text)
        offset = end
        text = text[match.end() :]
    spans.sort(key=attrgetter("start"))
    return InlineRun(text="".join(pieces), spans=tuple(spans))


def _first_match(text: str, markers: Sequence[_Marker]) -> tuple[_Marker, re.Match[str]] | None:
    best: tuple[_Marker, re.Match[str]] | None = None
    for marker in markers:
        match = marker.pattern.search(text)
        if match is None:
            continue
        if best is None or match.start() < best[1].start():
            best = (marker, match)
    return best
