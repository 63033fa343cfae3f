import pytest

from MdView.inline_parser import resolve
from MdView.model import SpanKind


def test_bold():
    result = resolve("Это **жирный** текст")
    assert result.text == "Это жирный текст"
    assert len(result.spans) == 1
    span = result.spans[0]
    assert span.kind is SpanKind.BOLD
    assert (span.start, span.end) == (4, 10)


def test_italic():
    result = resolve("Это *курсив* текст")
    assert result.text == "Это курсив текст"
    assert len(result.spans) == 1
    assert result.spans[0].kind is SpanKind.ITALIC
    assert (result.spans[0].start, result.spans[0].end) == (4, 10)


def test_bold_italic_share_range():
    result = resolve("Это ***жирный и одновременно курсив*** текст")
    assert result.text == "Это жирный и одновременно курсив текст"
    bold = next(s for s in result.spans if s.kind is SpanKind.BOLD)
    italic = next(s for s in result.spans if s.kind is SpanKind.ITALIC)
    assert (bold.start, bold.end) == (4, 32)
    assert (italic.start, italic.end) == (4, 32)
    assert len(result.spans) == 2


def test_code():
    result = resolve('Это код `val s = "hello world!"` внутри текста')
    assert result.text == 'Это код val s = "hello world!" внутри текста'
    assert len(result.spans) == 1
    span = result.spans[0]
    assert span.kind is SpanKind.CODE
    assert (span.start, span.end) == (8, 30)


def test_link():
    result = resolve("Ссылка на [Google](https://google.com)")
    assert result.text == "Ссылка на Google"
    assert len(result.spans) == 1
    span = result.spans[0]
    assert span.kind is SpanKind.LINK
    assert (span.start, span.end) == (10, 16)
    assert span.url == "https://google.com"


def test_link_only():
    result = resolve("[A](u)")
    assert result.text == "A"
    assert [(s.kind, s.start, s.end, s.url) for s in result.spans] == [(SpanKind.LINK, 0, 1, "u")]


def test_strikethrough():
    result = resolve("Это ~~зачеркнутый~~ текст")
    assert result.text == "Это зачеркнутый текст"
    assert [(s.kind, s.start, s.end) for s in result.spans] == [(SpanKind.STRIKETHROUGH, 4, 15)]


def test_underline():
    result = resolve("Это __подчеркнутый__ текст")
    assert result.text == "Это подчеркнутый текст"
    assert [(s.kind, s.start, s.end) for s in result.spans] == [(SpanKind.UNDERLINE, 4, 16)]


def test_underline_does_not_span_underscores():
    result = resolve("__snake_case__")
    assert result.text == "__snake_case__"
    assert result.spans == ()


def test_nested_styles():
    result = resolve("**жирный и *курсив* внутри**")
    assert result.text == "жирный и курсив внутри"
    assert len(result.spans) == 2
    bold = next(s for s in result.spans if s.kind is SpanKind.BOLD)
    italic = next(s for s in result.spans if s.kind is SpanKind.ITALIC)
    assert (bold.start, bold.end) == (0, 22)
    assert (italic.start, italic.end) == (9, 15)
    assert bold.start < italic.start and italic.end < bold.end


def test_multiple_styles_are_localized():
    result = resolve("**A** and *B* and ~~C~~")
    assert result.text == "A and B and C"
    assert [(s.kind, s.start, s.end) for s in result.spans] == [
        (SpanKind.BOLD, 0, 1),
        (SpanKind.ITALIC, 6, 7),
        (SpanKind.STRIKETHROUGH, 12, 13),
    ]


def test_unclosed_marker_is_kept():
    result = resolve("Это **не закрытый жирный")
    assert result.text == "Это **не закрытый жирный"
    assert result.spans == ()


def test_marker_closes_at_first_closer():
    result = resolve("*a* b*")
    assert result.text == "a b*"
    assert [(s.kind, s.start, s.end) for s in result.spans] == [(SpanKind.ITALIC, 0, 1)]


def test_multiple_links():
    result = resolve("Ссылки: [A](a.com) и [B](b.com)")
    assert result.text == "Ссылки: A и B"
    assert [(s.start, s.end, s.url) for s in result.spans] == [(8, 9, "a.com"), (12, 13, "b.com")]


def test_base_offset_shifts_spans():
    result = resolve("**x**", base_offset=5)
    assert result.text == "x"
    assert (result.spans[0].start, result.spans[0].end) == (5, 6)


@pytest.mark.parametrize("text", ["", "Обычный текст без markdown", "### Заголовок 3", "a + b = c"])
def test_plain_text_is_unchanged(text):
    result = resolve(text)
    assert result.text == text
    assert result.spans == ()


def test_autolinks_are_off_by_default():
    result = resolve("see <http://a.com> and https://b.org")
    assert result.text == "see <http://a.com> and https://b.org"
    assert result.spans == ()


def test_bracketed_autolink():
    result = resolve("see <http://a.com> now", autolinks=True)
    assert result.text == "see http://a.com now"
    assert [(s.kind, s.start, s.end, s.url) for s in result.spans] == [(SpanKind.LINK, 4, 16, "http://a.com")]


def test_bare_url():
    result = resolve("go to https://x.org today", autolinks=True)
    assert result.text == "go to https://x.org today"
    assert [(s.start, s.end, s.url) for s in result.spans] == [(6, 19, "https://x.org")]


def test_explicit_link_wins_over_bare_url():
    result = resolve("[A](http://a.com)", autolinks=True)
    assert result.text == "A"
    assert [(s.start, s.end, s.url) for s in result.spans] == [(0, 1, "http://a.com")]


@pytest.mark.parametrize(
    "text",
    [
        "***a*** **b** *c* `d` ~~e~~ __f__ [g](h)",
        "**outer [link](u) and `code`** tail *i*",
        "*unbalanced ** markers* and ~~more",
        "`a` `b` `c` **d *e* f** ***g***",
    ],
)
def test_spans_are_sorted_and_in_bounds(text):
    result = resolve(text)
    starts = [span.start for span in result.spans]
    assert starts == sorted(starts)
    for span in result.spans:
        assert 0 <= span.start <= span.end <= len(result.text)
