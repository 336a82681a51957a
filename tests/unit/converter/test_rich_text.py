"""Tests for rich text building and splitting."""

from noti.converter.lexer import MarkdownLexer
from noti.converter.rich_text import (
    build_rich_text,
    make_text_run,
    plain_text,
    split_rich_text,
)


def _inline(md):
    """Inline children of the first paragraph in *md*."""
    return MarkdownLexer().lex(md)[0]["children"]


class TestMakeTextRun:
    def test_plain(self):
        assert make_text_run("hi") == {
            "type": "text",
            "text": {"content": "hi"},
            "plain_text": "hi",
        }

    def test_default_annotations_omitted(self):
        run = make_text_run("hi", {"bold": False, "color": "default"})
        assert "annotations" not in run

    def test_href(self):
        run = make_text_run("x", href="https://a.example")
        assert run["href"] == "https://a.example"
        assert run["text"]["link"] == {"url": "https://a.example"}


class TestBuildRichText:
    def test_nested_emphasis_merges_flags(self):
        runs = build_rich_text(_inline("***both***"))
        assert len(runs) == 1
        assert runs[0]["annotations"]["bold"] is True
        assert runs[0]["annotations"]["italic"] is True

    def test_bold_link(self):
        runs = build_rich_text(_inline("[**x**](https://a.example)"))
        assert runs[0]["href"] == "https://a.example"
        assert runs[0]["annotations"]["bold"] is True

    def test_softbreak_kept_as_newline(self):
        runs = build_rich_text(_inline("line one\nline two"))
        assert plain_text(runs) == "line one\nline two"
        assert len(runs) == 1

    def test_image_without_url_keeps_source(self):
        runs = build_rich_text(_inline("see ![alt]() here"))
        assert plain_text(runs) == "see ![alt]() here"

    def test_adjacent_plain_runs_coalesce(self):
        runs = build_rich_text(_inline("Hello, world!"))
        assert len(runs) == 1
        assert runs[0]["plain_text"] == "Hello, world!"

    def test_autolink(self):
        runs = build_rich_text(_inline("visit https://example.com now"))
        linked = [r for r in runs if r.get("href")]
        assert linked[0]["href"] == "https://example.com"

    def test_empty(self):
        assert build_rich_text([]) == []


class TestSplitRichText:
    def test_short_runs_untouched(self):
        runs = [make_text_run("abc")]
        assert split_rich_text(runs, 10) == runs

    def test_split_keeps_annotations(self):
        runs = [make_text_run("abcdefghij", {"bold": True, "color": "default"})]
        pieces = split_rich_text(runs, 4)
        assert [p["text"]["content"] for p in pieces] == ["abcd", "efgh", "ij"]
        assert all(p["annotations"]["bold"] for p in pieces)

    def test_plain_text_preserved(self):
        runs = [make_text_run("x" * 4001)]
        assert plain_text(split_rich_text(runs)) == "x" * 4001


class TestPlainText:
    def test_prefers_content(self):
        assert plain_text([{"text": {"content": "a"}, "plain_text": "b"}]) == "a"

    def test_falls_back_to_plain_text(self):
        assert plain_text([{"type": "equation", "plain_text": "E=mc^2"}]) == "E=mc^2"
