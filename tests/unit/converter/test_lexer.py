"""Unit tests for MarkdownLexer token normalization."""

import pytest

from noti.converter.lexer import MarkdownLexer


@pytest.fixture
def lexer():
    return MarkdownLexer()


class TestBlockTokens:
    def test_heading_levels(self, lexer):
        for level in range(1, 7):
            tokens = lexer.lex(f"{'#' * level} Heading")
            assert tokens[0]["type"] == "heading"
            assert tokens[0]["attrs"]["level"] == level

    def test_blank_lines_dropped(self, lexer):
        tokens = lexer.lex("a\n\n\n\nb")
        assert [t["type"] for t in tokens] == ["paragraph", "paragraph"]

    def test_tight_list_items_use_paragraph(self, lexer):
        tokens = lexer.lex("- item")
        item = tokens[0]["children"][0]
        assert item["type"] == "list_item"
        assert item["children"][0]["type"] == "paragraph"

    def test_ordered_attr(self, lexer):
        assert lexer.lex("1. x")[0]["attrs"]["ordered"] is True

    def test_task_item(self, lexer):
        item = lexer.lex("- [x] done")[0]["children"][0]
        assert item["type"] == "task_list_item"
        assert item["attrs"]["checked"] is True

    def test_code_trailing_newline_stripped(self, lexer):
        token = lexer.lex("```py\nx\n```")[0]
        assert token["type"] == "block_code"
        assert token["raw"] == "x"
        assert token["attrs"]["info"] == "py"

    def test_table_is_opaque(self, lexer):
        tokens = lexer.lex("| a |\n|---|\n| 1 |")
        assert tokens == [{"type": "table"}]

    def test_html_block(self, lexer):
        tokens = lexer.lex("<div>\nx\n</div>")
        assert tokens[0]["type"] == "html_block"


class TestInlineTokens:
    def test_link_attrs(self, lexer):
        link = lexer.lex("[a](https://x.example)")[0]["children"][0]
        assert link["type"] == "link"
        assert link["attrs"]["url"] == "https://x.example"

    def test_codespan_raw(self, lexer):
        span = lexer.lex("`code`")[0]["children"][0]
        assert span == {"type": "codespan", "raw": "code"}

    def test_strikethrough(self, lexer):
        node = lexer.lex("~~x~~")[0]["children"][0]
        assert node["type"] == "strikethrough"
