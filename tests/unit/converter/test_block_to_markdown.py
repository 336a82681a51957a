"""Tests for BlockToMarkdown."""

import pytest

from noti.config import NotiConfig
from noti.converter.block_to_markdown import BlockToMarkdown


def _rt(text):
    return [{"type": "text", "text": {"content": text}, "plain_text": text}]


def _block(block_type, text, **extra):
    return {"object": "block", "type": block_type, block_type: {"rich_text": _rt(text), **extra}}


class TestBlocks:
    def test_document(self, renderer):
        blocks = [
            _block("heading_1", "タイトル"),
            _block("paragraph", "これは本文です。"),
            _block("heading_2", "セクション1"),
            _block("bulleted_list_item", "リスト1"),
            _block("bulleted_list_item", "リスト2"),
            _block("code", 'console.log("Hello");', language="typescript"),
            _block("quote", "引用文"),
        ]
        assert renderer.convert(blocks) == (
            "# タイトル\n\n"
            "これは本文です。\n\n"
            "## セクション1\n\n"
            "- リスト1\n"
            "- リスト2\n\n"
            "```typescript\n"
            'console.log("Hello");\n'
            "```\n\n"
            "> 引用文\n\n"
        )

    def test_mixed_list_run(self, renderer):
        blocks = [
            _block("bulleted_list_item", "箇条書き1"),
            _block("numbered_list_item", "番号付き1"),
        ]
        assert renderer.convert(blocks) == "- 箇条書き1\n1. 番号付き1\n\n"

    def test_list_followed_by_paragraph(self, renderer):
        blocks = [_block("bulleted_list_item", "a"), _block("paragraph", "b")]
        assert renderer.convert(blocks) == "- a\n\nb\n\n"

    @pytest.mark.parametrize(("checked", "expected"), [
        (True, "- [x] task\n"),
        (False, "- [ ] task\n"),
    ])
    def test_to_do(self, renderer, checked, expected):
        assert renderer.convert([_block("to_do", "task", checked=checked)]) == expected

    def test_to_do_ends_bulleted_run(self, renderer):
        blocks = [_block("bulleted_list_item", "B"), _block("to_do", "a", checked=False)]
        assert renderer.convert(blocks) == "- B\n\n- [ ] a\n"

    def test_to_do_adds_no_blank_line(self, renderer):
        blocks = [_block("to_do", "a", checked=False), _block("paragraph", "P")]
        assert renderer.convert(blocks) == "- [ ] a\nP\n\n"

    def test_consecutive_to_dos(self, renderer):
        blocks = [
            _block("to_do", "a", checked=True),
            _block("to_do", "b", checked=False),
            _block("numbered_list_item", "n"),
        ]
        assert renderer.convert(blocks) == "- [x] a\n- [ ] b\n1. n\n\n"

    def test_heading_3(self, renderer):
        assert renderer.convert([_block("heading_3", "h")]) == "### h\n\n"

    def test_unknown_type_renders_empty(self, renderer):
        blocks = [
            {"object": "block", "type": "divider", "divider": {}},
            _block("paragraph", "p"),
        ]
        assert renderer.convert(blocks) == "p\n\n"

    def test_empty(self, renderer):
        assert renderer.convert([]) == ""

    def test_runs_are_concatenated(self, renderer):
        block = {
            "type": "paragraph",
            "paragraph": {"rich_text": _rt("Hello, ") + _rt("world")},
        }
        assert renderer.convert([block]) == "Hello, world\n\n"

    def test_falls_back_to_plain_text(self, renderer):
        block = {
            "type": "paragraph",
            "paragraph": {"rich_text": [{"type": "mention", "plain_text": "@Alice"}]},
        }
        assert renderer.convert([block]) == "@Alice\n\n"

    def test_annotations_not_serialised(self, renderer):
        run = _rt("bold")[0]
        run["annotations"] = {"bold": True}
        block = {"type": "paragraph", "paragraph": {"rich_text": [run]}}
        assert renderer.convert([block]) == "bold\n\n"

    def test_metrics(self, metrics):
        r = BlockToMarkdown(NotiConfig(metrics=metrics))
        r.convert([_block("paragraph", "a"), _block("paragraph", "b")])
        assert metrics.increments == [
            ("noti.blocks_converted_total", 2, {"direction": "blocks_to_markdown"}),
        ]


class TestProperties:
    def test_supported_types(self, renderer):
        properties = {
            "Name": {"type": "title", "title": [{"plain_text": "タイトル"}]},
            "Memo": {"type": "rich_text", "rich_text": [{"plain_text": "メモ"}]},
            "Due": {"type": "date", "date": {"start": "2024-01-15"}},
            "Link": {"type": "url", "url": "https://example.com"},
        }
        assert renderer.convert_properties(properties) == (
            "# タイトル\n\n"
            "**Memo**: メモ\n\n"
            "**Due**: 2024-01-15\n\n"
            "**Link**: [https://example.com](https://example.com)\n\n"
        )

    def test_only_first_run_used(self, renderer):
        properties = {
            "Name": {"type": "title", "title": [{"plain_text": "a"}, {"plain_text": "b"}]},
        }
        assert renderer.convert_properties(properties) == "# a\n\n"

    def test_other_types_skipped(self, renderer):
        properties = {
            "Done": {"type": "checkbox", "checkbox": True},
            "Count": {"type": "number", "number": 3},
        }
        assert renderer.convert_properties(properties) == ""

    def test_empty_title(self, renderer):
        assert renderer.convert_properties({"Name": {"type": "title", "title": []}}) == "# \n\n"

    def test_render_page(self, renderer):
        page = {"properties": {"Name": {"type": "title", "title": [{"plain_text": "T"}]}}}
        assert renderer.render_page(page, [_block("paragraph", "body")]) == "# T\n\nbody\n\n"
