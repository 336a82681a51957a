"""Round-trip tests: Markdown → Notion blocks → Markdown.

Rendering drops annotations, so checks compare block types and text,
or exact Markdown for documents without inline formatting.
"""

from noti.config import NotiConfig
from noti.converter.block_to_markdown import BlockToMarkdown
from noti.converter.markdown_to_blocks import MarkdownToBlocks


def _roundtrip(md: str, **kwargs) -> str:
    config = NotiConfig(token="test-token", **kwargs)
    blocks = MarkdownToBlocks(config).convert(md).blocks
    return BlockToMarkdown(config).convert(blocks)


class TestRoundTrip:
    def test_canonical_document_is_stable(self):
        md = (
            "# タイトル\n\n"
            "これは本文です。\n\n"
            "## セクション1\n\n"
            "- リスト1\n\n"
            "```typescript\n"
            'console.log("Hello");\n'
            "```\n\n"
            "> 引用文\n\n"
        )
        assert _roundtrip(md) == md

    def test_list_truncated_to_first_item(self):
        assert _roundtrip("- a\n- b\n") == "- a\n\n"

    def test_all_items_kept(self):
        assert _roundtrip("- a\n- b\n", list_items="all") == "- a\n- b\n\n"

    def test_task_list(self):
        md = "- [x] done\n- [ ] todo\n"
        assert _roundtrip(md, list_items="all") == md

    def test_multiline_paragraph_is_stable(self):
        md = "line one\nline two\n\n"
        assert _roundtrip(md) == md

    def test_bold_is_dropped(self):
        assert _roundtrip("**bold** text") == "bold text\n\n"

    def test_default_code_language(self):
        assert _roundtrip("```\nx\n```") == "```plain text\nx\n```\n\n"

    def test_rendered_markdown_converts_back(self):
        config = NotiConfig(list_items="all")
        blocks = MarkdownToBlocks(config).convert(
            "# H\n\npara\n\n- a\n1. b\n\n> q"
        ).blocks
        md = BlockToMarkdown(config).convert(blocks)
        again = MarkdownToBlocks(config).convert(md).blocks
        assert [b["type"] for b in again] == [b["type"] for b in blocks]
