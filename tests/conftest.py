"""Shared test fixtures for the noti test suite."""

from __future__ import annotations

import pytest

from noti.config import NotiConfig
from noti.converter.block_to_markdown import BlockToMarkdown
from noti.converter.markdown_to_blocks import MarkdownToBlocks


class RecordingMetrics:
    """Metrics hook that keeps every data point for assertions."""

    def __init__(self) -> None:
        self.increments: list[tuple[str, int, dict | None]] = []
        self.timings: list[tuple[str, float, dict | None]] = []

    def increment(self, name, value=1, tags=None):
        self.increments.append((name, value, tags))

    def timing(self, name, ms, tags=None):
        self.timings.append((name, ms, tags))

    def total(self, name: str) -> int:
        return sum(value for metric, value, _ in self.increments if metric == name)


@pytest.fixture
def config() -> NotiConfig:
    """Default test configuration with a dummy token."""
    return NotiConfig(token="test_token_1234")


@pytest.fixture
def converter(config: NotiConfig) -> MarkdownToBlocks:
    """Markdown-to-blocks converter using the default test config."""
    return MarkdownToBlocks(config)


@pytest.fixture
def renderer(config: NotiConfig) -> BlockToMarkdown:
    """Blocks-to-Markdown renderer using the default test config."""
    return BlockToMarkdown(config)


@pytest.fixture
def metrics() -> RecordingMetrics:
    return RecordingMetrics()
