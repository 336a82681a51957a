"""Tests for NotiConfig validation and repr."""

import pytest

from noti.config import NotiConfig


class TestDefaults:
    def test_defaults(self):
        config = NotiConfig()
        assert config.list_items == "first"
        assert config.heading_overflow == "paragraph"
        assert config.normalize_code_language is False
        assert config.rich_text_limit == 2000
        assert config.import_batch_size == 100
        assert config.notion_version == "2022-06-28"


class TestValidation:
    @pytest.mark.parametrize("kwargs", [
        {"list_items": "some"},
        {"heading_overflow": "drop"},
        {"rich_text_limit": 0},
        {"import_batch_size": 0},
        {"base_url": "http://api.example.com/v1"},
    ])
    def test_rejects(self, kwargs):
        with pytest.raises(ValueError):
            NotiConfig(**kwargs)

    def test_local_http_allowed(self):
        assert NotiConfig(base_url="http://localhost:8080/v1").base_url.startswith("http://")


class TestRepr:
    def test_token_masked(self):
        text = repr(NotiConfig(token="secret_abcd1234"))
        assert "secret_abcd1234" not in text
        assert "token='...1234'" in text

    def test_short_token(self):
        assert "token='****'" in repr(NotiConfig(token="ab"))
