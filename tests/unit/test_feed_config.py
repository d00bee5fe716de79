"""
Unit tests for FeedConfig and text helpers.
"""

import pytest
from pydantic import ValidationError

from config.feed import FeedConfig
from config.settings import Settings
from utils.text_utils import fold_text


class TestFeedConfig:
    """Tests for FeedConfig"""

    def test_feed_url(self):
        config = FeedConfig(sheet_id="abc", sheet_gid="42")

        assert config.feed_url == "https://docs.google.com/spreadsheets/d/abc/gviz/tq?tqx=out:json&gid=42"

    def test_is_immutable(self):
        config = FeedConfig(sheet_id="abc", sheet_gid="42")

        with pytest.raises(ValidationError):
            config.sheet_id = "other"

    def test_from_settings(self):
        settings = Settings(
            sheet_id="doc",
            sheet_gid="7",
            feed_strategies=["direct"],
            preview_length=100,
        )

        config = FeedConfig.from_settings(settings)

        assert config.sheet_id == "doc"
        assert config.strategies == ("direct",)
        assert config.preview_length == 100
        assert config.header_caption == "NOMBRE PRODUCTO"

    def test_empty_sheet_id_rejected(self):
        with pytest.raises(ValidationError):
            FeedConfig(sheet_id="", sheet_gid="1")


class TestFoldText:
    """Tests for fold_text()"""

    def test_removes_accents_and_case(self):
        assert fold_text("  Niña ") == "nina"

    def test_none(self):
        assert fold_text(None) == ""
