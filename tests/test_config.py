"""Tests for configuration settings."""

import dataclasses

import pytest

from lyricsync import config
from lyricsync.config import ProgressDirection, SyncConfig, default_config
from lyricsync.exceptions import ConfigError


class TestSyncConfig:
    @pytest.mark.parametrize("value,expected", [(10.0, 5.0), (-1.0, 0.0), (1.2, 1.2)])
    def test_threshold_clamped(self, value, expected):
        assert SyncConfig(short_line_group_threshold=value).short_line_group_threshold == expected

    def test_direction_coerced(self):
        assert SyncConfig(progress_direction="ttb").progress_direction is ProgressDirection.TTB

    def test_invalid_direction(self):
        with pytest.raises(ConfigError, match="progress direction"):
            SyncConfig(progress_direction="diagonal")

    @pytest.mark.parametrize(
        "overrides",
        [
            {"scroll_position_offset_percent": 150},
            {"scroll_position_offset_percent": -1},
            {"user_scroll_cooldown_ms": -1},
            {"preactivate_gap_seconds": -0.5},
        ],
    )
    def test_invalid_values(self, overrides):
        with pytest.raises(ConfigError):
            SyncConfig(**overrides)

    def test_derived_values(self):
        cfg = SyncConfig(scroll_position_offset_percent=40, user_scroll_cooldown_ms=1500)
        assert cfg.anchor_ratio == pytest.approx(0.4)
        assert cfg.user_scroll_cooldown_seconds == pytest.approx(1.5)
        assert cfg.interlude_gap_threshold_seconds == 5.0

    def test_with_overrides_skips_none(self):
        cfg = SyncConfig(lyric_offset_seconds=0.25)
        updated = cfg.with_overrides(lyric_offset_seconds=None, short_line_group_threshold=1.0)
        assert updated.lyric_offset_seconds == 0.25
        assert updated.short_line_group_threshold == 1.0
        assert cfg.with_overrides(lyric_offset_seconds=None) is cfg

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            SyncConfig().lyric_offset_seconds = 1.0

    def test_default_config(self):
        assert default_config("btt").progress_direction is ProgressDirection.BTT


class TestValidateConfig:
    def test_defaults_are_valid(self):
        config.validate_config()

    def test_bad_module_setting(self, monkeypatch):
        monkeypatch.setattr(config, "PROGRESS_DIRECTION", "sideways")
        with pytest.raises(ConfigError):
            config.validate_config()

    def test_bad_scroll_position(self, monkeypatch):
        monkeypatch.setattr(config, "SCROLL_POSITION_OFFSET_PERCENT", 101)
        with pytest.raises(ConfigError):
            config.validate_config()
