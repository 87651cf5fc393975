"""Tests for environment-driven settings."""

from __future__ import annotations

import logging

import pytest

from app import configure_logging
from config import Settings, load_settings


class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ("HISTORY_LIMIT", "PRECISION", "MAX_SESSIONS", "LOG_LEVEL"):
            monkeypatch.delenv(f"KEYPAD_{name}", raising=False)
        settings = load_settings()
        assert settings.history_limit == 5
        assert settings.precision == 7
        assert settings.max_sessions == 1000
        assert settings.log_level == "INFO"

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("KEYPAD_HISTORY_LIMIT", "3")
        monkeypatch.setenv("KEYPAD_PRECISION", "2")
        monkeypatch.setenv("KEYPAD_MAX_SESSIONS", "4")
        monkeypatch.setenv("KEYPAD_LOG_LEVEL", "debug")
        settings = load_settings()
        assert (settings.history_limit, settings.precision) == (3, 2)
        assert settings.max_sessions == 4
        assert settings.log_level == "DEBUG"

    def test_engine_from_settings(self):
        engine = Settings(history_limit=2, precision=3).engine()
        assert engine.history_limit == 2
        assert engine.precision == 3

    @pytest.mark.parametrize(
        "name, value",
        [
            ("KEYPAD_HISTORY_LIMIT", "five"),
            ("KEYPAD_HISTORY_LIMIT", "0"),
            ("KEYPAD_PRECISION", "-1"),
            ("KEYPAD_MAX_SESSIONS", "0"),
            ("KEYPAD_LOG_LEVEL", "LOUD"),
        ],
    )
    def test_invalid_values(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)
        with pytest.raises(ValueError):
            load_settings()

    def test_blank_value_falls_back_to_default(self, monkeypatch):
        monkeypatch.setenv("KEYPAD_PRECISION", "  ")
        assert load_settings().precision == 7

    def test_log_level_sets_root_logger(self, monkeypatch):
        monkeypatch.setenv("KEYPAD_LOG_LEVEL", "warning")
        root = logging.getLogger()
        previous = root.level
        try:
            configure_logging(load_settings().log_level)
            assert root.level == logging.WARNING
        finally:
            root.setLevel(previous)
