"""Tests for logging configuration"""

import logging

import pytest


class TestGetLogger:
    """Tests for get_logger"""

    def test_package_loggers_share_root(self):
        """Test module loggers are children of the package logger"""
        from tabixindex.logging_config import get_logger

        logger = get_logger("tabixindex.query")

        assert logger.name == "tabixindex.query"
        assert logger.parent is logging.getLogger("tabixindex")

    def test_foreign_names_nested_under_package(self):
        """Test loggers for other names still use the package handler"""
        from tabixindex.logging_config import get_logger

        assert get_logger("scripts.tool").name == "tabixindex.scripts.tool"

    def test_single_handler(self):
        """Test repeated calls do not add handlers"""
        from tabixindex.logging_config import get_logger

        get_logger("tabixindex.a")
        get_logger("tabixindex.b")

        assert len(logging.getLogger("tabixindex").handlers) == 1

    def test_handler_format(self):
        """Test the handler uses the shared format"""
        from tabixindex.logging_config import LOG_FORMAT, get_logger

        get_logger("tabixindex.fmt")
        (handler,) = logging.getLogger("tabixindex").handlers

        assert handler.formatter._fmt == LOG_FORMAT


class TestLevelFromEnv:
    """Tests for TABIXINDEX_LOG_LEVEL handling"""

    def test_default_warning(self, monkeypatch):
        """Test the default level is WARNING"""
        from tabixindex.logging_config import LOG_LEVEL_ENV, _level_from_env

        monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
        assert _level_from_env() == (logging.WARNING, None)

    def test_case_insensitive(self, monkeypatch):
        """Test level names are case-insensitive"""
        from tabixindex.logging_config import LOG_LEVEL_ENV, _level_from_env

        monkeypatch.setenv(LOG_LEVEL_ENV, "debug")
        assert _level_from_env() == (logging.DEBUG, None)

    def test_invalid_falls_back(self, monkeypatch):
        """Test unknown names fall back to WARNING and are reported"""
        from tabixindex.logging_config import LOG_LEVEL_ENV, _level_from_env

        monkeypatch.setenv(LOG_LEVEL_ENV, "LOUD")
        assert _level_from_env() == (logging.WARNING, "LOUD")


class TestSetLogLevel:
    """Tests for set_log_level"""

    def test_by_name_and_number(self):
        """Test levels can be given by name or number"""
        from tabixindex.logging_config import set_log_level

        set_log_level("debug")
        assert logging.getLogger("tabixindex").level == logging.DEBUG

        set_log_level(logging.ERROR)
        assert logging.getLogger("tabixindex").level == logging.ERROR

    def test_unknown_name(self):
        """Test unknown level names raise ValueError"""
        from tabixindex.logging_config import set_log_level

        with pytest.raises(ValueError):
            set_log_level("LOUD")
