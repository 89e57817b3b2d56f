"""Tests for logging_config.py utility functions."""

import os
import sys
import logging
from unittest.mock import patch
from images_optimizer.core.logging_config import (
    LOG_FORMATS,
    setup_logger,
    get_logger,
    set_debug,
    logger,
)


class TestSetupLogger:
    """Tests for setup_logger function."""

    def test_setup_logger_default_parameters(self):
        """Test setup_logger with default parameters."""
        test_logger = setup_logger()
        assert test_logger.name == "images-optimizer"
        assert test_logger.level == logging.INFO
        assert len(test_logger.handlers) == 1
        assert not test_logger.propagate

    def test_setup_logger_custom_name(self):
        """Test setup_logger with custom name."""
        test_logger = setup_logger(name="test-custom-logger")
        assert test_logger.name == "test-custom-logger"

    def test_setup_logger_custom_level_by_parameter(self):
        """Test setup_logger with custom level via parameter."""
        test_logger = setup_logger(name="test-param-level", level="DEBUG")
        assert test_logger.level == logging.DEBUG

    def test_setup_logger_custom_level_by_env_var(self):
        """Test setup_logger with custom level via environment variable."""
        with patch.dict(os.environ, {"LOG_LEVEL": "WARNING"}):
            test_logger = setup_logger(name="test-env-level")
            assert test_logger.level == logging.WARNING

    def test_setup_logger_invalid_level_defaults_to_info(self):
        """Test setup_logger with invalid level defaults to INFO."""
        test_logger = setup_logger(name="test-invalid-level", level="INVALID_LEVEL")
        assert test_logger.level == logging.INFO

    def test_setup_logger_structured_format(self):
        """Test setup_logger with structured format."""
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("LOG_FORMAT", None)
            test_logger = setup_logger(name="test-structured", format_type="structured")
        format_string = test_logger.handlers[0].formatter._fmt
        assert "%(asctime)s" in format_string
        assert "%(levelname)" in format_string
        assert "%(filename)s" in format_string
        assert "%(lineno)d" in format_string
        assert "%(funcName)s" in format_string

    def test_setup_logger_env_format_override(self):
        """Test setup_logger format override via environment variable."""
        with patch.dict(os.environ, {"LOG_FORMAT": "simple"}):
            test_logger = setup_logger(name="test-env-format", format_type="structured")
        format_string = test_logger.handlers[0].formatter._fmt
        assert "%(filename)s" not in format_string
        assert "%(message)s" in format_string

    def test_setup_logger_unknown_format_falls_back_to_simple(self):
        """Unknown LOG_FORMAT values use the simple format."""
        with patch.dict(os.environ, {"LOG_FORMAT": "fancy"}):
            test_logger = setup_logger(name="test-unknown-format")
        assert test_logger.handlers[0].formatter._fmt == LOG_FORMATS["simple"]

    def test_setup_logger_updates_level_on_repeat_call(self):
        """A repeat call keeps the handler and applies the new level."""
        setup_logger(name="test-relevel", level="INFO")
        test_logger = setup_logger(name="test-relevel", level="ERROR")
        assert test_logger.level == logging.ERROR
        assert len(test_logger.handlers) == 1

    def test_setup_logger_no_duplicate_handlers(self):
        """Test that setup_logger doesn't add duplicate handlers."""
        test_logger1 = setup_logger(name="test-no-duplicates")
        test_logger2 = setup_logger(name="test-no-duplicates")
        assert test_logger1 is test_logger2
        assert len(test_logger1.handlers) == 1

    def test_setup_logger_handler_uses_stdout(self):
        """Test that logger handler uses stdout."""
        test_logger = setup_logger(name="test-stdout")
        assert test_logger.handlers[0].stream is sys.stdout


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger_default_name(self):
        assert get_logger() is logging.getLogger("images-optimizer")

    def test_get_logger_namespaces_components(self):
        assert get_logger("scheduler").name == "images-optimizer.scheduler"

    def test_get_logger_keeps_qualified_names(self):
        assert get_logger("images-optimizer.cli").name == "images-optimizer.cli"

    def test_component_loggers_share_package_handler(self):
        component = get_logger("test-component")
        assert component.handlers == []
        assert component.propagate
        assert component.parent is get_logger()
        assert len(get_logger().handlers) == 1


class TestSetDebug:
    """Tests for set_debug function."""

    def test_set_debug_switches_component_loggers(self):
        component = get_logger("debug-switch")
        try:
            set_debug(True)
            assert component.getEffectiveLevel() == logging.DEBUG
            get_logger("another-component")
            assert get_logger().level == logging.DEBUG
        finally:
            set_debug(False)
        assert component.getEffectiveLevel() == logging.INFO


class TestDefaultLogger:
    """Tests for default logger instance."""

    def test_default_logger_exists(self):
        assert isinstance(logger, logging.Logger)
        assert logger.name == "images-optimizer"

    def test_default_logger_configured(self):
        assert len(logger.handlers) >= 1
        assert not logger.propagate
