"""Tests for unified logging configuration."""

import logging
import os
from unittest.mock import patch

from lumalink.logging_config import (
    configure_logging,
    get_log_level,
    get_logging_config,
    get_uvicorn_log_config,
)


def test_get_log_level_default():
    """Test that get_log_level returns INFO by default."""
    with patch.dict(os.environ, {}, clear=True):
        assert get_log_level() == "INFO"


def test_get_log_level_from_env():
    """Test that get_log_level reads and upper-cases the environment variable."""
    with patch.dict(os.environ, {"LUMALINK_LOG_LEVEL": "debug"}):
        assert get_log_level() == "DEBUG"


def test_get_log_level_empty_env():
    """Test that get_log_level handles empty environment variable."""
    with patch.dict(os.environ, {"LUMALINK_LOG_LEVEL": ""}):
        assert get_log_level() == "INFO"


def test_get_logging_config_structure():
    """Test that get_logging_config returns a valid logging dict."""
    config = get_logging_config()

    assert config["version"] == 1
    assert set(config["formatters"]) == {"default", "access"}
    assert set(config["handlers"]) == {"default", "access"}
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access", "lumalink"):
        assert name in config["loggers"]
    assert "root" in config


def test_get_logging_config_respects_env_level():
    """Test that logging config respects LUMALINK_LOG_LEVEL."""
    with patch.dict(os.environ, {"LUMALINK_LOG_LEVEL": "DEBUG"}):
        config = get_logging_config()
        assert config["loggers"]["lumalink"]["level"] == "DEBUG"
        assert config["loggers"]["uvicorn"]["level"] == "DEBUG"


def test_access_log_quiet_unless_verbose():
    """Access logs stay at WARNING unless verbose logging is enabled."""
    with patch.dict(os.environ, {"LUMALINK_LOG_LEVEL": "INFO"}, clear=True):
        assert get_logging_config()["loggers"]["uvicorn.access"]["level"] == "WARNING"
    with patch.dict(os.environ, {"LUMALINK_LOG_LEVEL": "INFO", "LUMALINK_VERBOSE_LOGGING": "1"}):
        assert get_logging_config()["loggers"]["uvicorn.access"]["level"] == "INFO"


def test_get_uvicorn_log_config_matches_main_config():
    """Test that uvicorn config matches main logging config."""
    assert get_logging_config() == get_uvicorn_log_config()


def test_configure_logging_sets_up_handlers():
    """Test that configure_logging sets up logging handlers."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    with patch.dict(os.environ, {}, clear=True):
        configure_logging()

    assert len(logging.getLogger().handlers) > 0
    assert logging.getLogger("lumalink").level == logging.INFO
    assert logging.getLogger("lumalink").propagate is False


def test_logging_format_includes_timestamp():
    """Test that log format includes timestamp and date format."""
    default_formatter = get_logging_config()["formatters"]["default"]

    assert "%(asctime)s" in default_formatter["format"]
    assert "%(levelname)" in default_formatter["format"]
    assert "%(name)s" in default_formatter["format"]
    assert default_formatter["datefmt"] == "%Y-%m-%d %H:%M:%S"


def test_transport_log_level_defaults_to_main_level():
    """Transport loggers follow LUMALINK_LOG_LEVEL unless overridden."""
    with patch.dict(os.environ, {"LUMALINK_LOG_LEVEL": "WARNING"}, clear=True):
        config = get_logging_config()
    assert config["loggers"]["lumalink.transports"]["level"] == "WARNING"
    assert "handlers" not in config["loggers"]["lumalink.transports"]


def test_transport_log_level_override():
    """Retry chatter can be opened up without raising the global level."""
    env = {"LUMALINK_LOG_LEVEL": "WARNING", "LUMALINK_TRANSPORT_LOG_LEVEL": "debug"}
    with patch.dict(os.environ, env, clear=True):
        config = get_logging_config()
        configure_logging()
    assert config["loggers"]["lumalink.transports"]["level"] == "DEBUG"
    assert config["loggers"]["lumalink"]["level"] == "WARNING"
    assert logging.getLogger("lumalink.transports.local").getEffectiveLevel() == logging.DEBUG
