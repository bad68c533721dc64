"""
Unit Tests for Centralized Logging.

Tests the logging configuration, structured fields, source handling,
and webhook URL masking.
"""

import logging
from unittest.mock import MagicMock, patch

import pytest

from gumboard.backend.core import logging as logging_module
from gumboard.backend.core.logging import (
    VALID_SOURCES,
    get_logger,
    log_with_source,
    mask_webhook_url,
    mask_webhook_urls,
    setup_logging,
)


@pytest.fixture
def mock_logging_config():
    """Logging configuration shaped like logging.yaml."""
    return {
        "level": "INFO",
        "format": "json",
        "handlers": {
            "console": {"enabled": True},
            "file": {
                "enabled": True,
                "path": "logs/system.jsonl",
                "max_bytes": 10485760,
                "backup_count": 5,
            },
        },
    }


@pytest.fixture
def reset_logging_cache():
    logging_module._logging_config = None
    yield
    logging_module._logging_config = None


class TestValidSources:
    def test_contains_delivery_sources(self):
        assert {"web", "cli", "client", "tasks", "notifications"} <= VALID_SOURCES

    def test_is_frozenset(self):
        assert isinstance(VALID_SOURCES, frozenset)


class TestLoggingConfigLoading:
    """Tests for logging configuration loading from YAML."""

    def test_reads_yaml_file(self, reset_logging_cache, mock_logging_config):
        with patch(
            "gumboard.backend.core.logging.load_yaml_config",
            return_value=mock_logging_config,
        ) as mock_load:
            config = logging_module._get_logging_config()

        mock_load.assert_called_once_with("logging.yaml")
        assert config["handlers"]["file"]["path"] == "logs/system.jsonl"

    def test_config_is_cached(self, reset_logging_cache):
        with patch(
            "gumboard.backend.core.logging.load_yaml_config",
            return_value={"level": "INFO"},
        ) as mock_load:
            first = logging_module._get_logging_config()
            second = logging_module._get_logging_config()

        assert first is second
        assert mock_load.call_count == 1

    def test_raises_if_file_missing(self, reset_logging_cache):
        with patch(
            "gumboard.backend.core.logging.load_yaml_config",
            side_effect=FileNotFoundError("Configuration file not found: logging.yaml"),
        ):
            with pytest.raises(FileNotFoundError, match="logging.yaml"):
                logging_module._get_logging_config()


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_override_level_takes_precedence(self, mock_logging_config):
        with patch("gumboard.backend.core.logging._get_logging_config", return_value=mock_logging_config):
            setup_logging(level="DEBUG", enable_file_logging=False)

        assert logging.getLogger().level == logging.DEBUG

    def test_uses_config_defaults(self, mock_logging_config):
        with patch("gumboard.backend.core.logging._get_logging_config", return_value=mock_logging_config):
            setup_logging(enable_file_logging=False)

        assert logging.getLogger().level == logging.INFO

    def test_console_only(self, mock_logging_config):
        with patch("gumboard.backend.core.logging._get_logging_config", return_value=mock_logging_config):
            setup_logging(format_type="console", enable_file_logging=False)

        handler_types = [type(h).__name__ for h in logging.getLogger().handlers]
        assert handler_types == ["StreamHandler"]

    def test_file_logging_adds_rotating_handler(self, tmp_path, mock_logging_config):
        log_file = tmp_path / "logs" / "system.jsonl"

        with patch("gumboard.backend.core.logging._get_logging_config", return_value=mock_logging_config), \
             patch("gumboard.backend.core.logging._resolve_log_path", return_value=log_file):
            setup_logging(level="INFO", format_type="json", enable_file_logging=True)

        handler_types = [type(h).__name__ for h in logging.getLogger().handlers]
        assert "RotatingFileHandler" in handler_types
        assert log_file.parent.is_dir()

    def test_resolve_log_path_relative_to_project_root(self, tmp_path):
        with patch("gumboard.backend.core.logging.find_project_root", return_value=tmp_path):
            result = logging_module._resolve_log_path("logs/system.jsonl")

        assert result == tmp_path / "logs" / "system.jsonl"


class TestLogWithSource:
    """Tests for log_with_source helper function."""

    def test_adds_source_field(self):
        logger = get_logger("test")
        mock_info = MagicMock()

        with patch.object(logger, "info", mock_info):
            log_with_source(logger, "notifications", "info", "Delivered", provider="slack")

        mock_info.assert_called_once_with("Delivered", source="notifications", provider="slack")

    @pytest.mark.parametrize("level", ["debug", "info", "warning", "error", "critical"])
    def test_supports_levels(self, level):
        logger = get_logger("test")
        mock_method = MagicMock()

        with patch.object(logger, level, mock_method):
            log_with_source(logger, "tasks", level, f"Test {level}")

        mock_method.assert_called_once()

    def test_raises_on_invalid_level(self):
        with pytest.raises(AttributeError):
            log_with_source(get_logger("test"), "web", "nonexistent_level", "Test")


class TestMaskWebhookUrls:
    """Webhook URLs carry their secret token in the path."""

    @pytest.mark.parametrize(
        "url,expected",
        [
            (
                "https://hooks.slack.com/services/T000/B000/XXXX",
                "https://hooks.slack.com/services/***",
            ),
            (
                "https://discord.com/api/webhooks/123/abc-token",
                "https://discord.com/api/webhooks/***",
            ),
            (
                "https://discordapp.com/api/webhooks/123/abc-token",
                "https://discordapp.com/api/webhooks/***",
            ),
        ],
    )
    def test_masks_known_webhook_hosts(self, url, expected):
        assert mask_webhook_url(url) == expected

    def test_masks_url_inside_error_message(self):
        message = "Client error '404 Not Found' for url 'https://hooks.slack.com/services/T/B/secret'"
        masked = mask_webhook_url(message)
        assert "secret" not in masked
        assert masked.startswith("Client error '404 Not Found' for url 'https://hooks.slack.com/services/***")

    def test_leaves_other_urls_alone(self):
        url = "https://example.com/api/v1/boards"
        assert mask_webhook_url(url) == url

    def test_processor_masks_top_level_and_extra_fields(self):
        event_dict = {
            "event": "Webhook delivery failed",
            "error": "ConnectError for https://discord.com/api/webhooks/1/tok",
            "extra": {"url": "https://hooks.slack.com/services/T/B/tok", "attempt": 1},
        }

        result = mask_webhook_urls(None, "error", event_dict)

        assert "tok" not in result["error"]
        assert result["extra"]["url"] == "https://hooks.slack.com/services/***"
        assert result["extra"]["attempt"] == 1
        assert result["event"] == "Webhook delivery failed"
