"""
Tests for API configuration and logging setup.
"""

import logging

import pytest
import structlog
from pydantic import ValidationError

from api.config import APIConfig
from utilities.logger import build_processors, setup_logging


class TestAPIConfig:
    """Test cases for APIConfig settings."""

    def test_defaults(self, monkeypatch):
        for name in ("PORT", "MONGODB_URL", "MONGODB_DATABASE", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        settings = APIConfig(_env_file=None)

        assert settings.port == 4000
        assert settings.mongodb_url == "mongodb://localhost:27017"
        assert settings.mongodb_collection == "booksdatas"
        assert settings.get_server_url() == "http://localhost:4000"

    def test_port_from_environment(self, monkeypatch):
        monkeypatch.setenv("PORT", "5050")

        settings = APIConfig(_env_file=None)

        assert settings.port == 5050
        assert settings.get_server_url() == "http://localhost:5050"

    def test_invalid_port(self):
        with pytest.raises(ValidationError):
            APIConfig(_env_file=None, port=70000)

    def test_log_level_normalized(self):
        assert APIConfig(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            APIConfig(_env_file=None, log_level="verbose")

    def test_invalid_log_format(self):
        with pytest.raises(ValidationError):
            APIConfig(_env_file=None, log_format="xml")


class TestLogging:
    """Test cases for structlog setup."""

    def test_json_renderer(self):
        assert isinstance(build_processors("json")[-1], structlog.processors.JSONRenderer)

    def test_console_renderer(self):
        assert isinstance(build_processors("console")[-1], structlog.dev.ConsoleRenderer)

    def test_setup_logging_with_file(self, tmp_path):
        log_file = tmp_path / "logs" / "api.log"
        root_logger = logging.getLogger()
        handlers_before = list(root_logger.handlers)

        try:
            setup_logging(log_level="INFO", log_format="json", log_file=str(log_file))

            assert log_file.parent.exists()
            assert any(
                isinstance(h, logging.FileHandler) and h.baseFilename == str(log_file)
                for h in root_logger.handlers
            )
        finally:
            for handler in list(root_logger.handlers):
                if handler not in handlers_before:
                    root_logger.removeHandler(handler)
                    handler.close()
            structlog.reset_defaults()

    def test_setup_logging_twice_keeps_one_file_handler(self, tmp_path):
        log_file = tmp_path / "api.log"
        root_logger = logging.getLogger()
        handlers_before = list(root_logger.handlers)

        try:
            setup_logging(log_file=str(log_file))
            setup_logging(log_file=str(log_file))

            file_handlers = [
                h for h in root_logger.handlers
                if isinstance(h, logging.FileHandler) and h.baseFilename == str(log_file)
            ]
            assert len(file_handlers) == 1
        finally:
            for handler in list(root_logger.handlers):
                if handler not in handlers_before:
                    root_logger.removeHandler(handler)
                    handler.close()
            structlog.reset_defaults()
