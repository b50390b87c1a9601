import logging

import pytest
import structlog
from ordering.utils.logging import LoggingSettings, add_context, clear_context, configure_logging


@pytest.fixture()
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()


class TestLoggingSettings:
    def test_level_follows_environment(self, monkeypatch):
        monkeypatch.delenv("ENV", raising=False)
        monkeypatch.delenv("ENVIRONMENT", raising=False)
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.setenv("PROTEAN_ENV", "production")
        settings = LoggingSettings.from_env()
        assert settings.level == "INFO"
        assert settings.json_output is True

    def test_explicit_level_wins(self, monkeypatch):
        monkeypatch.setenv("ENV", "development")
        monkeypatch.setenv("LOG_LEVEL", "error")
        settings = LoggingSettings.from_env()
        assert settings.level == "ERROR"
        assert settings.json_output is False


def test_configure_logging_writes_rotating_files(tmp_path, restore_logging):
    settings = LoggingSettings(environment="production", level="INFO", log_dir=tmp_path / "logs")
    configure_logging(log_file_prefix="checkout", settings=settings)

    root = logging.getLogger()
    assert len(root.handlers) == 3
    assert (tmp_path / "logs" / "checkout.log").exists()
    assert (tmp_path / "logs" / "checkout_error.log").exists()
    assert logging.getLogger("protean").level == logging.WARNING


def test_context_binding():
    add_context(request_id="req-1")
    assert structlog.contextvars.get_contextvars() == {"request_id": "req-1"}
    clear_context()
    assert structlog.contextvars.get_contextvars() == {}
