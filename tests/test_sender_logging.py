import logging

import pytest

import config
import sender_logging


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    sender_logging.configure(config.LOGGING)


def test_project_loggers_follow_configured_level():
    level = sender_logging.configure(config.LoggingSettings(level="debug"))
    assert level == logging.DEBUG
    for name in sender_logging.PROJECT_LOGGERS:
        assert logging.getLogger(name).level == logging.DEBUG


def test_third_party_loggers_stay_quiet():
    sender_logging.configure(config.LoggingSettings(level="DEBUG"))
    for name in sender_logging.THIRD_PARTY_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING

    sender_logging.configure(config.LoggingSettings(level="ERROR"))
    assert logging.getLogger("terra_classic_sdk").level == logging.ERROR


def test_single_console_handler_uses_settings_format():
    settings = config.LoggingSettings(level="INFO", format="%(levelname)s|%(message)s", datefmt="%H:%M")
    sender_logging.configure(settings)
    sender_logging.configure(settings)

    handlers = logging.getLogger().handlers
    assert len(handlers) == 1
    assert handlers[0].formatter._fmt == "%(levelname)s|%(message)s"
    assert handlers[0].formatter.datefmt == "%H:%M"
    assert logging.getLogger().level == logging.WARNING


def test_unknown_level_falls_back_to_info():
    assert sender_logging.configure(config.LoggingSettings(level="chatty")) == logging.INFO
    assert logging.getLogger("orchestrator").level == logging.INFO
