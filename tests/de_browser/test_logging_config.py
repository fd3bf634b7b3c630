import logging

import pytest
from pythonjsonlogger import jsonlogger

from de_browser.logging_config import configure_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_json_is_default(monkeypatch):
    monkeypatch.delenv("DE_BROWSER_LOG_FORMAT", raising=False)
    monkeypatch.delenv("DE_BROWSER_LOG_LEVEL", raising=False)

    configure_logging()

    root = logging.getLogger()
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, jsonlogger.JsonFormatter)
    assert root.level == logging.INFO


def test_env_selects_plain_format_and_level(monkeypatch):
    monkeypatch.setenv("DE_BROWSER_LOG_FORMAT", "plain")
    monkeypatch.setenv("DE_BROWSER_LOG_LEVEL", "debug")

    configure_logging()

    root = logging.getLogger()
    assert not isinstance(root.handlers[0].formatter, jsonlogger.JsonFormatter)
    assert root.level == logging.DEBUG


def test_unknown_level_name_keeps_argument(monkeypatch):
    monkeypatch.setenv("DE_BROWSER_LOG_LEVEL", "chatty")

    configure_logging(level=logging.WARNING, force_format="json")

    assert logging.getLogger().level == logging.WARNING
