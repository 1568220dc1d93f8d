import logging
import sys

from yieldmaster.config import LOG_FORMAT, LOG_LEVEL
from yieldmaster.logger import configure_logging, get_logger


def test_get_logger_returns_named_logger():
    logger = get_logger("yieldmaster.test")
    assert isinstance(logger, logging.Logger)
    assert logger.name == "yieldmaster.test"


def test_configure_logging_uses_stdout_handler(monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    configure_logging()
    configure_logging("DEBUG")

    assert calls[0]["level"] == LOG_LEVEL
    assert calls[1]["level"] == "DEBUG"
    assert calls[0]["format"] == LOG_FORMAT
    handler = calls[0]["handlers"][0]
    assert isinstance(handler, logging.StreamHandler)
    assert handler.stream is sys.stdout
