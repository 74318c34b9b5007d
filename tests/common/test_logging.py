import logging
import pytest
from wattzup.common.logging import log_execution_time, setup_logger

def test_setup_logger_is_idempotent():
    logger = setup_logger("wattzup.test.idempotent", level="DEBUG")
    again = setup_logger("wattzup.test.idempotent")
    assert logger is again
    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG

def test_setup_logger_reads_environment(monkeypatch):
    monkeypatch.setenv("WATTZUP_LOG_LEVEL", "warning")
    logger = setup_logger("wattzup.test.env")
    assert logger.level == logging.WARNING

def test_log_execution_time_passes_through():
    logger = setup_logger("wattzup.test.timing")

    @log_execution_time(logger)
    def read(x):
        return x * 2

    assert read(21) == 42
    assert read.__name__ == "read"

def test_log_execution_time_reraises(caplog):
    logger = setup_logger("wattzup.test.failure")

    @log_execution_time(logger)
    def read():
        raise RuntimeError("db down")

    with caplog.at_level(logging.ERROR, logger="wattzup.test.failure"):
        with pytest.raises(RuntimeError):
            read()
    assert "db down" in caplog.text
