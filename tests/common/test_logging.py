"""Tests for logging setup."""

import json
import logging
import sys
import pytest

from nestzip.common import setup_logging
from nestzip.common.logging import StructuredFormatter


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestSetupLogging:
    """Test console handler configuration."""
    
    def test_info_to_stdout_errors_to_stderr(self, capsys):
        setup_logging(level="INFO", format="simple")
        logger = logging.getLogger("nestzip.test")
        
        logger.info("progress message")
        logger.error("failure message")
        
        captured = capsys.readouterr()
        assert "progress message" in captured.out
        assert "failure message" not in captured.out
        assert "ERROR" in captured.err
        assert "failure message" in captured.err
    
    def test_level_filters_debug(self, capsys):
        setup_logging(level="INFO")
        logging.getLogger("nestzip.test").debug("hidden")
        
        assert "hidden" not in capsys.readouterr().out
    
    def test_json_console_format(self, capsys):
        setup_logging(level="INFO", format="json")
        logging.getLogger("nestzip.test").info("structured")
        
        record = json.loads(capsys.readouterr().out.strip())
        assert record["message"] == "structured"
        assert record["level"] == "INFO"
        assert record["logger"] == "nestzip.test"
    
    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "logs" / "nestzip.log"
        setup_logging(level="INFO", log_file=log_file)
        logging.getLogger("nestzip.test").warning("to file")
        
        for handler in logging.getLogger().handlers:
            handler.flush()
        
        record = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert record["message"] == "to file"


class TestStructuredFormatter:
    """Test JSON formatting."""
    
    def test_exception_info(self):
        logger = logging.getLogger("nestzip.test")
        try:
            raise ValueError("bad value")
        except ValueError:
            record = logger.makeRecord(
                "nestzip.test", logging.ERROR, __file__, 1, "failed", None,
                exc_info=sys.exc_info()
            )
        
        data = json.loads(StructuredFormatter().format(record))
        assert data["exception"]["type"] == "ValueError"
        assert data["exception"]["message"] == "bad value"
    
    def test_fixed_fields(self):
        record = logging.getLogger("nestzip.test").makeRecord(
            "nestzip.test", logging.INFO, __file__, 1, "plain", None, None
        )
        
        data = json.loads(StructuredFormatter().format(record))
        assert set(data) == {
            "timestamp", "level", "logger", "message", "module", "function", "line"
        }
