import json
import logging
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from local_browsers.logging_config import JSONFormatter, StructuredLogger, get_logger, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestJSONFormatter:
    def test_fields(self):
        record = logging.LogRecord("local_browsers.test", logging.INFO, __file__, 1, "found %d", (2,), None)
        record.extra_fields = {"browsers": ["chrome", "firefox"]}
        data = json.loads(JSONFormatter().format(record))
        assert data["level"] == "info"
        assert data["logger"] == "local_browsers.test"
        assert data["msg"] == "found 2"
        assert data["browsers"] == ["chrome", "firefox"]
        assert data["ts"].endswith("Z")

    def test_exception(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())
        data = json.loads(JSONFormatter().format(record))
        assert "ValueError: boom" in data["exception"]


class TestSetupLogging:
    def test_get_logger_is_structured(self):
        assert isinstance(get_logger("local_browsers.test_structured"), StructuredLogger)

    def test_level_and_json(self, restore_root_logger):
        root = setup_logging(level="debug", json_format=True)
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)

    def test_environment(self, restore_root_logger, monkeypatch, tmp_path):
        log_file = tmp_path / "browsers.log"
        monkeypatch.setenv("LOCAL_BROWSERS_LOG_LEVEL", "INFO")
        monkeypatch.setenv("LOCAL_BROWSERS_LOG_JSON", "1")
        monkeypatch.setenv("LOCAL_BROWSERS_LOG_FILE", str(log_file))
        root = setup_logging()
        assert root.level == logging.INFO
        assert len(root.handlers) == 2

        get_logger("local_browsers.test_env").info_with("detected", browsers=["chrome"])
        for handler in root.handlers:
            handler.flush()
        line = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert line["msg"] == "detected"
        assert line["browsers"] == ["chrome"]

    def test_defaults_to_warning(self, restore_root_logger, monkeypatch):
        monkeypatch.delenv("LOCAL_BROWSERS_LOG_LEVEL", raising=False)
        root = setup_logging(json_format=False)
        assert root.level == logging.WARNING
        assert logging.getLogger("selenium").level == logging.WARNING
