# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

from projboard.logging_setup import LOG_FILE_NAME, _ConsoleNoiseFilter, level_from_name, setup_logging


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_console_filter_keeps_own_logs_and_drops_library_noise() -> None:
    f = _ConsoleNoiseFilter()
    assert f.filter(_record("projboard.core.cache", logging.DEBUG)) is True
    assert f.filter(_record("httpx", logging.INFO)) is False
    assert f.filter(_record("httpcore.http11", logging.ERROR)) is True
    assert f.filter(_record("py.warnings", logging.WARNING)) is False


def test_level_from_name() -> None:
    assert level_from_name("debug") == logging.DEBUG
    assert level_from_name("WARNING") == logging.WARNING
    assert level_from_name("chatty") == logging.INFO
    assert level_from_name(None) == logging.INFO


def test_setup_logging_writes_file(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved = list(root.handlers), root.level
    try:
        path = setup_logging(log_dir=tmp_path / "logs")
        logging.getLogger("projboard.test").info("hello file")
        for h in root.handlers:
            h.flush()

        assert path == tmp_path / "logs" / LOG_FILE_NAME
        assert "hello file" in path.read_text(encoding="utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved[0]:
            root.addHandler(h)
        root.setLevel(saved[1])
        logging.captureWarnings(False)
