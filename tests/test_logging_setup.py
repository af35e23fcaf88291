# tests/test_logging_setup.py

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from taskboard.logging_setup import _ConsoleNoiseFilter, setup_logging


@pytest.fixture()
def restore_root_logging() -> Iterator[None]:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in saved_handlers:
        root.addHandler(h)
    root.setLevel(saved_level)
    logging.captureWarnings(False)


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_console_filter_keeps_own_logs_and_mutes_others() -> None:
    f = _ConsoleNoiseFilter()
    assert f.filter(_record("taskboard.projects.repository", logging.DEBUG))
    assert f.filter(_record("taskboard", logging.INFO))
    assert not f.filter(_record("taskboardish", logging.WARNING))
    assert not f.filter(_record("py.warnings", logging.WARNING))
    assert f.filter(_record("sqlite_helper", logging.ERROR))


def test_setup_logging_writes_debug_file(tmp_path: Path, restore_root_logging: None) -> None:
    log_file = setup_logging(log_dir=tmp_path / "logs", console_level=logging.ERROR)
    assert log_file == tmp_path / "logs" / "taskboard.log"

    logging.getLogger("taskboard.test").debug("hello file")
    for h in logging.getLogger().handlers:
        h.flush()

    assert "hello file" in log_file.read_text(encoding="utf-8")


def test_setup_logging_without_dir_is_console_only(restore_root_logging: None) -> None:
    assert setup_logging(log_dir=None) is None
    handlers = logging.getLogger().handlers
    assert len(handlers) == 1
    assert not isinstance(handlers[0], logging.FileHandler)
