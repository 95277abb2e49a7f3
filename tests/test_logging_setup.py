# tests/test_logging_setup.py

from __future__ import annotations

import logging

import pytest

from taskdeck.logging_setup import _ConsoleNoiseFilter, resolve_level, setup_logging


@pytest.fixture()
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    quiet = {name: logging.getLogger(name).level for name in ("httpx", "httpcore")}
    yield
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)
    for name, lvl in quiet.items():
        logging.getLogger(name).setLevel(lvl)
    logging.captureWarnings(False)


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_console_filter_passes_own_package_and_errors_only_from_others() -> None:
    f = _ConsoleNoiseFilter()

    assert f.filter(_record("taskdeck.tasks.task_controller", logging.DEBUG))
    assert not f.filter(_record("httpx", logging.INFO))
    assert not f.filter(_record("py.warnings", logging.WARNING))
    assert f.filter(_record("asyncio", logging.ERROR))
    assert not f.filter(_record("taskdeckish", logging.INFO))


def test_resolve_level_accepts_names_and_numbers() -> None:
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level(" WARNING ") == logging.WARNING
    assert resolve_level(logging.ERROR) == logging.ERROR
    assert resolve_level("chatty") == logging.INFO


def test_setup_logging_writes_file_and_quiets_http_clients(tmp_path, restore_logging) -> None:
    log_file = setup_logging(log_dir=tmp_path / "logs", console_level="warning")

    logging.getLogger("taskdeck.test").debug("hello file")
    for h in logging.getLogger().handlers:
        h.flush()

    assert log_file == tmp_path / "logs" / "taskdeck.log"
    assert "hello file" in log_file.read_text(encoding="utf-8")
    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("httpcore").level == logging.WARNING

    console = [h for h in logging.getLogger().handlers if not isinstance(h, logging.FileHandler)]
    assert [h.level for h in console] == [logging.WARNING]
