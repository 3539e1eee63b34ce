import logging
import os
import sys
from logging.handlers import RotatingFileHandler

import pytest

project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from utils.logger import (LoggerManager, handle_global_exception,
                          setup_exception_hook)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    excepthook = sys.excepthook
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    sys.excepthook = excepthook


def test_logger_manager_writes_to_rotating_file(tmp_path, restore_root_logger):
    manager = LoggerManager(log_dir=str(tmp_path / "logs"))

    logging.getLogger("core.mover").info("moved the pointer")
    for handler in restore_root_logger.handlers:
        handler.flush()

    assert os.path.dirname(manager.log_file) == str(tmp_path / "logs")
    with open(manager.log_file, encoding='utf-8') as f:
        content = f.read()
    assert "INFO - core.mover - moved the pointer" in content


def test_logger_manager_console_only(tmp_path, restore_root_logger, capsys):
    manager = LoggerManager(log_dir=str(tmp_path / "logs"),
                            level=logging.DEBUG,
                            file_enabled=False)

    logging.getLogger("main").debug("verbose detail")

    assert manager.log_file is None
    assert not (tmp_path / "logs").exists()
    assert restore_root_logger.level == logging.DEBUG
    assert "DEBUG - main - verbose detail" in capsys.readouterr().out


def test_global_exception_hook_logs_critical(restore_root_logger, caplog):
    setup_exception_hook()
    assert sys.excepthook is handle_global_exception

    try:
        raise ValueError("unexpected")
    except ValueError:
        handle_global_exception(*sys.exc_info())

    record = caplog.records[-1]
    assert record.levelno == logging.CRITICAL
    assert record.exc_info[0] is ValueError


def test_unusable_log_dir_falls_back_to_console(tmp_path,
                                                restore_root_logger, capsys):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("regular file")

    manager = LoggerManager(log_dir=str(blocker / "logs"))
    logging.getLogger("main").info("still logging")

    out = capsys.readouterr().out
    assert manager.log_file is None
    assert "WARNING - root - Cannot write log files to" in out
    assert "INFO - main - still logging" in out
    assert not any(
        isinstance(handler, RotatingFileHandler)
        for handler in restore_root_logger.handlers)


def test_relative_log_dir_resolves_against_cwd(tmp_path, restore_root_logger,
                                               monkeypatch):
    monkeypatch.chdir(tmp_path)

    manager = LoggerManager(log_dir="logs")

    expected = os.path.join(os.getcwd(), "logs")
    assert manager.log_dir == expected
    assert os.path.dirname(manager.log_file) == expected
    assert (tmp_path / "logs").is_dir()
