"""Tests for debug logging setup."""

import logging
from pathlib import Path

from suitest.verbose import setup_logger


def test_logger_writes_to_debug_file(tmp_path: Path):
    debug_file = tmp_path / "debug.log"
    logger = setup_logger(debug_file=debug_file, verbose=False)

    logger.debug("test message")

    content = debug_file.read_text()
    assert "test message" in content
    assert "[" in content  # timestamp


def test_logger_is_debug_level(tmp_path: Path):
    logger = setup_logger(debug_file=tmp_path / "debug.log")
    assert not logger.disabled
    assert logger.level == logging.DEBUG


def test_verbose_mode_adds_stderr_handler(tmp_path: Path):
    logger = setup_logger(debug_file=tmp_path / "debug.log", verbose=True)

    handler_types = [type(h).__name__ for h in logger.handlers]
    assert len(handler_types) == 2
    assert "StreamHandler" in handler_types
    assert "FileHandler" in handler_types


def test_no_destination_uses_null_handler():
    logger = setup_logger()
    assert [type(h).__name__ for h in logger.handlers] == ["NullHandler"]


def test_logger_creates_parent_directories(tmp_path: Path):
    debug_file = tmp_path / "nested" / "dir" / "debug.log"
    setup_logger(debug_file=debug_file)
    assert debug_file.parent.exists()


def test_repeated_setup_replaces_handlers(tmp_path: Path):
    setup_logger(debug_file=tmp_path / "a.log", verbose=True)
    logger = setup_logger(debug_file=tmp_path / "b.log", verbose=False)
    assert len(logger.handlers) == 1


def test_child_loggers_reach_debug_file(tmp_path: Path):
    debug_file = tmp_path / "debug.log"
    setup_logger(debug_file=debug_file)

    logging.getLogger("suitest.runner").debug("from runner")

    assert "from runner" in debug_file.read_text()
