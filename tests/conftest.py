"""Pytest configuration and fixtures."""

import io
import logging

import pytest

from suitest.config import SessionConfig
from suitest.session import Session, activate


@pytest.fixture(autouse=True)
def cleanup_loggers():
    """Reset suitest loggers after each test so handlers do not leak."""
    yield

    loggers_to_reset = [
        name
        for name in logging.Logger.manager.loggerDict.keys()
        if name.startswith("suitest")
    ]

    for name in loggers_to_reset:
        logger = logging.getLogger(name)
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()


@pytest.fixture
def out():
    return io.StringIO()


@pytest.fixture
def err():
    return io.StringIO()


@pytest.fixture
def make_session(out, err):
    """Build a session writing its report to the ``out``/``err`` buffers."""

    def _make(**settings) -> Session:
        return Session(config=SessionConfig(**settings), stdout=out, stderr=err)

    return _make


@pytest.fixture
def session(make_session):
    """Fresh session at INFO verbosity, also made the active session."""
    s = make_session(verbosity=2)
    with activate(s):
        yield s
