"""Register tests into named suites, run them, and report their checks."""

from suitest.case import Context, Test
from suitest.checks import Check
from suitest.config import SessionConfig, load_config
from suitest.errors import (
    RegistrationError,
    SelectionError,
    SuitestError,
    UnknownSuiteError,
)
from suitest.metrics import RunSummary
from suitest.runner import Runner, Selection, parse_selector
from suitest.session import (
    Session,
    activate,
    configure,
    get_session,
    run,
    run_sync,
    tester,
)
from suitest.suite import Registry, Suite, TestMaker
from suitest.summary import FAILED, PASSED, Summarizer
from suitest.tools import Tools
from suitest.writer import Verbosity

VERBOSITY_NONE = Verbosity.NONE
VERBOSITY_WARN = Verbosity.WARN
VERBOSITY_INFO = Verbosity.INFO

__all__ = [
    "Check",
    "Context",
    "FAILED",
    "PASSED",
    "RegistrationError",
    "Registry",
    "RunSummary",
    "Runner",
    "SelectionError",
    "Selection",
    "Session",
    "SessionConfig",
    "Suite",
    "SuitestError",
    "Summarizer",
    "Test",
    "TestMaker",
    "Tools",
    "UnknownSuiteError",
    "VERBOSITY_INFO",
    "VERBOSITY_NONE",
    "VERBOSITY_WARN",
    "Verbosity",
    "activate",
    "configure",
    "get_session",
    "load_config",
    "parse_selector",
    "run",
    "run_sync",
    "tester",
]
