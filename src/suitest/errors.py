"""Exception types raised by suitest."""

from __future__ import annotations


class SuitestError(Exception):
    """Base class for every error raised by suitest itself."""


class RegistrationError(SuitestError, ValueError):
    """A test or suite could not be registered or resolved."""


class UnknownSuiteError(RegistrationError):
    """A run selection names a suite that was never created."""

    def __init__(self, suite_name: str):
        super().__init__(f"Suite '{suite_name}' does not exist")
        self.suite_name = suite_name


class SelectionError(SuitestError, ValueError):
    """A selector string could not be parsed."""
