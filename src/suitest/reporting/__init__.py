"""Reporting adapters layered on executed tests."""

from suitest.reporting.junit import build_junit, write_junit

__all__ = ["build_junit", "write_junit"]
