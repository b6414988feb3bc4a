"""Render the outcome of executed tests through a :class:`Writer`.

What gets shown depends on the session verbosity:

* NONE: failed tests with their failed checks; passing tests only when they
  captured output.
* WARN: every test, with elapsed time (or benchmark message) for passes and
  any captured output.
* INFO: as WARN, plus every check of every test.

A suite header is written only when at least one of its tests is rendered.
"""

from __future__ import annotations

from typing import Iterable

from suitest.case import Test
from suitest.checks import Check
from suitest.metrics import RunSummary, summarize_tests
from suitest.tools import Tools
from suitest.writer import Verbosity, Writer

PASSED = "✅"
FAILED = "❌"

RULE = "-" * 80
OUTPUT_RULE = "." * 40


def glyph(passed: bool) -> str:
    return PASSED if passed else FAILED


class Summarizer:
    def __init__(self, writer: Writer, tools: Tools):
        self.writer = writer
        self.tools = tools

    @property
    def verbosity(self) -> Verbosity:
        return Verbosity(self.writer.state.verbosity)

    def summarize(
        self, tests: Iterable[Test], suite_order: Iterable[str] = ()
    ) -> RunSummary:
        """Write the report for ``tests`` and return their counts.

        Suites are listed in ``suite_order``; suites missing from it follow
        in the order their first test appears.
        """
        tests = list(tests)
        by_suite: dict[str, list[Test]] = {name: [] for name in suite_order}
        for test in tests:
            by_suite.setdefault(test.suite_name, []).append(test)

        self.writer.write(RULE)
        for suite_name, suite_tests in by_suite.items():
            self._suite(suite_name, suite_tests)

        summary = summarize_tests(tests)
        if summary.failed:
            self.writer.write(
                f"Total failed checks: {summary.failed_checks} "
                f"({summary.failed} of {summary.tests} tests failed)"
            )
        else:
            self.writer.write("No failed checks")
        self.writer.write(RULE)
        return summary

    def _suite(self, name: str, tests: list[Test]) -> None:
        rendered = [test for test in tests if self._renders(test)]
        if not rendered:
            return
        passed = all(test.result for test in tests)
        self.writer.group(f"{glyph(passed)} Suite {name}:")
        for test in rendered:
            self._test(test)
        self.writer.ungroup()

    def _renders(self, test: Test) -> bool:
        if not test.result or self.verbosity >= Verbosity.WARN:
            return True
        return bool(test.output)

    def _test(self, test: Test) -> None:
        title = f"{glyph(test.result)} Test {test.name}"
        if not test.result:
            self._failed_test(title, test)
            return

        if self.verbosity >= Verbosity.WARN:
            title += self._details(test)
        self.writer.group(title)
        self._output(test)
        if self.verbosity >= Verbosity.INFO:
            for check in test.checks:
                self._check(check)
        self.writer.ungroup()

    def _failed_test(self, title: str, test: Test) -> None:
        self.writer.group(title)
        self._output(test)
        show_passed = self.verbosity >= Verbosity.INFO
        for check in test.checks:
            if show_passed or not check.result:
                self._check(check)
        self.writer.write(f"Total checks failed: {test.faileds}")
        if test.returned_false:
            self.writer.write("Test returned false.")
        self.writer.ungroup()

    def _details(self, test: Test) -> str:
        details = []
        if test.message:
            details.append(test.message)
        if test.measure:
            details.append(f"in {self.tools.format_duration(test.time)}")
        return f" ({', '.join(details)})" if details else ""

    def _check(self, check: Check) -> None:
        line = f"{glyph(check.result)} {check.name}"
        if check.message:
            line += f" {check.message}"
        if check.time is not None:
            line += f" (in {self.tools.format_duration(check.time)})"
        self.writer.write(line)

    def _output(self, test: Test) -> None:
        if not test.output:
            return
        self.writer.group()
        self.writer.write(OUTPUT_RULE)
        self.writer.write(test.output.rstrip("\n"))
        self.writer.write(OUTPUT_RULE)
        self.writer.ungroup()
