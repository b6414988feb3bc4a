from __future__ import annotations

from pathlib import Path
from typing import Iterable

from junitparser import Failure, JUnitXml, TestCase, TestSuite

from suitest.case import Test


def _failure_message(test: Test) -> str:
    lines = [
        f"{check.name}: {check.message}" if check.message else check.name
        for check in test.checks
        if not check.result
    ]
    if test.returned_false:
        lines.append("Test returned false")
    return "\n".join(lines) or "failed"


def build_junit(tests: Iterable[Test]) -> JUnitXml:
    """One TestSuite per suite, one TestCase per executed test."""
    xml = JUnitXml()
    suites: dict[str, TestSuite] = {}
    elapsed: dict[str, float] = {}

    for test in tests:
        if not test.runned:
            continue
        suite = suites.get(test.suite_name)
        if suite is None:
            suite = suites[test.suite_name] = TestSuite(test.suite_name)
            elapsed[test.suite_name] = 0.0

        case = TestCase(test.name)
        case.classname = test.suite_name
        case.time = round(test.time, 6)
        if not test.result:
            failure = Failure(_failure_message(test))
            failure.type = type(test.error).__name__ if test.error else "CheckFailure"
            case.result = [failure]
        if test.output:
            case.system_out = test.output
        suite.add_testcase(case)
        elapsed[test.suite_name] += test.time

    for name, suite in suites.items():
        # Set time after add_testcase (add_testcase resets it via update_statistics)
        suite.time = round(elapsed[name], 6)
        xml.append(suite)
    return xml


def write_junit(path: Path, tests: Iterable[Test]) -> Path:
    """Write junit.xml for the executed tests, return its path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    xml = build_junit(tests)
    xml.write(str(path), pretty=True)
    return path
