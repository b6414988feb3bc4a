from __future__ import annotations

from dataclasses import dataclass, asdict, field
from typing import Any, Iterable, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from suitest.case import Test


@dataclass
class MetricStatistics:
    """Statistics for a series of measurements."""

    avg: float | None
    min: float | None
    max: float | None
    stddev: float | None
    total: float | None = None

    def to_dict(self) -> dict[str, float | None]:
        return asdict(self)


@dataclass
class RunSummary:
    """Outcome counts for the tests executed by one run."""

    tests: int = 0
    passed: int = 0
    failed: int = 0
    failed_checks: int = 0
    elapsed: float = 0.0
    suites: list[str] = field(default_factory=list)
    executed: list[Test] = field(default_factory=list, repr=False)

    @property
    def ok(self) -> bool:
        return self.failed == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "tests": self.tests,
            "passed": self.passed,
            "failed": self.failed,
            "failed_checks": self.failed_checks,
            "elapsed": self.elapsed,
            "suites": list(self.suites),
            "ok": self.ok,
        }


def compute_stats(values: Iterable[float | int | None]) -> MetricStatistics:
    """Compute avg, min, max, stddev and total for a list of numeric values."""
    nums = [v for v in values if v is not None]
    if not nums:
        return MetricStatistics(avg=None, min=None, max=None, stddev=None, total=None)

    arr = np.array(nums, dtype=float)
    return MetricStatistics(
        avg=float(np.mean(arr)),
        min=float(np.min(arr)),
        max=float(np.max(arr)),
        stddev=float(np.std(arr)),
        total=float(np.sum(arr)),
    )


def summarize_tests(tests: Iterable[Test]) -> RunSummary:
    """Count passed/failed tests and failed checks over executed tests."""
    summary = RunSummary()
    for test in tests:
        summary.tests += 1
        summary.executed.append(test)
        if test.result:
            summary.passed += 1
        else:
            summary.failed += 1
        summary.failed_checks += test.faileds
        summary.elapsed += test.time
        if test.suite_name not in summary.suites:
            summary.suites.append(test.suite_name)
    return summary
