"""Suites, the registry that owns them, and the test-maker surface."""

from __future__ import annotations

import inspect
import logging
import re
import time
from typing import TYPE_CHECKING, Any, Callable, Iterator

from suitest.case import Context, Test, TestFunction
from suitest.errors import RegistrationError, UnknownSuiteError
from suitest.metrics import compute_stats

if TYPE_CHECKING:
    from suitest.session import Session

logger = logging.getLogger("suitest.registry")


class Suite:
    """Named, ordered collection of uniquely named tests.

    Test names are unique case-insensitively; insertion order is the default
    execution order.
    """

    def __init__(self, name: str, session: Session):
        self.name = name
        self.session = session
        self.tests: dict[str, Test] = {}
        self._folded: set[str] = set()

    def make_test(self, name: str, fn: TestFunction) -> Test:
        folded = name.casefold()
        if folded in self._folded:
            raise RegistrationError(
                f"Test '{name}' already exists in suite '{self.name}'"
            )
        test = Test(name, self.name, fn, self.session)
        self.tests[name] = test
        self._folded.add(folded)
        logger.debug(f"Registered test '{name}' in suite '{self.name}'")
        return test

    def select(self, pattern: re.Pattern[str] | str | None = None) -> list[Test]:
        """Tests whose name matches ``pattern`` (``re.search``), in order."""
        if pattern is None:
            return list(self.tests.values())
        rx = re.compile(pattern) if isinstance(pattern, str) else pattern
        return [test for test in self.tests.values() if rx.search(test.name)]

    @property
    def failed(self) -> bool:
        return any(test.runned and not test.result for test in self.tests.values())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.casefold() in self._folded

    def __iter__(self) -> Iterator[Test]:
        return iter(self.tests.values())

    def __len__(self) -> int:
        return len(self.tests)

    def __repr__(self) -> str:
        return f"<Suite {self.name} tests={len(self.tests)}>"


class Registry:
    """Mapping of suite name to :class:`Suite`, created on first reference."""

    def __init__(self, session: Session):
        self.session = session
        self._suites: dict[str, Suite] = {}

    def suite(self, name: str) -> Suite:
        suite = self._suites.get(name)
        if suite is None:
            suite = self._suites[name] = Suite(name, self.session)
            logger.debug(f"Created suite '{name}'")
        return suite

    def get(self, name: str) -> Suite:
        try:
            return self._suites[name]
        except KeyError:
            raise UnknownSuiteError(name) from None

    def names(self) -> list[str]:
        return list(self._suites)

    def __contains__(self, name: object) -> bool:
        return name in self._suites

    def __iter__(self) -> Iterator[Suite]:
        return iter(self._suites.values())

    def __len__(self) -> int:
        return len(self._suites)


class TestMaker:
    """Registers tests into one suite.

    Usable as a plain call or as a decorator::

        test = session.tester("math")
        test("add", lambda t: t.equals(4, 2 + 2))

        @test("sub")
        def sub(t):
            t.equals(0, 2 - 2)
    """

    __test__ = False  # not a pytest test class

    def __init__(self, suite: Suite):
        self.suite = suite

    @property
    def name(self) -> str:
        return self.suite.name

    def __call__(self, name: str, fn: TestFunction | None = None) -> Any:
        if fn is not None:
            return self.suite.make_test(name, fn)

        def decorator(func: TestFunction) -> TestFunction:
            self.suite.make_test(name, func)
            return func

        return decorator

    def measure(
        self,
        name: str,
        iterations: int,
        fn: Callable[..., Any],
        *args: Any,
        **kwargs: Any,
    ) -> Test:
        """Register a benchmark that calls ``fn(*args, **kwargs)`` ``iterations`` times.

        The timing summary replaces the elapsed time in the report.
        """
        if iterations < 1:
            raise RegistrationError(
                f"Benchmark '{name}' in suite '{self.suite.name}' needs at least one iteration"
            )

        async def benchmark(ctx: Context) -> None:
            timings: list[float] = []
            for _ in range(iterations):
                start = time.perf_counter()
                returned = fn(*args, **kwargs)
                if inspect.isawaitable(returned):
                    await returned
                timings.append(time.perf_counter() - start)
            stats = compute_stats(timings)
            fmt = ctx.session.tools.format_duration
            ctx.message = (
                f"{iterations} iterations ({fmt(stats.avg)}/iter, "
                f"±{fmt(stats.stddev)}) in {fmt(stats.total)}"
            )

        test = self.suite.make_test(name, benchmark)
        test.measure = False
        return test
