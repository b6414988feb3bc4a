"""Test units and the context object handed to running test functions."""

from __future__ import annotations

import inspect
import time
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Union

from suitest.checks import Check
from suitest.writer import BufferSink, LeveledWriter, Logger, Writer

if TYPE_CHECKING:
    from suitest.session import Session

TestResult = Union[bool, None]
TestFunction = Callable[["Context"], Union[TestResult, Awaitable[TestResult]]]


def _callable_name(fn: Callable[..., Any]) -> str | None:
    name = getattr(fn, "__name__", None)
    if not name or name == "<lambda>":
        return None
    return name


def _discard_awaitable(value: Any) -> bool:
    """Close ``value`` if it is a coroutine. Returns True if it was awaitable."""
    if not inspect.isawaitable(value):
        return False
    if inspect.iscoroutine(value):
        value.close()
    return True


def _reject_awaitable(value: Any, fn: Callable[..., Any], method: str) -> None:
    if not _discard_awaitable(value):
        return
    label = _callable_name(fn) or "callback"
    raise TypeError(
        f"{label} returned an awaitable; use 'await ctx.a{method}(...)' instead"
    )


class Test:
    """One registered test function plus the outcome of running it."""

    __test__ = False  # not a pytest test class

    def __init__(
        self, name: str, suite_name: str, fn: TestFunction, session: Session
    ):
        self.name = name
        self.suite_name = suite_name
        self.fn = fn
        self.checks: list[Check] = []
        self.result = False
        self.faileds = 0
        self.time = 0.0
        self.measure = True
        self.message = ""
        self.output = ""
        self.runned = False
        self.returned_false = False
        self.error: Exception | None = None
        self.context = Context(self, session)

    @property
    def key(self) -> str:
        return f"{self.suite_name}{self.context.session.config.delimiter}{self.name}"

    async def run(self, isolate: bool = False) -> bool:
        """Execute the test function once.

        Returns True when the function was executed, False when the test had
        already run. Exceptions raised by the function propagate unless
        ``isolate`` is set, in which case they are recorded as a failed check.
        """
        if self.runned:
            return False

        returned: Any = None
        start = time.perf_counter()
        try:
            returned = self.fn(self.context)
            if inspect.isawaitable(returned):
                returned = await returned
        except Exception as exc:
            if not isolate:
                raise
            self.error = exc
            returned = None
            self.context.record(
                f"Uncaught {type(exc).__name__}", False, f"failed\n\t{exc}"
            )
        finally:
            self.time = time.perf_counter() - start

        self.returned_false = returned is False
        self.faileds = sum(1 for check in self.checks if not check.result)
        self.result = self.faileds == 0 and not self.returned_false
        self.runned = True
        return True

    def __repr__(self) -> str:
        state = ("passed" if self.result else "failed") if self.runned else "pending"
        return f"<Test {self.suite_name}/{self.name} {state}>"


class Context:
    """Receiver passed to a test function.

    Every assertion method appends exactly one :class:`Check` to the test
    and returns its boolean outcome, so a test can bail out early::

        def add(t):
            if not t.equals(4, 2 + 2):
                return False
            t.info("addition works")
    """

    def __init__(self, test: Test, session: Session):
        self._test = test
        self.session = session
        self._logger = Logger(Writer(BufferSink(test), session.state))

    @property
    def name(self) -> str:
        return self._test.name

    @property
    def suite(self) -> str:
        return self._test.suite_name

    @property
    def message(self) -> str:
        return self._test.message

    @message.setter
    def message(self, value: str | None) -> None:
        self._test.message = value or ""

    @property
    def log(self) -> LeveledWriter:
        return self._logger.log

    @property
    def warn(self) -> LeveledWriter:
        return self._logger.warn

    @property
    def info(self) -> LeveledWriter:
        return self._logger.info

    def record(
        self,
        name: str,
        result: bool,
        failed: str = "",
        passed: str = "",
        time: float | None = None,
    ) -> Check:
        check = Check(
            name=name, result=result, message=passed if result else failed, time=time
        )
        self._test.checks.append(check)
        return check

    def equals(self, expected: Any, received: Any, name: str | None = None) -> bool:
        tools = self.session.tools
        result = bool(tools.equals(expected, received))
        self.record(
            name or "Equality",
            result,
            f"failed\n\tExpected: {tools.stringify(expected)}"
            f"\n\tReceived: {tools.stringify(received)}",
        )
        return result

    def expected_true(self, expr: Any, name: str | None = None) -> bool:
        result = bool(expr)
        self.record(
            name or "Expected true",
            result,
            f"failed\n\tReceived: {self.session.tools.stringify(expr)}",
        )
        return result

    def expected_false(self, expr: Any, name: str | None = None) -> bool:
        result = not expr
        self.record(
            name or "Expected false",
            result,
            f"failed\n\tReceived: {self.session.tools.stringify(expr)}",
        )
        return result

    def partial(
        self, expected: Mapping[str, Any], received: Any, name: str | None = None
    ) -> bool:
        """Compare only the keys present in ``expected``.

        ``received`` may be a mapping or any object exposing the keys as
        attributes. Extra keys in ``received`` are ignored.
        """
        tools = self.session.tools
        failures: list[str] = []
        for key, value in expected.items():
            if isinstance(received, Mapping):
                present = key in received
                actual = received.get(key)
            else:
                present = hasattr(received, key)
                actual = getattr(received, key, None)
            if not present:
                failures.append(f"\n\t'{key}': missing")
            elif not tools.equals(value, actual):
                failures.append(
                    f"\n\t'{key}': expected {tools.stringify(value)},"
                    f" received {tools.stringify(actual)}"
                )
        result = not failures
        self.record(name or "Partial", result, "failed" + "".join(failures))
        return result

    def thrown(
        self,
        fn: Callable[[], Any],
        kind: type[BaseException] | None = None,
        name: str | None = None,
    ) -> bool:
        """Pass iff ``fn()`` raises, and raises exactly ``kind`` when given.

        Never raises itself. An async callback cannot be awaited here, so it
        is closed and recorded as a failed check pointing at ``athrown``.
        """
        try:
            returned = fn()
        except Exception as exc:
            return self._record_thrown(fn, kind, name, exc)
        if _discard_awaitable(returned):
            self.record(
                self._thrown_name(fn, name),
                False,
                "failed\n\tuse 'await ctx.athrown(...)' for async callbacks",
            )
            return False
        return self._record_thrown(fn, kind, name, None)

    async def athrown(
        self,
        fn: Callable[[], Any],
        kind: type[BaseException] | None = None,
        name: str | None = None,
    ) -> bool:
        try:
            returned = fn()
            if inspect.isawaitable(returned):
                await returned
        except Exception as exc:
            return self._record_thrown(fn, kind, name, exc)
        return self._record_thrown(fn, kind, name, None)

    def _record_thrown(
        self,
        fn: Callable[[], Any],
        kind: type[BaseException] | None,
        name: str | None,
        exc: Exception | None,
    ) -> bool:
        result = exc is not None and bool(self.session.tools.error_checker(exc, kind))
        expected = kind.__name__ if kind is not None else "any"
        received = type(exc).__name__ if exc is not None else "none"
        self.record(
            self._thrown_name(fn, name),
            result,
            f"failed\n\tExpected: {expected}\n\tReceived: {received}",
        )
        return result

    @staticmethod
    def _thrown_name(fn: Callable[[], Any], name: str | None) -> str:
        if name is not None:
            return name
        fn_name = _callable_name(fn)
        return f"Error checking for {fn_name}" if fn_name else "Error checking"

    def exec(self, fn: Callable[[], Any], name: str | None = None) -> bool:
        """Run ``fn``, time it, and pass iff it returns a truthy value."""
        start = time.perf_counter()
        returned = fn()
        elapsed = time.perf_counter() - start
        _reject_awaitable(returned, fn, "exec")
        return self._record_exec(fn, name, returned, elapsed)

    async def aexec(self, fn: Callable[[], Any], name: str | None = None) -> bool:
        start = time.perf_counter()
        returned = fn()
        if inspect.isawaitable(returned):
            returned = await returned
        elapsed = time.perf_counter() - start
        return self._record_exec(fn, name, returned, elapsed)

    def _record_exec(
        self, fn: Callable[[], Any], name: str | None, returned: Any, elapsed: float
    ) -> bool:
        result = bool(returned)
        label = name or f"Executed {_callable_name(fn) or 'anonymous'}"
        self.record(label, result, "failed", time=elapsed)
        return result
