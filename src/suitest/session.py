"""The session owns every piece of run state: suites, writer state and tools.

Most code uses the module-level helpers, which act on the *active* session::

    import suitest

    test = suitest.tester("math")
    test("add", lambda t: t.equals(4, 2 + 2))
    suitest.run_sync()

``activate`` swaps the active session, which keeps registrations made by
imported modules apart from each other.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from contextlib import contextmanager
from functools import partial
from typing import Any, Callable, Iterator, TextIO

from suitest.config import SessionConfig
from suitest.metrics import RunSummary
from suitest.runner import Runner, Selector
from suitest.suite import Registry, Suite, TestMaker
from suitest.tools import Tools
from suitest.tools import format_duration as default_format_duration
from suitest.tools import stringify as default_stringify
from suitest.writer import Logger, StreamSink, Verbosity, Writer, WriterState


class Session:
    def __init__(
        self,
        config: SessionConfig | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
        tools: Tools | None = None,
        logger: logging.Logger | None = None,
    ):
        self.config = config or SessionConfig()
        self.state = WriterState(
            verbosity=self.config.verbosity, tab_length=self.config.tab_length
        )
        self.tools = tools or Tools.create(
            inspect_depth=self.config.inspect_depth,
            time_digits=self.config.time_digits,
        )
        self.registry = Registry(self)
        self.logger = logger or logging.getLogger("suitest.session")
        self._stdout = stdout or sys.stdout
        self._stderr = stderr or sys.stderr
        self.writer = Writer(StreamSink(self._stdout, self._stderr), self.state)
        self.out = Logger(self.writer)

    @property
    def verbosity(self) -> Verbosity:
        return self.config.verbosity

    @verbosity.setter
    def verbosity(self, level: int) -> None:
        self.configure(verbosity=level)

    @property
    def stdout(self) -> TextIO:
        return self._stdout

    @property
    def stderr(self) -> TextIO:
        return self._stderr

    @property
    def suites(self) -> list[Suite]:
        return list(self.registry)

    def tester(self, name: str) -> TestMaker:
        """Return the test maker of suite ``name``, creating the suite if needed."""
        return TestMaker(self.registry.suite(name))

    def configure(
        self,
        *,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
        equals: Callable[[Any, Any], bool] | None = None,
        stringify: Callable[[Any], str] | None = None,
        format_duration: Callable[[float], str] | None = None,
        error_checker: Callable[[BaseException, Any], bool] | None = None,
        **settings: Any,
    ) -> SessionConfig:
        """Change settings before a run. Changing them during a run is unsupported.

        Keyword arguments other than the sinks and the pluggable primitives
        are :class:`SessionConfig` fields and are validated as such.
        """
        if settings:
            self.config = SessionConfig(**{**self.config.model_dump(), **settings})
            self.state.verbosity = self.config.verbosity
            self.state.tab_length = self.config.tab_length
            if "inspect_depth" in settings:
                self.tools.stringify = partial(
                    default_stringify, depth=self.config.inspect_depth
                )
            if "time_digits" in settings:
                self.tools.format_duration = partial(
                    default_format_duration, digits=self.config.time_digits
                )

        if stdout is not None or stderr is not None:
            self._stdout = stdout or self._stdout
            self._stderr = stderr or self._stderr
            self.writer.sink = StreamSink(self._stdout, self._stderr)

        if equals is not None:
            self.tools.equals = equals
        if stringify is not None:
            self.tools.stringify = stringify
        if format_duration is not None:
            self.tools.format_duration = format_duration
        if error_checker is not None:
            self.tools.error_checker = error_checker

        self.logger.debug(f"Session configured: {self.config.model_dump()}")
        return self.config

    async def run(self, *selectors: Selector) -> RunSummary:
        """Run the selected tests and write the report.

        Each selector is either ``"<suite>#<pattern>"`` (pattern optional) or
        a setup callable, called before any test runs. Without string
        selectors every suite runs in registration order.
        """
        runner = Runner(self, logger=self.logger.getChild("runner"))
        return await runner.run(*selectors)

    def run_sync(self, *selectors: Selector) -> RunSummary:
        return asyncio.run(self.run(*selectors))


_active: Session | None = None


def get_session() -> Session:
    """Return the active session, creating a default one on first use."""
    global _active
    if _active is None:
        _active = Session()
    return _active


@contextmanager
def activate(session: Session) -> Iterator[Session]:
    """Make ``session`` the active session for the duration of the block."""
    global _active
    previous = _active
    _active = session
    try:
        yield session
    finally:
        _active = previous


def tester(name: str) -> TestMaker:
    return get_session().tester(name)


def configure(**settings: Any) -> SessionConfig:
    return get_session().configure(**settings)


async def run(*selectors: Selector) -> RunSummary:
    return await get_session().run(*selectors)


def run_sync(*selectors: Selector) -> RunSummary:
    return get_session().run_sync(*selectors)
