from __future__ import annotations

import inspect
import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Union

from suitest.case import Test
from suitest.errors import SelectionError
from suitest.metrics import RunSummary
from suitest.summary import Summarizer

if TYPE_CHECKING:
    from suitest.session import Session

Setup = Callable[[], Union[Any, Awaitable[Any]]]
Selector = Union[str, Setup]

DEFAULT_DELIMITER = "#"


@dataclass(frozen=True)
class Selection:
    """One ``(suite, pattern)`` pair of a run selection."""

    suite: str
    pattern: re.Pattern[str] | None = None
    delimiter: str = DEFAULT_DELIMITER

    def matches(self, test_name: str) -> bool:
        return self.pattern is None or self.pattern.search(test_name) is not None

    def __str__(self) -> str:
        if self.pattern is None:
            return self.suite
        return f"{self.suite}{self.delimiter}{self.pattern.pattern}"


def parse_selector(key: str, delimiter: str = DEFAULT_DELIMITER) -> Selection:
    """Split ``"<suite><delimiter><pattern>"`` on the first delimiter.

    A missing or empty pattern selects every test of the suite.
    """
    suite, _, pattern = key.partition(delimiter)
    if not suite:
        raise SelectionError(f"Selector '{key}' does not name a suite")
    if not pattern:
        return Selection(suite)
    try:
        return Selection(suite, re.compile(pattern), delimiter)
    except re.error as e:
        raise SelectionError(
            f"Invalid pattern '{pattern}' in selector '{key}': {e}"
        ) from e


class Runner:
    """Resolves a selection, runs the matching tests in order and reports them."""

    def __init__(self, session: Session, logger: logging.Logger | None = None):
        self.session = session
        self.logger = logger or logging.getLogger("suitest.runner")

    async def run(self, *selectors: Selector) -> RunSummary:
        keys: list[str] = []
        for selector in selectors:
            if isinstance(selector, str):
                keys.append(selector)
                continue
            name = getattr(selector, "__name__", repr(selector))
            self.logger.debug(f"Running setup {name}")
            returned = selector()
            if inspect.isawaitable(returned):
                await returned

        registry = self.session.registry
        if keys:
            delimiter = self.session.config.delimiter
            selection = [parse_selector(key, delimiter) for key in keys]
        else:
            selection = [Selection(name) for name in registry.names()]
        self.logger.debug(
            f"Selection: {', '.join(str(s) for s in selection) or '(empty)'}"
        )

        executed = await self._run_selection(selection)

        summarizer = Summarizer(self.session.writer, self.session.tools)
        summary = summarizer.summarize(executed, registry.names())
        self.logger.debug(
            f"Run finished: {summary.passed}/{summary.tests} tests passed, "
            f"{summary.failed_checks} failed checks"
        )
        return summary

    async def _run_selection(self, selection: list[Selection]) -> list[Test]:
        registry = self.session.registry
        isolate = self.session.config.isolate_errors
        executed: list[Test] = []
        for selected in selection:
            suite = registry.get(selected.suite)
            for test in suite.select(selected.pattern):
                self.logger.debug(f"Running test '{test.name}' of suite '{suite.name}'")
                try:
                    ran = await test.run(isolate=isolate)
                except Exception as e:
                    self.session.writer.error(
                        f"{type(e).__name__} in test '{test.name}' "
                        f"of suite '{suite.name}': {e}"
                    )
                    self.logger.error(
                        f"Test '{test.name}' of suite '{suite.name}' aborted the run: {e}"
                    )
                    raise
                if not ran:
                    self.logger.debug(f"Test '{test.name}' already ran, skipping")
                    continue
                executed.append(test)
                status = "PASS" if test.result else "FAIL"
                self.logger.debug(
                    f"{status} {suite.name} / {test.name}: "
                    f"{len(test.checks) - test.faileds}/{len(test.checks)} checks"
                )
        return executed
