"""Tests for selection parsing and run orchestration."""

import asyncio

import pytest

from suitest.errors import SelectionError, UnknownSuiteError
from suitest.runner import Selection, parse_selector
from suitest.summary import Summarizer


# --- parse_selector ---


def test_parse_suite_only():
    assert parse_selector("math") == Selection("math")


def test_parse_suite_and_pattern():
    selection = parse_selector("suiteA#^foo")
    assert selection.suite == "suiteA"
    assert selection.pattern.pattern == "^foo"
    assert selection.matches("foobar")
    assert not selection.matches("barfoo")


def test_parse_empty_pattern_selects_all():
    assert parse_selector("math#").pattern is None


def test_parse_splits_on_first_delimiter_only():
    assert parse_selector("a#b#c").pattern.pattern == "b#c"


def test_parse_custom_delimiter():
    selection = parse_selector("my.suite:^x", delimiter=":")
    assert selection.suite == "my.suite"
    assert selection.pattern.pattern == "^x"
    assert str(selection) == "my.suite:^x"


def test_parse_rejects_missing_suite():
    with pytest.raises(SelectionError):
        parse_selector("#pattern")


def test_parse_rejects_invalid_regex():
    with pytest.raises(SelectionError, match="Invalid pattern"):
        parse_selector("math#(")


# --- run ---


def _register(session, suite, names, order):
    test = session.tester(suite)
    for name in names:
        test(name, lambda t, name=name: order.append((suite, name)))


def test_run_selection_filters_by_pattern(session):
    order = []
    _register(session, "suiteA", ["foo1", "bar", "foo2"], order)
    _register(session, "suiteB", ["foo3"], order)

    summary = session.run_sync("suiteA#^foo")

    assert order == [("suiteA", "foo1"), ("suiteA", "foo2")]
    assert summary.tests == 2
    assert session.registry.get("suiteB").tests["foo3"].runned is False
    assert session.registry.get("suiteA").tests["bar"].runned is False


def test_run_without_selection_runs_everything_in_order(session):
    order = []
    _register(session, "b", ["1", "2"], order)
    _register(session, "a", ["3"], order)

    summary = session.run_sync()

    assert order == [("b", "1"), ("b", "2"), ("a", "3")]
    assert summary.suites == ["b", "a"]


def test_run_follows_selection_order(session):
    order = []
    _register(session, "a", ["1"], order)
    _register(session, "b", ["2"], order)

    session.run_sync("b", "a")

    assert order == [("b", "2"), ("a", "1")]


def test_setup_callbacks_run_before_tests(session):
    order = []

    def setup_sync():
        _register(session, "sync", ["s"], order)

    async def setup_async():
        await asyncio.sleep(0)
        _register(session, "async", ["a"], order)

    summary = session.run_sync(setup_sync, setup_async)

    assert order == [("sync", "s"), ("async", "a")]
    assert summary.ok


def test_unknown_suite_aborts_run(session):
    order = []
    _register(session, "known", ["t"], order)
    with pytest.raises(UnknownSuiteError, match="missing"):
        session.run_sync("missing", "known")
    assert order == []


def test_tests_run_sequentially(session):
    events = []

    async def slow(t):
        events.append("slow start")
        await asyncio.sleep(0.01)
        events.append("slow end")

    async def fast(t):
        events.append("fast")

    test = session.tester("s")
    test("slow", slow)
    test("fast", fast)
    session.run_sync()

    assert events == ["slow start", "slow end", "fast"]


def test_exception_aborts_run_by_default(session, err):
    order = []
    test = session.tester("s")

    def explode(t):
        raise RuntimeError("kaboom")

    test("explode", explode)
    test("after", lambda t: order.append("after"))

    with pytest.raises(RuntimeError, match="kaboom"):
        session.run_sync()

    assert order == []
    assert "'explode'" in err.getvalue()
    assert "'s'" in err.getvalue()


def test_isolated_exception_continues_run(make_session):
    session = make_session(isolate_errors=True)
    order = []
    test = session.tester("s")

    def explode(t):
        raise RuntimeError("kaboom")

    test("explode", explode)
    test("after", lambda t: order.append("after"))

    summary = session.run_sync()

    assert order == ["after"]
    assert summary.failed == 1
    assert summary.passed == 1
    assert summary.failed_checks == 1


def test_second_run_does_not_reexecute(session):
    calls = []
    session.tester("s")("t", lambda t: calls.append(1))

    first = session.run_sync()
    second = session.run_sync()

    assert calls == [1]
    assert first.tests == 1
    assert second.tests == 0


def test_failed_checks_invariant_after_run(session):
    def mixed(t):
        t.equals(1, 1)
        t.equals(1, 2)
        t.partial({"a": 1}, {"a": 2})

    session.tester("s")("mixed", mixed)
    summary = session.run_sync()

    test = session.registry.get("s").tests["mixed"]
    assert test.faileds == 2
    assert summary.failed_checks == 2


def test_math_add_scenario(session, out):
    session.tester("math")("add", lambda t: t.equals(2 + 2, 4))

    summary = session.run_sync("math")

    assert summary.ok
    assert summary.failed_checks == 0
    assert "✅ Test add" in out.getvalue()
    assert "No failed checks" in out.getvalue()


def test_math_bad_scenario(session, out):
    def bad(t):
        t.equals(5, 2 + 2)

    session.tester("math")("bad", bad)

    summary = session.run_sync("math")

    test = session.registry.get("math").tests["bad"]
    assert test.faileds == 1
    assert test.result is False
    assert test.returned_false is False
    assert not summary.ok
    report = out.getvalue()
    assert "Expected: 5" in report
    assert "Received: 4" in report
    assert "Total failed checks: 1" in report


def test_async_run_entry_point(session):
    session.tester("s")("t", lambda t: t.expected_true(True))
    summary = asyncio.run(session.run("s#t"))
    assert summary.passed == 1


def test_runner_logs_debug_records(session, caplog):
    session.tester("s")("t", lambda t: None)
    with caplog.at_level("DEBUG", logger="suitest"):
        session.run_sync()
    messages = [r.getMessage() for r in caplog.records]
    assert any("Running test 't' of suite 's'" in m for m in messages)
    assert any(m.startswith("Run finished: 1/1 tests passed") for m in messages)


def test_debug_log_shows_selector_with_configured_delimiter(make_session, caplog):
    session = make_session(verbosity=0, delimiter=":")
    session.tester("s")("target", lambda t: None)
    with caplog.at_level("DEBUG", logger="suitest"):
        session.run_sync("s:^tar")
    messages = [r.getMessage() for r in caplog.records]
    assert "Selection: s:^tar" in messages


def test_summarizer_runs_once_per_run(session, mocker):
    spy = mocker.spy(Summarizer, "summarize")
    session.tester("a")("t1", lambda t: None)
    session.tester("b")("t2", lambda t: None)

    session.run_sync("a", "b")

    assert spy.call_count == 1
    executed = spy.call_args.args[1]
    assert [t.name for t in executed] == ["t1", "t2"]
