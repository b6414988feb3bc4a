"""Tests for the session configuration surface and the active session."""

import io

import pytest
from pydantic import ValidationError

import suitest
from suitest.session import Session, activate, get_session
from suitest.writer import Verbosity


def test_session_defaults():
    session = Session()
    assert session.verbosity == Verbosity.WARN
    assert session.state.tab_length == 2
    assert session.suites == []


def test_configure_updates_writer_state(session):
    session.configure(verbosity="none", tab_length=4)
    assert session.state.verbosity == Verbosity.NONE
    assert session.state.tab_length == 4
    assert session.config.verbosity == Verbosity.NONE


def test_verbosity_property_setter(session):
    session.verbosity = 1
    assert session.state.verbosity == Verbosity.WARN


def test_configure_validates(session):
    with pytest.raises(ValidationError):
        session.configure(tab_length=-3)
    assert session.state.tab_length == 2


def test_configure_swaps_output_streams(session, out):
    new_out, new_err = io.StringIO(), io.StringIO()
    session.configure(stdout=new_out, stderr=new_err)
    session.tester("s")("t", lambda t: None)
    session.run_sync()
    assert "✅ Test t" in new_out.getvalue()
    assert out.getvalue() == ""
    assert session.stdout is new_out
    assert session.stderr is new_err


def test_configure_pluggable_primitives(session):
    session.configure(
        stringify=lambda value: f"<{value}>",
        error_checker=lambda exc, kind: True,
    )
    test = session.tester("s")("t", lambda t: None)
    test.context.equals(1, 2)
    assert test.checks[0].message == "failed\n\tExpected: <1>\n\tReceived: <2>"

    def boom():
        raise KeyError("k")

    assert test.context.thrown(boom, ValueError) is True


def test_configure_time_digits_rebinds_formatter(session):
    session.configure(time_digits=1)
    assert session.tools.format_duration(0.0012345) == "1.2ms"


def test_configure_custom_delimiter(session):
    session.configure(delimiter=":")
    order = []
    test = session.tester("s")
    test("alpha", lambda t: order.append("alpha"))
    test("beta", lambda t: order.append("beta"))
    session.run_sync("s:^b")
    assert order == ["beta"]


def test_activate_scopes_module_level_helpers(make_session):
    isolated = make_session()
    outer = get_session()
    with activate(isolated) as active:
        assert active is isolated
        assert get_session() is isolated
        suitest.tester("mod")("t", lambda t: t.equals(1, 1))
        summary = suitest.run_sync("mod")
    assert get_session() is outer
    assert summary.passed == 1
    assert "mod" in isolated.registry
    assert "mod" not in outer.registry


def test_module_level_configure(make_session):
    isolated = make_session()
    with activate(isolated):
        suitest.configure(verbosity=suitest.VERBOSITY_INFO)
    assert isolated.state.verbosity == Verbosity.INFO


def test_main_writer_logger_is_gated(session, out):
    session.configure(verbosity=1)
    session.out.info("hidden")
    session.out.warn("shown")
    assert out.getvalue() == "shown\n"
