from __future__ import annotations

import importlib.util
import sys
from pathlib import Path

import typer

app = typer.Typer(name="suitest", help="Run suites of checks-based tests")


def _load_test_file(path: Path) -> None:
    """Import a test file so that its module-level registrations happen."""
    module_name = f"_suitest_{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ValueError(f"cannot import test file: {path}")
    module = importlib.util.module_from_spec(spec)
    # dataclasses and typing resolve annotations through sys.modules
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(module_name, None)
        raise


def _existing_files(files: list[str]) -> list[Path]:
    paths = [Path(f) for f in files]
    for path in paths:
        if not path.is_file():
            typer.echo(f"Error: test file not found: {path}", err=True)
            raise typer.Exit(1)
    return paths


@app.command()
def run(
    files: list[str] = typer.Argument(help="Python files that register tests"),
    select: list[str] = typer.Option(
        [], "--select", "-s", help="Selector '<suite>#<pattern>', repeatable"
    ),
    verbosity: int | None = typer.Option(
        None, "--verbosity", "-v", min=0, max=2, help="0 none, 1 warn, 2 info"
    ),
    tab_length: int | None = typer.Option(
        None, "--tab-length", min=0, max=16, help="Spaces per indent level"
    ),
    config: str | None = typer.Option(None, help="Path to suitest YAML config"),
    isolate: bool = typer.Option(
        False, "--isolate", help="Record test exceptions as failed checks"
    ),
    junit: str | None = typer.Option(None, help="Write a JUnit XML report here"),
    debug_log: str | None = typer.Option(None, help="Write debug log to this file"),
    debug: bool = typer.Option(False, "--debug", help="Print debug log to stderr"),
):
    """Import test files and run the selected suites."""
    from suitest.config import SessionConfig, load_config
    from suitest.reporting.junit import write_junit
    from suitest.session import Session, activate
    from suitest.verbose import setup_logger

    try:
        if config is not None:
            config_path = Path(config)
            if not config_path.exists():
                typer.echo(f"Error: config file not found: {config}", err=True)
                raise typer.Exit(1)
            session_config = load_config(config_path)
        else:
            session_config = SessionConfig()

        overrides: dict[str, object] = {}
        if verbosity is not None:
            overrides["verbosity"] = verbosity
        if tab_length is not None:
            overrides["tab_length"] = tab_length
        if isolate:
            overrides["isolate_errors"] = True
        if overrides:
            session_config = SessionConfig(
                **{**session_config.model_dump(), **overrides}
            )
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    logger = setup_logger(
        debug_file=Path(debug_log) if debug_log else None, verbose=debug
    )
    paths = _existing_files(files)

    session = Session(config=session_config, logger=logger.getChild("session"))
    with activate(session):
        try:
            for path in paths:
                logger.debug(f"Loading test file {path}")
                _load_test_file(path)
            summary = session.run_sync(*select)
        except ValueError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1)

    junit_path = junit or session_config.junit
    if junit_path:
        write_junit(Path(junit_path), summary.executed)
        typer.echo(f"JUnit report: {junit_path}")

    # Exit with non-zero if any test failed
    if not summary.ok:
        raise typer.Exit(1)


@app.command("list")
def list_tests(
    files: list[str] = typer.Argument(help="Python files that register tests"),
):
    """List the '<suite>#<test>' keys registered by the given files."""
    from suitest.session import Session, activate

    paths = _existing_files(files)
    session = Session()
    with activate(session):
        try:
            for path in paths:
                _load_test_file(path)
        except ValueError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1)

    for suite in session.suites:
        for test in suite:
            typer.echo(test.key)
