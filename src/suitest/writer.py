"""Hierarchical, verbosity-gated text output.

Every line written through a :class:`Writer` is prefixed with the current
indent, which lives in a :class:`WriterState` shared by all writers of one
session. ``group``/``ungroup`` move that indent in and out.

Tabs inside the rendered text become one indent unit and newlines continue
at the current indent, so multi-line messages such as::

    "failed\\n\\tExpected: 5\\n\\tReceived: 4"

come out aligned under the line that introduced them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Protocol, TextIO


class Verbosity(IntEnum):
    NONE = 0
    WARN = 1
    INFO = 2


@dataclass
class WriterState:
    """Indent depth and verbosity shared by every writer of a session."""

    indent: int = 0
    verbosity: Verbosity = Verbosity.WARN
    tab_length: int = 2

    @property
    def indent_unit(self) -> str:
        return " " * self.tab_length

    @property
    def prefix(self) -> str:
        return self.indent_unit * self.indent

    def indent_in(self) -> None:
        self.indent += 1

    def indent_out(self) -> None:
        if self.indent > 0:
            self.indent -= 1

    def allows(self, level: int) -> bool:
        return self.verbosity >= level


def render(args: tuple[Any, ...], state: WriterState, depth: int | None = None) -> str:
    """Render ``args`` as one indented block terminated by a newline."""
    unit = state.indent_unit
    prefix = unit * (state.indent if depth is None else depth)
    text = " ".join(str(arg) for arg in args)
    text = text.replace("\t", unit).replace("\n", "\n" + prefix)
    return f"{prefix}{text}\n"


class Sink(Protocol):
    def write(self, text: str) -> None: ...

    def write_error(self, text: str) -> None: ...


class StreamSink:
    """Sends rendered text to a text stream, errors to an optional second one."""

    def __init__(self, stream: TextIO, error_stream: TextIO | None = None):
        self.stream = stream
        self.error_stream = error_stream

    def write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()

    def write_error(self, text: str) -> None:
        target = self.error_stream if self.error_stream is not None else self.stream
        target.write(text)
        target.flush()


class OutputOwner(Protocol):
    output: str


class BufferSink:
    """Appends rendered text to ``owner.output``."""

    def __init__(self, owner: OutputOwner):
        self.owner = owner

    def write(self, text: str) -> None:
        self.owner.output += text

    def write_error(self, text: str) -> None:
        self.owner.output += text


class Writer:
    def __init__(self, sink: Sink, state: WriterState):
        self.sink = sink
        self.state = state

    def write(self, *args: Any) -> None:
        self.sink.write(render(args, self.state))

    def error(self, *args: Any) -> None:
        self.sink.write_error(render(args, self.state))

    def group(self, *args: Any) -> None:
        if args:
            self.write(*args)
        self.state.indent_in()

    def ungroup(self, *args: Any) -> None:
        if args:
            self.write(*args)
        self.state.indent_out()


class LeveledWriter:
    """A writer that only emits when the session verbosity reaches ``level``.

    Groups opened through this writer are counted so that an ``ungroup``
    never dedents for a group that was suppressed.
    """

    def __init__(self, writer: Writer, level: int):
        self.writer = writer
        self.level = level
        self._open_groups = 0

    @property
    def enabled(self) -> bool:
        return self.writer.state.allows(self.level)

    def __call__(self, *args: Any) -> bool:
        if not self.enabled:
            return False
        self.writer.write(*args)
        return True

    def group(self, *args: Any) -> bool:
        if not self.enabled:
            return False
        self.writer.group(*args)
        self._open_groups += 1
        return True

    def ungroup(self, *args: Any) -> bool:
        if self._open_groups == 0:
            return False
        self._open_groups -= 1
        if self.enabled:
            self.writer.ungroup(*args)
        else:
            self.writer.state.indent_out()
        return True


class Logger:
    """``log``/``warn``/``info`` writers for the NONE/WARN/INFO levels."""

    def __init__(self, writer: Writer):
        self.writer = writer
        self.log = LeveledWriter(writer, Verbosity.NONE)
        self.warn = LeveledWriter(writer, Verbosity.WARN)
        self.info = LeveledWriter(writer, Verbosity.INFO)
