"""Pluggable comparison and formatting primitives."""

from __future__ import annotations

import operator
import pprint
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable


def stringify(value: Any, depth: int | None = 5) -> str:
    return pprint.pformat(value, depth=depth)


def format_duration(seconds: float, digits: int = 6) -> str:
    """Format a duration in seconds as grouped milliseconds, e.g. ``1,204.5ms``."""
    text = f"{seconds * 1000:,.{digits}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"{text}ms"


def error_checker(exc: BaseException, kind: type[BaseException] | None = None) -> bool:
    """Exact type match; subclasses of ``kind`` do not count."""
    if kind is None:
        return True
    return type(exc) is kind


@dataclass
class Tools:
    equals: Callable[[Any, Any], bool] = operator.eq
    stringify: Callable[[Any], str] = stringify
    format_duration: Callable[[float], str] = format_duration
    error_checker: Callable[[BaseException, type[BaseException] | None], bool] = (
        error_checker
    )

    @classmethod
    def create(cls, inspect_depth: int | None = 5, time_digits: int = 6) -> Tools:
        return cls(
            stringify=partial(stringify, depth=inspect_depth),
            format_duration=partial(format_duration, digits=time_digits),
        )
