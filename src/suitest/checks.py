"""Base data structure for recorded assertion outcomes."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class Check:
    """Outcome of a single assertion made inside a test.

    Attributes:
        name: Label of the assertion (e.g. "Equality").
        result: Whether the assertion held.
        message: Human-readable detail. Empty for passing checks unless the
            assertion provides one.
        time: Elapsed seconds for checks that measure a callback
            (``Context.exec``), otherwise None.
    """

    name: str
    result: bool
    message: str = ""
    time: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
