from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from suitest.writer import Verbosity


class SessionConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    verbosity: Verbosity = Verbosity.WARN
    tab_length: int = Field(default=2, ge=0, le=16)
    delimiter: str = "#"
    isolate_errors: bool = False
    inspect_depth: int | None = Field(default=5, ge=1)
    time_digits: int = Field(default=6, ge=0, le=12)
    junit: str | None = None

    @field_validator("verbosity", mode="before")
    @classmethod
    def verbosity_from_name(cls, v: object) -> object:
        if isinstance(v, str):
            if v.isdigit():
                return int(v)
            try:
                return Verbosity[v.upper()]
            except KeyError:
                names = ", ".join(level.name.lower() for level in Verbosity)
                raise ValueError(
                    f"Unknown verbosity '{v}', expected one of: {names}"
                ) from None
        return v

    @field_validator("delimiter")
    @classmethod
    def delimiter_is_one_character(cls, v: str) -> str:
        if len(v) != 1:
            raise ValueError(f"delimiter must be a single character, got '{v}'")
        if v.isalnum() or v.isspace():
            raise ValueError(f"delimiter '{v}' must be punctuation")
        return v


def load_config(path: Path) -> SessionConfig:
    """Load and validate a session config from a YAML file."""
    config_dir = path.parent.resolve()

    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    config = SessionConfig(**raw)

    # Resolve a relative junit path relative to the config file location
    if config.junit is not None and not Path(config.junit).is_absolute():
        config.junit = str((config_dir / config.junit).resolve())

    return config
