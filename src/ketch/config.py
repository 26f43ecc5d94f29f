# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and environment loading for ketch."""

from __future__ import annotations

import math
import os
from collections.abc import Callable, Mapping
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .process import CommandOptions

ENV_PREFIX: Final[str] = "KETCH_"
_TRUE_VALUES: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES: Final[frozenset[str]] = frozenset({"0", "false", "no", "off"})


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


def default_parallel_jobs() -> int:
    """Return 75% of available CPU cores (minimum of 1)."""
    cores = os.cpu_count() or 1
    proposed = max(1, math.floor(cores * 0.75))
    return proposed


class ExecutionConfig(BaseModel):
    """Defaults applied to every command execution."""

    model_config = ConfigDict(validate_assignment=True)

    max_workers: int = Field(default_factory=default_parallel_jobs, ge=1)
    timeout: float | None = Field(default=None, ge=0)
    check: bool = True
    text: bool = True
    discard_stdin: bool = False

    def command_options(self) -> CommandOptions:
        """Return the base :class:`CommandOptions` for launches.

        Returns:
            CommandOptions: Options built from the configured defaults.
        """

        return CommandOptions(
            check=self.check,
            text=self.text,
            timeout=self.timeout,
            discard_stdin=self.discard_stdin,
        )


class OutputConfig(BaseModel):
    """Console presentation preferences."""

    model_config = ConfigDict(validate_assignment=True)

    emoji: bool = True
    color: bool = True


class KetchConfig(BaseModel):
    """Top-level configuration object."""

    model_config = ConfigDict(validate_assignment=True)

    execution: ExecutionConfig = Field(default_factory=ExecutionConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


def _parse_bool(raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"expected a boolean, got {raw!r}")


def _parse_timeout(raw: str) -> float | None:
    stripped = raw.strip().lower()
    if stripped in {"", "none"}:
        return None
    return float(stripped)


_EXECUTION_KEYS: Final[dict[str, tuple[str, Callable[[str], object]]]] = {
    "MAX_WORKERS": ("max_workers", int),
    "TIMEOUT": ("timeout", _parse_timeout),
    "CHECK": ("check", _parse_bool),
    "TEXT": ("text", _parse_bool),
    "DISCARD_STDIN": ("discard_stdin", _parse_bool),
}
_OUTPUT_KEYS: Final[dict[str, tuple[str, Callable[[str], object]]]] = {
    "EMOJI": ("emoji", _parse_bool),
    "COLOR": ("color", _parse_bool),
}


def _collect(
    environ: Mapping[str, str],
    keys: Mapping[str, tuple[str, Callable[[str], object]]],
) -> dict[str, object]:
    collected: dict[str, object] = {}
    for suffix, (field_name, parser) in keys.items():
        env_name = f"{ENV_PREFIX}{suffix}"
        raw = environ.get(env_name)
        if raw is None:
            continue
        try:
            collected[field_name] = parser(raw)
        except ValueError as exc:
            raise ConfigError(f"{env_name}: {exc}") from exc
    return collected


def load_config(environ: Mapping[str, str] | None = None) -> KetchConfig:
    """Build a :class:`KetchConfig` from ``KETCH_*`` environment variables.

    Args:
        environ: Environment mapping to read, defaults to :data:`os.environ`.

    Returns:
        KetchConfig: Configuration with environment overrides applied.

    Raises:
        ConfigError: If a variable cannot be parsed or fails validation.
    """

    source = os.environ if environ is None else environ
    try:
        return KetchConfig(
            execution=ExecutionConfig(**_collect(source, _EXECUTION_KEYS)),
            output=OutputConfig(**_collect(source, _OUTPUT_KEYS)),
        )
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc


__all__ = [
    "ConfigError",
    "ExecutionConfig",
    "KetchConfig",
    "OutputConfig",
    "default_parallel_jobs",
    "load_config",
]
