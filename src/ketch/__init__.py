# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Build commands with chainable calls and execute them one way or another.

Example::

    from ketch import ketch

    # what branch am I on?
    output = ketch("git").prepend("/usr/bin/env").push("symbolic-ref").opt("quiet", "short").push("HEAD").exec()
    print(output.result().stdout.strip())
"""

from __future__ import annotations

from importlib import metadata

from .args import parse_args
from .command import ExecCallback, ExecResult, Ketch, ketch
from .config import ConfigError, KetchConfig, load_config
from .process import CommandOptions, LaunchOutput, Launcher, SubprocessExecutionError, SubprocessLauncher

__all__ = [
    "CommandOptions",
    "ConfigError",
    "ExecCallback",
    "ExecResult",
    "Ketch",
    "KetchConfig",
    "LaunchOutput",
    "Launcher",
    "SubprocessExecutionError",
    "SubprocessLauncher",
    "__version__",
    "ketch",
    "load_config",
    "parse_args",
]

try:
    __version__ = metadata.version("ketch")
except metadata.PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "0.0.0"
