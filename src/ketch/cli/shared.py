# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared utilities for CLI commands (logging, errors)."""

from __future__ import annotations

from dataclasses import dataclass

import typer

from ..logging import fail as core_fail


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        """Initialise the error with a message and exit code.

        Args:
            message: Human-readable error message shown to the user.
            exit_code: Exit status associated with the failure.
        """

        super().__init__(message)
        self.exit_code = exit_code


@dataclass(slots=True)
class CLILogger:
    """Adapter around project logging helpers respecting CLI presentation flags."""

    use_emoji: bool
    use_color: bool | None = None

    def fail(self, message: str) -> None:
        """Log a failure message."""

        core_fail(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def echo(self, message: str, *, err: bool = False) -> None:
        """Write ``message`` verbatim using Typer's echo helper.

        Args:
            message: Text to write; no newline is appended.
            err: Write to standard error instead of standard output.
        """

        typer.echo(message, nl=False, err=err)


def build_cli_logger(*, emoji: bool, color: bool = True) -> CLILogger:
    """Return a ``CLILogger`` for the given presentation preferences.

    Args:
        emoji: Whether log output may include emoji glyphs.
        color: ``False`` forces plain output; ``True`` defers to TTY detection.

    Returns:
        CLILogger: Logger bound to the shared console manager.
    """

    return CLILogger(use_emoji=emoji, use_color=None if color else False)


__all__ = ["CLIError", "CLILogger", "build_cli_logger"]
