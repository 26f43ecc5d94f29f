# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command that builds and executes a command."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Final

import typer

from ..command import ExecResult, Ketch
from ..config import ConfigError, KetchConfig, load_config
from ..process import CommandOverrideMapping, SubprocessExecutionError
from .shared import CLIError, CLILogger, build_cli_logger

CONFIG_ERROR_EXIT: Final[int] = 2
NOT_FOUND_EXIT: Final[int] = 127


def _as_text(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode(errors="replace")
    return value


def _execute(cmd: Ketch, *, shell: bool, overrides: CommandOverrideMapping, logger: CLILogger) -> ExecResult:
    """Run ``cmd`` and wait for it, translating launch failures into :class:`CLIError`."""

    future = cmd.exec(overrides) if shell else cmd.exec_file(overrides)
    try:
        return future.result()
    except SubprocessExecutionError as exc:
        logger.echo(_as_text(exc.stdout))
        logger.echo(_as_text(exc.stderr), err=True)
        raise CLIError(str(exc), exit_code=exc.returncode or 1) from exc
    except FileNotFoundError as exc:
        raise CLIError(str(exc), exit_code=NOT_FOUND_EXIT) from exc


def run_command(
    tokens: Annotated[list[str], typer.Argument(help="Program and arguments; put them after -- if they start with -.")],
    opts: Annotated[
        list[str] | None,
        typer.Option("--opt", "-o", help="Flag name appended as -x or --name (repeatable)."),
    ] = None,
    shell: Annotated[
        bool,
        typer.Option("--shell/--direct", help="Run through the system shell or invoke the program directly."),
    ] = False,
    cwd: Annotated[
        Path | None,
        typer.Option("--cwd", help="Working directory for the process.", file_okay=False),
    ] = None,
    timeout: Annotated[
        float | None,
        typer.Option("--timeout", min=0, help="Seconds before the process is abandoned."),
    ] = None,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Print the command line to stderr before running it."),
    ] = False,
    emoji: Annotated[
        bool | None,
        typer.Option("--emoji/--no-emoji", help="Toggle emoji in messages (default: KETCH_EMOJI)."),
    ] = None,
    color: Annotated[
        bool | None,
        typer.Option("--color/--no-color", help="Toggle coloured messages (default: KETCH_COLOR)."),
    ] = None,
) -> None:
    """Execute the command assembled from TOKENS and relay its output."""

    try:
        config: KetchConfig = load_config()
    except ConfigError as exc:
        logger = build_cli_logger(emoji=emoji is not False, color=color is not False)
        logger.fail(f"Invalid configuration: {exc}")
        raise typer.Exit(code=CONFIG_ERROR_EXIT) from exc

    logger = build_cli_logger(
        emoji=config.output.emoji if emoji is None else emoji,
        color=config.output.color if color is None else color,
    )

    cmd = Ketch(list(tokens), config=config)
    if opts:
        cmd.option(list(opts))
    if debug:
        cmd.debug()

    overrides: dict[str, object] = {}
    if cwd is not None:
        overrides["cwd"] = cwd
    if timeout is not None:
        overrides["timeout"] = timeout

    try:
        stdout, stderr = _execute(cmd, shell=shell, overrides=overrides, logger=logger)
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc

    logger.echo(_as_text(stdout))
    logger.echo(_as_text(stderr), err=True)


def register(app: typer.Typer) -> None:
    """Register the ``run`` command on ``app``."""

    app.command("run")(run_command)


__all__ = ["register", "run_command"]
