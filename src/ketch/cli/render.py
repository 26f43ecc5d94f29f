# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command that prints a built command without running it."""

from __future__ import annotations

import json
from typing import Annotated

import typer

from ..command import Ketch


def render_command(
    tokens: Annotated[list[str], typer.Argument(help="Program and arguments.")],
    prepend: Annotated[
        list[str] | None,
        typer.Option("--prepend", "-p", help="Token placed before the program (repeatable)."),
    ] = None,
    opts: Annotated[
        list[str] | None,
        typer.Option("--opt", "-o", help="Flag name appended as -x or --name (repeatable)."),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the [program, arguments] pair as JSON."),
    ] = False,
) -> None:
    """Print the command line assembled from TOKENS."""

    cmd = Ketch(list(tokens))
    if prepend:
        cmd.prepend(list(prepend))
    if opts:
        cmd.option(list(opts))
    if as_json:
        typer.echo(json.dumps(list(cmd.serialize())))
    else:
        typer.echo(cmd.to_string())


def register(app: typer.Typer) -> None:
    """Register the ``render`` command on ``app``."""

    app.command("render")(render_command)


__all__ = ["register", "render_command"]
