# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Chainable command builder with callback and future based execution."""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Mapping
from concurrent.futures import CancelledError, Future
from functools import partial
from typing import Final, Literal, NamedTuple

from .args import parse_args
from .config import KetchConfig, load_config
from .executor import get_executor
from .logging import diagnostic
from .process import (
    CommandOptions,
    CommandOverrideMapping,
    LaunchOutput,
    Launcher,
    SubprocessLauncher,
    resolve_options,
)

LOGGER = logging.getLogger(__name__)

ExecKind = Literal["exec", "exec_file", "fork"]
OptionsInput = CommandOptions | CommandOverrideMapping | None
Output = str | bytes | None
ExecCallback = Callable[[BaseException | None, Output, Output], object]
LaunchCall = Callable[[CommandOptions], LaunchOutput | Mapping[str, Output]]

LONG_OPTION_PREFIX: Final[str] = "--"
SHORT_OPTION_PREFIX: Final[str] = "-"


class ExecResult(NamedTuple):
    """Captured output of a finished execution."""

    stdout: Output
    stderr: Output


def _as_result(output: LaunchOutput | Mapping[str, Output]) -> ExecResult:
    if isinstance(output, Mapping):
        return ExecResult(output.get("stdout"), output.get("stderr"))
    return ExecResult(output.stdout, output.stderr)


def _deliver(callback: ExecCallback, future: Future[ExecResult]) -> None:
    """Hand the settled ``future`` to an error-first ``callback``."""

    if future.cancelled():
        callback(CancelledError(), None, None)
        return
    error = future.exception()
    if error is not None:
        callback(error, None, None)
        return
    stdout, stderr = future.result()
    callback(None, stdout, stderr)


class Ketch:
    """Build a command line token by token and execute it.

    Every mutator returns the instance so calls can be chained::

        ketch("git").prepend("/usr/bin/env").push("symbolic-ref").opt("quiet", "short").push("HEAD")

    Attributes:
        tokens: Ordered command tokens; the first one is the program.
        last_error: Exception raised by the most recent execution, if any.
        last_stdout: Standard output captured by the most recent execution.
        last_stderr: Standard error captured by the most recent execution.
        last_exec_cmd: Command string last run through :meth:`exec`.
        last_exec_file_cmd: Command string last run through :meth:`exec_file`.
        last_fork_cmd: Command string last run through :meth:`fork`.

    Concurrent executions issued from one instance race on the ``last_*``
    attributes; use one instance per concurrent execution.
    """

    def __init__(
        self,
        *args: object,
        launcher: Launcher | None = None,
        config: KetchConfig | None = None,
    ) -> None:
        """Initialise the command from ``args`` (see :func:`ketch.args.parse_args`).

        Args:
            *args: Initial tokens.
            launcher: Launch capability; defaults to :class:`SubprocessLauncher`.
            config: Execution defaults; ``KETCH_*`` environment variables are
                read at execution time when omitted.
        """

        self.tokens: list[str] = parse_args(*args)
        self.launcher: Launcher = launcher if launcher is not None else SubprocessLauncher()
        self._config = config
        self.last_error: BaseException | None = None
        self.last_stdout: Output = None
        self.last_stderr: Output = None
        self.last_exec_cmd: str | None = None
        self.last_exec_file_cmd: str | None = None
        self.last_fork_cmd: str | None = None

    @property
    def config(self) -> KetchConfig:
        """Return the configuration applied to executions."""

        return self._config if self._config is not None else load_config()

    def append(self, *args: object) -> Ketch:
        """Append tokens to the command. *Alias:* :meth:`push`."""

        self.tokens.extend(parse_args(*args))
        return self

    push = append

    def prepend(self, *args: object) -> Ketch:
        """Prepend tokens to the command. *Alias:* :meth:`unshift`."""

        self.tokens[:0] = parse_args(*args)
        return self

    unshift = prepend

    def option(self, *args: object) -> Ketch:
        """Append one or more options, prefixed as flags.

        Single-character names become short flags, anything longer becomes a
        long flag: ``ketch("git").option("q", "short")`` renders
        ``git -q --short``. *Alias:* :meth:`opt`.

        Returns:
            Ketch: This instance.
        """

        return self.append(
            [
                f"{LONG_OPTION_PREFIX if len(name) > 1 else SHORT_OPTION_PREFIX}{name}"
                for name in parse_args(*args)
            ]
        )

    opt = option

    def pop(self) -> Ketch:
        """Remove the last token, if any. Use ``cmd.tokens.pop()`` to get it back."""

        if self.tokens:
            self.tokens.pop()
        return self

    def shift(self) -> Ketch:
        """Remove the first token, if any. Use ``cmd.tokens.pop(0)`` to get it back."""

        if self.tokens:
            self.tokens.pop(0)
        return self

    def splice(self, start: int, delete_count: int | None = None, *items: object) -> Ketch:
        """Remove ``delete_count`` tokens at ``start`` and insert ``items`` there.

        Args:
            start: Index to operate on; negative values count from the end.
            delete_count: Number of tokens to remove; ``None`` removes through the end.
            *items: Tokens inserted at ``start``.

        Returns:
            Ketch: This instance.
        """

        length = len(self.tokens)
        begin = max(length + start, 0) if start < 0 else min(start, length)
        count = length - begin if delete_count is None else min(max(delete_count, 0), length - begin)
        self.tokens[begin : begin + count] = [str(item) for item in items]
        return self

    def to_string(self) -> str:
        """Return the command joined by single spaces."""

        return " ".join(self.tokens)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.tokens!r})"

    def serialize(self) -> tuple[str | None, list[str]]:
        """Split the command into program and argument list.

        This is the shape taken by launchers that bypass the shell.
        *Aliases:* :meth:`get`, :meth:`to_json`.

        Returns:
            tuple[str | None, list[str]]: Program (``None`` for an empty command)
            and a copy of the remaining tokens.
        """

        program = self.tokens[0] if self.tokens else None
        return program, self.tokens[1:]

    get = serialize
    to_json = serialize

    def clear(self) -> Ketch:
        """Remove every token. *Alias:* :meth:`reset`."""

        self.tokens.clear()
        return self

    reset = clear

    def debug(self) -> Ketch:
        """Write the rendered command to standard error and return the instance."""

        diagnostic(self.to_string())
        return self

    def tap(self, fn: Callable[[Ketch], object] | None) -> Ketch:
        """Call ``fn`` with this instance for its side effects, when callable."""

        if callable(fn):
            fn(self)
        return self

    def exec(self, options: OptionsInput = None, callback: ExecCallback | None = None) -> Future[ExecResult]:
        """Run the rendered command string through the system shell.

        Args:
            options: :class:`CommandOptions` or a mapping of overrides applied to
                the configured defaults.
            callback: Optional error-first ``callback(error, stdout, stderr)``
                notified when the execution settles.

        Returns:
            Future[ExecResult]: Resolves to ``(stdout, stderr)`` or fails with the
            launcher's exception.
        """

        return self._exec("exec", partial(self.launcher.launch_whole, self.to_string()), options, callback)

    def exec_file(self, options: OptionsInput = None, callback: ExecCallback | None = None) -> Future[ExecResult]:
        """Run the program directly with its arguments, without a shell.

        Same contract as :meth:`exec`.
        """

        program, args = self.serialize()
        return self._exec("exec_file", partial(self.launcher.launch_split, program, args), options, callback)

    def fork(self, options: OptionsInput = None, callback: ExecCallback | None = None) -> Future[ExecResult]:
        """Run the command as a Python script under the current interpreter.

        The first token is the script path, the rest its arguments. Same
        contract as :meth:`exec`.
        """

        return self._exec(
            "fork",
            partial(self.launcher.launch_split, sys.executable, list(self.tokens)),
            options,
            callback,
        )

    def _exec(
        self,
        kind: ExecKind,
        launch: LaunchCall,
        options: OptionsInput,
        callback: ExecCallback | None,
    ) -> Future[ExecResult]:
        rendered = self.to_string()
        setattr(self, f"last_{kind}_cmd", rendered)
        config = self.config
        resolved = resolve_options(options, defaults=config.execution.command_options())
        LOGGER.debug("launching %s via %s", rendered, kind)
        future = get_executor(config.execution.max_workers).submit(self._run, launch, resolved)
        if callback is not None:
            future.add_done_callback(partial(_deliver, callback))
        return future

    def _run(self, launch: LaunchCall, options: CommandOptions) -> ExecResult:
        try:
            output = launch(options)
        except Exception as exc:
            self.last_error = exc
            self.last_stdout = getattr(exc, "stdout", None)
            self.last_stderr = getattr(exc, "stderr", None)
            raise
        result = _as_result(output)
        self.last_error = None
        self.last_stdout, self.last_stderr = result
        return result


def ketch(*args: object, launcher: Launcher | None = None, config: KetchConfig | None = None) -> Ketch:
    """Return a new :class:`Ketch` built from ``args``."""

    return Ketch(*args, launcher=launcher, config=config)


__all__ = ["ExecCallback", "ExecResult", "Ketch", "ketch"]
