# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Process launch strategies backing :class:`ketch.command.Ketch` executions."""

from __future__ import annotations

import os
import shutil

# Bandit: subprocess usage is the whole point of this module; the split launcher
# never enables the shell and the whole-command launcher does so explicitly.
import subprocess  # nosec B404
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Final, Literal, NamedTuple, Protocol, runtime_checkable

CommandOverrideValue = Path | str | Mapping[str, str] | bool | float | int | None
CommandOptionKey = Literal["cwd", "env", "check", "text", "timeout", "discard_stdin"]
CommandOverrideMapping = Mapping[CommandOptionKey, CommandOverrideValue]

_COMMAND_KEYS: Final[frozenset[CommandOptionKey]] = frozenset(
    {"cwd", "env", "check", "text", "timeout", "discard_stdin"}
)
_BOOL_KEYS: Final[frozenset[CommandOptionKey]] = frozenset({"check", "text", "discard_stdin"})
TIMEOUT_RETURNCODE: Final[int] = 124


@dataclass(frozen=True, slots=True)
class CommandOptions:
    """Immutable options forwarded to a launcher for a single execution."""

    cwd: Path | None = None
    env: Mapping[str, str] | None = None
    check: bool = True
    text: bool = True
    timeout: float | None = None
    discard_stdin: bool = False

    def with_overrides(self, overrides: CommandOverrideMapping) -> CommandOptions:
        """Return a new options instance with ``overrides`` applied.

        Args:
            overrides: Mapping of option names to replacement values.

        Returns:
            CommandOptions: Updated options instance.

        Raises:
            TypeError: If ``overrides`` includes an unknown option name or a value
                with an incompatible type.
            ValueError: When a timeout override is negative.
        """

        unknown = [key for key in overrides if key not in _COMMAND_KEYS]
        if unknown:
            message = ", ".join(sorted(unknown))
            raise TypeError(f"Unknown command option(s): {message}")
        changes: dict[str, object] = {}
        for key, value in overrides.items():
            if key == "cwd":
                changes[key] = self._coerce_cwd_override(value)
            elif key == "env":
                changes[key] = self._coerce_env_override(value)
            elif key == "timeout":
                changes[key] = self._coerce_timeout_override(value)
            elif key in _BOOL_KEYS:
                changes[key] = self._coerce_bool_override(value, key)
        return replace(self, **changes)

    @staticmethod
    def _coerce_cwd_override(value: CommandOverrideValue) -> Path | None:
        """Return a validated override for ``cwd``.

        Args:
            value: Override candidate provided by the caller.

        Returns:
            Path | None: Normalised working directory override.

        Raises:
            TypeError: If ``value`` is neither ``None``, a string nor a :class:`pathlib.Path`.
        """

        if value is None or isinstance(value, Path):
            return value
        if isinstance(value, str):
            return Path(value)
        raise TypeError("cwd override must be a path, a string or None")

    @staticmethod
    def _coerce_env_override(value: CommandOverrideValue) -> Mapping[str, str] | None:
        """Return a validated override for ``env``.

        Args:
            value: Override candidate supplied for the environment mapping.

        Returns:
            Mapping[str, str] | None: Validated environment overrides.

        Raises:
            TypeError: If the override is not a mapping of string keys to string values.
        """

        if value is None:
            return None
        if not isinstance(value, Mapping):
            raise TypeError("env override must be a mapping of strings to strings")
        validated: dict[str, str] = {}
        for key, entry in value.items():
            if not isinstance(key, str) or not isinstance(entry, str):
                raise TypeError("env override must map strings to strings")
            validated[key] = entry
        return validated

    @staticmethod
    def _coerce_bool_override(value: CommandOverrideValue, option: str) -> bool:
        """Return a validated bool override for ``option``.

        Args:
            value: Override candidate extracted from the overrides mapping.
            option: Option name used when constructing error messages.

        Returns:
            bool: Validated boolean override.

        Raises:
            TypeError: If the override is not a boolean value.
        """

        if isinstance(value, bool):
            return value
        raise TypeError(f"{option} override must be a boolean value")

    @staticmethod
    def _coerce_timeout_override(value: CommandOverrideValue) -> float | None:
        """Return a validated timeout override.

        Args:
            value: Override candidate for the timeout value.

        Returns:
            float | None: Normalised timeout value in seconds.

        Raises:
            TypeError: If the override is not numeric.
            ValueError: When the override is negative.
        """

        if value is None:
            return None
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            coerced = float(value)
            if coerced < 0:
                raise ValueError("timeout override must be non-negative")
            return coerced
        raise TypeError("timeout override must be a number or None")


def resolve_options(
    options: CommandOptions | CommandOverrideMapping | None,
    *,
    defaults: CommandOptions,
) -> CommandOptions:
    """Return concrete launch options for a caller-supplied ``options`` value.

    Args:
        options: Explicit options, a mapping of overrides, or ``None``.
        defaults: Options used as the base when ``options`` is a mapping or missing.

    Returns:
        CommandOptions: Options handed to the launcher.
    """

    if options is None:
        return defaults
    if isinstance(options, CommandOptions):
        return options
    return defaults.with_overrides(options)


class SubprocessExecutionError(RuntimeError):
    """Raised when a subprocess exits with a non-zero status while ``check`` is true."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        stdout: str | None,
        stderr: str | None,
    ) -> None:
        """Initialise the error with captured subprocess metadata.

        Args:
            command: Command that was executed, as launched.
            returncode: Exit status reported by the subprocess.
            stdout: Captured standard output stream.
            stderr: Captured standard error stream.
        """
        super().__init__(
            f"Command '{command[0]}' exited with status {returncode}. stderr: {stderr or '<none>'}",
        )
        self.command = tuple(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


class LaunchOutput(NamedTuple):
    """Captured output of a finished launch."""

    stdout: str | bytes
    stderr: str | bytes


@runtime_checkable
class Launcher(Protocol):
    """Capability that starts a process and waits for its captured output."""

    def launch_whole(self, command: str, options: CommandOptions) -> LaunchOutput:
        """Run ``command`` through the system shell."""

        raise NotImplementedError

    def launch_split(self, program: str, args: Sequence[str], options: CommandOptions) -> LaunchOutput:
        """Run ``program`` directly with ``args``, bypassing the shell."""

        raise NotImplementedError


def _ensure_text(value: str | bytes | None) -> str | None:
    if value is None or isinstance(value, str):
        return value
    return value.decode(errors="ignore")


def resolve_program(program: str | None) -> str:
    """Return the executable path used to launch ``program``.

    Args:
        program: Program name or path as stored in the first token.

    Returns:
        str: Absolute path to the executable.

    Raises:
        FileNotFoundError: If the program is missing or not found on ``PATH``.
    """

    if not program:
        raise FileNotFoundError("command has no program to execute")
    if Path(program).is_absolute() or os.sep in program or (os.altsep and os.altsep in program):
        return program
    resolved = shutil.which(program)
    if resolved is None:
        raise FileNotFoundError(f"Executable '{program}' was not found on PATH")
    return resolved


class SubprocessLauncher:
    """:class:`Launcher` implementation built on :func:`subprocess.run`."""

    def launch_whole(self, command: str, options: CommandOptions) -> LaunchOutput:
        """Run ``command`` through the shell and capture its output.

        Args:
            command: Shell command line.
            options: Execution options.

        Returns:
            LaunchOutput: Captured stdout and stderr.

        Raises:
            SubprocessExecutionError: On timeout, or on a non-zero exit when ``check`` is set.
        """

        # Bandit: whole-command launches are shell launches by definition.
        return self._run(command, (command,), options, shell=True)  # nosec B604

    def launch_split(self, program: str, args: Sequence[str], options: CommandOptions) -> LaunchOutput:
        """Run ``program`` with ``args`` and capture its output.

        Args:
            program: Program name or path; bare names are resolved on ``PATH``.
            args: Arguments passed verbatim.
            options: Execution options.

        Returns:
            LaunchOutput: Captured stdout and stderr.

        Raises:
            FileNotFoundError: If ``program`` cannot be resolved.
            SubprocessExecutionError: On timeout, or on a non-zero exit when ``check`` is set.
        """

        argv = [resolve_program(program), *args]
        return self._run(argv, argv, options, shell=False)

    @staticmethod
    def _run(
        target: str | list[str],
        command: Sequence[str],
        options: CommandOptions,
        *,
        shell: bool,
    ) -> LaunchOutput:
        try:
            completed = subprocess.run(  # nosec B602 B603 - shell only for whole-command launches
                target,
                shell=shell,
                cwd=str(options.cwd) if options.cwd is not None else None,
                env=dict(options.env) if options.env is not None else None,
                check=False,
                capture_output=True,
                text=options.text,
                timeout=options.timeout,
                stdin=subprocess.DEVNULL if options.discard_stdin else None,
            )
        except subprocess.TimeoutExpired as exc:
            stdout = _ensure_text(exc.stdout) or ""
            stderr = _ensure_text(exc.stderr)
            timeout_msg = f"Command timed out after {options.timeout:.1f}s"
            combined_stderr = f"{stderr}\n{timeout_msg}" if stderr else timeout_msg
            raise SubprocessExecutionError(command, TIMEOUT_RETURNCODE, stdout, combined_stderr) from exc

        if options.check and completed.returncode != 0:
            raise SubprocessExecutionError(
                command,
                completed.returncode,
                _ensure_text(completed.stdout),
                _ensure_text(completed.stderr),
            )
        return LaunchOutput(completed.stdout, completed.stderr)


__all__ = [
    "CommandOptionKey",
    "CommandOptions",
    "CommandOverrideMapping",
    "CommandOverrideValue",
    "LaunchOutput",
    "Launcher",
    "SubprocessExecutionError",
    "SubprocessLauncher",
    "TIMEOUT_RETURNCODE",
    "resolve_options",
    "resolve_program",
]
