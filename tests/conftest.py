# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

import pytest

from ketch.config import ExecutionConfig, KetchConfig
from ketch.console import get_console_manager
from ketch.process import CommandOptions, LaunchOutput


@dataclass
class StubLauncher:
    """Launcher double returning canned output or raising a canned error."""

    output: LaunchOutput | dict[str, str] = field(default_factory=lambda: LaunchOutput("bar", "baz"))
    error: Exception | None = None
    whole_calls: list[tuple[str, CommandOptions]] = field(default_factory=list)
    split_calls: list[tuple[str, list[str], CommandOptions]] = field(default_factory=list)

    def launch_whole(self, command: str, options: CommandOptions) -> LaunchOutput | dict[str, str]:
        self.whole_calls.append((command, options))
        if self.error is not None:
            raise self.error
        return self.output

    def launch_split(
        self,
        program: str,
        args: Sequence[str],
        options: CommandOptions,
    ) -> LaunchOutput | dict[str, str]:
        self.split_calls.append((program, list(args), options))
        if self.error is not None:
            raise self.error
        return self.output


@pytest.fixture
def stub_launcher() -> StubLauncher:
    """Return a launcher that answers ``("bar", "baz")``."""
    return StubLauncher()


@pytest.fixture
def config() -> KetchConfig:
    """Return a configuration independent of ``KETCH_*`` variables."""
    return KetchConfig(execution=ExecutionConfig(max_workers=2))


@pytest.fixture(autouse=True)
def _fresh_consoles() -> None:
    """Drop cached Rich consoles so each test sees its own captured streams."""
    get_console_manager().clear()
