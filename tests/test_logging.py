# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for console logging helpers."""

from __future__ import annotations

import pytest

from ketch.console import get_console_manager
from ketch.logging import diagnostic, emoji, fail


def test_emoji_respects_flag() -> None:
    assert emoji("✅", True) == "✅"
    assert emoji("✅", False) == ""


def test_fail_writes_to_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    fail("broken", use_emoji=False)
    fail("broken again", use_emoji=True, use_color=False)
    captured = capsys.readouterr()
    assert captured.err == "broken\n❌ broken again\n"
    assert captured.out == ""


def test_diagnostic_is_verbatim(capsys: pytest.CaptureFixture[str]) -> None:
    diagnostic("echo [red]:smile:[/red]")
    assert capsys.readouterr().err == "echo [red]:smile:[/red]\n"


def test_console_manager_caches_per_preferences() -> None:
    manager = get_console_manager()
    assert manager.get(color=False, emoji=False) is manager.get(color=False, emoji=False)
    assert manager.get(color=False, emoji=False) is not manager.get(color=False, emoji=False, stderr=True)
