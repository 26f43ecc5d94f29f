# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for configuration models and environment loading."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from ketch.config import (
    ConfigError,
    ExecutionConfig,
    KetchConfig,
    default_parallel_jobs,
    load_config,
)
from ketch.process import CommandOptions


def test_defaults_without_environment() -> None:
    config = load_config({})
    assert config == KetchConfig()
    assert config.execution.max_workers == default_parallel_jobs()
    assert config.execution.timeout is None
    assert config.output.emoji is True


def test_default_parallel_jobs_uses_three_quarters_of_cores(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("ketch.config.os.cpu_count", lambda: 8)
    assert default_parallel_jobs() == 6
    monkeypatch.setattr("ketch.config.os.cpu_count", lambda: None)
    assert default_parallel_jobs() == 1


def test_environment_overrides_are_applied() -> None:
    config = load_config(
        {
            "KETCH_MAX_WORKERS": "3",
            "KETCH_TIMEOUT": "2.5",
            "KETCH_CHECK": "no",
            "KETCH_TEXT": "no",
            "KETCH_DISCARD_STDIN": "1",
            "KETCH_EMOJI": "off",
            "KETCH_COLOR": "false",
            "UNRELATED": "ignored",
        }
    )
    assert config.execution.max_workers == 3
    assert config.execution.timeout == 2.5
    assert config.execution.check is False
    assert config.execution.text is False
    assert config.execution.discard_stdin is True
    assert config.output.emoji is False
    assert config.output.color is False


def test_timeout_none_is_accepted() -> None:
    assert load_config({"KETCH_TIMEOUT": "none"}).execution.timeout is None


@pytest.mark.parametrize(
    "environ",
    [
        {"KETCH_MAX_WORKERS": "many"},
        {"KETCH_MAX_WORKERS": "0"},
        {"KETCH_TIMEOUT": "-1"},
        {"KETCH_CHECK": "maybe"},
    ],
)
def test_invalid_values_raise_config_error(environ: dict[str, str]) -> None:
    with pytest.raises(ConfigError):
        load_config(environ)


def test_assignment_is_validated() -> None:
    config = ExecutionConfig()
    with pytest.raises(ValidationError):
        config.max_workers = 0


def test_command_options_reflect_execution_defaults() -> None:
    execution = ExecutionConfig(timeout=5, check=False, discard_stdin=True)
    assert execution.command_options() == CommandOptions(timeout=5.0, check=False, discard_stdin=True)
