# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Behavioural tests for the :class:`ketch.Ketch` builder operations."""

from __future__ import annotations

import pytest

import ketch as ketch_module
from ketch import Ketch, ketch


def test_factory_returns_builder_instances() -> None:
    cmd = ketch()
    assert isinstance(cmd, Ketch)
    assert cmd.tokens == []
    assert ketch_module.Ketch is Ketch


def test_constructor_uses_normalised_tokens() -> None:
    assert ketch("foo").tokens == ["foo"]
    assert ketch("foo", "bar").tokens == ["foo", "bar"]
    assert ketch(["foo", "bar"]).tokens == ["foo", "bar"]
    assert ketch("foo bar").tokens == ["foo", "bar"]


def test_constructor_does_not_alias_caller_list() -> None:
    source = ["foo"]
    cmd = ketch(source).append("bar")
    assert source == ["foo"]
    assert cmd.tokens == ["foo", "bar"]


def test_append_is_chainable_and_appends() -> None:
    cmd = ketch("foo")
    assert cmd.append() is cmd
    assert cmd.append("bar").tokens == ["foo", "bar"]


def test_push_is_append_alias() -> None:
    assert Ketch.push is Ketch.append


def test_append_calls_compose_in_order() -> None:
    chained = ketch("foo").append("x").append("y")
    variadic = ketch("foo").append("x", "y")
    assert chained.tokens == variadic.tokens == ["foo", "x", "y"]


def test_prepend_is_chainable_and_prepends() -> None:
    cmd = ketch("foo")
    assert cmd.prepend() is cmd
    assert cmd.prepend("bar").tokens == ["bar", "foo"]
    assert cmd.prepend("/usr/bin/env sudo").tokens == ["/usr/bin/env", "sudo", "bar", "foo"]


def test_unshift_is_prepend_alias() -> None:
    assert Ketch.unshift is Ketch.prepend


def test_option_prefixes_short_and_long_flags() -> None:
    assert ketch("foo").option("q", "v").to_string() == "foo -q -v"
    assert ketch("foo").option("verbose").to_string() == "foo --verbose"
    assert ketch().push("foo").opt("bar", "v").to_string() == "foo --bar -v"


def test_to_string_joins_with_spaces() -> None:
    assert ketch("foo", "bar", "baz").to_string() == "foo bar baz"
    assert str(ketch("foo", "bar")) == "foo bar"


def test_pop_and_shift_remove_ends() -> None:
    cmd = ketch("a", "b", "c")
    assert cmd.pop() is cmd
    assert cmd.tokens == ["a", "b"]
    assert cmd.shift() is cmd
    assert cmd.tokens == ["b"]


def test_pop_and_shift_on_empty_command_are_noops() -> None:
    cmd = ketch()
    assert cmd.pop().shift().tokens == []


@pytest.mark.parametrize(
    ("start", "delete_count", "items", "expected"),
    [
        (0, 0, ("bar",), ["bar", "a", "b", "c"]),
        (1, 1, (), ["a", "c"]),
        (1, None, (), ["a"]),
        (-1, 1, ("z",), ["a", "b", "z"]),
        (-10, 1, (), ["b", "c"]),
        (10, 5, ("end",), ["a", "b", "c", "end"]),
        (1, -3, ("x", "y"), ["a", "x", "y", "b", "c"]),
    ],
)
def test_splice_matches_array_semantics(
    start: int,
    delete_count: int | None,
    items: tuple[str, ...],
    expected: list[str],
) -> None:
    cmd = ketch("a", "b", "c")
    assert cmd.splice(start, delete_count, *items) is cmd
    assert cmd.tokens == expected


def test_serialize_splits_program_and_arguments() -> None:
    assert ketch("foo", "bar", "baz").serialize() == ("foo", ["bar", "baz"])
    assert ketch().serialize() == (None, [])


def test_serialize_aliases() -> None:
    cmd = ketch("foo", "bar", "baz")
    assert cmd.get() == cmd.to_json() == cmd.serialize()


def test_serialized_pair_rejoins_to_rendering() -> None:
    cmd = ketch("git").opt("quiet", "short").push("symbolic-ref", "HEAD")
    program, args = cmd.serialize()
    assert ketch(" ".join([program, *args])).to_string() == cmd.to_string()


def test_serialize_returns_copy_of_arguments() -> None:
    cmd = ketch("foo", "bar")
    _, args = cmd.serialize()
    args.append("baz")
    assert cmd.tokens == ["foo", "bar"]


def test_clear_is_chainable_and_idempotent() -> None:
    cmd = ketch("foo", "bar")
    tokens = cmd.tokens
    assert cmd.clear() is cmd
    assert cmd.tokens == []
    assert cmd.clear().clear().tokens == []
    assert cmd.tokens is tokens
    assert Ketch.reset is Ketch.clear


def test_debug_writes_rendering_to_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    cmd = ketch("git").push("[bold]status[/bold]")
    assert cmd.debug() is cmd
    captured = capsys.readouterr()
    assert captured.err == "git [bold]status[/bold]\n"
    assert captured.out == ""


def test_tap_invokes_callables_only() -> None:
    seen: list[str] = []
    cmd = ketch("foo")
    assert cmd.tap(lambda c: seen.append(c.to_string())) is cmd
    assert cmd.tap(None) is cmd
    assert cmd.tap("not callable") is cmd  # type: ignore[arg-type]
    assert seen == ["foo"]


def test_repr_shows_tokens() -> None:
    assert repr(ketch("foo bar")) == "Ketch(['foo', 'bar'])"


def test_append_and_prepend_spread_trailing_lists() -> None:
    cmd = ketch("foo").append("a", ["b"]).prepend("env", ["-i"])
    assert cmd.tokens == ["env", "-i", "foo", "a", "b"]
