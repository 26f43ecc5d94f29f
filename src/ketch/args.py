# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Normalisation of call-time arguments into command tokens."""

from __future__ import annotations


def parse_args(*args: object) -> list[str]:
    """Return ``args`` as a flat list of string tokens.

    ``args`` may be one of:

    - a single list or tuple, copied as-is;
    - two or more values, taken in order, with any list or tuple among them
      spread one level;
    - a single space-separated string, split on every space (repeated spaces
      yield empty tokens);
    - nothing, or a single ``None``, giving an empty list.

    Args:
        *args: Values supplied by the caller.

    Returns:
        list[str]: Token list owned by the caller.
    """

    if not args:
        return []
    first = args[0]
    if isinstance(first, (list, tuple)):
        return [str(token) for token in first]
    if len(args) > 1:
        tokens: list[str] = []
        for value in args:
            if isinstance(value, (list, tuple)):
                tokens.extend(str(token) for token in value)
            else:
                tokens.append(str(value))
        return tokens
    if first is None:
        return []
    return str(first).split(" ")


__all__ = ["parse_args"]
