# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared worker pool that runs launches off the calling thread."""

from __future__ import annotations

import atexit
from concurrent.futures import ThreadPoolExecutor
from threading import Lock

from .config import default_parallel_jobs

_LOCK = Lock()
_EXECUTOR: ThreadPoolExecutor | None = None


def get_executor(max_workers: int | None = None) -> ThreadPoolExecutor:
    """Return the process-wide executor, creating it on first use.

    Args:
        max_workers: Pool size used when the executor is created. Ignored once
            the pool exists; call :func:`shutdown_executor` to resize.

    Returns:
        ThreadPoolExecutor: Executor shared by every command instance.
    """

    global _EXECUTOR
    with _LOCK:
        if _EXECUTOR is None:
            _EXECUTOR = ThreadPoolExecutor(
                max_workers=max_workers or default_parallel_jobs(),
                thread_name_prefix="ketch",
            )
        return _EXECUTOR


def shutdown_executor(*, wait: bool = True) -> None:
    """Shut down the shared executor; the next lookup creates a fresh one."""

    global _EXECUTOR
    with _LOCK:
        executor, _EXECUTOR = _EXECUTOR, None
    if executor is not None:
        executor.shutdown(wait=wait)


atexit.register(shutdown_executor)


__all__ = ["get_executor", "shutdown_executor"]
