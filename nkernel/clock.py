"""Process-relative clock that never goes backwards, and sleep helpers."""

from __future__ import annotations

import threading
import time

_lock = threading.Lock()
_ini_time = time.time_ns()
_last_time = 0


def get_time_nanos() -> int:
    """Nanoseconds elapsed since the module was loaded; never decreases."""
    global _last_time
    with _lock:
        curr = time.time_ns() - _ini_time
        if curr < _last_time:
            curr = _last_time + 1
        _last_time = curr
        return curr


def get_time() -> int:
    """Milliseconds elapsed since the module was loaded."""
    return get_time_nanos() // 1_000_000


def sleep_nanos(nanos: int) -> None:
    """Suspend the calling thread for ``nanos`` nanoseconds.

    A non-positive duration only yields the processor.
    """
    if nanos <= 0:
        time.sleep(0)
        return
    wake = get_time_nanos() + nanos
    while True:
        remaining = wake - get_time_nanos()
        if remaining <= 0:
            return
        time.sleep(remaining / 1_000_000_000)


def sleep_millis(millis: int) -> None:
    """Suspend the calling thread for ``millis`` milliseconds."""
    sleep_nanos(millis * 1_000_000)


def sleep_micros(micros: int) -> None:
    """Suspend the calling thread for ``micros`` microseconds."""
    sleep_nanos(micros * 1_000)


def sleep_seconds(seconds: int) -> None:
    """Suspend the calling thread for ``seconds`` seconds."""
    sleep_nanos(seconds * 1_000_000_000)