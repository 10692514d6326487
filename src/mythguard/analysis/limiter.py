# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""In-flight job counter bounded by a concurrency ceiling."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager


class RateLimiter:
    """
    Counts in-flight jobs for one dispatch batch.

    `acquire` blocks while the ceiling is reached; `release` frees a slot and wakes
    one waiter. All counter updates happen under the same condition.
    """

    def __init__(self, ceiling: int):
        if ceiling < 1:
            raise ValueError(f"ceiling must be at least 1; got {ceiling}")
        self.ceiling = ceiling
        self._cond = threading.Condition()
        self._in_flight = 0
        self._peak = 0
        self._cancelled = False

    @property
    def in_flight(self) -> int:
        with self._cond:
            return self._in_flight

    @property
    def peak(self) -> int:
        with self._cond:
            return self._peak

    def acquire(self) -> bool:
        """Take a slot; returns False if the limiter was cancelled while waiting."""
        with self._cond:
            while self._in_flight >= self.ceiling and not self._cancelled:
                self._cond.wait()
            if self._cancelled:
                return False
            self._in_flight += 1
            self._peak = max(self._peak, self._in_flight)
            return True

    def release(self) -> None:
        with self._cond:
            if self._in_flight <= 0:
                raise RuntimeError("release() called with no job in flight")
            self._in_flight -= 1
            self._cond.notify()

    def cancel(self) -> None:
        with self._cond:
            self._cancelled = True
            self._cond.notify_all()

    @contextmanager
    def slot(self) -> Iterator[bool]:
        acquired = self.acquire()
        try:
            yield acquired
        finally:
            if acquired:
                self.release()


__all__ = ["RateLimiter"]
