#!/usr/bin/env python3
# Copyright (C) 2026 Alex Stoyanov
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License along with this program.
# If not, see <https://www.gnu.org/licenses/>.

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from ..core.bounds import RATE_LIMIT_MAX_REQUESTS, RATE_LIMIT_WINDOW_SECONDS
from ..core.errors import QrRateLimitError
from ..core.validation import require_positive_int

logger = logging.getLogger(__name__)


@dataclass
class _Window:
    count: int
    reset_at: float


class RateLimiter:
    """Fixed-window request counter per key.

    The first request from a key opens a window of ``window_seconds``; up to
    ``max_requests`` are admitted until it closes, then the count starts over.
    """

    def __init__(
        self,
        max_requests: int = RATE_LIMIT_MAX_REQUESTS,
        window_seconds: float = RATE_LIMIT_WINDOW_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = require_positive_int(max_requests, label="max_requests")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._lock = threading.Lock()

    def try_acquire(self, key: str) -> bool:
        with self._lock:
            now = self._clock()
            window = self._windows.get(key)
            if window is None or now >= window.reset_at:
                self._prune(now)
                self._windows[key] = _Window(count=1, reset_at=now + self.window_seconds)
                return True
            if window.count >= self.max_requests:
                return False
            window.count += 1
            return True

    def acquire(self, key: str) -> None:
        if not self.try_acquire(key):
            logger.warning("Rate limit exceeded for %s", key)
            raise QrRateLimitError("Rate limit exceeded. Please try again later.")

    def remaining(self, key: str) -> int:
        with self._lock:
            window = self._windows.get(key)
            if window is None or self._clock() >= window.reset_at:
                return self.max_requests
            return max(0, self.max_requests - window.count)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()

    def _prune(self, now: float) -> None:
        closed = [key for key, window in self._windows.items() if now >= window.reset_at]
        for key in closed:
            del self._windows[key]
