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

"""In-process cache of generated QR images.

Entries expire lazily: a lookup at or after ``inserted + ttl`` deletes the entry
and reports a miss. When the cache grows past ``sweep_threshold`` entries an
insert also sweeps every expired entry; live entries are never evicted, so the
cache may stay above the threshold until they age out.
"""

from __future__ import annotations

import hashlib
import json
import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from ..core.bounds import CACHE_SWEEP_THRESHOLD, CACHE_TTL_SECONDS
from ..core.models import GenerationConfig, GenerationResult
from ..core.validation import require_positive_int

logger = logging.getLogger(__name__)


def fingerprint(text: str, config: GenerationConfig) -> str:
    """Stable key over the text and every field that changes the rendered image."""
    fields = dict(config.rendering_fields())
    fields["text"] = text
    encoded = json.dumps(fields, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(encoded.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class _Entry:
    result: GenerationResult
    inserted_at: float


class GenerationCache:
    def __init__(
        self,
        ttl_seconds: float = CACHE_TTL_SECONDS,
        sweep_threshold: int = CACHE_SWEEP_THRESHOLD,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self.sweep_threshold = require_positive_int(sweep_threshold, label="sweep_threshold")
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> GenerationResult | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._expired(entry, self._clock()):
                del self._entries[key]
                return None
            return entry.result

    def set(self, key: str, result: GenerationResult) -> None:
        with self._lock:
            now = self._clock()
            self._entries[key] = _Entry(result=result, inserted_at=now)
            if len(self._entries) > self.sweep_threshold:
                self._sweep(now)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _expired(self, entry: _Entry, now: float) -> bool:
        return now - entry.inserted_at >= self.ttl_seconds

    def _sweep(self, now: float) -> None:
        stale = [key for key, entry in self._entries.items() if self._expired(entry, now)]
        for key in stale:
            del self._entries[key]
        logger.debug(
            "Swept %d expired cache entries (%d remain)", len(stale), len(self._entries)
        )
