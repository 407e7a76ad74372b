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

import threading
import time
import uuid
from collections.abc import Callable
from dataclasses import replace
from typing import Protocol

from .records import HistoryEntry, HistoryRecord, QrSettings


class HistoryStore(Protocol):
    """Document store for per-user QR history.

    Implementations index records by ``(user_id, created_at)`` and
    ``(user_id, text_content)`` and search ``text_content`` within one user.
    """

    def insert(self, user_id: str, entry: HistoryEntry) -> HistoryRecord: ...

    def get(self, record_id: str) -> HistoryRecord | None: ...

    def patch(
        self,
        record_id: str,
        *,
        settings: QrSettings | None = None,
        generation_method: str | None = None,
        browser_info: str | None = None,
    ) -> HistoryRecord: ...

    def delete(self, record_id: str) -> None: ...

    def list_for_user(self, user_id: str) -> list[HistoryRecord]: ...

    def find_by_text(self, user_id: str, text_content: str) -> HistoryRecord | None: ...

    def search(self, user_id: str, term: str) -> list[HistoryRecord]: ...


class InMemoryHistoryStore:
    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._records: dict[str, HistoryRecord] = {}
        self._by_text: dict[tuple[str, str], list[str]] = {}
        self._lock = threading.Lock()

    def insert(self, user_id: str, entry: HistoryEntry) -> HistoryRecord:
        now = self._clock()
        record = HistoryRecord(
            id=uuid.uuid4().hex,
            user_id=user_id,
            text_content=entry.text_content,
            settings=entry.settings,
            created_at=now,
            updated_at=now,
            generation_method=entry.generation_method,
            browser_info=entry.browser_info,
        )
        with self._lock:
            self._records[record.id] = record
            self._by_text.setdefault((user_id, entry.text_content), []).append(record.id)
        return record

    def get(self, record_id: str) -> HistoryRecord | None:
        with self._lock:
            return self._records.get(record_id)

    def patch(
        self,
        record_id: str,
        *,
        settings: QrSettings | None = None,
        generation_method: str | None = None,
        browser_info: str | None = None,
    ) -> HistoryRecord:
        with self._lock:
            record = self._records.get(record_id)
            if record is None:
                raise KeyError(record_id)
            changes: dict[str, object] = {"updated_at": self._clock()}
            if settings is not None:
                changes["settings"] = settings
            if generation_method is not None:
                changes["generation_method"] = generation_method
            if browser_info is not None:
                changes["browser_info"] = browser_info
            updated = replace(record, **changes)
            self._records[record_id] = updated
            return updated

    def delete(self, record_id: str) -> None:
        with self._lock:
            record = self._records.pop(record_id, None)
            if record is None:
                return
            key = (record.user_id, record.text_content)
            ids = self._by_text.get(key, [])
            if record_id in ids:
                ids.remove(record_id)
            if not ids:
                self._by_text.pop(key, None)

    def list_for_user(self, user_id: str) -> list[HistoryRecord]:
        with self._lock:
            owned = [record for record in self._records.values() if record.user_id == user_id]
        return sorted(owned, key=lambda record: record.created_at, reverse=True)

    def find_by_text(self, user_id: str, text_content: str) -> HistoryRecord | None:
        with self._lock:
            ids = self._by_text.get((user_id, text_content))
            if not ids:
                return None
            return self._records[ids[0]]

    def search(self, user_id: str, term: str) -> list[HistoryRecord]:
        tokens = term.lower().split()
        if not tokens:
            return []
        return [
            record
            for record in self.list_for_user(user_id)
            if all(token in record.text_content.lower() for token in tokens)
        ]
