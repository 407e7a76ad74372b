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

"""Per-user history operations scoped to the caller's identity.

``subject`` is the identity provider's user id; ``None`` means an anonymous
caller, which every operation rejects.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime

from ..core.errors import QrAccessError, QrAuthError
from ..core.models import ImageFormat
from .filters import start_of_day
from .records import DuplicateCheck, HistoryEntry, HistoryRecord, HistoryStatistics
from .store import HistoryStore

logger = logging.getLogger(__name__)


def _require_subject(subject: str | None) -> str:
    if not subject:
        raise QrAuthError("Not authenticated")
    return subject


class HistoryService:
    def __init__(self, store: HistoryStore) -> None:
        self.store = store

    def save(self, subject: str | None, entry: HistoryEntry) -> HistoryRecord:
        user_id = _require_subject(subject)
        record = self.store.insert(user_id, entry)
        logger.debug("Saved history record %s", record.id)
        return record

    def check_duplicate(self, subject: str | None, text_content: str) -> DuplicateCheck:
        user_id = _require_subject(subject)
        text = text_content.strip()
        if not text:
            return DuplicateCheck(is_duplicate=False)
        existing = self.store.find_by_text(user_id, text)
        return DuplicateCheck(is_duplicate=existing is not None, existing=existing)

    def delete(self, subject: str | None, record_id: str) -> None:
        user_id = _require_subject(subject)
        record = self.store.get(record_id)
        if record is None or record.user_id != user_id:
            raise QrAccessError("QR code not found or access denied")
        self.store.delete(record_id)

    def list(self, subject: str | None) -> list[HistoryRecord]:
        return self.store.list_for_user(_require_subject(subject))

    def search(self, subject: str | None, term: str) -> list[HistoryRecord]:
        return self.store.search(_require_subject(subject), term)

    def statistics(
        self,
        subject: str | None,
        *,
        now: datetime | None = None,
    ) -> HistoryStatistics:
        records = self.list(subject)
        today = start_of_day(now).timestamp()
        usage = Counter(record.settings.format for record in records)
        favorite = usage.most_common(1)[0][0] if usage else ImageFormat.PNG.value
        return HistoryStatistics(
            total_generated=len(records),
            today_generated=sum(1 for record in records if record.created_at >= today),
            favorite_format=favorite,
            format_usage=dict(usage),
            last_used=records[0].created_at if records else None,
        )
