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

from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta

from ..content.detect import filter_by_content_types
from ..core.models import ContentType
from .records import HistoryRecord

DATE_RANGES = ("all", "today", "week", "month", "year")
SORT_KEYS = ("date", "format", "size", "content")


def start_of_day(now: datetime | None = None) -> datetime:
    return (now or datetime.now()).replace(hour=0, minute=0, second=0, microsecond=0)


def range_start(date_range: str, now: datetime | None = None) -> datetime | None:
    """Local-time start of date_range; ``None`` for "all". Weeks start on Monday."""
    if date_range not in DATE_RANGES:
        raise ValueError(f"date_range must be one of {', '.join(DATE_RANGES)}")
    if date_range == "all":
        return None
    now = now or datetime.now()
    midnight = start_of_day(now)
    if date_range == "today":
        return midnight
    if date_range == "week":
        return midnight - timedelta(days=now.weekday())
    if date_range == "month":
        return midnight.replace(day=1)
    return midnight.replace(month=1, day=1)


def filter_by_date_range(
    records: Iterable[HistoryRecord],
    date_range: str,
    *,
    now: datetime | None = None,
) -> list[HistoryRecord]:
    start = range_start(date_range, now)
    if start is None:
        return list(records)
    threshold = start.timestamp()
    return [record for record in records if record.created_at >= threshold]


def filter_by_formats(
    records: Iterable[HistoryRecord],
    formats: Sequence[str],
) -> list[HistoryRecord]:
    if not formats:
        return list(records)
    wanted = {value.lower() for value in formats}
    return [record for record in records if record.settings.format.lower() in wanted]


def apply_filters(
    records: Iterable[HistoryRecord],
    *,
    date_range: str = "all",
    formats: Sequence[str] = (),
    content_types: Sequence[ContentType | str] = (),
    now: datetime | None = None,
) -> list[HistoryRecord]:
    filtered = filter_by_date_range(records, date_range, now=now)
    filtered = filter_by_formats(filtered, formats)
    return filter_by_content_types(filtered, content_types)


def format_breakdown(records: Iterable[HistoryRecord]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for record in records:
        fmt = record.settings.format.lower()
        counts[fmt] = counts.get(fmt, 0) + 1
    return counts


def sort_history(
    records: Iterable[HistoryRecord],
    sort_by: str = "date",
    *,
    descending: bool = True,
) -> list[HistoryRecord]:
    if sort_by not in SORT_KEYS:
        raise ValueError(f"sort_by must be one of {', '.join(SORT_KEYS)}")
    keys = {
        "date": lambda record: record.created_at,
        "format": lambda record: record.settings.format,
        "size": lambda record: record.settings.size,
        "content": lambda record: record.text_content,
    }
    return sorted(records, key=keys[sort_by], reverse=descending)
