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

"""Per-user QR history: records, store, filters and the service over them."""

from .filters import (
    apply_filters,
    filter_by_date_range,
    filter_by_formats,
    format_breakdown,
    range_start,
    sort_history,
)
from .records import (
    DuplicateCheck,
    HistoryEntry,
    HistoryRecord,
    HistoryStatistics,
    QrSettings,
    build_history_entry,
)
from .service import HistoryService
from .store import HistoryStore, InMemoryHistoryStore

__all__ = [
    "DuplicateCheck",
    "HistoryEntry",
    "HistoryRecord",
    "HistoryService",
    "HistoryStatistics",
    "HistoryStore",
    "InMemoryHistoryStore",
    "QrSettings",
    "apply_filters",
    "build_history_entry",
    "filter_by_date_range",
    "filter_by_formats",
    "format_breakdown",
    "range_start",
    "sort_history",
]
