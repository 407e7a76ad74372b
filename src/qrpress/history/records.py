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

from dataclasses import dataclass

from ..core.models import GenerationConfig, GenerationResult


@dataclass(frozen=True)
class QrSettings:
    size: int
    margin: int
    error_correction: str
    foreground: str
    background: str
    format: str
    logo_url: str | None = None
    logo_size: int | None = None
    logo_background: bool | None = None

    @classmethod
    def from_config(cls, config: GenerationConfig) -> QrSettings:
        return cls(
            size=config.size,
            margin=config.margin,
            error_correction=config.error_correction,
            foreground=config.foreground,
            background=config.background,
            format=config.format,
            logo_url=config.logo_url,
            logo_size=config.logo_size,
            logo_background=config.logo_background if config.logo_url else None,
        )


@dataclass(frozen=True)
class HistoryEntry:
    """What a caller submits; the store adds identity and timestamps."""

    text_content: str
    settings: QrSettings
    generation_method: str | None = None
    browser_info: str | None = None


@dataclass(frozen=True)
class HistoryRecord:
    id: str
    user_id: str
    text_content: str
    settings: QrSettings
    created_at: float
    updated_at: float
    generation_method: str | None = None
    browser_info: str | None = None


@dataclass(frozen=True)
class DuplicateCheck:
    is_duplicate: bool
    existing: HistoryRecord | None = None


@dataclass(frozen=True)
class HistoryStatistics:
    total_generated: int
    today_generated: int
    favorite_format: str
    format_usage: dict[str, int]
    last_used: float | None


def build_history_entry(
    text: str,
    config: GenerationConfig,
    result: GenerationResult | None = None,
) -> HistoryEntry:
    return HistoryEntry(
        text_content=text,
        settings=QrSettings.from_config(config),
        generation_method=result.method.value if result is not None else None,
        browser_info=result.browser_info if result is not None else None,
    )
