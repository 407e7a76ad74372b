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

"""Guest-mode storage: presets, usage stats and usage events in one JSON file."""

from __future__ import annotations

import json
import logging
import os
import sys
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field, fields
from pathlib import Path

from platformdirs import user_data_dir

from ..core.models import GenerationOptions

logger = logging.getLogger(__name__)

XDG_DATA_ENV = "XDG_DATA_HOME"
STORAGE_FILENAME = "storage.json"
MAX_USAGE_EVENTS = 1000
USAGE_EVENT_TYPES = (
    "qr_generated",
    "pdf_downloaded",
    "image_downloaded",
    "preset_saved",
    "preset_loaded",
)
_SECONDS_PER_DAY = 86_400
_OPTION_FIELDS = tuple(item.name for item in fields(GenerationOptions))


def default_storage_path() -> Path:
    xdg_override = os.environ.get(XDG_DATA_ENV)
    if xdg_override:
        return Path(xdg_override) / "qrpress" / STORAGE_FILENAME
    if sys.platform == "darwin":
        return Path.home() / ".local" / "share" / "qrpress" / STORAGE_FILENAME
    return Path(user_data_dir("qrpress", appauthor=False)) / STORAGE_FILENAME


def options_to_dict(options: GenerationOptions) -> dict[str, object]:
    return {
        name: getattr(options, name)
        for name in _OPTION_FIELDS
        if getattr(options, name) is not None and name != "pdf_password"
    }


def options_from_dict(values: dict[str, object]) -> GenerationOptions:
    known = {key: value for key, value in values.items() if key in _OPTION_FIELDS}
    return GenerationOptions(**known)  # type: ignore[arg-type]


@dataclass(frozen=True)
class Preset:
    id: str
    name: str
    options: GenerationOptions
    created_at: float
    updated_at: float


@dataclass(frozen=True)
class UsageStats:
    total_generated: int = 0
    format_usage: dict[str, int] = field(default_factory=dict)
    last_generated: float | None = None

    @property
    def favorite_format(self) -> str:
        if not self.format_usage:
            return "png"
        return max(self.format_usage.items(), key=lambda item: item[1])[0]


@dataclass(frozen=True)
class UsageEvent:
    type: str
    timestamp: float
    metadata: dict[str, object] = field(default_factory=dict)


class LocalStore:
    def __init__(
        self,
        path: str | Path | None = None,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.path = Path(path) if path is not None else default_storage_path()
        self._clock = clock

    # presets

    def presets(self) -> list[Preset]:
        return [_preset_from_raw(raw) for raw in self._load()["presets"]]

    def find_preset(self, key: str) -> Preset | None:
        for preset in self.presets():
            if preset.id == key or preset.name == key:
                return preset
        return None

    def save_preset(self, name: str, options: GenerationOptions) -> Preset:
        name = name.strip()
        if not name:
            raise ValueError("preset name cannot be empty")
        now = self._clock()
        preset = Preset(
            id=uuid.uuid4().hex[:12],
            name=name,
            options=options,
            created_at=now,
            updated_at=now,
        )
        data = self._load()
        data["presets"].append(_preset_to_raw(preset))
        self._save(data)
        self.record_event("preset_saved")
        return preset

    def update_preset(
        self,
        preset_id: str,
        *,
        name: str | None = None,
        options: GenerationOptions | None = None,
    ) -> Preset:
        data = self._load()
        for index, raw in enumerate(data["presets"]):
            if raw.get("id") != preset_id:
                continue
            current = _preset_from_raw(raw)
            updated = Preset(
                id=current.id,
                name=name.strip() if name else current.name,
                options=options or current.options,
                created_at=current.created_at,
                updated_at=self._clock(),
            )
            data["presets"][index] = _preset_to_raw(updated)
            self._save(data)
            return updated
        raise LookupError(f"preset not found: {preset_id}")

    def delete_preset(self, preset_id: str) -> bool:
        data = self._load()
        remaining = [raw for raw in data["presets"] if raw.get("id") != preset_id]
        if len(remaining) == len(data["presets"]):
            return False
        data["presets"] = remaining
        self._save(data)
        return True

    # usage

    def usage_stats(self) -> UsageStats:
        raw = self._load()["usage_stats"]
        return UsageStats(
            total_generated=int(raw.get("total_generated", 0)),
            format_usage={str(k): int(v) for k, v in raw.get("format_usage", {}).items()},
            last_generated=raw.get("last_generated"),
        )

    def record_generation(
        self,
        *,
        image_format: str,
        size: int,
        error_correction: str,
        text_length: int,
        has_logo: bool = False,
    ) -> UsageStats:
        now = self._clock()
        data = self._load()
        stats = data["usage_stats"]
        stats["total_generated"] = int(stats.get("total_generated", 0)) + 1
        usage = stats.setdefault("format_usage", {})
        usage[image_format] = int(usage.get(image_format, 0)) + 1
        stats["last_generated"] = now
        _append_event(
            data,
            UsageEvent(
                type="qr_generated",
                timestamp=now,
                metadata={
                    "format": image_format,
                    "size": size,
                    "errorCorrectionLevel": error_correction,
                    "hasLogo": has_logo,
                    "textLength": text_length,
                },
            ),
        )
        self._save(data)
        return self.usage_stats()

    def record_event(self, event_type: str, **metadata: object) -> UsageEvent:
        if event_type not in USAGE_EVENT_TYPES:
            raise ValueError(f"unknown usage event type: {event_type}")
        event = UsageEvent(type=event_type, timestamp=self._clock(), metadata=dict(metadata))
        data = self._load()
        _append_event(data, event)
        self._save(data)
        return event

    def usage_events(self) -> list[UsageEvent]:
        return [
            UsageEvent(
                type=str(raw.get("type", "")),
                timestamp=float(raw.get("timestamp", 0.0)),
                metadata=dict(raw.get("metadata") or {}),
            )
            for raw in self._load()["usage_events"]
        ]

    def clear_old_events(self, days: int = 30) -> int:
        """Drop events older than ``days`` days and return how many were removed."""
        if days < 0:
            raise ValueError("days must be non-negative")
        cutoff = self._clock() - days * _SECONDS_PER_DAY
        data = self._load()
        events = data["usage_events"]
        kept = [raw for raw in events if float(raw.get("timestamp", 0.0)) > cutoff]
        data["usage_events"] = kept
        self._save(data)
        return len(events) - len(kept)

    def clear_all(self) -> None:
        if self.path.exists():
            self.path.unlink()

    # persistence

    def _load(self) -> dict:
        data: dict = {}
        if self.path.exists():
            try:
                data = json.loads(self.path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as exc:
                logger.warning("Ignoring unreadable storage file %s: %s", self.path, exc)
                data = {}
            if not isinstance(data, dict):
                logger.warning("Ignoring malformed storage file %s", self.path)
                data = {}
        data.setdefault("presets", [])
        data.setdefault("usage_stats", {})
        data.setdefault("usage_events", [])
        return data

    def _save(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        tmp_path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
        os.replace(tmp_path, self.path)


def _append_event(data: dict, event: UsageEvent) -> None:
    events = data["usage_events"]
    events.append({"type": event.type, "timestamp": event.timestamp, "metadata": event.metadata})
    if len(events) > MAX_USAGE_EVENTS:
        del events[: len(events) - MAX_USAGE_EVENTS]


def _preset_to_raw(preset: Preset) -> dict[str, object]:
    return {
        "id": preset.id,
        "name": preset.name,
        "options": options_to_dict(preset.options),
        "created_at": preset.created_at,
        "updated_at": preset.updated_at,
    }


def _preset_from_raw(raw: dict) -> Preset:
    return Preset(
        id=str(raw["id"]),
        name=str(raw["name"]),
        options=options_from_dict(dict(raw.get("options") or {})),
        created_at=float(raw.get("created_at", 0.0)),
        updated_at=float(raw.get("updated_at", 0.0)),
    )
