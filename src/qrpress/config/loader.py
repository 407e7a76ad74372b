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

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from ..core.bounds import (
    CACHE_SWEEP_THRESHOLD,
    CACHE_TTL_SECONDS,
    MAX_MARGIN,
    MAX_SIZE_PX,
    MIN_MARGIN,
    MIN_SIZE_PX,
    RATE_LIMIT_MAX_REQUESTS,
    RATE_LIMIT_WINDOW_SECONDS,
)
from ..core.models import ErrorCorrection, GenerationConfig, ImageFormat
from ..core.validation import is_valid_hex_color
from ..qr.codec import IMAGE_QUALITY
from .installer import resolve_config_path

DEFAULT_SERVER_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class CacheSettings:
    ttl_seconds: int = CACHE_TTL_SECONDS
    sweep_threshold: int = CACHE_SWEEP_THRESHOLD


@dataclass(frozen=True)
class ServerSettings:
    endpoint: str | None = None
    timeout_seconds: float = DEFAULT_SERVER_TIMEOUT_SECONDS


@dataclass(frozen=True)
class RateLimitSettings:
    enabled: bool = True
    max_requests: int = RATE_LIMIT_MAX_REQUESTS
    window_seconds: int = RATE_LIMIT_WINDOW_SECONDS


@dataclass(frozen=True)
class CapabilitySettings:
    supports_canvas: bool = True
    user_agent: str = ""
    device_pixel_ratio: float = 1.0


@dataclass(frozen=True)
class UiDefaults:
    quiet: bool = False
    no_color: bool = False


@dataclass(frozen=True)
class AppConfig:
    qr: GenerationConfig = field(default_factory=GenerationConfig)
    quality: float = IMAGE_QUALITY
    cache: CacheSettings = field(default_factory=CacheSettings)
    server: ServerSettings = field(default_factory=ServerSettings)
    rate_limit: RateLimitSettings = field(default_factory=RateLimitSettings)
    capabilities: CapabilitySettings = field(default_factory=CapabilitySettings)
    ui: UiDefaults = field(default_factory=UiDefaults)
    source: Path | None = None


def load_app_config(path: str | Path | None = None) -> AppConfig:
    config_path = resolve_config_path(path)
    data = _load_toml(config_path)
    qr_section = _get_dict(data, "qr")
    return AppConfig(
        qr=build_generation_config(qr_section),
        quality=_parse_quality(qr_section.get("quality"), field="qr.quality"),
        cache=_parse_cache(_get_dict(data, "cache")),
        server=_parse_server(_get_dict(data, "server")),
        rate_limit=_parse_rate_limit(_get_dict(data, "rate_limit")),
        capabilities=_parse_capabilities(_get_dict(data, "capabilities")),
        ui=_parse_ui_defaults(_get_dict(data, "ui")),
        source=config_path,
    )


def build_generation_config(cfg: dict[str, object] | None = None) -> GenerationConfig:
    cfg = cfg or {}
    base = GenerationConfig()
    size = _parse_int_in_range(
        cfg.get("size"), field="qr.size", default=base.size, min_val=MIN_SIZE_PX, max_val=MAX_SIZE_PX
    )
    margin = _parse_int_in_range(
        cfg.get("margin"), field="qr.margin", default=base.margin, min_val=MIN_MARGIN, max_val=MAX_MARGIN
    )
    error = _parse_choice(
        cfg.get("error"),
        field="qr.error",
        default=base.error_correction,
        choices=[level.value for level in ErrorCorrection],
        upper=True,
    )
    image_format = _parse_choice(
        cfg.get("format"),
        field="qr.format",
        default=base.format,
        choices=[fmt.value for fmt in ImageFormat],
    )
    return GenerationConfig(
        size=size,
        margin=margin,
        error_correction=error,
        foreground=_parse_hex_color(cfg.get("foreground"), field="qr.foreground", default=base.foreground),
        background=_parse_hex_color(cfg.get("background"), field="qr.background", default=base.background),
        format=image_format,
    )


def _parse_cache(cfg: dict[str, object]) -> CacheSettings:
    return CacheSettings(
        ttl_seconds=_parse_positive_int(
            cfg.get("ttl_seconds"), field="cache.ttl_seconds", default=CACHE_TTL_SECONDS
        ),
        sweep_threshold=_parse_positive_int(
            cfg.get("sweep_threshold"),
            field="cache.sweep_threshold",
            default=CACHE_SWEEP_THRESHOLD,
        ),
    )


def _parse_server(cfg: dict[str, object]) -> ServerSettings:
    return ServerSettings(
        endpoint=_parse_optional_unset_str(cfg.get("endpoint"), field="server.endpoint"),
        timeout_seconds=_parse_positive_float(
            cfg.get("timeout_seconds"),
            field="server.timeout_seconds",
            default=DEFAULT_SERVER_TIMEOUT_SECONDS,
        ),
    )


def _parse_rate_limit(cfg: dict[str, object]) -> RateLimitSettings:
    return RateLimitSettings(
        enabled=_parse_bool(cfg.get("enabled"), field="rate_limit.enabled", default=True),
        max_requests=_parse_positive_int(
            cfg.get("max_requests"),
            field="rate_limit.max_requests",
            default=RATE_LIMIT_MAX_REQUESTS,
        ),
        window_seconds=_parse_positive_int(
            cfg.get("window_seconds"),
            field="rate_limit.window_seconds",
            default=RATE_LIMIT_WINDOW_SECONDS,
        ),
    )


def _parse_capabilities(cfg: dict[str, object]) -> CapabilitySettings:
    user_agent = cfg.get("user_agent")
    if user_agent is not None and not isinstance(user_agent, str):
        raise ValueError("capabilities.user_agent must be a string")
    return CapabilitySettings(
        supports_canvas=_parse_bool(
            cfg.get("supports_canvas"), field="capabilities.supports_canvas", default=True
        ),
        user_agent=(user_agent or "").strip(),
        device_pixel_ratio=_parse_positive_float(
            cfg.get("device_pixel_ratio"),
            field="capabilities.device_pixel_ratio",
            default=1.0,
        ),
    )


def _parse_ui_defaults(cfg: dict[str, object]) -> UiDefaults:
    return UiDefaults(
        quiet=_parse_bool(cfg.get("quiet"), field="ui.quiet", default=False),
        no_color=_parse_bool(cfg.get("no_color"), field="ui.no_color", default=False),
    )


def _load_toml(path: Path) -> dict[str, object]:
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _get_dict(data: dict[str, object], key: str) -> dict[str, object]:
    value = data.get(key)
    if isinstance(value, dict):
        return value
    return {}


def _parse_optional_unset_str(value: object, *, field: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"{field} must be a string")
    normalized = value.strip()
    return normalized or None


def _parse_bool(value: object, *, field: str, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        if value in (0, 1):
            return bool(value)
        raise ValueError(f"{field} must be a boolean")
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
        raise ValueError(f"{field} must be a boolean")
    raise ValueError(f"{field} must be a boolean")


def _parse_int_strict(value: object, *, field: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{field} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"{field} must be an integer")
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError(f"{field} must be an integer")
        try:
            return int(text)
        except ValueError as exc:
            raise ValueError(f"{field} must be an integer") from exc
    raise ValueError(f"{field} must be an integer")


def _parse_positive_int(value: object, *, field: str, default: int) -> int:
    if value is None:
        return default
    parsed = _parse_int_strict(value, field=field)
    if parsed <= 0:
        raise ValueError(f"{field} must be a positive integer")
    return parsed


def _parse_int_in_range(
    value: object,
    *,
    field: str,
    default: int,
    min_val: int,
    max_val: int,
) -> int:
    if value is None:
        return default
    parsed = _parse_int_strict(value, field=field)
    if not min_val <= parsed <= max_val:
        raise ValueError(f"{field} must be between {min_val} and {max_val}")
    return parsed


def _parse_positive_float(value: object, *, field: str, default: float) -> float:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{field} must be a positive number")
    if value <= 0:
        raise ValueError(f"{field} must be a positive number")
    return float(value)


def _parse_quality(value: object, *, field: str) -> float:
    quality = _parse_positive_float(value, field=field, default=IMAGE_QUALITY)
    if quality > 1:
        raise ValueError(f"{field} must be between 0 and 1")
    return quality


def _parse_choice(
    value: object,
    *,
    field: str,
    default: str,
    choices: list[str],
    upper: bool = False,
) -> str:
    if value is None:
        return default
    if not isinstance(value, str):
        raise ValueError(f"{field} must be one of {', '.join(choices)}")
    normalized = value.strip().upper() if upper else value.strip().lower()
    if normalized not in choices:
        raise ValueError(f"{field} must be one of {', '.join(choices)}")
    return normalized


def _parse_hex_color(value: object, *, field: str, default: str) -> str:
    if value is None:
        return default
    if not is_valid_hex_color(value):
        raise ValueError(f"{field} must be a hex color like #000000")
    return str(value)
