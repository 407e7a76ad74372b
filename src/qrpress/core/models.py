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

from dataclasses import dataclass, field
from enum import Enum


class ContentType(str, Enum):
    TEXT = "text"
    URL = "url"
    EMAIL = "email"
    PHONE = "phone"
    WIFI = "wifi"
    VCARD = "vcard"
    EVENT = "event"
    LOCATION = "location"
    SMS = "sms"


class ImageFormat(str, Enum):
    PNG = "png"
    JPEG = "jpeg"
    WEBP = "webp"
    SVG = "svg"


class ErrorCorrection(str, Enum):
    L = "L"
    M = "M"
    Q = "Q"
    H = "H"


class GenerationMethod(str, Enum):
    SERVER_SIDE = "server-side"
    CLIENT_CANVAS = "client-canvas"
    CLIENT_SVG = "client-svg"
    FALLBACK = "fallback"


FieldValue = str | int | float | bool


@dataclass(frozen=True)
class GenerationOptions:
    """Caller-supplied overrides; ``None`` means "use the default"."""

    size: int | None = None
    margin: int | None = None
    error_correction: str | None = None
    foreground: str | None = None
    background: str | None = None
    format: str | None = None
    logo_url: str | None = None
    logo_size: int | None = None
    logo_background: bool | None = None
    pdf_password: str | None = None
    enable_pdf_password: bool | None = None


@dataclass(frozen=True)
class GenerationConfig:
    size: int = 512
    margin: int = 4
    error_correction: str = ErrorCorrection.M.value
    foreground: str = "#000000"
    background: str = "#ffffff"
    format: str = ImageFormat.PNG.value
    logo_url: str | None = None
    logo_size: int | None = None
    logo_background: bool = False

    def rendering_fields(self) -> dict[str, object]:
        return {
            "size": self.size,
            "margin": self.margin,
            "errorCorrectionLevel": self.error_correction,
            "format": self.format,
            "foreground": self.foreground,
            "background": self.background,
        }


def build_config(
    options: GenerationOptions | None = None,
    *,
    defaults: GenerationConfig | None = None,
) -> GenerationConfig:
    options = options or GenerationOptions()
    base = defaults or GenerationConfig()
    return GenerationConfig(
        size=base.size if options.size is None else options.size,
        margin=base.margin if options.margin is None else options.margin,
        error_correction=(
            base.error_correction
            if options.error_correction is None
            else options.error_correction.upper()
        ),
        foreground=base.foreground if options.foreground is None else options.foreground,
        background=base.background if options.background is None else options.background,
        format=base.format if options.format is None else options.format.lower(),
        logo_url=options.logo_url or base.logo_url,
        logo_size=base.logo_size if options.logo_size is None else options.logo_size,
        logo_background=(
            base.logo_background if options.logo_background is None else options.logo_background
        ),
    )


@dataclass(frozen=True)
class GenerationResult:
    data_url: str
    format: str
    size: int
    timestamp: float
    method: GenerationMethod
    browser_info: str = "unknown"
    svg_string: str | None = None
    warning: str | None = None

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "dataUrl": self.data_url,
            "format": self.format,
            "size": self.size,
            "timestamp": self.timestamp,
            "method": self.method.value,
        }
        if self.svg_string is not None:
            payload["svgString"] = self.svg_string
        if self.warning:
            payload["warning"] = self.warning
        return payload


@dataclass(frozen=True)
class ParsedContent:
    type: ContentType
    fields: dict[str, FieldValue]
    display_name: str

    @property
    def structured(self) -> bool:
        return True


@dataclass(frozen=True)
class UnparsedContent:
    """Best-effort result: the type was detected but its syntax did not parse."""

    type: ContentType
    original: str
    display_name: str
    fields: dict[str, FieldValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.fields:
            object.__setattr__(self, "fields", {"text": self.original})

    @property
    def structured(self) -> bool:
        return False


@dataclass(frozen=True)
class FormatValidation:
    is_valid: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    optimized_format: str | None = None


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
