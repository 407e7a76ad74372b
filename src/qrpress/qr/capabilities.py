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

from ..core.models import GenerationMethod, ImageFormat

# Browsers that block or randomise canvas readback.
PRIVACY_BROWSERS = ("librewolf", "tor browser", "brave", "duckduckgo")


def is_privacy_browser(user_agent: str) -> bool:
    lowered = user_agent.lower()
    return any(name in lowered for name in PRIVACY_BROWSERS)


@dataclass(frozen=True)
class Capabilities:
    """What the calling environment can do, supplied by the caller."""

    supports_canvas: bool = True
    user_agent: str = ""
    device_pixel_ratio: float = 1.0
    server_available: bool = False

    def __post_init__(self) -> None:
        if self.device_pixel_ratio <= 0:
            raise ValueError("device_pixel_ratio must be positive")

    @property
    def is_privacy_browser(self) -> bool:
        return is_privacy_browser(self.user_agent)

    def summary(self, method: GenerationMethod | None = None) -> str:
        chosen = method or select_method(self, ImageFormat.PNG.value)
        return (
            f"Canvas: {self.supports_canvas}, Privacy: {self.is_privacy_browser}, "
            f"Method: {chosen.value}"
        )


def select_method(capabilities: Capabilities, image_format: str) -> GenerationMethod:
    if image_format == ImageFormat.SVG.value:
        return GenerationMethod.CLIENT_SVG
    if capabilities.is_privacy_browser or not capabilities.supports_canvas:
        if capabilities.server_available:
            return GenerationMethod.SERVER_SIDE
        return GenerationMethod.FALLBACK
    return GenerationMethod.CLIENT_CANVAS
