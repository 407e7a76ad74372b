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

"""Framework-free handler for the server half of server-side rendering.

``RenderEndpoint.handle`` takes the decoded (or raw JSON) request body and the
client address and answers ``(status, body)``; mounting it on an HTTP server
is left to the host application.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time

import segno

from ..core.bounds import ENDPOINT_MAX_MARGIN, ENDPOINT_MAX_SIZE_PX, ENDPOINT_MAX_TEXT_CHARS
from ..core.models import ErrorCorrection, ImageFormat
from ..core.validation import is_valid_hex_color
from .codec import IMAGE_QUALITY, data_uri, qr_bytes, raster_edge, symbol_modules
from .ratelimit import RateLimiter

logger = logging.getLogger(__name__)

DEFAULT_MARGIN = 4
RESPONSE_METHOD = "server-side-api"
RESPONSE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
}

Response = tuple[int, dict[str, object]]


class RenderEndpoint:
    def __init__(
        self,
        *,
        limiter: RateLimiter | None = None,
        quality: float = IMAGE_QUALITY,
    ) -> None:
        self.limiter = limiter if limiter is not None else RateLimiter()
        self.quality = quality

    async def handle(self, payload: object, client_ip: str | None = None) -> Response:
        client = client_ip or "unknown"
        if not self.limiter.try_acquire(client):
            return _error(429, "Rate limit exceeded. Please try again later.")

        if isinstance(payload, (bytes, str)):
            try:
                payload = json.loads(payload)
            except ValueError:
                return _error(400, "Invalid JSON in request body")
        if not isinstance(payload, dict):
            return _error(400, "Invalid JSON in request body")

        text = payload.get("text")
        problem = _check_text(text)
        if problem:
            return _error(400, problem)
        options = payload.get("options") or {}
        if not isinstance(options, dict):
            return _error(400, "Options must be an object")
        try:
            settings = _clamp_options(options)
        except ValueError as exc:
            return _error(400, str(exc))

        try:
            image = await asyncio.to_thread(
                qr_bytes, text, quality=self.quality, **settings
            )
            modules = symbol_modules(text, margin=settings["margin"], error=settings["error"])
        except (segno.DataOverflowError, ValueError, OSError):
            logger.exception("Server QR generation error")
            return _error(500, "Internal server error during QR generation")

        size = settings["size"]
        if settings["kind"] != ImageFormat.SVG.value:
            size = raster_edge(size, modules)
        logger.info("Server QR generated: %dpx, %d chars", size, len(text))
        return 200, {
            "success": True,
            "dataUrl": data_uri(image, settings["kind"]),
            "format": settings["kind"],
            "size": size,
            "timestamp": int(time.time() * 1000),
            "method": RESPONSE_METHOD,
        }


def _check_text(text: object) -> str | None:
    if not isinstance(text, str) or not text:
        return "Text is required"
    if len(text) > ENDPOINT_MAX_TEXT_CHARS:
        return f"Text too long (max {ENDPOINT_MAX_TEXT_CHARS} characters)"
    return None


def _clamp_options(options: dict) -> dict[str, object]:
    size = _positive_int(options.get("size"), default=512, label="size")
    margin = _positive_int(options.get("margin"), default=DEFAULT_MARGIN, label="margin")
    error = options.get("errorCorrectionLevel") or ErrorCorrection.M.value
    if error not in {level.value for level in ErrorCorrection}:
        raise ValueError("errorCorrectionLevel must be one of L, M, Q, H")
    kind = options.get("format") or ImageFormat.PNG.value
    if kind not in {fmt.value for fmt in ImageFormat}:
        raise ValueError("format must be one of png, jpeg, webp, svg")
    dark = options.get("foreground") or "#000000"
    light = options.get("background") or "#ffffff"
    if not is_valid_hex_color(dark) or not is_valid_hex_color(light):
        raise ValueError("Invalid color format")
    return {
        "size": min(size, ENDPOINT_MAX_SIZE_PX),
        "margin": served_margin(margin),
        "error": error,
        "kind": kind,
        "dark": dark,
        "light": light,
    }


def served_margin(margin: int) -> int:
    """Quiet zone the endpoint actually renders for a requested margin.

    Zero selects the default and anything above ``ENDPOINT_MAX_MARGIN`` is clamped.
    """
    if margin == 0:
        return DEFAULT_MARGIN
    return min(margin, ENDPOINT_MAX_MARGIN)


def _positive_int(value: object, *, default: int, label: str) -> int:
    # Zero and missing both select the default.
    if value is None or value == 0:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"{label} must be a non-negative integer")
    return value


def _error(status: int, message: str) -> Response:
    return status, {"success": False, "error": message}
