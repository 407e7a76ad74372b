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

"""Rendering strategies the generation service chooses between.

Every strategy exposes ``method`` and ``async render(text, config)`` and raises
``QrRenderError`` (chained to the underlying failure) when it cannot produce
an image. CPU-bound encoding runs in a worker thread so the event loop keeps
serving other requests.
"""

from __future__ import annotations

import asyncio
import logging
import math
import time
from typing import Protocol

import httpx
import segno

from ..core.errors import QrRenderError
from ..core.models import GenerationConfig, GenerationMethod, GenerationResult, ImageFormat
from .codec import IMAGE_QUALITY, data_uri, native_edge, native_qr_bytes, qr_bytes, symbol_modules
from .endpoint import served_margin

logger = logging.getLogger(__name__)

DEFAULT_SERVER_TIMEOUT_SECONDS = 10.0

# Failures raised by segno (ValueError subclasses) and Pillow (OSError, ValueError).
_ENCODER_ERRORS = (segno.DataOverflowError, ValueError, OSError)


class RenderStrategy(Protocol):
    method: GenerationMethod

    async def render(self, text: str, config: GenerationConfig) -> GenerationResult: ...


class CanvasRenderer:
    """Raster output whose backing store is ``size x device_pixel_ratio`` pixels."""

    method = GenerationMethod.CLIENT_CANVAS

    def __init__(self, *, pixel_ratio: float = 1.0, quality: float = IMAGE_QUALITY) -> None:
        if pixel_ratio <= 0:
            raise ValueError("pixel_ratio must be positive")
        self.pixel_ratio = pixel_ratio
        self.quality = quality

    async def render(self, text: str, config: GenerationConfig) -> GenerationResult:
        if config.format == ImageFormat.SVG.value:
            raise QrRenderError("canvas rendering does not produce svg")
        try:
            payload, modules = await asyncio.to_thread(
                _with_modules,
                qr_bytes,
                text,
                size=config.size,
                margin=config.margin,
                error=config.error_correction,
                kind=config.format,
                dark=config.foreground,
                light=config.background,
                pixel_ratio=self.pixel_ratio,
                quality=self.quality,
            )
        except _ENCODER_ERRORS as exc:
            raise QrRenderError(f"Canvas generation failed: {exc}") from exc
        size = max(config.size, math.ceil(modules / self.pixel_ratio))
        if size != config.size:
            logger.warning(
                "QR symbol needs %d modules; rendered at %dpx instead of %dpx",
                modules,
                size,
                config.size,
            )
        return GenerationResult(
            data_url=data_uri(payload, config.format),
            format=config.format,
            size=size,
            timestamp=time.time(),
            method=self.method,
        )


class SvgRenderer:
    method = GenerationMethod.CLIENT_SVG

    async def render(self, text: str, config: GenerationConfig) -> GenerationResult:
        try:
            payload = await asyncio.to_thread(
                qr_bytes,
                text,
                size=config.size,
                margin=config.margin,
                error=config.error_correction,
                kind=ImageFormat.SVG.value,
                dark=config.foreground,
                light=config.background,
            )
        except _ENCODER_ERRORS as exc:
            raise QrRenderError(f"SVG generation failed: {exc}") from exc
        return GenerationResult(
            data_url=data_uri(payload, ImageFormat.SVG.value),
            format=ImageFormat.SVG.value,
            size=config.size,
            timestamp=time.time(),
            method=self.method,
            svg_string=payload.decode("utf-8"),
        )


class FallbackRenderer:
    """segno's own writers, no Pillow. JPEG and WebP requests degrade to PNG."""

    method = GenerationMethod.FALLBACK

    async def render(self, text: str, config: GenerationConfig) -> GenerationResult:
        kind = config.format
        warning = None
        if kind not in (ImageFormat.PNG.value, ImageFormat.SVG.value):
            warning = f"{kind} output is not available without raster support; produced png"
            logger.warning("Fallback renderer degraded %s output to png", kind)
            kind = ImageFormat.PNG.value
        try:
            payload, modules = await asyncio.to_thread(
                _with_modules,
                native_qr_bytes,
                text,
                size=config.size,
                margin=config.margin,
                error=config.error_correction,
                kind=kind,
                dark=config.foreground,
                light=config.background,
            )
        except _ENCODER_ERRORS as exc:
            raise QrRenderError(f"Fallback generation failed: {exc}") from exc
        return GenerationResult(
            data_url=data_uri(payload, kind),
            format=kind,
            size=native_edge(config.size, modules),
            timestamp=time.time(),
            method=self.method,
            svg_string=payload.decode("utf-8") if kind == ImageFormat.SVG.value else None,
            warning=warning,
        )


class ServerSideRenderer:
    """POST the request to a rendering endpoint and unwrap its JSON answer.

    The endpoint renders margin 0 with the default quiet zone and clamps margins
    above 10. Results for such requests carry a ``warning`` naming the margin that
    was actually used, and the service does not cache them.
    """

    method = GenerationMethod.SERVER_SIDE

    def __init__(
        self,
        endpoint: str,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_SERVER_TIMEOUT_SECONDS,
    ) -> None:
        if not endpoint:
            raise ValueError("endpoint is required")
        self.endpoint = endpoint
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def render(self, text: str, config: GenerationConfig) -> GenerationResult:
        request = {
            "text": text,
            "options": {
                "size": config.size,
                "margin": config.margin,
                "errorCorrectionLevel": config.error_correction,
                "foreground": config.foreground,
                "background": config.background,
                "format": config.format,
            },
        }
        try:
            response = await self._client.post(self.endpoint, json=request)
        except httpx.HTTPError as exc:
            raise QrRenderError(f"Server-side generation failed: {exc}") from exc

        body = _json_body(response)
        if not response.is_success:
            detail = body.get("error") or f"Server responded with {response.status_code}"
            raise QrRenderError(f"Server-side generation failed: {detail}")
        if not body.get("success") or not isinstance(body.get("dataUrl"), str):
            detail = body.get("error") or "Server-side generation failed"
            raise QrRenderError(f"Server-side generation failed: {detail}")

        warning = None
        margin = served_margin(config.margin)
        if margin != config.margin:
            warning = f"Server rendered margin {margin} instead of {config.margin}"
            logger.warning("Server-side rendering changed margin %d to %d", config.margin, margin)
        return GenerationResult(
            data_url=body["dataUrl"],
            format=config.format,
            size=int(body.get("size") or config.size),
            timestamp=_timestamp(body.get("timestamp")),
            method=self.method,
            browser_info="server-generated",
            warning=warning,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


def _json_body(response: httpx.Response) -> dict:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _timestamp(value: object) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        # Endpoints written for browsers answer in milliseconds.
        return value / 1000 if value > 1e11 else float(value)
    return time.time()


def _with_modules(encode, text: str, **kwargs) -> tuple[bytes, int]:
    modules = symbol_modules(text, margin=kwargs["margin"], error=kwargs["error"])
    return encode(text, **kwargs), modules
