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

import base64
import binascii
import io
from typing import Any

import segno
from PIL import Image, ImageColor

# JPEG and WebP encoder quality on the 0..1 scale.
IMAGE_QUALITY = 0.92

MIME_TYPES = {
    "png": "image/png",
    "jpeg": "image/jpeg",
    "webp": "image/webp",
    "svg": "image/svg+xml",
}
_PIL_FORMATS = {"png": "PNG", "jpeg": "JPEG", "webp": "WEBP"}

Color = str | tuple[int, int, int] | tuple[int, int, int, int] | None


def make_qr(data: bytes | str, *, error: str = "M") -> Any:
    # Fixed level and full-size symbols so the requested settings are what gets encoded.
    return segno.make(data, error=error, micro=False, boost_error=False)


def qr_bytes(
    data: bytes | str,
    *,
    size: int = 512,
    margin: int = 4,
    error: str = "M",
    kind: str = "png",
    dark: Color = None,
    light: Color = None,
    pixel_ratio: float = 1.0,
    quality: float = IMAGE_QUALITY,
) -> bytes:
    """Encode data as a QR image whose edge is ``raster_edge(...)`` pixels.

    That is ``size * pixel_ratio`` unless the symbol and its quiet zone have more
    modules than that, in which case each module gets one pixel.

    SVG output is vector and scaled to ``size`` user units; the pixel ratio
    only applies to raster kinds.
    """
    kind = kind.strip().lower()
    if kind not in MIME_TYPES:
        raise ValueError(f"unsupported image kind: {kind}")
    if pixel_ratio <= 0:
        raise ValueError("pixel_ratio must be positive")
    qr = make_qr(data, error=error)
    if kind == "svg":
        return _svg_bytes(qr, size=size, margin=margin, dark=dark, light=light)

    modules, _ = qr.symbol_size(scale=1, border=margin)
    target = raster_edge(size, modules, pixel_ratio=pixel_ratio)
    image = _render_raster(qr, border=margin, target=target, dark=dark, light=light)
    return _encode_image(image, kind=kind, quality=quality)


def native_qr_bytes(
    data: bytes | str,
    *,
    size: int = 512,
    margin: int = 4,
    error: str = "M",
    kind: str = "png",
    dark: Color = None,
    light: Color = None,
) -> bytes:
    """Encode with segno's own writers only (PNG or SVG, integer module scale).

    The edge is ``native_edge(size, modules)``, which can be smaller than ``size``.
    """
    kind = kind.strip().lower()
    if kind not in ("png", "svg"):
        raise ValueError(f"native writer does not support: {kind}")
    qr = make_qr(data, error=error)
    modules, _ = qr.symbol_size(scale=1, border=margin)
    buf = io.BytesIO()
    qr.save(
        buf,
        kind=kind,
        scale=native_edge(size, modules) // modules,
        border=margin,
        **_segno_color_kwargs(dark=dark, light=light),
    )
    return buf.getvalue()


def symbol_modules(data: bytes | str, *, margin: int = 4, error: str = "M") -> int:
    """Edge of the symbol plus quiet zone, in modules."""
    modules, _ = make_qr(data, error=error).symbol_size(scale=1, border=margin)
    return modules


def raster_edge(size: int, modules: int, *, pixel_ratio: float = 1.0) -> int:
    # At least one pixel per module.
    return max(1, round(size * pixel_ratio), modules)


def native_edge(size: int, modules: int) -> int:
    return max(1, size // modules) * modules


def data_uri(payload: bytes, kind: str) -> str:
    mime = MIME_TYPES[kind.strip().lower()]
    return f"data:{mime};base64,{base64.b64encode(payload).decode('ascii')}"


def decode_data_uri(url: str) -> tuple[str, bytes]:
    """Split a base64 data URL into (mime type, decoded bytes)."""
    header, sep, encoded = url.partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise ValueError("not a base64 data URL")
    mime = header[len("data:") : -len(";base64")]
    try:
        payload = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError("data URL payload is not valid base64") from exc
    return mime, payload


def _svg_bytes(qr: Any, *, size: int, margin: int, dark: Color, light: Color) -> bytes:
    modules, _ = qr.symbol_size(scale=1, border=margin)
    buf = io.BytesIO()
    qr.save(
        buf,
        kind="svg",
        scale=size / modules,
        border=margin,
        xmldecl=False,
        **_segno_color_kwargs(dark=dark, light=light),
    )
    return buf.getvalue()


def _render_raster(
    qr: Any,
    *,
    border: int,
    target: int,
    dark: Color,
    light: Color,
) -> Image.Image:
    light_rgba = _color_to_rgba(light, (255, 255, 255, 255))
    dark_rgba = _color_to_rgba(dark, (0, 0, 0, 255))

    width, height = qr.symbol_size(scale=1, border=border)
    image = Image.new("RGBA", (width, height), light_rgba)
    pixels = image.load()
    for row_idx, row in enumerate(qr.matrix_iter(scale=1, border=border)):
        for col_idx, is_dark in enumerate(row):
            if is_dark:
                pixels[col_idx, row_idx] = dark_rgba
    return image.resize((target, target), Image.Resampling.NEAREST)


def _encode_image(image: Image.Image, *, kind: str, quality: float) -> bytes:
    buf = io.BytesIO()
    if kind == "png":
        image.save(buf, format="PNG")
    else:
        if kind == "jpeg":
            image = image.convert("RGB")
        image.save(buf, format=_PIL_FORMATS[kind], quality=_pil_quality(quality))
    return buf.getvalue()


def _pil_quality(quality: float) -> int:
    return max(1, min(100, int(round(quality * 100))))


def _color_to_rgba(
    value: object,
    fallback: tuple[int, int, int, int],
) -> tuple[int, int, int, int]:
    normalized = _normalize_color_value(value)
    if normalized is None:
        return fallback
    if isinstance(normalized, str):
        if normalized.lower() in ("none", "transparent"):
            return fallback
        rgb = ImageColor.getcolor(normalized, "RGBA")
        if isinstance(rgb, int):
            return (rgb, rgb, rgb, 255)
        return (int(rgb[0]), int(rgb[1]), int(rgb[2]), int(rgb[3]))
    if isinstance(normalized, (tuple, list)):
        if len(normalized) == 3:
            return (int(normalized[0]), int(normalized[1]), int(normalized[2]), 255)
        if len(normalized) == 4:
            return (
                int(normalized[0]),
                int(normalized[1]),
                int(normalized[2]),
                int(normalized[3]),
            )
    return fallback


def _segno_color_kwargs(**values: object) -> dict[str, object]:
    style: dict[str, object] = {}
    for key, value in values.items():
        normalized = _normalize_color_value(value)
        if normalized is None:
            continue
        style[key] = normalized
    return style


def _normalize_color_value(value: object) -> object | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip()
    return value
