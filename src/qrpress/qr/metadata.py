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
from dataclasses import dataclass
from datetime import datetime, timezone

from ..core.bounds import LARGE_DATA_URL_BYTES
from ..core.models import ErrorCorrection, GenerationResult

_SIGNATURES = {
    "png": (b"\x89PNG\r\n\x1a\n",),
    "jpeg": (b"\xff\xd8\xff",),
}


@dataclass(frozen=True)
class QrMetadata:
    text: str
    size: int
    format: str
    error_correction: str
    generated_at: datetime
    file_size: int


@dataclass(frozen=True)
class DataUrlInfo:
    is_valid: bool
    format: str
    mime_type: str
    size: int
    is_corrupted: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


def estimate_file_size(data_url: str) -> int:
    """Decoded byte count implied by the base64 payload length."""
    _header, _sep, encoded = data_url.partition(",")
    return round(len(encoded) * 3 / 4)


def extract_metadata(
    text: str,
    result: GenerationResult,
    *,
    error_correction: str = ErrorCorrection.M.value,
) -> QrMetadata:
    return QrMetadata(
        text=text,
        size=result.size,
        format=result.format,
        error_correction=error_correction,
        generated_at=datetime.fromtimestamp(result.timestamp, tz=timezone.utc),
        file_size=estimate_file_size(result.data_url),
    )


def inspect_data_url(data_url: object) -> DataUrlInfo:
    """Check a data URL's header, base64 payload and image signature."""
    if not isinstance(data_url, str) or not data_url:
        return _invalid("Data URL is required and must be a string")
    if not data_url.startswith("data:"):
        return _invalid('Invalid data URL format - must start with "data:"')
    header, _sep, encoded = data_url.partition(",")
    if not encoded:
        return _invalid("Malformed data URL - missing header or data")
    mime_type = header[len("data:") :].split(";", 1)[0]
    if not mime_type:
        return _invalid("Cannot extract MIME type from data URL")
    image_format = format_from_mime(mime_type)
    try:
        payload = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError):
        return _invalid("Invalid base64 encoding in data URL", image_format, mime_type)

    errors: list[str] = []
    warnings: list[str] = []
    corrupted = _looks_corrupted(payload, image_format)
    if corrupted:
        errors.append(f"Potential {image_format.upper()} corruption detected")
    if len(payload) > LARGE_DATA_URL_BYTES:
        warnings.append("Large data URL size may cause performance issues")
    return DataUrlInfo(
        is_valid=not errors,
        format=image_format,
        mime_type=mime_type,
        size=len(payload),
        is_corrupted=corrupted,
        errors=tuple(errors),
        warnings=tuple(warnings),
    )


def format_from_mime(mime_type: str) -> str:
    subtype = mime_type.rpartition("/")[2].lower()
    if subtype in ("jpg", "jpeg"):
        return "jpeg"
    if subtype.startswith("svg"):
        return "svg"
    return subtype or "unknown"


def _looks_corrupted(payload: bytes, image_format: str) -> bool:
    if not payload:
        return True
    if image_format == "webp":
        return not (payload[:4] == b"RIFF" and payload[8:12] == b"WEBP")
    if image_format == "svg":
        return b"<svg" not in payload[:4096]
    signatures = _SIGNATURES.get(image_format)
    if signatures is None:
        return False
    return not payload.startswith(signatures)


def _invalid(message: str, image_format: str = "", mime_type: str = "") -> DataUrlInfo:
    return DataUrlInfo(
        is_valid=False,
        format=image_format,
        mime_type=mime_type,
        size=0,
        is_corrupted=True,
        errors=(message,),
    )
