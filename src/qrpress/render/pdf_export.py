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

import io
import logging
import secrets
from pathlib import Path
from typing import Any, cast

from fpdf import FPDF, XPos, YPos
from PIL import Image

from ..content.detect import describe, detect
from ..content.parse import parse
from ..core.models import GenerationConfig, GenerationResult, ImageFormat
from ..core.validation import validate_pdf_password
from ..qr.codec import decode_data_uri, qr_bytes

logger = logging.getLogger(__name__)

PAPER_FORMATS = {"A4": "A4", "LETTER": "Letter"}
DEFAULT_TITLE = "QR Code"

_PAGE_MARGIN_MM = 20.0
_MAX_QR_MM = 120.0
_FONT = "Helvetica"


def export_pdf(
    result: GenerationResult,
    text: str,
    path: str | Path,
    *,
    title: str | None = None,
    paper: str = "A4",
    password: str | None = None,
    config: GenerationConfig | None = None,
) -> Path:
    """Write a one-page PDF with the QR image and the parsed payload fields.

    SVG results are re-rendered to PNG with ``config`` (or the defaults). When
    ``password`` is given the document is encrypted with it as the user password.
    """
    if not text or not text.strip():
        raise ValueError("text cannot be empty")
    if not result.data_url:
        raise ValueError("result has no image data")
    paper_key = paper.strip().upper()
    if paper_key not in PAPER_FORMATS:
        raise ValueError(f"unknown paper size: {paper}")
    if password is not None:
        problems = validate_pdf_password(password)
        if problems:
            raise ValueError(", ".join(problems))

    png = _result_png(result, text, config or GenerationConfig())

    pdf = FPDF(unit="mm", format=cast(Any, PAPER_FORMATS[paper_key]))
    pdf.set_auto_page_break(True, margin=_PAGE_MARGIN_MM)
    pdf.set_margins(_PAGE_MARGIN_MM, _PAGE_MARGIN_MM, _PAGE_MARGIN_MM)
    pdf.set_title(_latin1(title or DEFAULT_TITLE))
    pdf.set_creator("qrpress")
    if password is not None:
        pdf.set_encryption(owner_password=secrets.token_urlsafe(24), user_password=password)
    pdf.add_page()

    pdf.set_font(_FONT, style="B", size=18)
    pdf.cell(0, _line_height(pdf), _latin1(title or DEFAULT_TITLE), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_font(_FONT, size=11)
    pdf.set_text_color(90, 90, 90)
    pdf.cell(0, _line_height(pdf), describe(detect(text)), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_text_color(0, 0, 0)

    content_width = pdf.w - 2 * _PAGE_MARGIN_MM
    qr_mm = min(content_width, _MAX_QR_MM)
    top = pdf.get_y() + 6
    pdf.image(io.BytesIO(png), x=(pdf.w - qr_mm) / 2, y=top, w=qr_mm, h=qr_mm)
    pdf.set_y(top + qr_mm + 8)

    _draw_fields(pdf, parse(text).fields)
    out = Path(path)
    pdf.output(str(out))
    logger.debug("Wrote PDF to %s", out)
    return out


def _result_png(result: GenerationResult, text: str, config: GenerationConfig) -> bytes:
    if result.format == ImageFormat.SVG.value:
        return qr_bytes(
            text,
            size=result.size,
            margin=config.margin,
            error=config.error_correction,
            kind="png",
            dark=config.foreground,
            light=config.background,
        )
    _mime, payload = decode_data_uri(result.data_url)
    if payload.startswith(b"\x89PNG"):
        return payload
    with Image.open(io.BytesIO(payload)) as image:
        buf = io.BytesIO()
        image.convert("RGB").save(buf, format="PNG")
    return buf.getvalue()


def _draw_fields(pdf: FPDF, fields: dict[str, object]) -> None:
    label_width = 32.0
    for key, value in fields.items():
        pdf.set_font(_FONT, style="B", size=10)
        pdf.cell(label_width, _line_height(pdf), _latin1(_label(key)))
        pdf.set_font(_FONT, size=10)
        pdf.multi_cell(
            0,
            _line_height(pdf),
            _latin1(_format_value(value)),
            new_x=XPos.LMARGIN,
            new_y=YPos.NEXT,
        )


def _label(key: str) -> str:
    return key.replace("_", " ").capitalize()


def _format_value(value: object) -> str:
    if isinstance(value, bool):
        return "Yes" if value else "No"
    return str(value)


def _line_height(pdf: FPDF, multiplier: float = 1.4) -> float:
    return pdf.font_size * multiplier


def _latin1(value: str) -> str:
    # Core PDF fonts only cover latin-1.
    return value.encode("latin-1", errors="replace").decode("latin-1")
