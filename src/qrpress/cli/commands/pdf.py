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

import asyncio
from pathlib import Path

import typer

from ...config import AppConfig
from ...core.models import GenerationOptions
from ...render.pdf_export import export_pdf
from ...runtime import build_service
from ...storage.local import LocalStore
from ..core.common import _build_options, _debug, _load_config, _preset_options, _quiet, _run_cli
from ..ui import console

_PDF_HELP = (
    "Export TEXT as a printable one-page PDF.\n\n"
    "Examples:\n"
    "  qrpress pdf https://example.com -o link.pdf\n"
    "  qrpress pdf 'WIFI:T:WPA;S:home;P:secret;;' -o wifi.pdf --title 'Guest WiFi'\n"
    "  qrpress pdf 'secret note' -o note.pdf --password hunter22x\n"
)


def register(app: typer.Typer) -> None:
    app.command(help=_PDF_HELP)(pdf)


def pdf(
    ctx: typer.Context,
    text: str = typer.Argument(..., help="Content to encode."),
    output: Path = typer.Option(
        ...,
        "--output",
        "-o",
        help="Output PDF path.",
        rich_help_panel="Outputs",
    ),
    title: str | None = typer.Option(
        None, "--title", help="Heading printed above the code.", rich_help_panel="Outputs"
    ),
    paper: str = typer.Option(
        "A4", "--paper", help="Paper size (A4/LETTER).", rich_help_panel="Outputs"
    ),
    password: str | None = typer.Option(
        None,
        "--password",
        help="Encrypt the PDF with this password (4-128 characters).",
        rich_help_panel="Security",
    ),
    size: int | None = typer.Option(
        None, "--size", help="Image size in pixels (128-2048).", rich_help_panel="Rendering"
    ),
    error: str | None = typer.Option(
        None, "--error", help="Error correction level (L/M/Q/H).", rich_help_panel="Rendering"
    ),
    preset: str | None = typer.Option(
        None, "--preset", help="Start from a saved preset (name or id).", rich_help_panel="Presets"
    ),
) -> None:
    quiet_value = _quiet(ctx)

    def _run() -> None:
        config = _load_config(ctx)
        store = LocalStore()
        base = _build_options(size=size, error=error, base=_preset_options(store, preset))
        options = GenerationOptions(
            size=base.size,
            margin=base.margin,
            error_correction=base.error_correction,
            foreground=base.foreground,
            background=base.background,
            # PDF embedding needs a raster image.
            format="png",
            pdf_password=password,
            enable_pdf_password=password is not None,
        )
        path = asyncio.run(_export(config, text, options, output, title=title, paper=paper))
        store.record_event("pdf_downloaded", passwordProtected=password is not None)
        if not (quiet_value or config.ui.quiet):
            console.print(f"[green]PDF written:[/green] {path}")

    _run_cli(_run, debug=_debug(ctx))


async def _export(
    config: AppConfig,
    text: str,
    options: GenerationOptions,
    output: Path,
    *,
    title: str | None,
    paper: str,
) -> Path:
    async with build_service(config) as service:
        result = await service.generate(text, options)
        return export_pdf(
            result,
            text,
            output,
            title=title,
            paper=paper,
            password=options.pdf_password,
            config=service.build_config(options),
        )
