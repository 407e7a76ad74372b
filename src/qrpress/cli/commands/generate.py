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

from ...core.models import GenerationOptions, GenerationResult
from ...qr.codec import decode_data_uri
from ...runtime import build_service
from ...storage.local import LocalStore
from ..core.common import (
    _build_options,
    _debug,
    _load_config,
    _preset_options,
    _quiet,
    _run_cli,
)
from ..core.log import _warn
from ..ui import build_kv_table, console

_GENERATE_HELP = (
    "Render TEXT as a QR code image.\n\n"
    "Examples:\n"
    "  qrpress generate https://example.com\n"
    "  qrpress generate 'WIFI:T:WPA;S:home;P:secret;;' -o wifi.svg --format svg\n"
    "  qrpress generate tel:+15551234567 --size 1024 --error H\n"
    "  qrpress generate 'hello' --preset print\n"
)


def register(app: typer.Typer) -> None:
    app.command(help=_GENERATE_HELP)(generate)


def generate(
    ctx: typer.Context,
    text: str = typer.Argument(..., help="Content to encode."),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file (default: qrcode.<format> in the current directory).",
        rich_help_panel="Outputs",
    ),
    size: int | None = typer.Option(
        None, "--size", help="Image size in pixels (128-2048).", rich_help_panel="Rendering"
    ),
    margin: int | None = typer.Option(
        None, "--margin", help="Quiet zone in modules (0-20).", rich_help_panel="Rendering"
    ),
    error: str | None = typer.Option(
        None, "--error", help="Error correction level (L/M/Q/H).", rich_help_panel="Rendering"
    ),
    fg: str | None = typer.Option(
        None, "--fg", help="Foreground color (#rrggbb).", rich_help_panel="Rendering"
    ),
    bg: str | None = typer.Option(
        None, "--bg", help="Background color (#rrggbb).", rich_help_panel="Rendering"
    ),
    image_format: str | None = typer.Option(
        None,
        "--format",
        "-f",
        help="Image format (png/svg/jpeg/webp).",
        rich_help_panel="Outputs",
    ),
    preset: str | None = typer.Option(
        None,
        "--preset",
        help="Start from a saved preset (name or id); explicit options win.",
        rich_help_panel="Presets",
    ),
) -> None:
    quiet_value = _quiet(ctx)

    def _run() -> None:
        config = _load_config(ctx)
        store = LocalStore()
        options = _build_options(
            size=size,
            margin=margin,
            error=error,
            foreground=fg,
            background=bg,
            image_format=image_format,
            base=_preset_options(store, preset),
        )
        quiet = quiet_value or config.ui.quiet
        result, target = asyncio.run(_generate(config, text, options, output))
        if result.warning:
            _warn(result.warning, quiet=quiet)
        store.record_generation(
            image_format=result.format,
            size=result.size,
            error_correction=options.error_correction or config.qr.error_correction,
            text_length=len(text),
        )
        if quiet:
            return
        console.print(
            build_kv_table(
                [
                    ("Output", target),
                    ("Format", result.format),
                    ("Size", f"{result.size}px"),
                    ("Method", result.method.value),
                ],
                title="QR code written",
            )
        )

    _run_cli(_run, debug=_debug(ctx))


async def _generate(config, text: str, options: GenerationOptions, output: Path | None):
    async with build_service(config) as service:
        result = await service.generate(text, options)
    target = output or Path(f"qrcode.{result.format}")
    write_result(result, target)
    return result, target


def write_result(result: GenerationResult, path: Path) -> Path:
    """Write a generation result to ``path`` as the raw image bytes."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if result.svg_string is not None:
        path.write_text(result.svg_string, encoding="utf-8")
        return path
    _mime, payload = decode_data_uri(result.data_url)
    path.write_bytes(payload)
    return path
