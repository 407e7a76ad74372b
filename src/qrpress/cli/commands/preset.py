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

from datetime import datetime

import typer

from ...core.validation import validate_request
from ...storage.local import LocalStore
from ..core.common import _build_options, _debug, _quiet, _run_cli
from ..ui import build_list_table, console

preset_app = typer.Typer(help="Manage saved generation presets.", no_args_is_help=True)


def register(app: typer.Typer) -> None:
    app.add_typer(preset_app, name="preset")


@preset_app.command("save", help="Save rendering options under NAME.")
def save(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Preset name."),
    size: int | None = typer.Option(None, "--size", help="Image size in pixels."),
    margin: int | None = typer.Option(None, "--margin", help="Quiet zone in modules."),
    error: str | None = typer.Option(None, "--error", help="Error correction level."),
    fg: str | None = typer.Option(None, "--fg", help="Foreground color (#rrggbb)."),
    bg: str | None = typer.Option(None, "--bg", help="Background color (#rrggbb)."),
    image_format: str | None = typer.Option(None, "--format", "-f", help="Image format."),
) -> None:
    def _run() -> None:
        options = _build_options(
            size=size,
            margin=margin,
            error=error,
            foreground=fg,
            background=bg,
            image_format=image_format,
        )
        # Any non-empty text works here; only the options are checked.
        check = validate_request("x", options)
        if not check.is_valid:
            raise ValueError(", ".join(check.errors))
        preset = LocalStore().save_preset(name, options)
        if not _quiet(ctx):
            console.print(f"[green]Saved preset[/green] {preset.name} ({preset.id})")

    _run_cli(_run, debug=_debug(ctx))


@preset_app.command("list", help="List saved presets.")
def list_presets(ctx: typer.Context) -> None:
    def _run() -> None:
        presets = LocalStore().presets()
        if not presets:
            console.print("[dim]No presets saved.[/dim]")
            return
        rows = []
        for preset in presets:
            opts = preset.options
            rows.append(
                (
                    preset.id,
                    preset.name,
                    opts.size or "-",
                    opts.error_correction or "-",
                    opts.format or "-",
                    datetime.fromtimestamp(preset.updated_at).strftime("%Y-%m-%d %H:%M"),
                )
            )
        console.print(build_list_table(["ID", "Name", "Size", "Error", "Format", "Updated"], rows))

    _run_cli(_run, debug=_debug(ctx))


@preset_app.command("delete", help="Delete the preset with PRESET_ID.")
def delete(
    ctx: typer.Context,
    preset_id: str = typer.Argument(..., help="Preset id (see `qrpress preset list`)."),
) -> None:
    def _run() -> None:
        if not LocalStore().delete_preset(preset_id):
            raise LookupError(f"preset not found: {preset_id}")
        if not _quiet(ctx):
            console.print(f"[green]Deleted preset[/green] {preset_id}")

    _run_cli(_run, debug=_debug(ctx))
