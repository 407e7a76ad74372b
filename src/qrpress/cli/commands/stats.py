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

from ...storage.local import LocalStore
from ..core.common import _debug, _run_cli
from ..ui import build_kv_table, console


def register(app: typer.Typer) -> None:
    app.command(help="Show local usage statistics.")(stats)


def stats(
    ctx: typer.Context,
    reset: bool = typer.Option(
        False, "--reset", help="Delete all local presets and usage data.", rich_help_panel="Behavior"
    ),
) -> None:
    def _run() -> None:
        store = LocalStore()
        if reset:
            store.clear_all()
            console.print("[green]Local data cleared.[/green]")
            return
        usage = store.usage_stats()
        last = (
            datetime.fromtimestamp(usage.last_generated).strftime("%Y-%m-%d %H:%M")
            if usage.last_generated
            else "never"
        )
        rows: list[tuple[str, object]] = [
            ("Total generated", usage.total_generated),
            ("Favorite format", usage.favorite_format),
            ("Last generated", last),
        ]
        rows.extend(
            (f"  {fmt}", count) for fmt, count in sorted(usage.format_usage.items())
        )
        console.print(build_kv_table(rows, title="Usage"))

    _run_cli(_run, debug=_debug(ctx))
