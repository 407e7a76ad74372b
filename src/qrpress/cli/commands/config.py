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

import typer

from ...config import init_user_config, load_app_config, resolve_config_path
from ..core.common import _ctx_value, _debug, _quiet, _run_cli
from ..ui import build_kv_table, console

_CONFIG_HELP = (
    "Show or initialize the active TOML config.\n\n"
    "Examples:\n"
    "  qrpress config\n"
    "  qrpress config --init\n"
    "  qrpress config --print-path\n"
    "  qrpress --config ./qrpress.toml config\n"
)


def register(app: typer.Typer) -> None:
    app.command(help=_CONFIG_HELP)(config)


def config(
    ctx: typer.Context,
    init: bool = typer.Option(
        False,
        "--init",
        help="Copy defaults to the user config directory (keeps an existing file).",
        rich_help_panel="Behavior",
    ),
    print_path: bool = typer.Option(
        False,
        "--print-path",
        help="Print the resolved config path and exit.",
        rich_help_panel="Behavior",
    ),
) -> None:
    config_value = _ctx_value(ctx, "config")

    def _run() -> None:
        if init:
            dest = init_user_config()
            if not _quiet(ctx):
                console.print(f"[green]Config ready:[/green] {dest}")
            return
        path = resolve_config_path(config_value)
        if print_path:
            console.print(str(path))
            return
        cfg = load_app_config(path)
        console.print(
            build_kv_table(
                [
                    ("Source", cfg.source),
                    ("Size", cfg.qr.size),
                    ("Margin", cfg.qr.margin),
                    ("Error correction", cfg.qr.error_correction),
                    ("Format", cfg.qr.format),
                    ("Colors", f"{cfg.qr.foreground} on {cfg.qr.background}"),
                    ("Server endpoint", cfg.server.endpoint or "disabled"),
                    ("Cache TTL", f"{cfg.cache.ttl_seconds}s"),
                    (
                        "Rate limit",
                        f"{cfg.rate_limit.max_requests}/{cfg.rate_limit.window_seconds}s"
                        if cfg.rate_limit.enabled
                        else "disabled",
                    ),
                ],
                title="Config",
            )
        )

    _run_cli(_run, debug=_debug(ctx))
