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

from ...content import describe, detect, display_name, parse, validate_and_optimize
from ..core.common import _debug, _run_cli
from ..ui import build_kv_table, console

_INSPECT_HELP = (
    "Show how TEXT would be classified, parsed and validated.\n\n"
    "Examples:\n"
    "  qrpress inspect 'mailto:team@example.com?subject=Hi'\n"
    "  qrpress inspect 'geo:52.52,13.40'\n"
)


def register(app: typer.Typer) -> None:
    app.command(help=_INSPECT_HELP)(inspect)


def inspect(
    ctx: typer.Context,
    text: str = typer.Argument(..., help="Content to inspect."),
) -> None:
    def _run() -> None:
        content_type = detect(text)
        parsed = parse(text, content_type)
        check = validate_and_optimize(text, content_type)

        console.print(
            build_kv_table(
                [
                    ("Type", content_type.value),
                    ("Name", display_name(content_type)),
                    ("Description", describe(content_type)),
                    ("Structured", "yes" if parsed.structured else "no"),
                ],
                title="Content",
            )
        )
        if parsed.fields:
            console.print(build_kv_table(sorted(parsed.fields.items()), title="Fields"))

        rows: list[tuple[str, object]] = [("Valid", "yes" if check.is_valid else "no")]
        rows.extend(("Error", message) for message in check.errors)
        rows.extend(("Warning", message) for message in check.warnings)
        if check.optimized_format is not None:
            rows.append(("Optimized", check.optimized_format))
        console.print(build_kv_table(rows, title="Format"))

    _run_cli(_run, debug=_debug(ctx))
