#!/usr/bin/env python3
from __future__ import annotations

import typer

from .commands import (
    config as config_command,
    generate as generate_command,
    inspect as inspect_command,
    pdf as pdf_command,
    preset as preset_command,
    stats as stats_command,
)


def register(app: typer.Typer) -> None:
    generate_command.register(app)
    inspect_command.register(app)
    pdf_command.register(app)
    preset_command.register(app)
    stats_command.register(app)
    config_command.register(app)
