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

from collections.abc import Sequence


class QrValidationError(ValueError):
    """Raised before generation when one or more request fields are out of range."""

    def __init__(self, errors: Sequence[str]) -> None:
        self.errors = tuple(errors)
        super().__init__(f"Validation failed: {', '.join(self.errors)}")


class QrRenderError(RuntimeError):
    """A single rendering strategy failed."""


class QrGenerationError(RuntimeError):
    """Every strategy, including the fallback, failed."""


class QrRateLimitError(RuntimeError):
    pass


class QrAuthError(PermissionError):
    pass


class QrAccessError(LookupError):
    pass
