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

# Maximum characters a QR symbol can carry (version 40, numeric mode).
MAX_TEXT_CHARS = 4_296

# Rendered image edge in logical pixels.
MIN_SIZE_PX = 128
MAX_SIZE_PX = 2_048

# Quiet zone in modules.
MIN_MARGIN = 0
MAX_MARGIN = 20

# Logo overlay edge in pixels.
MIN_LOGO_SIZE_PX = 20
MAX_LOGO_SIZE_PX = 200
DEFAULT_LOGO_SIZE_PX = 60

# PDF user password length.
MIN_PDF_PASSWORD_CHARS = 4
MAX_PDF_PASSWORD_CHARS = 128

# Plain text longer than this scans poorly on most phones.
LONG_TEXT_WARN_CHARS = 2_000

# Generation cache entry lifetime and the size that triggers an expiry sweep.
CACHE_TTL_SECONDS = 300
CACHE_SWEEP_THRESHOLD = 50

# Default per-client budget for cache misses and endpoint requests.
RATE_LIMIT_MAX_REQUESTS = 100
RATE_LIMIT_WINDOW_SECONDS = 60

# Rendering endpoint limits (stricter than client-side validation).
ENDPOINT_MAX_TEXT_CHARS = 2_048
ENDPOINT_MAX_SIZE_PX = 2_048
ENDPOINT_MAX_MARGIN = 10

# Data URLs above this decoded size get a performance warning.
LARGE_DATA_URL_BYTES = 5 * 1024 * 1024


__all__ = [
    "CACHE_SWEEP_THRESHOLD",
    "CACHE_TTL_SECONDS",
    "DEFAULT_LOGO_SIZE_PX",
    "ENDPOINT_MAX_MARGIN",
    "ENDPOINT_MAX_SIZE_PX",
    "ENDPOINT_MAX_TEXT_CHARS",
    "LARGE_DATA_URL_BYTES",
    "LONG_TEXT_WARN_CHARS",
    "MAX_LOGO_SIZE_PX",
    "MAX_MARGIN",
    "MAX_PDF_PASSWORD_CHARS",
    "MAX_SIZE_PX",
    "MAX_TEXT_CHARS",
    "MIN_LOGO_SIZE_PX",
    "MIN_MARGIN",
    "MIN_PDF_PASSWORD_CHARS",
    "MIN_SIZE_PX",
    "RATE_LIMIT_MAX_REQUESTS",
    "RATE_LIMIT_WINDOW_SECONDS",
]
