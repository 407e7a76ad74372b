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

import re

WIFI_PREFIX = "WIFI:"
SECURITY_TYPES = ("WPA", "WEP", "nopass", "")

_ESCAPE_RE = re.compile(r'([";,\\])')


def split_wifi_fields(text: str) -> dict[str, str]:
    """Split ``WIFI:K:V;K:V;;`` into {K: V}, honouring backslash escapes.

    The first occurrence of a key wins. Returns an empty dict when text does
    not carry the ``WIFI:`` prefix.
    """
    if not text.startswith(WIFI_PREFIX):
        return {}
    fields: dict[str, str] = {}
    segment: list[str] = []
    escaped = False
    for char in text[len(WIFI_PREFIX) :]:
        if escaped:
            segment.append(char)
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == ";":
            _store_segment(fields, "".join(segment))
            segment = []
        else:
            segment.append(char)
    if escaped:
        segment.append("\\")
    _store_segment(fields, "".join(segment))
    return fields


def _store_segment(fields: dict[str, str], segment: str) -> None:
    key, sep, value = segment.partition(":")
    if not sep or not key:
        return
    fields.setdefault(key.strip(), value)


def escape_wifi_value(value: str) -> str:
    return _ESCAPE_RE.sub(r"\\\1", value)
