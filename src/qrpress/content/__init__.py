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

"""Content-type detection, parsing and format validation."""

from .detect import describe, detect, display_name, filter_by_content_types
from .formats import validate_and_optimize
from .parse import parse
from .wifi import escape_wifi_value, split_wifi_fields

__all__ = [
    "describe",
    "detect",
    "display_name",
    "escape_wifi_value",
    "filter_by_content_types",
    "parse",
    "split_wifi_fields",
    "validate_and_optimize",
]
