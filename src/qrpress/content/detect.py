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

"""Classify a QR payload into a semantic content type.

Checks run in a fixed order and the first match wins. Order matters because the
shapes overlap: a vCard can embed an e-mail address and a bare digit string can
look like either a phone number or half of a coordinate pair. Phone numbers are
checked before URLs.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from typing import Protocol, TypeVar
from urllib.parse import urlsplit

from ..core.models import ContentType

URL_SCHEMES = frozenset({"http", "https", "ftp", "ftps"})

_EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
_PHONE_STRIP_RE = re.compile(r"[\s\-()+]")
_PHONE_DIGITS_RE = re.compile(r"\d{7,15}")
_COORDINATES_RE = re.compile(r"-?\d+\.?\d*,-?\d+\.?\d*")

_DISPLAY_NAMES = {
    ContentType.TEXT: "Text",
    ContentType.URL: "Website URL",
    ContentType.EMAIL: "Email Address",
    ContentType.PHONE: "Phone Number",
    ContentType.WIFI: "WiFi Network",
    ContentType.VCARD: "Contact Card",
    ContentType.SMS: "SMS Message",
    ContentType.LOCATION: "Location",
    ContentType.EVENT: "Calendar Event",
}

_DESCRIPTIONS = {
    ContentType.TEXT: "Plain Text",
    ContentType.URL: "Website URL",
    ContentType.EMAIL: "Email Address",
    ContentType.PHONE: "Phone Number",
    ContentType.WIFI: "WiFi Network",
    ContentType.VCARD: "Contact Card",
    ContentType.SMS: "SMS Message",
    ContentType.LOCATION: "Location/GPS",
    ContentType.EVENT: "Calendar Event",
}


def detect(text: object) -> ContentType:
    if not isinstance(text, str):
        return ContentType.TEXT
    value = text.strip()
    if not value:
        return ContentType.TEXT

    if value.startswith("WIFI:"):
        return ContentType.WIFI
    if "BEGIN:VCARD" in value:
        return ContentType.VCARD
    if "BEGIN:VEVENT" in value:
        return ContentType.EVENT
    if value.startswith(("sms:", "SMS:")):
        return ContentType.SMS
    if value.startswith("mailto:") or is_email(value):
        return ContentType.EMAIL
    if value.startswith(("tel:", "TEL:")) or is_phone_number(value):
        return ContentType.PHONE
    if is_url(value):
        return ContentType.URL
    if value.startswith("geo:") or is_coordinates(value):
        return ContentType.LOCATION
    return ContentType.TEXT


def is_email(value: str) -> bool:
    return _EMAIL_RE.fullmatch(value) is not None


def is_phone_number(value: str) -> bool:
    return _PHONE_DIGITS_RE.fullmatch(_PHONE_STRIP_RE.sub("", value)) is not None


def is_url(value: str) -> bool:
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return parts.scheme.lower() in URL_SCHEMES and bool(parts.netloc)


def is_coordinates(value: str) -> bool:
    return _COORDINATES_RE.fullmatch(value) is not None


def display_name(content_type: ContentType | str) -> str:
    try:
        return _DISPLAY_NAMES[ContentType(content_type)]
    except ValueError:
        return _DISPLAY_NAMES[ContentType.TEXT]


def describe(content_type: ContentType | str) -> str:
    try:
        return _DESCRIPTIONS[ContentType(content_type)]
    except ValueError:
        return "Unknown"


class _HasText(Protocol):
    text_content: str


_R = TypeVar("_R", bound=_HasText)


def filter_by_content_types(
    records: Iterable[_R],
    content_types: Sequence[ContentType | str],
) -> list[_R]:
    """Keep records whose text classifies into one of content_types (empty keeps all)."""
    items = list(records)
    if not content_types:
        return items
    wanted = {ContentType(value) for value in content_types}
    return [record for record in items if detect(record.text_content) in wanted]
