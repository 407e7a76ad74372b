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
from collections.abc import Callable
from urllib.parse import parse_qsl, unquote, urlsplit

from ..core.models import ContentType, FieldValue, ParsedContent, UnparsedContent
from .detect import detect, display_name
from .wifi import split_wifi_fields

_PHONE_NOISE_RE = re.compile(r"[\s\-()]")

Fields = dict[str, FieldValue]


def parse(text: str, content_type: ContentType | str | None = None) -> ParsedContent | UnparsedContent:
    """Extract structured fields for text; never raises.

    When content_type is omitted it is detected. Malformed type-specific syntax
    yields an ``UnparsedContent`` whose fields are ``{"text": text}``.
    """
    if not isinstance(text, str):
        text = "" if text is None else str(text)
    kind = detect(text) if content_type is None else ContentType(content_type)
    name = display_name(kind)
    parser = _PARSERS.get(kind)
    if parser is None:
        return ParsedContent(type=kind, fields={"text": text}, display_name=name)
    fields = parser(text.strip())
    if fields is None:
        return UnparsedContent(type=kind, original=text, display_name=name)
    return ParsedContent(type=kind, fields=fields, display_name=name)


def _parse_wifi(text: str) -> Fields | None:
    params = split_wifi_fields(text)
    if "S" not in params:
        return None
    return {
        "type": params.get("T") or "WPA",
        "ssid": params["S"],
        "password": params.get("P", ""),
        "hidden": params.get("H", "").strip().lower() == "true",
    }


def _parse_email(text: str) -> Fields | None:
    if not text.lower().startswith("mailto:"):
        return {"email": text}
    try:
        parts = urlsplit(text)
    except ValueError:
        return None
    address = unquote(parts.path)
    if not address:
        return None
    query = dict(parse_qsl(parts.query, keep_blank_values=True))
    return {
        "email": address,
        "subject": query.get("subject", ""),
        "body": query.get("body", ""),
    }


def _parse_phone(text: str) -> Fields | None:
    number = text[4:] if text.lower().startswith("tel:") else text
    number = _PHONE_NOISE_RE.sub("", number)
    if not number:
        return None
    return {"phone": number}


def _parse_url(text: str) -> Fields | None:
    try:
        parts = urlsplit(text)
    except ValueError:
        return None
    if not parts.scheme or not parts.hostname:
        return None
    return {"url": text, "domain": parts.hostname, "scheme": parts.scheme.lower()}


def _parse_vcard(text: str) -> Fields | None:
    fields: Fields = {}
    for line in text.splitlines():
        key, sep, value = line.partition(":")
        key = key.strip()
        value = value.strip()
        if sep and key and value:
            fields[key.lower()] = value
    return fields or None


def _parse_sms(text: str) -> Fields | None:
    if not text.lower().startswith("sms:"):
        return None
    phone, _sep, query = text[4:].partition("?")
    message = query[len("body=") :] if query.startswith("body=") else query
    return {"phone": phone, "message": unquote(message)}


def _parse_location(text: str) -> Fields | None:
    if text.lower().startswith("geo:"):
        body = re.split(r"[?;]", text[4:], maxsplit=1)[0]
        coords = body.split(",")
    else:
        coords = text.split(",")
        if len(coords) != 2:
            return None
    latitude = _to_float(coords[0] if coords else "")
    longitude = _to_float(coords[1] if len(coords) > 1 else "")
    return {"latitude": latitude, "longitude": longitude}


def _to_float(value: str) -> float:
    try:
        return float(value.strip())
    except ValueError:
        return 0.0


_PARSERS: dict[ContentType, Callable[[str], Fields | None]] = {
    ContentType.WIFI: _parse_wifi,
    ContentType.EMAIL: _parse_email,
    ContentType.PHONE: _parse_phone,
    ContentType.URL: _parse_url,
    ContentType.VCARD: _parse_vcard,
    ContentType.SMS: _parse_sms,
    ContentType.LOCATION: _parse_location,
}
