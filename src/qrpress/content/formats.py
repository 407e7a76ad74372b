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

"""Per-type payload checks and canonical re-encoding for scanner compatibility.

Errors mean a scanner is unlikely to act on the payload; warnings are advisory.
``optimized_format`` is the payload re-emitted in the most widely supported
shape, or ``None`` when the input could not be read at all.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from urllib.parse import parse_qsl, quote, unquote, urlsplit

from ..core.bounds import LONG_TEXT_WARN_CHARS
from ..core.models import ContentType, FormatValidation
from .detect import detect, is_email
from .wifi import SECURITY_TYPES, WIFI_PREFIX, escape_wifi_value, split_wifi_fields

_PHONE_SHAPE_RE = re.compile(r"\+?[\d\s\-()]{7,}")
_PHONE_NOISE_RE = re.compile(r"[\s\-()]")
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
# encodeURIComponent leaves these unescaped.
_URI_COMPONENT_SAFE = "!~*'()"


def validate_and_optimize(raw: str, hint_type: ContentType | str | None = None) -> FormatValidation:
    if not isinstance(raw, str):
        raw = "" if raw is None else str(raw)
    if hint_type is None:
        kind = detect(raw)
    else:
        try:
            kind = ContentType(hint_type)
        except ValueError:
            kind = ContentType.TEXT
    validator = _VALIDATORS.get(kind, _validate_text)
    return validator(raw)


def _result(
    errors: list[str],
    warnings: list[str],
    optimized: str | None,
) -> FormatValidation:
    return FormatValidation(
        is_valid=not errors,
        errors=tuple(errors),
        warnings=tuple(warnings),
        optimized_format=optimized,
    )


def _validate_wifi(raw: str) -> FormatValidation:
    errors: list[str] = []
    warnings: list[str] = []
    if not raw.startswith(WIFI_PREFIX):
        errors.append('WiFi format must start with "WIFI:"')
    params = split_wifi_fields(raw)
    if not params.get("S"):
        errors.append("SSID (S parameter) is required")
    security = params.get("T", "")
    if security not in SECURITY_TYPES:
        warnings.append("Security type should be WPA, WEP, or nopass for best compatibility")
    hidden = params.get("H", "")
    if hidden not in ("true", "false", ""):
        warnings.append("Hidden parameter should be true or false")

    optimized = f"{WIFI_PREFIX}T:{security or 'WPA'};S:{escape_wifi_value(params.get('S', ''))};"
    if params.get("P"):
        optimized += f"P:{escape_wifi_value(params['P'])};"
    if hidden:
        optimized += f"H:{hidden};"
    optimized += ";"
    return _result(errors, warnings, optimized)


def _validate_email(raw: str) -> FormatValidation:
    errors: list[str] = []
    try:
        parts = urlsplit(raw)
    except ValueError:
        return _result(["Invalid mailto URL format"], [], None)
    if not parts.scheme:
        return _result(["Invalid mailto URL format"], [], None)
    if parts.scheme.lower() != "mailto":
        errors.append("Email format must use mailto: protocol")
    address = unquote(parts.path)
    if not is_email(address):
        errors.append("Invalid email address format")

    query = dict(parse_qsl(parts.query, keep_blank_values=True))
    extras = [
        f"{key}={quote(query[key], safe=_URI_COMPONENT_SAFE)}"
        for key in ("subject", "body")
        if query.get(key)
    ]
    optimized = f"mailto:{address}"
    if extras:
        optimized += "?" + "&".join(extras)
    return _result(errors, [], optimized)


def _validate_phone(raw: str) -> FormatValidation:
    errors: list[str] = []
    if not raw.startswith("tel:"):
        errors.append('Phone format must start with "tel:"')
    number = raw.replace("tel:", "", 1)
    digits = sum(char.isdigit() for char in number)
    if _PHONE_SHAPE_RE.fullmatch(number) is None or digits < 7:
        errors.append("Invalid phone number format")
    return _result(errors, [], f"tel:{_PHONE_NOISE_RE.sub('', number)}")


def _validate_url(raw: str) -> FormatValidation:
    try:
        parts = urlsplit(raw)
    except ValueError:
        parts = None
    if parts is None or not parts.scheme or not parts.netloc:
        return _result(["Invalid URL format"], [], None)
    warnings: list[str] = []
    if parts.scheme.lower() != "https":
        warnings.append("Consider using HTTPS for better security")
    return _result([], warnings, raw)


def _validate_vcard(raw: str) -> FormatValidation:
    errors: list[str] = []
    warnings: list[str] = []
    if "BEGIN:VCARD" not in raw:
        errors.append('vCard must start with "BEGIN:VCARD"')
    if "END:VCARD" not in raw:
        errors.append('vCard must end with "END:VCARD"')
    if "VERSION:" not in raw:
        warnings.append("vCard should include VERSION field for better compatibility")
    if "FN:" not in raw:
        warnings.append("vCard should include FN (Full Name) field")
    return _result(errors, warnings, raw)


def _validate_event(raw: str) -> FormatValidation:
    errors: list[str] = []
    warnings: list[str] = []
    if "BEGIN:VEVENT" not in raw:
        errors.append('Event must start with "BEGIN:VEVENT"')
    if "END:VEVENT" not in raw:
        errors.append('Event must end with "END:VEVENT"')
    if "SUMMARY:" not in raw:
        warnings.append("Event should include SUMMARY field")
    if "DTSTART:" not in raw:
        warnings.append("Event should include DTSTART field")
    return _result(errors, warnings, raw)


def _validate_location(raw: str) -> FormatValidation:
    errors: list[str] = []
    warnings: list[str] = []
    if not raw.startswith("geo:"):
        errors.append('Location format must start with "geo:"')
    _body, _sep, query = raw.partition("?")
    if not dict(parse_qsl(query)).get("q"):
        warnings.append("Location should include query parameter for better compatibility")
    return _result(errors, warnings, raw)


def _validate_sms(raw: str) -> FormatValidation:
    errors: list[str] = []
    if not raw.startswith("sms:"):
        errors.append('SMS format must start with "sms:"')
    return _result(errors, [], raw)


def _validate_text(raw: str) -> FormatValidation:
    warnings: list[str] = []
    if len(raw) > LONG_TEXT_WARN_CHARS:
        warnings.append("Text content is very long, consider shortening for better scanning")
    if _CONTROL_CHARS_RE.search(raw):
        warnings.append("Text contains control characters that might cause scanning issues")
    return _result([], warnings, raw)


_VALIDATORS: dict[ContentType, Callable[[str], FormatValidation]] = {
    ContentType.WIFI: _validate_wifi,
    ContentType.EMAIL: _validate_email,
    ContentType.PHONE: _validate_phone,
    ContentType.URL: _validate_url,
    ContentType.VCARD: _validate_vcard,
    ContentType.EVENT: _validate_event,
    ContentType.LOCATION: _validate_location,
    ContentType.SMS: _validate_sms,
    ContentType.TEXT: _validate_text,
}
