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
from urllib.parse import urlsplit

from .bounds import (
    MAX_LOGO_SIZE_PX,
    MAX_MARGIN,
    MAX_PDF_PASSWORD_CHARS,
    MAX_SIZE_PX,
    MAX_TEXT_CHARS,
    MIN_LOGO_SIZE_PX,
    MIN_MARGIN,
    MIN_PDF_PASSWORD_CHARS,
    MIN_SIZE_PX,
)
from .models import ErrorCorrection, GenerationOptions, ImageFormat, ValidationResult

_HEX_COLOR_RE = re.compile(r"#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})")
_WEAK_PASSWORDS = frozenset({"password", "123456", "qwerty", "admin", "guest"})


def require_positive_int(value: object, *, label: str) -> int:
    """Validate that value is a positive integer (> 0)."""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"{label} must be a positive integer")
    return value


def require_int_range(value: object, *, min_val: int, max_val: int, label: str) -> int:
    """Validate that value is an integer within [min_val, max_val]."""
    if not is_int_in_range(value, min_val=min_val, max_val=max_val):
        raise ValueError(f"{label} must be between {min_val} and {max_val}")
    return value  # type: ignore[return-value]


def is_int_in_range(value: object, *, min_val: int, max_val: int) -> bool:
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return min_val <= value <= max_val


def is_valid_hex_color(value: object) -> bool:
    return isinstance(value, str) and _HEX_COLOR_RE.fullmatch(value) is not None


def is_valid_url(value: object) -> bool:
    if not isinstance(value, str) or not value.strip():
        return False
    try:
        parts = urlsplit(value.strip())
    except ValueError:
        return False
    return bool(parts.scheme) and bool(parts.netloc)


def validate_pdf_password(password: object) -> list[str]:
    if not isinstance(password, str):
        return ["Password must be a string"]
    errors: list[str] = []
    if len(password) < MIN_PDF_PASSWORD_CHARS:
        errors.append(f"Password must be at least {MIN_PDF_PASSWORD_CHARS} characters long")
    if len(password) > MAX_PDF_PASSWORD_CHARS:
        errors.append(f"Password must be less than {MAX_PDF_PASSWORD_CHARS} characters")
    if password.lower() in _WEAK_PASSWORDS:
        errors.append("Password is too common")
    return errors


def validate_request(text: object, options: GenerationOptions | None = None) -> ValidationResult:
    """Check every request field and report all problems at once."""
    options = options or GenerationOptions()
    errors: list[str] = []
    warnings: list[str] = []

    if not isinstance(text, str) or not text.strip():
        errors.append("Text content is required")
    elif len(text) > MAX_TEXT_CHARS:
        errors.append(f"Text content exceeds maximum length ({MAX_TEXT_CHARS} characters)")

    if options.size is not None and not is_int_in_range(
        options.size, min_val=MIN_SIZE_PX, max_val=MAX_SIZE_PX
    ):
        errors.append(f"Size must be between {MIN_SIZE_PX} and {MAX_SIZE_PX} pixels")

    if options.margin is not None and not is_int_in_range(
        options.margin, min_val=MIN_MARGIN, max_val=MAX_MARGIN
    ):
        errors.append(f"Margin must be between {MIN_MARGIN} and {MAX_MARGIN}")

    if options.foreground is not None and not is_valid_hex_color(options.foreground):
        errors.append("Invalid foreground color format")
    if options.background is not None and not is_valid_hex_color(options.background):
        errors.append("Invalid background color format")

    if options.error_correction is not None and (
        not isinstance(options.error_correction, str)
        or options.error_correction.upper() not in {level.value for level in ErrorCorrection}
    ):
        errors.append("Error correction level must be one of L, M, Q, H")

    if options.format is not None and (
        not isinstance(options.format, str)
        or options.format.lower() not in {fmt.value for fmt in ImageFormat}
    ):
        errors.append("Format must be one of png, jpeg, webp, svg")

    if options.logo_size is not None and not is_int_in_range(
        options.logo_size, min_val=MIN_LOGO_SIZE_PX, max_val=MAX_LOGO_SIZE_PX
    ):
        errors.append(
            f"Logo size must be between {MIN_LOGO_SIZE_PX} and {MAX_LOGO_SIZE_PX} pixels"
        )

    if options.logo_url and not is_valid_url(options.logo_url):
        warnings.append("Logo URL may not be valid")

    if options.enable_pdf_password:
        if options.pdf_password:
            errors.extend(validate_pdf_password(options.pdf_password))
        else:
            errors.append("PDF password is required when password protection is enabled")

    return ValidationResult(
        is_valid=not errors,
        errors=tuple(errors),
        warnings=tuple(warnings),
    )
