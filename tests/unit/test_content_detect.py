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

import unittest
from types import SimpleNamespace

from qrpress.content import describe, detect, display_name, filter_by_content_types
from qrpress.core.models import ContentType


class TestDetect(unittest.TestCase):
    def test_prefixed_payloads(self) -> None:
        cases = {
            "WIFI:T:WPA;S:home;P:pw;;": ContentType.WIFI,
            "BEGIN:VCARD\nVERSION:3.0\nFN:Ada\nEND:VCARD": ContentType.VCARD,
            "BEGIN:VEVENT\nSUMMARY:Launch\nEND:VEVENT": ContentType.EVENT,
            "sms:+15551234567?body=hi": ContentType.SMS,
            "SMS:+15551234567": ContentType.SMS,
            "mailto:team@example.com": ContentType.EMAIL,
            "tel:+15551234567": ContentType.PHONE,
            "TEL:5551234": ContentType.PHONE,
            "geo:52.52,13.40": ContentType.LOCATION,
        }
        for text, expected in cases.items():
            with self.subTest(text=text):
                self.assertEqual(detect(text), expected)

    def test_bare_shapes(self) -> None:
        cases = {
            "user@example.com": ContentType.EMAIL,
            "+1 (555) 123-4567": ContentType.PHONE,
            "5551234": ContentType.PHONE,
            "https://example.com": ContentType.URL,
            "ftp://files.example.com/a.txt": ContentType.URL,
            "52.5200,13.4050": ContentType.LOCATION,
            "-33.86,151.21": ContentType.LOCATION,
            "hello world": ContentType.TEXT,
        }
        for text, expected in cases.items():
            with self.subTest(text=text):
                self.assertEqual(detect(text), expected)

    def test_ambiguous_inputs_resolve_by_order(self) -> None:
        cases = [
            # vCard that embeds an e-mail address stays a vCard.
            ("BEGIN:VCARD\nEMAIL:a@example.com\nEND:VCARD", ContentType.VCARD),
            # A WiFi payload containing a URL-like password.
            ("WIFI:S:net;P:https://x.y;;", ContentType.WIFI),
            # Long digit runs are phone numbers before anything else.
            ("123456789012345", ContentType.PHONE),
            # 16 digits is past the phone limit and not a URL.
            ("1234567890123456", ContentType.TEXT),
            # Too few digits for a phone number.
            ("123456", ContentType.TEXT),
            # Integer pair: commas keep it out of the phone check.
            ("1234567,7654321", ContentType.LOCATION),
            # No scheme means not a URL.
            ("example.com", ContentType.TEXT),
            ("www.example.com/path", ContentType.TEXT),
            # Schemes outside http(s)/ftp(s) are not URLs.
            ("javascript://alert", ContentType.TEXT),
            ("https://", ContentType.TEXT),
            # An e-mail address with spaces is text.
            ("user @example.com", ContentType.TEXT),
        ]
        for text, expected in cases:
            with self.subTest(text=text):
                self.assertEqual(detect(text), expected)

    def test_surrounding_whitespace_is_ignored(self) -> None:
        self.assertEqual(detect("  https://example.com \n"), ContentType.URL)
        self.assertEqual(detect("\tWIFI:S:x;;"), ContentType.WIFI)

    def test_empty_and_non_string_are_text(self) -> None:
        for value in ("", "   ", None, 42, b"https://example.com"):
            with self.subTest(value=value):
                self.assertEqual(detect(value), ContentType.TEXT)

    def test_detect_is_deterministic(self) -> None:
        text = "mailto:a@example.com?subject=x"
        self.assertEqual({detect(text) for _ in range(5)}, {ContentType.EMAIL})


class TestNames(unittest.TestCase):
    def test_display_names(self) -> None:
        self.assertEqual(display_name(ContentType.WIFI), "WiFi Network")
        self.assertEqual(display_name("url"), "Website URL")
        self.assertEqual(display_name("nonsense"), "Text")

    def test_descriptions(self) -> None:
        self.assertEqual(describe(ContentType.TEXT), "Plain Text")
        self.assertEqual(describe("location"), "Location/GPS")
        self.assertEqual(describe("nonsense"), "Unknown")

    def test_every_type_has_a_name(self) -> None:
        for content_type in ContentType:
            with self.subTest(content_type=content_type):
                self.assertTrue(display_name(content_type))
                self.assertNotEqual(describe(content_type), "Unknown")


class TestFilterByContentTypes(unittest.TestCase):
    def setUp(self) -> None:
        self.records = [
            SimpleNamespace(text_content="https://example.com"),
            SimpleNamespace(text_content="WIFI:S:home;;"),
            SimpleNamespace(text_content="just words"),
        ]

    def test_empty_selection_keeps_everything(self) -> None:
        self.assertEqual(filter_by_content_types(self.records, []), self.records)

    def test_keeps_matching_types(self) -> None:
        kept = filter_by_content_types(self.records, [ContentType.URL, "wifi"])
        self.assertEqual([r.text_content for r in kept], ["https://example.com", "WIFI:S:home;;"])

    def test_unknown_type_raises(self) -> None:
        with self.assertRaises(ValueError):
            filter_by_content_types(self.records, ["barcode"])


if __name__ == "__main__":
    unittest.main()
