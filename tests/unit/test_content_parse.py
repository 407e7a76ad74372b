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

from qrpress.content import escape_wifi_value, parse, split_wifi_fields
from qrpress.core.models import ContentType, ParsedContent, UnparsedContent


class TestParseWifi(unittest.TestCase):
    def test_fields(self) -> None:
        parsed = parse("WIFI:T:WEP;S:Cafe;P:latte;H:true;;")
        self.assertIsInstance(parsed, ParsedContent)
        self.assertEqual(parsed.type, ContentType.WIFI)
        self.assertEqual(parsed.display_name, "WiFi Network")
        self.assertEqual(
            parsed.fields,
            {"type": "WEP", "ssid": "Cafe", "password": "latte", "hidden": True},
        )

    def test_defaults_when_optional_fields_missing(self) -> None:
        parsed = parse("WIFI:S:open;;")
        self.assertEqual(
            parsed.fields,
            {"type": "WPA", "ssid": "open", "password": "", "hidden": False},
        )

    def test_escaped_separators_stay_in_values(self) -> None:
        parsed = parse(r"WIFI:T:WPA;S:My\;Net;P:a\:b\\c;;")
        self.assertEqual(parsed.fields["ssid"], "My;Net")
        self.assertEqual(parsed.fields["password"], "a:b\\c")

    def test_missing_ssid_is_unparsed(self) -> None:
        parsed = parse("WIFI:T:WPA;P:x;;")
        self.assertIsInstance(parsed, UnparsedContent)
        self.assertFalse(parsed.structured)
        self.assertEqual(parsed.type, ContentType.WIFI)
        self.assertEqual(parsed.fields, {"text": "WIFI:T:WPA;P:x;;"})


class TestWifiHelpers(unittest.TestCase):
    def test_split_without_prefix_is_empty(self) -> None:
        self.assertEqual(split_wifi_fields("S:x;;"), {})

    def test_first_key_wins(self) -> None:
        self.assertEqual(split_wifi_fields("WIFI:S:a;S:b;;")["S"], "a")

    def test_escape_value(self) -> None:
        self.assertEqual(escape_wifi_value('a;b,c"d\\e'), 'a\\;b\\,c\\"d\\\\e')

    def test_escape_then_split_restores_value(self) -> None:
        ssid = 'we;ird,"name"\\'
        fields = split_wifi_fields(f"WIFI:S:{escape_wifi_value(ssid)};;")
        self.assertEqual(fields["S"], ssid)


class TestParseOtherTypes(unittest.TestCase):
    def test_mailto(self) -> None:
        parsed = parse("mailto:team@example.com?subject=Hello%20there&body=See%20you")
        self.assertEqual(
            parsed.fields,
            {"email": "team@example.com", "subject": "Hello there", "body": "See you"},
        )

    def test_bare_email(self) -> None:
        self.assertEqual(parse("a@example.com").fields, {"email": "a@example.com"})

    def test_empty_mailto_is_unparsed(self) -> None:
        parsed = parse("mailto:")
        self.assertIsInstance(parsed, UnparsedContent)

    def test_phone_strips_formatting(self) -> None:
        self.assertEqual(parse("tel:+1 (555) 123-4567").fields, {"phone": "+15551234567"})
        self.assertEqual(parse("555-1234").fields, {"phone": "5551234"})

    def test_url(self) -> None:
        parsed = parse("HTTPS://Example.com/a?b=1")
        self.assertEqual(parsed.fields["url"], "HTTPS://Example.com/a?b=1")
        self.assertEqual(parsed.fields["domain"], "example.com")
        self.assertEqual(parsed.fields["scheme"], "https")

    def test_vcard_keys_are_lower_cased(self) -> None:
        parsed = parse("BEGIN:VCARD\nVERSION:3.0\nFN:Ada Lovelace\nTEL:+44 20\nEND:VCARD")
        self.assertEqual(parsed.fields["fn"], "Ada Lovelace")
        self.assertEqual(parsed.fields["tel"], "+44 20")
        self.assertEqual(parsed.fields["begin"], "VCARD")

    def test_sms(self) -> None:
        parsed = parse("sms:+15551234567?body=Running%20late")
        self.assertEqual(parsed.fields, {"phone": "+15551234567", "message": "Running late"})

    def test_sms_without_body(self) -> None:
        self.assertEqual(parse("sms:5551234").fields, {"phone": "5551234", "message": ""})

    def test_geo(self) -> None:
        parsed = parse("geo:52.52,13.405?q=Berlin")
        self.assertEqual(parsed.fields, {"latitude": 52.52, "longitude": 13.405})

    def test_geo_with_bad_numbers_defaults_to_zero(self) -> None:
        parsed = parse("geo:north,east")
        self.assertEqual(parsed.fields, {"latitude": 0.0, "longitude": 0.0})

    def test_bare_coordinates(self) -> None:
        parsed = parse("-33.86,151.21")
        self.assertEqual(parsed.type, ContentType.LOCATION)
        self.assertEqual(parsed.fields, {"latitude": -33.86, "longitude": 151.21})

    def test_location_hint_with_wrong_arity_is_unparsed(self) -> None:
        parsed = parse("1,2,3", ContentType.LOCATION)
        self.assertIsInstance(parsed, UnparsedContent)

    def test_event_and_text_pass_through(self) -> None:
        event = "BEGIN:VEVENT\nSUMMARY:x\nEND:VEVENT"
        self.assertEqual(parse(event).fields, {"text": event})
        self.assertEqual(parse("hello").fields, {"text": "hello"})
        self.assertTrue(parse("hello").structured)

    def test_explicit_type_overrides_detection(self) -> None:
        parsed = parse("https://example.com", "text")
        self.assertEqual(parsed.type, ContentType.TEXT)
        self.assertEqual(parsed.fields, {"text": "https://example.com"})

    def test_never_raises_on_odd_input(self) -> None:
        for value in ("", "WIFI:", "sms:", "geo:", "mailto:%", None):
            with self.subTest(value=value):
                result = parse(value)
                self.assertTrue(result.fields)
                if not result.structured:
                    self.assertIn("text", result.fields)


if __name__ == "__main__":
    unittest.main()
