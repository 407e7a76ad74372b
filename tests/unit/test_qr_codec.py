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

import io
import unittest

from PIL import Image

from qrpress.qr.codec import (
    IMAGE_QUALITY,
    data_uri,
    decode_data_uri,
    native_edge,
    native_qr_bytes,
    qr_bytes,
    raster_edge,
    symbol_modules,
)
from tests.test_support import PNG_SIGNATURE, decode_qr_text


class TestQrBytes(unittest.TestCase):
    def test_png_has_exact_size(self) -> None:
        payload = qr_bytes("hello", size=300, margin=4)
        self.assertTrue(payload.startswith(PNG_SIGNATURE))
        with Image.open(io.BytesIO(payload)) as image:
            self.assertEqual(image.size, (300, 300))

    def test_pixel_ratio_scales_backing_store(self) -> None:
        payload = qr_bytes("hello", size=256, pixel_ratio=2.0)
        with Image.open(io.BytesIO(payload)) as image:
            self.assertEqual(image.size, (512, 512))
        payload = qr_bytes("hello", size=200, pixel_ratio=1.5)
        with Image.open(io.BytesIO(payload)) as image:
            self.assertEqual(image.size, (300, 300))

    def test_jpeg_and_webp(self) -> None:
        jpeg = qr_bytes("hello", size=200, kind="jpeg")
        self.assertTrue(jpeg.startswith(b"\xff\xd8\xff"))
        webp = qr_bytes("hello", size=200, kind="webp")
        self.assertEqual((webp[:4], webp[8:12]), (b"RIFF", b"WEBP"))
        with Image.open(io.BytesIO(jpeg)) as image:
            self.assertEqual(image.mode, "RGB")

    def test_colors_are_applied(self) -> None:
        payload = qr_bytes("hello", size=200, margin=4, dark="#ff0000", light="#00ff00")
        with Image.open(io.BytesIO(payload)) as image:
            rgba = image.convert("RGBA")
            # Top-left pixel sits in the quiet zone.
            self.assertEqual(rgba.getpixel((0, 0)), (0, 255, 0, 255))
            colors = {color for _count, color in rgba.getcolors(maxcolors=16)}
        self.assertIn((255, 0, 0, 255), colors)

    def test_svg_is_scaled_vector(self) -> None:
        payload = qr_bytes("hello", size=400, kind="svg")
        text = payload.decode("utf-8")
        self.assertTrue(text.startswith("<svg"))
        self.assertNotIn("<?xml", text)

    def test_rejects_unknown_kind_and_bad_ratio(self) -> None:
        with self.assertRaisesRegex(ValueError, "unsupported image kind"):
            qr_bytes("hello", kind="gif")
        with self.assertRaisesRegex(ValueError, "pixel_ratio must be positive"):
            qr_bytes("hello", pixel_ratio=0)

    def test_decodes_back_to_text(self) -> None:
        text = "WIFI:T:WPA;S:home;P:secret;;"
        decoded = decode_qr_text(qr_bytes(text, size=400, error="H"))
        if decoded is None:
            self.skipTest("zxing-cpp not installed")
        self.assertEqual(decoded, text)

    def test_dense_symbol_keeps_one_pixel_per_module(self) -> None:
        text = "x" * 1000
        modules = symbol_modules(text, margin=20, error="L")
        self.assertGreater(modules, 128)
        payload = qr_bytes(text, size=128, margin=20, error="L")
        with Image.open(io.BytesIO(payload)) as image:
            self.assertEqual(image.size, (modules, modules))
            # Integer upscale keeps every module intact for the decoder.
            enlarged = image.resize((modules * 4, modules * 4), Image.Resampling.NEAREST)
        buf = io.BytesIO()
        enlarged.save(buf, format="PNG")
        decoded = decode_qr_text(buf.getvalue())
        if decoded is None:
            self.skipTest("zxing-cpp not installed")
        self.assertEqual(decoded, text)

    def test_raster_edge(self) -> None:
        self.assertEqual(raster_edge(300, 29), 300)
        self.assertEqual(raster_edge(200, 29, pixel_ratio=1.5), 300)
        self.assertEqual(raster_edge(128, 145), 145)

    def test_default_quality(self) -> None:
        self.assertEqual(IMAGE_QUALITY, 0.92)


class TestNativeQrBytes(unittest.TestCase):
    def test_png_and_svg(self) -> None:
        self.assertTrue(native_qr_bytes("hello", size=200).startswith(PNG_SIGNATURE))
        self.assertIn(b"<svg", native_qr_bytes("hello", kind="svg"))

    def test_edge_is_whole_modules(self) -> None:
        modules = symbol_modules("hello")
        self.assertEqual(modules, 29)
        for size in (128, 200, 512):
            with self.subTest(size=size):
                payload = native_qr_bytes("hello", size=size)
                with Image.open(io.BytesIO(payload)) as image:
                    edge = native_edge(size, modules)
                    self.assertEqual(image.size, (edge, edge))
                self.assertLessEqual(edge, size)
                self.assertEqual(edge % modules, 0)
        self.assertEqual(native_edge(20, 29), 29)

    def test_raster_kinds_beyond_png_unsupported(self) -> None:
        with self.assertRaisesRegex(ValueError, "native writer does not support"):
            native_qr_bytes("hello", kind="jpeg")


class TestDataUri(unittest.TestCase):
    def test_roundtrip(self) -> None:
        url = data_uri(b"\x00\x01binary", "webp")
        self.assertTrue(url.startswith("data:image/webp;base64,"))
        self.assertEqual(decode_data_uri(url), ("image/webp", b"\x00\x01binary"))

    def test_rejects_non_base64_urls(self) -> None:
        for url in ("https://example.com/a.png", "data:image/png,raw", "data:image/png;base64,@@@"):
            with self.subTest(url=url):
                with self.assertRaises(ValueError):
                    decode_data_uri(url)


if __name__ == "__main__":
    unittest.main()
