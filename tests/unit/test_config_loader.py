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
from pathlib import Path

from qrpress.config import (
    DEFAULT_CONFIG_PATH,
    AppConfig,
    build_generation_config,
    init_user_config,
    load_app_config,
    resolve_config_path,
    user_config_needs_init,
    user_config_path,
)
from qrpress.core.models import GenerationConfig, GenerationMethod
from qrpress.runtime import build_service
from tests.test_support import isolated_dirs, temp_files


class TestLoadAppConfig(unittest.TestCase):
    def test_packaged_defaults_match_built_in_defaults(self) -> None:
        cfg = load_app_config(DEFAULT_CONFIG_PATH)
        self.assertEqual(cfg.qr, GenerationConfig())
        self.assertEqual(cfg.quality, 0.92)
        self.assertEqual(cfg.cache.ttl_seconds, 300)
        self.assertEqual(cfg.cache.sweep_threshold, 50)
        self.assertIsNone(cfg.server.endpoint)
        self.assertTrue(cfg.rate_limit.enabled)
        self.assertEqual((cfg.rate_limit.max_requests, cfg.rate_limit.window_seconds), (100, 60))
        self.assertEqual(cfg.source, DEFAULT_CONFIG_PATH)

    def test_custom_file(self) -> None:
        toml = (
            "[qr]\n"
            'size = 1024\nerror = "h"\nformat = "SVG"\nforeground = "#112233"\nquality = 0.5\n'
            "[server]\n"
            'endpoint = "http://localhost:8080/api/generate-qr"\ntimeout_seconds = 2.5\n'
            "[rate_limit]\nenabled = false\n"
            "[capabilities]\n"
            'supports_canvas = false\nuser_agent = " Brave "\ndevice_pixel_ratio = 2\n'
            "[ui]\nquiet = true\n"
        )
        with temp_files(**{"config.toml": toml}) as paths:
            cfg = load_app_config(paths["config.toml"])
        self.assertEqual(cfg.qr.size, 1024)
        self.assertEqual(cfg.qr.error_correction, "H")
        self.assertEqual(cfg.qr.format, "svg")
        self.assertEqual(cfg.qr.foreground, "#112233")
        self.assertEqual(cfg.qr.margin, 4)
        self.assertEqual(cfg.quality, 0.5)
        self.assertEqual(cfg.server.endpoint, "http://localhost:8080/api/generate-qr")
        self.assertEqual(cfg.server.timeout_seconds, 2.5)
        self.assertFalse(cfg.rate_limit.enabled)
        self.assertFalse(cfg.capabilities.supports_canvas)
        self.assertEqual(cfg.capabilities.user_agent, "Brave")
        self.assertEqual(cfg.capabilities.device_pixel_ratio, 2.0)
        self.assertTrue(cfg.ui.quiet)

    def test_empty_file_uses_defaults(self) -> None:
        with temp_files(**{"empty.toml": ""}) as paths:
            cfg = load_app_config(paths["empty.toml"])
        self.assertEqual(cfg.qr, AppConfig().qr)
        self.assertEqual(cfg.cache, AppConfig().cache)

    def test_invalid_values(self) -> None:
        cases = [
            ("[qr]\nsize = 64\n", "qr.size must be between 128 and 2048"),
            ("[qr]\nmargin = 1.5\n", "qr.margin must be an integer"),
            ('[qr]\nerror = "Z"\n', "qr.error must be one of L, M, Q, H"),
            ('[qr]\nbackground = "white"\n', "qr.background must be a hex color"),
            ("[qr]\nquality = 1.5\n", "qr.quality must be between 0 and 1"),
            ("[cache]\nttl_seconds = 0\n", "cache.ttl_seconds must be a positive integer"),
            ('[rate_limit]\nenabled = "maybe"\n', "rate_limit.enabled must be a boolean"),
            ("[server]\nendpoint = 5\n", "server.endpoint must be a string"),
            ("[capabilities]\ndevice_pixel_ratio = -1\n", "must be a positive number"),
        ]
        for toml, message in cases:
            with self.subTest(toml=toml):
                with temp_files(**{"bad.toml": toml}) as paths:
                    with self.assertRaisesRegex(ValueError, message):
                        load_app_config(paths["bad.toml"])

    def test_build_generation_config_accepts_plain_dicts(self) -> None:
        config = build_generation_config({"size": "256", "format": "webp"})
        self.assertEqual((config.size, config.format), (256, "webp"))
        self.assertEqual(build_generation_config(None), GenerationConfig())


class TestConfigInstaller(unittest.TestCase):
    def test_user_config_lifecycle(self) -> None:
        with isolated_dirs() as root:
            expected = root / "config" / "qrpress" / "config.toml"
            self.assertEqual(user_config_path(), expected)
            self.assertTrue(user_config_needs_init())
            self.assertEqual(resolve_config_path(), DEFAULT_CONFIG_PATH)

            self.assertEqual(init_user_config(), expected)
            self.assertFalse(user_config_needs_init())
            self.assertEqual(resolve_config_path(), expected)
            self.assertEqual(
                expected.read_text(encoding="utf-8"),
                DEFAULT_CONFIG_PATH.read_text(encoding="utf-8"),
            )

    def test_init_keeps_existing_file(self) -> None:
        with isolated_dirs():
            path = user_config_path()
            path.parent.mkdir(parents=True)
            path.write_text("[qr]\nsize = 256\n", encoding="utf-8")
            init_user_config()
            self.assertEqual(load_app_config().qr.size, 256)

    def test_explicit_path_wins(self) -> None:
        self.assertEqual(resolve_config_path("custom.toml"), Path("custom.toml"))


class TestBuildService(unittest.IsolatedAsyncioTestCase):
    async def test_wires_settings(self) -> None:
        toml = (
            "[qr]\nsize = 256\n"
            "[server]\nendpoint = \"http://localhost:9/qr\"\n"
            "[rate_limit]\nmax_requests = 7\n"
            "[capabilities]\nsupports_canvas = false\n"
        )
        with temp_files(**{"c.toml": toml}) as paths:
            cfg = load_app_config(paths["c.toml"])
        async with build_service(cfg) as service:
            self.assertEqual(service.defaults.size, 256)
            self.assertTrue(service.capabilities.server_available)
            self.assertEqual(service.limiter.max_requests, 7)
            self.assertIn(GenerationMethod.SERVER_SIDE, service._strategies)

    async def test_rate_limit_can_be_disabled(self) -> None:
        with temp_files(**{"c.toml": "[rate_limit]\nenabled = false\n"}) as paths:
            cfg = load_app_config(paths["c.toml"])
        async with build_service(cfg) as service:
            self.assertIsNone(service.limiter)
            self.assertFalse(service.capabilities.server_available)


if __name__ == "__main__":
    unittest.main()
