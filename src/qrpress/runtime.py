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

"""Composition root: wire a ``QrService`` from loaded configuration."""

from __future__ import annotations

import httpx

from .config.loader import AppConfig
from .qr.cache import GenerationCache
from .qr.capabilities import Capabilities
from .qr.ratelimit import RateLimiter
from .qr.service import QrService
from .qr.strategies import ServerSideRenderer


def build_service(
    config: AppConfig | None = None,
    *,
    http_client: httpx.AsyncClient | None = None,
) -> QrService:
    config = config or AppConfig()
    server = None
    if config.server.endpoint:
        server = ServerSideRenderer(
            config.server.endpoint,
            client=http_client,
            timeout=config.server.timeout_seconds,
        )
    limiter = None
    if config.rate_limit.enabled:
        limiter = RateLimiter(
            config.rate_limit.max_requests,
            config.rate_limit.window_seconds,
        )
    capabilities = Capabilities(
        supports_canvas=config.capabilities.supports_canvas,
        user_agent=config.capabilities.user_agent,
        device_pixel_ratio=config.capabilities.device_pixel_ratio,
    )
    return QrService(
        capabilities=capabilities,
        defaults=config.qr,
        cache=GenerationCache(config.cache.ttl_seconds, config.cache.sweep_threshold),
        limiter=limiter,
        server=server,
        quality=config.quality,
    )
