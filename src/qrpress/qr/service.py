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

"""QR generation orchestrator.

A call validates the request, merges it over the configured defaults, answers
from the cache when it can, then renders with the strategy the capability
descriptor selects. A failed primary strategy is retried once with the
fallback renderer; only when that also fails does the caller see an error.

Concurrent calls for the same fingerprint share one in-flight render while
caching is enabled. Fallback results produced after a primary failure are
returned but not cached.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import replace

from ..core.errors import QrGenerationError, QrValidationError
from ..core.models import (
    GenerationConfig,
    GenerationMethod,
    GenerationOptions,
    GenerationResult,
    ValidationResult,
    build_config,
)
from ..core.validation import validate_request
from .cache import GenerationCache, fingerprint
from .capabilities import Capabilities, select_method
from .codec import IMAGE_QUALITY
from .metadata import QrMetadata, extract_metadata
from .ratelimit import RateLimiter
from .strategies import (
    CanvasRenderer,
    FallbackRenderer,
    RenderStrategy,
    ServerSideRenderer,
    SvgRenderer,
)

logger = logging.getLogger(__name__)

FALLBACK_WARNING = "Used fallback method due to primary generation failure"

# QrRenderError is a RuntimeError; the others cover custom strategies.
_STRATEGY_ERRORS = (RuntimeError, ValueError, OSError)


class QrService:
    def __init__(
        self,
        *,
        capabilities: Capabilities | None = None,
        defaults: GenerationConfig | None = None,
        cache: GenerationCache | None = None,
        limiter: RateLimiter | None = None,
        server: ServerSideRenderer | None = None,
        quality: float = IMAGE_QUALITY,
        strategies: Mapping[GenerationMethod, RenderStrategy] | None = None,
    ) -> None:
        capabilities = capabilities or Capabilities()
        if strategies is None:
            built: dict[GenerationMethod, RenderStrategy] = {
                GenerationMethod.CLIENT_CANVAS: CanvasRenderer(
                    pixel_ratio=capabilities.device_pixel_ratio, quality=quality
                ),
                GenerationMethod.CLIENT_SVG: SvgRenderer(),
                GenerationMethod.FALLBACK: FallbackRenderer(),
            }
            if server is not None:
                built[GenerationMethod.SERVER_SIDE] = server
            strategies = built
        if GenerationMethod.FALLBACK not in strategies:
            raise ValueError("strategies must include a fallback renderer")
        self._strategies = dict(strategies)
        self._server = server
        self.capabilities = replace(
            capabilities,
            server_available=GenerationMethod.SERVER_SIDE in self._strategies,
        )
        self.defaults = defaults or GenerationConfig()
        self.cache = cache if cache is not None else GenerationCache()
        self.limiter = limiter
        self._inflight: dict[str, asyncio.Task[GenerationResult]] = {}

    @property
    def browser_info(self) -> str:
        return self.capabilities.user_agent or "unknown"

    def validate(self, text: object, options: GenerationOptions | None = None) -> ValidationResult:
        return validate_request(text, options)

    def build_config(self, options: GenerationOptions | None = None) -> GenerationConfig:
        return build_config(options, defaults=self.defaults)

    async def generate(
        self,
        text: str,
        options: GenerationOptions | None = None,
        use_cache: bool = True,
        *,
        client_id: str = "anonymous",
    ) -> GenerationResult:
        validation = validate_request(text, options)
        if not validation.is_valid:
            raise QrValidationError(validation.errors)
        config = self.build_config(options)

        if not use_cache:
            self._consume_token(client_id)
            return await self._produce(text, config, cache_key=None)

        key = fingerprint(text, config)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Using cached QR result")
            return cached

        task = self._inflight.get(key)
        if task is None:
            self._consume_token(client_id)
            task = asyncio.ensure_future(self._produce(text, config, cache_key=key))
            self._inflight[key] = task
            task.add_done_callback(lambda done, key=key: self._forget(key, done))
        else:
            logger.debug("Joining in-flight QR generation")
        return await asyncio.shield(task)

    def extract_metadata(
        self,
        text: str,
        result: GenerationResult,
        options: GenerationOptions | None = None,
    ) -> QrMetadata:
        config = self.build_config(options)
        return extract_metadata(text, result, error_correction=config.error_correction)

    def clear_cache(self) -> None:
        self.cache.clear()

    async def close(self) -> None:
        if self._server is not None:
            await self._server.aclose()

    async def __aenter__(self) -> QrService:
        return self

    async def __aexit__(self, *_exc: object) -> None:
        await self.close()

    def _consume_token(self, client_id: str) -> None:
        if self.limiter is not None:
            self.limiter.acquire(client_id)

    def _forget(self, key: str, task: asyncio.Task[GenerationResult]) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]

    async def _produce(
        self,
        text: str,
        config: GenerationConfig,
        *,
        cache_key: str | None,
    ) -> GenerationResult:
        method = select_method(self.capabilities, config.format)
        logger.debug("Using QR generation method: %s", method.value)
        try:
            result = await self._strategies[method].render(text, config)
        except _STRATEGY_ERRORS as exc:
            if method is GenerationMethod.FALLBACK:
                raise QrGenerationError(f"QR generation failed: {exc}") from exc
            logger.warning("Primary QR generation failed, trying fallback: %s", exc)
            return await self._fallback(text, config, primary_error=exc)

        result = replace(result, method=method, browser_info=self.browser_info)
        # Results with a warning differ from what was asked for.
        if cache_key is not None and result.warning is None:
            self.cache.set(cache_key, result)
        return result

    async def _fallback(
        self,
        text: str,
        config: GenerationConfig,
        *,
        primary_error: Exception,
    ) -> GenerationResult:
        try:
            result = await self._strategies[GenerationMethod.FALLBACK].render(text, config)
        except _STRATEGY_ERRORS as exc:
            raise QrGenerationError(f"QR generation failed: {primary_error}") from exc
        return replace(
            result,
            method=GenerationMethod.FALLBACK,
            browser_info=self.browser_info,
            warning=result.warning or FALLBACK_WARNING,
        )
