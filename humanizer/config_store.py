"""TTL cache for the humanizer config, with single-flight refresh.

One ConfigStore per process (per event loop). Concurrent get_config()
calls during a miss share one fetch task, so the settings backend sees at
most one outstanding request. Every failure resolves to DEFAULTS.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Awaitable, Callable

from humanizer.models import DEFAULTS, ConfigShapeError, HumanizerConfig

log = logging.getLogger(__name__)

SETTINGS_KEY = 'agent_humanizer_config'
DEFAULT_TTL_SECONDS = 300.0
DEFAULT_FAILURE_TTL_SECONDS = 30.0

# fetch(key) -> raw JSON string, or None when the setting does not exist
SettingFetcher = Callable[[str], Awaitable[str | None]]


def parse_config(raw: str | None) -> HumanizerConfig:
    """Parse a stored JSON document into a full config.

    None -> DEFAULTS. Raises ConfigShapeError on bad JSON or bad shape.
    """
    if raw is None or not raw.strip():
        return DEFAULTS
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise ConfigShapeError(f'invalid JSON: {exc}') from exc
    return HumanizerConfig.from_dict(data)


class ConfigStore:
    """Cached HumanizerConfig: {value, expires_at, inflight}."""

    def __init__(
        self,
        fetch: SettingFetcher,
        key: str = SETTINGS_KEY,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        failure_ttl_seconds: float = DEFAULT_FAILURE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._fetch = fetch
        self._key = key
        self._ttl = ttl_seconds
        self._failure_ttl = failure_ttl_seconds
        self._clock = clock
        self._value: HumanizerConfig | None = None
        self._expires_at = 0.0
        self._inflight: asyncio.Task | None = None
        # Bumped by invalidate() so a fetch started before it is not cached.
        self._generation = 0

    @property
    def key(self) -> str:
        return self._key

    def peek(self) -> HumanizerConfig | None:
        """Cached value if still fresh. Never fetches."""
        if self._value is not None and self._expires_at > self._clock():
            return self._value
        return None

    def invalidate(self) -> None:
        """Drop the cached value; the next get_config() refetches."""
        self._value = None
        self._expires_at = 0.0
        self._inflight = None
        self._generation += 1
        log.info('Humanizer config cache invalidated')

    async def get_config(self) -> HumanizerConfig:
        """Return the cached config, fetching it at most once per TTL window."""
        cached = self.peek()
        if cached is not None:
            return cached

        if self._inflight is None or self._inflight.cancelled():
            self._inflight = asyncio.get_running_loop().create_task(
                self._refresh(self._generation)
            )
        # shield: a caller being cancelled must not cancel the shared fetch
        return await asyncio.shield(self._inflight)

    async def _refresh(self, generation: int) -> HumanizerConfig:
        ttl = self._ttl
        try:
            raw = await self._fetch(self._key)
            value = parse_config(raw)
            if raw is None:
                log.info('No %s setting stored; using defaults', self._key)
            else:
                log.info('Loaded %s from settings backend', self._key)
        except ConfigShapeError as exc:
            log.warning('Malformed %s (%s); using defaults', self._key, exc)
            value = DEFAULTS
        except Exception:
            log.warning('Failed to fetch %s; using defaults', self._key, exc_info=True)
            value = DEFAULTS
            ttl = self._failure_ttl

        if generation == self._generation:
            self._value = value
            self._expires_at = self._clock() + ttl
            self._inflight = None
        return value
