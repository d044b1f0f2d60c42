"""Humanizer process configuration.

Frozen dataclass loaded from environment variables.
Loads ~/.salesagent/shared.env first (backend URLs, tokens),
then ~/.salesagent/humanizer.env (component-specific overrides).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from humanizer.config_store import (
    DEFAULT_FAILURE_TTL_SECONDS,
    DEFAULT_TTL_SECONDS,
    SETTINGS_KEY,
)

_LOCAL_BASE_URL = 'http://localhost:3000'


def _resolve_settings_base_url() -> str:
    """SETTINGS_BASE_URL > SITE_URL > VERCEL_URL > local dev server."""
    for name in ('SETTINGS_BASE_URL', 'SITE_URL', 'NEXT_PUBLIC_SITE_URL'):
        value = os.environ.get(name, '').strip()
        if value:
            return value.rstrip('/')

    # Vercel sets VERCEL_URL without a scheme
    vercel = os.environ.get('VERCEL_URL', '').strip()
    if vercel:
        return vercel if vercel.startswith('http') else f'https://{vercel}'

    return _LOCAL_BASE_URL


@dataclass(frozen=True)
class Config:
    """Immutable humanizer service configuration."""

    # Settings backend
    settings_base_url: str
    settings_api_token: str
    settings_key: str
    settings_timeout_seconds: float

    # Config cache
    config_ttl_seconds: float
    config_failure_ttl_seconds: float

    # Preview server
    preview_host: str
    preview_port: int

    # Logging
    log_level: str

    @classmethod
    def load(cls) -> Config:
        """Load configuration from env files and environment variables.

        Raises ValueError if a numeric variable does not parse.
        """
        sa_dir = Path.home() / '.salesagent'
        shared_env = sa_dir / 'shared.env'
        component_env = sa_dir / 'humanizer.env'
        if shared_env.exists():
            load_dotenv(shared_env)
        if component_env.exists():
            load_dotenv(component_env, override=True)

        return cls(
            settings_base_url=_resolve_settings_base_url(),
            settings_api_token=os.environ.get('SETTINGS_API_TOKEN', '').strip(),
            settings_key=os.environ.get('HUMANIZER_SETTINGS_KEY', SETTINGS_KEY).strip(),
            settings_timeout_seconds=float(
                os.environ.get('SETTINGS_TIMEOUT_SECONDS', '10')
            ),
            config_ttl_seconds=float(
                os.environ.get('CONFIG_TTL_SECONDS', str(DEFAULT_TTL_SECONDS))
            ),
            config_failure_ttl_seconds=float(
                os.environ.get(
                    'CONFIG_FAILURE_TTL_SECONDS', str(DEFAULT_FAILURE_TTL_SECONDS)
                )
            ),
            preview_host=os.environ.get('PREVIEW_HOST', '127.0.0.1').strip(),
            preview_port=int(os.environ.get('PREVIEW_PORT', '8430')),
            log_level=os.environ.get('LOG_LEVEL', 'INFO').strip().upper(),
        )
