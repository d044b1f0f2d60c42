"""HTTP client for the dashboard settings backend.

Settings are key/value rows; the humanizer config lives under
"agent_humanizer_config" as a JSON string.

  GET  /api/settings?key=<key>  -> {"key": str, "value": str}  (404 if unset)
  POST /api/settings            <- {"key": str, "value": str}
"""

from __future__ import annotations

import json
import logging

import httpx

from humanizer.models import ConfigFetchError

log = logging.getLogger(__name__)

_SETTINGS_PATH = '/api/settings'


class SettingsClient:
    """Persistent httpx.AsyncClient wrapper for the settings API."""

    def __init__(self, base_url: str, api_token: str = '', timeout: float = 10.0) -> None:
        self._base_url: str = base_url.rstrip('/')
        self._api_token: str = api_token
        self._timeout: float = timeout
        self._client: httpx.AsyncClient | None = None

    async def start(self) -> None:
        """Create the persistent httpx.AsyncClient."""
        self._client = httpx.AsyncClient(timeout=self._timeout)

    async def close(self) -> None:
        """Close the httpx client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _headers(self) -> dict[str, str]:
        headers = {'Accept': 'application/json'}
        if self._api_token:
            headers['Authorization'] = f'Bearer {self._api_token}'
        return headers

    async def _request(self, method: str, **kwargs: object) -> httpx.Response:
        """Make a request against the settings path. Raises RuntimeError if not started."""
        if self._client is None:
            raise RuntimeError(
                'SettingsClient not started. Call await client.start() first.'
            )
        return await self._client.request(
            method, self._base_url + _SETTINGS_PATH, headers=self._headers(), **kwargs,
        )

    async def get_setting_value(self, key: str) -> str | None:
        """GET /api/settings?key=... Returns the raw value string, or None if unset.

        Raises ConfigFetchError on transport failures and non-404 errors.
        """
        try:
            resp = await self._request('GET', params={'key': key})
            if resp.status_code == 404:
                return None
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as exc:
            raise ConfigFetchError(f'GET setting {key!r} failed: {exc}') from exc
        except ValueError as exc:
            raise ConfigFetchError(f'GET setting {key!r}: response is not JSON') from exc

        value = data.get('value') if isinstance(data, dict) else None
        if value is None:
            return None
        # jsonb columns come back as objects rather than strings
        if isinstance(value, str):
            return value
        return json.dumps(value)

    async def save_setting_value(self, key: str, value: str | dict) -> None:
        """POST /api/settings. Dict values are stored as their JSON string."""
        value_str = value if isinstance(value, str) else json.dumps(value)
        try:
            resp = await self._request('POST', json={'key': key, 'value': value_str})
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise ConfigFetchError(f'POST setting {key!r} failed: {exc}') from exc
        log.info('Saved setting %s (%d bytes)', key, len(value_str))
