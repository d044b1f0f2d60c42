"""Admin preview server for the humanizer.

Lets the dashboard's Agent Studio read and replace the humanizer config
and simulate a plan for ad hoc inputs. Runs on port 8430 by default.

Run: python -m humanizer
"""

from __future__ import annotations

import asyncio
import logging
import signal

from aiohttp import web

from humanizer.config import Config
from humanizer.config_store import ConfigStore
from humanizer.models import ConfigFetchError, ConfigShapeError, HumanizerConfig
from humanizer.plan import humanize
from humanizer.settings_client import SettingsClient

log = logging.getLogger(__name__)


class PreviewServer:
    """Lightweight HTTP server over a ConfigStore and SettingsClient.

    Endpoints:
      GET  /health:            liveness
      GET  /humanizer-config:  resolved config (cached, defaults merged in)
      PUT  /humanizer-config:  validate, save to settings, invalidate cache
      POST /simulate:          build a plan without sending anything
    """

    def __init__(
        self,
        store: ConfigStore,
        settings: SettingsClient,
        host: str = '127.0.0.1',
        port: int = 8430,
    ) -> None:
        self._store = store
        self._settings = settings
        self._host = host
        self._port = port
        self._app = web.Application()
        self._runner: web.AppRunner | None = None

    def add_routes(self, app: web.Application) -> None:
        app.router.add_get('/health', self._handle_health)
        app.router.add_get('/humanizer-config', self._handle_get_config)
        app.router.add_put('/humanizer-config', self._handle_put_config)
        app.router.add_post('/simulate', self._handle_simulate)

    async def start(self) -> None:
        """Start the HTTP server."""
        self.add_routes(self._app)
        self._runner = web.AppRunner(self._app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self._host, self._port)
        await site.start()
        log.info('Humanizer preview server listening on %s:%d', self._host, self._port)

    async def stop(self) -> None:
        """Stop the HTTP server and release resources."""
        if self._runner:
            await self._runner.cleanup()
            self._runner = None

    # -- Handlers ----------------------------------------------------------------

    async def _handle_health(self, request: web.Request) -> web.Response:
        """GET /health"""
        return web.json_response({'ok': True})

    async def _handle_get_config(self, request: web.Request) -> web.Response:
        """GET /humanizer-config"""
        config = await self._store.get_config()
        return web.json_response({
            'ok': True,
            'key': self._store.key,
            'value': config.to_dict(),
        })

    async def _handle_put_config(self, request: web.Request) -> web.Response:
        """PUT /humanizer-config

        Body: a (partial) HumanizerConfig object. Missing leaves take defaults.
        """
        try:
            data = await request.json()
        except Exception:
            return web.json_response({'ok': False, 'error': 'Invalid JSON'}, status=400)

        if not isinstance(data, dict):
            return web.json_response(
                {'ok': False, 'error': 'Body must be a JSON object'}, status=400
            )

        try:
            config = HumanizerConfig.from_dict(data)
        except ConfigShapeError as exc:
            return web.json_response({'ok': False, 'error': str(exc)}, status=400)

        saved = config.to_dict()
        try:
            await self._settings.save_setting_value(self._store.key, saved)
        except ConfigFetchError:
            log.exception('Saving %s failed', self._store.key)
            return web.json_response(
                {'ok': False, 'error': 'Settings backend error'}, status=502
            )

        self._store.invalidate()
        return web.json_response({'ok': True, 'saved': saved})

    async def _handle_simulate(self, request: web.Request) -> web.Response:
        """POST /simulate

        Body: {"message": str, "emotion": str?, "intention": str?, "stage": str?}
        """
        try:
            data = await request.json()
        except Exception:
            return web.json_response({'ok': False, 'error': 'Invalid JSON'}, status=400)

        message = data.get('message') if isinstance(data, dict) else None
        if not isinstance(message, str) or not message.strip():
            return web.json_response(
                {'ok': False, 'error': 'message is required'}, status=400
            )

        plan = await humanize(
            self._store,
            message,
            emotion=data.get('emotion') or 'neutral',
            intention=data.get('intention') or 'outros',
            stage=data.get('stage') or 'unknown',
        )
        return web.json_response({'ok': True, 'plan': plan.to_dict()})


async def run(config: Config) -> None:
    """Wire settings client, config store and server; serve until signalled."""
    settings = SettingsClient(
        config.settings_base_url,
        api_token=config.settings_api_token,
        timeout=config.settings_timeout_seconds,
    )
    await settings.start()

    store = ConfigStore(
        settings.get_setting_value,
        key=config.settings_key,
        ttl_seconds=config.config_ttl_seconds,
        failure_ttl_seconds=config.config_failure_ttl_seconds,
    )
    server = PreviewServer(store, settings, config.preview_host, config.preview_port)
    await server.start()

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)

    log.info('Settings backend: %s (key %s)', config.settings_base_url, config.settings_key)
    await stop_event.wait()

    log.info('Shutting down...')
    await server.stop()
    await settings.close()
    log.info('Shutdown complete')


def main() -> None:
    """Load config, configure logging, run the preview server."""
    config = Config.load()

    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    try:
        asyncio.run(run(config))
    except KeyboardInterrupt:
        pass


if __name__ == '__main__':
    main()
