"""Tests for environment-driven Config loading.

Run: python -m pytest humanizer/tests/test_config.py -v
"""

from __future__ import annotations

from pathlib import Path

import pytest

from humanizer.config import Config

_ENV_VARS = (
    'SETTINGS_BASE_URL', 'SITE_URL', 'NEXT_PUBLIC_SITE_URL', 'VERCEL_URL',
    'SETTINGS_API_TOKEN', 'HUMANIZER_SETTINGS_KEY', 'SETTINGS_TIMEOUT_SECONDS',
    'CONFIG_TTL_SECONDS', 'CONFIG_FAILURE_TTL_SECONDS',
    'PREVIEW_HOST', 'PREVIEW_PORT', 'LOG_LEVEL',
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Empty environment and a home directory with no env files."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(Path, 'home', lambda: tmp_path)
    return tmp_path


def test_defaults() -> None:
    config = Config.load()
    assert config.settings_base_url == 'http://localhost:3000'
    assert config.settings_api_token == ''
    assert config.settings_key == 'agent_humanizer_config'
    assert config.settings_timeout_seconds == 10.0
    assert config.config_ttl_seconds == 300.0
    assert config.config_failure_ttl_seconds == 30.0
    assert config.preview_host == '127.0.0.1'
    assert config.preview_port == 8430
    assert config.log_level == 'INFO'


def test_explicit_base_url_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv('SETTINGS_BASE_URL', 'https://admin.example.com/')
    monkeypatch.setenv('SITE_URL', 'https://site.example.com')
    monkeypatch.setenv('VERCEL_URL', 'app.vercel.app')
    assert Config.load().settings_base_url == 'https://admin.example.com'


def test_site_url_before_vercel(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv('NEXT_PUBLIC_SITE_URL', 'https://public.example.com')
    monkeypatch.setenv('VERCEL_URL', 'app.vercel.app')
    assert Config.load().settings_base_url == 'https://public.example.com'


def test_vercel_url_gets_https(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv('VERCEL_URL', 'app-123.vercel.app')
    assert Config.load().settings_base_url == 'https://app-123.vercel.app'


def test_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv('SETTINGS_API_TOKEN', ' secret ')
    monkeypatch.setenv('HUMANIZER_SETTINGS_KEY', 'staging_humanizer')
    monkeypatch.setenv('CONFIG_TTL_SECONDS', '60')
    monkeypatch.setenv('PREVIEW_PORT', '9000')
    monkeypatch.setenv('LOG_LEVEL', 'debug')
    config = Config.load()
    assert config.settings_api_token == 'secret'
    assert config.settings_key == 'staging_humanizer'
    assert config.config_ttl_seconds == 60.0
    assert config.preview_port == 9000
    assert config.log_level == 'DEBUG'


def test_component_env_file_loaded(monkeypatch: pytest.MonkeyPatch, clean_env: Path) -> None:
    sa_dir = clean_env / '.salesagent'
    sa_dir.mkdir()
    (sa_dir / 'shared.env').write_text('PREVIEW_PORT=9100\nSETTINGS_API_TOKEN=shared\n')
    (sa_dir / 'humanizer.env').write_text('PREVIEW_PORT=9200\n')
    # load_dotenv writes into os.environ; let monkeypatch restore it.
    monkeypatch.setenv('PREVIEW_PORT', '')
    monkeypatch.delenv('PREVIEW_PORT')
    monkeypatch.setenv('SETTINGS_API_TOKEN', '')
    monkeypatch.delenv('SETTINGS_API_TOKEN')

    config = Config.load()
    assert config.preview_port == 9200
    assert config.settings_api_token == 'shared'


def test_bad_number_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv('PREVIEW_PORT', 'eighty')
    with pytest.raises(ValueError):
        Config.load()
